# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Enrollment API endpoints.

This module provides endpoints for enrollment records:
- POST / - Create an enrollment
- GET / - List enrollments visible to the caller
- GET /{enrollment_id} - Get an enrollment
- PUT /{enrollment_id} - Replace the grades of an enrollment
- DELETE /{enrollment_id} - Deactivate an enrollment

Authorization is decided per role by the access policy inside the
controller; endpoints only require an authenticated principal and pass
the controller's status and body through unchanged.
"""

import logging
from typing import Annotated, Any

from fastapi import APIRouter, Body, Depends, Query
from fastapi.responses import JSONResponse

from src.api.dependencies import get_enrollment_controller, require_auth
from src.domains.enrollment import ControllerResult, EnrollmentController, Principal

logger = logging.getLogger(__name__)

router = APIRouter()


def _respond(result: ControllerResult) -> JSONResponse:
    return JSONResponse(status_code=result.status, content=result.body)


@router.post(
    "",
    summary="Create enrollment",
    description="Enroll a student in a course for a semester.",
)
async def create_enrollment(
    payload: Annotated[Any, Body()] = None,
    principal: Principal = Depends(require_auth),
    controller: EnrollmentController = Depends(get_enrollment_controller),
) -> JSONResponse:
    """Create an enrollment.

    Admins must send the student id; students are always enrolled
    themselves.

    Args:
        payload: Body with course, semester, optional student and grades.
        principal: Authenticated principal.
        controller: Enrollment controller.

    Returns:
        201 with the created enrollment, or the failure envelope.
    """
    return _respond(await controller.create_enrollment(principal, payload))


@router.get(
    "",
    summary="List enrollments",
    description="List active enrollments visible to the caller.",
)
async def list_enrollments(
    student: Annotated[str | None, Query(description="Filter by student")] = None,
    course: Annotated[str | None, Query(description="Filter by course")] = None,
    semester: Annotated[str | None, Query(description="Filter by semester")] = None,
    principal: Principal = Depends(require_auth),
    controller: EnrollmentController = Depends(get_enrollment_controller),
) -> JSONResponse:
    """List enrollments.

    Professors only see courses they teach; students only see their own.
    """
    query = {"student": student, "course": course, "semester": semester}
    return _respond(await controller.list_enrollments(principal, query))


@router.get(
    "/{enrollment_id}",
    summary="Get enrollment",
)
async def get_enrollment(
    enrollment_id: str,
    principal: Principal = Depends(require_auth),
    controller: EnrollmentController = Depends(get_enrollment_controller),
) -> JSONResponse:
    """Get an active enrollment by id."""
    return _respond(await controller.get_enrollment(principal, enrollment_id))


@router.put(
    "/{enrollment_id}",
    summary="Update enrollment grades",
    description="Replace the grades of an enrollment and recompute its final grade.",
)
async def update_enrollment(
    enrollment_id: str,
    payload: Annotated[Any, Body()] = None,
    principal: Principal = Depends(require_auth),
    controller: EnrollmentController = Depends(get_enrollment_controller),
) -> JSONResponse:
    """Update the grades of an enrollment.

    The body must carry exactly one field, grades.

    Args:
        enrollment_id: Enrollment identifier.
        payload: Body with the new grades.
        principal: Authenticated principal.
        controller: Enrollment controller.

    Returns:
        200 with the saved enrollment, or the failure envelope.
    """
    return _respond(await controller.update_enrollment(principal, enrollment_id, payload))


@router.delete(
    "/{enrollment_id}",
    summary="Deactivate enrollment",
)
async def delete_enrollment(
    enrollment_id: str,
    principal: Principal = Depends(require_auth),
    controller: EnrollmentController = Depends(get_enrollment_controller),
) -> JSONResponse:
    """Deactivate an enrollment. Only admins and the owning student may do so."""
    logger.info("Deactivating enrollment %s by %s", enrollment_id, principal.id)
    return _respond(await controller.delete_enrollment(principal, enrollment_id))
