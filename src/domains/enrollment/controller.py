# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Enrollment controller composing access policy and service.

Each operation takes an authenticated principal plus the request data,
runs the access policy, invokes the EnrollmentService and returns a
transport-agnostic ControllerResult. This is the only place domain
errors are translated into status codes:

- Policy denial: ValidationError 400, AuthorizationError 403,
  NotFoundError 404
- create/update: domain errors 400, StorageError 500
- read: missing enrollment 404
- delete: any failure 500
- anything unexpected 500
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any

from src.domains.enrollment.errors import (
    EnrollmentError,
    NotFoundError,
    StorageError,
    ValidationError,
)
from src.domains.enrollment.models import (
    ControllerResult,
    Enrollment,
    EnrollmentFilter,
    Operation,
    Principal,
)
from src.domains.enrollment.policy import AccessPolicy, AccessRequest, Decision
from src.domains.enrollment.service import MISSING, EnrollmentService

logger = logging.getLogger(__name__)

# Query keys a caller may filter a listing by
LIST_QUERY_FIELDS = ("student", "course", "semester")


def _serialize(enrollment: Enrollment) -> dict[str, Any]:
    """Convert an enrollment to a JSON-compatible dict."""
    return enrollment.model_dump(mode="json")


def _denied(decision: Decision) -> ControllerResult:
    """Build the result for a denied decision."""
    error = decision.error
    if isinstance(error, ValidationError):
        status = 400
    elif isinstance(error, NotFoundError):
        status = 404
    else:
        status = 403
    return ControllerResult.fail(status, str(error))


def _query_filter(query: Mapping[str, Any] | None) -> EnrollmentFilter:
    """Build a filter from caller-supplied query parameters."""
    if not query:
        return EnrollmentFilter()
    return EnrollmentFilter(
        **{
            key: query[key]
            for key in LIST_QUERY_FIELDS
            if isinstance(query.get(key), str) and query[key]
        }
    )


class EnrollmentController:
    """API orchestration for enrollment operations.

    Attributes:
        service: Enrollment service.
        policy: Access policy.
    """

    def __init__(self, service: EnrollmentService, policy: AccessPolicy) -> None:
        """Initialize the controller.

        Args:
            service: Enrollment service.
            policy: Access policy.
        """
        self.service = service
        self.policy = policy

    async def create_enrollment(
        self,
        principal: Principal,
        payload: Any,
    ) -> ControllerResult:
        """Create an enrollment.

        Admins must name the student; students may only enroll themselves.

        Args:
            principal: Authenticated actor.
            payload: Body with course, semester, optional student and grades.

        Returns:
            201 with the enrollment, or the failure result.
        """
        body = payload if isinstance(payload, Mapping) else {}

        try:
            decision = await self.policy.authorize(
                principal, Operation.CREATE, AccessRequest(payload=body)
            )
            if not decision.allowed:
                logger.debug("Create denied for %s: %s", principal.id, decision.error)
                return _denied(decision)

            enrollment = await self.service.create_enrollment(
                student=decision.student,
                course=body.get("course"),
                semester=body.get("semester"),
                grades=body.get("grades", MISSING),
            )
            return ControllerResult.ok(_serialize(enrollment), status=201)

        except StorageError as e:
            logger.error("Storage failure creating enrollment: %s", e)
            return ControllerResult.fail(500, str(e))
        except EnrollmentError as e:
            return ControllerResult.fail(400, str(e))
        except Exception as e:
            logger.exception("Unexpected error creating enrollment")
            return ControllerResult.fail(500, str(e))

    async def get_enrollment(
        self,
        principal: Principal,
        enrollment_id: str,
    ) -> ControllerResult:
        """Get an active enrollment.

        Args:
            principal: Authenticated actor.
            enrollment_id: Enrollment identifier.

        Returns:
            200 with the enrollment, 404 if missing, or the failure result.
        """
        try:
            enrollment = await self.service.get_enrollment_by_id(enrollment_id)
            if not enrollment:
                return ControllerResult.fail(404, "Enrollment not found")

            async def load_target() -> Enrollment:
                return enrollment

            decision = await self.policy.authorize(
                principal, Operation.READ, AccessRequest(target_loader=load_target)
            )
            if not decision.allowed:
                logger.debug("Read denied for %s on %s", principal.id, enrollment_id)
                return _denied(decision)

            return ControllerResult.ok(_serialize(enrollment))

        except Exception as e:
            logger.exception("Error reading enrollment %s", enrollment_id)
            return ControllerResult.fail(500, str(e))

    async def list_enrollments(
        self,
        principal: Principal,
        query: Mapping[str, Any] | None = None,
    ) -> ControllerResult:
        """List the active enrollments visible to the principal.

        Args:
            principal: Authenticated actor.
            query: Optional student, course and semester filters.

        Returns:
            200 with the enrollments, or the failure result.
        """
        try:
            decision = await self.policy.authorize(
                principal, Operation.LIST, AccessRequest(query=_query_filter(query))
            )
            if not decision.allowed:
                return _denied(decision)

            enrollments = await self.service.list_enrollments(decision.scope)
            return ControllerResult.ok([_serialize(e) for e in enrollments])

        except Exception as e:
            logger.exception("Error listing enrollments")
            return ControllerResult.fail(500, str(e))

    async def update_enrollment(
        self,
        principal: Principal,
        enrollment_id: str,
        payload: Any,
    ) -> ControllerResult:
        """Replace the grades of an enrollment.

        Args:
            principal: Authenticated actor.
            enrollment_id: Enrollment identifier.
            payload: Body carrying exactly the grades field.

        Returns:
            200 with the saved enrollment, or the failure result.
        """
        try:
            decision = await self.policy.authorize(
                principal,
                Operation.UPDATE,
                AccessRequest(
                    payload=payload,
                    target_loader=lambda: self.service.get_enrollment_by_id(enrollment_id),
                ),
            )
        except Exception as e:
            logger.exception("Error authorizing update of %s", enrollment_id)
            return ControllerResult.fail(500, str(e))

        if not decision.allowed:
            logger.debug("Update denied for %s on %s", principal.id, enrollment_id)
            return _denied(decision)

        try:
            enrollment = await self.service.update_enrollment(enrollment_id, payload)
            return ControllerResult.ok(_serialize(enrollment))

        except StorageError as e:
            logger.error("Storage failure updating enrollment %s: %s", enrollment_id, e)
            return ControllerResult.fail(500, str(e))
        except EnrollmentError as e:
            return ControllerResult.fail(400, str(e))
        except Exception as e:
            logger.exception("Unexpected error updating enrollment %s", enrollment_id)
            return ControllerResult.fail(500, str(e))

    async def delete_enrollment(
        self,
        principal: Principal,
        enrollment_id: str,
    ) -> ControllerResult:
        """Deactivate an enrollment.

        A missing enrollment is reported as 500, not 404.

        Args:
            principal: Authenticated actor.
            enrollment_id: Enrollment identifier.

        Returns:
            200 without data, or the failure result.
        """
        try:
            decision = await self.policy.authorize(
                principal,
                Operation.DELETE,
                AccessRequest(
                    target_loader=lambda: self.service.get_enrollment_by_id(enrollment_id),
                ),
            )
            if not decision.allowed:
                logger.debug("Delete denied for %s on %s", principal.id, enrollment_id)
                return _denied(decision)

            await self.service.deactivate_enrollment(enrollment_id)
            return ControllerResult.ok()

        except Exception as e:
            logger.error("Error deactivating enrollment %s: %s", enrollment_id, e)
            return ControllerResult.fail(500, str(e))
