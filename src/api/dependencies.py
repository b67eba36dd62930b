# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""FastAPI dependency injection definitions.

This module provides dependency functions for FastAPI endpoints.
Dependencies are used to:
- Get database sessions
- Get the authenticated principal
- Build the enrollment store, catalog gateway and controller

Example:
    @router.get("")
    async def list_enrollments(
        principal: Principal = Depends(require_auth),
        controller: EnrollmentController = Depends(get_enrollment_controller),
    ):
        ...
"""

import logging
from typing import AsyncGenerator

from fastapi import Depends, HTTPException, Request, status

from src.api.middleware.auth import get_current_principal
from src.core.config import get_settings
from src.domains.enrollment import (
    AccessPolicy,
    CourseCatalogClient,
    CourseCatalogGateway,
    EnrollmentController,
    EnrollmentService,
    EnrollmentStore,
    InMemoryEnrollmentStore,
    Principal,
)
from src.infrastructure.database.connection import (
    close_database,
    get_session,
    init_database,
)
from src.infrastructure.database.enrollment_store import SQLAlchemyEnrollmentStore
from src.infrastructure.database.migrations import run_migrations

logger = logging.getLogger(__name__)

# Process-wide singletons created at startup
_catalog_client: CourseCatalogClient | None = None
_memory_store: InMemoryEnrollmentStore | None = None


async def init_resources() -> None:
    """Initialize the database (when used) and the catalog client."""
    global _catalog_client, _memory_store
    settings = get_settings()

    if settings.database.backend == "memory":
        _memory_store = InMemoryEnrollmentStore()
        logger.info("Using in-memory enrollment store")
    else:
        await init_database(settings)
        if settings.database.run_migrations:
            applied = await run_migrations(settings.database.url)
            logger.info("Migrations applied: %s", applied or "none")

    _catalog_client = CourseCatalogClient(settings.course_catalog)


async def close_resources() -> None:
    """Close the catalog client and database connections."""
    global _catalog_client, _memory_store

    if _catalog_client is not None:
        await _catalog_client.close()
        _catalog_client = None

    _memory_store = None
    await close_database()


async def get_enrollment_store() -> AsyncGenerator[EnrollmentStore, None]:
    """Get the enrollment store for the configured backend.

    Yields:
        The shared in-memory store, or a SQLAlchemy store bound to a
        request-scoped session.
    """
    if get_settings().database.backend == "memory":
        if _memory_store is None:
            raise HTTPException(
                status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
                detail="Enrollment store not initialized",
            )
        yield _memory_store
        return

    # Request-scoped session, committed when the request succeeds
    async with get_session() as session:
        yield SQLAlchemyEnrollmentStore(session)


def get_catalog_gateway() -> CourseCatalogGateway:
    """Get the course catalog client.

    Raises:
        HTTPException: If the client has not been initialized.
    """
    if _catalog_client is None:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Course catalog client not initialized",
        )
    return _catalog_client


def get_enrollment_controller(
    store: EnrollmentStore = Depends(get_enrollment_store),
    catalog: CourseCatalogGateway = Depends(get_catalog_gateway),
) -> EnrollmentController:
    """Build the enrollment controller for one request.

    Args:
        store: Enrollment store.
        catalog: Course catalog gateway.

    Returns:
        EnrollmentController wired to a service and access policy.
    """
    return EnrollmentController(
        service=EnrollmentService(store, catalog),
        policy=AccessPolicy(catalog),
    )


# =========================================================================
# Authentication Dependencies
# =========================================================================


def require_auth(request: Request) -> Principal:
    """Require an authenticated principal.

    Args:
        request: HTTP request.

    Returns:
        Principal set by the auth middleware.

    Raises:
        HTTPException: If not authenticated.
    """
    principal = get_current_principal(request)
    if not principal:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Not authenticated",
            headers={"WWW-Authenticate": "Bearer"},
        )
    return principal
