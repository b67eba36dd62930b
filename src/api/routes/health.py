# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Health check endpoints.

This module provides health and readiness endpoints for the API.
"""

import logging
import time
from datetime import datetime
from typing import Any

from fastapi import APIRouter
from pydantic import BaseModel, Field

from src import __version__
from src.core.config import get_settings
from src.infrastructure.database.connection import check_database_connection
from src.infrastructure.database.migrations import get_migration_status
from src.utils.datetime import utc_now

logger = logging.getLogger(__name__)

router = APIRouter()

# Track server start time for uptime calculation
_server_start_time = time.time()


class ComponentHealth(BaseModel):
    """Individual component health status."""
    status: str = Field(description="Component status")
    latency_ms: float | None = Field(None, description="Response latency in ms")
    message: str | None = Field(None, description="Additional status message")


class HealthResponse(BaseModel):
    """Health check response model."""
    status: str = Field(description="Overall health status")
    timestamp: datetime = Field(description="Current server timestamp")
    version: str = Field(description="API version")
    environment: str = Field(description="Deployment environment")
    uptime_seconds: int = Field(description="Server uptime in seconds")
    components: dict[str, ComponentHealth] = Field(default_factory=dict)


class ReadinessResponse(BaseModel):
    """Readiness check response model."""
    ready: bool = Field(description="Whether the service is ready")
    checks: dict[str, Any] = Field(description="Individual check results")


async def check_database() -> ComponentHealth:
    """Check the enrollment database connection.

    The in-memory backend has no database to check and reports as skipped.
    """
    if get_settings().database.backend == "memory":
        return ComponentHealth(status="skipped", message="In-memory store")

    start = time.time()
    if not await check_database_connection():
        logger.error("Database health check failed")
        return ComponentHealth(status="unhealthy", message="Database unreachable")

    latency = (time.time() - start) * 1000
    return ComponentHealth(status="healthy", latency_ms=round(latency, 2))


async def check_migrations() -> ComponentHealth:
    """Check that every known migration has been applied.

    Skipped for the in-memory backend.
    """
    settings = get_settings()
    if settings.database.backend == "memory":
        return ComponentHealth(status="skipped", message="In-memory store")

    try:
        migration_status = await get_migration_status(settings.database.url)
    except Exception as e:
        logger.warning("Migration status check failed: %s", str(e))
        return ComponentHealth(status="unhealthy", message="Migration status unavailable")

    if not migration_status["is_up_to_date"]:
        return ComponentHealth(
            status="unhealthy",
            message=f"{migration_status['pending_count']} pending migrations",
        )
    return ComponentHealth(status="healthy", message=migration_status["current_version"])


@router.get("/health", response_model=HealthResponse)
async def health_check() -> HealthResponse:
    """Check if the API is healthy with component details.

    Returns:
        HealthResponse with detailed status.
    """
    settings = get_settings()
    db_health = await check_database()

    return HealthResponse(
        status="unhealthy" if db_health.status == "unhealthy" else "healthy",
        timestamp=utc_now(),
        version=__version__,
        environment=settings.environment,
        uptime_seconds=int(time.time() - _server_start_time),
        components={"database": db_health},
    )


@router.get("/health/ready", response_model=ReadinessResponse)
async def readiness_check() -> ReadinessResponse:
    """Check if the API is ready to accept traffic.

    Returns:
        ReadinessResponse with individual check results.
    """
    checks: dict[str, Any] = {}
    all_ready = True

    db_health = await check_database()
    checks["database"] = {"status": db_health.status, "latency_ms": db_health.latency_ms}
    if db_health.status == "unhealthy":
        all_ready = False
    else:
        migrations_health = await check_migrations()
        checks["migrations"] = {
            "status": migrations_health.status,
            "message": migrations_health.message,
        }
        if migrations_health.status == "unhealthy":
            all_ready = False

    return ReadinessResponse(ready=all_ready, checks=checks)
