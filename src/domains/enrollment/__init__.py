# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Enrollment domain package.

This package provides student enrollment record management including:
- Weighted final grade computation
- Enrollment creation, lookup, listing, grade updates and deactivation
- Role-based access policy
- Controller composing policy and service into transport-agnostic results
"""

from src.domains.enrollment.catalog import CourseCatalogClient, CourseCatalogGateway
from src.domains.enrollment.controller import EnrollmentController
from src.domains.enrollment.errors import (
    AuthorizationError,
    EnrollmentError,
    InvalidConfigError,
    NotFoundError,
    ShapeError,
    StorageError,
    UpstreamError,
    ValidationError,
)
from src.domains.enrollment.grading import compute_final_grade
from src.domains.enrollment.models import (
    ControllerResult,
    CourseRef,
    Enrollment,
    EnrollmentDraft,
    EnrollmentFilter,
    Operation,
    Principal,
    Role,
)
from src.domains.enrollment.policy import AccessPolicy, AccessRequest, Decision
from src.domains.enrollment.service import EnrollmentService
from src.domains.enrollment.store import EnrollmentStore, InMemoryEnrollmentStore

__all__ = [
    # Grading
    "compute_final_grade",
    # Service
    "EnrollmentService",
    "EnrollmentController",
    # Policy
    "AccessPolicy",
    "AccessRequest",
    "Decision",
    # Collaborators
    "EnrollmentStore",
    "InMemoryEnrollmentStore",
    "CourseCatalogGateway",
    "CourseCatalogClient",
    # Models
    "ControllerResult",
    "CourseRef",
    "Enrollment",
    "EnrollmentDraft",
    "EnrollmentFilter",
    "Operation",
    "Principal",
    "Role",
    # Errors
    "EnrollmentError",
    "ValidationError",
    "ShapeError",
    "NotFoundError",
    "AuthorizationError",
    "UpstreamError",
    "InvalidConfigError",
    "StorageError",
]
