# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Role-based access policy for enrollment operations.

Every decision is a single lookup in the RULES table keyed by
(operation, role). A pair missing from the table is denied, so a new
role gets no capability until rows are added for it.

| Operation | admin          | profesor                 | estudiante       |
|-----------|----------------|--------------------------|------------------|
| create    | any student    | deny                     | self only        |
| read      | any            | courses they teach       | own only         |
| list      | all            | forced to taught courses | forced to self   |
| update    | grades only    | grades only, taught only | deny             |
| delete    | any            | deny                     | own only         |

Example:
    >>> policy = AccessPolicy(catalog)
    >>> decision = await policy.authorize(principal, Operation.LIST, AccessRequest())
    >>> decision.scope
    EnrollmentFilter(student='stu1', course=None, semester=None, course_in=None)
"""

from __future__ import annotations

import logging
from collections.abc import Awaitable, Callable, Mapping
from dataclasses import dataclass, field
from typing import Any

from src.domains.enrollment.catalog import CourseCatalogGateway
from src.domains.enrollment.errors import (
    AuthorizationError,
    EnrollmentError,
    NotFoundError,
    ValidationError,
)
from src.domains.enrollment.models import (
    Enrollment,
    EnrollmentFilter,
    Operation,
    Principal,
    Role,
)

logger = logging.getLogger(__name__)

UNAUTHORIZED = "Not authorized"

# The only field an update payload may carry
UPDATABLE_FIELD = "grades"


@dataclass(frozen=True)
class Decision:
    """Outcome of an authorization check.

    Attributes:
        allowed: Whether the operation may proceed.
        error: Denial reason; a ValidationError marks a client input
            problem, an AuthorizationError a permission boundary and a
            NotFoundError a missing target.
        scope: Effective filter for list operations.
        student: Effective student for create operations.
    """

    allowed: bool
    error: EnrollmentError | None = None
    scope: EnrollmentFilter | None = None
    student: str | None = None

    @classmethod
    def allow(
        cls,
        scope: EnrollmentFilter | None = None,
        student: str | None = None,
    ) -> Decision:
        """Build an allowing decision."""
        return cls(allowed=True, scope=scope, student=student)

    @classmethod
    def deny(cls, error: EnrollmentError | None = None) -> Decision:
        """Build a denying decision, defaulting to a permission error."""
        return cls(allowed=False, error=error or AuthorizationError(UNAUTHORIZED))


TargetLoader = Callable[[], Awaitable[Enrollment | None]]


@dataclass
class AccessRequest:
    """Inputs an authorization rule may inspect.

    Attributes:
        payload: Request body for create and update.
        query: Caller-supplied filter for list.
        target_loader: Coroutine function loading the target enrollment.
            Only called by rules that need the target, at most once.
    """

    payload: Any = field(default_factory=dict)
    query: EnrollmentFilter | None = None
    target_loader: TargetLoader | None = None
    _target: Enrollment | None = field(default=None, init=False, repr=False)
    _loaded: bool = field(default=False, init=False, repr=False)

    async def target(self) -> Enrollment | None:
        """Load the target enrollment once and cache it."""
        if not self._loaded:
            if self.target_loader is not None:
                self._target = await self.target_loader()
            self._loaded = True
        return self._target


Rule = Callable[["AccessPolicy", Principal, AccessRequest], Awaitable[Decision]]


def is_grades_only(payload: Any) -> bool:
    """Check if a payload carries exactly the grades field with a value.

    None, zero, False and the empty string count as no value. Containers,
    including an empty list, count as a value.
    """
    if not isinstance(payload, Mapping) or list(payload.keys()) != [UPDATABLE_FIELD]:
        return False
    grades = payload[UPDATABLE_FIELD]
    if grades is None:
        return False
    if isinstance(grades, (bool, int, float, str)):
        return bool(grades)
    return True


class AccessPolicy:
    """Authorization decisions for enrollment operations.

    Stateless apart from the catalog gateway. Rules needing the courses a
    professor teaches make one catalog call per decision; nothing is
    cached across decisions.

    Attributes:
        catalog: Course catalog gateway.
    """

    def __init__(self, catalog: CourseCatalogGateway) -> None:
        """Initialize the access policy.

        Args:
            catalog: Course catalog gateway.
        """
        self.catalog = catalog

    async def authorize(
        self,
        principal: Principal,
        operation: Operation,
        request: AccessRequest | None = None,
    ) -> Decision:
        """Decide whether a principal may perform an operation.

        Args:
            principal: Authenticated actor.
            operation: Requested operation.
            request: Payload, query and target loader for the operation.

        Returns:
            Decision with the denial reason or the effective scope.

        Raises:
            UpstreamError: If a catalog lookup fails.
        """
        try:
            role = Role(principal.role)
        except ValueError:
            logger.debug("Unknown role denied: %s", principal.role)
            return Decision.deny()

        rule = RULES.get((operation, role))
        if rule is None:
            logger.debug(
                "No rule for operation=%s role=%s",
                operation.value,
                principal.role,
            )
            return Decision.deny()

        return await rule(self, principal, request or AccessRequest())

    async def taught_course_ids(self, professor_id: str) -> list[str]:
        """Get the ids of the courses a professor teaches."""
        courses = await self.catalog.get_courses_for_professor(professor_id)
        return [course.id for course in courses]

    # =========================================================================
    # Rules
    # =========================================================================

    async def _allow(self, principal: Principal, request: AccessRequest) -> Decision:
        return Decision.allow()

    async def _deny(self, principal: Principal, request: AccessRequest) -> Decision:
        return Decision.deny()

    async def _create_for_any(self, principal: Principal, request: AccessRequest) -> Decision:
        student = request.payload.get("student") if isinstance(request.payload, Mapping) else None
        if not student:
            return Decision.deny(ValidationError("Admin must provide the student id"))
        return Decision.allow(student=student)

    async def _create_for_self(self, principal: Principal, request: AccessRequest) -> Decision:
        student = request.payload.get("student") if isinstance(request.payload, Mapping) else None
        if student and student != principal.id:
            return Decision.deny()
        return Decision.allow(student=principal.id)

    async def _read_if_taught(self, principal: Principal, request: AccessRequest) -> Decision:
        target = await request.target()
        if target is None:
            return Decision.deny(NotFoundError("Enrollment not found"))
        if target.course not in await self.taught_course_ids(principal.id):
            return Decision.deny()
        return Decision.allow()

    async def _read_if_own(self, principal: Principal, request: AccessRequest) -> Decision:
        target = await request.target()
        if target is None:
            return Decision.deny(NotFoundError("Enrollment not found"))
        if target.student != principal.id:
            return Decision.deny()
        return Decision.allow()

    async def _list_all(self, principal: Principal, request: AccessRequest) -> Decision:
        return Decision.allow(scope=request.query or EnrollmentFilter())

    async def _list_taught(self, principal: Principal, request: AccessRequest) -> Decision:
        query = request.query or EnrollmentFilter()
        taught = await self.taught_course_ids(principal.id)
        return Decision.allow(scope=query.model_copy(update={"course_in": taught}))

    async def _list_own(self, principal: Principal, request: AccessRequest) -> Decision:
        query = request.query or EnrollmentFilter()
        return Decision.allow(scope=query.model_copy(update={"student": principal.id}))

    async def _update_grades(self, principal: Principal, request: AccessRequest) -> Decision:
        if not is_grades_only(request.payload):
            return Decision.deny(ValidationError("Only grades can be updated"))
        return Decision.allow()

    async def _update_taught_grades(
        self,
        principal: Principal,
        request: AccessRequest,
    ) -> Decision:
        if not is_grades_only(request.payload):
            return Decision.deny(AuthorizationError("Only grades can be modified"))

        target = await request.target()
        if target is None:
            return Decision.deny(NotFoundError("Enrollment not found"))
        if target.course not in await self.taught_course_ids(principal.id):
            return Decision.deny()
        return Decision.allow()

    async def _delete_own(self, principal: Principal, request: AccessRequest) -> Decision:
        target = await request.target()
        if target is None or target.student != principal.id:
            return Decision.deny()
        return Decision.allow()


RULES: dict[tuple[Operation, Role], Rule] = {
    (Operation.CREATE, Role.ADMIN): AccessPolicy._create_for_any,
    (Operation.CREATE, Role.PROFESOR): AccessPolicy._deny,
    (Operation.CREATE, Role.ESTUDIANTE): AccessPolicy._create_for_self,
    (Operation.READ, Role.ADMIN): AccessPolicy._allow,
    (Operation.READ, Role.PROFESOR): AccessPolicy._read_if_taught,
    (Operation.READ, Role.ESTUDIANTE): AccessPolicy._read_if_own,
    (Operation.LIST, Role.ADMIN): AccessPolicy._list_all,
    (Operation.LIST, Role.PROFESOR): AccessPolicy._list_taught,
    (Operation.LIST, Role.ESTUDIANTE): AccessPolicy._list_own,
    (Operation.UPDATE, Role.ADMIN): AccessPolicy._update_grades,
    (Operation.UPDATE, Role.PROFESOR): AccessPolicy._update_taught_grades,
    (Operation.UPDATE, Role.ESTUDIANTE): AccessPolicy._deny,
    (Operation.DELETE, Role.ADMIN): AccessPolicy._allow,
    (Operation.DELETE, Role.PROFESOR): AccessPolicy._deny,
    (Operation.DELETE, Role.ESTUDIANTE): AccessPolicy._delete_own,
}
