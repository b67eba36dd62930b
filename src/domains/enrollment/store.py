# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Abstract base class for enrollment persistence.

This module defines the EnrollmentStore ABC that every persistence
backend implements, plus a dict-backed implementation used for local
development and tests.

Soft deletion is not a store operation: callers set ``active=False``
and ``save`` the record. Active-only lookups must never return an
inactive record.
"""

import logging
from abc import ABC, abstractmethod
from uuid import uuid4

from src.domains.enrollment.errors import StorageError
from src.domains.enrollment.models import Enrollment, EnrollmentDraft, EnrollmentFilter
from src.utils.datetime import utc_now

logger = logging.getLogger(__name__)


class EnrollmentStore(ABC):
    """Persistence contract for enrollment records."""

    @abstractmethod
    async def create(self, draft: EnrollmentDraft) -> Enrollment:
        """Persist a new enrollment.

        Args:
            draft: Validated enrollment data.

        Returns:
            Stored enrollment with id and timestamps assigned.

        Raises:
            StorageError: If the backend fails.
        """
        pass

    @abstractmethod
    async def find_active_by_id(self, enrollment_id: str) -> Enrollment | None:
        """Get an active enrollment by id.

        Args:
            enrollment_id: Enrollment identifier.

        Returns:
            Enrollment if found and active, None otherwise.
        """
        pass

    @abstractmethod
    async def find_by_id(self, enrollment_id: str) -> Enrollment | None:
        """Get an enrollment by id regardless of its active flag.

        Args:
            enrollment_id: Enrollment identifier.

        Returns:
            Enrollment if found, None otherwise.
        """
        pass

    @abstractmethod
    async def find_active_by_filter(self, filter_: EnrollmentFilter) -> list[Enrollment]:
        """List active enrollments matching every field set in the filter.

        Args:
            filter_: Conjunctive filter.

        Returns:
            Matching active enrollments, possibly empty.
        """
        pass

    @abstractmethod
    async def save(self, enrollment: Enrollment) -> Enrollment:
        """Persist the mutable fields of an existing enrollment.

        Only grades, final grade and the active flag are written;
        student, course and semester are immutable.

        Args:
            enrollment: Enrollment carrying the new field values.

        Returns:
            Stored enrollment.

        Raises:
            StorageError: If the backend fails or the record does not exist.
        """
        pass


def matches_filter(enrollment: Enrollment, filter_: EnrollmentFilter) -> bool:
    """Check if an enrollment satisfies every field set in a filter."""
    if filter_.student is not None and enrollment.student != filter_.student:
        return False
    if filter_.course is not None and enrollment.course != filter_.course:
        return False
    if filter_.semester is not None and enrollment.semester != filter_.semester:
        return False
    if filter_.course_in is not None and enrollment.course not in filter_.course_in:
        return False
    return True


class InMemoryEnrollmentStore(EnrollmentStore):
    """Dict-backed enrollment store.

    Records live for the lifetime of the instance. Returned enrollments
    are copies, so callers cannot mutate stored state without ``save``.
    """

    def __init__(self) -> None:
        self._records: dict[str, Enrollment] = {}

    async def create(self, draft: EnrollmentDraft) -> Enrollment:
        now = utc_now()
        enrollment = Enrollment(
            id=str(uuid4()),
            created_at=now,
            updated_at=now,
            **draft.model_dump(),
        )
        self._records[enrollment.id] = enrollment
        return enrollment.model_copy(deep=True)

    async def find_active_by_id(self, enrollment_id: str) -> Enrollment | None:
        enrollment = self._records.get(enrollment_id)
        if enrollment is None or not enrollment.active:
            return None
        return enrollment.model_copy(deep=True)

    async def find_by_id(self, enrollment_id: str) -> Enrollment | None:
        enrollment = self._records.get(enrollment_id)
        return enrollment.model_copy(deep=True) if enrollment else None

    async def find_active_by_filter(self, filter_: EnrollmentFilter) -> list[Enrollment]:
        return [
            e.model_copy(deep=True)
            for e in self._records.values()
            if e.active and matches_filter(e, filter_)
        ]

    async def save(self, enrollment: Enrollment) -> Enrollment:
        stored = self._records.get(enrollment.id)
        if stored is None:
            raise StorageError(f"Enrollment {enrollment.id} does not exist")

        self._records[enrollment.id] = stored.model_copy(
            update={
                "grades": list(enrollment.grades),
                "final_grade": enrollment.final_grade,
                "active": enrollment.active,
                "updated_at": utc_now(),
            }
        )
        return self._records[enrollment.id].model_copy(deep=True)
