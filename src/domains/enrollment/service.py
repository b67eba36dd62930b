# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Enrollment service for managing student course enrollments.

This module provides the EnrollmentService class for:
- Enrollment creation with weighted final grade
- Enrollment lookup and listing (active records only)
- Grade updates with final grade recomputation
- Enrollment deactivation (soft delete)
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any

from src.domains.enrollment.catalog import CourseCatalogGateway
from src.domains.enrollment.errors import (
    InvalidConfigError,
    NotFoundError,
    UpstreamError,
    ValidationError,
)
from src.domains.enrollment.grading import (
    MAX_GRADE,
    MIN_GRADE,
    compute_final_grade,
    is_sequence,
    is_valid_grade,
)
from src.domains.enrollment.models import Enrollment, EnrollmentDraft, EnrollmentFilter
from src.domains.enrollment.store import EnrollmentStore

logger = logging.getLogger(__name__)

GRADE_RANGE_MESSAGE = f"Each grade must be a number between {MIN_GRADE} and {MAX_GRADE}"

# Marks grades that were not sent at all, as opposed to an explicit None
MISSING: Any = object()


class EnrollmentService:
    """Service for managing enrollments.

    This service holds the data-level rules: required fields, grade
    ranges and the grade/weight shape. Authorization is the caller's
    concern.

    Attributes:
        store: Enrollment persistence backend.
        catalog: Course catalog gateway for evaluation weights.
    """

    def __init__(self, store: EnrollmentStore, catalog: CourseCatalogGateway) -> None:
        """Initialize enrollment service.

        Args:
            store: Enrollment persistence backend.
            catalog: Course catalog gateway.
        """
        self.store = store
        self.catalog = catalog

    async def create_enrollment(
        self,
        student: str | None,
        course: str | None,
        semester: str | None,
        grades: Any = MISSING,
    ) -> Enrollment:
        """Create an enrollment for a student in a course and semester.

        When grades are omitted, every evaluation starts at zero. Grades
        that are sent must be a list, so an explicit None is rejected.

        Args:
            student: Student identifier.
            course: Course identifier.
            semester: Semester label.
            grades: Optional grade per evaluation.

        Returns:
            The stored enrollment.

        Raises:
            ValidationError: If a required field is missing or grades are invalid.
            UpstreamError: If the evaluation weights cannot be fetched.
            InvalidConfigError: If the course has no usable weights.
        """
        if not all(isinstance(v, str) and v.strip() for v in (student, course, semester)):
            raise ValidationError("The student, course and semester fields are required")

        weights = await self._get_weights(course)

        if grades is not MISSING:
            if not is_sequence(grades):
                raise ValidationError("grades must be a list")
            if len(grades) != len(weights):
                raise ValidationError("The number of grades and weights must match")
            self._check_grade_range(grades)
            grades = list(grades)
        else:
            grades = [0] * len(weights)

        draft = EnrollmentDraft(
            student=student,
            course=course,
            semester=semester,
            grades=grades,
            final_grade=compute_final_grade(grades, weights),
            active=True,
        )
        enrollment = await self.store.create(draft)

        logger.info(
            "Created enrollment: id=%s, student=%s, course=%s, semester=%s",
            enrollment.id,
            student,
            course,
            semester,
        )

        return enrollment

    async def get_enrollment_by_id(self, enrollment_id: str) -> Enrollment | None:
        """Get an active enrollment.

        Args:
            enrollment_id: Enrollment identifier.

        Returns:
            Enrollment if found and active, None otherwise.
        """
        return await self.store.find_active_by_id(enrollment_id)

    async def list_enrollments(
        self,
        filter_: EnrollmentFilter | None = None,
    ) -> list[Enrollment]:
        """List active enrollments.

        Args:
            filter_: Optional conjunctive filter.

        Returns:
            Matching active enrollments, possibly empty.

        Raises:
            StorageError: If the store fails.
        """
        return await self.store.find_active_by_filter(filter_ or EnrollmentFilter())

    async def update_enrollment(
        self,
        enrollment_id: str,
        payload: Mapping[str, Any],
    ) -> Enrollment:
        """Replace the grades of an active enrollment.

        The final grade is recomputed against the course's current
        weights, which may have changed since creation.

        Args:
            enrollment_id: Enrollment identifier.
            payload: Update data carrying a ``grades`` list.

        Returns:
            The saved enrollment.

        Raises:
            NotFoundError: If no active enrollment exists.
            ValidationError: If grades are missing or out of range.
            ShapeError: If the grade count differs from the weight count.
            UpstreamError: If the evaluation weights cannot be fetched.
        """
        enrollment = await self.store.find_active_by_id(enrollment_id)
        if not enrollment:
            raise NotFoundError("Enrollment not found or inactive")

        grades = payload.get("grades")
        if grades is None or not is_sequence(grades):
            raise ValidationError("A list of grades is required")
        self._check_grade_range(grades)

        weights = await self._get_weights(enrollment.course)

        updated = enrollment.model_copy(
            update={
                "grades": list(grades),
                "final_grade": compute_final_grade(grades, weights),
            }
        )
        saved = await self.store.save(updated)

        logger.info(
            "Updated enrollment grades: id=%s, final_grade=%s",
            enrollment_id,
            saved.final_grade,
        )

        return saved

    async def deactivate_enrollment(self, enrollment_id: str) -> Enrollment:
        """Deactivate an enrollment.

        The lookup ignores the active flag, so deactivating an already
        inactive record succeeds again without changing it.

        Args:
            enrollment_id: Enrollment identifier.

        Returns:
            The deactivated enrollment.

        Raises:
            NotFoundError: If no enrollment exists for the id.
        """
        enrollment = await self.store.find_by_id(enrollment_id)
        if not enrollment:
            raise NotFoundError("Enrollment not found")

        enrollment.active = False
        saved = await self.store.save(enrollment)

        logger.info("Deactivated enrollment: id=%s", enrollment_id)

        return saved

    async def _get_weights(self, course_id: str) -> list[float]:
        """Fetch evaluation weights for a course.

        Args:
            course_id: Course identifier.

        Returns:
            Non-empty list of weights.

        Raises:
            UpstreamError: If the fetch fails.
            InvalidConfigError: If the weights are empty or missing.
        """
        try:
            weights = await self.catalog.get_evaluation_weights(course_id)
        except (UpstreamError, InvalidConfigError):
            raise
        except Exception as e:
            raise UpstreamError("Could not fetch evaluation weights", e) from e

        if not is_sequence(weights) or len(weights) == 0:
            raise InvalidConfigError("Invalid evaluation weights")

        return list(weights)

    @staticmethod
    def _check_grade_range(grades: Any) -> None:
        """Check that every grade is a number within range.

        Args:
            grades: Sequence of grades.

        Raises:
            ValidationError: If any grade is not a number between 0 and 5.
        """
        if not all(is_valid_grade(g) for g in grades):
            raise ValidationError(GRADE_RANGE_MESSAGE)
