# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""SQLAlchemy implementation of the enrollment store.

The store works on a session owned by the caller; committing or
rolling back is left to get_session(). SQLAlchemy failures surface as
StorageError so the domain layer never sees driver exceptions.
"""

import logging

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from src.domains.enrollment.errors import StorageError
from src.domains.enrollment.models import Enrollment, EnrollmentDraft, EnrollmentFilter
from src.domains.enrollment.store import EnrollmentStore
from src.infrastructure.database.models import EnrollmentRecord
from src.utils.datetime import ensure_utc

logger = logging.getLogger(__name__)


def _to_domain(record: EnrollmentRecord) -> Enrollment:
    enrollment = Enrollment.model_validate(record)
    enrollment.created_at = ensure_utc(enrollment.created_at)
    enrollment.updated_at = ensure_utc(enrollment.updated_at)
    return enrollment


class SQLAlchemyEnrollmentStore(EnrollmentStore):
    """Enrollment store backed by the enrollments table.

    Attributes:
        _session: Async session used for every query.
    """

    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def create(self, draft: EnrollmentDraft) -> Enrollment:
        record = EnrollmentRecord(**draft.model_dump())
        try:
            self._session.add(record)
            await self._session.flush()
            await self._session.refresh(record)
        except SQLAlchemyError as e:
            logger.error("Failed to insert enrollment: %s", str(e))
            raise StorageError("Failed to create enrollment", e) from e
        return _to_domain(record)

    async def find_active_by_id(self, enrollment_id: str) -> Enrollment | None:
        stmt = select(EnrollmentRecord).where(
            EnrollmentRecord.id == enrollment_id,
            EnrollmentRecord.active.is_(True),
        )
        record = await self._scalar(stmt)
        return _to_domain(record) if record else None

    async def find_by_id(self, enrollment_id: str) -> Enrollment | None:
        stmt = select(EnrollmentRecord).where(EnrollmentRecord.id == enrollment_id)
        record = await self._scalar(stmt)
        return _to_domain(record) if record else None

    async def find_active_by_filter(self, filter_: EnrollmentFilter) -> list[Enrollment]:
        stmt = select(EnrollmentRecord).where(EnrollmentRecord.active.is_(True))

        if filter_.student is not None:
            stmt = stmt.where(EnrollmentRecord.student == filter_.student)
        if filter_.course is not None:
            stmt = stmt.where(EnrollmentRecord.course == filter_.course)
        if filter_.semester is not None:
            stmt = stmt.where(EnrollmentRecord.semester == filter_.semester)
        if filter_.course_in is not None:
            stmt = stmt.where(EnrollmentRecord.course.in_(filter_.course_in))

        stmt = stmt.order_by(EnrollmentRecord.created_at)

        try:
            result = await self._session.execute(stmt)
        except SQLAlchemyError as e:
            raise StorageError("Failed to list enrollments", e) from e
        return [_to_domain(record) for record in result.scalars().all()]

    async def save(self, enrollment: Enrollment) -> Enrollment:
        try:
            record = await self._session.get(EnrollmentRecord, enrollment.id)
            if record is None:
                raise StorageError(f"Enrollment {enrollment.id} does not exist")

            record.grades = list(enrollment.grades)
            record.final_grade = enrollment.final_grade
            record.active = enrollment.active

            await self._session.flush()
            await self._session.refresh(record)
        except SQLAlchemyError as e:
            logger.error("Failed to save enrollment %s: %s", enrollment.id, str(e))
            raise StorageError("Failed to save enrollment", e) from e
        return _to_domain(record)

    async def _scalar(self, stmt) -> EnrollmentRecord | None:
        try:
            result = await self._session.execute(stmt)
        except SQLAlchemyError as e:
            raise StorageError("Failed to read enrollment", e) from e
        return result.scalar_one_or_none()
