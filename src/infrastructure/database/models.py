# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""SQLAlchemy ORM models for the enrollment database."""

from datetime import datetime
from uuid import uuid4

from sqlalchemy import JSON, Boolean, DateTime, Float, Index, String
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column

from src.utils.datetime import utc_now


class Base(DeclarativeBase):
    """Declarative base for enrollment models."""


class TimestampMixin:
    """Adds created_at and updated_at columns maintained by the ORM."""

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=utc_now,
        nullable=False,
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=utc_now,
        onupdate=utc_now,
        nullable=False,
    )


class EnrollmentRecord(Base, TimestampMixin):
    """A student's enrollment in a course for one semester.

    Grades are stored as a JSON array aligned with the course's
    evaluation weights. Deletion is soft: active is set to False.
    """

    __tablename__ = "enrollments"

    id: Mapped[str] = mapped_column(
        String(36),
        primary_key=True,
        default=lambda: str(uuid4()),
    )
    student: Mapped[str] = mapped_column(String(64), nullable=False)
    course: Mapped[str] = mapped_column(String(64), nullable=False)
    semester: Mapped[str] = mapped_column(String(32), nullable=False)
    grades: Mapped[list[float]] = mapped_column(JSON, nullable=False, default=list)
    final_grade: Mapped[float] = mapped_column(Float, nullable=False, default=0.0)
    active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)

    __table_args__ = (
        Index("ix_enrollments_student", "student"),
        Index("ix_enrollments_course", "course"),
        Index("ix_enrollments_semester", "semester"),
        Index("ix_enrollments_active", "active"),
    )

    def __repr__(self) -> str:
        return f"<EnrollmentRecord {self.id} student={self.student} course={self.course}>"
