# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Data models for the enrollment domain.

This module defines Pydantic models and enums for:
- Enrollment records and drafts
- Principals and their roles
- Store filters
- Controller results handed to the transport layer
"""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any

from pydantic import AliasChoices, BaseModel, ConfigDict, Field


class Role(str, Enum):
    """Roles a principal can act under."""

    ADMIN = "admin"
    PROFESOR = "profesor"
    ESTUDIANTE = "estudiante"


class Operation(str, Enum):
    """Operations guarded by the access policy."""

    CREATE = "create"
    READ = "read"
    LIST = "list"
    UPDATE = "update"
    DELETE = "delete"


class Principal(BaseModel):
    """Authenticated actor driving an operation.

    The role is kept as a plain string so that tokens carrying an unknown
    role still produce a principal, which the policy then denies.

    Attributes:
        id: Principal identifier.
        role: Role code (admin, profesor, estudiante).
    """

    model_config = ConfigDict(frozen=True)

    id: str
    role: str


class EnrollmentDraft(BaseModel):
    """Validated data for a new enrollment, before the store assigns an id."""

    student: str
    course: str
    semester: str
    grades: list[float]
    final_grade: float
    active: bool = True


class Enrollment(BaseModel):
    """Enrollment record linking a student, a course and a semester.

    Attributes:
        id: Store-assigned identifier.
        student: Enrolled student identifier.
        course: Course identifier.
        semester: Semester label, e.g. "202410".
        grades: Per-evaluation grades, each between 0 and 5.
        final_grade: Weighted final grade derived from grades.
        active: False once the enrollment has been deactivated.
        created_at: Creation timestamp.
        updated_at: Last modification timestamp.
    """

    model_config = ConfigDict(from_attributes=True)

    id: str
    student: str
    course: str
    semester: str
    grades: list[float] = Field(default_factory=list)
    final_grade: float = 0.0
    active: bool = True
    created_at: datetime | None = None
    updated_at: datetime | None = None


class EnrollmentFilter(BaseModel):
    """Conjunctive filter over active enrollments.

    Attributes:
        student: Match a single student.
        course: Match a single course.
        semester: Match a single semester.
        course_in: Match any of these courses. An empty list matches nothing.
    """

    student: str | None = None
    course: str | None = None
    semester: str | None = None
    course_in: list[str] | None = None


class CourseRef(BaseModel):
    """Reference to a course in the catalog."""

    model_config = ConfigDict(extra="ignore", coerce_numbers_to_str=True)

    id: str = Field(validation_alias=AliasChoices("_id", "id"))


@dataclass
class ControllerResult:
    """Transport-agnostic outcome of a controller operation.

    Attributes:
        status: Status code (200, 201, 400, 403, 404, 500).
        body: Envelope with success flag and either data or error.
    """

    status: int
    body: dict[str, Any] = field(default_factory=dict)

    @classmethod
    def ok(cls, data: Any = None, status: int = 200) -> "ControllerResult":
        """Build a successful result."""
        body: dict[str, Any] = {"success": True}
        if data is not None:
            body["data"] = data
        return cls(status=status, body=body)

    @classmethod
    def fail(cls, status: int, error: str) -> "ControllerResult":
        """Build a failed result."""
        return cls(status=status, body={"success": False, "error": error})
