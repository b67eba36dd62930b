# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Database infrastructure for the enrollment service.

Provides the async connection pool, ORM models, the SQLAlchemy
enrollment store and the migration runner.
"""

from src.infrastructure.database.connection import (
    DatabaseError,
    check_database_connection,
    close_database,
    get_engine,
    get_session,
    get_sessionmaker,
    init_database,
)
from src.infrastructure.database.enrollment_store import SQLAlchemyEnrollmentStore
from src.infrastructure.database.models import Base, EnrollmentRecord, TimestampMixin

__all__ = [
    # Connection
    "DatabaseError",
    "init_database",
    "close_database",
    "get_engine",
    "get_sessionmaker",
    "get_session",
    "check_database_connection",
    # Models
    "Base",
    "TimestampMixin",
    "EnrollmentRecord",
    # Store
    "SQLAlchemyEnrollmentStore",
]
