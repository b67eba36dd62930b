# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Pytest configuration and shared fixtures.

This module provides fixtures used across all test types:
- Unit tests
- Integration tests
"""

from unittest.mock import AsyncMock

import pytest

from src.domains.enrollment import (
    CourseCatalogGateway,
    CourseRef,
    InMemoryEnrollmentStore,
    Principal,
)


# =============================================================================
# Marker Configuration
# =============================================================================


def pytest_configure(config: pytest.Config) -> None:
    """Configure custom pytest markers."""
    config.addinivalue_line(
        "markers", "unit: mark test as a unit test"
    )
    config.addinivalue_line(
        "markers", "integration: mark test as an integration test"
    )


# =============================================================================
# Principal Fixtures
# =============================================================================


@pytest.fixture
def admin() -> Principal:
    """Provide an admin principal."""
    return Principal(id="adm1", role="admin")


@pytest.fixture
def profesor() -> Principal:
    """Provide a professor principal teaching mat1."""
    return Principal(id="prof1", role="profesor")


@pytest.fixture
def estudiante() -> Principal:
    """Provide a student principal."""
    return Principal(id="stu1", role="estudiante")


# =============================================================================
# Collaborator Fixtures
# =============================================================================


@pytest.fixture
def mock_catalog() -> AsyncMock:
    """Create a mock course catalog.

    Every course is weighted [30, 30, 40] and prof1 teaches mat1 only.
    """
    catalog = AsyncMock(spec=CourseCatalogGateway)
    catalog.get_evaluation_weights.return_value = [30, 30, 40]
    catalog.get_courses_for_professor.return_value = [CourseRef(id="mat1")]
    return catalog


@pytest.fixture
def store() -> InMemoryEnrollmentStore:
    """Provide an empty in-memory enrollment store."""
    return InMemoryEnrollmentStore()
