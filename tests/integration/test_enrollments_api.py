# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Integration tests for the enrollment API endpoints.

Runs the full application with the in-memory store and a mocked course
catalog. Tokens are signed with the configured JWT settings.
"""

import os
from unittest.mock import AsyncMock, patch

import pytest
from fastapi.testclient import TestClient

from src.api.app import create_app
from src.api.dependencies import get_catalog_gateway, get_enrollment_store
from src.core.config import clear_settings_cache, get_settings
from src.domains.auth.jwt import JWTManager
from src.domains.enrollment import InMemoryEnrollmentStore


@pytest.fixture
def memory_backend():
    """Select the in-memory backend for the duration of a test."""
    with patch.dict(os.environ, {"DB_BACKEND": "memory"}, clear=False):
        clear_settings_cache()
        yield
    clear_settings_cache()


@pytest.fixture
def client(
    memory_backend,
    store: InMemoryEnrollmentStore,
    mock_catalog: AsyncMock,
) -> TestClient:
    """Create a test client with overridden store and catalog.

    The client is not used as a context manager, so startup does not
    open real connections.
    """
    app = create_app()
    app.dependency_overrides[get_enrollment_store] = lambda: store
    app.dependency_overrides[get_catalog_gateway] = lambda: mock_catalog
    return TestClient(app)


def auth_headers(user_id: str, role: str) -> dict[str, str]:
    """Build an Authorization header for a principal."""
    token = JWTManager(get_settings().jwt).create_access_token(user_id=user_id, role=role)
    return {"Authorization": f"Bearer {token}"}


ADMIN = ("adm1", "admin")
PROFESOR = ("prof1", "profesor")
ESTUDIANTE = ("stu1", "estudiante")


class TestAuthentication:
    """Tests for unauthenticated access."""

    def test_list_without_token_returns_401(self, client: TestClient) -> None:
        """Test that enrollments require a bearer token."""
        response = client.get("/api/v1/enrollments")

        assert response.status_code == 401

    def test_invalid_token_returns_401(self, client: TestClient) -> None:
        """Test that a forged token is not accepted."""
        response = client.get(
            "/api/v1/enrollments",
            headers={"Authorization": "Bearer not.a.token"},
        )

        assert response.status_code == 401


class TestCreateEnrollment:
    """Tests for POST /api/v1/enrollments."""

    def test_student_enrolls_self(self, client: TestClient) -> None:
        """Test a student creates an enrollment with zeroed grades."""
        response = client.post(
            "/api/v1/enrollments",
            json={"course": "mat1", "semester": "202410"},
            headers=auth_headers(*ESTUDIANTE),
        )

        assert response.status_code == 201
        body = response.json()
        assert body["success"] is True
        assert body["data"]["student"] == "stu1"
        assert body["data"]["grades"] == [0, 0, 0]
        assert body["data"]["final_grade"] == 0
        assert body["data"]["active"] is True

    def test_admin_creates_with_grades(
        self,
        client: TestClient,
        mock_catalog: AsyncMock,
    ) -> None:
        """Test an admin enrolls a named student with initial grades."""
        mock_catalog.get_evaluation_weights.return_value = [50, 50]

        response = client.post(
            "/api/v1/enrollments",
            json={"student": "stu2", "course": "mat2", "semester": "202410", "grades": [4, 5]},
            headers=auth_headers(*ADMIN),
        )

        assert response.status_code == 201
        assert response.json()["data"]["final_grade"] == pytest.approx(4.5)

    def test_admin_without_student_returns_400(self, client: TestClient) -> None:
        """Test an admin must name the student."""
        response = client.post(
            "/api/v1/enrollments",
            json={"course": "mat1", "semester": "202410"},
            headers=auth_headers(*ADMIN),
        )

        assert response.status_code == 400
        assert response.json()["success"] is False

    def test_profesor_cannot_create(self, client: TestClient) -> None:
        """Test professors are not allowed to create enrollments."""
        response = client.post(
            "/api/v1/enrollments",
            json={"student": "stu1", "course": "mat1", "semester": "202410"},
            headers=auth_headers(*PROFESOR),
        )

        assert response.status_code == 403

    def test_student_cannot_enroll_others(
        self,
        client: TestClient,
        store: InMemoryEnrollmentStore,
        mock_catalog: AsyncMock,
    ) -> None:
        """Test a student naming another student is refused and nothing is stored."""
        response = client.post(
            "/api/v1/enrollments",
            json={"student": "stu2", "course": "mat1", "semester": "202410"},
            headers=auth_headers(*ESTUDIANTE),
        )

        assert response.status_code == 403
        assert store._records == {}
        mock_catalog.get_evaluation_weights.assert_not_awaited()

    def test_null_grades_returns_400(self, client: TestClient) -> None:
        """Test grades sent as null are rejected."""
        response = client.post(
            "/api/v1/enrollments",
            json={"student": "stu1", "course": "mat1", "semester": "202410", "grades": None},
            headers=auth_headers(*ADMIN),
        )

        assert response.status_code == 400

    def test_grades_out_of_range_returns_400(self, client: TestClient) -> None:
        """Test grades above five are rejected."""
        response = client.post(
            "/api/v1/enrollments",
            json={"student": "stu1", "course": "mat1", "semester": "202410", "grades": [6, 0, 0]},
            headers=auth_headers(*ADMIN),
        )

        assert response.status_code == 400


class TestReadEnrollments:
    """Tests for GET /api/v1/enrollments."""

    @pytest.fixture
    def seeded(self, client: TestClient) -> dict[str, str]:
        """Create one enrollment per course and return their ids."""
        ids = {}
        for student, course in (("stu1", "mat1"), ("stu2", "mat2")):
            response = client.post(
                "/api/v1/enrollments",
                json={"student": student, "course": course, "semester": "202410"},
                headers=auth_headers(*ADMIN),
            )
            ids[course] = response.json()["data"]["id"]
        return ids

    def test_admin_lists_all(self, client: TestClient, seeded: dict[str, str]) -> None:
        """Test admins see every active enrollment."""
        response = client.get("/api/v1/enrollments", headers=auth_headers(*ADMIN))

        assert response.status_code == 200
        assert len(response.json()["data"]) == 2

    def test_admin_filters_by_query(self, client: TestClient, seeded: dict[str, str]) -> None:
        """Test query parameters narrow the listing."""
        response = client.get(
            "/api/v1/enrollments",
            params={"course": "mat2"},
            headers=auth_headers(*ADMIN),
        )

        assert [e["course"] for e in response.json()["data"]] == ["mat2"]

    def test_profesor_lists_taught_courses(
        self,
        client: TestClient,
        seeded: dict[str, str],
    ) -> None:
        """Test professors only see courses they teach."""
        response = client.get("/api/v1/enrollments", headers=auth_headers(*PROFESOR))

        assert [e["course"] for e in response.json()["data"]] == ["mat1"]

    def test_student_lists_own(self, client: TestClient, seeded: dict[str, str]) -> None:
        """Test students only see their own enrollments."""
        response = client.get(
            "/api/v1/enrollments",
            params={"student": "stu2"},
            headers=auth_headers(*ESTUDIANTE),
        )

        assert [e["student"] for e in response.json()["data"]] == ["stu1"]

    def test_get_own_enrollment(self, client: TestClient, seeded: dict[str, str]) -> None:
        """Test a student can read their own enrollment."""
        response = client.get(
            f"/api/v1/enrollments/{seeded['mat1']}",
            headers=auth_headers(*ESTUDIANTE),
        )

        assert response.status_code == 200
        assert response.json()["data"]["id"] == seeded["mat1"]

    def test_get_other_students_enrollment_returns_403(
        self,
        client: TestClient,
        seeded: dict[str, str],
    ) -> None:
        """Test a student cannot read another student's enrollment."""
        response = client.get(
            f"/api/v1/enrollments/{seeded['mat2']}",
            headers=auth_headers(*ESTUDIANTE),
        )

        assert response.status_code == 403

    def test_get_missing_returns_404(self, client: TestClient) -> None:
        """Test an unknown id is reported as not found."""
        response = client.get("/api/v1/enrollments/unknown", headers=auth_headers(*ADMIN))

        assert response.status_code == 404
        assert response.json() == {"success": False, "error": "Enrollment not found"}


class TestUpdateAndDelete:
    """Tests for PUT and DELETE /api/v1/enrollments/{id}."""

    @pytest.fixture
    def enrollment_id(self, client: TestClient) -> str:
        """Create an enrollment for stu1 in mat1."""
        response = client.post(
            "/api/v1/enrollments",
            json={"student": "stu1", "course": "mat1", "semester": "202410"},
            headers=auth_headers(*ADMIN),
        )
        return response.json()["data"]["id"]

    def test_profesor_updates_grades(self, client: TestClient, enrollment_id: str) -> None:
        """Test a professor recomputes the final grade of a taught course."""
        response = client.put(
            f"/api/v1/enrollments/{enrollment_id}",
            json={"grades": [4, 3, 5]},
            headers=auth_headers(*PROFESOR),
        )

        assert response.status_code == 200
        assert response.json()["data"]["final_grade"] == pytest.approx(4.1)

    def test_update_with_extra_fields_returns_400(
        self,
        client: TestClient,
        enrollment_id: str,
    ) -> None:
        """Test only grades may be sent in an update."""
        response = client.put(
            f"/api/v1/enrollments/{enrollment_id}",
            json={"grades": [5, 5, 5], "student": "stu9"},
            headers=auth_headers(*ADMIN),
        )

        assert response.status_code == 400

    def test_student_cannot_update(self, client: TestClient, enrollment_id: str) -> None:
        """Test students cannot change grades."""
        response = client.put(
            f"/api/v1/enrollments/{enrollment_id}",
            json={"grades": [5, 5, 5]},
            headers=auth_headers(*ESTUDIANTE),
        )

        assert response.status_code == 403

    def test_student_deletes_own(
        self,
        client: TestClient,
        enrollment_id: str,
        store: InMemoryEnrollmentStore,
    ) -> None:
        """Test deactivation hides the enrollment but keeps the record."""
        response = client.delete(
            f"/api/v1/enrollments/{enrollment_id}",
            headers=auth_headers(*ESTUDIANTE),
        )

        assert response.status_code == 200
        assert response.json() == {"success": True}

        follow_up = client.get(
            f"/api/v1/enrollments/{enrollment_id}",
            headers=auth_headers(*ADMIN),
        )
        assert follow_up.status_code == 404

    def test_profesor_cannot_delete(self, client: TestClient, enrollment_id: str) -> None:
        """Test professors cannot deactivate enrollments."""
        response = client.delete(
            f"/api/v1/enrollments/{enrollment_id}",
            headers=auth_headers(*PROFESOR),
        )

        assert response.status_code == 403


class TestHealthEndpoints:
    """Tests for the health endpoints."""

    def test_health_without_token(self, client: TestClient) -> None:
        """Test health is public and skips the database check in memory mode."""
        response = client.get("/health")

        assert response.status_code == 200
        body = response.json()
        assert body["status"] == "healthy"
        assert body["components"]["database"]["status"] == "skipped"

    def test_readiness(self, client: TestClient) -> None:
        """Test readiness reports ready in memory mode."""
        response = client.get("/health/ready")

        assert response.status_code == 200
        assert response.json()["ready"] is True
