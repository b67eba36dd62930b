# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Course catalog gateway and its HTTP client.

The course catalog is a remote service that owns course configuration:
- Evaluation weights per course
- Professor-to-course assignment

The enrollment domain talks to it only through CourseCatalogGateway, so
tests and alternative deployments can substitute their own gateway.
CourseCatalogClient is the production implementation over httpx.
"""

import logging
from abc import ABC, abstractmethod
from typing import Any

import httpx
from pydantic import ValidationError as PydanticValidationError

from src.core.config.settings import CourseCatalogSettings
from src.domains.enrollment.errors import InvalidConfigError, UpstreamError
from src.domains.enrollment.models import CourseRef

logger = logging.getLogger(__name__)

# Field of the catalog course document holding the evaluation weights
WEIGHTS_FIELD = "porcentajeEvaluaciones"


class CourseCatalogGateway(ABC):
    """Contract over the remote course catalog service."""

    @abstractmethod
    async def get_evaluation_weights(self, course_id: str) -> list[float]:
        """Get the evaluation weights configured for a course.

        Args:
            course_id: Course identifier.

        Returns:
            Non-empty list of weights, as fractions or percentages.

        Raises:
            UpstreamError: If the catalog cannot be reached or fails.
            InvalidConfigError: If the weights are missing or unusable.
        """
        pass

    @abstractmethod
    async def get_courses_for_professor(self, professor_id: str) -> list[CourseRef]:
        """Get the courses taught by a professor.

        Args:
            professor_id: Professor identifier.

        Returns:
            Course references, empty if the professor teaches nothing.

        Raises:
            UpstreamError: If the catalog cannot be reached or fails.
        """
        pass


def parse_weights(raw: Any) -> list[float]:
    """Validate a raw weight sequence from the catalog.

    Args:
        raw: Value of the weights field in the course document.

    Returns:
        Weights as a list of numbers.

    Raises:
        InvalidConfigError: If the value is missing, empty or not numeric.
    """
    if not isinstance(raw, list) or not raw:
        raise InvalidConfigError("Invalid evaluation weights")

    for weight in raw:
        if isinstance(weight, bool) or not isinstance(weight, (int, float)):
            raise InvalidConfigError("Invalid evaluation weights")

    return list(raw)


class CourseCatalogClient(CourseCatalogGateway):
    """HTTP client for the course catalog service.

    Every call is a single request; failures are not retried.

    Attributes:
        _settings: Course catalog configuration.
        _client: Async HTTP client bound to the catalog base URL.

    Example:
        >>> client = CourseCatalogClient(get_settings().course_catalog)
        >>> weights = await client.get_evaluation_weights("mat2")
        >>> await client.close()
    """

    def __init__(
        self,
        settings: CourseCatalogSettings,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        """Initialize the catalog client.

        Args:
            settings: Course catalog configuration.
            transport: Optional transport override for the HTTP client.
        """
        self._settings = settings
        self._client = httpx.AsyncClient(
            base_url=settings.base_url,
            timeout=settings.timeout,
            headers={"Accept": "application/json"},
            transport=transport,
        )

    async def close(self) -> None:
        """Close the HTTP client."""
        await self._client.aclose()

    async def get_evaluation_weights(self, course_id: str) -> list[float]:
        data = await self._get(f"/api/materias/{course_id}", "Get evaluation weights")

        course = data.get("data") if isinstance(data, dict) else None
        raw = course.get(WEIGHTS_FIELD) if isinstance(course, dict) else None
        return parse_weights(raw)

    async def get_courses_for_professor(self, professor_id: str) -> list[CourseRef]:
        data = await self._get(
            "/api/materias",
            "Get professor courses",
            params={"profesor": professor_id},
        )

        courses = data.get("data") if isinstance(data, dict) else None
        if courses is None:
            return []
        if not isinstance(courses, list):
            raise UpstreamError("Get professor courses failed: unexpected response")

        try:
            return [CourseRef.model_validate(course) for course in courses]
        except PydanticValidationError as e:
            raise UpstreamError("Get professor courses failed: unexpected response", e) from e

    async def _get(
        self,
        path: str,
        operation: str,
        params: dict[str, str] | None = None,
    ) -> Any:
        """Perform a GET request and decode the JSON body.

        Args:
            path: Path relative to the catalog base URL.
            operation: Operation name for error messages.
            params: Optional query parameters.

        Returns:
            Decoded JSON body.

        Raises:
            UpstreamError: On transport errors, error statuses or invalid JSON.
        """
        try:
            response = await self._client.get(path, params=params)
            response.raise_for_status()
            return response.json()
        except httpx.HTTPStatusError as e:
            logger.error(
                "Course catalog returned %s for %s",
                e.response.status_code,
                path,
            )
            raise UpstreamError(
                f"{operation} failed with status {e.response.status_code}", e
            ) from e
        except httpx.RequestError as e:
            logger.error("Connection error to course catalog: %s", e)
            raise UpstreamError(f"{operation} failed: course catalog not available", e) from e
        except ValueError as e:
            raise UpstreamError(f"{operation} failed: invalid JSON response", e) from e
