# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Error taxonomy for the enrollment domain.

Errors are raised where they are detected and travel unchanged up to
the EnrollmentController, which is the only place they are translated
into result status codes.
"""


class EnrollmentError(Exception):
    """Base exception for enrollment domain errors.

    Attributes:
        message: Human-readable error description.
    """

    def __init__(self, message: str) -> None:
        """Initialize the error.

        Args:
            message: Human-readable error description.
        """
        super().__init__(message)
        self.message = message


class ValidationError(EnrollmentError):
    """Raised when input is malformed or out of range."""

    pass


class ShapeError(ValidationError):
    """Raised when grades and weights cannot be combined."""

    pass


class NotFoundError(EnrollmentError):
    """Raised when the target enrollment is absent or inactive."""

    pass


class AuthorizationError(EnrollmentError):
    """Raised when a principal lacks the capability for an operation."""

    pass


class UpstreamError(EnrollmentError):
    """Raised when the course catalog service is unreachable or failed.

    Attributes:
        message: Human-readable error description.
        original_error: The underlying transport or service error.
    """

    def __init__(self, message: str, original_error: Exception | None = None) -> None:
        """Initialize the upstream error.

        Args:
            message: Human-readable error description.
            original_error: The exception that caused this error.
        """
        super().__init__(message)
        self.original_error = original_error

    def __str__(self) -> str:
        """Return string representation of the error."""
        if self.original_error:
            return f"{self.message}: {self.original_error}"
        return self.message


class InvalidConfigError(EnrollmentError):
    """Raised when the catalog returns unusable evaluation weights."""

    pass


class StorageError(EnrollmentError):
    """Raised when the enrollment store fails unexpectedly.

    Attributes:
        message: Human-readable error description.
        original_error: The underlying persistence error.
    """

    def __init__(self, message: str, original_error: Exception | None = None) -> None:
        """Initialize the storage error.

        Args:
            message: Human-readable error description.
            original_error: The exception that caused this error.
        """
        super().__init__(message)
        self.original_error = original_error

    def __str__(self) -> str:
        """Return string representation of the error."""
        if self.original_error:
            return f"{self.message}: {self.original_error}"
        return self.message
