"""Domain exceptions for the edgepurge service.

Only programmer and operator errors are raised. Transport, API and
response-shape failures of a purge are data (see PurgeResponse), never
exceptions that unwind the caller. Presentation layer maps these
exceptions to HTTP responses in exception handlers.
"""

from typing import Any


class EdgePurgeException(Exception):
    """Base exception for all edgepurge errors.

    Attributes:
        message: Human-readable error description.
        error_code: Machine-readable error code.
        details: Additional error context (e.g. field, setting name).
    """

    def __init__(
        self,
        message: str,
        error_code: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """Initialize the exception.

        Args:
            message: Human-readable error description.
            error_code: Optional machine-readable code; defaults to class name.
            details: Optional dict of extra context.
        """
        self.message = message
        self.error_code = error_code or self.__class__.__name__
        self.details = details or {}
        super().__init__(self.message)

    def to_dict(self) -> dict[str, Any]:
        """Return a JSON-serializable representation for API responses."""
        return {
            "error": self.error_code,
            "message": self.message,
            "details": self.details,
        }


class ConfigurationException(EdgePurgeException):
    """Raised on misconfiguration detected before any network attempt.

    Examples: a URL purge without a hostname, or a purge requested with
    no usable request signer. Never retried.
    """

    def __init__(self, message: str, setting: str | None = None) -> None:
        """Initialize with message and optional offending setting name.

        Args:
            message: Description of the misconfiguration.
            setting: Optional settings key that caused it.
        """
        details = {"setting": setting} if setting else {}
        super().__init__(message, "CONFIGURATION_ERROR", details)


class ValidationException(EdgePurgeException):
    """Raised when input validation fails (e.g. unknown purge method)."""

    def __init__(self, message: str, field: str | None = None) -> None:
        """Initialize with message and optional field name.

        Args:
            message: Description of the validation failure.
            field: Optional field or attribute that failed validation.
        """
        details = {"field": field} if field else {}
        super().__init__(message, "VALIDATION_ERROR", details)


class ResourceNotFoundException(EdgePurgeException):
    """Raised when a requested content object does not exist."""

    def __init__(self, resource_type: str, resource_id: str | int) -> None:
        """Initialize with resource type and identifier.

        Args:
            resource_type: Kind of resource (e.g. 'post', 'term').
            resource_id: Identifier that was not found.
        """
        super().__init__(
            f"{resource_type.capitalize()} not found: {resource_id}",
            "RESOURCE_NOT_FOUND",
            {"resource_type": resource_type, "resource_id": resource_id},
        )
