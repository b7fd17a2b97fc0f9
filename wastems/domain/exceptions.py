"""Domain exceptions for the waste-management API.

Route handlers and services raise these instead of building responses;
the exception handlers in wastems.core.exception_handlers map error_code
to an HTTP status and the uniform error envelope.
"""

from typing import Any


class WasteMSException(Exception):
    """Base exception for all application errors.

    Attributes:
        message: Human-readable error description.
        error_code: Machine-readable error code.
        details: Additional error context (e.g. field, resource_id).
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


class ValidationException(WasteMSException):
    """Raised when input fails validation (bad value, missing field, duplicate)."""

    def __init__(
        self,
        message: str,
        field: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """Initialize with message, optional field name and extra details.

        Args:
            message: Description of the validation failure.
            field: Optional field that failed validation.
            details: Optional extra context merged into details.
        """
        merged: dict[str, Any] = {"field": field} if field else {}
        if details:
            merged.update(details)
        super().__init__(message, "VALIDATION_ERROR", merged)


class AuthenticationException(WasteMSException):
    """Raised when the caller cannot be authenticated (token or credentials)."""

    def __init__(self, message: str = "Not authorized") -> None:
        super().__init__(message, "UNAUTHORIZED")


class AuthorizationException(WasteMSException):
    """Raised when an authenticated user's role is not in the allow-list."""

    def __init__(
        self,
        roles: tuple[str, ...] | list[str] | None = None,
        message: str = "Access denied",
    ) -> None:
        """Initialize with the allowed roles (if any).

        Args:
            roles: Roles that would have been accepted.
            message: Message used when roles are not given.
        """
        details: dict[str, Any] = {}
        if roles:
            message = f"Access denied, required roles: {', '.join(roles)}"
            details["required_roles"] = list(roles)
        super().__init__(message, "FORBIDDEN", details)


class ResourceNotFoundException(WasteMSException):
    """Raised when a requested document does not exist."""

    def __init__(self, resource_type: str, resource_id: str) -> None:
        """Initialize with resource type and id.

        Args:
            resource_type: Human label of the resource (e.g. 'Citizen').
            resource_id: The ID that was not found.
        """
        super().__init__(
            f"{resource_type} not found",
            "NOT_FOUND",
            {"resource_type": resource_type, "resource_id": resource_id},
        )


class DocumentStoreException(WasteMSException):
    """Raised when the document store cannot be used (not configured or failed)."""

    def __init__(
        self,
        message: str = "Document store is not available",
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message, "INTERNAL_ERROR", details)
