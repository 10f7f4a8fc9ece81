"""
API Exception Taxonomy

Every expected failure in the API is raised as a subclass of APIError.
The exception handlers registered in main.create_app() turn them into the
uniform failure envelope:

    {"success": false, "message": "...", "errors": [{"field": ..., "message": ...}]}

Kinds:
- ValidationError: field-level problems with the request (400)
- AuthenticationError: missing, invalid or expired token; bad credentials (401)
- AuthorizationError: the identity exists but is deactivated (401)
- NotFoundError: the addressed resource does not exist (404)
- ConflictError: a unique field (e-mail, ISBN) is already taken (409)
- OAuthError: the external provider handshake failed (400)
- ProviderNotConfiguredError: the external provider is not set up (501)
"""

from typing import Any

from fastapi import status


class APIError(Exception):
    """
    Base class for all API errors.

    Attributes:
        message: Human-readable description returned to the client
        status_code: HTTP status used for the response
        errors: Optional list of {"field", "message"} entries
        extra: Optional additional top-level envelope keys
    """

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_message: str = "An error occurred"

    def __init__(
        self,
        message: str | None = None,
        errors: list[dict[str, str]] | None = None,
        extra: dict[str, Any] | None = None,
    ) -> None:
        self.message = message or self.default_message
        self.errors = errors or []
        self.extra = extra or {}
        super().__init__(self.message)

    def to_envelope(self) -> dict[str, Any]:
        """Render the failure envelope for this error."""
        body: dict[str, Any] = {"success": False, "message": self.message}
        if self.errors:
            body["errors"] = self.errors
        body.update(self.extra)
        return body


class ValidationError(APIError):
    """Raised when a payload, query string or path parameter fails its ruleset."""

    status_code = status.HTTP_400_BAD_REQUEST
    default_message = "Validation failed"


class AuthenticationError(APIError):
    """Raised when a request cannot be tied to an identity."""

    status_code = status.HTTP_401_UNAUTHORIZED
    default_message = "Authentication failed"


class AuthorizationError(APIError):
    """Raised when the resolved identity is not allowed to proceed."""

    status_code = status.HTTP_401_UNAUTHORIZED
    default_message = "Account has been deactivated. Please contact support."


class NotFoundError(APIError):
    status_code = status.HTTP_404_NOT_FOUND
    default_message = "Resource not found"


class ConflictError(APIError):
    status_code = status.HTTP_409_CONFLICT
    default_message = "Resource already exists"


class OAuthError(APIError):
    status_code = status.HTTP_400_BAD_REQUEST
    default_message = "OAuth authentication failed"


class ProviderNotConfiguredError(APIError):
    status_code = status.HTTP_501_NOT_IMPLEMENTED
    default_message = "Google OAuth not configured"
