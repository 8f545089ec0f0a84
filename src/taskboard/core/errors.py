"""API error taxonomy.

Every error a request can end in maps to one HTTP status and one stable
error code.  The server renders all of them as ``{"error": message}``.
"""

from __future__ import annotations


class ApiError(Exception):
    """Base class for errors that terminate a request with a JSON error body."""

    status: int = 500
    code: str = "INTERNAL_ERROR"

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message

    def to_payload(self) -> dict:
        return {"error": self.message}


class ValidationError(ApiError):
    """A required field is missing or has the wrong type."""

    status = 400
    code = "VALIDATION_ERROR"


class MalformedBodyError(ApiError):
    """The request body could not be parsed as JSON."""

    status = 400
    code = "BAD_REQUEST"


class NotFoundError(ApiError):
    """A project or task id does not exist."""

    status = 404
    code = "NOT_FOUND"


class RouteNotFoundError(ApiError):
    """The request path matches no known route."""

    status = 404
    code = "ROUTE_NOT_FOUND"


class MethodNotAllowedError(ApiError):
    """The route exists but does not accept the request method."""

    status = 405
    code = "METHOD_NOT_ALLOWED"

    def __init__(self, message: str, allowed: list[str]) -> None:
        super().__init__(message)
        self.allowed = sorted(allowed)


class PayloadTooLargeError(ApiError):
    status = 413
    code = "PAYLOAD_TOO_LARGE"


class StoreBusyError(ApiError):
    """The store lock could not be acquired in time."""

    status = 503
    code = "STORE_BUSY"


class ConfigError(Exception):
    """Raised when environment or CLI configuration is invalid."""
