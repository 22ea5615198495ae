"""
Domain-specific exceptions for the GEAC API.

These exceptions are mapped to HTTP status codes by the exception
handlers registered in ``geac_api.main``. Storage faults are not wrapped:
they reach the catch-all handler unchanged.
"""

from typing import Any


class GeacError(Exception):
    """Base exception for all GEAC domain errors."""

    def __init__(self, message: str, details: dict[str, Any] | None = None):
        self.message = message
        self.details = details or {}
        super().__init__(self.message)


class NotFoundError(GeacError):
    """
    Raised when a requested resource does not exist.

    HTTP Status: 404 Not Found
    """

    pass


class UserNotFoundError(NotFoundError):
    """
    Raised by the principal loader when no user has the given username.

    The authentication layer translates this into a failed login.
    """

    def __init__(self, username: str):
        super().__init__(f"User '{username}' not found", details={"username": username})
        self.username = username


# HTTP Status Code Mapping
ERROR_STATUS_MAP: dict[type[GeacError], int] = {
    NotFoundError: 404,
}


def get_status_code(error: Exception) -> int:
    """
    Get the HTTP status code for a given exception.

    Subclasses inherit the status of the nearest mapped ancestor.

    Args:
        error: The exception instance

    Returns:
        HTTP status code (defaults to 500 for unknown errors)
    """
    for cls in type(error).__mro__:
        if cls in ERROR_STATUS_MAP:
            return ERROR_STATUS_MAP[cls]
    return 500
