"""
Error taxonomy for the auth service.

Every error carries the HTTP status it maps to; the exception handler in
``api.middleware`` renders them as ``{"error": message}``.
"""

from __future__ import annotations

from fastapi import status


class AuthError(Exception):
    status_code: int = status.HTTP_400_BAD_REQUEST
    default_message: str = "Request failed"

    def __init__(self, message: str | None = None) -> None:
        self.message = message or self.default_message
        super().__init__(self.message)


class ValidationError(AuthError):
    """Missing or malformed input."""

    status_code = status.HTTP_400_BAD_REQUEST
    default_message = "Invalid request"


class ConflictError(AuthError):
    """A username or email uniqueness violation."""

    status_code = status.HTTP_400_BAD_REQUEST
    default_message = "Username or Email already in use"


class UnauthorizedError(AuthError):
    """Missing, invalid or expired token, or rejected credentials."""

    status_code = status.HTTP_401_UNAUTHORIZED
    default_message = "Unauthorized"


class NotFoundError(AuthError):
    status_code = status.HTTP_404_NOT_FOUND
    default_message = "User not found"
