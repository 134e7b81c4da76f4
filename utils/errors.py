"""
Application error taxonomy.

Every error carries the HTTP status it maps to and a client-safe message;
``api.errors`` renders them as ``{"error": message}``.
"""

from __future__ import annotations


class AppError(Exception):
    status_code: int = 500
    default_message: str = "Server error"

    def __init__(self, message: str | None = None) -> None:
        self.message = message or self.default_message
        super().__init__(self.message)


class ValidationError(AppError):
    status_code = 400
    default_message = "Invalid request"


class ConflictError(AppError):
    # Duplicate usernames are reported as 400, like every other bad input.
    status_code = 400
    default_message = "Username already exists"


class AuthenticationError(AppError):
    status_code = 401
    default_message = "Invalid credentials"


class InvalidTokenError(AuthenticationError):
    status_code = 403
    default_message = "Invalid token"


class NotFoundError(AppError):
    status_code = 404
    default_message = "Not found"


class StoreError(AppError):
    status_code = 500
    default_message = "Database error"
