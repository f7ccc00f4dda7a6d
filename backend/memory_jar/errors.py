# memory_jar/errors.py
from __future__ import annotations


class MemoryJarError(Exception):
    """Base error. Every subclass maps to one HTTP status and a user-facing message."""

    status_code = 500
    default_message = "Internal server error"

    def __init__(self, message: str | None = None):
        self.message = message or self.default_message
        super().__init__(self.message)


class Unauthorized(MemoryJarError):
    status_code = 401
    default_message = "Unauthorized"


class ValidationError(MemoryJarError):
    status_code = 400
    default_message = "Date and mood are required"


class NotFound(MemoryJarError):
    status_code = 404
    default_message = "Memory not found"


class Conflict(MemoryJarError):
    status_code = 409
    default_message = "User already exists"


class PayloadTooLarge(MemoryJarError):
    status_code = 413
    default_message = "Request is too large. Try a smaller photo."


class TransientStoreError(MemoryJarError):
    status_code = 500
    default_message = "Something went wrong saving your memory. Please try again."


_BY_STATUS = {
    cls.status_code: cls
    for cls in (Unauthorized, ValidationError, NotFound, Conflict, PayloadTooLarge)
}


def error_for_status(status_code: int, message: str | None = None) -> MemoryJarError:
    """Rebuild the typed error for an HTTP status (used by the API client)."""
    cls = _BY_STATUS.get(status_code, TransientStoreError)
    return cls(message)
