"""
Exception types shared by the service and API layers.

Each API-facing error carries the HTTP status it maps to; the handlers in
``novelcraft.main`` turn them into the JSON response envelope.
"""

from fastapi import status


class NovelCraftError(Exception):
    """Base class for errors that are reported to API clients."""

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_message: str = "Internal server error"

    def __init__(self, message: str | None = None, error: str | None = None):
        self.message = message or self.default_message
        self.error = error
        super().__init__(self.message)


class ValidationError(NovelCraftError):
    """Missing or malformed input."""

    status_code = status.HTTP_400_BAD_REQUEST
    default_message = "Invalid request"


class AuthenticationError(NovelCraftError):
    """Missing, invalid or expired credentials."""

    status_code = status.HTTP_401_UNAUTHORIZED
    default_message = "Not authenticated"


class PermissionDeniedError(NovelCraftError):
    """The caller does not own the resource."""

    status_code = status.HTTP_403_FORBIDDEN
    default_message = "Forbidden"


class NotFoundError(NovelCraftError):
    status_code = status.HTTP_404_NOT_FOUND
    default_message = "Not found"


class ConflictError(NovelCraftError):
    """Uniqueness conflict, e.g. a duplicate username."""

    status_code = status.HTTP_409_CONFLICT
    default_message = "Conflict"


class RateLimitExceededError(NovelCraftError):
    status_code = status.HTTP_429_TOO_MANY_REQUESTS
    default_message = "Too many attempts"

    def __init__(self, retry_after: int, message: str | None = None):
        self.retry_after = retry_after
        super().__init__(
            message or f"Too many login attempts, retry in {retry_after} seconds"
        )


class PasskeyNotImplementedError(NovelCraftError):
    """Passkey (WebAuthn) verification is not available yet."""

    status_code = status.HTTP_501_NOT_IMPLEMENTED
    default_message = "Passkey verification is not available yet"


class RowNotFoundError(LookupError):
    """A write targeted a row that does not exist (or is soft-deleted)."""

    def __init__(self, table: str, row_id):
        self.table = table
        self.row_id = row_id
        super().__init__(f"{table} row {row_id} not found")
