"""
Domain errors raised by services and turned into JSON envelopes by ``app.main``.

Each error carries the HTTP status class it maps to:

- ValidationError: malformed or out-of-range input (400)
- AccessDeniedError: wrong live-entry access code (401)
- OwnershipError: mutation of an NBA-owned entity (403)
- NotFoundError: unknown team, player, match or stats row (404)
- UpstreamError: the NBA API could not be reached during a sync step (502)
"""


class AppError(Exception):
    """Base class for errors reported to API callers."""

    status_code = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationError(AppError):
    status_code = 400


class AccessDeniedError(AppError):
    status_code = 401


class OwnershipError(AppError):
    status_code = 403


class NotFoundError(AppError):
    status_code = 404

    @classmethod
    def for_entity(cls, entity: str, entity_id: str) -> "NotFoundError":
        return cls(f"{entity} not found: {entity_id}")


class UpstreamError(AppError):
    status_code = 502
