"""Error taxonomy shared by the boundary, fare and compatibility services."""

from __future__ import annotations


class ZoneEngineError(Exception):
    """Base class for every recoverable engine failure."""


class ValidationError(ZoneEngineError, ValueError):
    """Input rejected locally before any repository call."""


class InvalidStateError(ValidationError):
    """Command issued in a drawing mode that does not accept it."""


class NotFoundError(ZoneEngineError, LookupError):
    """Referenced boundary, point or batch does not exist."""


class PersistenceError(ZoneEngineError, RuntimeError):
    """Wraps a failure reported by a repository collaborator."""

    def __init__(self, message: str, *, cause: BaseException | None = None) -> None:
        super().__init__(message)
        self.cause = cause
