from __future__ import annotations

from enum import Enum

AUTH_WALL_MARKERS = ("session expired", "sign in", "sign-in", "login")


class TraversalError(RuntimeError):
    """Base error for failures while traversing an authenticated resource."""

    def __init__(self, message: str, *, url: str | None = None):
        super().__init__(message)
        self.url = url


class SessionNotFoundError(TraversalError):
    """Raised when no persistent browser profile exists yet."""


class ErrorKind(str, Enum):
    SESSION_EXPIRED = "session_expired"
    OTHER = "other"


def classify_error(error: BaseException) -> ErrorKind:
    """Guess whether a traversal failure was caused by an authentication wall.

    This is a message heuristic: any failure whose text mentions an expired
    session, a sign-in prompt or a login redirect counts as expiry.
    """
    message = str(error).lower()
    if any(marker in message for marker in AUTH_WALL_MARKERS):
        return ErrorKind.SESSION_EXPIRED
    return ErrorKind.OTHER
