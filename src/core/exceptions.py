"""
Custom exceptions shared by all layers.

Everything derives from GameError, so the service layer (or whoever hosts the game) can catch a single type.
None of these are fatal: the state a transition was called with is immutable, so it is still valid after the error.

NOTE: these deliberately do NOT derive from ValueError. Pydantic wraps ValueErrors raised inside validators into
a ValidationError, and we want InvalidRequestError to reach the caller as is.
"""

from typing import Any, Optional


class GameError(Exception):
    """Base class for all expected (recoverable) errors."""


class IllegalMoveError(GameError):
    """The move does not pass the legality checks. Carries the reason if it is known."""

    def __init__(self, message: str, reason: Optional[Any] = None) -> None:
        super().__init__(message)
        self.reason = reason


class InvalidSeatBindingError(GameError):
    """Seat already occupied, or the action was attempted by someone not sitting in the right seat."""


class ActionNotPermittedInStateError(GameError):
    """The session's status (or pending promotion) does not allow this action."""


class GameStateError(GameError):
    """A snapshot could not be turned into a valid game state."""


class InvalidFENError(GameError):
    """String cannot be interpreted as FEN."""


class InvalidRequestError(GameError):
    """Request data failed validation at the boundary."""


class RepositoryError(GameError):
    """Session not found (or cannot be stored) in the repository."""
