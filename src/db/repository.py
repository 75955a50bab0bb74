"""Protocol repository: the shared store the sessions get published to (SQLAlchemy below, could be anything real-time)"""

from typing import Protocol

from src.core.models import GameModel


class SessionRepository(Protocol):
    """Persistence layer orchestration. Sessions are keyed by their (opaque) session id / room code."""

    def get_session(self, session_id: str) -> GameModel | None:
        """Get session by ID, if record exists."""
        ...

    def create_session(self, game: GameModel) -> GameModel:
        """Store a new session under `game.session_id` and return the stored data."""
        ...

    def update_session(self, game: GameModel) -> GameModel | None:
        """Replace the snapshot of an existing session (last writer wins)."""
        ...

    def delete_session(self, session_id: str) -> GameModel | None:
        """Remove a session's record."""
        ...
