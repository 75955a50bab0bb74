"""Implementation of (Session)Repository using SQLAlchemy"""

import logging

from sqlalchemy import select
from sqlalchemy.orm import Session

from src.core.exceptions import RepositoryError
from src.core.models import GameModel
from src.db.schema import DBSession

logger = logging.getLogger(__name__)


class SQLSessionRepository:
    """Data stored using SQL / methods implemented using SQLAlchemy"""

    def __init__(self, db_session: Session) -> None:
        self.db = db_session

    def get_session(self, session_id: str) -> GameModel | None:
        """Get session by ID, if record exists."""
        session_db = self._fetch_session(session_id)
        if session_db:
            return self._to_model(session_db)
        return None

    def create_session(self, game: GameModel) -> GameModel:
        """Store a new session under `game.session_id` and return the stored data."""
        if self._fetch_session(game.session_id) is not None:
            raise RepositoryError(f"Session {game.session_id!r} already exists.")

        session_db = DBSession(id=game.session_id)
        self._copy_into(session_db, game)
        self.db.add(session_db)
        self.db.commit()
        self.db.refresh(session_db)
        logger.debug("Stored new session %s", game.session_id)
        return self._to_model(session_db)

    def update_session(self, game: GameModel) -> GameModel | None:
        """Replace the snapshot of an existing session (last writer wins)."""
        session_db = self._fetch_session(game.session_id)
        if not session_db:
            return None
        self._copy_into(session_db, game)
        self.db.commit()
        self.db.refresh(session_db)
        return self._to_model(session_db)

    def delete_session(self, session_id: str) -> GameModel | None:
        """Remove a session's record."""
        session_db = self._fetch_session(session_id)
        if not session_db:
            return None
        game_model = self._to_model(session_db)
        self.db.delete(session_db)
        self.db.commit()
        return game_model

    def _fetch_session(self, session_id: str) -> DBSession | None:
        query = select(DBSession).where(DBSession.id == session_id)
        return self.db.scalar(query)

    def _copy_into(self, session_db: DBSession, game: GameModel) -> None:
        """Write every field of the snapshot onto the ORM object (JSON columns get fresh containers, so changes are detected)"""
        session_db.current_fen = game.current_fen
        session_db.starting_fen = game.starting_fen
        session_db.moves = list(game.moves)
        session_db.players = {color: dict(info) for color, info in game.players.items()}
        session_db.clocks = dict(game.clocks)
        session_db.status = game.status
        session_db.winner = game.winner
        session_db.promotion_square = game.promotion_square
        session_db.pending_move = game.pending_move
        session_db.is_check = game.is_check

    def _to_model(self, session_db: DBSession) -> GameModel:
        """Convert SQLAlchemy model to data transfer model."""
        return GameModel(
            session_id=session_db.id,
            current_fen=session_db.current_fen,
            moves=list(session_db.moves),
            players={color: dict(info) for color, info in session_db.players.items()},
            status=session_db.status,
            clocks=dict(session_db.clocks),
            winner=session_db.winner,
            promotion_square=session_db.promotion_square,
            is_check=session_db.is_check,
            pending_move=session_db.pending_move,
            starting_fen=session_db.starting_fen,
        )
