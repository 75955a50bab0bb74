"""Wiring for whoever hosts the game (a web framework, a websocket relay, a CLI, ...)"""

import logging
from contextlib import contextmanager
from typing import Iterator

from src.core.config import get_settings
from src.core.logging_setup import setup_logging
from src.db.database import get_db, init_db
from src.db.sql_repository import SQLSessionRepository
from src.services.session_service import SessionService

logger = logging.getLogger(__name__)


def startup() -> None:
    """Call once when the host process starts: logging first, then make sure the tables exist."""
    setup_logging()
    init_db()
    logger.info("Chess duel ready (store: %s)", get_settings().database_url)


@contextmanager
def session_service() -> Iterator[SessionService]:
    """A SessionService on its own database session. The session is closed when the block ends."""
    with contextmanager(get_db)() as db:
        yield SessionService(SQLSessionRepository(db))
