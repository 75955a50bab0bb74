"""Unit tests for src/services/dependencies.py"""

from typing import Generator
from unittest.mock import patch

from sqlalchemy.orm import Session

from src.core.shared_types import Status
from src.services.dependencies import session_service, startup
from src.services.session_service import CreateSessionRequest, GetSessionRequest


def test_startup_configures_logging_and_tables() -> None:
    with (
        patch("src.services.dependencies.setup_logging") as mock_logging,
        patch("src.services.dependencies.init_db") as mock_init_db,
    ):
        startup()
    mock_logging.assert_called_once()
    mock_init_db.assert_called_once()


def test_session_service_uses_database(db_session_repo: Session) -> None:
    """Sessions created through one service are visible to the next one"""

    def _get_test_db() -> Generator[Session, None, None]:
        yield db_session_repo

    with patch("src.services.dependencies.get_db", _get_test_db):
        with session_service() as service:
            service.create_session(
                CreateSessionRequest(session_id="room-7", player_id="p1", player_name="Ada")
            )
        with session_service() as service:
            response = service.get_session(GetSessionRequest(session_id="room-7"))

    assert response.status == Status.WAITING
    assert response.players == {"white": {"id": "p1", "name": "Ada"}}
