"""
Pytest will auto-discover / import this file called 'conftest.py'.
This file defines fixtures/variables required for testing multiple layers.
"""

from typing import Callable, Generator

import pytest
from sqlalchemy import StaticPool, create_engine
from sqlalchemy.orm import Session, sessionmaker

from src.chess.fen import FENState
from src.chess.game_state import Clocks, GameState, PlayerIdentity, Seats
from src.core.shared_types import Status
from src.db.schema import Base

# Setup an in-memory SQLite database for testing
DATABASE_URL = "sqlite:///:memory:"
engine = create_engine(
    DATABASE_URL,
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)

TestingSessionLocal = sessionmaker(autoflush=False, bind=engine)

WHITE_PLAYER = PlayerIdentity(id="player-white", name="Wilhelmina White")
BLACK_PLAYER = PlayerIdentity(id="player-black", name="Barnaby Black")


@pytest.fixture
def db_session_repo() -> Generator[Session, None, None]:
    """Connection to a test database. Tables are removed at teardown to make unit tests of repository independent of each other."""
    Base.metadata.create_all(bind=engine)
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        Base.metadata.drop_all(bind=engine)
        db.close()


@pytest.fixture
def white_player() -> PlayerIdentity:
    return WHITE_PLAYER


@pytest.fixture
def black_player() -> PlayerIdentity:
    return BLACK_PLAYER


@pytest.fixture
def active_state_from_fen() -> Callable[[str], GameState]:
    """Call the inner function with a full FEN string: both seats taken, game in progress, 10 minutes on the clock."""

    def _create_state(fen: str) -> GameState:
        position = FENState.from_fen(fen)
        return GameState(
            session_id="test-room",
            board=position.board,
            side_to_move=position.color_to_move,
            castling_rights=position.castling_rights,
            en_passant_target=position.en_passant_square,
            half_move_clock=position.half_move_clock,
            full_move_number=position.num_turns,
            clocks=Clocks.starting(600),
            seats=Seats(white=WHITE_PLAYER, black=BLACK_PLAYER),
            status=Status.ACTIVE,
            starting_fen=fen,
        )

    return _create_state
