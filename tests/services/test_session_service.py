"""Unit tests for src/services/session_service.py"""

from typing import Generator

import pytest

from src.core.exceptions import (
    ActionNotPermittedInStateError,
    GameError,
    IllegalMoveError,
    InvalidSeatBindingError,
    RepositoryError,
)
from src.core.models import GameModel
from src.core.shared_types import Color, PieceType, Status
from src.services.session_service import (
    ClockTickRequest,
    CreateSessionRequest,
    DeleteSessionRequest,
    GetSessionRequest,
    JoinSessionRequest,
    LegalMovesRequest,
    LegalMovesResponse,
    MoveRequest,
    PromotionRequest,
    ResignRequest,
    SessionResponse,
    SessionService,
)

# --- MOCK DEPENDENCIES ----
SESSION_ID = "room-42"
WHITE = {"player_id": "player-white", "player_name": "Mocker M. Mockerson"}
BLACK = {"player_id": "player-black", "player_name": "Mimi Mockerson"}
PROMOTION_FEN = "k7/4P3/8/8/8/8/8/4K3 w - - 0 1"


class MockRepository:
    """Mock the SessionRepository using a dictionary of game models. Counts the writes."""

    def __init__(self) -> None:
        self._sessions: dict[str, GameModel] = {}
        self.num_updates = 0

    def create_session(self, game: GameModel) -> GameModel:
        """Store new session and return the stored data."""
        self._sessions[game.session_id] = game
        return game

    def get_session(self, session_id: str) -> GameModel | None:
        """Get session by ID, if record exists."""
        return self._sessions.get(session_id)

    def update_session(self, game: GameModel) -> GameModel | None:
        """Replace existing record."""
        if game.session_id not in self._sessions:
            return None
        self.num_updates += 1
        self._sessions[game.session_id] = game
        return game

    def delete_session(self, session_id: str) -> GameModel | None:
        """Remove a session's record."""
        return self._sessions.pop(session_id, None)

    def clear(self) -> None:
        """Clear the repository (useful in between tests)"""
        self._sessions.clear()


@pytest.fixture
def mock_repository() -> Generator[MockRepository, None, None]:
    """Ensures to clear the repository between tests"""
    repo = MockRepository()
    try:
        yield repo
    finally:
        repo.clear()


@pytest.fixture
def service(mock_repository: MockRepository) -> SessionService:
    return SessionService(mock_repository)


def start_game(service: SessionService, starting_fen: str | None = None) -> SessionResponse:
    """White creates the session, black joins"""
    service.create_session(
        CreateSessionRequest(
            session_id=SESSION_ID, color=Color.WHITE, starting_fen=starting_fen, **WHITE
        )
    )
    return service.join_session(JoinSessionRequest(session_id=SESSION_ID, **BLACK))


def move(
    service: SessionService, player: dict[str, str], from_square: str, to_square: str
) -> SessionResponse:
    return service.make_move(
        MoveRequest(
            session_id=SESSION_ID, from_square=from_square, to_square=to_square, **player
        )
    )


# --- SERVICE - CREATE NEW SESSION ----
def test_create_a_new_session(service: SessionService, mock_repository: MockRepository) -> None:
    """Check that new session is created, persisted in repo, and return has the appropriate information."""
    response = service.create_session(
        CreateSessionRequest(session_id=SESSION_ID, clock_seconds=180, **WHITE)
    )

    # Check response data
    assert isinstance(response, SessionResponse)
    assert response.session_id == SESSION_ID
    assert response.status == Status.WAITING
    assert response.players == {
        "white": {"id": WHITE["player_id"], "name": WHITE["player_name"]}
    }
    assert response.side_to_move == Color.WHITE
    assert response.clocks == {"white": 180, "black": 180}
    assert response.move_history == []

    # Check persisted data
    stored = mock_repository.get_session(SESSION_ID)
    assert stored is not None
    assert stored.current_fen == response.fen_state
    assert stored.status == Status.WAITING


@pytest.mark.parametrize(
    "starting_fen", [" ".join(["mock"] * 6), "8/8/8/8/8/8/8/² w - - 0 1"]
)
def test_create_with_invalid_fen(service: SessionService, starting_fen: str) -> None:
    """Make sure service propagates the exceptions."""
    request = CreateSessionRequest(session_id=SESSION_ID, starting_fen=starting_fen, **WHITE)

    # Test any top-level custom exception is raised (specific exception types are responsibility of other layers)
    with pytest.raises(GameError):
        _ = service.create_session(request)


def test_create_existing_room(service: SessionService) -> None:
    service.create_session(CreateSessionRequest(session_id=SESSION_ID, **WHITE))
    with pytest.raises(RepositoryError):
        service.create_session(CreateSessionRequest(session_id=SESSION_ID, **BLACK))


# --- SERVICE - JOIN SESSION ----
def test_second_player_joins(service: SessionService) -> None:
    response = start_game(service)
    assert response.status == Status.ACTIVE
    assert set(response.players) == {"white", "black"}
    assert response.players["black"]["name"] == BLACK["player_name"]


def test_join_specific_seat_taken(service: SessionService) -> None:
    service.create_session(CreateSessionRequest(session_id=SESSION_ID, **WHITE))
    with pytest.raises(InvalidSeatBindingError):
        service.join_session(
            JoinSessionRequest(session_id=SESSION_ID, color=Color.WHITE, **BLACK)
        )


def test_join_unknown_session(service: SessionService) -> None:
    with pytest.raises(RepositoryError):
        service.join_session(JoinSessionRequest(session_id="nowhere", **BLACK))


# --- SERVICE - MOVES ----
def test_make_move(service: SessionService, mock_repository: MockRepository) -> None:
    start_game(service)
    response = move(service, WHITE, "e2", "e4")

    assert response.fen_state == "rnbqkbnr/pppppppp/8/8/4P3/8/PPPP1PPP/RNBQKBNR b KQkq e3 0 1"
    assert response.side_to_move == Color.BLACK
    assert response.move_history == ["e2-e4"]

    response = move(service, BLACK, "e7", "e5")
    assert response.numbered_moves == ["1. e2-e4 e7-e5"]

    # the stored snapshot follows every accepted move
    stored = mock_repository.get_session(SESSION_ID)
    assert stored is not None
    assert stored.moves == ["e2-e4", "e7-e5"]


def test_move_before_opponent_arrives(service: SessionService) -> None:
    service.create_session(CreateSessionRequest(session_id=SESSION_ID, **WHITE))
    with pytest.raises(ActionNotPermittedInStateError):
        move(service, WHITE, "e2", "e4")


def test_rejected_move_is_not_published(
    service: SessionService, mock_repository: MockRepository
) -> None:
    start_game(service)
    writes_before = mock_repository.num_updates

    with pytest.raises(IllegalMoveError):
        move(service, WHITE, "e2", "e5")
    with pytest.raises(InvalidSeatBindingError):
        move(service, BLACK, "e7", "e5")

    assert mock_repository.num_updates == writes_before
    assert mock_repository.get_session(SESSION_ID).moves == []  # type: ignore[union-attr]


def test_checkmate_through_service(service: SessionService) -> None:
    start_game(service)
    move(service, WHITE, "f2", "f3")
    move(service, BLACK, "e7", "e5")
    move(service, WHITE, "g2", "g4")
    response = move(service, BLACK, "d8", "h4")
    assert response.status == Status.CHECKMATE
    assert response.winner == "black"
    assert response.is_check


def test_legal_moves(service: SessionService) -> None:
    start_game(service)
    response = service.legal_moves(LegalMovesRequest(session_id=SESSION_ID, **WHITE))
    assert isinstance(response, LegalMovesResponse)
    assert response.color == Color.WHITE
    assert len(response.legal_moves) == 20


# --- SERVICE - PROMOTION ----
def test_promotion(service: SessionService) -> None:
    start_game(service, starting_fen=PROMOTION_FEN)
    response = move(service, WHITE, "e7", "e8")
    assert response.promotion_square == "e8"
    assert response.side_to_move == Color.WHITE

    response = service.choose_promotion(
        PromotionRequest(session_id=SESSION_ID, promote_to=PieceType.QUEEN, **WHITE)
    )
    assert response.promotion_square is None
    assert response.fen_state.startswith("k3Q3/")
    assert response.move_history == ["e7-e8"]
    assert response.side_to_move == Color.BLACK


# --- SERVICE - RESIGN / CLOCK / DELETE ----
def test_resign(service: SessionService) -> None:
    start_game(service)
    response = service.resign(ResignRequest(session_id=SESSION_ID, **BLACK))
    assert response.status == Status.RESIGNED
    assert response.winner == "white"


def test_spectator_cannot_resign(service: SessionService) -> None:
    start_game(service)
    with pytest.raises(InvalidSeatBindingError):
        service.resign(
            ResignRequest(session_id=SESSION_ID, player_id="someone", player_name="Someone")
        )


def test_tick_clock(service: SessionService, mock_repository: MockRepository) -> None:
    service.create_session(CreateSessionRequest(session_id=SESSION_ID, clock_seconds=60, **WHITE))
    # no clock while waiting, and nothing gets published
    response = service.tick_clock(ClockTickRequest(session_id=SESSION_ID, elapsed_seconds=5))
    assert response.clocks == {"white": 60, "black": 60}
    assert mock_repository.num_updates == 0

    service.join_session(JoinSessionRequest(session_id=SESSION_ID, **BLACK))
    response = service.tick_clock(ClockTickRequest(session_id=SESSION_ID, elapsed_seconds=5))
    assert response.clocks == {"white": 55, "black": 60}


def test_get_and_delete_session(service: SessionService) -> None:
    start_game(service)
    response = service.get_session(GetSessionRequest(session_id=SESSION_ID))
    assert response.status == Status.ACTIVE

    service.delete_session(DeleteSessionRequest(session_id=SESSION_ID))
    with pytest.raises(RepositoryError):
        service.get_session(GetSessionRequest(session_id=SESSION_ID))
