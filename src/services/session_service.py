"""
Orchestration of communication from API router to business logic and persistence layers (and the reverse direction).

Every request follows the same steps: fetch the snapshot, rebuild the GameState, run one transition, publish the
new snapshot, answer with a SessionResponse. The service does not lock anything: the store decides who wins
if two clients write at once.
"""

import logging
from typing import Callable

from src.api.models import (
    ClockTickRequest,
    CreateSessionRequest,
    DeleteSessionRequest,
    GetSessionRequest,
    JoinSessionRequest,
    LegalMovesRequest,
    LegalMovesResponse,
    MoveRequest,
    PlayerRequest,
    PromotionRequest,
    ResignRequest,
    SessionResponse,
)
from src.chess import game
from src.chess.game_state import GameState, PlayerIdentity
from src.chess.moves import numbered_move_log
from src.chess.pieces import Color as DomainColor
from src.chess.pieces import PieceType as DomainPieceType
from src.core.exceptions import InvalidSeatBindingError, RepositoryError
from src.core.models import GameModel
from src.core.shared_types import Color
from src.db.repository import SessionRepository

logger = logging.getLogger(__name__)

Transition = Callable[[GameState], GameState]


class SessionService:
    """Orchestration of layers for a chess session."""

    def __init__(self, repository: SessionRepository) -> None:
        self.repo = repository

    # -- API routes logic ---
    def create_session(self, request: CreateSessionRequest) -> SessionResponse:
        """First player requested to create a new session (under the room code their client picked)."""
        if self.repo.get_session(request.session_id) is not None:
            raise RepositoryError(f"Session {request.session_id!r} already exists.")

        state = game.create_session(
            _identity(request),
            session_id=request.session_id,
            color=DomainColor[request.color.name],
            clock_seconds=request.clock_seconds,
            starting_fen=request.starting_fen,
        )
        stored = self.repo.create_session(state.to_model())
        return self._create_session_response(GameState.from_model(stored))

    def join_session(self, request: JoinSessionRequest) -> SessionResponse:
        """Second player requested to join. Takes the requested seat, or whatever seat is left."""
        identity = _identity(request)
        if request.color is None:
            return self._transition(
                request.session_id, lambda state: game.join_session(state, identity)
            )
        color = DomainColor[request.color.name]
        return self._transition(
            request.session_id, lambda state: game.bind_seat(state, color, identity)
        )

    def get_session(self, request: GetSessionRequest) -> SessionResponse:
        """
        Retrieve current session state.
        ----
        Used by clients that missed an update (or poll instead of subscribing to the store).
        """
        return self._create_session_response(self._fetch_state(request.session_id))

    def legal_moves(self, request: LegalMovesRequest) -> LegalMovesResponse:
        """retrieve set of legal moves."""
        state = self._fetch_state(request.session_id)
        legal_moves = game.legal_moves_for(state, _identity(request))
        return LegalMovesResponse(
            session_id=request.session_id,
            player_name=request.player_name,
            color=Color[state.side_to_move.name],
            legal_moves=legal_moves,
        )

    def make_move(self, request: MoveRequest) -> SessionResponse:
        """Make a move attempt."""
        identity = _identity(request)
        return self._transition(
            request.session_id,
            lambda state: game.submit_move(
                state, identity, request.from_square, request.to_square
            ),
        )

    def choose_promotion(self, request: PromotionRequest) -> SessionResponse:
        """Finish a pawn promotion with the chosen piece."""
        identity = _identity(request)
        piece_type = DomainPieceType[request.promote_to.name]
        return self._transition(
            request.session_id,
            lambda state: game.submit_promotion_choice(state, identity, piece_type),
        )

    def resign(self, request: ResignRequest) -> SessionResponse:
        """A seated player gives up. Spectators cannot resign on someone's behalf."""

        def _resign(state: GameState) -> GameState:
            color = game.player_color(state, request.player_id)
            if color is None:
                raise InvalidSeatBindingError(
                    f"Player {request.player_name} has no seat in session {request.session_id!r}."
                )
            return game.resign(state, color)

        return self._transition(request.session_id, _resign)

    def tick_clock(self, request: ClockTickRequest) -> SessionResponse:
        """Called by the host's scheduler: run the clock of the side to move."""
        return self._transition(
            request.session_id,
            lambda state: game.advance_clock(state, request.elapsed_seconds),
        )

    def delete_session(self, request: DeleteSessionRequest) -> None:
        """Handle a request to delete a session record."""
        self.repo.delete_session(request.session_id)

    # -- Internal helpers --
    def _transition(self, session_id: str, transition: Transition) -> SessionResponse:
        """fetch -> transition -> publish. A failing transition raises before anything gets written."""
        state = self._fetch_state(session_id)
        new_state = transition(state)
        if new_state != state:
            self._publish(new_state.to_model())
        return self._create_session_response(new_state)

    def _publish(self, model: GameModel) -> None:
        logger.debug("Publishing session %s (status: %s)", model.session_id, model.status)
        if self.repo.update_session(model) is None:
            raise RepositoryError(f"Session with {model.session_id=} not found.")

    def _fetch_state(self, session_id: str) -> GameState:
        """Attempt to find the session in the repository and raise error if it fails."""
        game_model = self.repo.get_session(session_id)
        if game_model is None:
            raise RepositoryError(f"Session with {session_id=} not found.")
        return GameState.from_model(game_model)

    def _create_session_response(self, state: GameState) -> SessionResponse:
        """Convert a GameState into a SessionResponse."""
        model = state.to_model()
        return SessionResponse(
            session_id=model.session_id,
            players=model.players,
            status=model.status,
            winner=model.winner,
            fen_state=model.current_fen,
            starting_state=state.starting_fen,
            side_to_move=Color[state.side_to_move.name],
            is_check=model.is_check,
            promotion_square=model.promotion_square,
            clocks=model.clocks,
            move_history=model.moves,
            numbered_moves=numbered_move_log(model.moves),
        )


def _identity(request: PlayerRequest) -> PlayerIdentity:
    return PlayerIdentity(id=request.player_id, name=request.player_name)
