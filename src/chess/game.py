"""
Game Session State Machine. The entrypoint into the domain layer for the service layer (or any other host).

    waiting --(both seats bound)--> active --(mate / no moves / resign)--> checkmate | stalemate | resigned

Every function here is a pure transition: it takes a GameState and returns the next one, or raises one of the
GameError subclasses and leaves the given state as it was. Publishing the new state is the host's job.
"""

import logging
from dataclasses import replace
from typing import Optional

from src.chess.analysis import legal_moves
from src.chess.applier import apply_move, evaluate_position, resolve_promotion
from src.chess.fen import STARTING_FEN
from src.chess.game_state import Clocks, GameState, PlayerIdentity, Seats
from src.chess.legality import SquareLike
from src.chess.pieces import Color, PieceType
from src.core.config import get_settings
from src.core.exceptions import (
    ActionNotPermittedInStateError,
    InvalidSeatBindingError,
)
from src.core.shared_types import Status

logger = logging.getLogger(__name__)


def create_session(
    identity: PlayerIdentity,
    *,
    session_id: str,
    color: Color = Color.WHITE,
    clock_seconds: Optional[int] = None,
    starting_fen: Optional[str] = None,
) -> GameState:
    """To start a new session with the creating player sitting at the indicated color."""
    seconds = clock_seconds if clock_seconds is not None else get_settings().initial_clock_seconds
    state = GameState.from_fen(
        session_id=session_id,
        fen=starting_fen or STARTING_FEN,
        clocks=Clocks.starting(seconds),
        seats=Seats().with_occupant(color, identity),
    )
    logger.info(
        "Session %s created by %s (%s), waiting for an opponent",
        session_id,
        identity.name,
        color.name.lower(),
    )
    return state


def bind_seat(state: GameState, color: Color, identity: PlayerIdentity) -> GameState:
    """Seat a player. Once both seats are taken, the game starts."""
    if state.status != Status.WAITING:
        raise ActionNotPermittedInStateError(
            f"Cannot join this game. Game is not accepting new players. status: {state.status}"
        )

    occupant = state.seats.occupant(color)
    if occupant is not None:
        raise InvalidSeatBindingError(
            f"The {color.name.lower()} seat is already taken by {occupant.name}."
        )

    if state.seats.color_of(identity.id) is not None:
        raise InvalidSeatBindingError(
            f"Player {identity.name} already has a seat in this game."
        )

    seated = replace(state, seats=state.seats.with_occupant(color, identity))
    # a custom starting position can already be check, mate or stalemate
    next_state = evaluate_position(seated) if seated.seats.is_full else seated
    logger.info(
        "Session %s: %s takes the %s seat (status: %s)",
        state.session_id,
        identity.name,
        color.name.lower(),
        next_state.status.value,
    )
    return next_state


def join_session(state: GameState, identity: PlayerIdentity) -> GameState:
    """Registering the 2nd player to an open game: they get whatever color is left"""
    free_colors = state.seats.free_colors()
    if state.status != Status.WAITING or not free_colors:
        raise ActionNotPermittedInStateError(
            f"Cannot join this game. Game is not accepting new players. status: {state.status}"
        )
    return bind_seat(state, free_colors[0], identity)


def submit_move(
    state: GameState,
    identity: PlayerIdentity,
    from_square: SquareLike,
    to_square: SquareLike,
) -> GameState:
    """
    Attempt to make a move
    -----

    1. the game must be in progress, and not waiting for a promotion choice
    2. it must be your turn (you sit in the seat of the side to move)
    3. the move must be legal (IllegalMoveError otherwise)
    """
    _assert_active(state)
    if state.pending_promotion is not None:
        raise ActionNotPermittedInStateError(
            f"Waiting for the promotion choice on {state.promotion_pending}."
        )
    _assert_your_turn(state, identity)
    return apply_move(state, from_square, to_square)


def submit_promotion_choice(
    state: GameState, identity: PlayerIdentity, piece_type: PieceType
) -> GameState:
    """The player whose pawn reached the last rank picks what it becomes"""
    if state.pending_promotion is None:
        raise ActionNotPermittedInStateError("There is no pawn waiting to be promoted.")
    _assert_your_turn(state, identity)
    return resolve_promotion(state, piece_type)


def resign(state: GameState, color: Color) -> GameState:
    """The player of `color` gives up. The other color wins."""
    _assert_active(state)
    logger.info("Session %s: %s resigns", state.session_id, color.name.lower())
    return replace(
        state,
        status=Status.RESIGNED,
        winner=color.opponent,
        pending_promotion=None,
    )


def advance_clock(state: GameState, elapsed_seconds: int) -> GameState:
    """
    Let `elapsed_seconds` run off the clock of the side to move.

    The host's own scheduler calls this (typically once a second). Nothing happens unless the game is active.
    NOTE: the clock stops at zero, but running out of time does not end the game.
    """
    if elapsed_seconds < 0:
        raise ValueError(f"Time cannot run backwards: {elapsed_seconds=}")
    if state.status != Status.ACTIVE or elapsed_seconds == 0:
        return state

    side = state.side_to_move
    remaining = state.clocks.remaining(side) - elapsed_seconds
    return replace(state, clocks=state.clocks.with_remaining(side, remaining))


# --- QUERIES ---
def player_color(state: GameState, player_id: str) -> Optional[Color]:
    """Which color `player_id` plays. None means: spectator"""
    return state.seats.color_of(player_id)


def can_make_move(state: GameState, player_id: str) -> bool:
    """Active game, your seat, your turn, and no promotion choice outstanding"""
    return (
        state.status == Status.ACTIVE
        and state.pending_promotion is None
        and player_color(state, player_id) == state.side_to_move
    )


def legal_moves_for(state: GameState, identity: PlayerIdentity) -> list[str]:
    """
    Legal moves (as "e2-e4" strings) for the player to move. Can be used to highlight squares in a frontend.
    """
    _assert_active(state)
    _assert_your_turn(state, identity)
    moves = legal_moves(
        state.board,
        state.side_to_move,
        castling_rights=state.castling_rights,
        en_passant_target=state.en_passant_target,
    )
    return [move.to_coordinates() for move in moves]


# -- PRIVATE HELPERS ---
def _assert_active(state: GameState) -> None:
    if state.is_terminal:
        raise ActionNotPermittedInStateError(f"Game is over. status: {state.status}")
    if state.status != Status.ACTIVE:
        raise ActionNotPermittedInStateError(
            f"Game has not started yet. status: {state.status}"
        )


def _assert_your_turn(state: GameState, identity: PlayerIdentity) -> None:
    """You must sit in the seat of the side to move."""
    player_to_move = state.seats.occupant(state.side_to_move)
    if player_to_move is None or player_to_move.id != identity.id:
        waiting_for = player_to_move.name if player_to_move else "nobody"
        raise InvalidSeatBindingError(
            f"It is not your turn. Waiting for player {waiting_for} to make a move first."
        )
