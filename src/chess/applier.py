"""
Move Applier: turns a legal move into the next GameState.
----

1. update the board (castling: the rook comes along, en passant: the taken pawn disappears)
2. revoke castling rights if needed
3. set / clear the en passant target
4. update the half move clock
5. pawn reaching the last rank? --> stop here, wait for the promotion choice (`resolve_promotion()`)
6. shared tail: full move counter, flip the side to move, log the move, check for the end of the game
"""

import logging
from dataclasses import replace
from typing import Optional

from src.chess.analysis import is_checkmate, is_in_check, is_stalemate
from src.chess.castling import (
    CASTLING_RULES,
    KING_HOME_SQUARES,
    CastlingDirection,
    CastlingRights,
)
from src.chess.game_state import GameState
from src.chess.legality import SquareLike, check_move, simulate_move
from src.chess.moves import (
    Move,
    is_double_pawn_push,
    is_en_passant_capture,
    is_promotion_square,
    skipped_square,
)
from src.chess.pieces import PROMOTION_OPTIONS, Color, PieceType
from src.chess.square import Square
from src.core.exceptions import ActionNotPermittedInStateError, IllegalMoveError
from src.core.shared_types import Status

logger = logging.getLogger(__name__)


def apply_move(state: GameState, from_square: SquareLike, to_square: SquareLike) -> GameState:
    """
    Make the move for `state.side_to_move`.

    Raises IllegalMoveError if the move is not legal (checking legality first is the caller's job,
    but applying an illegal move must never produce a corrupt state).
    """
    rejection = check_move(
        state.board,
        from_square,
        to_square,
        state.side_to_move,
        castling_rights=state.castling_rights,
        en_passant_target=state.en_passant_target,
    )
    if rejection is not None:
        raise IllegalMoveError(
            f"Move not allowed: {from_square}-{to_square} ({rejection.value})",
            reason=rejection,
        )

    # check_move() accepted both, so they parse
    origin = Square.parse(from_square)
    destination = Square.parse(to_square)
    assert origin is not None and destination is not None

    moving_piece = state.board.piece_at(origin)
    assert moving_piece is not None
    is_capture = state.board.piece_at(destination) is not None or is_en_passant_capture(
        state.board, origin, destination, state.en_passant_target
    )

    new_board = simulate_move(state.board, origin, destination, state.en_passant_target)
    new_en_passant_target = (
        skipped_square(origin, destination)
        if is_double_pawn_push(moving_piece, origin, destination)
        else None
    )
    half_move_clock = (
        0 if moving_piece.type == PieceType.PAWN or is_capture else state.half_move_clock + 1
    )

    move = Move(origin, destination)
    next_state = replace(
        state,
        board=new_board,
        castling_rights=revoke_castling_rights(state.castling_rights, origin, destination),
        en_passant_target=new_en_passant_target,
        half_move_clock=half_move_clock,
    )

    if is_promotion_square(moving_piece, destination):
        logger.debug(
            "Session %s: %s awaits promotion choice", state.session_id, move.to_coordinates()
        )
        # still the mover's turn, and a legal move never leaves the mover in check
        return replace(next_state, pending_promotion=move, is_check=False)

    return _complete_move(next_state, move)


def resolve_promotion(state: GameState, piece_type: PieceType) -> GameState:
    """Second phase of a promotion: put the chosen piece on the pawn's square, then finish the move"""
    pending = state.pending_promotion
    if pending is None:
        raise ActionNotPermittedInStateError("There is no pawn waiting to be promoted.")

    if piece_type not in PROMOTION_OPTIONS:
        raise IllegalMoveError(
            f"A pawn cannot promote into a {piece_type.name.lower()}. "
            f"Pick one from {','.join(option.name.lower() for option in PROMOTION_OPTIONS)}"
        )

    pawn = state.board.piece_at(pending.to_square)
    assert pawn is not None
    promoted_piece = pawn.promoted_to(piece_type)
    new_board = state.board.with_piece(pending.to_square, promoted_piece)
    promoted_state = replace(state, board=new_board, pending_promotion=None)
    return _complete_move(promoted_state, replace(pending, promote_to=piece_type))


def revoke_castling_rights(
    rights: CastlingRights, from_square: Square, to_square: Square
) -> CastlingRights:
    """
    Checks which rights should get revoked
    ----

    1. Something leaves a king's home square (the king moved, or castled) --> revoke both rights of that color
    2. Something leaves or lands on a rook's corner square (the rook moved, or got captured) --> revoke that direction

    NOTE: once revoked, nothing here can grant a right back.
    """
    for color, king_home in KING_HOME_SQUARES.items():
        if from_square == king_home:
            rights = rights.revoke_all(color)

    for direction in CastlingDirection:
        rook_home = CASTLING_RULES[direction].rook_from
        if rook_home in (from_square, to_square):
            rights = rights.revoke(direction)

    return rights


def evaluate_position(state: GameState) -> GameState:
    """
    Check / checkmate / stalemate for `state.side_to_move`, written into the state.

    Checkmate: the side to move loses. Stalemate: nobody wins. Otherwise the game goes on.
    """
    side = state.side_to_move
    rights = state.castling_rights
    en_passant_target = state.en_passant_target

    status = Status.ACTIVE
    winner: Optional[Color] = None
    if is_checkmate(
        state.board, side, castling_rights=rights, en_passant_target=en_passant_target
    ):
        status, winner = Status.CHECKMATE, side.opponent
    elif is_stalemate(
        state.board, side, castling_rights=rights, en_passant_target=en_passant_target
    ):
        status = Status.STALEMATE

    return replace(
        state, status=status, winner=winner, is_check=is_in_check(state.board, side)
    )


def _complete_move(state: GameState, move: Move) -> GameState:
    """
    Shared tail of a normal move and a resolved promotion.

    NOTE update color to move BEFORE looking for checkmate/stalemate: the side that has to answer the move is the one that can be mated.
    """
    mover = state.side_to_move
    full_move_number = (
        state.full_move_number + 1 if mover == Color.BLACK else state.full_move_number
    )

    next_state = evaluate_position(
        replace(
            state,
            side_to_move=mover.opponent,
            full_move_number=full_move_number,
            move_log=state.move_log + (move,),
        )
    )
    logger.debug(
        "Session %s: %s played %s (status: %s, check: %s)",
        state.session_id,
        mover.name.lower(),
        move.to_coordinates(),
        next_state.status.value,
        next_state.is_check,
    )
    return next_state
