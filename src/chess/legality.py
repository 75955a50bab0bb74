"""
Move Legality Engine
----

Decides whether a single from -> to move is legal for the side to move, under full chess rules:

1. both squares on the board, and distinct
2. your own piece stands on the origin
3. you do not land on your own piece
4. the piece's movement pattern allows the displacement (incl. castling conditions)
5. the move does not leave your own king in check (simulated on a scratch board)

Every check has its own MoveRejection, so callers (and tests) can see WHY a move was refused.
"""

import logging
from enum import Enum
from typing import Optional, Union

from src.chess.board import Board
from src.chess.castling import CASTLING_RULES, CastlingRights, castling_direction_for
from src.chess.moves import (
    ATTACK_RULES,
    MOVEMENT_RULES,
    en_passant_capture_square,
    is_castling_shape,
    is_en_passant_capture,
)
from src.chess.pieces import Color, Piece, PieceType
from src.chess.square import Square

logger = logging.getLogger(__name__)

SquareLike = Union[Square, str]


class MoveRejection(Enum):
    OFF_BOARD = "square is not on the board"
    SAME_SQUARE = "origin and destination are the same square"
    NO_OWN_PIECE = "no piece of the side to move on the origin square"
    OWN_PIECE_ON_TARGET = "destination is occupied by a piece of the same color"
    INVALID_PATTERN = "the piece does not move like that"
    CASTLING_NOT_ALLOWED = "castling is not allowed in this position"
    SELF_CHECK = "move would leave the king in check"


# --- ATTACK DETECTION (the primitive the Position Analyzer builds on) ---
def is_square_attacked(board: Board, square: Square, by_color: Color) -> bool:
    """Could any piece of `by_color` capture on `square`? (pins are irrelevant: a pinned piece still gives check)"""
    for attacker_square, attacker in board.pieces():
        if attacker.color != by_color or attacker_square == square:
            continue
        if ATTACK_RULES[attacker.type](board, attacker_square, square):
            return True
    return False


def is_king_attacked(board: Board, color: Color) -> bool:
    """Is the king of `color` attacked? A board without that king is never 'in check'."""
    king_square = board.find_king(color)
    if king_square is None:
        return False
    return is_square_attacked(board, king_square, color.opponent)


# --- LEGALITY ---
def check_move(
    board: Board,
    from_square: SquareLike,
    to_square: SquareLike,
    side_to_move: Color,
    *,
    castling_rights: Optional[CastlingRights] = None,
    en_passant_target: Optional[Square] = None,
) -> Optional[MoveRejection]:
    """
    Run all legality checks, in order. Returns None for a legal move, otherwise the first reason it failed.

    NOTE: without `castling_rights`, no castling is allowed. Without `en_passant_target`, no en passant.
    """
    origin = Square.parse(from_square)
    destination = Square.parse(to_square)

    # 1. on the board, and actually moving
    if origin is None or destination is None:
        return MoveRejection.OFF_BOARD
    if origin == destination:
        return MoveRejection.SAME_SQUARE

    # 2. your own piece
    piece = board.piece_at(origin)
    if piece is None or piece.color != side_to_move:
        return MoveRejection.NO_OWN_PIECE

    # 3. cannot take your own piece
    target = board.piece_at(destination)
    if target is not None and target.color == side_to_move:
        return MoveRejection.OWN_PIECE_ON_TARGET

    # 4. movement pattern
    movement_rule = MOVEMENT_RULES[piece.type]
    if not movement_rule(board, origin, destination, en_passant_target):
        return MoveRejection.INVALID_PATTERN

    if is_castling_shape(board, origin, destination) and not _may_castle(
        board, origin, destination, side_to_move, castling_rights
    ):
        return MoveRejection.CASTLING_NOT_ALLOWED

    # 5. no self-check
    scratch_board = simulate_move(board, origin, destination, en_passant_target)
    if is_king_attacked(scratch_board, side_to_move):
        return MoveRejection.SELF_CHECK

    return None


def is_legal_move(
    board: Board,
    from_square: SquareLike,
    to_square: SquareLike,
    side_to_move: Color,
    *,
    castling_rights: Optional[CastlingRights] = None,
    en_passant_target: Optional[Square] = None,
) -> bool:
    """Boolean version of `check_move()`"""
    rejection = check_move(
        board,
        from_square,
        to_square,
        side_to_move,
        castling_rights=castling_rights,
        en_passant_target=en_passant_target,
    )
    if rejection is not None:
        logger.debug(
            "Rejected %s-%s for %s: %s",
            from_square,
            to_square,
            side_to_move.name.lower(),
            rejection.value,
        )
    return rejection is None


def simulate_move(
    board: Board,
    from_square: Square,
    to_square: Square,
    en_passant_target: Optional[Square] = None,
) -> Board:
    """
    Board after the move, without any checks. Moves the rook along when castling, removes the pawn taken en passant.

    The Move Applier uses this as well, so hypothetical boards and real boards can never disagree.
    NOTE: Promotion is not handled here, the pawn simply arrives on the last rank.
    """
    new_board = board.with_move(from_square, to_square)

    if is_en_passant_capture(board, from_square, to_square, en_passant_target):
        new_board = new_board.without_piece(en_passant_capture_square(from_square, to_square))

    direction = castling_direction_for(from_square, to_square)
    if direction is not None and is_castling_shape(board, from_square, to_square):
        squares = CASTLING_RULES[direction]
        new_board = new_board.with_move(squares.rook_from, squares.rook_to)

    return new_board


def _may_castle(
    board: Board,
    king_from: Square,
    king_to: Square,
    color: Color,
    castling_rights: Optional[CastlingRights],
) -> bool:
    """
    You are allowed to castle if
    ---

    * Castling rights are not yet revoked.
    * The rook is still on its corner square.
    * There is no piece in between the king and the rook.
    * You are not currently in check (you cannot castle out of check).
    * The king does not pass through or land on an attacked square.
    """
    direction = castling_direction_for(king_from, king_to)
    if direction is None or castling_rights is None or not castling_rights.allows(direction):
        return False

    squares = CASTLING_RULES[direction]
    if board.piece_at(squares.rook_from) != Piece(PieceType.ROOK, color):
        return False

    if any(not board.is_empty(square) for square in squares.squares_between()):
        return False

    opponent = color.opponent
    if is_square_attacked(board, king_from, opponent):
        return False

    return not any(
        is_square_attacked(board, square, opponent) for square in squares.king_path()
    )
