"""
Position Analyzer: check, checkmate and stalemate for a given board and side.

Built on top of the legality engine. Checkmate/stalemate detection is an exhaustive search:
every own piece x every square on the board, each tested with the full legality predicate.
That's at most 16 x 64 legality tests (each with a king-safety simulation). Fine for a game played by humans,
not something you want inside a search engine.
"""

from typing import Optional

from src.chess.board import Board
from src.chess.castling import CastlingRights
from src.chess.legality import check_move, is_king_attacked
from src.chess.moves import Move
from src.chess.pieces import Color
from src.chess.square import ALL_SQUARES, Square


def is_in_check(board: Board, color: Color) -> bool:
    """The king of `color` is attacked by any opposing piece"""
    return is_king_attacked(board, color)


def legal_destinations(
    board: Board,
    from_square: Square,
    *,
    castling_rights: Optional[CastlingRights] = None,
    en_passant_target: Optional[Square] = None,
) -> list[Square]:
    """All squares the piece on `from_square` may legally move to (empty list for an empty square)"""
    piece = board.piece_at(from_square)
    if piece is None:
        return []
    return [
        to_square
        for to_square in ALL_SQUARES
        if check_move(
            board,
            from_square,
            to_square,
            piece.color,
            castling_rights=castling_rights,
            en_passant_target=en_passant_target,
        )
        is None
    ]


def legal_moves(
    board: Board,
    color: Color,
    *,
    castling_rights: Optional[CastlingRights] = None,
    en_passant_target: Optional[Square] = None,
) -> list[Move]:
    """
    Every legal move for `color`.
    NOTE: a pawn move onto the last rank is listed once: the promotion choice is made afterwards.
    """
    return [
        Move(from_square, to_square)
        for from_square in board.locate_color(color)
        for to_square in legal_destinations(
            board,
            from_square,
            castling_rights=castling_rights,
            en_passant_target=en_passant_target,
        )
    ]


def has_legal_move(
    board: Board,
    color: Color,
    *,
    castling_rights: Optional[CastlingRights] = None,
    en_passant_target: Optional[Square] = None,
) -> bool:
    """Same search as `legal_moves()`, but stops at the first legal move found"""
    for from_square in board.locate_color(color):
        for to_square in ALL_SQUARES:
            rejection = check_move(
                board,
                from_square,
                to_square,
                color,
                castling_rights=castling_rights,
                en_passant_target=en_passant_target,
            )
            if rejection is None:
                return True
    return False


def is_checkmate(
    board: Board,
    color: Color,
    *,
    castling_rights: Optional[CastlingRights] = None,
    en_passant_target: Optional[Square] = None,
) -> bool:
    """In check, and no move gets you out of it"""
    return is_in_check(board, color) and not has_legal_move(
        board,
        color,
        castling_rights=castling_rights,
        en_passant_target=en_passant_target,
    )


def is_stalemate(
    board: Board,
    color: Color,
    *,
    castling_rights: Optional[CastlingRights] = None,
    en_passant_target: Optional[Square] = None,
) -> bool:
    """Not in check, but not a single legal move either"""
    return not is_in_check(board, color) and not has_legal_move(
        board,
        color,
        castling_rights=castling_rights,
        en_passant_target=en_passant_target,
    )
