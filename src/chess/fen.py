"""
Full position <-> FEN string. Used to store/publish the position of a session, and to start sessions from custom positions.

    <placement> <side to move> <castling rights> <en passant target> <half move clock> <full move number>

Validation happens field by field, so a client that sends a broken position gets an InvalidFENError
before anything reaches the board.
"""

from dataclasses import dataclass
from typing import Optional, Self

from src.chess.board import STARTING_POSITION_FEN, Board
from src.chess.castling import CASTLING_ORDER, CastlingRights
from src.chess.pieces import FEN_TO_PIECE, Color
from src.chess.square import BOARD_DIMENSIONS, Square, is_plain_number
from src.core.exceptions import InvalidFENError

STARTING_FEN = f"{STARTING_POSITION_FEN} w KQkq - 0 1"
NUM_FEN_FIELDS = 6
EMPTY_FIELD = "-"  # no castling rights left / no en passant target

COLOR_CODES: dict[str, Color] = {"w": Color.WHITE, "b": Color.BLACK}
COLOR_TO_CODE: dict[Color, str] = {color: code for code, color in COLOR_CODES.items()}


def is_valid_fen(fen: str) -> bool:
    """All six fields present and each of them well-formed"""
    fields = fen.split(" ")
    if len(fields) != NUM_FEN_FIELDS:
        return False

    placement, side, castling, en_passant, half_moves, full_moves = fields
    return all(
        (
            is_valid_position(placement),
            is_valid_color_code(side),
            is_valid_castling_rights(castling),
            is_valid_en_passant(en_passant),
            is_valid_move_counter(half_moves),
            is_valid_move_counter(full_moves),
        )
    )


def is_valid_position(position: str) -> bool:
    """Placement field: one group per rank, every group adding up to exactly one rank of squares"""
    num_files, num_ranks = BOARD_DIMENSIONS
    rank_groups = position.split("/")
    return len(rank_groups) == num_ranks and all(
        _rank_width(group) == num_files for group in rank_groups
    )


def _rank_width(group: str) -> Optional[int]:
    """Number of squares one rank group covers. None if it contains anything but digits and piece letters."""
    width = 0
    for character in group:
        if is_plain_number(character):
            width += int(character)
        elif character.isascii() and character.lower() in FEN_TO_PIECE:
            width += 1
        else:
            return None
    return width


def is_valid_color_code(color: str) -> bool:
    return color in COLOR_CODES


def is_valid_castling_rights(castling: str) -> bool:
    """'-', or letters of 'KQkq' in that order without repeats ('Kq' is fine, 'qK' or 'KK' is not)"""
    if castling == EMPTY_FIELD:
        return True
    order = "".join(direction.value for direction in CASTLING_ORDER)
    remaining = iter(order)
    return bool(castling) and all(char in remaining for char in castling)


def is_valid_en_passant(en_passant: str) -> bool:
    return en_passant == EMPTY_FIELD or is_valid_square(en_passant)


def is_valid_square(square: str) -> bool:
    """Strict: lower case file letter + rank number, on the board"""
    return square == square.lower() and Square.parse(square) is not None


def is_valid_move_counter(counter: str) -> bool:
    return is_plain_number(counter)


@dataclass(frozen=True)
class FENState:
    """
    Everything a FEN string describes, parsed.

    ex) the standard starting position:
    rnbqkbnr/pppppppp/8/8/8/8/PPPPPPPP/RNBQKBNR w KQkq - 0 1
    white to move, all four castling rights, no en passant target, no half moves yet, first turn.
    """

    board: Board
    color_to_move: Color
    castling_rights: CastlingRights
    en_passant_square: Optional[Square]
    half_move_clock: int
    num_turns: int

    @classmethod
    def from_fen(cls, fen: str) -> Self:
        """Raises InvalidFENError for anything `is_valid_fen()` does not accept"""
        if not is_valid_fen(fen):
            raise InvalidFENError(f"Cannot interpret supplied string as FEN: {fen}")

        placement, side, castling, en_passant, half_moves, full_moves = fen.split(" ")
        return cls(
            board=Board.from_fen(placement),
            color_to_move=COLOR_CODES[side],
            castling_rights=CastlingRights.from_fen(castling),
            en_passant_square=Square.parse(en_passant),
            half_move_clock=int(half_moves),
            num_turns=int(full_moves),
        )

    def to_fen(self) -> str:
        en_passant = (
            self.en_passant_square.to_algebraic()
            if self.en_passant_square is not None
            else EMPTY_FIELD
        )
        return " ".join(
            (
                self.board.to_fen(),
                COLOR_TO_CODE[self.color_to_move],
                self.castling_rights.to_fen(),
                en_passant,
                str(self.half_move_clock),
                str(self.num_turns),
            )
        )

    @classmethod
    def starting_position(cls) -> Self:
        return cls.from_fen(STARTING_FEN)
