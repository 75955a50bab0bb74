"""Helpers for implementing Castling rules. Need to be imported by multiple sources"""

from __future__ import annotations

from dataclasses import dataclass, replace
from enum import Enum
from typing import Optional

from src.chess.pieces import Color
from src.chess.square import Square


class CastlingDirection(Enum):
    """The four castling directions. Values represent their encodings in FEN string."""

    WHITE_KING_SIDE = "K"
    WHITE_QUEEN_SIDE = "Q"
    BLACK_KING_SIDE = "k"
    BLACK_QUEEN_SIDE = "q"

    @property
    def color(self) -> Color:
        return Color.WHITE if self.value.isupper() else Color.BLACK


CASTLING_ORDER: tuple[CastlingDirection, ...] = (
    CastlingDirection.WHITE_KING_SIDE,
    CastlingDirection.WHITE_QUEEN_SIDE,
    CastlingDirection.BLACK_KING_SIDE,
    CastlingDirection.BLACK_QUEEN_SIDE,
)


@dataclass(frozen=True)
class CastlingSquares:
    """
    Store the squares where king/rook start from/end up in by castling.
    NOTE: If castling rights have not been revoked, we already know the king / rook are still at their starting squares.
    """

    king_from: Square
    king_to: Square
    rook_from: Square
    rook_to: Square

    @classmethod
    def from_algebraic(
        cls, k_from: str, k_to: str, r_from: str, r_to: str
    ) -> CastlingSquares:
        """Convenience method: to make mapping shown below (from CastlingDirection) more readable"""
        king_from = Square.from_algebraic(k_from)
        king_to = Square.from_algebraic(k_to)
        rook_from = Square.from_algebraic(r_from)
        rook_to = Square.from_algebraic(r_to)
        return cls(king_from, king_to, rook_from, rook_to)

    def squares_between(self) -> list[Square]:
        """Squares strictly between king and rook. All of them must be empty to castle."""
        step = 1 if self.rook_from.file > self.king_from.file else -1
        return [
            Square(file, self.king_from.rank)
            for file in range(self.king_from.file + step, self.rook_from.file, step)
        ]

    def king_path(self) -> list[Square]:
        """Squares the king crosses and lands on. None of them may be attacked."""
        step = 1 if self.king_to.file > self.king_from.file else -1
        return [
            Square(file, self.king_from.rank)
            for file in range(self.king_from.file + step, self.king_to.file + step, step)
        ]


# The moves (in classical chess) made when castling
CASTLING_RULES: dict[CastlingDirection, CastlingSquares] = {
    CastlingDirection.WHITE_KING_SIDE: CastlingSquares.from_algebraic(
        "e1", "g1", "h1", "f1"
    ),
    CastlingDirection.WHITE_QUEEN_SIDE: CastlingSquares.from_algebraic(
        "e1", "c1", "a1", "d1"
    ),
    CastlingDirection.BLACK_KING_SIDE: CastlingSquares.from_algebraic(
        "e8", "g8", "h8", "f8"
    ),
    CastlingDirection.BLACK_QUEEN_SIDE: CastlingSquares.from_algebraic(
        "e8", "c8", "a8", "d8"
    ),
}

KING_HOME_SQUARES: dict[Color, Square] = {
    Color.WHITE: Square.from_algebraic("e1"),
    Color.BLACK: Square.from_algebraic("e8"),
}


def castling_direction_for(king_from: Square, king_to: Square) -> Optional[CastlingDirection]:
    """Which castling move (if any) has the king going from `king_from` to `king_to`"""
    for direction, squares in CASTLING_RULES.items():
        if squares.king_from == king_from and squares.king_to == king_to:
            return direction
    return None


def directions_for_color(color: Color) -> list[CastlingDirection]:
    return [direction for direction in CASTLING_ORDER if direction.color == color]


@dataclass(frozen=True)
class CastlingRights:
    """
    Per color: may you still castle king side / queen side?

    Rights only ever get revoked, never granted back: the only "mutators" are the revoke methods (returning a new value).
    """

    white_king_side: bool = True
    white_queen_side: bool = True
    black_king_side: bool = True
    black_queen_side: bool = True

    @classmethod
    def none(cls) -> CastlingRights:
        return cls(False, False, False, False)

    @classmethod
    def from_fen(cls, castle_fen: str) -> CastlingRights:
        """parse the part of the FEN string that encodes castling rights ('KQkq', 'Kq', '-', ...)"""
        return cls(
            **{
                _FIELD_NAMES[direction]: (direction.value in castle_fen)
                for direction in CastlingDirection
            }
        )

    def to_fen(self) -> str:
        """create the part of the FEN string that encodes castling rights"""
        castling_chars = "".join(
            direction.value for direction in CASTLING_ORDER if self.allows(direction)
        )
        return castling_chars or "-"

    def allows(self, direction: CastlingDirection) -> bool:
        return getattr(self, _FIELD_NAMES[direction])

    def revoke(self, direction: CastlingDirection) -> CastlingRights:
        if not self.allows(direction):
            return self
        return replace(self, **{_FIELD_NAMES[direction]: False})

    def revoke_all(self, color: Color) -> CastlingRights:
        rights = self
        for direction in directions_for_color(color):
            rights = rights.revoke(direction)
        return rights


_FIELD_NAMES: dict[CastlingDirection, str] = {
    CastlingDirection.WHITE_KING_SIDE: "white_king_side",
    CastlingDirection.WHITE_QUEEN_SIDE: "white_queen_side",
    CastlingDirection.BLACK_KING_SIDE: "black_king_side",
    CastlingDirection.BLACK_QUEEN_SIDE: "black_queen_side",
}
