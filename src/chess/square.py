"""
A square on the board

(placed in its own module as multiple other modules need to import it)
"""

from __future__ import annotations

from dataclasses import dataclass
from string import ascii_lowercase
from typing import Optional

# Chess board is always 8x8. Just in case we want to try some funky stuff, make it adjustable
BOARD_DIMENSIONS = (8, 8)

FILE_NAMES = ascii_lowercase[: BOARD_DIMENSIONS[0]]


def is_plain_number(text: str) -> bool:
    """ASCII digits only ('²' or '٣' pass str.isdigit() but int() chokes on some of them)"""
    return text.isascii() and text.isdigit()


def _is_rank_number(text: str) -> bool:
    """A plain number without zero padding ('4' yes, '04' no)"""
    return is_plain_number(text) and not text.startswith("0")


@dataclass(frozen=True)
class Square:
    file: int
    rank: int

    @classmethod
    def from_algebraic(cls, sq: str) -> Square:
        """Algebraic notation: 'a1' - 'h8' get converted to (1,1) - (8,8)"""
        file = ord(sq[0]) - ord("a") + 1
        rank = int(sq[1:])
        return cls(file, rank)

    @classmethod
    def parse(cls, sq: object) -> Optional[Square]:
        """
        Lenient version of `from_algebraic()` for untrusted input.
        Returns None for anything that is not a square on the board (wrong type, 'z9', 'e', 'e10', 'e04', ...)
        """
        if isinstance(sq, Square):
            return sq if sq.is_within_bounds() else None
        if not isinstance(sq, str) or len(sq) < 2:
            return None

        file_char, rank_chars = sq[0].lower(), sq[1:]
        if file_char not in FILE_NAMES or not _is_rank_number(rank_chars):
            return None

        square = cls(FILE_NAMES.index(file_char) + 1, int(rank_chars))
        return square if square.is_within_bounds() else None

    def to_algebraic(self) -> str:
        return f"{chr(self.file + ord('a') - 1)}{self.rank}"

    def is_within_bounds(self) -> bool:
        return (1 <= self.file <= BOARD_DIMENSIONS[0]) and (
            1 <= self.rank <= BOARD_DIMENSIONS[1]
        )

    def offset(self, df: int, dr: int) -> Square:
        """Square displaced by (df, dr). May be off the board: check with `is_within_bounds()`"""
        return Square(self.file + df, self.rank + dr)

    @property
    def index(self) -> int:
        """Position in a flat 64-slot layout (a1 = 0, b1 = 1, ..., h8 = 63)"""
        return (self.rank - 1) * BOARD_DIMENSIONS[0] + (self.file - 1)

    def __str__(self) -> str:
        return self.to_algebraic()


ALL_SQUARES: tuple[Square, ...] = tuple(
    Square(file, rank)
    for rank in range(1, BOARD_DIMENSIONS[1] + 1)
    for file in range(1, BOARD_DIMENSIONS[0] + 1)
)
