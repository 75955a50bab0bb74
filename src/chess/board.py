"""
The Board is the bare 8x8 grid of (optional) pieces. Purely mechanical: no chess rules live here.

Boards are immutable. Every mutation hands back a new Board, which makes "what if" boards (used by the
legality engine to test for self-check) as cheap as copying a 64-slot tuple.
"""

from dataclasses import dataclass, field
from typing import Iterator, Optional, Self

from src.chess.pieces import Color, Piece, PieceType
from src.chess.square import ALL_SQUARES, BOARD_DIMENSIONS, Square

NUM_SQUARES = BOARD_DIMENSIONS[0] * BOARD_DIMENSIONS[1]
STARTING_POSITION_FEN = "rnbqkbnr/pppppppp/8/8/8/8/PPPPPPPP/RNBQKBNR"
EMPTY_FEN = "/".join(["8"] * BOARD_DIMENSIONS[1])

Slots = tuple[Optional[Piece], ...]


@dataclass(frozen=True)
class Board:
    slots: Slots = field(default=(None,) * NUM_SQUARES)

    def __post_init__(self) -> None:
        if len(self.slots) != NUM_SQUARES:
            raise ValueError(
                f"A board needs exactly {NUM_SQUARES} slots, got {len(self.slots)}"
            )

    @classmethod
    def empty(cls) -> Self:
        return cls()

    @classmethod
    def starting_position(cls) -> Self:
        return cls.from_fen(STARTING_POSITION_FEN)

    @classmethod
    def from_fen(cls, fen_str: str) -> Self:
        """Construct a board using the piece placement part of a FEN string.

        ex. standard starting position:
        rnbqkbnr/pppppppp/8/8/8/8/PPPPPPPP/RNBQKBNR
        means:
        * black pieces are on the 8th rank, starting with rook on a8, knight on b8, etc.
        * pawns cover 7th rank entirely
        * ranks 6 through 3 have 8 consecutive empty squares
        * rank 2 are the white pawns (capital letters)
        * 1st rank are the white pieces.

        NOTE: no validation here, see src/chess/fen.py
        """
        slots: list[Optional[Piece]] = [None] * NUM_SQUARES
        fen_by_ranks = fen_str.split("/")
        for rank_idx, fen_one_rank in enumerate(fen_by_ranks):
            # FEN string is read from top rank (8th) to bottom rank (1st)
            rank = BOARD_DIMENSIONS[1] - rank_idx
            # ... but the first character is the a-file, so reads in normal direction
            file = 1
            for character in fen_one_rank:
                if character.isalpha():
                    slots[Square(file, rank).index] = Piece.from_fen(character)
                    file += 1
                else:
                    # A number denotes the amount of empty squares after each other
                    file += int(character)
        return cls(tuple(slots))

    def to_fen(self) -> str:
        """Ranks are separated by slashes in FEN string."""
        return "/".join(
            self._rank_to_fen(rank) for rank in range(BOARD_DIMENSIONS[1], 0, -1)
        )

    def _rank_to_fen(self, rank: int) -> str:
        """FEN string of a single rank"""
        fen_characters: list[str] = []
        empty_count = 0
        for file in range(1, BOARD_DIMENSIONS[0] + 1):
            piece = self.piece_at(Square(file, rank))

            if piece is not None:
                if empty_count > 0:
                    fen_characters.append(str(empty_count))
                    empty_count = 0
                fen_characters.append(piece.to_fen())
            else:
                empty_count += 1

        # if the entire rank is empty, then we still place this number in the string
        if empty_count > 0:
            fen_characters.append(str(empty_count))
        return "".join(fen_characters)

    # --- ACCESSORS ---
    def piece_at(self, square: Square) -> Optional[Piece]:
        return self.slots[square.index]

    def is_empty(self, square: Square) -> bool:
        return self.piece_at(square) is None

    def pieces(self) -> Iterator[tuple[Square, Piece]]:
        """All occupied squares with their piece, a1 first."""
        for square in ALL_SQUARES:
            piece = self.slots[square.index]
            if piece is not None:
                yield square, piece

    def locate_color(self, color: Color) -> list[Square]:
        return [square for square, piece in self.pieces() if piece.color == color]

    def locate_pieces(self, piece: Piece) -> list[Square]:
        return [square for square, found in self.pieces() if found == piece]

    def find_king(self, color: Color) -> Optional[Square]:
        """None if that color has no king on the board (only on hand-made boards)"""
        kings = self.locate_pieces(Piece(PieceType.KING, color))
        return kings[0] if kings else None

    # --- MUTATIONS (always return a new board) ---
    def with_move(
        self,
        from_square: Square,
        to_square: Square,
        replacement: Optional[Piece] = None,
    ) -> Self:
        """`from_square` emptied, `to_square` holds the moved piece (or `replacement`, used for promotion)"""
        slots = list(self.slots)
        moving_piece = slots[from_square.index]
        slots[from_square.index] = None
        slots[to_square.index] = replacement if replacement is not None else moving_piece
        return type(self)(tuple(slots))

    def with_piece(self, square: Square, piece: Optional[Piece]) -> Self:
        slots = list(self.slots)
        slots[square.index] = piece
        return type(self)(tuple(slots))

    def without_piece(self, square: Square) -> Self:
        return self.with_piece(square, None)

    def __str__(self) -> str:
        """ASCII diagram, 8th rank on top (handy in log output / failing tests)"""
        rows: list[str] = []
        for rank in range(BOARD_DIMENSIONS[1], 0, -1):
            row = "".join(
                piece.to_fen() if (piece := self.piece_at(Square(file, rank))) else "."
                for file in range(1, BOARD_DIMENSIONS[0] + 1)
            )
            rows.append(f"{rank} {row}")
        rows.append("  " + "".join(chr(ord("a") + f) for f in range(BOARD_DIMENSIONS[0])))
        return "\n".join(rows)
