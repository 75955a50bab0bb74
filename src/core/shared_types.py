"""
Type definitions used across layers
"""

from enum import StrEnum


class Status(StrEnum):
    WAITING = "waiting"
    ACTIVE = "active"
    CHECKMATE = "checkmate"
    STALEMATE = "stalemate"
    RESIGNED = "resigned"
    # NOTE: reserved. Nothing produces a draw yet (no repetition / fifty-move / material detection)
    DRAW = "draw"


TERMINAL_STATUSES: frozenset[Status] = frozenset(
    {Status.CHECKMATE, Status.STALEMATE, Status.RESIGNED, Status.DRAW}
)


# --- Boundary versions of Color and PieceType. The domain layer has its own (see src/chess/pieces.py)
# --- NOTE Same member names on both sides, so converting is just `Color[c.name]`


class Color(StrEnum):
    WHITE = "white"
    BLACK = "black"


class PieceType(StrEnum):
    PAWN = "pawn"
    KNIGHT = "knight"
    BISHOP = "bishop"
    ROOK = "rook"
    QUEEN = "queen"
    KING = "king"
