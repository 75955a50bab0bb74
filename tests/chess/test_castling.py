"""unit tests for src/chess/castling.py"""

import pytest

from src.chess.castling import (
    CASTLING_RULES,
    CastlingDirection,
    CastlingRights,
    CastlingSquares,
    castling_direction_for,
)
from src.chess.pieces import Color
from src.chess.square import Square


def test_castling_squares_creation() -> None:
    """Test one case, just to have a little contract stating: 'I want to be able to create this dataclass'"""
    castling_squares = CastlingSquares.from_algebraic("e1", "g1", "h1", "f1")
    assert castling_squares.king_from == Square.from_algebraic("e1")
    assert castling_squares.king_to == Square.from_algebraic("g1")
    assert castling_squares.rook_from == Square.from_algebraic("h1")
    assert castling_squares.rook_to == Square.from_algebraic("f1")


@pytest.mark.parametrize(
    "direction, between, path",
    [
        (CastlingDirection.WHITE_KING_SIDE, ["f1", "g1"], ["f1", "g1"]),
        (CastlingDirection.WHITE_QUEEN_SIDE, ["d1", "c1", "b1"], ["d1", "c1"]),
        (CastlingDirection.BLACK_KING_SIDE, ["f8", "g8"], ["f8", "g8"]),
        (CastlingDirection.BLACK_QUEEN_SIDE, ["d8", "c8", "b8"], ["d8", "c8"]),
    ],
)
def test_squares_between_and_king_path(
    direction: CastlingDirection, between: list[str], path: list[str]
) -> None:
    """Queen side: b-file must be empty, but may be attacked (the king never crosses it)"""
    squares = CASTLING_RULES[direction]
    assert [sq.to_algebraic() for sq in squares.squares_between()] == between
    assert [sq.to_algebraic() for sq in squares.king_path()] == path


def test_castling_direction_for() -> None:
    e1 = Square.from_algebraic("e1")
    assert castling_direction_for(e1, Square.from_algebraic("g1")) == CastlingDirection.WHITE_KING_SIDE
    assert castling_direction_for(e1, Square.from_algebraic("c1")) == CastlingDirection.WHITE_QUEEN_SIDE
    assert castling_direction_for(e1, Square.from_algebraic("f1")) is None


@pytest.mark.parametrize("fen", ["KQkq", "KQ", "kq", "Kq", "-"])
def test_castling_rights_fen_roundtrip(fen: str) -> None:
    assert CastlingRights.from_fen(fen).to_fen() == fen


def test_revoking_is_monotonic() -> None:
    """Revoking never grants anything back, and revoking twice is harmless"""
    rights = CastlingRights()
    rights = rights.revoke(CastlingDirection.WHITE_KING_SIDE)
    assert not rights.allows(CastlingDirection.WHITE_KING_SIDE)
    assert rights.revoke(CastlingDirection.WHITE_KING_SIDE) == rights

    rights = rights.revoke_all(Color.BLACK)
    assert rights.to_fen() == "Q"


def test_no_rights() -> None:
    assert CastlingRights.none().to_fen() == "-"
