"""
Geometry/Base movement and capturing/attacking rules

Key idea: Use strategy pattern to define the movement pattern (and attack pattern) for each piece type.
Each pattern answers a yes/no question about a single displacement from -> to.

Whether the move would leave your own king in check is NOT decided here, see src/chess/legality.py
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Optional, Protocol

from src.chess.castling import castling_direction_for
from src.chess.pieces import Color, Piece, PieceType
from src.chess.square import BOARD_DIMENSIONS, Square

MOVE_SEPARATOR = "-"

PAWN_HOME_RANKS: dict[Color, int] = {Color.WHITE: 2, Color.BLACK: BOARD_DIMENSIONS[1] - 1}
PROMOTION_RANKS: dict[Color, int] = {Color.WHITE: BOARD_DIMENSIONS[1], Color.BLACK: 1}


class Board(Protocol):
    """Just the parts the movement strategies need"""

    def piece_at(self, square: Square) -> Optional[Piece]: ...
    def is_empty(self, square: Square) -> bool: ...


Vector = tuple[int, int]


@dataclass(frozen=True)
class Move:
    """A completed (or attempted) move: origin and destination, plus the piece chosen when a pawn promoted"""

    from_square: Square
    to_square: Square
    promote_to: Optional[PieceType] = None

    @classmethod
    def from_coordinates(cls, text: str) -> Move:
        """
        Coordinate pair notation, as stored in the move log.

        examples:
        * "e2-e4": move the piece that was on e2 to e4
        * "e1-g1": the king castles king side (the rook is implied)
        """
        from_alg, separator, to_alg = text.partition(MOVE_SEPARATOR)
        from_square = Square.parse(from_alg)
        to_square = Square.parse(to_alg)
        if not separator or from_square is None or to_square is None:
            raise ValueError(f"Cannot interpret {text!r} as a coordinate pair move")
        return cls(from_square, to_square)

    def to_coordinates(self) -> str:
        return f"{self.from_square.to_algebraic()}{MOVE_SEPARATOR}{self.to_square.to_algebraic()}"

    def __str__(self) -> str:
        return self.to_coordinates()


def numbered_move_log(moves: list[str]) -> list[str]:
    """Group two records per full move for display: ['1. e2-e4 e7-e5', '2. g1-f3']"""
    return [
        f"{idx // 2 + 1}. {' '.join(moves[idx : idx + 2])}"
        for idx in range(0, len(moves), 2)
    ]


# --- GEOMETRY HELPERS ---
def displacement(from_square: Square, to_square: Square) -> Vector:
    return to_square.file - from_square.file, to_square.rank - from_square.rank


def squares_between(from_square: Square, to_square: Square) -> list[Square]:
    """
    Squares strictly in between two squares on the same rank, file or diagonal.
    Squares that do not share a line have nothing 'in between' (empty list).
    """
    df, dr = displacement(from_square, to_square)
    if not (df == 0 or dr == 0 or abs(df) == abs(dr)):
        return []

    steps = max(abs(df), abs(dr))
    step_f = (df > 0) - (df < 0)
    step_r = (dr > 0) - (dr < 0)
    return [from_square.offset(step_f * i, step_r * i) for i in range(1, steps)]


def is_path_clear(board: Board, from_square: Square, to_square: Square) -> bool:
    """Sliding pieces cannot jump: every square in between must be empty"""
    return all(board.is_empty(square) for square in squares_between(from_square, to_square))


def is_diagonal(vector: Vector) -> bool:
    df, dr = vector
    return abs(df) == abs(dr) != 0


def is_straight(vector: Vector) -> bool:
    df, dr = vector
    return (df == 0) != (dr == 0)


# --- MOVEMENT RULES ---
def pawn_movement(
    board: Board, from_square: Square, to_square: Square, en_passant_target: Optional[Square]
) -> bool:
    """
    A pawn:
    - moves a single square forward, onto an empty square.
    - It can move by two in their first move (so when on their starting rank), if both squares are empty
    - takes diagonally: onto an enemy piece, or onto the en passant target square
    """
    pawn = board.piece_at(from_square)
    assert pawn is not None
    forward = pawn.color.forward
    df, dr = displacement(from_square, to_square)

    # Pawn pushes
    if df == 0:
        if dr == forward:
            return board.is_empty(to_square)
        if dr == 2 * forward and from_square.rank == PAWN_HOME_RANKS[pawn.color]:
            skipped_square = from_square.offset(0, forward)
            return board.is_empty(skipped_square) and board.is_empty(to_square)
        return False

    # pawns take diagonally
    if abs(df) == 1 and dr == forward:
        target = board.piece_at(to_square)
        if target is not None:
            return target.color != pawn.color
        return is_en_passant_capture(board, from_square, to_square, en_passant_target)

    return False


def knight_movement(
    board: Board, from_square: Square, to_square: Square, en_passant_target: Optional[Square]
) -> bool:
    """Knights always move such that |delta_rank| + |delta_file| = 3 (and jump over anything in between)"""
    df, dr = displacement(from_square, to_square)
    return {abs(df), abs(dr)} == {1, 2}


def bishop_movement(
    board: Board, from_square: Square, to_square: Square, en_passant_target: Optional[Square]
) -> bool:
    """Bishops move diagonally: |delta_rank| = |delta_file|"""
    vector = displacement(from_square, to_square)
    return is_diagonal(vector) and is_path_clear(board, from_square, to_square)


def rook_movement(
    board: Board, from_square: Square, to_square: Square, en_passant_target: Optional[Square]
) -> bool:
    """Rooks move either horizontally or vertically"""
    vector = displacement(from_square, to_square)
    return is_straight(vector) and is_path_clear(board, from_square, to_square)


def queen_movement(
    board: Board, from_square: Square, to_square: Square, en_passant_target: Optional[Square]
) -> bool:
    """
    The Queen combines the rook moves (horizontal + vertical movements) and bishop moves (diagonal movement)
    """
    vector = displacement(from_square, to_square)
    return (is_diagonal(vector) or is_straight(vector)) and is_path_clear(
        board, from_square, to_square
    )


def king_movement(
    board: Board, from_square: Square, to_square: Square, en_passant_target: Optional[Square]
) -> bool:
    """
    The king can move by a single square at the time.

    Castling is modelled as a special king move: two files sideways from its home square.
    Only the shape is recognized here, the castling conditions are checked by the legality engine.
    """
    if is_single_step(from_square, to_square):
        return True
    return is_castling_shape(board, from_square, to_square)


# -- STRATEGY PATTERN: MOVEMENT RULES ---
MovementPatternFn = Callable[[Board, Square, Square, Optional[Square]], bool]
MOVEMENT_RULES: dict[PieceType, MovementPatternFn] = {
    PieceType.PAWN: pawn_movement,
    PieceType.KNIGHT: knight_movement,
    PieceType.BISHOP: bishop_movement,
    PieceType.ROOK: rook_movement,
    PieceType.QUEEN: queen_movement,
    PieceType.KING: king_movement,
}


# --- CAPTURING RULES / ATTACKING RULES ---
def pawn_attack(board: Board, from_square: Square, target: Square) -> bool:
    """
    Pawns attack diagonally forward, whether or not something stands there.

    NOTE: this differs from the movement rule, which only allows the diagonal step onto an enemy piece.
    Castling needs to know if an EMPTY square is attacked, so the attack rule cannot look at the target square.
    """
    pawn = board.piece_at(from_square)
    assert pawn is not None
    df, dr = displacement(from_square, target)
    return abs(df) == 1 and dr == pawn.color.forward


def king_attack(board: Board, from_square: Square, target: Square) -> bool:
    """A king attacks the squares around it. It never attacks anything by castling."""
    return is_single_step(from_square, target)


def sliding_or_jumping_attack(board: Board, from_square: Square, target: Square) -> bool:
    """For knights, bishops, rooks and queens the attack rule is the movement rule"""
    piece = board.piece_at(from_square)
    assert piece is not None
    return MOVEMENT_RULES[piece.type](board, from_square, target, None)


# --- STRATEGY PATTERN: ATTACKING RULES ---
AttackPatternFn = Callable[[Board, Square, Square], bool]
ATTACK_RULES: dict[PieceType, AttackPatternFn] = {
    PieceType.PAWN: pawn_attack,
    PieceType.KNIGHT: sliding_or_jumping_attack,
    PieceType.BISHOP: sliding_or_jumping_attack,
    PieceType.ROOK: sliding_or_jumping_attack,
    PieceType.QUEEN: sliding_or_jumping_attack,
    PieceType.KING: king_attack,
}


# --- SPECIAL MOVES: recognizing them ---
def is_single_step(from_square: Square, to_square: Square) -> bool:
    df, dr = displacement(from_square, to_square)
    return max(abs(df), abs(dr)) == 1


def is_castling_shape(board: Board, from_square: Square, to_square: Square) -> bool:
    """King moving two files sideways, from its own home square, on its own home rank"""
    king = board.piece_at(from_square)
    if king is None or king.type != PieceType.KING:
        return False
    direction = castling_direction_for(from_square, to_square)
    return direction is not None and direction.color == king.color


def is_en_passant_capture(
    board: Board, from_square: Square, to_square: Square, en_passant_target: Optional[Square]
) -> bool:
    """
    Diagonal pawn step onto the (empty) en passant target square, with the enemy pawn that just made the double step
    standing next to us: same file as the destination, same rank as the origin.
    """
    if en_passant_target is None or to_square != en_passant_target:
        return False
    pawn = board.piece_at(from_square)
    if pawn is None or pawn.type != PieceType.PAWN or not board.is_empty(to_square):
        return False
    df, dr = displacement(from_square, to_square)
    if not (abs(df) == 1 and dr == pawn.color.forward):
        return False
    return board.piece_at(en_passant_capture_square(from_square, to_square)) == Piece(
        PieceType.PAWN, pawn.color.opponent
    )


def en_passant_capture_square(from_square: Square, to_square: Square) -> Square:
    """The pawn taken en passant stands in the file of the destination, in the rank of the origin"""
    return Square(file=to_square.file, rank=from_square.rank)


def is_double_pawn_push(piece: Piece, from_square: Square, to_square: Square) -> bool:
    return piece.type == PieceType.PAWN and abs(to_square.rank - from_square.rank) == 2


def skipped_square(from_square: Square, to_square: Square) -> Square:
    """The square a double pawn push passes over (= the new en passant target)"""
    return Square(file=from_square.file, rank=(from_square.rank + to_square.rank) // 2)


def is_promotion_square(piece: Piece, to_square: Square) -> bool:
    """Pawn reaching the far rank (seen from its own side)"""
    return piece.type == PieceType.PAWN and to_square.rank == PROMOTION_RANKS[piece.color]
