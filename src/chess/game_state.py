"""
The aggregate root of a session: everything that describes a game at one point in time.

GameState is immutable. Every transition (see src/chess/game.py and src/chess/applier.py) returns a new GameState,
which the host publishes to all observers of the session. A rejected transition raises, leaving the old state untouched.
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from typing import Optional

from src.chess.board import Board
from src.chess.castling import CastlingRights
from src.chess.fen import STARTING_FEN, FENState
from src.chess.moves import Move
from src.chess.pieces import Color
from src.chess.square import Square
from src.core.exceptions import GameStateError, InvalidFENError
from src.core.models import GameModel
from src.core.shared_types import TERMINAL_STATUSES, Status


@dataclass(frozen=True)
class PlayerIdentity:
    """Opaque participant id + the name shown to the other player. Where it comes from is the host's business."""

    id: str
    name: str

    def to_dict(self) -> dict[str, str]:
        return {"id": self.id, "name": self.name}


@dataclass(frozen=True)
class Seats:
    """Who plays which color. A seat, once taken, is never reassigned."""

    white: Optional[PlayerIdentity] = None
    black: Optional[PlayerIdentity] = None

    def occupant(self, color: Color) -> Optional[PlayerIdentity]:
        return self.white if color == Color.WHITE else self.black

    def with_occupant(self, color: Color, identity: PlayerIdentity) -> Seats:
        return replace(self, **{color.name.lower(): identity})

    def color_of(self, player_id: str) -> Optional[Color]:
        """Color played by `player_id`, None for spectators"""
        for color in Color:
            occupant = self.occupant(color)
            if occupant is not None and occupant.id == player_id:
                return color
        return None

    def free_colors(self) -> list[Color]:
        return [color for color in Color if self.occupant(color) is None]

    @property
    def is_full(self) -> bool:
        return not self.free_colors()


@dataclass(frozen=True)
class Clocks:
    """Remaining time per color, in whole seconds"""

    white: int
    black: int

    @classmethod
    def starting(cls, seconds: int) -> Clocks:
        return cls(white=seconds, black=seconds)

    def remaining(self, color: Color) -> int:
        return self.white if color == Color.WHITE else self.black

    def with_remaining(self, color: Color, seconds: int) -> Clocks:
        return replace(self, **{color.name.lower(): max(0, seconds)})


@dataclass(frozen=True)
class GameState:
    session_id: str
    board: Board
    side_to_move: Color
    castling_rights: CastlingRights
    en_passant_target: Optional[Square]
    half_move_clock: int
    full_move_number: int
    clocks: Clocks
    seats: Seats
    status: Status = Status.WAITING
    winner: Optional[Color] = None
    move_log: tuple[Move, ...] = ()
    pending_promotion: Optional[Move] = None
    is_check: bool = False  # is `side_to_move` in check
    starting_fen: str = field(default=STARTING_FEN)

    @classmethod
    def from_fen(
        cls, session_id: str, fen: str, clocks: Clocks, seats: Seats
    ) -> GameState:
        """Fresh (waiting) state starting in the position described by `fen`"""
        position = FENState.from_fen(fen)
        return cls(
            session_id=session_id,
            board=position.board,
            side_to_move=position.color_to_move,
            castling_rights=position.castling_rights,
            en_passant_target=position.en_passant_square,
            half_move_clock=position.half_move_clock,
            full_move_number=position.num_turns,
            clocks=clocks,
            seats=seats,
            starting_fen=fen,
        )

    # --- DERIVED INFO ---
    @property
    def promotion_pending(self) -> Optional[Square]:
        """Square of the pawn waiting for its promotion choice"""
        if self.pending_promotion is None:
            return None
        return self.pending_promotion.to_square

    @property
    def is_terminal(self) -> bool:
        return self.status in TERMINAL_STATUSES

    @property
    def position(self) -> FENState:
        return FENState(
            board=self.board,
            color_to_move=self.side_to_move,
            castling_rights=self.castling_rights,
            en_passant_square=self.en_passant_target,
            half_move_clock=self.half_move_clock,
            num_turns=self.full_move_number,
        )

    def to_fen(self) -> str:
        return self.position.to_fen()

    # --- BOUNDARY CONVERSION ---
    def to_model(self) -> GameModel:
        """Encode into the format the Service layer (and the shared store) uses"""
        return GameModel(
            session_id=self.session_id,
            current_fen=self.to_fen(),
            moves=[move.to_coordinates() for move in self.move_log],
            players={
                color.name.lower(): occupant.to_dict()
                for color in Color
                if (occupant := self.seats.occupant(color)) is not None
            },
            status=self.status.value,
            clocks={color.name.lower(): self.clocks.remaining(color) for color in Color},
            winner=self.winner.name.lower() if self.winner else None,
            promotion_square=(
                self.promotion_pending.to_algebraic() if self.promotion_pending else None
            ),
            is_check=self.is_check,
            pending_move=(
                self.pending_promotion.to_coordinates() if self.pending_promotion else None
            ),
            starting_fen=self.starting_fen,
        )

    @classmethod
    def from_model(cls, model: GameModel) -> GameState:
        """Define how to construct a GameState from the information the Service layer actually has"""

        # Validation
        if model.status not in {status.value for status in Status}:
            raise GameStateError(
                f"Invalid status code: {model.status!r}. \nPick one from {','.join(status.value for status in Status)}"
            )

        try:
            position = FENState.from_fen(model.current_fen)
            move_log = tuple(Move.from_coordinates(text) for text in model.moves)
            pending_promotion = (
                Move.from_coordinates(model.pending_move) if model.pending_move else None
            )
            seats = Seats(
                **{
                    color: PlayerIdentity(id=info["id"], name=info["name"])
                    for color, info in model.players.items()
                }
            )
            clocks = Clocks(
                white=int(model.clocks["white"]), black=int(model.clocks["black"])
            )
            winner = Color[model.winner.upper()] if model.winner else None
        except (InvalidFENError, ValueError, KeyError, TypeError) as exc:
            raise GameStateError(f"Cannot rebuild game state from snapshot: {exc}") from exc

        return cls(
            session_id=model.session_id,
            board=position.board,
            side_to_move=position.color_to_move,
            castling_rights=position.castling_rights,
            en_passant_target=position.en_passant_square,
            half_move_clock=position.half_move_clock,
            full_move_number=position.num_turns,
            clocks=clocks,
            seats=seats,
            status=Status(model.status),
            winner=winner,
            move_log=move_log,
            pending_promotion=pending_promotion,
            is_check=model.is_check,
            starting_fen=model.starting_fen or STARTING_FEN,
        )
