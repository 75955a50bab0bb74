"""Requests and Response models"""

from string import ascii_letters, digits
from typing import Optional

from pydantic import BaseModel, field_validator

from src.core.exceptions import InvalidRequestError
from src.core.shared_types import Color, PieceType

PieceColor = str
SeatInfo = dict[str, str]


def _is_algebraic_notation(value: str) -> bool:
    if len(value) != 2:
        return False

    first_character = value[0]
    second_character = value[1]
    return first_character in ascii_letters and second_character in digits


# --- REQUEST MODELS ---
class PlayerRequest(BaseModel):
    """Anything sent on behalf of a participant: which session, and who (identity as given by the host)"""

    session_id: str
    player_id: str
    player_name: str

    @field_validator("session_id", "player_id")
    @classmethod
    def validate_not_blank(cls, value: str) -> str:
        if not value.strip():
            raise InvalidRequestError("Session and player ids cannot be blank.")
        return value


class CreateSessionRequest(PlayerRequest):
    color: Color = Color.WHITE
    starting_fen: Optional[str] = None
    clock_seconds: Optional[int] = None

    @field_validator("starting_fen")
    @classmethod
    def validate_starting_fen(cls, value: Optional[str]) -> Optional[str]:
        if value is None:
            return value

        parts = value.strip().split(" ")
        if len(parts) != 6:
            raise InvalidRequestError(
                "FEN string must contain 6 space-separated parts."
            )
        return value.strip()

    @field_validator("clock_seconds")
    @classmethod
    def validate_clock_seconds(cls, value: Optional[int]) -> Optional[int]:
        if value is not None and value <= 0:
            raise InvalidRequestError(f"Clock must start above zero, got {value}.")
        return value


class JoinSessionRequest(PlayerRequest):
    color: Optional[Color] = None


class MoveRequest(PlayerRequest):
    from_square: str
    to_square: str

    @field_validator("from_square", "to_square")
    @classmethod
    def validate_square(cls, value: str) -> str:
        if not _is_algebraic_notation(value):
            raise InvalidRequestError(
                f"Cannot interpret {value!r} as a valid square name."
            )
        return value.lower()


class PromotionRequest(PlayerRequest):
    promote_to: PieceType


class ResignRequest(PlayerRequest):
    pass


class LegalMovesRequest(PlayerRequest):
    pass


class ClockTickRequest(BaseModel):
    session_id: str
    elapsed_seconds: int = 1

    @field_validator("elapsed_seconds")
    @classmethod
    def validate_elapsed(cls, value: int) -> int:
        if value < 0:
            raise InvalidRequestError(f"Elapsed time cannot be negative, got {value}.")
        return value


class GetSessionRequest(BaseModel):
    session_id: str


class DeleteSessionRequest(BaseModel):
    session_id: str


# --- RESPONSE MODELS ---
class SessionResponse(BaseModel):
    session_id: str
    players: dict[PieceColor, SeatInfo]
    status: str
    winner: Optional[str]
    fen_state: str
    starting_state: str
    side_to_move: Color
    is_check: bool
    promotion_square: Optional[str]
    clocks: dict[PieceColor, int]
    move_history: list[str]
    numbered_moves: list[str]


class LegalMovesResponse(BaseModel):
    session_id: str
    player_name: str
    color: Color
    legal_moves: list[str]
