"""
Boundary layer data model(s).

These objects can be used to communicate with the Service.
Both the API layer (higher) and domain/db layers (lower) use the model defined here to send to/receive from the Service.
(Decouples the data model specific to the DB layer, API layer, or domain layer from the information needed to send across boundaries)

This is also what gets published to the shared store after every accepted transition.
"""

from dataclasses import dataclass, field
from typing import Optional

# Type aliases to make GameModel easier to read
PieceColor = str
SeatInfo = dict[str, str]  # {"id": ..., "name": ...}


@dataclass
class GameModel:
    """Transport-safe snapshot of a chess session used between API, Service, DB, and Game layers."""

    session_id: str
    current_fen: str
    moves: list[str]
    players: dict[PieceColor, SeatInfo]
    status: str
    clocks: dict[PieceColor, int]
    winner: Optional[str] = None
    promotion_square: Optional[str] = None
    is_check: bool = False
    pending_move: Optional[str] = None
    starting_fen: Optional[str] = field(default=None)
