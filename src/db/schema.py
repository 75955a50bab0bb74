"""Database tables / schema"""

from datetime import datetime, timezone
from typing import Optional

from sqlalchemy import JSON
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


class Base(DeclarativeBase):
    pass


class DBSession(Base):
    __tablename__ = "sessions"
    id: Mapped[str] = mapped_column(primary_key=True)
    current_fen: Mapped[str]
    starting_fen: Mapped[Optional[str]]
    moves: Mapped[list[str]] = mapped_column(JSON, default=list)
    players: Mapped[dict[str, dict[str, str]]] = mapped_column(JSON, default=dict)
    clocks: Mapped[dict[str, int]] = mapped_column(JSON)
    status: Mapped[str]
    winner: Mapped[Optional[str]]
    promotion_square: Mapped[Optional[str]]
    pending_move: Mapped[Optional[str]]
    is_check: Mapped[bool] = mapped_column(default=False)
    created_at: Mapped[datetime] = mapped_column(default=utc_now)
    updated_at: Mapped[datetime] = mapped_column(default=utc_now, onupdate=utc_now)
