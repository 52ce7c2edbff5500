"""
Academy players and their per-session performance metrics.

Only the columns the cache warmup reads are mapped here; the rest of the
academy schema is owned by the main application.
"""

from __future__ import annotations

import enum
from datetime import date, datetime

from sqlalchemy import Date, DateTime, Enum, ForeignKey, Integer, String, func
from sqlalchemy.orm import Mapped, mapped_column

from touchline.models.base import Base


class PlayerStatus(str, enum.Enum):
    ACTIVE = "active"
    INJURED = "injured"
    INACTIVE = "inactive"


class Player(Base):
    __tablename__ = "players"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    first_name: Mapped[str] = mapped_column(String(100), nullable=False)
    last_name: Mapped[str] = mapped_column(String(100), nullable=False)
    position: Mapped[str] = mapped_column(String(50), nullable=False)
    date_of_birth: Mapped[date] = mapped_column(Date, nullable=False)
    age_group: Mapped[str | None] = mapped_column(String(10), nullable=True)
    status: Mapped[PlayerStatus] = mapped_column(
        Enum(PlayerStatus, native_enum=False, length=20),
        default=PlayerStatus.ACTIVE,
        nullable=False,
        index=True,
    )

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}"


class PerformanceMetric(Base):
    __tablename__ = "performance_metrics"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    player_id: Mapped[int] = mapped_column(
        ForeignKey("players.id", ondelete="CASCADE"), nullable=False, index=True
    )
    goals: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    assists: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    minutes_played: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), nullable=False
    )
