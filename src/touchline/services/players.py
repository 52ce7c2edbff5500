"""Read access to academy players for the player-analysis warmup."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from typing import Any, Protocol

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from touchline.models.player import PerformanceMetric, Player, PlayerStatus


@dataclass
class PlayerSnapshot:
    id: int
    name: str
    position: str
    date_of_birth: date
    age_group: str | None


@dataclass
class PerformanceRecord:
    goals: int
    assists: int
    minutes_played: int
    recorded_at: datetime

    def as_params(self) -> dict[str, Any]:
        return {
            "goals": self.goals,
            "assists": self.assists,
            "minutes_played": self.minutes_played,
            "date": self.recorded_at,
        }


class PlayerDirectory(Protocol):
    async def list_active(self, limit: int) -> list[PlayerSnapshot]: ...

    async def recent_performance(self, player_id: int, limit: int = 10) -> list[PerformanceRecord]: ...


def age_on(date_of_birth: date, today: date) -> int:
    """Whole years, counting a birthday only once it has been reached."""
    age = today.year - date_of_birth.year
    if (today.month, today.day) < (date_of_birth.month, date_of_birth.day):
        age -= 1
    return age


class SQLPlayerDirectory:
    """PlayerDirectory over the `players` and `performance_metrics` tables."""

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]) -> None:
        self._session_factory = session_factory

    async def list_active(self, limit: int) -> list[PlayerSnapshot]:
        async with self._session_factory() as session:
            result = await session.execute(
                select(Player)
                .where(Player.status == PlayerStatus.ACTIVE)
                .order_by(Player.id)
                .limit(limit)
            )
            return [
                PlayerSnapshot(
                    id=p.id,
                    name=p.full_name,
                    position=p.position,
                    date_of_birth=p.date_of_birth,
                    age_group=p.age_group,
                )
                for p in result.scalars()
            ]

    async def recent_performance(self, player_id: int, limit: int = 10) -> list[PerformanceRecord]:
        async with self._session_factory() as session:
            result = await session.execute(
                select(PerformanceMetric)
                .where(PerformanceMetric.player_id == player_id)
                .order_by(PerformanceMetric.created_at.desc(), PerformanceMetric.id.desc())
                .limit(limit)
            )
            return [
                PerformanceRecord(
                    goals=m.goals,
                    assists=m.assists,
                    minutes_played=m.minutes_played,
                    recorded_at=m.created_at,
                )
                for m in result.scalars()
            ]

