"""Tests for the player directory used by warmup."""

from __future__ import annotations

from datetime import date, timedelta

import pytest
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from factories import EPOCH, make_metric, make_player
from touchline.models.player import PlayerStatus
from touchline.services.players import SQLPlayerDirectory, age_on


@pytest.mark.unit
class TestAgeOn:
    def test_before_birthday(self) -> None:
        assert age_on(date(2012, 6, 15), date(2026, 6, 14)) == 13

    def test_on_birthday(self) -> None:
        assert age_on(date(2012, 6, 15), date(2026, 6, 15)) == 14

    def test_leap_day(self) -> None:
        assert age_on(date(2012, 2, 29), date(2026, 2, 28)) == 13
        assert age_on(date(2012, 2, 29), date(2026, 3, 1)) == 14


@pytest.mark.unit
class TestSQLPlayerDirectory:
    async def test_lists_active_players_only(
        self, db_session: AsyncSession, session_factory: async_sessionmaker[AsyncSession]
    ) -> None:
        db_session.add_all(
            [
                make_player("Ada", "Mensah"),
                make_player("Ben", "Hart", status=PlayerStatus.INJURED),
                make_player("Cy", "Lowe", age_group=None),
            ]
        )
        await db_session.commit()

        players = await SQLPlayerDirectory(session_factory).list_active(10)

        assert [p.name for p in players] == ["Ada Mensah", "Cy Lowe"]
        assert players[1].age_group is None
        assert players[0].date_of_birth == date(2010, 9, 1)

    async def test_limit(
        self, db_session: AsyncSession, session_factory: async_sessionmaker[AsyncSession]
    ) -> None:
        db_session.add_all([make_player(f"P{i}", "Test") for i in range(5)])
        await db_session.commit()

        assert len(await SQLPlayerDirectory(session_factory).list_active(3)) == 3

    async def test_recent_performance_newest_first(
        self, db_session: AsyncSession, session_factory: async_sessionmaker[AsyncSession]
    ) -> None:
        player = make_player()
        db_session.add(player)
        await db_session.flush()
        db_session.add_all(
            [
                make_metric(player.id, goals=i, created_at=EPOCH + timedelta(days=i))
                for i in range(12)
            ]
        )
        await db_session.commit()

        records = await SQLPlayerDirectory(session_factory).recent_performance(player.id)

        assert len(records) == 10
        assert [r.goals for r in records[:3]] == [11, 10, 9]
        assert records[0].as_params()["goals"] == 11
        assert "date" in records[0].as_params()

    async def test_recent_performance_unknown_player(
        self, session_factory: async_sessionmaker[AsyncSession]
    ) -> None:
        assert await SQLPlayerDirectory(session_factory).recent_performance(999) == []
