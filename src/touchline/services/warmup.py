"""
Cache warmup.

Pre-populates the AI response cache for common requests during off-peak
hours by calling the ordinary cached advisor operations. A miss is computed
and stored; an entry that is already live is a cheap hit.

Steps (run in order by run_full):
  1. Player analyses: top N active players with their recent stats
  2. Training plans: position archetypes x age groups
  3. Drill recommendations: focus areas x age groups x skill levels
  4. Match strategies: fixed (importance, conditions) scenarios

Every item is attempted exactly once. A failing item is counted and logged
and the batch moves on; entries cached by earlier items stay.
"""

from __future__ import annotations

import asyncio
import time
from collections.abc import Awaitable, Callable
from dataclasses import dataclass, field
from datetime import date
from typing import Any

import structlog

from touchline.config import WarmupSettings
from touchline.services.advisor import CoachingAdvisor
from touchline.services.players import PlayerDirectory, age_on

logger = structlog.stdlib.get_logger()

WarmupCall = Callable[[], Awaitable[Any]]

RECENT_STATS_LIMIT = 10
FALLBACK_AGE_GROUP = "U16"

TRAINING_PROFILES: list[dict[str, Any]] = [
    {
        "name": "Generic Forward",
        "position": "forward",
        "weaknesses": ["heading", "defensive positioning"],
        "strengths": ["speed", "shooting", "dribbling"],
        "available_hours": 8,
    },
    {
        "name": "Generic Midfielder",
        "position": "midfielder",
        "weaknesses": ["long passing", "stamina"],
        "strengths": ["ball control", "vision", "short passing"],
        "available_hours": 10,
    },
    {
        "name": "Generic Defender",
        "position": "defender",
        "weaknesses": ["ball control", "attacking"],
        "strengths": ["tackling", "heading", "positioning"],
        "available_hours": 6,
    },
    {
        "name": "Generic Goalkeeper",
        "position": "goalkeeper",
        "weaknesses": ["distribution", "one-on-one"],
        "strengths": ["shot stopping", "positioning", "command of area"],
        "available_hours": 5,
    },
]

MATCH_SCENARIOS: list[tuple[str, str]] = [
    ("league", "normal"),
    ("cup", "rainy"),
    ("friendly", "hot"),
]

GENERIC_TEAM: dict[str, Any] = {
    "name": "Generic Team",
    "formation": "4-3-3",
    "strengths": ["possession", "pressing"],
    "weaknesses": ["set pieces", "counter-attacks"],
}


@dataclass
class StepReport:
    success: int = 0
    failed: int = 0
    errors: list[str] = field(default_factory=list)


@dataclass
class WarmupReport:
    total_success: int
    total_failed: int
    duration_ms: int
    details: dict[str, StepReport]


class WarmupOrchestrator:
    """
    Drives the advisor over a fixed matrix of common parameter combinations.

    Usage:
        orchestrator = WarmupOrchestrator(advisor, SQLPlayerDirectory(factory))
        report = await orchestrator.run_full()
    """

    def __init__(
        self,
        advisor: CoachingAdvisor,
        players: PlayerDirectory,
        settings: WarmupSettings | None = None,
        *,
        today: Callable[[], date] = date.today,
    ) -> None:
        self.advisor = advisor
        self.players = players
        self.settings = settings or WarmupSettings()
        self._today = today

    async def _run_items(self, step: str, items: list[tuple[str, WarmupCall]]) -> StepReport:
        """Attempt every item once; failures are recorded, never raised."""
        report = StepReport()
        semaphore = asyncio.Semaphore(self.settings.concurrency)

        async def attempt(label: str, call: WarmupCall) -> str | None:
            async with semaphore:
                try:
                    await call()
                except Exception as e:
                    message = f"Failed to {label}: {e}"
                    await logger.awarning("warmup.item.failed", step=step, error=message)
                    return message
            await logger.adebug("warmup.item.done", step=step, item=label)
            return None

        if self.settings.concurrency == 1:
            outcomes = [await attempt(label, call) for label, call in items]
        else:
            outcomes = await asyncio.gather(*(attempt(label, call) for label, call in items))

        for outcome in outcomes:
            if outcome is None:
                report.success += 1
            else:
                report.failed += 1
                report.errors.append(outcome)

        await logger.ainfo(
            "warmup.step.complete", step=step, success=report.success, failed=report.failed
        )
        return report

    async def warmup_player_analyses(self) -> StepReport:
        try:
            players = await self.players.list_active(self.settings.top_players_count)
        except Exception as e:
            await logger.aerror("warmup.players.unavailable", error=str(e))
            return StepReport(errors=[f"Database error: {e}"])

        today = self._today()

        def analyze(player_id: int, name: str, position: str, age: int, age_group: str) -> WarmupCall:
            async def call() -> str:
                stats = await self.players.recent_performance(player_id, RECENT_STATS_LIMIT)
                return await self.advisor.analyze_player_performance(
                    {
                        "name": name,
                        "position": position,
                        "recent_stats": [s.as_params() for s in stats],
                        "age": age,
                        "age_group": age_group,
                    }
                )

            return call

        items = [
            (
                f"analyze player {p.id}",
                analyze(
                    p.id,
                    p.name,
                    p.position,
                    age_on(p.date_of_birth, today),
                    p.age_group or FALLBACK_AGE_GROUP,
                ),
            )
            for p in players
        ]
        return await self._run_items("player_analyses", items)

    async def warmup_training_plans(self) -> StepReport:
        items: list[tuple[str, WarmupCall]] = []
        for age_group in self.settings.age_groups:
            for profile in TRAINING_PROFILES:
                params = {**profile, "age_group": age_group}
                items.append(
                    (
                        f"generate training plan for {profile['position']} {age_group}",
                        lambda params=params: self.advisor.generate_training_plan(params),
                    )
                )
        return await self._run_items("training_plans", items)

    async def warmup_drill_recommendations(self) -> StepReport:
        items: list[tuple[str, WarmupCall]] = []
        for focus_area in self.settings.focus_areas:
            for age_group in self.settings.age_groups:
                for skill_level in self.settings.skill_levels:
                    items.append(
                        (
                            f"generate drills for {focus_area} {age_group} {skill_level}",
                            lambda f=focus_area, a=age_group, s=skill_level: (
                                self.advisor.recommend_drills(f, a, s)
                            ),
                        )
                    )
        return await self._run_items("drill_recommendations", items)

    async def warmup_match_strategies(self) -> StepReport:
        items: list[tuple[str, WarmupCall]] = []
        for importance, conditions in MATCH_SCENARIOS:
            match = {
                "our_team": GENERIC_TEAM,
                "opponent_team": {**GENERIC_TEAM, "name": "Opponent Team"},
                "importance": importance,
                "conditions": conditions,
            }
            items.append(
                (
                    f"generate match strategy for {importance} {conditions}",
                    lambda match=match: self.advisor.generate_match_strategy(match),
                )
            )
        return await self._run_items("match_strategies", items)

    async def run_full(self) -> WarmupReport:
        start = time.perf_counter()
        await logger.ainfo("warmup.start")

        details = {
            "player_analyses": await self.warmup_player_analyses(),
            "training_plans": await self.warmup_training_plans(),
            "drill_recommendations": await self.warmup_drill_recommendations(),
            "match_strategies": await self.warmup_match_strategies(),
        }

        report = WarmupReport(
            total_success=sum(r.success for r in details.values()),
            total_failed=sum(r.failed for r in details.values()),
            duration_ms=int((time.perf_counter() - start) * 1000),
            details=details,
        )
        await logger.ainfo(
            "warmup.complete",
            success=report.total_success,
            failed=report.total_failed,
            duration_ms=report.duration_ms,
        )
        return report
