"""
Domain-event driven cache invalidation.

Callers that write player, match, training, injury, nutrition or video data
call the matching method here after the write succeeds. Invalidation is by
whole category: cache keys are opaque hashes, so there is no way to find
"every entry about player 7". That clears more than strictly needed.
"""

from __future__ import annotations

import enum

import structlog

from touchline.core.cache.manager import ResponseCache

logger = structlog.stdlib.get_logger()


class DataChangeType(str, enum.Enum):
    PLAYER = "player"
    PERFORMANCE = "performance"
    TRAINING = "training"
    MATCH = "match"
    INJURY = "injury"
    NUTRITION = "nutrition"
    VIDEO = "video"
    PARENT_REPORT = "parent_report"


CATEGORIES_BY_CHANGE: dict[DataChangeType, tuple[str, ...]] = {
    DataChangeType.PLAYER: ("playerAnalysis",),
    DataChangeType.PERFORMANCE: ("playerAnalysis", "injuryPrediction"),
    DataChangeType.TRAINING: ("trainingPlan",),
    DataChangeType.MATCH: ("matchStrategy", "opponentAnalysis"),
    DataChangeType.INJURY: ("injuryPrediction", "playerAnalysis"),
    DataChangeType.NUTRITION: ("nutritionPlan",),
    DataChangeType.VIDEO: ("videoAnalysis",),
    DataChangeType.PARENT_REPORT: ("parentReport",),
}

# Changes that concern one player; a comprehensive invalidation covers all of them
PLAYER_SCOPED_CHANGES = (
    DataChangeType.PLAYER,
    DataChangeType.PERFORMANCE,
    DataChangeType.INJURY,
    DataChangeType.NUTRITION,
    DataChangeType.PARENT_REPORT,
    DataChangeType.VIDEO,
)


def categories_for(*changes: DataChangeType) -> tuple[str, ...]:
    """Ordered, de-duplicated categories touched by the given changes."""
    seen: dict[str, None] = {}
    for change in changes:
        for category in CATEGORIES_BY_CHANGE[change]:
            seen.setdefault(category, None)
    return tuple(seen)


class InvalidationRouter:
    """
    Maps data changes to `ResponseCache.invalidate_category` calls.

    Every handler is idempotent and returns the categories it cleared.
    """

    def __init__(self, cache: ResponseCache) -> None:
        self._cache = cache

    async def _clear(
        self,
        change: str,
        categories: tuple[str, ...],
        **ids: int | None,
    ) -> tuple[str, ...]:
        known_ids = {k: v for k, v in ids.items() if v is not None}
        await logger.ainfo(
            "cache.invalidation", change=change, categories=list(categories), **known_ids
        )
        for category in categories:
            await self._cache.invalidate_category(category)
        return categories

    async def player_updated(self, player_id: int | None = None) -> tuple[str, ...]:
        return await self._clear(
            "player", CATEGORIES_BY_CHANGE[DataChangeType.PLAYER], player_id=player_id
        )

    async def performance_recorded(self, player_id: int | None = None) -> tuple[str, ...]:
        return await self._clear(
            "performance", CATEGORIES_BY_CHANGE[DataChangeType.PERFORMANCE], player_id=player_id
        )

    async def training_recorded(self, player_id: int | None = None) -> tuple[str, ...]:
        return await self._clear(
            "training", CATEGORIES_BY_CHANGE[DataChangeType.TRAINING], player_id=player_id
        )

    async def match_recorded(self, match_id: int | None = None) -> tuple[str, ...]:
        return await self._clear(
            "match", CATEGORIES_BY_CHANGE[DataChangeType.MATCH], match_id=match_id
        )

    async def injury_recorded(self, player_id: int | None = None) -> tuple[str, ...]:
        return await self._clear(
            "injury", CATEGORIES_BY_CHANGE[DataChangeType.INJURY], player_id=player_id
        )

    async def nutrition_changed(self, player_id: int | None = None) -> tuple[str, ...]:
        return await self._clear(
            "nutrition", CATEGORIES_BY_CHANGE[DataChangeType.NUTRITION], player_id=player_id
        )

    async def parent_data_changed(self, player_id: int | None = None) -> tuple[str, ...]:
        return await self._clear(
            "parent_report", CATEGORIES_BY_CHANGE[DataChangeType.PARENT_REPORT], player_id=player_id
        )

    async def video_analyzed(self, player_id: int | None = None) -> tuple[str, ...]:
        return await self._clear(
            "video", CATEGORIES_BY_CHANGE[DataChangeType.VIDEO], player_id=player_id
        )

    async def invalidate_all_for_player(self, player_id: int) -> tuple[str, ...]:
        """Comprehensive mode, e.g. after a player record is deleted."""
        return await self._clear(
            "comprehensive", categories_for(*PLAYER_SCOPED_CHANGES), player_id=player_id
        )

    async def on_event(
        self,
        change_type: DataChangeType | str,
        *,
        player_id: int | None = None,
        match_id: int | None = None,
        comprehensive: bool = False,
    ) -> tuple[str, ...]:
        """
        Route one change notification.

        `comprehensive` only takes effect together with a player_id; without
        one the event is routed by its type like any other.
        """
        change = DataChangeType(change_type)

        if comprehensive and player_id is not None:
            return await self.invalidate_all_for_player(player_id)

        if change is DataChangeType.MATCH:
            return await self.match_recorded(match_id)

        handlers = {
            DataChangeType.PLAYER: self.player_updated,
            DataChangeType.PERFORMANCE: self.performance_recorded,
            DataChangeType.TRAINING: self.training_recorded,
            DataChangeType.INJURY: self.injury_recorded,
            DataChangeType.NUTRITION: self.nutrition_changed,
            DataChangeType.VIDEO: self.video_analyzed,
            DataChangeType.PARENT_REPORT: self.parent_data_changed,
        }
        return await handlers[change](player_id)
