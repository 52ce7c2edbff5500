"""
TTL policy per cached operation.

TTLs follow how quickly the underlying facts go stale: injury risk moves
within hours, opponent scouting holds for days.
"""

from __future__ import annotations

from collections.abc import Mapping
from datetime import timedelta

DEFAULT_TTL = timedelta(minutes=30)

OPERATION_TTLS: dict[str, timedelta] = {
    "playerAnalysis": timedelta(hours=1),
    "trainingPlan": timedelta(hours=24),
    "matchStrategy": timedelta(hours=6),
    "opponentAnalysis": timedelta(hours=48),
    "parentReport": timedelta(hours=12),
    "injuryPrediction": timedelta(hours=2),
    "nutritionPlan": timedelta(hours=24),
    "mentalAssessment": timedelta(hours=6),
    "scoutingReport": timedelta(hours=48),
    "videoAnalysis": timedelta(hours=12),
    "sessionPlan": timedelta(hours=24),
}


class TTLPolicy:
    """
    Maps an operation name to its time-to-live.

    Usage:
        policy = TTLPolicy()
        policy.ttl_for("injuryPrediction")   # timedelta(hours=2)
        policy.ttl_for("somethingElse")      # timedelta(minutes=30)
    """

    def __init__(
        self,
        overrides: Mapping[str, int] | None = None,
        default_seconds: int | None = None,
    ) -> None:
        self._table = dict(OPERATION_TTLS)
        for operation, seconds in (overrides or {}).items():
            self._table[operation] = timedelta(seconds=seconds)
        self._default = (
            timedelta(seconds=default_seconds) if default_seconds else DEFAULT_TTL
        )

    def ttl_for(self, operation: str) -> timedelta:
        return self._table.get(operation, self._default)
