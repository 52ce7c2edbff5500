"""Tests for per-operation TTLs."""

from __future__ import annotations

from datetime import timedelta

import pytest

from touchline.config import CacheSettings
from touchline.core.cache.ttl import DEFAULT_TTL, OPERATION_TTLS, TTLPolicy


@pytest.mark.unit
class TestTTLPolicy:
    @pytest.mark.parametrize(
        ("operation", "expected"),
        [
            ("playerAnalysis", timedelta(hours=1)),
            ("trainingPlan", timedelta(hours=24)),
            ("matchStrategy", timedelta(hours=6)),
            ("opponentAnalysis", timedelta(hours=48)),
            ("parentReport", timedelta(hours=12)),
            ("injuryPrediction", timedelta(hours=2)),
            ("nutritionPlan", timedelta(hours=24)),
            ("mentalAssessment", timedelta(hours=6)),
            ("scoutingReport", timedelta(hours=48)),
            ("videoAnalysis", timedelta(hours=12)),
            ("sessionPlan", timedelta(hours=24)),
        ],
    )
    def test_builtin_table(self, operation: str, expected: timedelta) -> None:
        assert TTLPolicy().ttl_for(operation) == expected

    def test_unknown_operation_gets_default(self) -> None:
        assert TTLPolicy().ttl_for("somethingNew") == timedelta(minutes=30)
        assert DEFAULT_TTL == timedelta(minutes=30)

    def test_overrides_replace_single_entries(self) -> None:
        policy = TTLPolicy({"playerAnalysis": 60})
        assert policy.ttl_for("playerAnalysis") == timedelta(seconds=60)
        assert policy.ttl_for("trainingPlan") == timedelta(hours=24)

    def test_overrides_can_add_operations(self) -> None:
        policy = TTLPolicy({"drillLibrary": 7200})
        assert policy.ttl_for("drillLibrary") == timedelta(hours=2)

    def test_custom_default(self) -> None:
        policy = TTLPolicy(default_seconds=90)
        assert policy.ttl_for("unknown") == timedelta(seconds=90)

    def test_overrides_do_not_leak_into_module_table(self) -> None:
        TTLPolicy({"playerAnalysis": 1})
        assert OPERATION_TTLS["playerAnalysis"] == timedelta(hours=1)

    def test_settings_defaults_match_builtin_default(self) -> None:
        settings = CacheSettings()
        policy = TTLPolicy(settings.ttl_overrides, settings.default_ttl_seconds)
        assert policy.ttl_for("somethingNew") == DEFAULT_TTL
        for operation, ttl in OPERATION_TTLS.items():
            assert policy.ttl_for(operation) == ttl
