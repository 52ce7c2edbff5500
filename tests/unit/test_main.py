"""Tests for the ``python -m touchline`` entry point."""

from __future__ import annotations

from typing import Any

import pytest
import uvicorn

from touchline.__main__ import main
from touchline.config import get_settings


@pytest.fixture
def served(monkeypatch: pytest.MonkeyPatch) -> dict[str, Any]:
    captured: dict[str, Any] = {}

    def fake_run(app: str, **kwargs: Any) -> None:
        captured["app"] = app
        captured.update(kwargs)

    monkeypatch.setattr(uvicorn, "run", fake_run)
    return captured


@pytest.mark.unit
class TestMain:
    def test_defaults_come_from_settings(self, served: dict[str, Any]) -> None:
        main([])

        assert served["app"] == "touchline.app:create_app"
        assert served["factory"] is True
        settings = get_settings()
        assert served["host"] == settings.server.host
        assert served["port"] == settings.server.port
        assert served["workers"] == settings.server.workers
        assert served["log_level"] == settings.logging.level.lower()

    def test_flags_override_settings(self, served: dict[str, Any]) -> None:
        main(["--host", "127.0.0.1", "--port", "9100", "--workers", "1"])

        assert served["host"] == "127.0.0.1"
        assert served["port"] == 9100
        assert served["workers"] == 1
