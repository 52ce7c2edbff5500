"""SQLAlchemy models: import all models here so Alembic can discover them."""

from touchline.models.base import Base
from touchline.models.cache_entry import AIResponseCacheEntry
from touchline.models.player import PerformanceMetric, Player, PlayerStatus

__all__ = [
    "Base",
    "AIResponseCacheEntry",
    "Player",
    "PlayerStatus",
    "PerformanceMetric",
]
