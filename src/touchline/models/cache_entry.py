"""AI response cache entry: one row per distinct (operation, params) pair."""

from __future__ import annotations

from datetime import datetime
from typing import Any

from sqlalchemy import DateTime, Index, Integer, String, Text, func
from sqlalchemy.orm import Mapped, mapped_column

from touchline.models.base import Base, PortableJSON


class AIResponseCacheEntry(Base):
    __tablename__ = "ai_response_cache"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)

    # Lookup Keys
    cache_key: Mapped[str] = mapped_column(
        String(255), nullable=False, unique=True, index=True
    )  # "<operation>:<sha256 of canonical params>"
    operation: Mapped[str] = mapped_column(String(100), nullable=False, index=True)

    # Cached Data
    request_params: Mapped[Any | None] = mapped_column(PortableJSON, nullable=True)
    response: Mapped[str] = mapped_column(Text, nullable=False)
    context_data: Mapped[Any | None] = mapped_column(PortableJSON, nullable=True)
    user_id: Mapped[int | None] = mapped_column(Integer, nullable=True)

    # Metrics
    hit_count: Mapped[int] = mapped_column(Integer, default=0, nullable=False)

    # Lifecycle
    expires_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), nullable=False
    )
    last_accessed_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), nullable=False
    )

    __table_args__ = (
        Index("ix_ai_response_cache_expires_at", expires_at),
    )

    def __repr__(self) -> str:
        return f"<AIResponseCacheEntry {self.cache_key} hits={self.hit_count}>"
