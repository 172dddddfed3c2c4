from __future__ import annotations

from typing import Any, Dict

from sqlalchemy import JSON, Integer
from sqlalchemy.orm import Mapped, mapped_column

from merge_api.db.base_class import Base

DEFAULT_TIME_LIMITS: Dict[str, int] = {"easy": 120, "medium": 90, "hard": 60}
DEFAULT_SNIPPETS_PER_GAME: Dict[str, int] = {"easy": 3, "medium": 5, "hard": 7}
DEFAULT_AI_GENERATION: Dict[str, Any] = {
    "enabled": True,
    "valid_ratio": 0.5,
    "max_per_request": 5,
    "min_snippets_before_generation": 5,
}


class GameSettings(Base):
    """Single-row table holding the tunable game parameters."""

    __tablename__ = "game_settings"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    time_limits: Mapped[Dict[str, int]] = mapped_column(
        JSON, nullable=False, default=lambda: dict(DEFAULT_TIME_LIMITS)
    )
    snippets_per_game: Mapped[Dict[str, int]] = mapped_column(
        JSON, nullable=False, default=lambda: dict(DEFAULT_SNIPPETS_PER_GAME)
    )
    ai_generation: Mapped[Dict[str, Any]] = mapped_column(
        JSON, nullable=False, default=lambda: dict(DEFAULT_AI_GENERATION)
    )

    def __repr__(self) -> str:  # pragma: no cover - debug helper
        return f"<GameSettings(id={self.id})>"
