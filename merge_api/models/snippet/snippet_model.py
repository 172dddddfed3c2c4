from __future__ import annotations

import enum
from datetime import datetime
from typing import List, Optional

from sqlalchemy import JSON, Boolean, DateTime, Enum, ForeignKey, Index, Integer, String, Text, func
from sqlalchemy.orm import Mapped, mapped_column

from merge_api.db.base_class import Base


class Difficulty(str, enum.Enum):
    EASY = "easy"
    MEDIUM = "medium"
    HARD = "hard"


LEVEL_DIFFICULTIES = {
    1: Difficulty.EASY,
    2: Difficulty.MEDIUM,
    3: Difficulty.HARD,
}


def difficulty_for_level(level: int) -> Difficulty:
    """Map a game level (1-3) to its snippet difficulty."""
    try:
        return LEVEL_DIFFICULTIES[level]
    except KeyError:
        raise ValueError(f"invalid level: {level}") from None


class Snippet(Base):
    __tablename__ = "code_snippets"
    __table_args__ = (
        Index("ix_code_snippets_language_volume", "language", "volume"),
        Index("ix_code_snippets_language_difficulty", "language", "difficulty"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    language: Mapped[str] = mapped_column(String(50), nullable=False)
    volume: Mapped[int] = mapped_column(Integer, nullable=False, default=1, server_default="1")
    code: Mapped[str] = mapped_column(Text, nullable=False)
    is_valid: Mapped[bool] = mapped_column(Boolean, nullable=False)
    difficulty: Mapped[Difficulty] = mapped_column(
        Enum(Difficulty, name="difficulty", values_callable=lambda obj: [e.value for e in obj]),
        nullable=False,
    )
    explanation: Mapped[str] = mapped_column(Text, nullable=False, default="")
    tags: Mapped[List[str]] = mapped_column(JSON, nullable=False, default=list)
    ai_generated: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False, server_default="0")
    created_by_id: Mapped[Optional[int]] = mapped_column(Integer, ForeignKey("users.id"), nullable=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, server_default=func.now()
    )

    def __repr__(self) -> str:  # pragma: no cover - debug helper
        return f"<Snippet(id={self.id}, language='{self.language}', difficulty='{self.difficulty.value}')>"
