from __future__ import annotations

import uuid
from datetime import datetime, timezone
from typing import TYPE_CHECKING, List, Optional

from sqlalchemy import JSON, DateTime, Enum, ForeignKey, Integer, String, func
from sqlalchemy.orm import Mapped, mapped_column, relationship

from merge_api.db.base_class import Base
from merge_api.models.snippet.snippet_model import Difficulty

if TYPE_CHECKING:
    from ..user.user_model import User


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _public_id() -> str:
    return uuid.uuid4().hex


class Game(Base):
    """One play-through over a fixed, ordered list of snippets.

    ``answers`` is append-only and never longer than ``snippet_ids``; the
    game is over exactly when both lists have the same length. JSON columns
    are reassigned, never mutated in place, so the ORM notices the change.
    """

    __tablename__ = "games"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    public_id: Mapped[str] = mapped_column(String(32), unique=True, nullable=False, default=_public_id)
    user_id: Mapped[int] = mapped_column(Integer, ForeignKey("users.id"), index=True, nullable=False)
    language: Mapped[str] = mapped_column(String(50), nullable=False, index=True)
    level: Mapped[int] = mapped_column(Integer, nullable=False)
    difficulty: Mapped[Difficulty] = mapped_column(
        Enum(Difficulty, name="difficulty", values_callable=lambda obj: [e.value for e in obj]),
        nullable=False,
    )
    volume: Mapped[int] = mapped_column(Integer, nullable=False, default=1)
    score: Mapped[int] = mapped_column(Integer, nullable=False, default=0, server_default="0")
    snippet_ids: Mapped[List[int]] = mapped_column(JSON, nullable=False, default=list)
    answers: Mapped[List[bool]] = mapped_column(JSON, nullable=False, default=list)

    slug_id: Mapped[Optional[str]] = mapped_column(String(120), unique=True, index=True, nullable=True)
    recap: Mapped[Optional[str]] = mapped_column(String(140), nullable=True)
    finalized_at: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True), nullable=True)

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=_utcnow, server_default=func.now()
    )

    user: Mapped["User"] = relationship(back_populates="games")

    @property
    def snippets_completed(self) -> int:
        return len(self.answers or [])

    @property
    def total_snippets(self) -> int:
        return len(self.snippet_ids or [])

    @property
    def is_game_over(self) -> bool:
        return self.snippets_completed >= self.total_snippets

    def __repr__(self) -> str:  # pragma: no cover - debug helper
        return f"<Game(id={self.id}, language='{self.language}', score={self.score})>"
