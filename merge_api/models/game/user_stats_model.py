from __future__ import annotations

from datetime import datetime
from typing import TYPE_CHECKING, List, Optional

from sqlalchemy import JSON, DateTime, Float, ForeignKey, Integer, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship

from merge_api.db.base_class import Base

if TYPE_CHECKING:
    from ..user.user_model import User


class UserLanguageStats(Base):
    __tablename__ = "user_stats"
    __table_args__ = (
        UniqueConstraint("user_id", "language", name="uq_user_stats_user_language"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    user_id: Mapped[int] = mapped_column(Integer, ForeignKey("users.id"), index=True, nullable=False)
    language: Mapped[str] = mapped_column(String(50), nullable=False)
    games_played: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    average_score: Mapped[float] = mapped_column(Float, nullable=False, default=0.0)
    highest_score: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    last_played: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True), nullable=True)
    volumes: Mapped[List[int]] = mapped_column(JSON, nullable=False, default=list)

    user: Mapped["User"] = relationship(back_populates="language_stats")

    def __repr__(self) -> str:  # pragma: no cover - debug helper
        return f"<UserLanguageStats(user_id={self.user_id}, language='{self.language}')>"
