from __future__ import annotations

import enum
from datetime import datetime
from typing import Optional

from sqlalchemy import DateTime, Enum, Integer, String, func
from sqlalchemy.orm import Mapped, mapped_column

from merge_api.db.base_class import Base


class LanguageStatus(str, enum.Enum):
    ACTIVE = "active"
    PAUSED = "paused"
    REMOVED = "removed"


class LanguageVolume(Base):
    """Per-language content rotation state.

    ``snippet_count`` and ``ai_generated_count`` are maintained by addition
    when snippets are inserted or removed; they can drift from the real
    number of rows and are recomputed by the admin recount.
    """

    __tablename__ = "language_volumes"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    language: Mapped[str] = mapped_column(String(50), unique=True, index=True, nullable=False)
    display_name: Mapped[Optional[str]] = mapped_column(String(100), nullable=True)
    icon: Mapped[Optional[str]] = mapped_column(String(100), nullable=True)
    icon_color: Mapped[Optional[str]] = mapped_column(String(50), nullable=True)
    current_volume: Mapped[int] = mapped_column(Integer, nullable=False, default=1, server_default="1")
    snippet_count: Mapped[int] = mapped_column(Integer, nullable=False, default=0, server_default="0")
    ai_generated_count: Mapped[int] = mapped_column(Integer, nullable=False, default=0, server_default="0")
    last_ai_generation: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True), nullable=True)
    status: Mapped[LanguageStatus] = mapped_column(
        Enum(LanguageStatus, name="languagestatus", values_callable=lambda obj: [e.value for e in obj]),
        nullable=False,
        default=LanguageStatus.ACTIVE,
        server_default=LanguageStatus.ACTIVE.value,
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, server_default=func.now()
    )

    def __repr__(self) -> str:  # pragma: no cover - debug helper
        return f"<LanguageVolume(language='{self.language}', volume={self.current_volume})>"
