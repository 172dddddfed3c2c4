"""Back-office operations: content management and dashboard analytics.

Callers are expected to have resolved the admin through
``get_current_admin``; the service only records who did what.
"""

from __future__ import annotations

import logging
from collections import Counter
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Dict, List, Mapping, Optional

from sqlalchemy import func
from sqlalchemy.orm import Session

from merge_api.crud import language_volume_crud, snippet_crud
from merge_api.models.game.game_model import Game
from merge_api.models.snippet.language_volume_model import LanguageStatus, LanguageVolume
from merge_api.models.snippet.snippet_model import Difficulty, Snippet
from merge_api.models.user.user_model import User
from merge_api.schemas.snippet_schema import SnippetCreate
from merge_api.utils.lang_utils import normalize_language

logger = logging.getLogger(__name__)

_EDITABLE_SNIPPET_FIELDS = ("code", "is_valid", "difficulty", "explanation", "tags", "volume")


@dataclass(slots=True)
class AdminError(Exception):
    code: str
    status_code: int = 400

    def __str__(self) -> str:  # pragma: no cover - human readable message
        return self.code


class AdminService:
    def __init__(self, db: Session, admin: User):
        self.db = db
        self.admin = admin

    # ------------------------------------------------------------------
    # Snippets
    # ------------------------------------------------------------------
    def list_snippets(self, language: str, volume: Optional[int] = None) -> List[Snippet]:
        return snippet_crud.list_snippets(self.db, normalize_language(language), volume)

    def add_snippet(self, payload: SnippetCreate) -> Snippet:
        language = normalize_language(payload.language)
        snippet = Snippet(
            language=language,
            volume=payload.volume,
            code=payload.code,
            is_valid=payload.is_valid,
            difficulty=payload.difficulty,
            explanation=payload.explanation,
            tags=list(payload.tags),
            ai_generated=payload.ai_generated,
            created_by_id=self.admin.id,
        )
        self.db.add(snippet)

        language_volume_crud.adjust_counters(
            language_volume_crud.get_language_volume(self.db, language),
            snippets=1,
            ai_generated=1 if payload.ai_generated else 0,
        )
        self.db.commit()
        self.db.refresh(snippet)

        logger.info("Admin %s added snippet %s (%s)", self.admin.id, snippet.id, language)
        return snippet

    def update_snippet(self, snippet_id: int, changes: Mapping[str, Any]) -> Snippet:
        """Patch a snippet. Games already played keep their recorded answers."""
        snippet = self._get_snippet(snippet_id)
        for field, value in changes.items():
            if field not in _EDITABLE_SNIPPET_FIELDS or value is None:
                continue
            if field == "tags":
                value = list(value)
            setattr(snippet, field, value)
        self.db.commit()
        self.db.refresh(snippet)

        logger.info("Admin %s updated snippet %s", self.admin.id, snippet.id)
        return snippet

    def delete_snippet(self, snippet_id: int) -> None:
        snippet = self._get_snippet(snippet_id)
        language_volume_crud.adjust_counters(
            language_volume_crud.get_language_volume(self.db, snippet.language),
            snippets=-1,
            ai_generated=-1 if snippet.ai_generated else 0,
        )
        self.db.delete(snippet)
        self.db.commit()

        logger.info("Admin %s deleted snippet %s", self.admin.id, snippet_id)

    # ------------------------------------------------------------------
    # Languages & volumes
    # ------------------------------------------------------------------
    def add_language(
        self,
        language: str,
        display_name: str,
        icon: Optional[str] = None,
        icon_color: Optional[str] = None,
    ) -> LanguageVolume:
        language = normalize_language(language)
        if language_volume_crud.get_language_volume(self.db, language) is not None:
            raise AdminError("language_already_exists", status_code=409)

        volume = LanguageVolume(
            language=language,
            display_name=display_name,
            icon=icon,
            icon_color=icon_color,
            current_volume=1,
            snippet_count=0,
            ai_generated_count=0,
            status=LanguageStatus.ACTIVE,
        )
        self.db.add(volume)
        self.db.commit()
        self.db.refresh(volume)

        logger.info("Admin %s added language %s", self.admin.id, language)
        return volume

    def set_current_volume(self, language: str, current_volume: int) -> LanguageVolume:
        volume = self._get_language_volume(language)
        volume.current_volume = current_volume
        volume.snippet_count = self._count_snippets(volume.language)
        self.db.commit()
        self.db.refresh(volume)

        logger.info("Admin %s moved %s to volume %s", self.admin.id, volume.language, current_volume)
        return volume

    def create_new_volume(self, language: str) -> LanguageVolume:
        """Rotate ``language`` to a fresh volume, creating it at volume 1 if unknown."""
        language = normalize_language(language)
        volume = language_volume_crud.get_language_volume(self.db, language)
        now = datetime.now(timezone.utc)
        if volume is None:
            volume = LanguageVolume(language=language, current_volume=1)
            self.db.add(volume)
        else:
            volume.current_volume = (volume.current_volume or 0) + 1
        volume.snippet_count = 0
        volume.ai_generated_count = 0
        volume.last_ai_generation = now
        self.db.commit()
        self.db.refresh(volume)

        logger.info("Admin %s opened volume %s for %s", self.admin.id, volume.current_volume, language)
        return volume

    def set_language_status(self, language: str, status: LanguageStatus) -> LanguageVolume:
        volume = self._get_language_volume(language)
        volume.status = status
        self.db.commit()
        self.db.refresh(volume)

        logger.info("Admin %s set %s status to %s", self.admin.id, volume.language, status.value)
        return volume

    def set_language_icon(self, language: str, icon: str, icon_color: Optional[str] = None) -> LanguageVolume:
        volume = self._get_language_volume(language)
        volume.icon = icon
        if icon_color:
            volume.icon_color = icon_color
        self.db.commit()
        self.db.refresh(volume)
        return volume

    def recount_snippet_counts(self) -> List[LanguageVolume]:
        """Recompute the cached counters from the snippet table."""
        volumes = language_volume_crud.list_language_volumes(self.db)
        taken = {volume.language for volume in volumes}
        for volume in volumes:
            normalized = normalize_language(volume.language)
            if normalized != volume.language:
                if normalized in taken:
                    logger.warning("Cannot rename %s to %s: already exists", volume.language, normalized)
                else:
                    taken.discard(volume.language)
                    taken.add(normalized)
                    volume.language = normalized

            volume.snippet_count = self._count_snippets(volume.language)
            volume.ai_generated_count = (
                self.db.query(func.count(Snippet.id))
                .filter(Snippet.language == volume.language, Snippet.ai_generated.is_(True))
                .scalar()
                or 0
            )
            logger.info("Recounted %s: %s snippets", volume.language, volume.snippet_count)

        self.db.commit()
        return volumes

    # ------------------------------------------------------------------
    # Analytics
    # ------------------------------------------------------------------
    def dashboard_stats(self) -> Dict[str, Any]:
        total_users = self.db.query(func.count(User.id)).scalar() or 0
        total_games, average_score = self.db.query(func.count(Game.id), func.avg(Game.score)).one()

        language_rows = (
            self.db.query(Game.language, func.count(Game.id), func.avg(Game.score))
            .group_by(Game.language)
            .order_by(Game.language.asc())
            .all()
        )
        return {
            "total_users": total_users,
            "total_games": total_games or 0,
            "average_score": float(average_score or 0.0),
            "language_stats": [
                {"language": language, "total_games": count, "average_score": float(avg or 0.0)}
                for language, count, avg in language_rows
            ],
        }

    def analytics(self) -> Dict[str, Any]:
        languages: List[Dict[str, Any]] = []
        for volume in language_volume_crud.list_language_volumes(self.db):
            counts = dict(
                self.db.query(Snippet.difficulty, func.count(Snippet.id))
                .filter(Snippet.language == volume.language)
                .group_by(Snippet.difficulty)
                .all()
            )
            actual = sum(counts.values())
            if actual != volume.snippet_count:
                logger.warning(
                    "Snippet count drift for %s: stored %s, actual %s",
                    volume.language,
                    volume.snippet_count,
                    actual,
                )
            languages.append(
                {
                    "language": volume.language,
                    "display_name": volume.display_name,
                    "status": volume.status,
                    "current_volume": volume.current_volume,
                    "snippet_count": actual,
                    "stored_snippet_count": volume.snippet_count,
                    "ai_generated_count": volume.ai_generated_count,
                    "last_ai_generation": volume.last_ai_generation,
                    "difficulty_counts": {level.value: counts.get(level, 0) for level in Difficulty},
                }
            )

        games = self.db.query(Game.difficulty, Game.volume, Game.level).all()
        difficulty_summary = Counter(difficulty for difficulty, _, _ in games)
        return {
            "total_users": self.db.query(func.count(User.id)).scalar() or 0,
            "total_games": len(games),
            "languages": languages,
            "difficulty_summary": {level.value: difficulty_summary.get(level, 0) for level in Difficulty},
            "volume_summary": dict(Counter(volume for _, volume, _ in games)),
            "level_summary": dict(Counter(level for _, _, level in games)),
        }

    def snippet_stats(self) -> Dict[str, Any]:
        by_language: List[Dict[str, Any]] = []
        for volume in language_volume_crud.list_language_volumes(self.db):
            rows = dict(
                self.db.query(Snippet.is_valid, func.count(Snippet.id))
                .filter(Snippet.language == volume.language)
                .group_by(Snippet.is_valid)
                .all()
            )
            valid_count = rows.get(True, 0)
            invalid_count = rows.get(False, 0)
            by_language.append(
                {
                    "language": volume.language,
                    "count": valid_count + invalid_count,
                    "valid_count": valid_count,
                    "invalid_count": invalid_count,
                }
            )
        return {
            "total_snippets": sum(entry["count"] for entry in by_language),
            "snippets_by_language": by_language,
        }

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------
    def _get_snippet(self, snippet_id: int) -> Snippet:
        snippet = snippet_crud.get_snippet(self.db, snippet_id)
        if snippet is None:
            raise AdminError("snippet_not_found", status_code=404)
        return snippet

    def _get_language_volume(self, language: str) -> LanguageVolume:
        volume = language_volume_crud.get_language_volume(self.db, language)
        if volume is None:
            raise AdminError("language_not_found", status_code=404)
        return volume

    def _count_snippets(self, language: str) -> int:
        return self.db.query(func.count(Snippet.id)).filter(Snippet.language == language).scalar() or 0
