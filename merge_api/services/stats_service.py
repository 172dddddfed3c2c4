"""Running statistics updated when a game ends."""

from __future__ import annotations

import logging
from typing import List

from sqlalchemy.orm import Session

from merge_api.models.game.game_model import Game
from merge_api.models.game.user_stats_model import UserLanguageStats
from merge_api.models.user.user_model import User

logger = logging.getLogger(__name__)


def running_average(previous_average: float, previous_count: int, new_value: float) -> float:
    """Fold ``new_value`` into a mean computed over ``previous_count`` values."""
    previous_count = max(previous_count or 0, 0)
    return ((previous_average or 0.0) * previous_count + new_value) / (previous_count + 1)


class StatsService:
    """Maintains per-language stats and the user's global totals."""

    def __init__(self, db: Session):
        self.db = db

    def record_game(self, game: Game) -> UserLanguageStats:
        """Apply a finished game to both aggregates.

        The per-language row and the user totals are committed separately;
        a failure in between leaves the two out of step.
        """
        stats = self._record_language_stats(game)
        self.db.commit()

        self._record_user_totals(game)
        self.db.commit()

        logger.info(
            "Stats updated for user %s (%s): %s games, average %.2f",
            game.user_id,
            game.language,
            stats.games_played,
            stats.average_score,
        )
        return stats

    def get_language_stats(self, user_id: int) -> List[UserLanguageStats]:
        return (
            self.db.query(UserLanguageStats)
            .filter(UserLanguageStats.user_id == user_id)
            .order_by(UserLanguageStats.language.asc())
            .all()
        )

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------
    def _record_language_stats(self, game: Game) -> UserLanguageStats:
        stats = (
            self.db.query(UserLanguageStats)
            .filter(
                UserLanguageStats.user_id == game.user_id,
                UserLanguageStats.language == game.language,
            )
            .first()
        )

        if stats is None:
            stats = UserLanguageStats(
                user_id=game.user_id,
                language=game.language,
                games_played=1,
                average_score=float(game.score),
                highest_score=game.score,
                last_played=game.created_at,
                volumes=[game.volume],
            )
            self.db.add(stats)
            return stats

        stats.average_score = running_average(stats.average_score, stats.games_played, game.score)
        stats.games_played = (stats.games_played or 0) + 1
        stats.highest_score = max(stats.highest_score or 0, game.score)
        stats.last_played = game.created_at
        volumes = list(stats.volumes or [])
        if game.volume not in volumes:
            stats.volumes = volumes + [game.volume]
        return stats

    def _record_user_totals(self, game: Game) -> None:
        user = self.db.get(User, game.user_id)
        if user is None:
            logger.warning("Game %s finished for unknown user %s", game.id, game.user_id)
            return

        user.average_score = running_average(user.average_score, user.total_games, game.score)
        user.total_games = (user.total_games or 0) + 1
