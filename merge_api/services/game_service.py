"""Game session lifecycle: start, answer, inspect and finalize."""

from __future__ import annotations

import logging
import random
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from sqlalchemy.orm import Session

from merge_api.crud import game_crud, language_volume_crud, settings_crud, snippet_crud
from merge_api.models.game.game_model import Game
from merge_api.models.snippet.language_volume_model import LanguageStatus
from merge_api.models.snippet.snippet_model import Snippet, difficulty_for_level
from merge_api.models.user.user_model import User
from merge_api.services.stats_service import StatsService
from merge_api.utils.lang_utils import normalize_language

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class GameError(Exception):
    """Raised when a game operation cannot be carried out."""

    code: str
    status_code: int = 400

    def __str__(self) -> str:  # pragma: no cover - human readable message
        return self.code


class GameService:
    """Business logic for a single play-through.

    A game moves forward only through ``submit_answer``; everything else is
    derived from the lengths of the answer and snippet lists.
    """

    def __init__(self, db: Session, rng: Optional[random.Random] = None):
        self.db = db
        self.rng = rng or random.Random()

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------
    def start_game(self, user_id: int, language: str, level: int, volume: int) -> Dict[str, Any]:
        """Pick the snippets for a new game and persist the empty session.

        Nothing is written when the pool for (language, volume, difficulty)
        is smaller than the configured game size.
        """
        settings = settings_crud.get_settings(self.db)
        if settings is None:
            raise GameError("settings_not_found", status_code=404)

        try:
            difficulty = difficulty_for_level(level)
        except ValueError:
            raise GameError("invalid_level") from None

        if self.db.get(User, user_id) is None:
            raise GameError("user_not_found", status_code=404)

        language = normalize_language(language)
        language_volume = language_volume_crud.get_language_volume(self.db, language)
        if language_volume is None:
            logger.error("Language volume not found for %s", language)
            raise GameError("language_not_configured", status_code=404)
        if language_volume.status != LanguageStatus.ACTIVE:
            raise GameError("language_unavailable", status_code=409)

        needed = int(settings.snippets_per_game[difficulty.value])
        if needed < 1:
            logger.error("Invalid snippets_per_game for %s: %s", difficulty.value, needed)
            raise GameError("invalid_game_size", status_code=409)

        candidates = snippet_crud.find_playable_snippets(self.db, language, volume, difficulty)
        if len(candidates) < needed:
            logger.warning(
                "Not enough %s snippets for %s volume %s (need %s, found %s)",
                difficulty.value,
                language,
                volume,
                needed,
                len(candidates),
            )
            raise GameError("not_enough_snippets", status_code=409)

        selected = self.rng.sample(candidates, needed)
        game = Game(
            user_id=user_id,
            language=language,
            level=level,
            difficulty=difficulty,
            volume=volume,
            score=0,
            snippet_ids=[snippet.id for snippet in selected],
            answers=[],
        )
        self.db.add(game)
        self.db.commit()
        self.db.refresh(game)

        logger.info("Game %s started: %s %s, %s snippets", game.id, language, difficulty.value, needed)
        return {
            "game_id": game.id,
            "snippets": [self._snippet_view(snippet) for snippet in selected],
            "time_limit": int(settings.time_limits[difficulty.value]),
        }

    def submit_answer(self, game_id: int, is_valid: bool) -> Dict[str, Any]:
        """Record the player's verdict on the current snippet."""
        game = self._get_game(game_id)
        if game.is_game_over:
            raise GameError("game_already_over", status_code=409)

        current = snippet_crud.get_snippet(self.db, game.snippet_ids[game.snippets_completed])
        if current is None:
            raise GameError("snippet_not_found", status_code=404)

        is_correct = current.is_valid == is_valid
        game.answers = list(game.answers or []) + [bool(is_valid)]
        if is_correct:
            game.score = (game.score or 0) + 1
        self.db.commit()

        is_game_over = game.is_game_over
        if is_game_over:
            logger.info("Game %s over with score %s/%s", game.id, game.score, game.total_snippets)
            StatsService(self.db).record_game(game)

        return {
            "is_correct": is_correct,
            "explanation": current.explanation,
            "is_game_over": is_game_over,
            "score": game.score,
        }

    def get_game_state(self, game_id: int) -> Dict[str, Any]:
        game = self._get_game(game_id)
        if game.is_game_over:
            return {"is_game_over": True, "score": game.score}

        index = game.snippets_completed
        current = snippet_crud.get_snippet(self.db, game.snippet_ids[index])
        if current is None:
            raise GameError("snippet_not_found", status_code=404)

        return {
            "is_game_over": False,
            "current_snippet": {"code": current.code, "language": current.language},
            "progress": {
                "current": index + 1,
                "total": game.total_snippets,
                "score": game.score,
            },
        }

    def save_game_score(self, game_id: int, client_score: Optional[int] = None) -> Game:
        """Finalize a finished game and give it a shareable slug.

        The stored score is recomputed from the answers; ``client_score`` is
        only compared against it. Finalizing twice keeps the first slug.
        """
        game = self._get_game(game_id)
        if not game.is_game_over:
            raise GameError("game_not_finished", status_code=409)

        score = self._recompute_score(game)
        if client_score is not None and client_score != score:
            logger.warning(
                "Client reported score %s for game %s, stored %s instead",
                client_score,
                game.id,
                score,
            )

        game.score = score
        if not game.slug_id:
            game.slug_id = self.build_slug(game)
            game.recap = f"recap/{game.slug_id}"
            game.finalized_at = datetime.now(timezone.utc)
        self.db.commit()
        self.db.refresh(game)
        return game

    def build_slug(self, game: Game) -> str:
        difficulty = difficulty_for_level(game.level)
        return f"{game.language}-{difficulty.value}-{self.rng.randint(1000, 9999)}-{game.public_id[-6:]}"

    def get_recap(self, slug_id: str) -> Dict[str, Any]:
        game = game_crud.get_game_by_slug(self.db, slug_id)
        if game is None:
            raise GameError("game_not_found", status_code=404)

        snippets = snippet_crud.get_snippets_by_ids(self.db, game.snippet_ids)
        answers = list(game.answers or [])
        entries: List[Dict[str, Any]] = []
        for index, snippet_id in enumerate(game.snippet_ids):
            snippet = snippets.get(snippet_id)
            if snippet is None:
                continue
            user_answer = answers[index] if index < len(answers) else None
            entries.append(
                {
                    "snippet_id": snippet.id,
                    "code": snippet.code,
                    "language": snippet.language,
                    "is_valid": snippet.is_valid,
                    "explanation": snippet.explanation,
                    "user_answer": user_answer,
                    "is_correct": None if user_answer is None else user_answer == snippet.is_valid,
                }
            )

        return {
            "slug_id": game.slug_id,
            "player_name": game.user.name if game.user else game_crud.ANONYMOUS_PLAYER_NAME,
            "language": game.language,
            "difficulty": game.difficulty.value,
            "level": game.level,
            "volume": game.volume,
            "score": game.score,
            "total_snippets": game.total_snippets,
            "timestamp": game.created_at,
            "snippets": entries,
        }

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------
    def _get_game(self, game_id: int) -> Game:
        game = game_crud.get_game(self.db, game_id)
        if game is None:
            raise GameError("game_not_found", status_code=404)
        return game

    def _recompute_score(self, game: Game) -> int:
        """Count the answers matching each snippet's validity flag.

        Falls back to the running score when a played snippet has since been
        deleted.
        """
        snippets = snippet_crud.get_snippets_by_ids(self.db, game.snippet_ids)
        score = 0
        for snippet_id, answer in zip(game.snippet_ids, game.answers or []):
            snippet = snippets.get(snippet_id)
            if snippet is None:
                logger.warning("Snippet %s of game %s is gone, keeping running score", snippet_id, game.id)
                return game.score
            if snippet.is_valid == answer:
                score += 1
        return score

    @staticmethod
    def _snippet_view(snippet: Snippet) -> Dict[str, Any]:
        return {
            "id": snippet.id,
            "code": snippet.code,
            "language": snippet.language,
            "difficulty": snippet.difficulty.value,
            "tags": list(snippet.tags or []),
        }
