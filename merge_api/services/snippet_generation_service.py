"""AI-assisted snippet generation.

One completion request per call: the prompt asks for a batch of snippets,
the JSON answer is validated as a whole and only then inserted. A failed
request or an unparsable answer inserts nothing and is not retried.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from decimal import ROUND_HALF_UP, Decimal
from typing import Any, Callable, Dict, List, Optional

from pydantic import ValidationError
from sqlalchemy.orm import Session

from merge_api.core import openai_service
from merge_api.core.openai_service import CompletionError, CompletionResult
from merge_api.crud import language_volume_crud, settings_crud
from merge_api.models.analytics.ai_token_log_model import AITokenLog
from merge_api.models.settings.game_settings_model import DEFAULT_AI_GENERATION
from merge_api.models.snippet.snippet_model import Difficulty, Snippet
from merge_api.models.user.user_model import User
from merge_api.schemas.snippet_schema import GeneratedSnippetBatch
from merge_api.utils.completion_payload import CompletionPayloadError, extract_snippet_items

logger = logging.getLogger(__name__)

FEATURE_NAME = "snippet_generation"

SYSTEM_PROMPT = """You are an expert developer and coding instructor. You write short code snippets for a game \
in which players decide whether a piece of code is valid or contains a bug.

Rules:
- Valid snippets must compile/run and follow the idioms of the language.
- Invalid snippets must contain one subtle but identifiable issue.
- Every snippet comes with a clear explanation of why it is valid or invalid.
- Keep snippets concise but meaningful.

Difficulty levels:
- easy: basic syntax, common patterns, obvious issues
- medium: intermediate concepts, subtler issues
- hard: advanced patterns, edge cases, performance pitfalls

Answer with a single JSON object only."""

PROMPT_TEMPLATE = (
    "Generate {count} {language} code snippets at {difficulty} difficulty.\n"
    "Exactly {valid_count} of them must be valid and {invalid_count} must be invalid "
    "(a valid ratio of {valid_ratio:.2f}).\n"
    'Return a JSON object of the form {{"snippets": [{{"code": "...", "isValid": true, '
    '"explanation": "...", "tags": ["..."]}}]}}.'
)

CompletionFn = Callable[..., CompletionResult]


@dataclass(slots=True)
class SnippetGenerationError(Exception):
    code: str
    status_code: int = 400

    def __str__(self) -> str:  # pragma: no cover - human readable message
        return self.code


def split_valid_invalid(count: int, valid_ratio: float) -> tuple[int, int]:
    """Split ``count`` into (valid, invalid), rounding half up.

    >>> split_valid_invalid(5, 0.5)
    (3, 2)
    """
    valid = int((Decimal(count) * Decimal(str(valid_ratio))).quantize(Decimal("1"), rounding=ROUND_HALF_UP))
    valid = min(max(valid, 0), count)
    return valid, count - valid


def build_prompt(language: str, difficulty: Difficulty, valid_count: int, invalid_count: int, valid_ratio: float) -> str:
    return PROMPT_TEMPLATE.format(
        count=valid_count + invalid_count,
        language=language,
        difficulty=difficulty.value,
        valid_count=valid_count,
        invalid_count=invalid_count,
        valid_ratio=valid_ratio,
    )


class SnippetGenerationService:
    def __init__(self, db: Session, *, complete: Optional[CompletionFn] = None, model: Optional[str] = None):
        self.db = db
        self.complete = complete or openai_service.request_completion
        self.model = model

    def generate(
        self,
        language: str,
        difficulty: str,
        count: int,
        *,
        valid_ratio: Optional[float] = None,
        volume: Optional[int] = None,
        user: Optional[User] = None,
    ) -> List[Snippet]:
        """Generate, validate and store ``count`` snippets for ``language``."""
        ai_settings = self._ai_settings()
        if not ai_settings.get("enabled", False):
            raise SnippetGenerationError("ai_generation_disabled", status_code=403)

        max_per_request = int(ai_settings.get("max_per_request", DEFAULT_AI_GENERATION["max_per_request"]))
        if count < 1 or count > max_per_request:
            raise SnippetGenerationError("invalid_count")

        if valid_ratio is None:
            valid_ratio = float(ai_settings.get("valid_ratio", DEFAULT_AI_GENERATION["valid_ratio"]))
        if not 0.0 <= valid_ratio <= 1.0:
            raise SnippetGenerationError("invalid_valid_ratio")

        try:
            level = Difficulty(difficulty)
        except ValueError:
            raise SnippetGenerationError("invalid_difficulty") from None

        language_volume = language_volume_crud.get_language_volume(self.db, language)
        if language_volume is None:
            raise SnippetGenerationError("language_not_configured", status_code=404)

        valid_count, invalid_count = split_valid_invalid(count, valid_ratio)
        prompt = build_prompt(language_volume.language, level, valid_count, invalid_count, valid_ratio)
        logger.info(
            "Generating %s %s snippets for %s (%s valid / %s invalid)",
            count,
            level.value,
            language_volume.language,
            valid_count,
            invalid_count,
        )

        try:
            result = self.complete(prompt, system_prompt=SYSTEM_PROMPT, model=self.model)
        except CompletionError as exc:
            logger.error("Snippet generation failed for %s: %s", language_volume.language, exc)
            raise SnippetGenerationError("completion_failed", status_code=502) from exc

        self._log_usage(result, user)
        batch = self._parse(result.text)
        if len(batch.snippets) != count:
            logger.warning("Requested %s snippets, completion returned %s", count, len(batch.snippets))

        target_volume = volume if volume is not None else language_volume.current_volume
        snippets = [
            Snippet(
                language=language_volume.language,
                volume=target_volume,
                code=item.code,
                is_valid=item.is_valid,
                difficulty=level,
                explanation=item.explanation,
                tags=list(item.tags),
                ai_generated=True,
                created_by_id=user.id if user else None,
            )
            for item in batch.snippets
        ]
        self.db.add_all(snippets)

        inserted = len(snippets)
        language_volume_crud.adjust_counters(language_volume, snippets=inserted, ai_generated=inserted)
        language_volume.last_ai_generation = datetime.now(timezone.utc)
        self.db.commit()
        for snippet in snippets:
            self.db.refresh(snippet)

        logger.info("Stored %s generated snippets for %s", len(snippets), language_volume.language)
        return snippets

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------
    def _ai_settings(self) -> Dict[str, Any]:
        settings = settings_crud.get_settings(self.db)
        if settings is None:
            return dict(DEFAULT_AI_GENERATION)
        return {**DEFAULT_AI_GENERATION, **(settings.ai_generation or {})}

    @staticmethod
    def _parse(text: str) -> GeneratedSnippetBatch:
        try:
            items = extract_snippet_items(text)
            return GeneratedSnippetBatch.model_validate({"snippets": items})
        except (CompletionPayloadError, ValidationError) as exc:
            logger.error("Unparsable snippet generation payload: %s\n%s", exc, text[:500])
            raise SnippetGenerationError("invalid_completion_payload", status_code=502) from exc

    def _log_usage(self, result: CompletionResult, user: Optional[User]) -> None:
        self.db.add(
            AITokenLog(
                user_id=user.id if user else None,
                feature=FEATURE_NAME,
                model_name=result.model,
                prompt_tokens=result.prompt_tokens,
                completion_tokens=result.completion_tokens,
                cost_usd=result.cost_usd,
            )
        )
        self.db.commit()
