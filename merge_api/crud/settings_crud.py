from typing import Any, Dict, Iterable, List, Optional

from sqlalchemy.orm import Session

from merge_api.models.settings.game_settings_model import (
    DEFAULT_AI_GENERATION,
    DEFAULT_SNIPPETS_PER_GAME,
    DEFAULT_TIME_LIMITS,
    GameSettings,
)
from merge_api.models.snippet.language_volume_model import LanguageVolume
from merge_api.utils.lang_utils import language_display_name, normalize_language


def get_settings(db: Session) -> Optional[GameSettings]:
    """Return the settings row, or ``None`` when it was never created."""
    return db.query(GameSettings).order_by(GameSettings.id.asc()).first()


def default_settings_payload() -> Dict[str, Any]:
    return {
        "time_limits": dict(DEFAULT_TIME_LIMITS),
        "snippets_per_game": dict(DEFAULT_SNIPPETS_PER_GAME),
        "ai_generation": dict(DEFAULT_AI_GENERATION),
    }


def get_settings_payload(db: Session) -> Dict[str, Any]:
    """Settings plus every language volume, falling back to the defaults."""
    settings = get_settings(db)
    if settings is None:
        return {"settings": default_settings_payload(), "volumes": []}

    volumes: List[LanguageVolume] = db.query(LanguageVolume).order_by(LanguageVolume.language.asc()).all()
    return {
        "settings": {
            "time_limits": dict(settings.time_limits),
            "snippets_per_game": dict(settings.snippets_per_game),
            "ai_generation": dict(settings.ai_generation),
        },
        "volumes": volumes,
    }


def initialize_settings(db: Session) -> GameSettings:
    settings = get_settings(db)
    if settings is not None:
        return settings

    settings = GameSettings(**default_settings_payload())
    db.add(settings)
    db.commit()
    db.refresh(settings)
    return settings


def update_settings(
    db: Session,
    *,
    time_limits: Optional[Dict[str, int]] = None,
    snippets_per_game: Optional[Dict[str, int]] = None,
    ai_generation: Optional[Dict[str, Any]] = None,
) -> GameSettings:
    """Replace the provided groups, leaving the others untouched."""
    settings = get_settings(db)
    if settings is None:
        settings = GameSettings(**default_settings_payload())
        db.add(settings)

    if time_limits is not None:
        settings.time_limits = dict(time_limits)
    if snippets_per_game is not None:
        settings.snippets_per_game = dict(snippets_per_game)
    if ai_generation is not None:
        settings.ai_generation = dict(ai_generation)

    db.commit()
    db.refresh(settings)
    return settings


def ensure_language_volumes(db: Session, languages: Iterable[str]) -> List[LanguageVolume]:
    """Create a volume-1 row for each language that has none yet."""
    created: List[LanguageVolume] = []
    for raw in languages:
        language = normalize_language(raw)
        if not language:
            continue
        exists = db.query(LanguageVolume.id).filter(LanguageVolume.language == language).first()
        if exists:
            continue
        volume = LanguageVolume(
            language=language,
            display_name=language_display_name(language),
            current_volume=1,
            snippet_count=0,
            ai_generated_count=0,
        )
        db.add(volume)
        created.append(volume)

    if created:
        db.commit()
    return created
