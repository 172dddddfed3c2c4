from typing import List, Optional

from sqlalchemy.orm import Session

from merge_api.models.snippet.language_volume_model import LanguageVolume
from merge_api.utils.lang_utils import normalize_language


def get_language_volume(db: Session, language: str) -> Optional[LanguageVolume]:
    return (
        db.query(LanguageVolume)
        .filter(LanguageVolume.language == normalize_language(language))
        .first()
    )


def list_language_volumes(db: Session) -> List[LanguageVolume]:
    return db.query(LanguageVolume).order_by(LanguageVolume.language.asc()).all()


def adjust_counters(volume: Optional[LanguageVolume], *, snippets: int = 0, ai_generated: int = 0) -> None:
    """Add deltas to the cached counters, never going below zero.

    The counters are not re-queried, so concurrent writers can make them
    drift until the next recount.
    """
    if volume is None:
        return
    volume.snippet_count = max(0, (volume.snippet_count or 0) + snippets)
    volume.ai_generated_count = max(0, (volume.ai_generated_count or 0) + ai_generated)
