from typing import Dict, Iterable, List, Optional

from sqlalchemy.orm import Session

from merge_api.models.snippet.snippet_model import Difficulty, Snippet


def get_snippet(db: Session, snippet_id: int) -> Optional[Snippet]:
    return db.get(Snippet, snippet_id)


def get_snippets_by_ids(db: Session, snippet_ids: Iterable[int]) -> Dict[int, Snippet]:
    """Load several snippets at once, keyed by id. Missing ids are absent."""
    ids = list(set(snippet_ids))
    if not ids:
        return {}
    return {snippet.id: snippet for snippet in db.query(Snippet).filter(Snippet.id.in_(ids)).all()}


def list_snippets(db: Session, language: str, volume: Optional[int] = None) -> List[Snippet]:
    query = db.query(Snippet).filter(Snippet.language == language)
    if volume is not None:
        query = query.filter(Snippet.volume == volume)
    return query.order_by(Snippet.id.asc()).all()


def find_playable_snippets(db: Session, language: str, volume: int, difficulty: Difficulty) -> List[Snippet]:
    return (
        db.query(Snippet)
        .filter(
            Snippet.language == language,
            Snippet.volume == volume,
            Snippet.difficulty == difficulty,
        )
        .order_by(Snippet.id.asc())
        .all()
    )
