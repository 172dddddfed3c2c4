"""Read-side queries over finished and in-flight games (scores, history)."""

from typing import Any, Dict, List, Optional

from sqlalchemy.orm import Session, joinedload

from merge_api.models.game.game_model import Game

ANONYMOUS_PLAYER_NAME = "Anonymous"


def get_game(db: Session, game_id: int) -> Optional[Game]:
    return db.get(Game, game_id)


def get_game_by_slug(db: Session, slug_id: str) -> Optional[Game]:
    return db.query(Game).filter(Game.slug_id == slug_id).first()


def _score_entry(game: Game, *, with_player: bool = True) -> Dict[str, Any]:
    entry: Dict[str, Any] = {
        "id": game.id,
        "score": game.score,
        "language": game.language,
        "level": game.level,
        "volume": game.volume,
        "timestamp": game.created_at,
        "total_snippets": game.total_snippets,
        "slug_id": game.slug_id,
    }
    if with_player:
        entry["player_name"] = game.user.name if game.user and game.user.name else ANONYMOUS_PLAYER_NAME
    return entry


def top_scores(
    db: Session,
    *,
    limit: int = 10,
    language: Optional[str] = None,
    level: Optional[int] = None,
) -> List[Dict[str, Any]]:
    query = db.query(Game).options(joinedload(Game.user))
    if language:
        query = query.filter(Game.language == language)
    if level:
        query = query.filter(Game.level == level)
    games = query.order_by(Game.score.desc(), Game.created_at.desc(), Game.id.desc()).limit(limit).all()
    return [_score_entry(game) for game in games]


def recent_scores(db: Session, *, limit: int = 10, language: Optional[str] = None) -> List[Dict[str, Any]]:
    query = db.query(Game).options(joinedload(Game.user))
    if language:
        query = query.filter(Game.language == language)
    games = query.order_by(Game.created_at.desc(), Game.id.desc()).limit(limit).all()
    return [_score_entry(game) for game in games]


def user_top_scores(db: Session, user_id: int, *, limit: int = 10) -> List[Dict[str, Any]]:
    games = (
        db.query(Game)
        .filter(Game.user_id == user_id)
        .order_by(Game.score.desc(), Game.created_at.desc(), Game.id.desc())
        .limit(limit)
        .all()
    )
    return [_score_entry(game, with_player=False) for game in games]


def user_history(db: Session, user_id: int) -> List[Game]:
    return (
        db.query(Game)
        .filter(Game.user_id == user_id)
        .order_by(Game.created_at.desc(), Game.id.desc())
        .all()
    )
