from __future__ import annotations

from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.orm import Session

from merge_api.api.v1.dependencies import get_db
from merge_api.crud import game_crud, user_crud
from merge_api.schemas import game_schema
from merge_api.services.stats_service import StatsService
from merge_api.utils.lang_utils import normalize_language

router = APIRouter()


def _require_user(db: Session, user_id: int) -> None:
    if user_crud.get_user(db, user_id) is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="user_not_found")


@router.get("/top", response_model=List[game_schema.ScoreEntry])
def get_top_scores(
    language: Optional[str] = None,
    level: Optional[int] = Query(None, ge=1, le=3),
    limit: int = Query(10, ge=1, le=100),
    db: Session = Depends(get_db),
):
    return game_crud.top_scores(
        db,
        limit=limit,
        language=normalize_language(language) if language else None,
        level=level,
    )


@router.get("/recent", response_model=List[game_schema.ScoreEntry])
def get_recent_scores(
    language: Optional[str] = None,
    limit: int = Query(10, ge=1, le=100),
    db: Session = Depends(get_db),
):
    return game_crud.recent_scores(
        db,
        limit=limit,
        language=normalize_language(language) if language else None,
    )


@router.get("/users/{user_id}/best", response_model=List[game_schema.ScoreEntry])
def get_user_top_scores(
    user_id: int,
    limit: int = Query(10, ge=1, le=100),
    db: Session = Depends(get_db),
):
    _require_user(db, user_id)
    return game_crud.user_top_scores(db, user_id, limit=limit)


@router.get("/users/{user_id}/history", response_model=List[game_schema.GameHistoryEntry])
def get_user_history(user_id: int, db: Session = Depends(get_db)):
    _require_user(db, user_id)
    return game_crud.user_history(db, user_id)


@router.get("/users/{user_id}/stats", response_model=List[game_schema.UserLanguageStatsOut])
def get_user_language_stats(user_id: int, db: Session = Depends(get_db)):
    _require_user(db, user_id)
    return StatsService(db).get_language_stats(user_id)
