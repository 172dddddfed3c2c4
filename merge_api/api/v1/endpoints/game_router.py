from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from merge_api.api.v1.dependencies import get_db
from merge_api.schemas import game_schema
from merge_api.services.game_service import GameError, GameService

router = APIRouter()


@router.post("", response_model=game_schema.StartGameResponse, status_code=status.HTTP_201_CREATED)
def start_game(
    payload: game_schema.StartGameRequest,
    db: Session = Depends(get_db),
):
    service = GameService(db)
    try:
        return service.start_game(
            user_id=payload.user_id,
            language=payload.language,
            level=payload.level,
            volume=payload.volume,
        )
    except GameError as exc:
        raise HTTPException(status_code=exc.status_code, detail=exc.code) from exc


@router.post("/{game_id}/answers", response_model=game_schema.SubmitAnswerResponse)
def submit_answer(
    game_id: int,
    payload: game_schema.SubmitAnswerRequest,
    db: Session = Depends(get_db),
):
    try:
        return GameService(db).submit_answer(game_id=game_id, is_valid=payload.is_valid)
    except GameError as exc:
        raise HTTPException(status_code=exc.status_code, detail=exc.code) from exc


@router.get("/{game_id}", response_model=game_schema.GameStateOut)
def get_game_state(game_id: int, db: Session = Depends(get_db)):
    try:
        return GameService(db).get_game_state(game_id)
    except GameError as exc:
        raise HTTPException(status_code=exc.status_code, detail=exc.code) from exc


@router.post("/{game_id}/score", response_model=game_schema.SaveScoreResponse)
def save_game_score(
    game_id: int,
    payload: game_schema.SaveScoreRequest,
    db: Session = Depends(get_db),
):
    try:
        game = GameService(db).save_game_score(game_id, client_score=payload.score)
    except GameError as exc:
        raise HTTPException(status_code=exc.status_code, detail=exc.code) from exc
    return game_schema.SaveScoreResponse(
        game_id=game.id,
        score=game.score,
        slug_id=game.slug_id,
        recap=game.recap,
    )


@router.get("/recap/{slug_id}", response_model=game_schema.RecapOut)
def get_recap(slug_id: str, db: Session = Depends(get_db)):
    try:
        return GameService(db).get_recap(slug_id)
    except GameError as exc:
        raise HTTPException(status_code=exc.status_code, detail=exc.code) from exc
