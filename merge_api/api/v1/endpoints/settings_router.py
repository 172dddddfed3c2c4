from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from merge_api.api.v1.dependencies import get_current_admin, get_db
from merge_api.crud import settings_crud
from merge_api.models.user.user_model import User
from merge_api.schemas import settings_schema
from merge_api.services.admin_service import AdminError, AdminService

router = APIRouter()


@router.get("", response_model=settings_schema.SettingsOut)
def get_settings(db: Session = Depends(get_db)):
    return settings_crud.get_settings_payload(db)


@router.patch("", response_model=settings_schema.SettingsOut)
def update_settings(
    payload: settings_schema.GameSettingsUpdate,
    db: Session = Depends(get_db),
    current_admin: User = Depends(get_current_admin),
):
    settings_crud.update_settings(
        db,
        time_limits=payload.time_limits.model_dump() if payload.time_limits else None,
        snippets_per_game=payload.snippets_per_game.model_dump() if payload.snippets_per_game else None,
        ai_generation=payload.ai_generation.model_dump() if payload.ai_generation else None,
    )
    return settings_crud.get_settings_payload(db)


@router.post("/volumes/{language}/rotate", response_model=settings_schema.LanguageVolumeOut)
def create_new_volume(
    language: str,
    db: Session = Depends(get_db),
    current_admin: User = Depends(get_current_admin),
):
    try:
        return AdminService(db, current_admin).create_new_volume(language)
    except AdminError as exc:
        raise HTTPException(status_code=exc.status_code, detail=exc.code) from exc
