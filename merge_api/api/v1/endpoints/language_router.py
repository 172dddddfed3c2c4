from typing import List

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from merge_api.api.v1.dependencies import get_current_admin, get_db
from merge_api.crud import language_volume_crud
from merge_api.models.user.user_model import User
from merge_api.schemas import settings_schema
from merge_api.services.admin_service import AdminError, AdminService

router = APIRouter()


@router.get("", response_model=List[settings_schema.LanguageVolumeOut])
def list_languages(db: Session = Depends(get_db)):
    return language_volume_crud.list_language_volumes(db)


@router.post("", response_model=settings_schema.LanguageVolumeOut, status_code=status.HTTP_201_CREATED)
def add_language(
    payload: settings_schema.LanguageCreate,
    db: Session = Depends(get_db),
    current_admin: User = Depends(get_current_admin),
):
    try:
        return AdminService(db, current_admin).add_language(
            payload.language,
            payload.display_name,
            icon=payload.icon,
            icon_color=payload.icon_color,
        )
    except AdminError as exc:
        raise HTTPException(status_code=exc.status_code, detail=exc.code) from exc


@router.post("/recount", response_model=List[settings_schema.LanguageVolumeOut])
def recount_snippet_counts(
    db: Session = Depends(get_db),
    current_admin: User = Depends(get_current_admin),
):
    return AdminService(db, current_admin).recount_snippet_counts()


@router.patch("/{language}/volume", response_model=settings_schema.LanguageVolumeOut)
def update_language_volume(
    language: str,
    payload: settings_schema.LanguageVolumeUpdate,
    db: Session = Depends(get_db),
    current_admin: User = Depends(get_current_admin),
):
    try:
        return AdminService(db, current_admin).set_current_volume(language, payload.current_volume)
    except AdminError as exc:
        raise HTTPException(status_code=exc.status_code, detail=exc.code) from exc


@router.patch("/{language}/status", response_model=settings_schema.LanguageVolumeOut)
def update_language_status(
    language: str,
    payload: settings_schema.LanguageStatusUpdate,
    db: Session = Depends(get_db),
    current_admin: User = Depends(get_current_admin),
):
    try:
        return AdminService(db, current_admin).set_language_status(language, payload.status)
    except AdminError as exc:
        raise HTTPException(status_code=exc.status_code, detail=exc.code) from exc


@router.patch("/{language}/icon", response_model=settings_schema.LanguageVolumeOut)
def update_language_icon(
    language: str,
    payload: settings_schema.LanguageIconUpdate,
    db: Session = Depends(get_db),
    current_admin: User = Depends(get_current_admin),
):
    try:
        return AdminService(db, current_admin).set_language_icon(language, payload.icon, payload.icon_color)
    except AdminError as exc:
        raise HTTPException(status_code=exc.status_code, detail=exc.code) from exc
