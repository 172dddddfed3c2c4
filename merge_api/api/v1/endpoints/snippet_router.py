from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Response, status
from sqlalchemy.orm import Session

from merge_api.api.v1.dependencies import get_current_admin, get_db
from merge_api.models.user.user_model import User
from merge_api.schemas import snippet_schema
from merge_api.services.admin_service import AdminError, AdminService
from merge_api.services.snippet_generation_service import (
    SnippetGenerationError,
    SnippetGenerationService,
)

router = APIRouter()


@router.get("", response_model=List[snippet_schema.SnippetOut])
def list_snippets(
    language: str,
    volume: Optional[int] = None,
    db: Session = Depends(get_db),
    current_admin: User = Depends(get_current_admin),
):
    return AdminService(db, current_admin).list_snippets(language, volume)


@router.post("", response_model=snippet_schema.SnippetOut, status_code=status.HTTP_201_CREATED)
def add_snippet(
    payload: snippet_schema.SnippetCreate,
    db: Session = Depends(get_db),
    current_admin: User = Depends(get_current_admin),
):
    return AdminService(db, current_admin).add_snippet(payload)


@router.post("/generate", response_model=List[snippet_schema.SnippetOut], status_code=status.HTTP_201_CREATED)
def generate_snippets(
    payload: snippet_schema.SnippetGenerationRequest,
    db: Session = Depends(get_db),
    current_admin: User = Depends(get_current_admin),
):
    service = SnippetGenerationService(db)
    try:
        return service.generate(
            payload.language,
            payload.difficulty.value,
            payload.count,
            valid_ratio=payload.valid_ratio,
            volume=payload.volume,
            user=current_admin,
        )
    except SnippetGenerationError as exc:
        raise HTTPException(status_code=exc.status_code, detail=exc.code) from exc


@router.patch("/{snippet_id}", response_model=snippet_schema.SnippetOut)
def update_snippet(
    snippet_id: int,
    payload: snippet_schema.SnippetUpdate,
    db: Session = Depends(get_db),
    current_admin: User = Depends(get_current_admin),
):
    try:
        return AdminService(db, current_admin).update_snippet(snippet_id, payload.model_dump(exclude_unset=True))
    except AdminError as exc:
        raise HTTPException(status_code=exc.status_code, detail=exc.code) from exc


@router.delete("/{snippet_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_snippet(
    snippet_id: int,
    db: Session = Depends(get_db),
    current_admin: User = Depends(get_current_admin),
):
    try:
        AdminService(db, current_admin).delete_snippet(snippet_id)
    except AdminError as exc:
        raise HTTPException(status_code=exc.status_code, detail=exc.code) from exc
    return Response(status_code=status.HTTP_204_NO_CONTENT)
