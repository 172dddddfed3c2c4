import logging
from typing import List

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from merge_api.api.v1.dependencies import get_current_admin, get_current_user, get_db
from merge_api.crud import user_crud
from merge_api.models.user.user_model import User
from merge_api.schemas import user_schema

router = APIRouter()
logger = logging.getLogger(__name__)


@router.post("/anonymous", response_model=user_schema.AnonymousUserOut, status_code=status.HTTP_201_CREATED)
def create_anonymous_user(
    payload: user_schema.AnonymousUserCreate,
    db: Session = Depends(get_db),
):
    user = user_crud.create_anonymous_user(db, payload.name)
    logger.info("Anonymous player %s created", user.id)
    return {"user_id": user.id, "name": user.name}


@router.patch("/anonymous/{user_id}", response_model=user_schema.AnonymousUserOut)
def rename_anonymous_user(
    user_id: int,
    payload: user_schema.UserNameUpdate,
    db: Session = Depends(get_db),
):
    user = user_crud.get_user(db, user_id)
    if user is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="user_not_found")
    if not user.is_anonymous:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="user_not_anonymous")

    user = user_crud.rename_user(db, user, payload.name)
    return {"user_id": user.id, "name": user.name}


@router.get("/role", response_model=user_schema.UserRoleOut)
def get_user_role(external_id: str, db: Session = Depends(get_db)):
    return {"role": user_crud.get_user_role(db, external_id)}


@router.get("/me", response_model=user_schema.UserOut)
def read_current_user(current_user: User = Depends(get_current_user)):
    return current_user


@router.get("", response_model=List[user_schema.UserOut])
def list_users(
    db: Session = Depends(get_db),
    current_admin: User = Depends(get_current_admin),
):
    return user_crud.list_users(db)


@router.get("/{user_id}", response_model=user_schema.UserOut)
def read_user(
    user_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    user = user_crud.get_user(db, user_id)
    if user is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="user_not_found")
    return user


@router.patch("/{user_id}/name", response_model=user_schema.UserOut)
def rename_user(
    user_id: int,
    payload: user_schema.UserNameUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    if current_user.id != user_id:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="not_your_account")
    return user_crud.rename_user(db, current_user, payload.name)
