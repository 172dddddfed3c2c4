from __future__ import annotations

from typing import Annotated, Optional

from pydantic import BaseModel, ConfigDict, StringConstraints

from merge_api.models.user.user_model import UserRole

PlayerName = Annotated[str, StringConstraints(strip_whitespace=True, min_length=1, max_length=100)]


class AnonymousUserCreate(BaseModel):
    name: PlayerName


class UserNameUpdate(BaseModel):
    name: PlayerName


class AnonymousUserOut(BaseModel):
    user_id: int
    name: str


class UserOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    email: Optional[str] = None
    role: UserRole
    is_anonymous: bool
    total_games: int
    average_score: float


class UserRoleOut(BaseModel):
    role: Optional[UserRole] = None
