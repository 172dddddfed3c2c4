from __future__ import annotations

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field

from merge_api.models.snippet.language_volume_model import LanguageStatus


class PerDifficulty(BaseModel):
    # Both game sizes and time limits must be positive.
    easy: int = Field(..., ge=1)
    medium: int = Field(..., ge=1)
    hard: int = Field(..., ge=1)


class AIGenerationSettings(BaseModel):
    enabled: bool
    valid_ratio: float = Field(..., ge=0.0, le=1.0)
    max_per_request: int = Field(..., ge=1)
    min_snippets_before_generation: int = Field(..., ge=0)


class GameSettingsOut(BaseModel):
    time_limits: PerDifficulty
    snippets_per_game: PerDifficulty
    ai_generation: AIGenerationSettings


class GameSettingsUpdate(BaseModel):
    time_limits: Optional[PerDifficulty] = None
    snippets_per_game: Optional[PerDifficulty] = None
    ai_generation: Optional[AIGenerationSettings] = None


class LanguageVolumeOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    language: str
    display_name: Optional[str] = None
    icon: Optional[str] = None
    icon_color: Optional[str] = None
    current_volume: int
    snippet_count: int
    ai_generated_count: int
    last_ai_generation: Optional[datetime] = None
    status: LanguageStatus


class SettingsOut(BaseModel):
    settings: GameSettingsOut
    volumes: List[LanguageVolumeOut]


class LanguageCreate(BaseModel):
    language: str = Field(..., min_length=1)
    display_name: str = Field(..., min_length=1)
    icon: Optional[str] = None
    icon_color: Optional[str] = None


class LanguageVolumeUpdate(BaseModel):
    current_volume: int = Field(..., ge=1)


class LanguageStatusUpdate(BaseModel):
    status: LanguageStatus


class LanguageIconUpdate(BaseModel):
    icon: str = Field(..., min_length=1)
    icon_color: Optional[str] = None
