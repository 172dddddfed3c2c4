from __future__ import annotations

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field

from merge_api.models.snippet.snippet_model import Difficulty


class GeneratedSnippet(BaseModel):
    """One item of the completion payload (camelCase on the wire)."""

    model_config = ConfigDict(populate_by_name=True)

    code: str = Field(..., min_length=1)
    is_valid: bool = Field(..., alias="isValid")
    explanation: str = ""
    tags: List[str] = Field(default_factory=list)


class GeneratedSnippetBatch(BaseModel):
    snippets: List[GeneratedSnippet]


class SnippetGenerationRequest(BaseModel):
    language: str
    difficulty: Difficulty
    count: int = Field(..., ge=1)
    valid_ratio: Optional[float] = Field(None, ge=0.0, le=1.0)
    volume: Optional[int] = Field(None, ge=1)


class SnippetCreate(BaseModel):
    language: str
    volume: int = Field(1, ge=1)
    code: str = Field(..., min_length=1)
    is_valid: bool
    difficulty: Difficulty
    explanation: str = ""
    tags: List[str] = Field(default_factory=list)
    ai_generated: bool = False


class SnippetUpdate(BaseModel):
    code: Optional[str] = Field(None, min_length=1)
    is_valid: Optional[bool] = None
    difficulty: Optional[Difficulty] = None
    explanation: Optional[str] = None
    tags: Optional[List[str]] = None
    volume: Optional[int] = Field(None, ge=1)


class SnippetOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    language: str
    volume: int
    code: str
    is_valid: bool
    difficulty: Difficulty
    explanation: str
    tags: List[str]
    ai_generated: bool
    created_at: Optional[datetime] = None
