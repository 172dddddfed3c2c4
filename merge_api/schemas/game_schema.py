from __future__ import annotations

from datetime import datetime
from typing import List, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field

from merge_api.models.snippet.snippet_model import Difficulty


class StartGameRequest(BaseModel):
    user_id: int
    language: str
    level: int = Field(..., ge=1, le=3)
    volume: int = Field(1, ge=1)


class PlayableSnippet(BaseModel):
    id: int
    code: str
    language: str
    difficulty: Difficulty
    tags: List[str] = Field(default_factory=list)


class StartGameResponse(BaseModel):
    game_id: int
    snippets: List[PlayableSnippet]
    time_limit: int


class SubmitAnswerRequest(BaseModel):
    is_valid: bool


class SubmitAnswerResponse(BaseModel):
    is_correct: bool
    explanation: str
    is_game_over: bool
    score: int


class CurrentSnippet(BaseModel):
    code: str
    language: str


class GameProgress(BaseModel):
    current: int
    total: int
    score: int


class FinishedGameState(BaseModel):
    is_game_over: Literal[True]
    score: int


class ActiveGameState(BaseModel):
    is_game_over: Literal[False]
    current_snippet: CurrentSnippet
    progress: GameProgress


GameStateOut = Union[FinishedGameState, ActiveGameState]


class SaveScoreRequest(BaseModel):
    # Only compared with the server-side score, never stored.
    score: Optional[int] = Field(None, ge=0)


class SaveScoreResponse(BaseModel):
    game_id: int
    score: int
    slug_id: str
    recap: str


class RecapSnippet(BaseModel):
    snippet_id: int
    code: str
    language: str
    is_valid: bool
    explanation: str
    user_answer: Optional[bool]
    is_correct: Optional[bool]


class RecapOut(BaseModel):
    slug_id: str
    player_name: str
    language: str
    difficulty: Difficulty
    level: int
    volume: int
    score: int
    total_snippets: int
    timestamp: datetime
    snippets: List[RecapSnippet]


class ScoreEntry(BaseModel):
    id: int
    player_name: Optional[str] = None
    score: int
    language: str
    level: int
    volume: int
    timestamp: datetime
    total_snippets: int
    slug_id: Optional[str] = None


class GameHistoryEntry(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    language: str
    difficulty: Difficulty
    level: int
    volume: int
    score: int
    snippets_completed: int
    snippet_ids: List[int]
    answers: List[bool]
    slug_id: Optional[str] = None
    created_at: datetime


class UserLanguageStatsOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    language: str
    games_played: int
    average_score: float
    highest_score: int
    last_played: Optional[datetime] = None
    volumes: List[int]
