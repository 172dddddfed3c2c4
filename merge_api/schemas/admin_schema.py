from __future__ import annotations

from datetime import datetime
from typing import Dict, List, Optional

from pydantic import BaseModel

from merge_api.models.snippet.language_volume_model import LanguageStatus


class LanguageGameStats(BaseModel):
    language: str
    total_games: int
    average_score: float


class DashboardStatsOut(BaseModel):
    total_users: int
    total_games: int
    average_score: float
    language_stats: List[LanguageGameStats]


class DifficultyCounts(BaseModel):
    easy: int = 0
    medium: int = 0
    hard: int = 0


class LanguageAnalytics(BaseModel):
    language: str
    display_name: Optional[str] = None
    status: LanguageStatus
    current_volume: int
    snippet_count: int
    stored_snippet_count: int
    ai_generated_count: int
    last_ai_generation: Optional[datetime] = None
    difficulty_counts: DifficultyCounts


class AnalyticsOut(BaseModel):
    total_users: int
    total_games: int
    languages: List[LanguageAnalytics]
    difficulty_summary: DifficultyCounts
    volume_summary: Dict[int, int]
    level_summary: Dict[int, int]


class LanguageSnippetStats(BaseModel):
    language: str
    count: int
    valid_count: int
    invalid_count: int


class SnippetStatsOut(BaseModel):
    total_snippets: int
    snippets_by_language: List[LanguageSnippetStats]
