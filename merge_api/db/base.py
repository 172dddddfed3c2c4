"""Imports every model so ``Base.metadata`` knows about all tables."""

from merge_api.db.base_class import Base

from merge_api.models.user.user_model import User
from merge_api.models.snippet.snippet_model import Snippet
from merge_api.models.snippet.language_volume_model import LanguageVolume
from merge_api.models.game.game_model import Game
from merge_api.models.game.user_stats_model import UserLanguageStats
from merge_api.models.settings.game_settings_model import GameSettings
from merge_api.models.analytics.ai_token_log_model import AITokenLog

__all__ = (
    "Base",
    "User",
    "Snippet",
    "LanguageVolume",
    "Game",
    "UserLanguageStats",
    "GameSettings",
    "AITokenLog",
)
