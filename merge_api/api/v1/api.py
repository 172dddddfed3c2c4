from fastapi import APIRouter
from .endpoints import (
    admin_router,
    game_router,
    language_router,
    score_router,
    settings_router,
    snippet_router,
    user_router,
)

api_router = APIRouter()

api_router.include_router(user_router.router, prefix="/users", tags=["Users"])
api_router.include_router(game_router.router, prefix="/games", tags=["Games"])
api_router.include_router(score_router.router, prefix="/scores", tags=["Scores"])
api_router.include_router(settings_router.router, prefix="/settings", tags=["Settings"])
api_router.include_router(language_router.router, prefix="/languages", tags=["Languages"])
api_router.include_router(snippet_router.router, prefix="/snippets", tags=["Snippets"])
api_router.include_router(admin_router.router, prefix="/admin", tags=["Admin"])
