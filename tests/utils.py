"""Utility helpers for test factories."""

from __future__ import annotations

from typing import Iterable, List

from merge_api.crud import settings_crud
from merge_api.models.game.game_model import Game
from merge_api.models.settings.game_settings_model import GameSettings
from merge_api.models.snippet.language_volume_model import LanguageStatus, LanguageVolume
from merge_api.models.snippet.snippet_model import Difficulty, Snippet
from merge_api.models.user.user_model import User, UserRole


def create_user(db, **kwargs) -> User:
    defaults = {
        "name": "player",
        "role": UserRole.USER,
        "is_anonymous": True,
        "total_games": 0,
        "average_score": 0.0,
    }
    defaults.update(kwargs)
    user = User(**defaults)
    db.add(user)
    db.commit()
    db.refresh(user)
    return user


def create_admin(db, external_id: str = "admin-ext", **kwargs) -> User:
    return create_user(
        db,
        name=kwargs.pop("name", "admin"),
        external_id=external_id,
        role=UserRole.ADMIN,
        is_anonymous=False,
        **kwargs,
    )


def create_settings(db, **kwargs) -> GameSettings:
    settings = settings_crud.initialize_settings(db)
    if kwargs:
        settings = settings_crud.update_settings(db, **kwargs)
    return settings


def create_language(db, language: str = "typescript", **kwargs) -> LanguageVolume:
    defaults = {
        "language": language,
        "display_name": language.title(),
        "current_volume": 1,
        "snippet_count": 0,
        "ai_generated_count": 0,
        "status": LanguageStatus.ACTIVE,
    }
    defaults.update(kwargs)
    volume = LanguageVolume(**defaults)
    db.add(volume)
    db.commit()
    db.refresh(volume)
    return volume


def create_snippets(
    db,
    validity: Iterable[bool],
    *,
    language: str = "typescript",
    difficulty: Difficulty = Difficulty.EASY,
    volume: int = 1,
    ai_generated: bool = False,
) -> List[Snippet]:
    snippets = [
        Snippet(
            language=language,
            volume=volume,
            code=f"const value{index} = {index};",
            is_valid=is_valid,
            difficulty=difficulty,
            explanation=f"explanation {index}",
            tags=["basics"],
            ai_generated=ai_generated,
        )
        for index, is_valid in enumerate(validity)
    ]
    db.add_all(snippets)
    db.commit()
    for snippet in snippets:
        db.refresh(snippet)
    return snippets


def create_game(db, user: User, snippets: List[Snippet], answers: List[bool], **kwargs) -> Game:
    """Persist a game directly, computing the running score from ``answers``."""
    score = sum(1 for snippet, answer in zip(snippets, answers) if snippet.is_valid == answer)
    defaults = {
        "user_id": user.id,
        "language": snippets[0].language,
        "level": 1,
        "difficulty": snippets[0].difficulty,
        "volume": snippets[0].volume,
        "score": score,
        "snippet_ids": [snippet.id for snippet in snippets],
        "answers": list(answers),
    }
    defaults.update(kwargs)
    game = Game(**defaults)
    db.add(game)
    db.commit()
    db.refresh(game)
    return game


def play_game(service, game_id: int, snippets_by_id, snippet_ids: List[int], correct: List[bool]):
    """Answer each snippet of a started game, right or wrong as requested."""
    results = []
    for snippet_id, is_right in zip(snippet_ids, correct):
        actual = snippets_by_id[snippet_id].is_valid
        results.append(service.submit_answer(game_id, actual if is_right else not actual))
    return results
