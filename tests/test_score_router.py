from __future__ import annotations

from datetime import datetime, timedelta

import pytest
from fastapi import HTTPException

from merge_api.api.v1.endpoints.score_router import (
    get_recent_scores,
    get_top_scores,
    get_user_history,
    get_user_language_stats,
    get_user_top_scores,
)
from merge_api.services.stats_service import StatsService
from tests.utils import create_game, create_snippets, create_user


@pytest.fixture()
def games(db_session):
    alice = create_user(db_session, name="alice")
    bob = create_user(db_session, name="")
    typescript = create_snippets(db_session, [True, True, True])
    python = create_snippets(db_session, [True, True, True], language="python")
    now = datetime.utcnow()

    played = [
        create_game(db_session, alice, typescript, [True, True, False], created_at=now - timedelta(minutes=3)),
        create_game(db_session, bob, typescript, [True, True, True], created_at=now - timedelta(minutes=2)),
        create_game(db_session, alice, python, [True, False, False], level=2, created_at=now - timedelta(minutes=1)),
    ]
    return alice, bob, played


def test_top_scores_are_ordered_by_score(db_session, games):
    alice, bob, _ = games

    entries = get_top_scores(language=None, level=None, limit=10, db=db_session)

    assert [entry["score"] for entry in entries] == [3, 2, 1]
    assert entries[0]["player_name"] == "Anonymous"
    assert entries[1]["player_name"] == "alice"
    assert entries[0]["total_snippets"] == 3


def test_top_scores_filters(db_session, games):
    entries = get_top_scores(language="Python", level=None, limit=10, db=db_session)
    assert [entry["language"] for entry in entries] == ["python"]

    entries = get_top_scores(language=None, level=1, limit=1, db=db_session)
    assert len(entries) == 1
    assert entries[0]["score"] == 3


def test_recent_scores_are_ordered_by_time(db_session, games):
    entries = get_recent_scores(language=None, limit=10, db=db_session)
    assert [entry["language"] for entry in entries] == ["python", "typescript", "typescript"]


def test_user_best_and_history(db_session, games):
    alice, _, played = games

    best = get_user_top_scores(alice.id, limit=10, db=db_session)
    assert [entry["score"] for entry in best] == [2, 1]
    assert "player_name" not in best[0]

    history = get_user_history(alice.id, db=db_session)
    assert [game.id for game in history] == [played[2].id, played[0].id]


def test_user_language_stats(db_session, games):
    alice, _, played = games
    StatsService(db_session).record_game(played[0])

    stats = get_user_language_stats(alice.id, db=db_session)
    assert [entry.language for entry in stats] == ["typescript"]


def test_unknown_user(db_session):
    with pytest.raises(HTTPException) as exc:
        get_user_history(999, db=db_session)
    assert exc.value.status_code == 404
