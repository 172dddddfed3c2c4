from __future__ import annotations

import pytest
from fastapi import HTTPException

from merge_api.api.v1.endpoints.game_router import (
    get_game_state,
    get_recap,
    save_game_score,
    start_game,
    submit_answer,
)
from merge_api.schemas.game_schema import SaveScoreRequest, StartGameRequest, SubmitAnswerRequest
from merge_api.models.game.game_model import Game
from tests.utils import create_language, create_settings, create_snippets, create_user


@pytest.fixture()
def player(db_session):
    create_settings(db_session)
    create_language(db_session, "typescript")
    return create_user(db_session, name="linus")


def test_play_and_finalize_through_the_router(db_session, player):
    snippets = {snippet.id: snippet for snippet in create_snippets(db_session, [True, False, True])}

    started = start_game(StartGameRequest(user_id=player.id, language="typescript", level=1), db=db_session)
    game_id = started["game_id"]
    assert started["time_limit"] == 120

    for index, snippet in enumerate(started["snippets"]):
        result = submit_answer(game_id, SubmitAnswerRequest(is_valid=snippets[snippet["id"]].is_valid), db=db_session)
        assert result["is_correct"] is True
        assert result["is_game_over"] is (index == 2)

    assert get_game_state(game_id, db=db_session) == {"is_game_over": True, "score": 3}

    saved = save_game_score(game_id, SaveScoreRequest(score=3), db=db_session)
    assert saved.score == 3
    assert saved.recap == f"recap/{saved.slug_id}"

    recap = get_recap(saved.slug_id, db=db_session)
    assert recap["player_name"] == "linus"
    assert all(entry["is_correct"] for entry in recap["snippets"])


def test_start_game_maps_errors_to_http(db_session, player):
    create_snippets(db_session, [True])

    with pytest.raises(HTTPException) as exc:
        start_game(StartGameRequest(user_id=player.id, language="typescript", level=1), db=db_session)

    assert exc.value.status_code == 409
    assert exc.value.detail == "not_enough_snippets"
    assert db_session.query(Game).count() == 0


def test_save_score_before_the_end(db_session, player):
    create_snippets(db_session, [True, True, True])
    started = start_game(StartGameRequest(user_id=player.id, language="typescript", level=1), db=db_session)

    with pytest.raises(HTTPException) as exc:
        save_game_score(started["game_id"], SaveScoreRequest(score=3), db=db_session)
    assert exc.value.status_code == 409
    assert exc.value.detail == "game_not_finished"


def test_unknown_game_state(db_session):
    with pytest.raises(HTTPException) as exc:
        get_game_state(404, db=db_session)
    assert exc.value.status_code == 404
    assert exc.value.detail == "game_not_found"
