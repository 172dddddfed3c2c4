from __future__ import annotations

import pytest
from fastapi import HTTPException
from starlette.requests import Request

from merge_api.api.v1.dependencies import (
    _normalize_caller_id,
    get_current_admin,
    get_current_user,
)
from tests.utils import create_admin, create_user


def _request(headers=None, query: str = "") -> Request:
    raw_headers = [(key.lower().encode(), value.encode()) for key, value in (headers or {}).items()]
    return Request({"type": "http", "headers": raw_headers, "query_string": query.encode()})


@pytest.mark.parametrize(
    "raw, expected",
    [
        ("Bearer user_123", "user_123"),
        ("bearer: user_123", "user_123"),
        ('"user_123"', "user_123"),
        ("Bearer%20user_123", "user_123"),
        ("Bearer", None),
        ("   ", None),
        (None, None),
    ],
)
def test_normalize_caller_id(raw, expected):
    assert _normalize_caller_id(raw) == expected


def test_current_user_from_authorization_header(db_session):
    user = create_user(db_session, external_id="user_123", is_anonymous=False)

    resolved = get_current_user(_request({"Authorization": "Bearer user_123"}), db=db_session)
    assert resolved.id == user.id


def test_current_user_from_header_or_query(db_session):
    user = create_user(db_session, external_id="user_456", is_anonymous=False)

    assert get_current_user(_request({"X-Caller-Id": "user_456"}), db=db_session).id == user.id
    assert get_current_user(_request(query="caller_id=user_456"), db=db_session).id == user.id


def test_unknown_caller_is_unauthorized(db_session):
    with pytest.raises(HTTPException) as exc:
        get_current_user(_request({"Authorization": "Bearer ghost"}), db=db_session)
    assert exc.value.status_code == 401

    with pytest.raises(HTTPException) as exc:
        get_current_user(_request(), db=db_session)
    assert exc.value.status_code == 401


def test_admin_dependency(db_session):
    admin = create_admin(db_session)
    player = create_user(db_session)

    assert get_current_admin(current_user=admin) is admin
    with pytest.raises(HTTPException) as exc:
        get_current_admin(current_user=player)
    assert exc.value.status_code == 403


def test_get_db_shares_one_session_per_request(monkeypatch):
    from merge_api.api.v1 import dependencies

    opened = []

    class FakeSession:
        closed = False

        def close(self):
            self.closed = True

    def factory():
        opened.append(FakeSession())
        return opened[-1]

    monkeypatch.setattr(dependencies, "SessionLocal", factory)
    request = _request()

    outer = dependencies.get_db(request)
    inner = dependencies.get_db(request)
    first = next(outer)
    second = next(inner)
    assert first is second
    assert len(opened) == 1

    inner.close()
    assert first.closed is False
    outer.close()
    assert first.closed is True
    assert not hasattr(request.state, "db_session")
