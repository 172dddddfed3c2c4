import logging
import re
from urllib.parse import unquote

from typing import Generator

from fastapi import Depends, HTTPException, Request, status
from starlette.datastructures import State
from sqlalchemy.orm import Session

from merge_api.crud import user_crud
from merge_api.db.session import SessionLocal
from merge_api.models.user.user_model import User

log = logging.getLogger(__name__)


def _request_state(request: Request) -> State:
    state = getattr(request, "state", None)
    if state is None:
        state = State()
        request.state = state
    return state


def _resolve_request(request: Request = None) -> Request | None:  # type: ignore[assignment]
    return request


def get_db(
    request: Request | None = Depends(_resolve_request),
) -> Generator[Session, None, None]:
    """Provide a SQLAlchemy session shared within a single request.

    Both the route handler and ``get_current_user`` depend on ``get_db``. The
    session is cached on ``request.state`` with a reference counter so the
    ``User`` resolved by the identity dependency stays attached until the
    handler is done with it.
    """

    if request is None:
        with SessionLocal() as db:
            yield db
        return

    state = _request_state(request)
    if getattr(state, "db_session", None) is None:
        state.db_session = SessionLocal()
        state.db_users = 0

    db = state.db_session
    state.db_users += 1
    try:
        yield db
    finally:
        state.db_users -= 1
        if state.db_users <= 0:
            del state.db_session, state.db_users
            db.close()


def _normalize_caller_id(raw_value: str | None) -> str | None:
    """Return a clean caller id extracted from a header or query value.

    Accepts ``Bearer <id>`` (any case), percent-encoded and quoted values.
    """

    if raw_value is None:
        return None

    value = raw_value.strip().strip('"').strip("'")
    if not value:
        return None

    value = unquote(value)

    match = re.match(r"^(bearer|token)[\s,:]+(.+)$", value, flags=re.IGNORECASE)
    if match:
        value = match.group(2)
    elif value.lower() in {"bearer", "token"}:
        return None

    value = value.strip()
    return value or None


def resolve_caller(db: Session, *candidates: str | None) -> User:
    """Resolve the first usable caller id among ``candidates`` to a user."""

    for candidate in candidates:
        caller_id = _normalize_caller_id(candidate)
        if not caller_id:
            continue

        user = user_crud.get_user_by_external_id(db, caller_id)
        if user is not None:
            return user
        log.warning("Unknown caller id %s", caller_id)

    raise HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Could not validate credentials",
    )


def get_current_user(request: Request, db: Session = Depends(get_db)) -> User:
    return resolve_caller(
        db,
        request.headers.get("Authorization"),
        request.headers.get("X-Caller-Id"),
        request.query_params.get("caller_id"),
    )


def get_current_admin(current_user: User = Depends(get_current_user)) -> User:
    if not current_user.is_admin:
        log.warning("User %s attempted an admin operation", current_user.id)
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="admin_required")
    return current_user
