"""Tests for request identity parsing and the placeholder reporter."""
from __future__ import annotations

import os
from typing import Iterator
from uuid import UUID, uuid4

import pytest
from sqlalchemy import delete, func, select

os.environ.setdefault("DATABASE_URL", "sqlite+pysqlite:///./test_auth_service.db")

from app.config import get_settings  # noqa: E402
from app.database import Base, SessionLocal, engine  # noqa: E402
from app.models import Report, ReportReview, User  # noqa: E402
from app.services.auth_service import (  # noqa: E402
    PLACEHOLDER_HEADER_VALUE,
    ensure_placeholder_user,
    principal_from_header,
)
from app.services.errors import AuthenticationRequiredError  # noqa: E402


@pytest.fixture(scope="module", autouse=True)
def _create_schema() -> Iterator[None]:
    Base.metadata.create_all(bind=engine)
    yield
    Base.metadata.drop_all(bind=engine)


@pytest.fixture(autouse=True)
def _clean_database() -> Iterator[None]:
    with SessionLocal() as session:
        session.execute(delete(ReportReview))
        session.execute(delete(Report))
        session.execute(delete(User))
        session.commit()
    yield


@pytest.mark.parametrize("raw", [None, "", "   ", PLACEHOLDER_HEADER_VALUE])
def test_missing_identity_yields_no_principal(raw):
    assert principal_from_header(raw) is None


def test_uuid_header_yields_principal():
    user_id = uuid4()

    principal = principal_from_header(str(user_id))

    assert principal is not None
    assert principal.user_id == user_id
    assert principal.is_placeholder is False


def test_malformed_header_is_unauthenticated():
    with pytest.raises(AuthenticationRequiredError) as exc:
        principal_from_header("bob")
    assert exc.value.status_code == 401


def _placeholder_rows() -> int:
    with SessionLocal() as session:
        return session.execute(
            select(func.count(User.id)).where(User.id == get_settings().placeholder_user_id)
        ).scalar_one()


def test_placeholder_user_with_all_digit_id_round_trips():
    placeholder_id = get_settings().placeholder_user_id
    assert placeholder_id == UUID("00000000-0000-0000-0000-000000000001")

    with SessionLocal() as session:
        created = ensure_placeholder_user(session)
    with SessionLocal() as session:
        again = ensure_placeholder_user(session)
        assert session.get(User, placeholder_id).id == placeholder_id

    assert created.id == placeholder_id
    assert again.id == placeholder_id
    assert _placeholder_rows() == 1


def test_placeholder_user_inserted_concurrently_is_reused(monkeypatch):
    with SessionLocal() as session:
        ensure_placeholder_user(session)

    with SessionLocal() as session:
        real_get = session.get
        calls = {"count": 0}

        def _stale_first_get(entity, ident, *args, **kwargs):
            calls["count"] += 1
            # The first lookup misses the row another request just committed.
            if calls["count"] == 1:
                return None
            return real_get(entity, ident, *args, **kwargs)

        monkeypatch.setattr(session, "get", _stale_first_get)

        user = ensure_placeholder_user(session)

    assert user.id == get_settings().placeholder_user_id
    assert calls["count"] == 2
    assert _placeholder_rows() == 1
