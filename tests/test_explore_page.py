"""Tests for the explorer page and system routes."""
from __future__ import annotations

import os
from typing import Iterator
from uuid import UUID

import pytest
from fastapi.testclient import TestClient

os.environ.setdefault("DATABASE_URL", "sqlite+pysqlite:///./test_explore_page.db")

from app.config import get_settings  # noqa: E402
from app.database import Base, SessionLocal, engine  # noqa: E402
from app.main import app  # noqa: E402
from app.models import User  # noqa: E402
from app.ui.components.layout import navbar  # noqa: E402


@pytest.fixture(scope="module", autouse=True)
def _create_schema() -> Iterator[None]:
    Base.metadata.create_all(bind=engine)
    yield
    Base.metadata.drop_all(bind=engine)


@pytest.fixture
def client() -> Iterator[TestClient]:
    with TestClient(app) as test_client:
        yield test_client


def test_explore_page_renders_list_fallback_without_mapbox_token(client, monkeypatch):
    monkeypatch.setattr(get_settings(), "mapbox_token", None)

    response = client.get("/explore")

    assert response.status_code == 200
    assert "text/html" in response.headers["content-type"]
    body = response.text
    assert get_settings().app_name in body
    assert 'id="report-list"' in body
    assert "/api/report/map" in body
    assert "mapbox-gl.js" not in body


def test_explore_page_loads_map_with_token(client, monkeypatch):
    monkeypatch.setattr(get_settings(), "mapbox_token", "pk.test-token")

    body = client.get("/explore").text

    assert 'id="map"' in body
    assert "mapbox-gl.js" in body
    assert '"pk.test-token"' in body
    assert "getClusterExpansionZoom" in body
    assert 'id="report-list"' in body
    assert 'typeof mapboxgl === "undefined"' in body
    assert 'id="map-unavailable" class="hidden ' in body


def test_root_redirects_to_explorer(client):
    response = client.get("/", follow_redirects=False)

    assert response.status_code in (302, 307)
    assert response.headers["location"] == "/explore"


def test_navbar_marks_active_link_and_escapes_brand():
    html = str(navbar(brand="<Civic>", active="/explore"))

    assert "&lt;Civic&gt;" in html
    assert 'href="/explore" class="rounded-md px-3 py-2 text-sm font-medium transition-colors bg-green-700' in html


def test_system_health_exposes_compensation_counters(client):
    response = client.get("/system/health")

    assert response.status_code == 200
    payload = response.json()
    assert payload["status"] == "ok"
    assert payload["app"] == get_settings().app_name
    assert set(payload["compensation"]) == {"attempted", "failed", "failedByReason"}


def test_api_info(client):
    settings = get_settings()
    assert client.get("/api").json() == {"service": settings.app_name, "version": settings.api_version}


def test_startup_seeds_default_placeholder_reporter(client):
    settings = get_settings()

    with SessionLocal() as session:
        user = session.get(User, settings.placeholder_user_id)

    assert settings.placeholder_user_id == UUID("00000000-0000-0000-0000-000000000001")
    assert user is not None
    assert user.id == settings.placeholder_user_id
    assert user.username == settings.placeholder_username
