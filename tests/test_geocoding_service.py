"""Tests for address geocoding through geopy."""
from __future__ import annotations

import asyncio
import os
from types import SimpleNamespace

import pytest
from geopy.exc import GeocoderTimedOut

os.environ.setdefault("DATABASE_URL", "sqlite+pysqlite:///./test_geocoding_service.db")

from app.services import geocoding_service  # noqa: E402
from app.services.geocoding_service import Coordinates, GeocodeError, geocode_address  # noqa: E402


class StubGeocoder:
    def __init__(self, result=None, error: Exception | None = None) -> None:
        self.result = result
        self.error = error
        self.queries: list[str] = []

    def geocode(self, query: str, exactly_one: bool = True):
        self.queries.append(query)
        if self.error is not None:
            raise self.error
        return self.result


def _use(monkeypatch, geocoder: StubGeocoder) -> StubGeocoder:
    monkeypatch.setattr(geocoding_service, "get_geocoder", lambda: geocoder)
    return geocoder


def test_geocode_address_returns_coordinates(monkeypatch):
    geocoder = _use(monkeypatch, StubGeocoder(result=SimpleNamespace(latitude=28.6139, longitude=77.209)))

    coords = asyncio.run(geocode_address("  Connaught Place, New Delhi "))

    assert coords == Coordinates(lat=28.6139, lng=77.209)
    assert coords.as_dict() == {"lat": 28.6139, "lng": 77.209}
    assert geocoder.queries == ["Connaught Place, New Delhi"]


def test_geocode_address_without_match(monkeypatch):
    _use(monkeypatch, StubGeocoder(result=None))

    with pytest.raises(GeocodeError) as exc:
        asyncio.run(geocode_address("zzzz"))

    assert str(exc.value) == "No location found for address 'zzzz'"


def test_geocode_address_service_failure(monkeypatch):
    _use(monkeypatch, StubGeocoder(error=GeocoderTimedOut("timed out")))

    with pytest.raises(GeocodeError) as exc:
        asyncio.run(geocode_address("Bandra"))

    assert str(exc.value).startswith("Geocoding service unavailable")


def test_geocode_address_rejects_blank_input(monkeypatch):
    geocoder = _use(monkeypatch, StubGeocoder())

    with pytest.raises(GeocodeError):
        asyncio.run(geocode_address("   "))

    assert geocoder.queries == []
