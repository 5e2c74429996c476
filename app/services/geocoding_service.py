"""Resolve free-text addresses to coordinates through geopy."""
from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from functools import lru_cache
from typing import Any

from geopy.exc import GeopyError
from geopy.geocoders import MapBox, Nominatim

from ..config import get_settings

logger = logging.getLogger(__name__)


class GeocodeError(RuntimeError):
    """Raised when an address cannot be resolved; the message is shown to users."""


@dataclass(frozen=True)
class Coordinates:
    lat: float
    lng: float

    def as_dict(self) -> dict[str, float]:
        return {"lat": self.lat, "lng": self.lng}


@lru_cache(maxsize=1)
def get_geocoder() -> Any:
    """Return MapBox when a token is configured, Nominatim otherwise."""

    settings = get_settings()
    if settings.mapbox_token:
        return MapBox(api_key=settings.mapbox_token, timeout=settings.geocoder_timeout)
    return Nominatim(user_agent=settings.geocoder_user_agent, timeout=settings.geocoder_timeout)


async def geocode_address(address: str) -> Coordinates:
    query = (address or "").strip()
    if not query:
        raise GeocodeError("Address is empty")

    geocoder = get_geocoder()
    try:
        result = await asyncio.to_thread(geocoder.geocode, query, exactly_one=True)
    except GeopyError as exc:
        logger.warning("Geocoding service failed for %r: %s", query, exc)
        raise GeocodeError(f"Geocoding service unavailable: {exc}") from exc

    if not result:
        raise GeocodeError(f"No location found for address '{query}'")

    return Coordinates(lat=float(result.latitude), lng=float(result.longitude))


__all__ = ["Coordinates", "GeocodeError", "geocode_address", "get_geocoder"]
