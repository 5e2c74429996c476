"""Report explorer: clustered map plus a list fallback."""
from __future__ import annotations

from fastapi import APIRouter, Request
from fastapi.responses import HTMLResponse

from app.config import get_settings
from ..template_helpers import render_template

router = APIRouter()


@router.get("/explore", response_class=HTMLResponse)
async def explore(request: Request) -> HTMLResponse:
    """Render the map of submitted reports."""

    return render_template(
        request,
        "explore.html",
        {
            "page_title": "Explore Civic Reports",
            "active_nav": "/explore",
            "mapbox_token": get_settings().mapbox_token or "",
            "features_url": "/api/report/map",
            # Default view: New Delhi
            "map_center": [77.209, 28.6139],
            "map_zoom": 4,
        },
    )
