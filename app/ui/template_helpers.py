"""Utilities for rendering UI templates with shared context."""
from __future__ import annotations

from pathlib import Path
from typing import Any

from fastapi import Request
from fastapi.templating import Jinja2Templates

from app.config import get_settings
from . import components

TEMPLATES_DIR = Path(__file__).resolve().parent / "templates"

templates = Jinja2Templates(directory=str(TEMPLATES_DIR))

_BASE_COMPONENTS = {
    "layout": components.layout,
}


def render_template(request: Request, template_name: str, context: dict[str, Any] | None = None):
    """Return a TemplateResponse with the shared page context."""

    settings = get_settings()
    base_context: dict[str, Any] = {
        "app_name": settings.app_name,
        "components": _BASE_COMPONENTS,
        "active_nav": None,
        "page_title": "",
    }
    if context:
        base_context.update(context)

    return templates.TemplateResponse(request, template_name, base_context)
