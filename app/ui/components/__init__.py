"""Expose reusable UI components."""
from __future__ import annotations

from . import layout

__all__ = [
    "layout",
]
