"""Export page routers for composition."""
from __future__ import annotations

from . import explore

__all__ = [
    "explore",
]
