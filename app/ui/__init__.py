"""Server-rendered pages for browsing reports."""
from .router import router

__all__ = ["router"]
