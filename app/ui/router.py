"""Aggregate UI page routes into a single router."""
from __future__ import annotations

from fastapi import APIRouter
from fastapi.responses import RedirectResponse

from .pages import explore

router = APIRouter(include_in_schema=False)

router.include_router(explore.router)


@router.get("/")
async def home() -> RedirectResponse:
    return RedirectResponse(url="/explore")


__all__ = ["router"]
