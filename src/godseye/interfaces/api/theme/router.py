"""Theme preference endpoints."""

from __future__ import annotations

from typing import cast

from fastapi import APIRouter, Request
from pydantic import BaseModel

from godseye.domain.entities.preferences import Theme
from godseye.interfaces.app_state import AppState

router = APIRouter(prefix="/api/theme", tags=["theme"])


class ThemeBody(BaseModel):
    theme: Theme


@router.get("")
async def get_theme(request: Request) -> ThemeBody:
    state = cast(AppState, request.app.state)
    return ThemeBody(theme=state.theme_service.theme)


@router.put("")
async def put_theme(request: Request, body: ThemeBody) -> ThemeBody:
    state = cast(AppState, request.app.state)
    return ThemeBody(theme=await state.theme_service.set(body.theme))


@router.post("/toggle")
async def toggle_theme(request: Request) -> ThemeBody:
    state = cast(AppState, request.app.state)
    return ThemeBody(theme=await state.theme_service.toggle())
