"""List and edit the tracked callout tags."""

from __future__ import annotations

from fastapi import APIRouter, HTTPException  # type: ignore[import-not-found]
from fastapi.responses import JSONResponse  # type: ignore[import-not-found]
from pydantic import BaseModel  # type: ignore[import-not-found]

from calloutnav import config

from ..utils import load_current_settings

router = APIRouter()


class TagRequest(BaseModel):
    """Request body for tracking a tag."""

    tag: str
    color: str = config.DEFAULT_COLOR


def _tag_list(settings: config.Settings) -> list[dict[str, str]]:
    return [{"tag": u.tag, "color": u.color} for u in settings.users]


@router.get("/tags")
async def list_tags() -> JSONResponse:
    """Return the tracked tags with their colours."""

    return JSONResponse(_tag_list(load_current_settings()))


@router.post("/tags")
async def add_tag(payload: TagRequest) -> JSONResponse:
    """Track a new tag and return the updated list."""

    try:
        settings = config.add_user(
            load_current_settings(), payload.tag, payload.color
        )
    except ValueError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc

    config.save_settings(settings)
    return JSONResponse(_tag_list(settings))


@router.delete("/tags/{tag}")
async def delete_tag(tag: str) -> JSONResponse:
    """Stop tracking ``tag`` and return the updated list."""

    try:
        settings = config.remove_user(load_current_settings(), tag)
    except KeyError as exc:
        raise HTTPException(status_code=404, detail="Tag not found") from exc

    config.save_settings(settings)
    return JSONResponse(_tag_list(settings))
