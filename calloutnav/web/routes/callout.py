"""Build a callout block for quick insertion."""

from __future__ import annotations

from fastapi import APIRouter  # type: ignore[import-not-found]
from fastapi.responses import JSONResponse  # type: ignore[import-not-found]
from pydantic import BaseModel  # type: ignore[import-not-found]

from calloutnav.template import build_callout

from ..utils import load_current_settings

router = APIRouter()


class CalloutRequest(BaseModel):
    """Request body for building a callout."""

    selection: str | None = None
    author: str | None = None


@router.post("/callout")
async def callout_endpoint(payload: CalloutRequest) -> JSONResponse:
    """Return a time-stamped callout quoting the selection."""

    author = payload.author or load_current_settings().author_name
    return JSONResponse({"text": build_callout(author, payload.selection)})
