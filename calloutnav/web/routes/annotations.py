"""Arrange the callouts of a submitted document."""

from __future__ import annotations

from fastapi import APIRouter  # type: ignore[import-not-found]
from fastapi.responses import JSONResponse  # type: ignore[import-not-found]
from pydantic import BaseModel  # type: ignore[import-not-found]

from calloutnav.parser import arrange, extract_annotations
from calloutnav.render import annotations_to_data

from ..utils import load_current_settings

router = APIRouter()


class AnnotationsRequest(BaseModel):
    """Request body for arranging a document.

    Ordering fields left out fall back to the saved settings.
    """

    text: str
    by_timestamp: bool | None = None
    flatten: bool | None = None
    ascending: bool | None = None


@router.post("/annotations")
async def annotations_endpoint(payload: AnnotationsRequest) -> JSONResponse:
    """Return the arranged callouts of ``payload.text``.

    Args:
        payload: Document text and optional ordering overrides.

    Returns:
        The ordering applied and the arranged annotations with colours and
        navigation lines.
    """

    settings = load_current_settings()
    options = settings.order_options(
        payload.by_timestamp, payload.flatten, payload.ascending
    )

    annotations = extract_annotations(payload.text, settings.users)
    forest = arrange(annotations, options)

    return JSONResponse(
        {
            "options": {
                "by_timestamp": options.by_timestamp,
                "flatten": options.flatten,
                "ascending": options.ascending,
            },
            "annotations": annotations_to_data(forest, settings.users),
        }
    )
