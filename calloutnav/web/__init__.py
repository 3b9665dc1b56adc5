"""FastAPI application exposing callout extraction."""

from __future__ import annotations

from fastapi import FastAPI  # type: ignore[import-not-found]

from .routes import annotations, callout, tags

app = FastAPI(title="calloutnav")
app.include_router(annotations.router)
app.include_router(callout.router)
app.include_router(tags.router)
