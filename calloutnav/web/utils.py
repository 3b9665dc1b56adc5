"""Utility helpers for web routes."""

from __future__ import annotations

import yaml  # type: ignore[import-untyped]
from fastapi import HTTPException  # type: ignore[import-not-found]

from calloutnav import config


def load_current_settings() -> config.Settings:
    """Return the saved settings, read fresh for every request.

    Raises:
        HTTPException: When the settings file cannot be read.
    """

    try:
        return config.load_settings()
    except (ValueError, yaml.YAMLError) as exc:
        raise HTTPException(status_code=500, detail=str(exc)) from exc
