"""Persisted user settings."""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Any, Dict

import yaml  # type: ignore[import-untyped]
from attrs import Factory, define, evolve

from calloutnav.json_utils import json_dumps, json_loads
from calloutnav.parser import DEFAULT_COLOR, OrderOptions, TagRule
from calloutnav.parser.types import TagRuleList

logger = logging.getLogger(__name__)

JSONDict = Dict[str, Any]

# Location of the settings file unless overridden.
SETTINGS_PATH = Path.home() / ".calloutnav" / "settings.yaml"

SCALAR_KEYS = (
    "author_name",
    "sort_by_timestamp",
    "flatten_chronological",
    "sort_ascending",
)


def _default_users() -> TagRuleList:
    """Return the users tracked out of the box."""

    return [TagRule("tag1", "#007AFF"), TagRule("tag2", "#FF9500")]


@define(slots=True)
class Settings:
    """User settings driving extraction and presentation.

    Attributes:
        author_name: Author written by the quick insert helper.
        users: Tracked tags with their badge colours.
        sort_by_timestamp: Chronological instead of document order.
        flatten_chronological: Drop nesting in chronological order.
        sort_ascending: Sort direction.
    """

    author_name: str = "me"
    users: TagRuleList = Factory(_default_users)
    sort_by_timestamp: bool = False
    flatten_chronological: bool = True
    sort_ascending: bool = True

    def order_options(
        self,
        by_timestamp: bool | None = None,
        flatten: bool | None = None,
        ascending: bool | None = None,
    ) -> OrderOptions:
        """Return the ordering options described by these settings.

        Arguments that are not ``None`` override the saved values for a
        single listing.
        """

        return OrderOptions(
            by_timestamp=(
                self.sort_by_timestamp if by_timestamp is None else by_timestamp
            ),
            flatten=self.flatten_chronological if flatten is None else flatten,
            ascending=self.sort_ascending if ascending is None else ascending,
        )

    def to_dict(self) -> JSONDict:
        return {
            "author_name": self.author_name,
            "users": [{"tag": u.tag, "color": u.color} for u in self.users],
            "sort_by_timestamp": self.sort_by_timestamp,
            "flatten_chronological": self.flatten_chronological,
            "sort_ascending": self.sort_ascending,
        }


def settings_path(path: Path | None = None) -> Path:
    """Return the settings file location.

    Args:
        path: Explicit location taking precedence over everything else.

    Returns:
        ``path``, ``$CALLOUTNAV_SETTINGS`` or the default location.
    """

    if path is not None:
        return path
    env_path = os.environ.get("CALLOUTNAV_SETTINGS")
    return Path(env_path) if env_path else SETTINGS_PATH


def _parse_users(raw: Any) -> TagRuleList:  # noqa: ANN401
    """Build tag rules from stored user entries, skipping invalid ones."""

    if not isinstance(raw, list):
        logger.warning("Settings 'users' is not a list; using defaults.")
        return _default_users()

    users: TagRuleList = []
    for entry in raw:
        if not isinstance(entry, dict):
            logger.warning(f"Skipping user entry {entry!r}: not a mapping.")
            continue
        try:
            users.append(
                TagRule(
                    str(entry.get("tag") or ""),
                    str(entry.get("color") or DEFAULT_COLOR),
                )
            )
        except ValueError as exc:
            logger.warning(f"Skipping user entry {entry!r}: {exc}")
    return users


def settings_from_dict(data: JSONDict) -> Settings:
    """Merge stored values over the defaults.

    Unknown keys are ignored. A missing ``users`` key falls back to the
    default users so that files written by older versions keep working.
    """

    settings = Settings()

    for key in SCALAR_KEYS:
        value = data.get(key)
        if value is None:
            continue
        if key == "author_name":
            settings.author_name = str(value)
        elif isinstance(value, bool):
            setattr(settings, key, value)
        else:
            try:
                setattr(settings, key, parse_bool(str(value)))
            except ValueError as exc:
                logger.warning(f"Ignoring setting {key}: {exc}")

    if data.get("users") is not None:
        settings.users = _parse_users(data["users"])

    return settings


def load_settings(path: Path | None = None) -> Settings:
    """Load settings from YAML, returning defaults when the file is absent.

    Args:
        path: Optional explicit settings file.

    Returns:
        The loaded settings.
    """

    target = settings_path(path)
    if not target.exists():
        logger.debug(f"No settings at {target}; using defaults.")
        return Settings()

    text = target.read_text(encoding="utf-8")

    # Decode JSON or YAML depending on file extension.
    if target.suffix == ".json":
        data = json_loads(text) if text.strip() else {}
    else:
        data = yaml.safe_load(text) or {}

    if not isinstance(data, dict):
        raise ValueError(f"Settings file {target} must contain a mapping")
    return settings_from_dict(data)


def save_settings(settings: Settings, path: Path | None = None) -> Path:
    """Write settings to YAML and return the file location."""

    target = settings_path(path)
    target.parent.mkdir(parents=True, exist_ok=True)

    if target.suffix == ".json":
        content = json_dumps(settings.to_dict(), indent=True)
    else:
        content = yaml.safe_dump(
            settings.to_dict(), allow_unicode=True, sort_keys=False
        )

    target.write_text(content, encoding="utf-8")
    return target


def parse_bool(value: str) -> bool:
    """Interpret a command line or form value as a boolean."""

    lowered = value.strip().lower()
    if lowered in ("1", "true", "yes", "on"):
        return True
    if lowered in ("0", "false", "no", "off"):
        return False
    raise ValueError(f"Not a boolean value: {value!r}")


def set_value(settings: Settings, key: str, value: str) -> Settings:
    """Return a copy of ``settings`` with one scalar setting changed."""

    if key not in SCALAR_KEYS:
        raise ValueError(f"Unknown setting {key!r}")

    if key == "author_name":
        return evolve(settings, author_name=value)
    return evolve(settings, **{key: parse_bool(value)})


def find_user(settings: Settings, tag: str) -> TagRule | None:
    """Return the first user whose tag matches ``tag`` case-insensitively."""

    return next((u for u in settings.users if u.key == tag.lower()), None)


def add_user(
    settings: Settings, tag: str, color: str = DEFAULT_COLOR
) -> Settings:
    """Return a copy of ``settings`` tracking one more tag."""

    return evolve(settings, users=[*settings.users, TagRule(tag, color)])


def remove_user(settings: Settings, tag: str) -> Settings:
    """Return a copy of ``settings`` without any user matching ``tag``."""

    if find_user(settings, tag) is None:
        raise KeyError(tag)
    users = [u for u in settings.users if u.key != tag.lower()]
    return evolve(settings, users=users)


def set_user_color(settings: Settings, tag: str, color: str) -> Settings:
    """Return a copy of ``settings`` with a new colour for ``tag``."""

    if find_user(settings, tag) is None:
        raise KeyError(tag)
    users = [
        evolve(u, color=color) if u.key == tag.lower() else u
        for u in settings.users
    ]
    return evolve(settings, users=users)
