"""Shared fixtures for the calloutnav tests."""

from __future__ import annotations

from pathlib import Path

import pytest

from calloutnav.parser import TagRule


@pytest.fixture
def sample_text() -> str:
    """A reply nested under the first callout and a stamped third one."""

    return "\n".join(
        [
            "> [!me] A",
            "> > [!you] B",
            "> [!me] C (2024-01-01 10:00)",
        ]
    )


@pytest.fixture
def rules() -> list[TagRule]:
    """Rules tracking ``me`` and ``you``."""

    return [TagRule("me", "#007AFF"), TagRule("you", "#FF9500")]


@pytest.fixture
def settings_file(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> Path:
    """Point the settings location at a temporary file tracking me/you."""

    path = tmp_path / "settings.yaml"
    path.write_text(
        "author_name: me\n"
        "users:\n"
        "  - tag: me\n"
        "    color: '#007AFF'\n"
        "  - tag: you\n"
        "    color: '#FF9500'\n",
        encoding="utf-8",
    )
    monkeypatch.setenv("CALLOUTNAV_SETTINGS", str(path))
    return path
