"""Shared pytest fixtures."""

from __future__ import annotations

from pathlib import Path
from typing import Iterator

import pytest

from lacquer.platform import HeadlessPlatform, reset_platform, set_platform
from lacquer.services.settings import reset_settings


@pytest.fixture(autouse=True)
def isolated_settings(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> Iterator[None]:
    """Keep every test away from the user's settings file and LACQUER_* env."""

    for name in (
        "LACQUER_FONT_FAMILY",
        "LACQUER_PLATFORM",
        "LACQUER_LOG_DIR",
        "LACQUER_STRICT_PATTERNS",
        "LACQUER_DEBUG_LOGGING",
        "LACQUER_SYSTEM_FONT_SIZE",
    ):
        monkeypatch.delenv(name, raising=False)
    monkeypatch.setenv("LACQUER_SETTINGS_PATH", str(tmp_path / "settings.json"))
    reset_settings()
    reset_platform()
    yield
    reset_settings()
    reset_platform()


@pytest.fixture
def headless() -> HeadlessPlatform:
    platform = HeadlessPlatform(system_font_size=13.0)
    set_platform(platform)
    return platform
