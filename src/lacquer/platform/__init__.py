"""Text platform selection.

The active platform decides the system font size and whether italics are
available. It is resolved once from :func:`lacquer.services.get_settings` and
can be replaced with :func:`set_platform` (tests, embedding applications).
"""

from __future__ import annotations

import logging

from ..services.settings import get_settings
from .base import HeadlessPlatform, TextPlatform
from .qt import QT_AVAILABLE, QtPlatform

__all__ = [
    "HeadlessPlatform",
    "QT_AVAILABLE",
    "QtPlatform",
    "TextPlatform",
    "current_platform",
    "reset_platform",
    "set_platform",
]

LOGGER = logging.getLogger(__name__)
_ACTIVE: TextPlatform | None = None


def _resolve() -> TextPlatform:
    settings = get_settings()
    headless = HeadlessPlatform(
        font_family=settings.font_family,
        system_font_size=settings.system_font_size,
    )
    if settings.platform == "headless":
        return headless
    if QtPlatform.is_supported():
        return QtPlatform()
    if settings.platform == "qt":
        LOGGER.warning("Qt platform requested but no QApplication is running; using headless defaults")
    return headless


def current_platform() -> TextPlatform:
    """Return the active text platform, resolving it on first use."""

    global _ACTIVE
    if _ACTIVE is None:
        _ACTIVE = _resolve()
        LOGGER.debug("Resolved text platform: %r", _ACTIVE)
    return _ACTIVE


def set_platform(platform: TextPlatform) -> None:
    global _ACTIVE
    _ACTIVE = platform


def reset_platform() -> None:
    """Forget the active platform so the next lookup resolves it again."""

    global _ACTIVE
    _ACTIVE = None
