"""Capability interface describing what a rich-text backend can render."""

from __future__ import annotations

from abc import ABC, abstractmethod

from ..styled.attributes import SYSTEM_FONT_FAMILY, Font

__all__ = ["HeadlessPlatform", "TextPlatform"]


class TextPlatform(ABC):
    """Interface for platform-specific font defaults and feature support."""

    name: str = "unknown"

    @property
    @abstractmethod
    def system_font_size(self) -> float:
        """Return the default point size for body text."""

    @property
    def font_family(self) -> str:
        return SYSTEM_FONT_FAMILY

    @property
    def supports_italics(self) -> bool:
        return True

    def system_font(self, point_size: float | None = None) -> Font:
        return Font.system(point_size or self.system_font_size, family=self.font_family)

    def bold_system_font(self, point_size: float | None = None) -> Font:
        return Font.bold_system(point_size or self.system_font_size, family=self.font_family)

    def italic_system_font(self, point_size: float | None = None) -> Font:
        return Font.italic_system(point_size or self.system_font_size, family=self.font_family)

    def __repr__(self) -> str:
        return f"{type(self).__name__}(name={self.name!r}, system_font_size={self.system_font_size!r})"


class HeadlessPlatform(TextPlatform):
    """Pure-Python platform used when no GUI toolkit is running."""

    name = "headless"

    def __init__(
        self,
        *,
        font_family: str = SYSTEM_FONT_FAMILY,
        system_font_size: float = 13.0,
        supports_italics: bool = True,
    ) -> None:
        if system_font_size <= 0:
            raise ValueError("system_font_size must be positive")
        self._font_family = font_family or SYSTEM_FONT_FAMILY
        self._system_font_size = float(system_font_size)
        self._supports_italics = supports_italics

    @property
    def system_font_size(self) -> float:
        return self._system_font_size

    @property
    def font_family(self) -> str:
        return self._font_family

    @property
    def supports_italics(self) -> bool:
        return self._supports_italics
