"""Attribute keys and value types understood by styled text."""

from __future__ import annotations

from dataclasses import dataclass, replace
from enum import Enum, IntEnum
from typing import Any, Dict, Mapping, Tuple

__all__ = [
    "AttributeKey",
    "Attributes",
    "Font",
    "ParagraphStyle",
    "TextAlignment",
    "TextTab",
    "UnderlineStyle",
    "normalize_attributes",
    "line_style_value",
    "normalize_key",
]

SYSTEM_FONT_FAMILY = "System"


class AttributeKey(str, Enum):
    """Conventional rich-text attribute names."""

    FONT = "font"
    FOREGROUND_COLOR = "foreground_color"
    BACKGROUND_COLOR = "background_color"
    UNDERLINE_STYLE = "underline_style"
    STRIKETHROUGH_STYLE = "strikethrough_style"
    PARAGRAPH_STYLE = "paragraph_style"
    LINK = "link"


AttributeName = AttributeKey | str
Attributes = Dict[AttributeName, Any]


def normalize_key(key: AttributeName) -> AttributeName:
    """Return the :class:`AttributeKey` for ``key`` when it names a known attribute."""

    if isinstance(key, AttributeKey):
        return key
    if not isinstance(key, str) or not key:
        raise TypeError(f"Attribute keys must be non-empty strings, received {key!r}")
    try:
        return AttributeKey(key)
    except ValueError:
        return key


def normalize_attributes(attributes: Mapping[AttributeName, Any] | None) -> Attributes:
    """Copy ``attributes`` with known string keys promoted to :class:`AttributeKey`."""

    if not attributes:
        return {}
    return {normalize_key(key): value for key, value in attributes.items()}


class UnderlineStyle(IntEnum):
    """Line styles for underline and strikethrough decorations."""

    NONE = 0
    SINGLE = 1
    THICK = 2
    DOUBLE = 9


def line_style_value(value: Any) -> int | None:
    """Return the integer line style stored in ``value``, or ``None`` when it holds none."""

    try:
        return int(value)
    except (TypeError, ValueError):
        return None


class TextAlignment(str, Enum):
    LEFT = "left"
    CENTER = "center"
    RIGHT = "right"
    JUSTIFIED = "justified"
    NATURAL = "natural"


@dataclass(slots=True, frozen=True)
class Font:
    """A font description; rendering backends map it onto native fonts."""

    family: str
    point_size: float
    bold: bool = False
    italic: bool = False

    def __post_init__(self) -> None:
        size = float(self.point_size)
        if size <= 0:
            raise ValueError("Font point size must be positive")
        object.__setattr__(self, "point_size", size)

    @property
    def is_system(self) -> bool:
        return self.family == SYSTEM_FONT_FAMILY

    def with_size(self, point_size: float) -> Font:
        return replace(self, point_size=point_size)

    @classmethod
    def system(cls, point_size: float, *, family: str = SYSTEM_FONT_FAMILY) -> Font:
        return cls(family, point_size)

    @classmethod
    def bold_system(cls, point_size: float, *, family: str = SYSTEM_FONT_FAMILY) -> Font:
        return cls(family, point_size, bold=True)

    @classmethod
    def italic_system(cls, point_size: float, *, family: str = SYSTEM_FONT_FAMILY) -> Font:
        return cls(family, point_size, italic=True)


@dataclass(slots=True, frozen=True)
class TextTab:
    location: float
    alignment: TextAlignment = TextAlignment.LEFT


@dataclass(slots=True, frozen=True)
class ParagraphStyle:
    """Paragraph-level layout attributes."""

    head_indent: float = 0.0
    first_line_head_indent: float = 0.0
    default_tab_interval: float = 0.0
    tab_stops: Tuple[TextTab, ...] = ()
    alignment: TextAlignment = TextAlignment.NATURAL

    def __post_init__(self) -> None:
        object.__setattr__(self, "tab_stops", tuple(self.tab_stops))

    @classmethod
    def indented(cls, indentation: float) -> ParagraphStyle:
        """Return a style whose wrapped lines and tab stops align at ``indentation``."""

        indent = float(indentation)
        return cls(
            head_indent=indent,
            default_tab_interval=indent,
            tab_stops=(TextTab(location=indent, alignment=TextAlignment.LEFT),),
        )
