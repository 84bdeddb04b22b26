"""Styled text values, attribute types and string shortcuts."""

from .attributes import (
    AttributeKey,
    Attributes,
    Font,
    ParagraphStyle,
    TextAlignment,
    TextTab,
    UnderlineStyle,
)
from .builders import (
    background_colored,
    colored,
    fonted,
    indented,
    struckthrough,
    styled,
    styled_with,
    underlined,
)
from .colors import Color, normalize_color
from .render import to_html
from .search import CompareOptions, RegexOptions, first_range_of, ranges_of
from .text import MutableStyledText, StyledText, join_styled

__all__ = [
    "AttributeKey",
    "Attributes",
    "Color",
    "CompareOptions",
    "Font",
    "MutableStyledText",
    "ParagraphStyle",
    "RegexOptions",
    "StyledText",
    "TextAlignment",
    "TextTab",
    "UnderlineStyle",
    "background_colored",
    "colored",
    "first_range_of",
    "fonted",
    "indented",
    "join_styled",
    "normalize_color",
    "ranges_of",
    "struckthrough",
    "styled",
    "styled_with",
    "to_html",
    "underlined",
]
