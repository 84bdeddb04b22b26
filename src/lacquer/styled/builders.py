"""Shortcuts turning plain strings into styled text."""

from __future__ import annotations

from typing import Any, Mapping

from .attributes import AttributeKey, AttributeName, Font, ParagraphStyle, UnderlineStyle
from .colors import Color
from .text import MutableStyledText

__all__ = [
    "background_colored",
    "colored",
    "fonted",
    "indented",
    "struckthrough",
    "styled",
    "styled_with",
    "underlined",
]


def styled(text: str, attributes: Mapping[AttributeName, Any] | None = None) -> MutableStyledText:
    return MutableStyledText(text, attributes)


def colored(text: str, color: Any) -> MutableStyledText:
    return styled(text, {AttributeKey.FOREGROUND_COLOR: Color.from_value(color)})


def background_colored(text: str, color: Any) -> MutableStyledText:
    return styled(text, {AttributeKey.BACKGROUND_COLOR: Color.from_value(color)})


def fonted(text: str, font: Font) -> MutableStyledText:
    return styled(text, {AttributeKey.FONT: font})


def underlined(text: str) -> MutableStyledText:
    return styled(text, {AttributeKey.UNDERLINE_STYLE: UnderlineStyle.SINGLE})


def struckthrough(text: str) -> MutableStyledText:
    return styled(text, {AttributeKey.STRIKETHROUGH_STYLE: UnderlineStyle.SINGLE})


def indented(text: str, indentation: float) -> MutableStyledText:
    return styled(text, {AttributeKey.PARAGRAPH_STYLE: ParagraphStyle.indented(indentation)})


def styled_with(
    text: str,
    *,
    font: Font | None = None,
    color: Any = None,
    background_color: Any = None,
    indentation: float | None = None,
    underline: bool = False,
    strikethrough: bool = False,
) -> MutableStyledText:
    """Build styled text from ``text`` with any combination of common styles."""

    return MutableStyledText(text).style(
        font=font,
        color=color,
        background_color=background_color,
        indentation=indentation,
        underline=underline,
        strikethrough=strikethrough,
    )
