"""HTML rendering for styled text."""

from __future__ import annotations

import html
from typing import TYPE_CHECKING, Any, Mapping

from .attributes import AttributeKey, Font, ParagraphStyle, UnderlineStyle, line_style_value
from .colors import Color

if TYPE_CHECKING:
    from .text import StyledText

__all__ = ["css_declarations", "to_html"]

_DECORATION_STYLES = {
    UnderlineStyle.SINGLE: "solid",
    UnderlineStyle.THICK: "solid",
    UnderlineStyle.DOUBLE: "double",
}


def _color_css(value: Any) -> str | None:
    try:
        return Color.from_value(value).css()
    except (TypeError, ValueError):
        return None


def _font_css(font: Font) -> list[str]:
    family = "system-ui, -apple-system, sans-serif" if font.is_system else f"'{font.family}'"
    declarations = [f"font-family: {family}", f"font-size: {font.point_size:g}pt"]
    if font.bold:
        declarations.append("font-weight: bold")
    if font.italic:
        declarations.append("font-style: italic")
    return declarations


def _decoration(attributes: Mapping[Any, Any]) -> list[str]:
    lines: list[str] = []
    styles: list[str] = []
    for key, line in (
        (AttributeKey.UNDERLINE_STYLE, "underline"),
        (AttributeKey.STRIKETHROUGH_STYLE, "line-through"),
    ):
        value = line_style_value(attributes.get(key))
        if value is None or value == UnderlineStyle.NONE:
            continue
        lines.append(line)
        try:
            styles.append(_DECORATION_STYLES[UnderlineStyle(value)])
        except (KeyError, ValueError):
            styles.append("solid")
    if not lines:
        return []
    declarations = [f"text-decoration-line: {' '.join(lines)}"]
    if "double" in styles:
        declarations.append("text-decoration-style: double")
    return declarations


def css_declarations(attributes: Mapping[Any, Any]) -> list[str]:
    """Translate an attribute mapping into inline CSS declarations."""

    declarations: list[str] = []
    font = attributes.get(AttributeKey.FONT)
    if isinstance(font, Font):
        declarations.extend(_font_css(font))
    for key, prop in (
        (AttributeKey.FOREGROUND_COLOR, "color"),
        (AttributeKey.BACKGROUND_COLOR, "background-color"),
    ):
        if key in attributes:
            css = _color_css(attributes[key])
            if css:
                declarations.append(f"{prop}: {css}")
    declarations.extend(_decoration(attributes))
    paragraph = attributes.get(AttributeKey.PARAGRAPH_STYLE)
    if isinstance(paragraph, ParagraphStyle) and paragraph.head_indent:
        declarations.append(f"padding-left: {paragraph.head_indent:g}pt")
    return declarations


def to_html(text: StyledText) -> str:
    """Render ``text`` as escaped HTML with one inline-styled span per run."""

    parts: list[str] = []
    for piece, attributes in text:
        body = html.escape(piece)
        declarations = css_declarations(attributes)
        if declarations:
            body = f"<span style=\"{html.escape('; '.join(declarations))}\">{body}</span>"
        link = attributes.get(AttributeKey.LINK)
        if link is not None:
            body = f"<a href=\"{html.escape(str(link))}\">{body}</a>"
        parts.append(body)
    return "".join(parts)
