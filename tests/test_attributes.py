"""Tests for attribute keys, colors, fonts and HTML rendering."""

from __future__ import annotations

import pytest

from lacquer.core import TextRange
from lacquer.styled import (
    AttributeKey,
    Color,
    Font,
    ParagraphStyle,
    StyledText,
    UnderlineStyle,
    normalize_color,
)
from lacquer.styled.attributes import line_style_value, normalize_attributes, normalize_key
from lacquer.styled.render import css_declarations, to_html


def test_normalize_key_promotes_known_names() -> None:
    assert normalize_key("font") is AttributeKey.FONT
    assert normalize_key(AttributeKey.LINK) is AttributeKey.LINK
    assert normalize_key("ligature") == "ligature"
    with pytest.raises(TypeError):
        normalize_key("")


def test_normalize_attributes_copies_mapping() -> None:
    source = {"foreground_color": Color(1, 2, 3)}

    normalized = normalize_attributes(source)

    assert normalized == {AttributeKey.FOREGROUND_COLOR: Color(1, 2, 3)}
    assert normalize_attributes(None) == {}


def test_underline_style_raw_values() -> None:
    assert int(UnderlineStyle.SINGLE) == 1
    assert int(UnderlineStyle.DOUBLE) == 9


def test_font_validation_and_helpers() -> None:
    font = Font.system(12)

    assert font.is_system
    assert font.with_size(14).point_size == 14.0
    assert Font.bold_system(10, family="Inter") == Font("Inter", 10.0, bold=True)
    with pytest.raises(ValueError):
        Font("Inter", 0)


def test_paragraph_style_indented() -> None:
    style = ParagraphStyle.indented(8)

    assert style.head_indent == 8.0
    assert style.first_line_head_indent == 0.0
    assert [tab.location for tab in style.tab_stops] == [8.0]


@pytest.mark.parametrize(
    ("value", "expected"),
    [
        ("#ff8000", (255, 128, 0)),
        ("f80", (255, 136, 0)),
        ("10, 20, 30", (10, 20, 30)),
        ((300, -5, 7), (255, 0, 7)),
    ],
)
def test_normalize_color_formats(value: object, expected: tuple[int, int, int]) -> None:
    assert normalize_color(value) == expected


def test_normalize_color_rejects_bad_input() -> None:
    with pytest.raises(ValueError):
        normalize_color("#12")
    with pytest.raises(TypeError):
        normalize_color(42)


def test_color_helpers() -> None:
    color = Color.from_value((0, 128, 255, 0.5))

    assert color.hex == "#0080ff"
    assert color.css() == "rgba(0, 128, 255, 0.5)"
    assert color.with_alpha(2).alpha == 1.0
    assert Color.from_dict(color.to_dict()) == color


def test_css_declarations_cover_common_attributes() -> None:
    declarations = css_declarations(
        {
            AttributeKey.FONT: Font("Menlo", 11, bold=True),
            AttributeKey.BACKGROUND_COLOR: Color(0, 0, 0),
            AttributeKey.UNDERLINE_STYLE: UnderlineStyle.DOUBLE,
            AttributeKey.STRIKETHROUGH_STYLE: UnderlineStyle.SINGLE,
            AttributeKey.PARAGRAPH_STYLE: ParagraphStyle.indented(6),
        }
    )

    assert declarations == [
        "font-family: 'Menlo'",
        "font-size: 11pt",
        "font-weight: bold",
        "background-color: rgb(0, 0, 0)",
        "text-decoration-line: underline line-through",
        "text-decoration-style: double",
        "padding-left: 6pt",
    ]


def test_css_declarations_skip_none_decorations() -> None:
    assert css_declarations({AttributeKey.UNDERLINE_STYLE: UnderlineStyle.NONE}) == []


def test_to_html_wraps_links() -> None:
    text = StyledText("docs here").applying({AttributeKey.LINK: "https://example.com/?a=1&b=2"}, TextRange(0, 4))

    assert to_html(text) == '<a href="https://example.com/?a=1&amp;b=2">docs</a> here'


def test_non_integer_line_styles_are_skipped() -> None:
    text = StyledText("abc", {"underline_style": "single", "strikethrough_style": UnderlineStyle.SINGLE})

    assert css_declarations(text.attributes) == ["text-decoration-line: line-through"]
    assert to_html(text) == '<span style="text-decoration-line: line-through">abc</span>'


def test_line_style_value() -> None:
    assert line_style_value(UnderlineStyle.DOUBLE) == 9
    assert line_style_value("bold") is None
    assert line_style_value(None) is None
