"""Tests for the immutable StyledText value."""

from __future__ import annotations

import pytest

from lacquer.core import TextRange
from lacquer.errors import InvalidPatternError, RangeOutOfBoundsError
from lacquer.platform import HeadlessPlatform, set_platform
from lacquer.services.settings import Settings, reset_settings
from lacquer.styled import (
    AttributeKey,
    Color,
    Font,
    RegexOptions,
    StyledText,
    UnderlineStyle,
    join_styled,
)

RED = Color(255, 0, 0)
BLUE = Color(0, 0, 255)


def test_applying_to_empty_text_returns_same_instance() -> None:
    empty = StyledText()

    result = empty.applying({AttributeKey.FOREGROUND_COLOR: RED}, TextRange(0, 0))

    assert result is empty
    assert result == StyledText("")


def test_applying_merges_into_range_only() -> None:
    text = StyledText("hello world", {AttributeKey.FONT: Font.system(12)})

    styled = text.applying({AttributeKey.FOREGROUND_COLOR: RED}, TextRange(0, 5))

    assert styled.attribute(AttributeKey.FOREGROUND_COLOR, 0) == RED
    assert styled.attribute(AttributeKey.FOREGROUND_COLOR, 6) is None
    assert styled.attribute(AttributeKey.FONT, 6) == Font.system(12)
    assert text.attribute(AttributeKey.FOREGROUND_COLOR, 0) is None


def test_later_application_overrides_same_key() -> None:
    text = StyledText("abc")

    styled = text.applying({"foreground_color": RED}).applying({AttributeKey.FOREGROUND_COLOR: BLUE})

    assert styled.attributes == {AttributeKey.FOREGROUND_COLOR: BLUE}


def test_applying_rejects_ranges_outside_text() -> None:
    with pytest.raises(RangeOutOfBoundsError):
        StyledText("abc").applying({AttributeKey.FOREGROUND_COLOR: RED}, TextRange(2, 5))


def test_attributes_at_reports_effective_range() -> None:
    text = StyledText("abcdef").applying({AttributeKey.UNDERLINE_STYLE: UnderlineStyle.SINGLE}, TextRange(2, 2))

    attributes, span = text.attributes_at(3)

    assert attributes == {AttributeKey.UNDERLINE_STYLE: UnderlineStyle.SINGLE}
    assert span == TextRange(2, 2)
    assert text.attributes_at(0) == ({}, TextRange(0, 2))


def test_attributes_property_is_empty_for_empty_text() -> None:
    assert StyledText().attributes == {}
    assert StyledText("x", {AttributeKey.LINK: "https://example.com"}).attributes == {
        AttributeKey.LINK: "https://example.com"
    }


def test_unknown_string_keys_are_kept_opaque() -> None:
    text = StyledText("abc", {"kerning": 2})

    assert text.attributes == {"kerning": 2}


def test_applying_to_ranges_matching_styles_every_match() -> None:
    text = StyledText("cat hat bat")

    styled = text.applying_to_ranges_matching({AttributeKey.FOREGROUND_COLOR: RED}, r"[ch]at")

    assert [span.to_tuple() for span, attrs in styled.runs() if attrs] == [(0, 3), (4, 3)]


def test_applying_to_ranges_matching_honours_options() -> None:
    text = StyledText("Cat cat")

    styled = text.applying_to_ranges_matching(
        {AttributeKey.FOREGROUND_COLOR: RED}, "cat", RegexOptions.CASE_INSENSITIVE
    )

    assert styled.attribute(AttributeKey.FOREGROUND_COLOR, 0) == RED
    assert styled.attribute(AttributeKey.FOREGROUND_COLOR, 4) == RED


def test_invalid_pattern_returns_input_unchanged() -> None:
    text = StyledText("[abc]")

    assert text.applying_to_ranges_matching({AttributeKey.FOREGROUND_COLOR: RED}, "[") is text


def test_invalid_pattern_raises_in_strict_mode() -> None:
    with pytest.raises(InvalidPatternError):
        StyledText("abc").applying_to_ranges_matching({AttributeKey.FOREGROUND_COLOR: RED}, "[", strict=True)


def test_strict_patterns_setting_enables_errors() -> None:
    reset_settings(Settings(strict_patterns=True))

    with pytest.raises(InvalidPatternError):
        StyledText("abc").applying_to_ranges_matching({AttributeKey.FOREGROUND_COLOR: RED}, "(")


def test_applying_to_occurrences_treats_target_literally() -> None:
    text = StyledText("a.b.c")

    styled = text.applying_to_occurrences_of({AttributeKey.BACKGROUND_COLOR: BLUE}, ".")

    assert styled.attribute(AttributeKey.BACKGROUND_COLOR, 1) == BLUE
    assert styled.attribute(AttributeKey.BACKGROUND_COLOR, 3) == BLUE
    assert styled.attribute(AttributeKey.BACKGROUND_COLOR, 0) is None


def test_colored_accepts_hex_strings() -> None:
    assert StyledText("x").colored("#ff0000").attributes == {AttributeKey.FOREGROUND_COLOR: RED}


def test_bolded_keeps_existing_point_size(headless: HeadlessPlatform) -> None:
    text = StyledText("bold", {AttributeKey.FONT: Font("Helvetica", 20)})

    font = text.bolded.attribute(AttributeKey.FONT, 0)

    assert font == Font.bold_system(20)


def test_bolded_falls_back_to_system_font_size(headless: HeadlessPlatform) -> None:
    font = StyledText("bold").bolded.attribute(AttributeKey.FONT, 0)

    assert font.bold
    assert font.point_size == headless.system_font_size


def test_italicized_is_noop_without_italic_support() -> None:
    set_platform(HeadlessPlatform(supports_italics=False))
    text = StyledText("slanted")

    assert text.italicized is text


def test_italicized_uses_italic_system_font(headless: HeadlessPlatform) -> None:
    font = StyledText("slanted").italicized.attribute(AttributeKey.FONT, 0)

    assert font == Font.italic_system(13.0)


def test_transforms_on_empty_text_are_noops(headless: HeadlessPlatform) -> None:
    empty = StyledText()

    assert empty.bolded is empty
    assert empty.italicized is empty
    assert empty.underlined is empty
    assert empty.struckthrough is empty


def test_underlined_and_struckthrough() -> None:
    text = StyledText("deco").underlined.struckthrough

    assert text.attributes == {
        AttributeKey.UNDERLINE_STYLE: UnderlineStyle.SINGLE,
        AttributeKey.STRIKETHROUGH_STYLE: UnderlineStyle.SINGLE,
    }


def test_concatenation_preserves_operand_attributes() -> None:
    left = StyledText("ab", {AttributeKey.FOREGROUND_COLOR: RED})
    right = StyledText("cde", {AttributeKey.FOREGROUND_COLOR: BLUE})

    combined = left + right

    assert combined.string == "abcde"
    for index in range(len(left)):
        assert combined.attributes_at(index)[0] == left.attributes_at(index)[0]
    for index in range(len(right)):
        assert combined.attributes_at(index + len(left))[0] == right.attributes_at(index)[0]
    assert type(combined) is StyledText


def test_concatenation_with_plain_strings() -> None:
    left = StyledText("ab", {AttributeKey.FOREGROUND_COLOR: RED})

    combined = left + "!"
    prefixed = ">" + left

    assert combined.string == "ab!"
    assert combined.attributes_at(2)[0] == {}
    assert prefixed.string == ">ab"
    assert prefixed.attribute(AttributeKey.FOREGROUND_COLOR, 1) == RED


def test_in_place_add_rebinds_immutable_value() -> None:
    original = StyledText("a")
    text = original

    text += StyledText("b")

    assert text.string == "ab"
    assert original.string == "a"


def test_join_with_separator() -> None:
    items = [StyledText(letter, {AttributeKey.FOREGROUND_COLOR: RED}) for letter in "ABC"]

    joined = join_styled(items, "-")

    assert joined.string == "A-B-C"
    assert joined.attributes_at(1)[0] == {}
    assert joined.attribute(AttributeKey.FOREGROUND_COLOR, 2) == RED


def test_join_with_styled_separator_method() -> None:
    separator = StyledText(", ", {AttributeKey.UNDERLINE_STYLE: UnderlineStyle.SINGLE})

    joined = separator.join(["x", StyledText("y")])

    assert joined.string == "x, y"
    assert joined.attribute(AttributeKey.UNDERLINE_STYLE, 1) == UnderlineStyle.SINGLE


def test_join_of_empty_sequence_is_empty() -> None:
    assert join_styled([], "-") == StyledText()


def test_slicing_keeps_attributes() -> None:
    text = StyledText("abcdef").applying({AttributeKey.FOREGROUND_COLOR: RED}, TextRange(1, 3))

    piece = text[2:5]

    assert piece.string == "cde"
    assert piece.runs() == [
        (TextRange(0, 2), {AttributeKey.FOREGROUND_COLOR: RED}),
        (TextRange(2, 1), {}),
    ]
    assert text[-1].string == "f"
    with pytest.raises(IndexError):
        text[10]


def test_from_segments_and_equality() -> None:
    built = StyledText.from_segments([("ab", {AttributeKey.FOREGROUND_COLOR: RED}), "cd"])
    expected = StyledText("abcd").applying({AttributeKey.FOREGROUND_COLOR: RED}, TextRange(0, 2))

    assert built == expected
    assert built != StyledText("abcd")


def test_to_html_escapes_and_styles_runs() -> None:
    text = StyledText("<b>").applying({AttributeKey.FOREGROUND_COLOR: RED}, TextRange(0, 1))

    html = text.to_html()

    assert html == '<span style="color: rgb(255, 0, 0)">&lt;</span>b&gt;'
