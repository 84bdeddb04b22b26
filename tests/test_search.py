from __future__ import annotations

import re

import pytest

from lacquer.core import TextRange
from lacquer.styled.search import (
    CompareOptions,
    RegexOptions,
    compile_pattern,
    first_range_of,
    literal_pattern,
    ranges_of,
)


def test_ranges_of_restarts_after_each_match() -> None:
    assert ranges_of("ababab", "ab") == [TextRange(0, 2), TextRange(2, 2), TextRange(4, 2)]


def test_ranges_of_does_not_overlap_matches() -> None:
    assert ranges_of("aaaa", "aa") == [TextRange(0, 2), TextRange(2, 2)]


def test_ranges_of_empty_target_or_miss() -> None:
    assert ranges_of("abc", "") == []
    assert ranges_of("abc", "z") == []


def test_first_range_of_returns_sentinel_on_miss() -> None:
    assert first_range_of("hello", "l") == TextRange(2, 1)
    assert not first_range_of("hello", "x").found
    assert not first_range_of("hello", "").found


def test_case_insensitive_search() -> None:
    found = ranges_of("Ab aB ab", "ab", CompareOptions.CASE_INSENSITIVE)

    assert found == [TextRange(0, 2), TextRange(3, 2), TextRange(6, 2)]
    assert ranges_of("Ab aB ab", "ab") == [TextRange(6, 2)]


def test_case_insensitive_search_escapes_target() -> None:
    assert first_range_of("x.Y", ".y", CompareOptions.CASE_INSENSITIVE) == TextRange(1, 2)


def test_compile_pattern_maps_options_to_flags() -> None:
    compiled = compile_pattern("^b.", RegexOptions.ANCHORS_MATCH_LINES | RegexOptions.DOT_MATCHES_LINE_SEPARATORS)

    assert compiled.flags & re.MULTILINE
    assert compiled.flags & re.DOTALL
    assert compiled.search("a\nb\n").group() == "b\n"


def test_compile_pattern_ignoring_metacharacters() -> None:
    compiled = compile_pattern("a+b", RegexOptions.IGNORE_METACHARACTERS)

    assert compiled.search("aab") is None
    assert compiled.search("a+b") is not None


def test_compile_pattern_raises_for_invalid_patterns() -> None:
    with pytest.raises(re.error):
        compile_pattern("(")


def test_literal_pattern_escapes_metacharacters() -> None:
    assert re.fullmatch(literal_pattern("1+1=2?"), "1+1=2?")
