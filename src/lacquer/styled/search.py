"""Pattern compilation and substring scanning over plain text."""

from __future__ import annotations

import re
from enum import IntFlag

from ..core.ranges import TextRange

__all__ = [
    "CompareOptions",
    "RegexOptions",
    "compile_pattern",
    "first_range_of",
    "literal_pattern",
    "ranges_of",
]


class RegexOptions(IntFlag):
    """Options applied when compiling a regular expression."""

    CASE_INSENSITIVE = 1
    ALLOW_COMMENTS = 2
    IGNORE_METACHARACTERS = 4
    DOT_MATCHES_LINE_SEPARATORS = 8
    ANCHORS_MATCH_LINES = 16


class CompareOptions(IntFlag):
    """Options for literal substring searches."""

    CASE_INSENSITIVE = 1


_FLAG_MAP = {
    RegexOptions.CASE_INSENSITIVE: re.IGNORECASE,
    RegexOptions.ALLOW_COMMENTS: re.VERBOSE,
    RegexOptions.DOT_MATCHES_LINE_SEPARATORS: re.DOTALL,
    RegexOptions.ANCHORS_MATCH_LINES: re.MULTILINE,
}


def literal_pattern(target: str) -> str:
    """Return a pattern matching ``target`` verbatim."""

    return re.escape(str(target))


def compile_pattern(pattern: str, options: RegexOptions = RegexOptions(0)) -> re.Pattern[str]:
    """Compile ``pattern`` with ``options``; raises :class:`re.error` when invalid."""

    flags = 0
    for option, flag in _FLAG_MAP.items():
        if options & option:
            flags |= flag
    if options & RegexOptions.IGNORE_METACHARACTERS:
        pattern = literal_pattern(pattern)
    return re.compile(pattern, flags)


def _find(text: str, target: str, start: int, options: CompareOptions) -> TextRange:
    if options & CompareOptions.CASE_INSENSITIVE:
        # Case folding can change string lengths; let the regex engine keep offsets.
        match = re.compile(literal_pattern(target), re.IGNORECASE).search(text, start)
        return TextRange.from_value(match) if match else TextRange.not_found()
    location = text.find(target, start)
    if location < 0:
        return TextRange.not_found()
    return TextRange(location, len(target))


def first_range_of(text: str, target: str, options: CompareOptions = CompareOptions(0)) -> TextRange:
    """Return the first occurrence of ``target`` or the not-found sentinel."""

    if not target:
        return TextRange.not_found()
    return _find(text, target, 0, options)


def ranges_of(text: str, target: str, options: CompareOptions = CompareOptions(0)) -> list[TextRange]:
    """Return every non-overlapping occurrence of ``target`` in ``text``.

    The scan restarts at the end of each match until nothing more is found. An
    empty ``target`` never matches.
    """

    ranges: list[TextRange] = []
    if not target:
        return ranges

    found = _find(text, target, 0, options)
    while found.found:
        ranges.append(found)
        found = _find(text, target, found.end, options)
    return ranges
