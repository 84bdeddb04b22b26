"""Immutable and mutable styled text values.

A styled text is a plain string plus contiguous attribute runs covering it.
Runs are kept canonical (no empty runs, no two neighbours with equal
attributes), so two values with the same visible styling compare equal.
"""

from __future__ import annotations

import bisect
import logging
import re
from typing import TYPE_CHECKING, Any, Iterable, Iterator, Mapping, Tuple, TypeVar

from ..core.ranges import TextRange
from ..errors import InvalidPatternError, RangeOutOfBoundsError
from .attributes import (
    AttributeKey,
    AttributeName,
    Attributes,
    Font,
    ParagraphStyle,
    UnderlineStyle,
    normalize_attributes,
    normalize_key,
)
from .colors import Color
from .search import CompareOptions, RegexOptions, compile_pattern, first_range_of, literal_pattern, ranges_of

if TYPE_CHECKING:
    from ..platform.base import TextPlatform

__all__ = ["MutableStyledText", "StyledText", "join_styled"]

LOGGER = logging.getLogger(__name__)

_Run = Tuple[int, int, Attributes]
RangeLike = TextRange | Tuple[int, int] | slice
_M = TypeVar("_M", bound="MutableStyledText")


def _platform() -> TextPlatform:
    from ..platform import current_platform

    return current_platform()


def _strict_patterns() -> bool:
    from ..services.settings import get_settings

    return get_settings().strict_patterns


# ---------------------------------------------------------------------------
# Run helpers
# ---------------------------------------------------------------------------
def _coalesce(runs: Iterable[_Run]) -> list[_Run]:
    merged: list[_Run] = []
    for start, end, attrs in runs:
        if end <= start:
            continue
        if merged and merged[-1][1] == start and merged[-1][2] == attrs:
            merged[-1] = (merged[-1][0], end, merged[-1][2])
        else:
            merged.append((start, end, attrs))
    return merged


def _split(runs: list[_Run], index: int) -> None:
    for position, (start, end, attrs) in enumerate(runs):
        if start < index < end:
            runs[position : position + 1] = [(start, index, attrs), (index, end, dict(attrs))]
            return
        if start >= index:
            return


def _rewrite(runs: list[_Run], span: TextRange, transform: Any) -> list[_Run]:
    if span.is_empty:
        return runs
    working = list(runs)
    _split(working, span.location)
    _split(working, span.end)
    rewritten: list[_Run] = []
    for start, end, attrs in working:
        if span.location <= start and end <= span.end:
            attrs = transform(attrs)
        rewritten.append((start, end, attrs))
    return _coalesce(rewritten)


def _as_styled(value: Any) -> StyledText:
    if isinstance(value, StyledText):
        return value
    if isinstance(value, str):
        return StyledText(value)
    raise TypeError(f"Expected StyledText or str, received {type(value).__name__}")


# ---------------------------------------------------------------------------
# Immutable value
# ---------------------------------------------------------------------------
class StyledText:
    """Text annotated with per-range attributes; never changes once built."""

    __slots__ = ("_string", "_runs")

    def __init__(
        self,
        text: StyledText | str = "",
        attributes: Mapping[AttributeName, Any] | None = None,
    ) -> None:
        if isinstance(text, StyledText):
            self._string = text._string
            self._runs = [(start, end, dict(attrs)) for start, end, attrs in text._runs]
            if attributes:
                overrides = normalize_attributes(attributes)
                self._runs = _rewrite(self._runs, self._full_range(), lambda old: {**old, **overrides})
            return
        self._string = str(text)
        self._runs = [(0, len(self._string), normalize_attributes(attributes))] if self._string else []

    @classmethod
    def _from_parts(cls, string: str, runs: list[_Run]) -> Any:
        instance = cls.__new__(cls)
        instance._string = string
        instance._runs = _coalesce((start, end, dict(attrs)) for start, end, attrs in runs)
        return instance

    @classmethod
    def from_segments(cls, segments: Iterable[Tuple[str, Mapping[AttributeName, Any] | None] | StyledText | str]) -> Any:
        """Build a value from ``(text, attributes)`` pairs and/or plain pieces."""

        string_parts: list[str] = []
        runs: list[_Run] = []
        offset = 0
        for segment in segments:
            piece = segment if isinstance(segment, (StyledText, str)) else StyledText(*segment)
            piece = _as_styled(piece)
            string_parts.append(piece._string)
            runs.extend((start + offset, end + offset, attrs) for start, end, attrs in piece._runs)
            offset += len(piece._string)
        return cls._from_parts("".join(string_parts), runs)

    # -- reads -------------------------------------------------------------
    @property
    def string(self) -> str:
        return self._string

    @property
    def length(self) -> int:
        return len(self._string)

    def __len__(self) -> int:
        return len(self._string)

    def __str__(self) -> str:
        return self._string

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self._string!r}, runs={len(self._runs)})"

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, StyledText):
            return NotImplemented
        return self._string == other._string and self._runs == other._runs

    __hash__ = None  # type: ignore[assignment]

    def _full_range(self) -> TextRange:
        return TextRange(0, len(self._string))

    def _resolve_range(self, value: RangeLike | None) -> TextRange:
        if value is None:
            return self._full_range()
        span = TextRange.from_value(value)
        if not span.is_within(len(self._string)):
            raise RangeOutOfBoundsError(span.location, span.length, len(self._string))
        return span

    @property
    def attributes(self) -> Attributes:
        """Attributes at the first character; empty when the text is empty."""

        if not self._string:
            return {}
        return self.attributes_at(0)[0]

    def attributes_at(self, index: int) -> tuple[Attributes, TextRange]:
        """Return the attributes at ``index`` and the run they apply to."""

        if not 0 <= index < len(self._string):
            raise RangeOutOfBoundsError(index, 0, len(self._string))
        starts = [start for start, _, _ in self._runs]
        start, end, attrs = self._runs[bisect.bisect_right(starts, index) - 1]
        return dict(attrs), TextRange(start, end - start)

    def attribute(self, key: AttributeName, at: int) -> Any:
        return self.attributes_at(at)[0].get(normalize_key(key))

    def runs(self) -> list[tuple[TextRange, Attributes]]:
        return [(TextRange(start, end - start), dict(attrs)) for start, end, attrs in self._runs]

    def __iter__(self) -> Iterator[tuple[str, Attributes]]:
        for start, end, attrs in self._runs:
            yield self._string[start:end], dict(attrs)

    def substring(self, span: RangeLike) -> StyledText:
        """Return the styled text covering ``span``."""

        resolved = self._resolve_range(span)
        runs = [
            (max(start, resolved.location) - resolved.location, min(end, resolved.end) - resolved.location, attrs)
            for start, end, attrs in self._runs
            if start < resolved.end and end > resolved.location
        ]
        return StyledText._from_parts(self._string[resolved.as_slice()], runs)

    def __getitem__(self, index: int | slice) -> StyledText:
        if isinstance(index, slice):
            start, stop, step = index.indices(len(self._string))
            if step != 1:
                raise ValueError("Styled text slices do not support steps")
            return self.substring(TextRange.from_bounds(start, max(start, stop)))
        position = index + len(self._string) if index < 0 else index
        if not 0 <= position < len(self._string):
            raise RangeOutOfBoundsError(index, 1, len(self._string))
        return self.substring(TextRange(position, 1))

    # -- conversions ------------------------------------------------------
    def copy(self) -> StyledText:
        """Return an immutable snapshot of this value."""

        return StyledText._from_parts(self._string, self._runs)

    def mutable_copy(self) -> MutableStyledText:
        return MutableStyledText._from_parts(self._string, self._runs)

    def to_html(self) -> str:
        from .render import to_html

        return to_html(self)

    # -- attribute application -------------------------------------------
    def applying(
        self,
        attributes: Mapping[AttributeName, Any],
        range: RangeLike | None = None,
    ) -> StyledText:
        """Return a copy with ``attributes`` merged into ``range`` (whole text by default).

        Existing values for the same keys are overridden inside ``range``;
        everything outside it is left alone. Empty text is returned as is.
        """

        if not self._string:
            return self
        span = self._resolve_range(range)
        overrides = normalize_attributes(attributes)
        return StyledText._from_parts(self._string, _rewrite(self._runs, span, lambda old: {**old, **overrides}))

    def applying_to_ranges_matching(
        self,
        attributes: Mapping[AttributeName, Any],
        pattern: str,
        options: RegexOptions = RegexOptions(0),
        *,
        strict: bool | None = None,
    ) -> StyledText:
        """Apply ``attributes`` to every match of the regular expression ``pattern``.

        An invalid pattern leaves the text unchanged unless ``strict`` (or the
        ``strict_patterns`` setting when ``strict`` is ``None``) is enabled, in
        which case :class:`~lacquer.errors.InvalidPatternError` is raised.
        """

        try:
            compiled = compile_pattern(pattern, options)
        except re.error as exc:
            if strict if strict is not None else _strict_patterns():
                raise InvalidPatternError(pattern, str(exc)) from exc
            LOGGER.debug("Ignoring invalid pattern %r: %s", pattern, exc)
            return self

        overrides = normalize_attributes(attributes)
        runs = list(self._runs)
        for match in compiled.finditer(self._string):
            runs = _rewrite(runs, TextRange.from_value(match), lambda old: {**old, **overrides})
        return StyledText._from_parts(self._string, runs)

    def applying_to_occurrences_of(self, attributes: Mapping[AttributeName, Any], target: str) -> StyledText:
        """Apply ``attributes`` to every literal occurrence of ``target``."""

        return self.applying_to_ranges_matching(attributes, literal_pattern(target))

    def colored(self, color: Any) -> StyledText:
        return self.applying({AttributeKey.FOREGROUND_COLOR: Color.from_value(color)})

    def _current_point_size(self, platform: TextPlatform) -> float:
        font = self.attribute(AttributeKey.FONT, 0)
        if isinstance(font, Font):
            return font.point_size
        return platform.system_font_size

    @property
    def bolded(self) -> StyledText:
        """Copy using the bold system font at the current point size."""

        if not self._string:
            return self
        platform = _platform()
        font = platform.bold_system_font(self._current_point_size(platform))
        return self.applying({AttributeKey.FONT: font})

    @property
    def italicized(self) -> StyledText:
        """Copy using the italic system font; unchanged where italics are unsupported."""

        if not self._string:
            return self
        platform = _platform()
        if not platform.supports_italics:
            LOGGER.debug("Platform %s has no italic fonts; leaving text unchanged", platform.name)
            return self
        font = platform.italic_system_font(self._current_point_size(platform))
        return self.applying({AttributeKey.FONT: font})

    @property
    def underlined(self) -> StyledText:
        return self.applying({AttributeKey.UNDERLINE_STYLE: UnderlineStyle.SINGLE})

    @property
    def struckthrough(self) -> StyledText:
        return self.applying({AttributeKey.STRIKETHROUGH_STYLE: UnderlineStyle.SINGLE})

    # -- concatenation ----------------------------------------------------
    def __add__(self, other: StyledText | str) -> StyledText:
        if not isinstance(other, (StyledText, str)):
            return NotImplemented
        combined = self.mutable_copy()
        combined.append(other)
        return combined.copy()

    def __radd__(self, other: str) -> StyledText:
        if not isinstance(other, str):
            return NotImplemented
        return StyledText(other) + self

    def join(self, items: Iterable[StyledText | str]) -> StyledText:
        """Concatenate ``items`` with this value between each pair."""

        return join_styled(items, self)


# ---------------------------------------------------------------------------
# Mutable value
# ---------------------------------------------------------------------------
class MutableStyledText(StyledText):
    """Styled text that can be edited in place; mutators return ``self``."""

    __slots__ = ()

    def add_attributes(self: _M, attributes: Mapping[AttributeName, Any], range: RangeLike | None = None) -> _M:
        span = self._resolve_range(range)
        overrides = normalize_attributes(attributes)
        self._runs = _rewrite(self._runs, span, lambda old: {**old, **overrides})
        return self

    def set_attributes(self: _M, attributes: Mapping[AttributeName, Any], range: RangeLike | None = None) -> _M:
        """Replace every attribute in ``range`` with ``attributes``."""

        span = self._resolve_range(range)
        replacement = normalize_attributes(attributes)
        self._runs = _rewrite(self._runs, span, lambda _old: dict(replacement))
        return self

    def remove_attribute(self: _M, key: AttributeName, range: RangeLike | None = None) -> _M:
        span = self._resolve_range(range)
        name = normalize_key(key)
        self._runs = _rewrite(
            self._runs, span, lambda old: {item: value for item, value in old.items() if item != name}
        )
        return self

    def append(self: _M, other: StyledText | str) -> _M:
        """Append ``other`` keeping its attributes verbatim."""

        piece = _as_styled(other)
        offset = len(self._string)
        self._string += piece._string
        self._runs = _coalesce(
            [*self._runs, *((start + offset, end + offset, dict(attrs)) for start, end, attrs in piece._runs)]
        )
        return self

    def __iadd__(self: _M, other: StyledText | str) -> _M:
        if not isinstance(other, (StyledText, str)):
            return NotImplemented
        return self.append(other)

    # -- single attribute helpers ----------------------------------------
    def color_range(self: _M, color: Any, range: RangeLike) -> _M:
        return self.add_attributes({AttributeKey.FOREGROUND_COLOR: Color.from_value(color)}, range)

    def background_range(self: _M, color: Any, range: RangeLike) -> _M:
        return self.add_attributes({AttributeKey.BACKGROUND_COLOR: Color.from_value(color)}, range)

    def font_range(self: _M, font: Font, range: RangeLike) -> _M:
        return self.add_attributes({AttributeKey.FONT: font}, range)

    def underline_range(self: _M, range: RangeLike) -> _M:
        return self.add_attributes({AttributeKey.UNDERLINE_STYLE: UnderlineStyle.SINGLE}, range)

    def strikethrough_range(self: _M, range: RangeLike) -> _M:
        return self.add_attributes({AttributeKey.STRIKETHROUGH_STYLE: UnderlineStyle.SINGLE}, range)

    def indent_range(self: _M, indentation: float, range: RangeLike) -> _M:
        return self.add_attributes({AttributeKey.PARAGRAPH_STYLE: ParagraphStyle.indented(indentation)}, range)

    # -- combined styling ---------------------------------------------------
    def style(
        self: _M,
        range: RangeLike | None = None,
        *,
        font: Font | None = None,
        color: Any = None,
        background_color: Any = None,
        indentation: float | None = None,
        underline: bool = False,
        strikethrough: bool = False,
    ) -> _M:
        """Apply each given style to ``range`` (the whole text by default).

        Styles are applied in a fixed order: font, color, background,
        indentation, underline, strikethrough.
        """

        span = self._resolve_range(range)
        if font is not None:
            self.font_range(font, span)
        if color is not None:
            self.color_range(color, span)
        if background_color is not None:
            self.background_range(background_color, span)
        if indentation is not None:
            self.indent_range(indentation, span)
        if underline:
            self.underline_range(span)
        if strikethrough:
            self.strikethrough_range(span)
        return self

    def style_ranges(self: _M, ranges: Iterable[RangeLike], **styles: Any) -> _M:
        for span in ranges:
            self.style(span, **styles)
        return self

    def style_occurrences(
        self: _M,
        text_find: str,
        options: CompareOptions = CompareOptions(0),
        **styles: Any,
    ) -> _M:
        """Style every occurrence of ``text_find``; empty search terms are skipped."""

        if text_find:
            self.style_ranges(ranges_of(self._string, text_find, options), **styles)
        return self

    def style_first_occurrence(
        self: _M,
        text_find: str,
        options: CompareOptions = CompareOptions(0),
        **styles: Any,
    ) -> _M:
        if text_find:
            found = first_range_of(self._string, text_find, options)
            if found.found:
                self.style(found, **styles)
        return self

    def append_styled(self: _M, text: str, **styles: Any) -> _M:
        """Append ``text`` styled with ``styles``; empty text is ignored."""

        if text:
            self.append(MutableStyledText(text).style(**styles))
        return self


def join_styled(items: Iterable[StyledText | str], separator: StyledText | str = "") -> StyledText:
    """Concatenate ``items`` with ``separator`` between each pair.

    Plain-string separators and items carry no attributes. An empty input
    yields an empty value.
    """

    iterator = iter(items)
    try:
        first = next(iterator)
    except StopIteration:
        return StyledText()
    glue = _as_styled(separator)
    result = _as_styled(first).mutable_copy()
    for item in iterator:
        result.append(glue)
        result.append(item)
    return result.copy()
