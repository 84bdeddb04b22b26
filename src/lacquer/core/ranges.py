"""Structured helpers for representing text spans."""

from __future__ import annotations

import re
from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from typing import Any, Iterator

# Sentinel location marking "no match"; mirrors the largest signed 64-bit index.
NOT_FOUND = 0x7FFFFFFFFFFFFFFF


@dataclass(slots=True, frozen=True)
class TextRange(Sequence[int]):
    """A ``(location, length)`` span over a text's code point offsets."""

    location: int
    length: int

    def __post_init__(self) -> None:
        location = self._coerce_index(self.location, "location")
        length = self._coerce_index(self.length, "length")
        object.__setattr__(self, "location", location)
        object.__setattr__(self, "length", length)

    @staticmethod
    def _coerce_index(value: Any, label: str) -> int:
        try:
            number = int(value)
        except (TypeError, ValueError) as exc:
            raise ValueError(f"TextRange {label} must be an integer") from exc
        if number < 0:
            raise ValueError(f"TextRange {label} cannot be negative")
        return number

    def __len__(self) -> int:
        return 2

    def __getitem__(self, index: int | slice) -> int | tuple[int, ...]:
        if isinstance(index, slice):
            return self.to_tuple()[index]
        if index == 0:
            return self.location
        if index == 1:
            return self.length
        raise IndexError("TextRange index out of range")

    def __iter__(self) -> Iterator[int]:
        yield self.location
        yield self.length

    @property
    def end(self) -> int:
        """Return the offset one past the last covered index."""

        return self.location + self.length

    @property
    def found(self) -> bool:
        """Return ``False`` for the not-found sentinel."""

        return self.location != NOT_FOUND

    @property
    def is_empty(self) -> bool:
        return self.length == 0

    def contains(self, index: int) -> bool:
        return self.location <= index < self.end

    def is_within(self, text_length: int) -> bool:
        """Return ``True`` when the span lies inside ``[0, text_length]``."""

        return self.found and self.end <= text_length

    def intersection(self, other: TextRange) -> TextRange | None:
        start = max(self.location, other.location)
        end = min(self.end, other.end)
        if end < start:
            return None
        return TextRange(start, end - start)

    def clamp(self, upper: int) -> TextRange:
        """Clamp the span so it ends no later than ``upper``."""

        location = min(self.location, upper)
        return TextRange(location, min(self.end, upper) - location)

    def as_slice(self) -> slice:
        return slice(self.location, self.end)

    def to_tuple(self) -> tuple[int, int]:
        """Return the range as a ``(location, length)`` tuple."""

        return (self.location, self.length)

    def to_dict(self) -> dict[str, int]:
        """Return the range as a JSON-friendly object."""

        return {"location": self.location, "length": self.length}

    @classmethod
    def from_bounds(cls, start: int, end: int) -> TextRange:
        if end < start:
            start, end = end, start
        return cls(start, end - start)

    @classmethod
    def from_value(cls, value: Any) -> TextRange:
        """Coerce ``value`` into a :class:`TextRange`.

        Accepts ranges, ``(location, length)`` pairs, ``{"location", "length"}``
        mappings, slices with explicit bounds, ``re.Match`` objects and any object
        exposing ``start``/``end`` attributes.
        """

        if isinstance(value, TextRange):
            return value
        if value is None:
            raise ValueError("TextRange value is required")
        if isinstance(value, re.Match):
            return cls.from_bounds(value.start(), value.end())
        if isinstance(value, slice):
            if value.start is None or value.stop is None or value.step not in (None, 1):
                raise ValueError("TextRange slices need explicit start and stop")
            return cls.from_bounds(value.start, value.stop)
        if isinstance(value, Mapping):
            location = value.get("location")
            length = value.get("length")
            if location is None or length is None:
                raise ValueError("TextRange mappings require location and length keys")
            return cls(location, length)
        if isinstance(value, Sequence) and not isinstance(value, (str, bytes)):
            seq = list(value)
            if len(seq) != 2:
                raise ValueError("TextRange sequences must have exactly two entries")
            return cls(seq[0], seq[1])
        start = getattr(value, "start", None)
        end = getattr(value, "end", None)
        if isinstance(start, int) and isinstance(end, int):
            return cls.from_bounds(start, end)
        raise TypeError("Unsupported TextRange input")

    @classmethod
    def not_found(cls) -> TextRange:
        """Return the sentinel range used when a search has no match."""

        return cls(NOT_FOUND, 0)

    @classmethod
    def zero(cls) -> TextRange:
        return cls(0, 0)


__all__ = ["NOT_FOUND", "TextRange"]
