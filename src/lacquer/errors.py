"""Standardized error types raised by lacquer helpers.

Every error shares a small JSON-friendly shape so callers can log or surface
failures consistently.
"""

from __future__ import annotations

from typing import Any, Mapping, Sequence

__all__ = [
    "LacquerError",
    "EncodingError",
    "DecodingError",
    "InvalidPatternError",
    "RangeOutOfBoundsError",
]


CodingPath = Sequence["str | int"]


def _format_path(path: CodingPath) -> str:
    if not path:
        return "<root>"
    parts: list[str] = []
    for component in path:
        if isinstance(component, int):
            parts.append(f"[{component}]")
        elif parts:
            parts.append(f".{component}")
        else:
            parts.append(str(component))
    return "".join(parts)


class LacquerError(Exception):
    """Base exception class for all lacquer errors.

    Attributes:
        message: Human-readable error description.
        details: Additional structured error information.
    """

    error_code = "lacquer_error"

    def __init__(self, message: str, *, details: Mapping[str, Any] | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.details: dict[str, Any] = dict(details or {})

    def to_dict(self) -> dict[str, Any]:
        payload: dict[str, Any] = {"error": self.error_code, "message": self.message}
        if self.details:
            payload["details"] = dict(self.details)
        return payload


class EncodingError(LacquerError):
    """A value could not be represented as JSON."""

    error_code = "encoding_error"
    INVALID_VALUE = "invalid_value"

    def __init__(
        self,
        message: str,
        *,
        value: Any = None,
        coding_path: CodingPath = (),
        kind: str = INVALID_VALUE,
    ) -> None:
        path = list(coding_path)
        super().__init__(
            f"{message} (at {_format_path(path)})",
            details={"kind": kind, "coding_path": path},
        )
        self.kind = kind
        self.value = value
        self.coding_path = path


class DecodingError(LacquerError):
    """A JSON payload could not be turned into the requested type."""

    error_code = "decoding_error"
    DATA_CORRUPTED = "data_corrupted"
    KEY_NOT_FOUND = "key_not_found"
    TYPE_MISMATCH = "type_mismatch"
    VALUE_NOT_FOUND = "value_not_found"

    def __init__(self, kind: str, message: str, *, coding_path: CodingPath = ()) -> None:
        path = list(coding_path)
        super().__init__(
            f"{message} (at {_format_path(path)})",
            details={"kind": kind, "coding_path": path},
        )
        self.kind = kind
        self.coding_path = path


class InvalidPatternError(LacquerError, ValueError):
    """Raised in strict mode when a regular expression fails to compile."""

    error_code = "pattern_invalid"

    def __init__(self, pattern: str, reason: str) -> None:
        super().__init__(
            f"Invalid regular expression {pattern!r}: {reason}",
            details={"pattern": pattern, "reason": reason},
        )
        self.pattern = pattern


class RangeOutOfBoundsError(LacquerError, IndexError):
    """A range reaches outside the valid index span of a text."""

    error_code = "range_out_of_bounds"

    def __init__(self, location: int, length: int, text_length: int) -> None:
        super().__init__(
            f"Range {{{location}, {length}}} out of bounds; text length is {text_length}",
            details={"location": location, "length": length, "text_length": text_length},
        )
