"""Text file helpers used when reading bundle resources."""

from __future__ import annotations

import codecs
import locale
from enum import Enum
from pathlib import Path

__all__ = ["ResourceFormat", "detect_format", "read_text"]

_BOM_MAP: dict[bytes, str] = {
    codecs.BOM_UTF8: "utf-8-sig",
    codecs.BOM_UTF32_LE: "utf-32-le",
    codecs.BOM_UTF32_BE: "utf-32-be",
    codecs.BOM_UTF16_LE: "utf-16-le",
    codecs.BOM_UTF16_BE: "utf-16-be",
}
_FORMAT_EXTENSIONS = {
    "json": {".json"},
    "yaml": {".yaml", ".yml"},
    "text": {".txt", ".strings", ".md", ".css", ".html"},
}


class ResourceFormat(Enum):
    """Resource formats the bundle loader knows how to parse."""

    JSON = "json"
    YAML = "yaml"
    TEXT = "text"
    UNKNOWN = "unknown"


def read_text(
    path: Path | str,
    *,
    encoding: str | None = None,
    errors: str = "strict",
    normalize_newlines: bool = True,
) -> str:
    """Read a text file with encoding detection and optional newline normalization."""

    target = Path(path)
    raw = target.read_bytes()
    detected_encoding = encoding or _detect_encoding(raw)
    text = raw.decode(detected_encoding, errors=errors)
    text = _strip_bom(text)
    return _normalize_newlines(text) if normalize_newlines else text


def detect_format(path: Path | str | None = None, text: str | None = None) -> ResourceFormat:
    """Infer a resource format from the file suffix, then from its contents."""

    suffix = Path(path).suffix.lower() if path else ""
    for name, extensions in _FORMAT_EXTENSIONS.items():
        if suffix in extensions:
            return ResourceFormat(name)

    if text is None:
        return ResourceFormat.UNKNOWN

    stripped = text.strip()
    if stripped and stripped[0] in "[{":
        return ResourceFormat.JSON
    if stripped.startswith("---"):
        return ResourceFormat.YAML
    return ResourceFormat.TEXT if stripped else ResourceFormat.UNKNOWN


def _detect_encoding(raw: bytes) -> str:
    # UTF-32 BOMs start with the UTF-16 ones, so they are checked first.
    for bom, encoding in _BOM_MAP.items():
        if raw.startswith(bom):
            return encoding

    preferred = locale.getpreferredencoding(False) or "utf-8"
    seen: set[str] = set()
    for candidate in ("utf-8", preferred, "latin-1"):
        if not candidate or candidate in seen:
            continue
        seen.add(candidate)
        try:
            raw.decode(candidate)
            return candidate
        except UnicodeDecodeError:
            continue
    return "utf-8"


def _normalize_newlines(text: str) -> str:
    if "\r" not in text:
        return text
    text = text.replace("\r\n", "\n")
    return text.replace("\r", "\n")


def _strip_bom(text: str) -> str:
    return text[1:] if text.startswith("\ufeff") else text
