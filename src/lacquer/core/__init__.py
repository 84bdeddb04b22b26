"""Core value types shared by the styled text and resource helpers."""

from .ranges import NOT_FOUND, TextRange

__all__ = ["NOT_FOUND", "TextRange"]
