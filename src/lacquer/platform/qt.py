"""Qt integration for styled text.

The PySide6 imports are optional; when they fail :data:`QT_AVAILABLE` is
``False`` and :class:`QtPlatform` reports itself as unsupported so callers can
fall back to :class:`~lacquer.platform.base.HeadlessPlatform`.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any, Mapping

from ..styled.attributes import AttributeKey, Font, ParagraphStyle, UnderlineStyle, line_style_value
from ..styled.colors import Color
from .base import TextPlatform

if TYPE_CHECKING:
    from ..styled.text import StyledText

LOGGER = logging.getLogger(__name__)

QApplication: Any = None
QColor: Any = None
QFont: Any = None
QTextBlockFormat: Any = None
QTextCharFormat: Any = None
QTextCursor: Any = None
QTextDocument: Any = None
QT_AVAILABLE = False

try:  # pragma: no cover - PySide6 optional in CI
    from PySide6.QtGui import (
        QColor as _QtColor,
        QFont as _QtFont,
        QTextBlockFormat as _QtTextBlockFormat,
        QTextCharFormat as _QtTextCharFormat,
        QTextCursor as _QtTextCursor,
        QTextDocument as _QtTextDocument,
    )
    from PySide6.QtWidgets import QApplication as _QtApplication
except Exception:  # pragma: no cover - headless fallback
    pass
else:  # pragma: no cover - depends on PySide6
    QApplication = _QtApplication
    QColor = _QtColor
    QFont = _QtFont
    QTextBlockFormat = _QtTextBlockFormat
    QTextCharFormat = _QtTextCharFormat
    QTextCursor = _QtTextCursor
    QTextDocument = _QtTextDocument
    QT_AVAILABLE = True

__all__ = ["QT_AVAILABLE", "QtPlatform", "char_format", "to_text_document"]

_FALLBACK_POINT_SIZE = 13.0


class QtPlatform(TextPlatform):
    """Platform backed by the running ``QApplication``'s default font."""

    name = "qt"

    @staticmethod
    def is_supported() -> bool:
        return QApplication is not None and QApplication.instance() is not None

    def _app_font(self) -> Any | None:
        if QApplication is None:
            return None
        app = QApplication.instance()
        if app is None:
            return None
        return app.font()

    @property
    def system_font_size(self) -> float:
        font = self._app_font()
        size = float(font.pointSizeF()) if font is not None else -1.0
        return size if size > 0 else _FALLBACK_POINT_SIZE

    @property
    def font_family(self) -> str:
        font = self._app_font()
        family = font.family() if font is not None else ""
        return family or super().font_family


def _qt_color(color: Any) -> Any:
    resolved = Color.from_value(color)
    return QColor(resolved.red, resolved.green, resolved.blue, round(resolved.alpha * 255))


def _qt_font(font: Font) -> Any:
    qt_font = QFont() if font.is_system else QFont(font.family)
    qt_font.setPointSizeF(font.point_size)
    qt_font.setBold(font.bold)
    qt_font.setItalic(font.italic)
    return qt_font


def char_format(attributes: Mapping[Any, Any]) -> Any:
    """Build a ``QTextCharFormat`` describing ``attributes``."""

    if not QT_AVAILABLE:
        raise RuntimeError("Qt text formats require PySide6")
    fmt = QTextCharFormat()
    for key, value in attributes.items():
        if key is AttributeKey.FONT and isinstance(value, Font):
            fmt.setFont(_qt_font(value))
        elif key is AttributeKey.FOREGROUND_COLOR:
            fmt.setForeground(_qt_color(value))
        elif key is AttributeKey.BACKGROUND_COLOR:
            fmt.setBackground(_qt_color(value))
        elif key is AttributeKey.UNDERLINE_STYLE:
            fmt.setFontUnderline(line_style_value(value) not in (None, UnderlineStyle.NONE))
        elif key is AttributeKey.STRIKETHROUGH_STYLE:
            fmt.setFontStrikeOut(line_style_value(value) not in (None, UnderlineStyle.NONE))
        elif key is AttributeKey.LINK:
            fmt.setAnchor(True)
            fmt.setAnchorHref(str(value))
        elif key is not AttributeKey.PARAGRAPH_STYLE:
            LOGGER.debug("Ignoring attribute %r without a Qt mapping", key)
    return fmt


def _block_format(style: ParagraphStyle) -> Any:
    fmt = QTextBlockFormat()
    fmt.setLeftMargin(style.head_indent)
    fmt.setTextIndent(style.first_line_head_indent - style.head_indent)
    return fmt


def to_text_document(text: StyledText, document: Any | None = None) -> Any:
    """Render ``text`` into a ``QTextDocument`` (a new one unless ``document`` is given)."""

    if not QT_AVAILABLE:
        raise RuntimeError("Qt text documents require PySide6")
    target = document if document is not None else QTextDocument()
    cursor = QTextCursor(target)
    cursor.movePosition(QTextCursor.MoveOperation.End)
    for span, attributes in text.runs():
        paragraph = attributes.get(AttributeKey.PARAGRAPH_STYLE)
        if isinstance(paragraph, ParagraphStyle):
            cursor.mergeBlockFormat(_block_format(paragraph))
        cursor.insertText(text.string[span.as_slice()], char_format(attributes))
    return target
