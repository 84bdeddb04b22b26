"""lacquer: styled text, JSON record and resource bundle helpers."""

from .codable import Codable, JSONDecoder, JSONEncoder, decode, encode
from .core import NOT_FOUND, TextRange
from .errors import (
    DecodingError,
    EncodingError,
    InvalidPatternError,
    LacquerError,
    RangeOutOfBoundsError,
)
from .resources import Bundle, locate_bundle
from .styled import (
    AttributeKey,
    Color,
    Font,
    MutableStyledText,
    ParagraphStyle,
    RegexOptions,
    StyledText,
    UnderlineStyle,
    join_styled,
    ranges_of,
)

__version__ = "0.1.0"

__all__ = [
    "AttributeKey",
    "Bundle",
    "Codable",
    "Color",
    "DecodingError",
    "EncodingError",
    "Font",
    "InvalidPatternError",
    "JSONDecoder",
    "JSONEncoder",
    "LacquerError",
    "MutableStyledText",
    "NOT_FOUND",
    "ParagraphStyle",
    "RangeOutOfBoundsError",
    "RegexOptions",
    "StyledText",
    "TextRange",
    "UnderlineStyle",
    "__version__",
    "decode",
    "encode",
    "join_styled",
    "locate_bundle",
    "ranges_of",
]
