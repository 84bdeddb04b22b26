"""JSON encoding and decoding helpers for structured records.

Records are plain dataclasses (optionally mixing in :class:`Codable`). The
encoder walks a value and produces a JSON byte buffer; the decoder parses a
buffer and rebuilds the requested type from its type hints. Failures surface as
:class:`~lacquer.errors.EncodingError` and :class:`~lacquer.errors.DecodingError`
with the coding path that triggered them, and never as partial results.
"""

from __future__ import annotations

import base64
import binascii
import dataclasses
import json
import math
import types
from collections.abc import Mapping as AbcMapping, MutableSequence, Sequence as AbcSequence
from collections.abc import Set as AbcSet
from dataclasses import dataclass, field
from datetime import date, datetime, timedelta, timezone
from decimal import Decimal, InvalidOperation
from enum import Enum
from typing import Any, Literal, Mapping, TypeVar, Union, get_args, get_origin, get_type_hints
from uuid import UUID

import jsonschema

from .errors import DecodingError, EncodingError

__all__ = [
    "Codable",
    "DataStrategy",
    "DateStrategy",
    "JSONDecoder",
    "JSONEncoder",
    "KeyStrategy",
    "NonConformingFloatStrategy",
    "decode",
    "encode",
]

T = TypeVar("T")
Path = list["str | int"]

_REFERENCE_DATE = datetime(2001, 1, 1, tzinfo=timezone.utc)
_UNIX_EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)
_NONE_TYPE = type(None)


class DateStrategy(Enum):
    """How ``datetime`` values are written to and read from JSON."""

    DEFERRED = "deferred"  # seconds since 2001-01-01T00:00:00Z
    SECONDS_SINCE_1970 = "seconds_since_1970"
    MILLISECONDS_SINCE_1970 = "milliseconds_since_1970"
    ISO8601 = "iso8601"


class DataStrategy(Enum):
    """How ``bytes`` values are written to and read from JSON."""

    BASE64 = "base64"
    DEFERRED = "deferred"  # array of byte values


class KeyStrategy(Enum):
    """How dataclass field names map to JSON object keys."""

    USE_DEFAULT_KEYS = "use_default_keys"
    CAMEL_CASE = "camel_case"


class NonConformingFloatStrategy(Enum):
    """How NaN and infinities are handled; JSON has no literal for them."""

    THROW = "throw"
    CONVERT_TO_STRING = "convert_to_string"


def _camel_case(name: str) -> str:
    stripped = name.lstrip("_")
    prefix = name[: len(name) - len(stripped)]
    head, *rest = stripped.split("_") if stripped else [""]
    return prefix + head + "".join(part[:1].upper() + part[1:] for part in rest if part)


def _field_key(name: str, strategy: KeyStrategy) -> str:
    if strategy is KeyStrategy.CAMEL_CASE:
        return _camel_case(name)
    return name


def _type_name(type_: Any) -> str:
    return getattr(type_, "__name__", None) or repr(type_)


def _json_kind(value: Any) -> str:
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "a boolean"
    if isinstance(value, (int, float)):
        return "a number"
    if isinstance(value, str):
        return "a string"
    if isinstance(value, list):
        return "an array"
    if isinstance(value, dict):
        return "a dictionary"
    return type(value).__name__


def _as_utc(value: datetime) -> datetime:
    return value.astimezone(timezone.utc)


# ---------------------------------------------------------------------------
# Encoding
# ---------------------------------------------------------------------------
@dataclass(slots=True)
class JSONEncoder:
    """Configurable encoder producing UTF-8 JSON byte buffers."""

    indent: int | None = None
    sort_keys: bool = False
    date_strategy: DateStrategy = DateStrategy.DEFERRED
    data_strategy: DataStrategy = DataStrategy.BASE64
    key_strategy: KeyStrategy = KeyStrategy.USE_DEFAULT_KEYS
    non_conforming_float_strategy: NonConformingFloatStrategy = NonConformingFloatStrategy.THROW
    positive_infinity: str = "+Infinity"
    negative_infinity: str = "-Infinity"
    nan: str = "NaN"

    def encode(self, value: Any) -> bytes:
        payload = self.to_json_value(value)
        separators = (",", ":") if self.indent is None else (",", ": ")
        text = json.dumps(
            payload,
            indent=self.indent,
            sort_keys=self.sort_keys,
            separators=separators,
            ensure_ascii=False,
            allow_nan=False,
        )
        return text.encode("utf-8")

    def to_json_value(self, value: Any) -> Any:
        """Return the JSON-compatible tree for ``value`` without serializing it."""

        return self._box(value, [])

    def _box(self, value: Any, path: Path) -> Any:
        if isinstance(value, Enum):
            return self._box(value.value, path)
        if value is None or isinstance(value, (bool, str)):
            return value
        if isinstance(value, int):
            return int(value)
        if isinstance(value, float):
            return self._box_float(value, path)
        if isinstance(value, Decimal):
            if not value.is_finite():
                return self._box_float(float(value), path)
            if value == value.to_integral_value():
                return int(value)
            approximate = float(value)
            # Digits a double cannot hold travel as a string.
            return approximate if Decimal(repr(approximate)) == value else str(value)
        if isinstance(value, datetime):
            return self._box_datetime(value, path)
        if isinstance(value, date):
            return value.isoformat()
        if isinstance(value, (bytes, bytearray, memoryview)):
            raw = bytes(value)
            if self.data_strategy is DataStrategy.DEFERRED:
                return list(raw)
            return base64.b64encode(raw).decode("ascii")
        if isinstance(value, UUID):
            return str(value)
        if dataclasses.is_dataclass(value) and not isinstance(value, type):
            return {
                _field_key(item.name, self.key_strategy): self._box(
                    getattr(value, item.name), [*path, item.name]
                )
                for item in dataclasses.fields(value)
            }
        to_dict = getattr(value, "to_dict", None)
        if callable(to_dict):
            return self._box(to_dict(), path)
        if isinstance(value, AbcMapping):
            return {
                self._box_key(key, path): self._box(item, [*path, str(key)])
                for key, item in value.items()
            }
        if isinstance(value, (AbcSequence, AbcSet)):
            return [self._box(item, [*path, index]) for index, item in enumerate(value)]
        raise EncodingError(
            f"Values of type {type(value).__name__} cannot be encoded as JSON",
            value=value,
            coding_path=path,
        )

    def _box_key(self, key: Any, path: Path) -> str:
        if isinstance(key, Enum):
            key = key.value
        if isinstance(key, str):
            return key
        if isinstance(key, int) and not isinstance(key, bool):
            return str(key)
        raise EncodingError(
            f"Dictionary keys must be strings, found {type(key).__name__}",
            value=key,
            coding_path=path,
        )

    def _box_float(self, value: float, path: Path) -> Any:
        if math.isfinite(value):
            return value
        if self.non_conforming_float_strategy is NonConformingFloatStrategy.CONVERT_TO_STRING:
            if math.isnan(value):
                return self.nan
            return self.positive_infinity if value > 0 else self.negative_infinity
        raise EncodingError(
            f"Unable to encode {value!r} directly in JSON; "
            "use NonConformingFloatStrategy.CONVERT_TO_STRING to encode it as a string",
            value=value,
            coding_path=path,
        )

    def _box_datetime(self, value: datetime, path: Path) -> Any:
        if value.tzinfo is None:
            if self.date_strategy is DateStrategy.ISO8601:
                return value.isoformat()
            raise EncodingError(
                "Naive datetimes have no fixed instant; attach a tzinfo or use DateStrategy.ISO8601",
                value=value,
                coding_path=path,
            )
        moment = _as_utc(value)
        if self.date_strategy is DateStrategy.ISO8601:
            return moment.isoformat().replace("+00:00", "Z")
        if self.date_strategy is DateStrategy.SECONDS_SINCE_1970:
            return (moment - _UNIX_EPOCH).total_seconds()
        if self.date_strategy is DateStrategy.MILLISECONDS_SINCE_1970:
            return (moment - _UNIX_EPOCH).total_seconds() * 1000.0
        return (moment - _REFERENCE_DATE).total_seconds()


# ---------------------------------------------------------------------------
# Decoding
# ---------------------------------------------------------------------------
@dataclass(slots=True)
class JSONDecoder:
    """Configurable decoder rebuilding typed values from JSON byte buffers."""

    date_strategy: DateStrategy = DateStrategy.DEFERRED
    data_strategy: DataStrategy = DataStrategy.BASE64
    key_strategy: KeyStrategy = KeyStrategy.USE_DEFAULT_KEYS
    non_conforming_float_strategy: NonConformingFloatStrategy = NonConformingFloatStrategy.THROW
    positive_infinity: str = "+Infinity"
    negative_infinity: str = "-Infinity"
    nan: str = "NaN"
    schema: Mapping[str, Any] | None = None
    _validator: Any = field(default=None, init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        if self.schema is not None:
            jsonschema.Draft7Validator.check_schema(self.schema)
            self._validator = jsonschema.Draft7Validator(self.schema)

    def decode(self, type_: type[T] | Any, data: bytes | bytearray | memoryview | str) -> T:
        payload = self.parse(data)
        if self._validator is not None:
            self._validate(payload)
        return self.from_json_value(type_, payload)

    def parse(self, data: bytes | bytearray | memoryview | str) -> Any:
        """Parse ``data`` into a JSON tree, rejecting non-standard literals."""

        if isinstance(data, (bytes, bytearray, memoryview)):
            try:
                text = bytes(data).decode("utf-8")
            except UnicodeDecodeError as exc:
                raise DecodingError(
                    DecodingError.DATA_CORRUPTED, f"The given data was not valid UTF-8: {exc.reason}"
                ) from exc
        elif isinstance(data, str):
            text = data
        else:
            raise TypeError(f"Cannot decode JSON from {type(data).__name__}")
        try:
            return json.loads(text, parse_constant=_reject_constant)
        except json.JSONDecodeError as exc:
            raise DecodingError(
                DecodingError.DATA_CORRUPTED,
                f"The given data was not valid JSON: {exc.msg} (line {exc.lineno} column {exc.colno})",
            ) from exc
        except ValueError as exc:
            raise DecodingError(
                DecodingError.DATA_CORRUPTED, f"The given data was not valid JSON: {exc}"
            ) from exc

    def from_json_value(self, type_: Any, value: Any, path: Path | None = None) -> Any:
        """Build an instance of ``type_`` from an already parsed JSON tree."""

        return self._unbox(type_, value, list(path or []))

    def _validate(self, payload: Any) -> None:
        issues = sorted(self._validator.iter_errors(payload), key=lambda issue: list(issue.absolute_path))
        if issues:
            first = issues[0]
            raise DecodingError(
                DecodingError.DATA_CORRUPTED,
                f"Payload does not match schema: {first.message}",
                coding_path=list(first.absolute_path),
            )

    def _unbox(self, type_: Any, value: Any, path: Path) -> Any:
        if type_ is Any or type_ is object:
            return value

        origin = get_origin(type_)
        args = get_args(type_)

        if origin is Union or origin is types.UnionType:
            return self._unbox_union(type_, args, value, path)
        if origin is Literal:
            if value in args:
                return value
            raise DecodingError(
                DecodingError.DATA_CORRUPTED,
                f"Value {value!r} is not one of {list(args)!r}",
                coding_path=path,
            )

        if value is None:
            if type_ is _NONE_TYPE:
                return None
            raise DecodingError(
                DecodingError.VALUE_NOT_FOUND,
                f"Expected {_type_name(type_)} value but found null instead",
                coding_path=path,
            )

        if origin is not None:
            return self._unbox_generic(type_, origin, args, value, path)

        if type_ is bool:
            return self._expect(value, bool, type_, path)
        if type_ is int:
            if isinstance(value, float) and value.is_integer():
                return int(value)
            if isinstance(value, bool) or not isinstance(value, int):
                raise self._mismatch(type_, value, path)
            return value
        if type_ is float:
            return self._unbox_float(value, path)
        if type_ is str:
            return self._expect(value, str, type_, path)
        if type_ is Decimal:
            if isinstance(value, bool) or not isinstance(value, (int, float, str)):
                raise self._mismatch(type_, value, path)
            try:
                return Decimal(str(value))
            except InvalidOperation as exc:
                raise DecodingError(
                    DecodingError.DATA_CORRUPTED, f"Invalid decimal {value!r}", coding_path=path
                ) from exc
        if isinstance(type_, type) and issubclass(type_, Enum):
            try:
                return type_(value)
            except ValueError as exc:
                raise DecodingError(
                    DecodingError.DATA_CORRUPTED,
                    f"Cannot initialize {type_.__name__} from invalid value {value!r}",
                    coding_path=path,
                ) from exc
        if type_ is datetime:
            return self._unbox_datetime(value, path)
        if type_ is date:
            text = self._expect(value, str, type_, path)
            try:
                return date.fromisoformat(text)
            except ValueError as exc:
                raise DecodingError(
                    DecodingError.DATA_CORRUPTED, "Expected date string to be ISO8601-formatted", coding_path=path
                ) from exc
        if type_ is bytes:
            return self._unbox_bytes(value, path)
        if type_ is UUID:
            text = self._expect(value, str, type_, path)
            try:
                return UUID(text)
            except ValueError as exc:
                raise DecodingError(
                    DecodingError.DATA_CORRUPTED, f"Attempted to decode UUID from invalid string {text!r}", coding_path=path
                ) from exc
        if dataclasses.is_dataclass(type_):
            return self._unbox_dataclass(type_, value, path)
        from_dict = getattr(type_, "from_dict", None)
        if callable(from_dict):
            mapping = self._expect(value, dict, type_, path)
            try:
                return from_dict(mapping)
            except (KeyError, TypeError, ValueError) as exc:
                raise DecodingError(DecodingError.DATA_CORRUPTED, str(exc), coding_path=path) from exc
        if type_ in (list, tuple, set, frozenset, dict):
            container = self._expect(value, dict if type_ is dict else list, type_, path)
            return type_(container)
        if isinstance(type_, type) and isinstance(value, type_):
            return value
        raise DecodingError(
            DecodingError.TYPE_MISMATCH,
            f"Decoding {_type_name(type_)} is not supported",
            coding_path=path,
        )

    def _unbox_union(self, type_: Any, args: tuple[Any, ...], value: Any, path: Path) -> Any:
        candidates = [arg for arg in args if arg is not _NONE_TYPE]
        if value is None:
            if _NONE_TYPE in args:
                return None
            raise DecodingError(
                DecodingError.VALUE_NOT_FOUND,
                f"Expected {' | '.join(_type_name(arg) for arg in candidates)} value but found null instead",
                coding_path=path,
            )
        if len(candidates) == 1:
            return self._unbox(candidates[0], value, path)
        for candidate in candidates:
            try:
                return self._unbox(candidate, value, path)
            except DecodingError:
                continue
        raise DecodingError(
            DecodingError.TYPE_MISMATCH,
            f"Expected {type_!r} but found {_json_kind(value)} instead",
            coding_path=path,
        )

    def _unbox_generic(self, type_: Any, origin: Any, args: tuple[Any, ...], value: Any, path: Path) -> Any:
        if origin in (list, set, frozenset, MutableSequence, AbcSequence, AbcSet):
            items = self._expect(value, list, type_, path)
            item_type = args[0] if args else Any
            decoded = [self._unbox(item_type, item, [*path, index]) for index, item in enumerate(items)]
            if origin in (set, AbcSet):
                return set(decoded)
            if origin is frozenset:
                return frozenset(decoded)
            return decoded
        if origin is tuple:
            items = self._expect(value, list, type_, path)
            if len(args) == 2 and args[1] is Ellipsis:
                return tuple(self._unbox(args[0], item, [*path, index]) for index, item in enumerate(items))
            if args and len(args) != len(items):
                raise DecodingError(
                    DecodingError.TYPE_MISMATCH,
                    f"Expected {len(args)} elements but found {len(items)}",
                    coding_path=path,
                )
            return tuple(
                self._unbox(args[index] if args else Any, item, [*path, index])
                for index, item in enumerate(items)
            )
        if origin in (dict, AbcMapping):
            mapping = self._expect(value, dict, type_, path)
            key_type, value_type = args if args else (Any, Any)
            return {
                self._unbox_key(key_type, key, path): self._unbox(value_type, item, [*path, key])
                for key, item in mapping.items()
            }
        raise DecodingError(
            DecodingError.TYPE_MISMATCH,
            f"Decoding {type_!r} is not supported",
            coding_path=path,
        )

    def _unbox_key(self, key_type: Any, key: str, path: Path) -> Any:
        if key_type is Any or key_type is str:
            return key
        if key_type is int:
            try:
                return int(key)
            except ValueError as exc:
                raise DecodingError(
                    DecodingError.TYPE_MISMATCH, f"Dictionary key {key!r} is not an integer", coding_path=path
                ) from exc
        return self._unbox(key_type, key, [*path, key])

    def _unbox_dataclass(self, type_: Any, value: Any, path: Path) -> Any:
        mapping = self._expect(value, dict, type_, path)
        hints = get_type_hints(type_)
        kwargs: dict[str, Any] = {}
        for item in dataclasses.fields(type_):
            if not item.init:
                continue
            key = _field_key(item.name, self.key_strategy)
            field_type = hints.get(item.name, Any)
            if key in mapping:
                kwargs[item.name] = self._unbox(field_type, mapping[key], [*path, key])
                continue
            if item.default is not dataclasses.MISSING or item.default_factory is not dataclasses.MISSING:
                continue
            if _is_optional(field_type):
                kwargs[item.name] = None
                continue
            raise DecodingError(
                DecodingError.KEY_NOT_FOUND,
                f"No value associated with key {key!r}",
                coding_path=[*path, key],
            )
        try:
            return type_(**kwargs)
        except (TypeError, ValueError) as exc:
            raise DecodingError(
                DecodingError.DATA_CORRUPTED,
                f"Cannot initialize {type_.__name__}: {exc}",
                coding_path=path,
            ) from exc

    def _unbox_float(self, value: Any, path: Path) -> float:
        if isinstance(value, str) and (
            self.non_conforming_float_strategy is NonConformingFloatStrategy.CONVERT_TO_STRING
        ):
            if value == self.positive_infinity:
                return math.inf
            if value == self.negative_infinity:
                return -math.inf
            if value == self.nan:
                return math.nan
        if isinstance(value, bool) or not isinstance(value, (int, float)):
            raise self._mismatch(float, value, path)
        return float(value)

    def _unbox_datetime(self, value: Any, path: Path) -> datetime:
        if self.date_strategy is DateStrategy.ISO8601:
            text = self._expect(value, str, datetime, path)
            try:
                parsed = datetime.fromisoformat(text)
                return parsed if parsed.tzinfo is None else _as_utc(parsed)
            except ValueError as exc:
                raise DecodingError(
                    DecodingError.DATA_CORRUPTED, "Expected date string to be ISO8601-formatted", coding_path=path
                ) from exc
        if isinstance(value, bool) or not isinstance(value, (int, float)):
            raise self._mismatch(datetime, value, path)
        if self.date_strategy is DateStrategy.SECONDS_SINCE_1970:
            return _UNIX_EPOCH + timedelta(seconds=value)
        if self.date_strategy is DateStrategy.MILLISECONDS_SINCE_1970:
            return _UNIX_EPOCH + timedelta(milliseconds=value)
        return _REFERENCE_DATE + timedelta(seconds=value)

    def _unbox_bytes(self, value: Any, path: Path) -> bytes:
        if self.data_strategy is DataStrategy.DEFERRED:
            items = self._expect(value, list, bytes, path)
            try:
                return bytes(items)
            except (TypeError, ValueError) as exc:
                raise DecodingError(
                    DecodingError.DATA_CORRUPTED, "Byte arrays must contain integers in 0..255", coding_path=path
                ) from exc
        text = self._expect(value, str, bytes, path)
        try:
            return base64.b64decode(text, validate=True)
        except (binascii.Error, ValueError) as exc:
            raise DecodingError(
                DecodingError.DATA_CORRUPTED, "Encountered data is not valid Base64", coding_path=path
            ) from exc

    def _expect(self, value: Any, kind: type, type_: Any, path: Path) -> Any:
        if not isinstance(value, kind) or (kind is not bool and isinstance(value, bool)):
            raise self._mismatch(type_, value, path)
        return value

    @staticmethod
    def _mismatch(type_: Any, value: Any, path: Path) -> DecodingError:
        return DecodingError(
            DecodingError.TYPE_MISMATCH,
            f"Expected to decode {_type_name(type_)} but found {_json_kind(value)} instead",
            coding_path=path,
        )


def _reject_constant(token: str) -> Any:
    raise ValueError(f"{token} is not valid JSON")


def _is_optional(type_: Any) -> bool:
    origin = get_origin(type_)
    return (origin is Union or origin is types.UnionType) and _NONE_TYPE in get_args(type_)


# ---------------------------------------------------------------------------
# Convenience API
# ---------------------------------------------------------------------------
def encode(value: Any, encoder: JSONEncoder | None = None) -> bytes:
    """Serialize ``value`` to JSON bytes using ``encoder`` or default settings."""

    return (encoder or JSONEncoder()).encode(value)


def decode(type_: type[T] | Any, data: bytes | bytearray | memoryview | str, decoder: JSONDecoder | None = None) -> T:
    """Deserialize ``data`` into ``type_`` using ``decoder`` or default settings."""

    return (decoder or JSONDecoder()).decode(type_, data)


class Codable:
    """Mixin adding ``encode``/``decoded`` helpers to dataclass records."""

    __slots__ = ()

    def encode(self, encoder: JSONEncoder | None = None) -> bytes:
        return encode(self, encoder)

    @classmethod
    def decoded(cls: type[T], data: bytes | bytearray | memoryview | str, decoder: JSONDecoder | None = None) -> T:
        return decode(cls, data, decoder)
