"""Tests for the JSON record codec."""

from __future__ import annotations

import json
import math
from dataclasses import dataclass, field
from datetime import datetime, timezone
from decimal import Decimal
from enum import Enum
from typing import Optional
from uuid import UUID

import pytest

from lacquer.codable import (
    Codable,
    DataStrategy,
    DateStrategy,
    JSONDecoder,
    JSONEncoder,
    KeyStrategy,
    NonConformingFloatStrategy,
    decode,
    encode,
)
from lacquer.errors import DecodingError, EncodingError


class Role(Enum):
    ADMIN = "admin"
    GUEST = "guest"


@dataclass
class Address:
    street: str
    zip_code: str


@dataclass
class User(Codable):
    name: str
    age: int
    role: Role = Role.GUEST
    nickname: Optional[str] = None
    tags: list[str] = field(default_factory=list)
    address: Address | None = None
    scores: dict[str, float] = field(default_factory=dict)


@dataclass
class Event:
    identifier: UUID
    created_at: datetime
    payload: bytes


@dataclass
class Measurement:
    value: float


@dataclass
class Money:
    amount: Decimal


@dataclass
class Stamp:
    at: datetime


def test_round_trip_preserves_nested_records() -> None:
    user = User(
        name="Ada",
        age=36,
        role=Role.ADMIN,
        tags=["math", "engines"],
        address=Address(street="1 Analytical Way", zip_code="N1"),
        scores={"logic": 9.5},
    )

    assert decode(User, encode(user)) == user


def test_encode_produces_compact_json_bytes() -> None:
    data = encode(Address(street="Main", zip_code="123"))

    assert isinstance(data, bytes)
    assert data == b'{"street":"Main","zip_code":"123"}'


def test_encoder_output_formatting() -> None:
    encoder = JSONEncoder(indent=2, sort_keys=True)

    text = encoder.encode(Address(street="Main", zip_code="123")).decode("utf-8")

    assert text.splitlines()[1] == '  "street": "Main",'


def test_codable_mixin_helpers() -> None:
    user = User(name="Grace", age=45)

    assert User.decoded(user.encode()) == user


def test_decode_missing_required_key_reports_key_not_found() -> None:
    with pytest.raises(DecodingError) as excinfo:
        decode(User, b'{"name": "Ada"}')

    assert excinfo.value.kind == DecodingError.KEY_NOT_FOUND
    assert excinfo.value.coding_path == ["age"]


def test_decode_type_mismatch_includes_coding_path() -> None:
    payload = b'{"name": "Ada", "age": 3, "address": {"street": 5, "zip_code": "x"}}'

    with pytest.raises(DecodingError) as excinfo:
        decode(User, payload)

    assert excinfo.value.kind == DecodingError.TYPE_MISMATCH
    assert excinfo.value.coding_path == ["address", "street"]


def test_decode_null_for_required_field_is_value_not_found() -> None:
    with pytest.raises(DecodingError) as excinfo:
        decode(User, b'{"name": null, "age": 1}')

    assert excinfo.value.kind == DecodingError.VALUE_NOT_FOUND


def test_decode_malformed_json_is_data_corrupted() -> None:
    with pytest.raises(DecodingError) as excinfo:
        decode(User, b'{"name": "Ada",')

    assert excinfo.value.kind == DecodingError.DATA_CORRUPTED


def test_decode_rejects_nan_literals() -> None:
    with pytest.raises(DecodingError):
        decode(Measurement, b'{"value": NaN}')


def test_decode_invalid_enum_value() -> None:
    with pytest.raises(DecodingError) as excinfo:
        decode(User, b'{"name": "Ada", "age": 1, "role": "owner"}')

    assert excinfo.value.kind == DecodingError.DATA_CORRUPTED
    assert excinfo.value.coding_path == ["role"]


def test_decode_bool_is_not_an_int() -> None:
    with pytest.raises(DecodingError) as excinfo:
        decode(User, b'{"name": "Ada", "age": true}')

    assert excinfo.value.kind == DecodingError.TYPE_MISMATCH


def test_encoding_nan_raises_encoding_error() -> None:
    with pytest.raises(EncodingError) as excinfo:
        encode(Measurement(value=math.nan))

    assert excinfo.value.coding_path == ["value"]


def test_non_conforming_floats_can_be_converted_to_strings() -> None:
    encoder = JSONEncoder(non_conforming_float_strategy=NonConformingFloatStrategy.CONVERT_TO_STRING)
    decoder = JSONDecoder(non_conforming_float_strategy=NonConformingFloatStrategy.CONVERT_TO_STRING)

    data = encoder.encode(Measurement(value=math.inf))

    assert json.loads(data) == {"value": "+Infinity"}
    assert decoder.decode(Measurement, data) == Measurement(value=math.inf)


def test_unsupported_values_raise_encoding_error() -> None:
    with pytest.raises(EncodingError):
        encode({"callback": object()})


def test_default_strategies_for_dates_and_bytes() -> None:
    event = Event(
        identifier=UUID("12345678-1234-5678-1234-567812345678"),
        created_at=datetime(2001, 1, 1, 0, 1, tzinfo=timezone.utc),
        payload=b"\x00\x01hi",
    )

    payload = json.loads(encode(event))

    assert payload["created_at"] == 60.0
    assert payload["payload"] == "AAFoaQ=="
    assert payload["identifier"] == "12345678-1234-5678-1234-567812345678"
    assert decode(Event, encode(event)) == event


def test_iso8601_and_deferred_data_strategies() -> None:
    event = Event(
        identifier=UUID(int=1),
        created_at=datetime(2024, 5, 17, 8, 30, tzinfo=timezone.utc),
        payload=b"\x01\x02",
    )
    encoder = JSONEncoder(date_strategy=DateStrategy.ISO8601, data_strategy=DataStrategy.DEFERRED)
    decoder = JSONDecoder(date_strategy=DateStrategy.ISO8601, data_strategy=DataStrategy.DEFERRED)

    data = encoder.encode(event)
    payload = json.loads(data)

    assert payload["created_at"] == "2024-05-17T08:30:00Z"
    assert payload["payload"] == [1, 2]
    assert decoder.decode(Event, data) == event


def test_camel_case_key_strategy() -> None:
    encoder = JSONEncoder(key_strategy=KeyStrategy.CAMEL_CASE)
    decoder = JSONDecoder(key_strategy=KeyStrategy.CAMEL_CASE)
    address = Address(street="Main", zip_code="123")

    data = encoder.encode(address)

    assert json.loads(data) == {"street": "Main", "zipCode": "123"}
    assert decoder.decode(Address, data) == address


def test_decoder_validates_against_schema() -> None:
    schema = {
        "type": "object",
        "properties": {"age": {"type": "integer", "minimum": 0}},
        "required": ["age"],
    }
    decoder = JSONDecoder(schema=schema)

    with pytest.raises(DecodingError) as excinfo:
        decoder.decode(User, b'{"name": "Ada", "age": -1}')

    assert excinfo.value.kind == DecodingError.DATA_CORRUPTED
    assert excinfo.value.coding_path == ["age"]
    assert decoder.decode(User, b'{"name": "Ada", "age": 2}').age == 2


def test_decode_accepts_str_input_and_generic_containers() -> None:
    assert decode(list[int], "[1, 2, 3]") == [1, 2, 3]
    assert decode(dict[str, Optional[int]], '{"a": 1, "b": null}') == {"a": 1, "b": None}
    assert decode(tuple[int, str], '[1, "x"]') == (1, "x")


def test_errors_serialize_to_dict() -> None:
    with pytest.raises(DecodingError) as excinfo:
        decode(int, b'"nope"')

    payload = excinfo.value.to_dict()

    assert payload["error"] == "decoding_error"
    assert payload["details"]["kind"] == DecodingError.TYPE_MISMATCH


def test_high_precision_decimal_round_trips() -> None:
    money = Money(amount=Decimal("12345678901234567890.123456789"))

    data = encode(money)

    assert json.loads(data) == {"amount": "12345678901234567890.123456789"}
    assert decode(Money, data) == money


def test_decimal_fitting_a_double_stays_numeric() -> None:
    assert json.loads(encode(Money(amount=Decimal("2.5")))) == {"amount": 2.5}
    assert json.loads(encode(Money(amount=Decimal("40.00")))) == {"amount": 40}


def test_naive_datetime_round_trips_as_iso8601() -> None:
    stamp = Stamp(at=datetime(2024, 5, 17, 8, 30))
    encoder = JSONEncoder(date_strategy=DateStrategy.ISO8601)
    decoder = JSONDecoder(date_strategy=DateStrategy.ISO8601)

    data = encoder.encode(stamp)

    assert json.loads(data) == {"at": "2024-05-17T08:30:00"}
    assert decoder.decode(Stamp, data) == stamp
    assert decoder.decode(Stamp, data).at.tzinfo is None


@pytest.mark.parametrize(
    "strategy",
    [DateStrategy.DEFERRED, DateStrategy.SECONDS_SINCE_1970, DateStrategy.MILLISECONDS_SINCE_1970],
)
def test_naive_datetime_rejected_by_numeric_strategies(strategy: DateStrategy) -> None:
    with pytest.raises(EncodingError) as excinfo:
        JSONEncoder(date_strategy=strategy).encode(Stamp(at=datetime(2024, 5, 17, 8, 30)))

    assert excinfo.value.coding_path == ["at"]
