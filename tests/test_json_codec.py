from __future__ import annotations

import json
from dataclasses import dataclass, field
from datetime import date
from enum import Enum

import pytest

from httpclients.common.json_codec import deserialize, serialize, to_camel


class Status(Enum):
    ACTIVE = "active"
    LOCKED = "locked"


@dataclass
class Address:
    city_name: str
    zip_code: str | None = None


@dataclass
class Person:
    full_name: str
    status: Status = Status.ACTIVE
    birth_date: date | None = None
    addresses: list[Address] = field(default_factory=list)
    tags: dict[str, str] = field(default_factory=dict)


def test_to_camel():
    assert to_camel("file_name") == "fileName"
    assert to_camel("size_in_bytes") == "sizeInBytes"
    assert to_camel("value") == "value"
    assert to_camel("_private") == "_private"


def test_serialize_none_is_no_content():
    assert serialize(None) is None


def test_serialize_dataclass_uses_camel_case_and_keeps_dict_keys():
    person = Person(
        full_name="Jane",
        birth_date=date(1990, 5, 1),
        addresses=[Address(city_name="Lisbon")],
        tags={"employee_id": "42"},
    )

    data = json.loads(serialize(person).decode("utf-8"))

    assert data == {
        "fullName": "Jane",
        "status": "active",
        "birthDate": "1990-05-01",
        "addresses": [{"cityName": "Lisbon", "zipCode": None}],
        "tags": {"employee_id": "42"},
    }


def test_serialize_is_utf8():
    assert serialize({"name": "Júlia"}) == '{"name": "Júlia"}'.encode("utf-8")


def test_deserialize_empty_and_null():
    assert deserialize(b"", Person) is None
    assert deserialize(b"   ", Person) is None
    assert deserialize(b"null", Person) is None
    assert deserialize(None, Person) is None


def test_deserialize_dataclass_is_case_insensitive_and_recursive():
    body = json.dumps(
        {
            "FullName": "Jane",
            "status": "locked",
            "birthDate": "1990-05-01",
            "addresses": [{"cityName": "Porto", "ZIPCODE": "4000"}],
            "unknown": 1,
        }
    ).encode("utf-8")

    person = deserialize(body, Person)

    assert person == Person(
        full_name="Jane",
        status=Status.LOCKED,
        birth_date=date(1990, 5, 1),
        addresses=[Address(city_name="Porto", zip_code="4000")],
    )


def test_deserialize_accepts_snake_case_keys_and_fills_missing_required():
    address = deserialize(b'{"zip_code": "1000"}', Address)

    assert address == Address(city_name=None, zip_code="1000")


def test_deserialize_typed_list():
    items = deserialize(b'[{"cityName": "A"}, {"cityName": "B"}]', list[Address])

    assert [item.city_name for item in items] == ["A", "B"]


def test_deserialize_without_target_returns_raw_json():
    assert deserialize(b'{"a": [1, 2]}') == {"a": [1, 2]}
    assert deserialize(b'{"a": 1}', dict) == {"a": 1}


def test_deserialize_invalid_json_raises_value_error():
    with pytest.raises(ValueError):
        deserialize(b"{oops", Person)


@dataclass
class Counter:
    count: int
    ratio: float | None = None
    enabled: bool | None = None
    label: str | None = None


@pytest.mark.parametrize(
    "payload",
    [
        {"count": "not-a-number"},
        {"count": 1.5},
        {"count": True},
        {"count": 1, "ratio": "0.5"},
        {"count": 1, "enabled": "yes"},
        {"count": 1, "label": 42},
    ],
)
def test_deserialize_rejects_mismatched_scalar(payload):
    with pytest.raises(ValueError):
        deserialize(json.dumps(payload).encode("utf-8"), Counter)


def test_deserialize_accepts_int_for_float_field():
    counter = deserialize(b'{"count": 3, "ratio": 1}', Counter)

    assert counter == Counter(count=3, ratio=1.0)
    assert isinstance(counter.ratio, float)


def test_deserialize_rejects_non_list_for_list_field():
    with pytest.raises(ValueError):
        deserialize(b'{"fullName": "Jane", "addresses": {"cityName": "Porto"}}', Person)

    with pytest.raises(ValueError):
        deserialize(b'{"fullName": "Jane", "tags": ["a"]}', Person)
