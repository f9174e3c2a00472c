import json

import pytest

from barbermatch.utils.availability import (
    AvailabilityError,
    available_days,
    normalize_availability,
    parse_availability,
)
from barbermatch.utils.data_uri import DataURIError, parse_data_uri, to_data_uri


def test_empty_availability():
    assert parse_availability(None) == {}
    assert parse_availability("") == {}
    assert parse_availability("{}") == {}


def test_parse_availability():
    raw = json.dumps({"monday": ["09:00-12:00", "13:00-17:30"], "sunday": []})
    assert parse_availability(raw) == {"monday": ["09:00-12:00", "13:00-17:30"], "sunday": []}


@pytest.mark.parametrize("raw", [
    "{not json",
    '"monday"',
    '{"Monday": ["09:00-12:00"]}',
    '{"monday": "09:00-12:00"}',
    '{"monday": [900]}',
    '{"monday": ["9:00-12:00"]}',
    '{"monday": ["09:00-24:00"]}',
    '{"monday": ["12:00-12:00"]}',
])
def test_invalid_availability(raw):
    with pytest.raises(AvailabilityError):
        parse_availability(raw)


def test_normalize_orders_weekdays():
    raw = json.dumps({"friday": ["10:00-14:00"], "monday": ["09:00-17:00"]})
    assert normalize_availability(raw) == '{"monday": ["09:00-17:00"], "friday": ["10:00-14:00"]}'


def test_available_days_skips_empty_days():
    raw = json.dumps({"sunday": ["10:00-12:00"], "monday": [], "wednesday": ["09:00-17:00"]})
    assert available_days(raw) == ["wednesday", "sunday"]


def test_data_uri():
    uri = to_data_uri("image/png", b"\x89PNG")
    parsed = parse_data_uri(uri)
    assert parsed.mime_type == "image/png"
    assert parsed.to_bytes() == b"\x89PNG"


@pytest.mark.parametrize("value", [
    "",
    "http://example.com/photo.jpg",
    "data:image/png,abc",
    "data:image/png;base64,abc",
    "data:;base64,aGVsbG8=",
])
def test_invalid_data_uri(value):
    with pytest.raises(DataURIError):
        parse_data_uri(value)
