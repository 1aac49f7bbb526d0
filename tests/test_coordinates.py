"""Coordinate normalizer tests."""
from types import SimpleNamespace

import pytest

from vetconnect.schemas.clinic import Coordinates
from vetconnect.utils.coordinates import (
    extract,
    fan_out,
    format_coordinates,
    normalize,
    try_normalize,
)
from vetconnect.utils.errors import InvalidCoordinatesError


@pytest.mark.parametrize(
    "raw",
    [
        [15.14, 120.58],
        (15.14, 120.58),
        ["15.14", "120.58"],
        {"lat": 15.14, "lng": 120.58},
        {"lat": 15.14, "lon": 120.58},
        {"latitude": "15.14", "longitude": "120.58"},
        {"_latitude": 15.14, "_longitude": 120.58},
        {"_lat": 15.14, "_lng": 120.58},
        {"location": {"lat": 15.14, "lng": 120.58}},
        {"coords": [15.14, 120.58]},
        {"coordinates": {"latitude": 15.14, "longitude": 120.58}},
        SimpleNamespace(latitude=15.14, longitude=120.58),
        Coordinates(latitude=15.14, longitude=120.58),
    ],
)
def test_normalize_accepts_every_known_shape(raw):
    coords = normalize(raw)
    assert coords.latitude == pytest.approx(15.14)
    assert coords.longitude == pytest.approx(120.58)


def test_normalize_swaps_transposed_pair():
    coords = normalize([120.58, 15.14])
    assert (coords.latitude, coords.longitude) == (15.14, 120.58)


def test_normalize_swaps_when_only_latitude_is_out_of_range():
    coords = normalize([95, 45])
    assert (coords.latitude, coords.longitude) == (45, 95)


def test_normalize_keeps_direct_reading_when_both_fit():
    coords = normalize({"lat": 20, "lng": 10})
    assert (coords.latitude, coords.longitude) == (20, 10)


def test_flat_keys_win_over_nested_location():
    raw = {"latitude": 1.5, "longitude": 2.5, "location": {"lat": 9, "lng": 9}}
    assert extract(raw) == (1.5, 2.5)


@pytest.mark.parametrize(
    "raw",
    [
        None,
        "15.14, 120.58",
        [15.14],
        [15.14, 120.58, 0],
        {"lat": "north", "lng": 120.58},
        {"lat": "", "lng": 120.58},
        [True, False],
        [float("nan"), 120.58],
        [float("inf"), 10],
        [200, 200],
        [200, 45],
        [45, 200],
        {"location": "somewhere"},
        {},
    ],
)
def test_normalize_rejects_unusable_input(raw):
    with pytest.raises(InvalidCoordinatesError):
        normalize(raw)


def test_try_normalize_returns_none_instead_of_raising():
    assert try_normalize(None) is None
    assert try_normalize([500, 500]) is None
    assert try_normalize({"lat": 15.14, "lng": 120.58}) == Coordinates(latitude=15.14, longitude=120.58)


def test_fan_out_writes_every_encoding():
    fields = fan_out(Coordinates(latitude=15.14, longitude=120.58))

    assert fields["latitude"] == 15.14
    assert fields["longitude"] == 120.58
    assert fields["location"] == {"lat": 15.14, "lng": 120.58}
    assert fields["coords"] == [15.14, 120.58]
    assert fields["coordinates"] == {"latitude": 15.14, "longitude": 120.58}


def test_normalizing_a_fanned_out_record_is_stable():
    coords = normalize([120.58, 15.14])
    assert normalize(fan_out(coords)) == coords


def test_format_coordinates_uses_six_decimals():
    assert format_coordinates(15.1, 120.5) == "15.100000, 120.500000"
