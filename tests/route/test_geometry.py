"""Tests for great-circle helpers."""

from __future__ import annotations

import math

import pytest

from drive_companion.route.geometry import (
    EARTH_RADIUS_M,
    bearing_degrees,
    distance_meters,
    interpolate,
    meters_to_miles,
    mph_to_mps,
    mps_to_mph,
)

BOSTON = (-71.0589, 42.3601)
WORCESTER = (-71.8023, 42.2626)


def test_distance_zero_for_identical_points():
    assert distance_meters(BOSTON, BOSTON) == 0.0


def test_distance_symmetric():
    assert distance_meters(BOSTON, WORCESTER) == pytest.approx(distance_meters(WORCESTER, BOSTON))


def test_distance_boston_worcester_about_62_km():
    assert distance_meters(BOSTON, WORCESTER) == pytest.approx(62_000, rel=0.02)


def test_distance_one_degree_longitude_on_equator():
    expected = EARTH_RADIUS_M * math.radians(1.0)
    assert distance_meters((0.0, 0.0), (1.0, 0.0)) == pytest.approx(expected)


@pytest.mark.parametrize(
    ("target", "expected"),
    [
        ((0.0, 1.0), 0.0),
        ((1.0, 0.0), 90.0),
        ((0.0, -1.0), 180.0),
        ((-1.0, 0.0), 270.0),
    ],
)
def test_bearing_cardinal_directions(target, expected):
    assert bearing_degrees((0.0, 0.0), target) == pytest.approx(expected)


def test_bearing_identical_points_is_zero():
    assert bearing_degrees(BOSTON, BOSTON) == 0.0


def test_bearing_always_in_range():
    for a, b in [(BOSTON, WORCESTER), (WORCESTER, BOSTON), ((10.0, 10.0), (9.0, 11.0))]:
        assert 0.0 <= bearing_degrees(a, b) < 360.0


def test_interpolate_endpoints_and_midpoint():
    a, b = (0.0, 0.0), (2.0, 4.0)
    assert interpolate(a, b, 0.0) == a
    assert interpolate(a, b, 1.0) == b
    assert interpolate(a, b, 0.5) == (1.0, 2.0)


def test_speed_conversions_round_trip():
    assert mph_to_mps(40.0) == pytest.approx(17.88, abs=0.01)
    assert mps_to_mph(mph_to_mps(55.0)) == pytest.approx(55.0)
    assert meters_to_miles(1609.34) == pytest.approx(1.0)
