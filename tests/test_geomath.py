"""Tests for the planar distance primitives."""

from __future__ import annotations

import math

import pytest

from trail_tracker.geometry.geomath import (
    ft_to_m,
    haversine_m,
    nearest_distance_to_polyline_m,
    point_to_segment_distance_m,
    project,
    route_distance_m,
)
from trail_tracker.models import GeoPoint


def test_project_scales_longitude_by_reference_latitude() -> None:
    x, y = project(1.0, 2.0, 60.0)
    assert x == pytest.approx(111_320.0)
    assert y == pytest.approx(111_320.0)


def test_point_to_segment_distance_is_zero_for_identical_points() -> None:
    a = GeoPoint(51.48, -3.18)
    assert point_to_segment_distance_m(a, a, a) == 0.0


def test_point_on_segment_has_zero_distance() -> None:
    a = GeoPoint(0.0, 0.0)
    b = GeoPoint(0.0, 0.001)
    p = GeoPoint(0.0, 0.0005)
    assert point_to_segment_distance_m(p, a, b) == pytest.approx(0.0, abs=1e-9)


def test_perpendicular_distance_to_segment() -> None:
    a = GeoPoint(0.0, 0.0)
    b = GeoPoint(0.0, 0.001)
    p = GeoPoint(0.001, 0.0005)
    assert point_to_segment_distance_m(p, a, b) == pytest.approx(111.32)


def test_projection_is_clamped_to_segment_end() -> None:
    a = GeoPoint(0.0, 0.0)
    b = GeoPoint(0.0, 0.001)
    beyond = GeoPoint(0.0, 0.002)
    assert point_to_segment_distance_m(beyond, a, b) == pytest.approx(111.32)


def test_degenerate_segment_reduces_to_point_distance() -> None:
    a = GeoPoint(10.0, 10.0)
    p = GeoPoint(10.001, 10.0)
    assert point_to_segment_distance_m(p, a, a) == pytest.approx(111.32)


@pytest.mark.parametrize(
    "p, a, b",
    [
        ((45.0001, 7.0002), (45.0, 7.0), (45.0003, 7.0004)),
        ((-33.9, 151.2), (-33.9002, 151.1999), (-33.8998, 151.2003)),
        ((60.0, 24.9), (60.0, 24.9), (60.001, 24.9)),
    ],
)
def test_segment_distance_is_non_negative_and_symmetric(p, a, b) -> None:
    point, start, end = GeoPoint(*p), GeoPoint(*a), GeoPoint(*b)
    forward = point_to_segment_distance_m(point, start, end)
    backward = point_to_segment_distance_m(point, end, start)
    assert forward >= 0.0
    assert forward == pytest.approx(backward, rel=1e-6, abs=1e-6)


def test_nearest_distance_requires_two_points() -> None:
    p = GeoPoint(0.0, 0.0)
    assert nearest_distance_to_polyline_m(p, []) == math.inf
    assert nearest_distance_to_polyline_m(p, [GeoPoint(0.0, 0.0)]) == math.inf


def test_nearest_distance_uses_closest_segment() -> None:
    polyline = [GeoPoint(0.0, 0.0), GeoPoint(0.0, 0.001), GeoPoint(0.001, 0.001)]
    p = GeoPoint(0.0005, 0.0011)
    expected = 0.0001 * math.cos(math.radians(0.0005)) * 111_320.0
    assert nearest_distance_to_polyline_m(p, polyline) == pytest.approx(expected)


def test_haversine_one_degree_of_latitude() -> None:
    assert haversine_m(GeoPoint(0.0, 0.0), GeoPoint(1.0, 0.0)) == pytest.approx(
        111_194.93, rel=1e-6
    )


def test_route_distance_sums_legs() -> None:
    route = [GeoPoint(0.0, 0.0), GeoPoint(1.0, 0.0), GeoPoint(2.0, 0.0)]
    single = haversine_m(route[0], route[1])
    assert route_distance_m(route) == pytest.approx(2 * single)
    assert route_distance_m(route[:1]) == 0.0


def test_ft_to_m_conversion() -> None:
    assert ft_to_m(50) == pytest.approx(15.24)
    assert ft_to_m("75") == pytest.approx(22.86)
    assert ft_to_m(None) == 0.0
    assert ft_to_m("far") == 0.0
