"""Tests for point normalisation, polyline decoding and downsampling."""

from __future__ import annotations

import pytest

from trail_tracker.errors import PolylineDecodeError
from trail_tracker.geometry import preprocessing
from trail_tracker.geometry.preprocessing import (
    coerce_point,
    coerce_route,
    decode_polyline,
    downsample_route,
)
from trail_tracker.models import GeoPoint, TrackFix


@pytest.mark.parametrize(
    "value, expected",
    [
        (GeoPoint(1.0, 2.0), GeoPoint(1.0, 2.0)),
        ((1.0, 2.0), GeoPoint(1.0, 2.0)),
        ([1, 2], GeoPoint(1.0, 2.0)),
        ({"latitude": 1.0, "longitude": 2.0}, GeoPoint(1.0, 2.0)),
        ({"lat": "1.5", "lng": "2.5"}, GeoPoint(1.5, 2.5)),
        ({"lat": 1.5, "lon": 2.5}, GeoPoint(1.5, 2.5)),
        (TrackFix(latitude=3.0, longitude=4.0), GeoPoint(3.0, 4.0)),
    ],
)
def test_coerce_point_accepts_loose_inputs(value, expected) -> None:
    assert coerce_point(value) == expected


@pytest.mark.parametrize(
    "value",
    [
        None,
        "1.0,2.0",
        (1.0,),
        (1.0, 2.0, 3.0),
        (None, 2.0),
        (float("nan"), 2.0),
        (float("inf"), 2.0),
        (91.0, 0.0),
        (0.0, 181.0),
        (True, 1.0),
        {"latitude": 1.0},
        {"latitude": "north", "longitude": 2.0},
    ],
)
def test_coerce_point_rejects_malformed_inputs(value) -> None:
    assert coerce_point(value) is None


def test_coerce_route_drops_malformed_points() -> None:
    route = coerce_route([(0.0, 0.0), None, (1.0, 1.0), (float("nan"), 0.0)])
    assert route == (GeoPoint(0.0, 0.0), GeoPoint(1.0, 1.0))
    assert coerce_route(None) == ()


def test_geo_point_validates_ranges() -> None:
    with pytest.raises(ValueError):
        GeoPoint(90.5, 0.0)
    with pytest.raises(ValueError):
        GeoPoint(0.0, -180.5)
    with pytest.raises(ValueError):
        GeoPoint(float("nan"), 0.0)


def test_decode_polyline() -> None:
    route = decode_polyline("_p~iF~ps|U_ulLnnqC_mqNvxq`@")
    assert route == (
        GeoPoint(38.5, -120.2),
        GeoPoint(40.7, -120.95),
        GeoPoint(43.252, -126.453),
    )
    assert decode_polyline("") == ()


def test_decode_polyline_wraps_errors(monkeypatch) -> None:
    def _boom(_: str):
        raise ValueError("bad polyline")

    monkeypatch.setattr(preprocessing, "polyline_decode", _boom)
    with pytest.raises(PolylineDecodeError):
        decode_polyline("abc")


def test_downsample_keeps_short_routes() -> None:
    route = tuple(GeoPoint(0.0, i * 0.0001) for i in range(10))
    assert downsample_route(route, max_points=10) == route


def test_downsample_simplifies_straight_route() -> None:
    route = [GeoPoint(10.0 + i * 0.00001, 20.0) for i in range(1000)]

    reduced = downsample_route(route, max_points=50)

    assert 2 <= len(reduced) <= 50
    assert reduced[0].latitude == pytest.approx(10.0)
    assert reduced[-1].latitude == pytest.approx(route[-1].latitude)
    assert reduced[-1].longitude == pytest.approx(20.0)


def test_downsample_decimates_when_simplification_is_not_enough() -> None:
    route = [
        GeoPoint(0.0005 if i % 2 else 0.0, i * 0.0001) for i in range(1000)
    ]

    reduced = downsample_route(route, max_points=50)

    assert len(reduced) == 50
    assert reduced[0].longitude == pytest.approx(0.0, abs=1e-12)
    assert reduced[-1].longitude == pytest.approx(route[-1].longitude)
    assert reduced[-1].latitude == pytest.approx(route[-1].latitude, abs=1e-12)
