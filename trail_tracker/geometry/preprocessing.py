"""Preprocessing utilities for run and reference geometry."""

from __future__ import annotations

import logging
import math
from typing import Any, Iterable, Mapping, Optional, Sequence

import numpy as np
from numpy.typing import NDArray
from polyline import decode as polyline_decode
from shapely.geometry import LineString

from ..config import (
    METERS_PER_DEGREE,
    SEGMENTATION_MAX_POINTS,
    SEGMENTATION_SIMPLIFICATION_TOLERANCE_M,
)
from ..errors import PolylineDecodeError
from ..models import GeoPoint, Route

MetricArray = NDArray[np.float64]

_LOG = logging.getLogger(__name__)

_LAT_KEYS = ("latitude", "lat")
_LON_KEYS = ("longitude", "lng", "lon")


def coerce_point(value: Any) -> Optional[GeoPoint]:
    """Return a :class:`GeoPoint` for a loosely typed point, or ``None``.

    Accepts ``GeoPoint`` instances, objects exposing ``latitude`` and
    ``longitude`` attributes (such as :class:`~trail_tracker.models.TrackFix`),
    mappings keyed by ``latitude``/``longitude`` (or ``lat``/``lng``/``lon``)
    and ``(lat, lon)`` pairs. Missing, non-numeric, non-finite and
    out-of-range coordinates yield ``None``.
    """

    if isinstance(value, GeoPoint):
        return value
    if value is None:
        return None
    if isinstance(value, Mapping):
        lat = _first_present(value, _LAT_KEYS)
        lon = _first_present(value, _LON_KEYS)
    elif hasattr(value, "latitude") and hasattr(value, "longitude"):
        lat = value.latitude
        lon = value.longitude
    elif isinstance(value, Sequence) and not isinstance(value, (str, bytes)):
        if len(value) != 2:
            return None
        lat, lon = value
    else:
        return None
    lat_f = _coerce_coordinate(lat)
    lon_f = _coerce_coordinate(lon)
    if lat_f is None or lon_f is None:
        return None
    if abs(lat_f) > 90.0 or abs(lon_f) > 180.0:
        return None
    return GeoPoint(lat_f, lon_f)


def coerce_route(points: Optional[Iterable[Any]]) -> Route:
    """Normalise an iterable of point-likes, dropping malformed entries."""

    if points is None:
        return ()
    route = []
    for value in points:
        point = coerce_point(value)
        if point is not None:
            route.append(point)
    return tuple(route)


def decode_polyline(encoded: str) -> Route:
    """Decode an encoded polyline string into a route."""

    if not encoded:
        return ()
    try:
        decoded = polyline_decode(encoded)
    except (ValueError, TypeError, IndexError) as exc:
        raise PolylineDecodeError("Unable to decode polyline") from exc
    return coerce_route(decoded)


def downsample_route(
    points: Iterable[Any],
    max_points: int = SEGMENTATION_MAX_POINTS,
    tolerance_m: float = SEGMENTATION_SIMPLIFICATION_TOLERANCE_M,
) -> Route:
    """Reduce a route to at most ``max_points`` points, keeping both endpoints.

    The route is first simplified in a local metric plane; the tolerance is
    raised a few times when that is not enough, and the remainder is
    decimated evenly.
    """

    route = coerce_route(points)
    max_points = max(2, int(max_points))
    if len(route) <= max_points:
        return route

    ref_lat = float(np.mean([pt.latitude for pt in route]))
    metric = _to_metric_array(route, ref_lat)
    simplified, effective_tolerance = _simplify_with_budget(
        metric, tolerance_m, max_points
    )
    if len(simplified) > max_points:
        simplified = _decimate_points(simplified, max_points)
        _LOG.debug(
            "Decimated route of %d points to %d (tolerance %.1f m)",
            len(route),
            len(simplified),
            effective_tolerance,
        )
    return _from_metric_array(simplified, ref_lat)


def _simplify_with_budget(
    points: MetricArray,
    tolerance_m: float,
    max_points: int,
) -> tuple[MetricArray, float]:
    """Simplify points, widening the tolerance while over budget."""

    effective_tolerance = max(tolerance_m, 0.0)
    simplified = _simplify_points(points, effective_tolerance)

    attempts = 0
    while len(simplified) > max_points and attempts < 5:
        effective_tolerance = (
            effective_tolerance * 1.5 if effective_tolerance > 0 else 1.0
        )
        simplified = _simplify_points(points, effective_tolerance)
        attempts += 1
    return simplified, effective_tolerance


def _simplify_points(points: MetricArray, tolerance_m: float) -> MetricArray:
    if len(points) < 3 or tolerance_m <= 0:
        return points
    line = LineString(points)
    simplified = line.simplify(tolerance_m, preserve_topology=False)
    return np.asarray(simplified.coords, dtype=float)


def _decimate_points(points: MetricArray, max_points: int) -> MetricArray:
    """Down-sample a point array while preserving the endpoints."""

    max_points = max(2, max_points)
    count = points.shape[0]
    if count <= max_points:
        return points
    indices = np.linspace(0, count - 1, num=max_points, dtype=int)
    return points[indices]


def _to_metric_array(route: Route, ref_lat: float) -> MetricArray:
    scale = math.cos(math.radians(ref_lat)) * METERS_PER_DEGREE
    lats = np.asarray([pt.latitude for pt in route], dtype=float)
    lons = np.asarray([pt.longitude for pt in route], dtype=float)
    return np.column_stack((lons * scale, lats * METERS_PER_DEGREE))


def _from_metric_array(points: MetricArray, ref_lat: float) -> Route:
    scale = math.cos(math.radians(ref_lat)) * METERS_PER_DEGREE
    route = []
    for x, y in points:
        lat = min(max(float(y) / METERS_PER_DEGREE, -90.0), 90.0)
        lon = min(max(float(x) / scale, -180.0), 180.0)
        route.append(GeoPoint(lat, lon))
    return tuple(route)


def _first_present(mapping: Mapping[str, Any], keys: Sequence[str]) -> Any:
    for key in keys:
        value = mapping.get(key)
        if value is not None:
            return value
    return None


def _coerce_coordinate(value: Any) -> Optional[float]:
    if value is None or isinstance(value, bool):
        return None
    try:
        number = float(value)
    except (TypeError, ValueError):
        return None
    if not math.isfinite(number):
        return None
    return number


__all__ = [
    "coerce_point",
    "coerce_route",
    "decode_polyline",
    "downsample_route",
]
