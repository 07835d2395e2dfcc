"""Distance primitives for trail-scale geometry.

Deviation checks use a local equirectangular plane anchored at each
segment's mid-latitude. The approximation is accurate to well under a metre
over a few kilometres, which is ample for thresholds measured in tens of
feet, but it is not suitable for long-range geodesy. Cumulative run distance
uses the haversine great-circle formula.
"""

from __future__ import annotations

import math
from typing import Any, Protocol, Sequence, Tuple

from ..config import EARTH_RADIUS_M, FEET_TO_METERS, METERS_PER_DEGREE


class PointLike(Protocol):
    latitude: float
    longitude: float


def ft_to_m(value: Any) -> float:
    """Convert feet to metres, treating unparsable input as zero."""

    try:
        feet = float(value)
    except (TypeError, ValueError):
        return 0.0
    if math.isnan(feet):
        return 0.0
    return feet * FEET_TO_METERS


def project(lat: float, lon: float, ref_lat: float) -> Tuple[float, float]:
    """Project a lat/lon pair into planar metres around ``ref_lat``."""

    x = lon * math.cos(math.radians(ref_lat)) * METERS_PER_DEGREE
    y = lat * METERS_PER_DEGREE
    return x, y


def point_to_segment_distance_m(p: PointLike, a: PointLike, b: PointLike) -> float:
    """Return the distance in metres from ``p`` to the segment ``[a, b]``.

    A degenerate segment (``a == b``) reduces to the point-to-point distance.
    """

    if a.latitude == b.latitude and a.longitude == b.longitude:
        ref_lat = a.latitude
        px, py = project(p.latitude, p.longitude, ref_lat)
        ax, ay = project(a.latitude, a.longitude, ref_lat)
        return math.hypot(px - ax, py - ay)

    ref_lat = (a.latitude + b.latitude) * 0.5
    ax, ay = project(a.latitude, a.longitude, ref_lat)
    bx, by = project(b.latitude, b.longitude, ref_lat)
    px, py = project(p.latitude, p.longitude, ref_lat)

    abx, aby = bx - ax, by - ay
    apx, apy = px - ax, py - ay
    ab2 = abx * abx + aby * aby
    t = (apx * abx + apy * aby) / ab2 if ab2 > 0 else 0.0
    t = max(0.0, min(1.0, t))

    cx = ax + t * abx
    cy = ay + t * aby
    return math.hypot(px - cx, py - cy)


def nearest_distance_to_polyline_m(
    p: PointLike, polyline: Sequence[PointLike]
) -> float:
    """Return the smallest distance from ``p`` to any segment of ``polyline``.

    Returns ``inf`` when the polyline has fewer than two points. The search is
    a linear scan; callers bound the polyline length (see
    :func:`~trail_tracker.geometry.preprocessing.downsample_route`).
    """

    if len(polyline) < 2:
        return math.inf
    best = math.inf
    for idx in range(1, len(polyline)):
        dist = point_to_segment_distance_m(p, polyline[idx - 1], polyline[idx])
        if dist < best:
            best = dist
    return best


def haversine_m(first: PointLike, second: PointLike) -> float:
    """Great-circle distance in metres between two points."""

    lat1_rad = math.radians(first.latitude)
    lat2_rad = math.radians(second.latitude)
    delta_lat = lat2_rad - lat1_rad
    delta_lon = math.radians(second.longitude - first.longitude)
    sin_half_lat = math.sin(delta_lat / 2.0)
    sin_half_lon = math.sin(delta_lon / 2.0)
    a = sin_half_lat**2 + math.cos(lat1_rad) * math.cos(lat2_rad) * sin_half_lon**2
    c = 2.0 * math.atan2(math.sqrt(a), math.sqrt(1.0 - a))
    return EARTH_RADIUS_M * c


def route_distance_m(points: Sequence[PointLike]) -> float:
    """Total haversine length of a route."""

    total = 0.0
    for idx in range(1, len(points)):
        total += haversine_m(points[idx - 1], points[idx])
    return total


__all__ = [
    "PointLike",
    "ft_to_m",
    "haversine_m",
    "nearest_distance_to_polyline_m",
    "point_to_segment_distance_m",
    "project",
    "route_distance_m",
]
