"""Geometry processing for run deviation analysis.

This package provides the planar distance primitives, point normalisation and
downsampling helpers, and the deviation segmenter that colours a run by its
offset from an official trail.
"""

from .deviation import (
    DeviationConfig,
    deviation_offsets,
    segment_deviation,
    worst_deviation,
)
from .geomath import (
    ft_to_m,
    haversine_m,
    nearest_distance_to_polyline_m,
    point_to_segment_distance_m,
    project,
    route_distance_m,
)
from .preprocessing import coerce_point, coerce_route, decode_polyline, downsample_route

__all__ = [
    "DeviationConfig",
    "deviation_offsets",
    "segment_deviation",
    "worst_deviation",
    "ft_to_m",
    "haversine_m",
    "nearest_distance_to_polyline_m",
    "point_to_segment_distance_m",
    "project",
    "route_distance_m",
    "coerce_point",
    "coerce_route",
    "decode_polyline",
    "downsample_route",
]
