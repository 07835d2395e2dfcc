"""Classify a recorded run by its deviation from an official trail."""

from __future__ import annotations

from dataclasses import dataclass
import logging
import math
from typing import Any, List, Optional, Sequence

from ..models import ColoredSegment, DeviationSummary, GeoPoint
from .geomath import nearest_distance_to_polyline_m
from .preprocessing import coerce_point, coerce_route

_LOG = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class DeviationConfig:
    """Colour tags and offset thresholds (metres) used for classification.

    Thresholds must satisfy ``critical_threshold_m >= warn_threshold_m >= 0``.
    """

    normal_tag: str
    warn_tag: str
    critical_tag: str
    warn_threshold_m: float
    critical_threshold_m: float

    def __post_init__(self) -> None:
        if not self.warn_threshold_m >= 0.0:
            raise ValueError("warn_threshold_m must be non-negative")
        if not self.critical_threshold_m >= self.warn_threshold_m:
            raise ValueError("critical_threshold_m must be >= warn_threshold_m")

    def classify(self, offset_m: float) -> str:
        """Return the colour tag for a single offset."""

        if not math.isfinite(offset_m):
            return self.normal_tag
        if offset_m >= self.critical_threshold_m:
            return self.critical_tag
        if offset_m >= self.warn_threshold_m:
            return self.warn_tag
        return self.normal_tag


def segment_deviation(
    run: Optional[Sequence[Any]],
    reference: Optional[Sequence[Any]],
    config: DeviationConfig,
) -> List[ColoredSegment]:
    """Split ``run`` into colour-tagged segments by distance from ``reference``.

    Each consecutive pair of run points is classified by the distance of its
    trailing point to the reference polyline. Pairs sharing a colour are merged
    into one segment, so adjacent segments always differ in colour and every
    segment holds at least two points. Pairs containing a malformed point are
    skipped.

    Args:
        run: Recorded positions in traversal order.
        reference: Official trail polyline.
        config: Colour tags and thresholds.

    Returns:
        Segments in traversal order. When either input has fewer than two
        points the whole run is returned as a single ``normal_tag`` segment,
        or an empty list if the run itself is too short.
    """

    run_items = list(run) if run is not None else []
    reference_route = coerce_route(reference)

    if len(run_items) < 2 or len(reference_route) < 2:
        route = coerce_route(run_items)
        _LOG.debug(
            "Degenerate deviation input (run=%d, reference=%d); using single segment",
            len(run_items),
            len(reference_route),
        )
        if len(route) < 2:
            return []
        return [ColoredSegment(config.normal_tag, route)]

    points = [coerce_point(item) for item in run_items]
    segments: List[ColoredSegment] = []
    current_color: Optional[str] = None
    current_points: List[GeoPoint] = []

    for idx in range(1, len(points)):
        previous = points[idx - 1]
        current = points[idx]
        if previous is None or current is None:
            continue

        offset = nearest_distance_to_polyline_m(current, reference_route)
        color = config.classify(offset)

        if color != current_color:
            if len(current_points) > 1:
                segments.append(ColoredSegment(current_color, tuple(current_points)))
            current_color = color
            current_points = [previous]
        current_points.append(current)

    if current_color is not None and len(current_points) > 1:
        segments.append(ColoredSegment(current_color, tuple(current_points)))
    return segments


def deviation_offsets(
    run: Optional[Sequence[Any]],
    reference: Optional[Sequence[Any]],
) -> List[float]:
    """Return the offset of every run point from the reference.

    Malformed run points map to ``nan``; every offset is ``inf`` when the
    reference has fewer than two valid points.
    """

    reference_route = coerce_route(reference)
    offsets: List[float] = []
    for item in run or ():
        point = coerce_point(item)
        if point is None:
            offsets.append(math.nan)
            continue
        offsets.append(nearest_distance_to_polyline_m(point, reference_route))
    return offsets


def worst_deviation(
    run: Optional[Sequence[Any]],
    reference: Optional[Sequence[Any]],
) -> Optional[DeviationSummary]:
    """Return the run point furthest from the reference, if any is measurable."""

    run_items = list(run or ())
    offsets = deviation_offsets(run_items, reference)
    best_index: Optional[int] = None
    best_offset = -math.inf
    for idx, offset in enumerate(offsets):
        if math.isfinite(offset) and offset > best_offset:
            best_index = idx
            best_offset = offset
    if best_index is None:
        return None
    point = coerce_point(run_items[best_index])
    if point is None:
        return None
    return DeviationSummary(index=best_index, offset_m=best_offset, point=point)


__all__ = [
    "DeviationConfig",
    "deviation_offsets",
    "segment_deviation",
    "worst_deviation",
]
