"""Run analysis against an official trail, with bounded input sizes."""

from __future__ import annotations

from dataclasses import dataclass, field
import logging
from threading import RLock
from typing import Any, Hashable, List, Optional, Sequence, Tuple

from cachetools import LRUCache

from .config import (
    REFERENCE_CACHE_SIZE,
    SEGMENTATION_MAX_POINTS,
    SEGMENTATION_SIMPLIFICATION_TOLERANCE_M,
)
from .geometry.deviation import segment_deviation, worst_deviation
from .geometry.preprocessing import downsample_route
from .models import ColoredSegment, DeviationSummary, Route
from .preferences import RoutePreferences

_LOG = logging.getLogger(__name__)

_ReferenceCacheKey = Tuple[Hashable, int, float]


class ReferenceCache:
    """In-memory LRU cache of downsampled reference trails."""

    def __init__(self, max_entries: int = REFERENCE_CACHE_SIZE) -> None:
        self._cache: LRUCache[_ReferenceCacheKey, Route] = LRUCache(
            maxsize=max(1, max_entries)
        )
        self._lock = RLock()

    def get(
        self, trail_id: Hashable, max_points: int, tolerance_m: float
    ) -> Optional[Route]:
        with self._lock:
            return self._cache.get((trail_id, max_points, tolerance_m))

    def set(
        self, trail_id: Hashable, max_points: int, tolerance_m: float, route: Route
    ) -> None:
        with self._lock:
            self._cache[(trail_id, max_points, tolerance_m)] = route

    def invalidate(self, trail_id: Hashable) -> None:
        """Drop every cached variant of ``trail_id`` (e.g. after a trail edit)."""

        with self._lock:
            for key in [key for key in self._cache if key[0] == trail_id]:
                del self._cache[key]

    def clear(self) -> None:
        """Empty the cache (primarily for testing)."""
        with self._lock:
            self._cache.clear()

    def __len__(self) -> int:
        with self._lock:
            return len(self._cache)


REFERENCE_CACHE = ReferenceCache()


@dataclass(slots=True)
class RunAnalysis:
    """Coloured segments and worst deviation for one run."""

    segments: List[ColoredSegment]
    worst: Optional[DeviationSummary]
    run_points: Route
    reference_points: Route
    diagnostics: dict[str, Any] = field(default_factory=dict)


def prepare_reference(
    reference: Sequence[Any],
    *,
    trail_id: Optional[Hashable] = None,
    cache: Optional[ReferenceCache] = REFERENCE_CACHE,
    max_points: int = SEGMENTATION_MAX_POINTS,
    tolerance_m: float = SEGMENTATION_SIMPLIFICATION_TOLERANCE_M,
) -> Route:
    """Return the downsampled reference, reusing the cache when ``trail_id`` is set."""

    if trail_id is not None and cache is not None:
        cached = cache.get(trail_id, max_points, tolerance_m)
        if cached is not None:
            _LOG.debug("Reference cache hit for trail %s", trail_id)
            return cached
    prepared = downsample_route(reference, max_points, tolerance_m)
    if trail_id is not None and cache is not None:
        cache.set(trail_id, max_points, tolerance_m, prepared)
    return prepared


def analyze_run(
    run: Sequence[Any],
    reference: Sequence[Any],
    preferences: Optional[RoutePreferences] = None,
    *,
    trail_id: Optional[Hashable] = None,
    cache: Optional[ReferenceCache] = REFERENCE_CACHE,
    max_points: int = SEGMENTATION_MAX_POINTS,
    tolerance_m: float = SEGMENTATION_SIMPLIFICATION_TOLERANCE_M,
) -> RunAnalysis:
    """Downsample a run and its trail, then classify the run's deviation.

    Args:
        run: Recorded positions (fixes, points, pairs or mappings).
        reference: Official trail polyline in the same loose formats.
        preferences: Colours and thresholds; defaults when omitted.
        trail_id: Identifier used to cache the prepared reference.
        cache: Reference cache; ``None`` disables caching.
        max_points: Upper bound on points kept for each polyline.
        tolerance_m: Initial simplification tolerance in metres.

    Returns:
        A :class:`RunAnalysis` holding the coloured segments, the worst
        deviation (``None`` without a usable reference) and the downsampled
        polylines that were compared.
    """

    prefs = preferences or RoutePreferences()
    reference_points = prepare_reference(
        reference,
        trail_id=trail_id,
        cache=cache,
        max_points=max_points,
        tolerance_m=tolerance_m,
    )
    run_points = downsample_route(run, max_points, tolerance_m)
    segments = segment_deviation(
        run_points, reference_points, prefs.deviation_config()
    )
    worst = worst_deviation(run_points, reference_points)
    diagnostics: dict[str, Any] = {
        "run_points": len(run_points),
        "reference_points": len(reference_points),
        "segments": len(segments),
        "signature": prefs.run_signature,
    }
    if worst is not None:
        diagnostics["max_offset_m"] = worst.offset_m
    return RunAnalysis(
        segments=segments,
        worst=worst,
        run_points=run_points,
        reference_points=reference_points,
        diagnostics=diagnostics,
    )


__all__ = [
    "REFERENCE_CACHE",
    "ReferenceCache",
    "RunAnalysis",
    "analyze_run",
    "prepare_reference",
]
