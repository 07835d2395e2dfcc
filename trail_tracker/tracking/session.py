"""Recording session for a single run on a trail."""

from __future__ import annotations

import logging
from typing import Any, Hashable, Optional, Sequence

from ..analysis import REFERENCE_CACHE, ReferenceCache, analyze_run
from ..config import FINISH_RADIUS_M
from ..geometry.geomath import haversine_m
from ..geometry.preprocessing import coerce_point, coerce_route
from ..models import LiveStats, RunSummary, TrackFix
from ..preferences import RoutePreferences
from .aggregator import TrackAggregator


class RecordingSession:
    """Drive a :class:`TrackAggregator` for one run and summarise it on stop.

    The session is fed by an external location provider through
    :meth:`record`. ``reached_finish`` becomes ``True`` once an accepted fix
    lies within ``finish_radius_m`` of the trail's end point; callers use it to
    stop recording automatically.
    """

    def __init__(
        self,
        trail_id: Optional[Hashable],
        vehicle_id: Optional[Hashable],
        *,
        reference: Sequence[Any] = (),
        start_point: Any = None,
        end_point: Any = None,
        preferences: Optional[RoutePreferences] = None,
        finish_radius_m: float = FINISH_RADIUS_M,
        aggregator: Optional[TrackAggregator] = None,
        cache: Optional[ReferenceCache] = REFERENCE_CACHE,
    ) -> None:
        self.trail_id = trail_id
        self.vehicle_id = vehicle_id
        self.reference = coerce_route(reference)
        self.start_point = coerce_point(start_point)
        self.end_point = coerce_point(end_point)
        self.preferences = preferences or RoutePreferences()
        self.finish_radius_m = finish_radius_m
        self.aggregator = aggregator or TrackAggregator()
        self._cache = cache
        self._log = logging.getLogger(self.__class__.__name__)
        self.reached_finish = False

    def at_trailhead(self, position: Any) -> bool:
        """Return True when ``position`` is within ``finish_radius_m`` of the trail start."""

        point = coerce_point(position)
        if point is None or self.start_point is None:
            return False
        return haversine_m(point, self.start_point) <= self.finish_radius_m

    def start(self) -> None:
        """Begin recording.

        Raises:
            ValueError: If the preferences hold an invalid threshold pair.
        """

        self.preferences.deviation_config()
        self.reached_finish = False
        self.aggregator.start()
        self._log.info(
            "Recording started for trail=%s vehicle=%s", self.trail_id, self.vehicle_id
        )

    def record(self, fix: TrackFix) -> LiveStats:
        """Add a fix and return the updated live statistics."""

        accepted = self.aggregator.add_fix(fix)
        if accepted and self.end_point is not None and not self.reached_finish:
            if haversine_m(fix, self.end_point) < self.finish_radius_m:
                self.reached_finish = True
                self._log.info("Finish zone reached for trail=%s", self.trail_id)
        return self.aggregator.snapshot()

    def stop(self) -> RunSummary:
        """Finish recording and classify the run against the trail."""

        stats = self.aggregator.snapshot()
        fixes = self.aggregator.finish()
        trail_key = self.trail_id if self.reference else None
        analysis = analyze_run(
            fixes,
            self.reference,
            self.preferences,
            trail_id=trail_key,
            cache=self._cache,
        )
        self._log.info(
            "Recording stopped: %d fixes, %.1f m in %.1f s, %d segments",
            len(fixes),
            stats.distance_m,
            stats.duration_s,
            len(analysis.segments),
        )
        return RunSummary(
            trail_id=self.trail_id,
            vehicle_id=self.vehicle_id,
            fixes=fixes,
            stats=stats,
            segments=analysis.segments,
        )


__all__ = ["RecordingSession"]
