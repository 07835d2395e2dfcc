"""Incremental statistics over the fixes of one recording session."""

from __future__ import annotations

import logging
import math
import time
from typing import Callable, List, Optional, Tuple

from ..errors import RecordingStateError
from ..geometry.geomath import haversine_m
from ..models import LiveStats, TrackFix

IDLE = "idle"
RECORDING = "recording"


class TrackAggregator:
    """Own the growing fix sequence of a run and keep live totals.

    Each accepted fix updates the totals in constant time. A fix repeating the
    exact coordinates of the previously accepted one is dropped, since GPS
    providers repeat stationary readings. The aggregator is not safe for
    concurrent producers; ``add_fix``, ``snapshot`` and ``finish`` must be
    serialised by the caller.
    """

    def __init__(self, clock: Callable[[], float] = time.time) -> None:
        self._clock = clock
        self._log = logging.getLogger(self.__class__.__name__)
        self._state = IDLE
        self._started_at: Optional[float] = None
        self._reset()

    def _reset(self) -> None:
        self._fixes: List[TrackFix] = []
        self._distance_m = 0.0
        self._duration_s = 0.0
        self._min_speed: Optional[float] = None
        self._max_speed: Optional[float] = None

    @property
    def state(self) -> str:
        return self._state

    @property
    def is_recording(self) -> bool:
        return self._state == RECORDING

    @property
    def started_at(self) -> Optional[float]:
        """Wall-clock time (epoch seconds) at which recording started."""

        return self._started_at

    @property
    def fixes(self) -> Tuple[TrackFix, ...]:
        return tuple(self._fixes)

    @property
    def last_fix(self) -> Optional[TrackFix]:
        return self._fixes[-1] if self._fixes else None

    def start(self) -> None:
        """Begin a new session, discarding any previously held fixes."""

        self._reset()
        self._started_at = self._clock()
        self._state = RECORDING

    def add_fix(self, fix: TrackFix) -> bool:
        """Append ``fix`` and update the totals.

        Returns:
            ``True`` when the fix was accepted, ``False`` when it was dropped
            as a duplicate or for non-finite coordinates.

        Raises:
            RecordingStateError: If the aggregator is not recording.
        """

        if self._state != RECORDING:
            raise RecordingStateError("add_fix() called while not recording")
        if not (math.isfinite(fix.latitude) and math.isfinite(fix.longitude)):
            self._log.debug(
                "Dropping fix with non-finite coordinates at %s", fix.timestamp
            )
            return False

        last = self.last_fix
        if last is not None:
            if fix.latitude == last.latitude and fix.longitude == last.longitude:
                return False
            self._distance_m += haversine_m(last, fix)
            first = self._fixes[0]
            self._duration_s = max(0.0, (fix.timestamp - first.timestamp) / 1000.0)

        if fix.speed_known:
            if self._min_speed is None or fix.speed < self._min_speed:
                self._min_speed = fix.speed
            if self._max_speed is None or fix.speed > self._max_speed:
                self._max_speed = fix.speed

        self._fixes.append(fix)
        return True

    def snapshot(self) -> LiveStats:
        """Return the current totals without modifying them."""

        duration = self._duration_s
        avg_speed = self._distance_m / duration if duration > 0 else 0.0
        return LiveStats(
            distance_m=self._distance_m,
            duration_s=duration,
            avg_speed=avg_speed,
            min_speed=self._min_speed if self._min_speed is not None else 0.0,
            max_speed=self._max_speed if self._max_speed is not None else 0.0,
        )

    def finish(self) -> Tuple[TrackFix, ...]:
        """Close the session and return its fixes in arrival order.

        Raises:
            RecordingStateError: If the aggregator is not recording.
        """

        if self._state != RECORDING:
            raise RecordingStateError("finish() called while not recording")
        self._state = IDLE
        fixes = tuple(self._fixes)
        self._log.debug(
            "Recording finished with %d fixes over %.1f m",
            len(fixes),
            self._distance_m,
        )
        return fixes


__all__ = ["IDLE", "RECORDING", "TrackAggregator"]
