"""Dataclasses describing GPS samples, routes and analysis results."""

from __future__ import annotations

from dataclasses import dataclass, field
import math
from typing import Tuple


@dataclass(frozen=True, slots=True)
class GeoPoint:
    """A single latitude/longitude position in decimal degrees."""

    latitude: float
    longitude: float

    def __post_init__(self) -> None:
        if not (math.isfinite(self.latitude) and math.isfinite(self.longitude)):
            raise ValueError("GeoPoint coordinates must be finite")
        if abs(self.latitude) > 90.0:
            raise ValueError(f"Latitude {self.latitude} is outside [-90, 90]")
        if abs(self.longitude) > 180.0:
            raise ValueError(f"Longitude {self.longitude} is outside [-180, 180]")


Route = Tuple[GeoPoint, ...]


@dataclass(frozen=True, slots=True)
class TrackFix:
    """One GPS sample delivered by the location provider.

    Attributes:
        latitude: Latitude in decimal degrees.
        longitude: Longitude in decimal degrees.
        speed: Speed in metres/second. Negative or NaN means unknown.
        heading: Course over ground in degrees.
        altitude: Altitude in metres.
        accuracy: Horizontal accuracy in metres.
        timestamp: Unix epoch milliseconds.
    """

    latitude: float
    longitude: float
    speed: float = -1.0
    heading: float = 0.0
    altitude: float = 0.0
    accuracy: float = 0.0
    timestamp: int = 0

    @property
    def point(self) -> GeoPoint:
        """Position of the fix as an immutable :class:`GeoPoint`."""

        return GeoPoint(self.latitude, self.longitude)

    @property
    def speed_known(self) -> bool:
        return not math.isnan(self.speed) and self.speed >= 0.0


@dataclass(frozen=True, slots=True)
class ColoredSegment:
    """Contiguous part of a run sharing one deviation classification."""

    color: str
    points: Route


@dataclass(frozen=True, slots=True)
class LiveStats:
    """Running totals for a recording session."""

    distance_m: float = 0.0
    duration_s: float = 0.0
    avg_speed: float = 0.0
    min_speed: float = 0.0
    max_speed: float = 0.0


@dataclass(frozen=True, slots=True)
class DeviationSummary:
    """The largest offset of a run from its reference trail."""

    index: int
    offset_m: float
    point: GeoPoint


@dataclass(slots=True)
class RunSummary:
    """Outcome of one recording session, ready for a persistence collaborator."""

    trail_id: int | str | None
    vehicle_id: int | str | None
    fixes: Tuple[TrackFix, ...]
    stats: LiveStats
    segments: list[ColoredSegment] = field(default_factory=list)

    def as_record(self) -> dict:
        """Return the run record fields expected by the backend."""

        return {
            "trailId": self.trail_id,
            "coords": [
                {
                    "latitude": fix.latitude,
                    "longitude": fix.longitude,
                    "speed": fix.speed if fix.speed_known else None,
                    "heading": fix.heading,
                    "altitude": fix.altitude,
                    "accuracy": fix.accuracy,
                    "timestamp": fix.timestamp,
                }
                for fix in self.fixes
            ],
            "duration": self.stats.duration_s,
            "avgSpeed": self.stats.avg_speed,
            "distance": self.stats.distance_m,
            "vehicleId": self.vehicle_id,
        }
