"""Trail tracking analytics: route deviation and live run statistics."""

from .analysis import RunAnalysis, analyze_run
from .errors import PolylineDecodeError, RecordingStateError, TrailTrackerError
from .geometry import DeviationConfig, segment_deviation
from .models import (
    ColoredSegment,
    DeviationSummary,
    GeoPoint,
    LiveStats,
    RunSummary,
    TrackFix,
)
from .preferences import RoutePreferences
from .tracking import RecordingSession, TrackAggregator

__all__ = [
    "analyze_run",
    "RunAnalysis",
    "DeviationConfig",
    "segment_deviation",
    "ColoredSegment",
    "DeviationSummary",
    "GeoPoint",
    "LiveStats",
    "RunSummary",
    "TrackFix",
    "RoutePreferences",
    "RecordingSession",
    "TrackAggregator",
    "PolylineDecodeError",
    "RecordingStateError",
    "TrailTrackerError",
]
