"""Central error types used across the package."""

from __future__ import annotations


class TrailTrackerError(RuntimeError):
    """Base error for trail tracking failures."""


class RecordingStateError(TrailTrackerError):
    """Raised when a recording operation is called outside its session state."""


class PolylineDecodeError(TrailTrackerError, ValueError):
    """Raised when an encoded polyline string cannot be decoded."""


__all__ = [
    "TrailTrackerError",
    "RecordingStateError",
    "PolylineDecodeError",
]
