"""Live recording: incremental statistics and session handling."""

from .aggregator import IDLE, RECORDING, TrackAggregator
from .session import RecordingSession

__all__ = ["IDLE", "RECORDING", "TrackAggregator", "RecordingSession"]
