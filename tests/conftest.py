"""Global pytest fixtures & helpers.

Adds project root to path and provides reusable route and fix fixtures for
geometry and recording tests.
"""
from __future__ import annotations

import os
import sys
import pytest

ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
if ROOT not in sys.path:
    sys.path.insert(0, ROOT)

from trail_tracker.analysis import REFERENCE_CACHE
from trail_tracker.geometry.deviation import DeviationConfig
from trail_tracker.models import GeoPoint, TrackFix

# One degree of latitude under the haversine radius used by the package.
METERS_PER_DEGREE_LAT = 111_194.93


# --- Factory helpers -------------------------------------------------
def make_fix(lat, lon, t_ms, speed=-1.0):
    return TrackFix(latitude=lat, longitude=lon, speed=speed, timestamp=t_ms)


def make_route(*pairs):
    return tuple(GeoPoint(lat, lon) for lat, lon in pairs)


# --- Fixtures --------------------------------------------------------
@pytest.fixture(autouse=True)
def clear_reference_cache():
    REFERENCE_CACHE.clear()
    yield
    REFERENCE_CACHE.clear()


@pytest.fixture
def deviation_config():
    return DeviationConfig(
        normal_tag="blue",
        warn_tag="orange",
        critical_tag="red",
        warn_threshold_m=15.24,
        critical_threshold_m=22.86,
    )


@pytest.fixture
def equator_reference():
    """Reference trail running ~111 m east along the equator."""
    return make_route((0.0, 0.0), (0.0, 0.001))


@pytest.fixture
def straight_run_fixes():
    """Three fixes one second apart, moving ~2 m north each second."""
    step = 2.0 / METERS_PER_DEGREE_LAT
    return [
        make_fix(45.0, 7.0, 0, speed=2.0),
        make_fix(45.0 + step, 7.0, 1000, speed=3.0),
        make_fix(45.0 + 2 * step, 7.0, 2000, speed=4.0),
    ]
