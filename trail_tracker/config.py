"""Central configuration for the trail tracking analytics core.

All values are constants imported by the rest of the package. Numeric settings
can be overridden through environment variables (optionally via a local
`.env`).
"""

from __future__ import annotations

import importlib
import os


def _env_float(key: str, default: float) -> float:
    value = os.getenv(key)
    if value is None:
        return default
    try:
        return float(value)
    except ValueError:
        return default


def _env_int(key: str, default: int) -> int:
    value = os.getenv(key)
    if value is None:
        return default
    try:
        return int(value)
    except ValueError:
        return default


# Load .env variables when python-dotenv is available.
_load_dotenv = None
try:
    _dotenv_mod = importlib.import_module("dotenv")
    _load_dotenv = getattr(_dotenv_mod, "load_dotenv", None)
except Exception:
    _load_dotenv = None

if callable(_load_dotenv):
    # Load .env from the current directory or any parent folder.
    _load_dotenv()


# ---------------------------------------------------------------------------
# Geometry constants
# ---------------------------------------------------------------------------
# Metres per degree of latitude used by the local equirectangular projection.
METERS_PER_DEGREE = 111_320.0

# Mean Earth radius (metres) used by the haversine distance.
EARTH_RADIUS_M = 6_371_000.0

FEET_TO_METERS = 0.3048


# ---------------------------------------------------------------------------
# Route colour defaults
# ---------------------------------------------------------------------------
# Colours used when a user has not stored route preferences.
DEFAULT_LIVE_ROUTE_COLOR = os.getenv("TRAIL_LIVE_ROUTE_COLOR", "#1E90FF")
DEFAULT_OFFICIAL_ROUTE_COLOR = os.getenv("TRAIL_OFFICIAL_ROUTE_COLOR", "#000000")
DEFAULT_WARNING_COLOR = os.getenv("TRAIL_WARNING_COLOR", "#FFA500")
DEFAULT_CRITICAL_COLOR = os.getenv("TRAIL_CRITICAL_COLOR", "#FF0000")


# ---------------------------------------------------------------------------
# Deviation thresholds
# ---------------------------------------------------------------------------
# Offsets (feet) from the official trail at which a run turns warn / critical.
DEFAULT_WARNING_THRESHOLD_FT = _env_float("TRAIL_WARNING_THRESHOLD_FT", 50.0)
DEFAULT_CRITICAL_THRESHOLD_FT = _env_float("TRAIL_CRITICAL_THRESHOLD_FT", 75.0)


# ---------------------------------------------------------------------------
# Recording
# ---------------------------------------------------------------------------
# Distance (metres) from the trail end point that counts as finishing a run.
FINISH_RADIUS_M = _env_float("TRAIL_FINISH_RADIUS_M", 6.0)


# ---------------------------------------------------------------------------
# Segmentation budget
# ---------------------------------------------------------------------------
# Segmentation scans the whole reference for each run point, so both
# polylines are reduced to this many points before analysis.
SEGMENTATION_MAX_POINTS = _env_int("TRAIL_SEGMENTATION_MAX_POINTS", 300)

# Initial simplification tolerance (metres) applied before decimation.
SEGMENTATION_SIMPLIFICATION_TOLERANCE_M = _env_float(
    "TRAIL_SEGMENTATION_SIMPLIFICATION_TOLERANCE_M", 1.0
)

# Maximum number of prepared reference trails kept in memory.
REFERENCE_CACHE_SIZE = _env_int("TRAIL_REFERENCE_CACHE_SIZE", 64)
