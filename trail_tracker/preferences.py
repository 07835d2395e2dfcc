"""User route preferences: colours and deviation thresholds."""

from __future__ import annotations

from dataclasses import dataclass
import math
from typing import Any, Mapping, Optional

from .config import (
    DEFAULT_CRITICAL_COLOR,
    DEFAULT_CRITICAL_THRESHOLD_FT,
    DEFAULT_LIVE_ROUTE_COLOR,
    DEFAULT_OFFICIAL_ROUTE_COLOR,
    DEFAULT_WARNING_COLOR,
    DEFAULT_WARNING_THRESHOLD_FT,
)
from .geometry.deviation import DeviationConfig
from .geometry.geomath import ft_to_m


@dataclass(frozen=True, slots=True)
class RoutePreferences:
    """Colours for run/trail polylines and the warn/critical offsets in feet."""

    live_color: str = DEFAULT_LIVE_ROUTE_COLOR
    official_color: str = DEFAULT_OFFICIAL_ROUTE_COLOR
    warn_color: str = DEFAULT_WARNING_COLOR
    critical_color: str = DEFAULT_CRITICAL_COLOR
    warning_threshold_ft: float = DEFAULT_WARNING_THRESHOLD_FT
    critical_threshold_ft: float = DEFAULT_CRITICAL_THRESHOLD_FT

    @classmethod
    def from_mapping(cls, prefs: Optional[Mapping[str, Any]]) -> "RoutePreferences":
        """Build preferences from a stored user payload, filling in defaults.

        Keys follow the backend's camelCase names (``liveRouteColor``,
        ``warningThreshold1`` and so on). Empty colours and unparsable
        thresholds fall back to the defaults, as does a threshold pair that
        is negative or inverted.
        """

        prefs = prefs or {}
        warning_ft = _threshold(
            prefs.get("warningThreshold1"), DEFAULT_WARNING_THRESHOLD_FT
        )
        critical_ft = _threshold(
            prefs.get("warningThreshold2"), DEFAULT_CRITICAL_THRESHOLD_FT
        )
        if not 0.0 <= warning_ft <= critical_ft:
            warning_ft = DEFAULT_WARNING_THRESHOLD_FT
            critical_ft = DEFAULT_CRITICAL_THRESHOLD_FT
        return cls(
            live_color=prefs.get("liveRouteColor") or DEFAULT_LIVE_ROUTE_COLOR,
            official_color=prefs.get("officialRouteColor")
            or DEFAULT_OFFICIAL_ROUTE_COLOR,
            warn_color=prefs.get("warningColor1") or DEFAULT_WARNING_COLOR,
            critical_color=prefs.get("warningColor2") or DEFAULT_CRITICAL_COLOR,
            warning_threshold_ft=warning_ft,
            critical_threshold_ft=critical_ft,
        )

    @property
    def run_signature(self) -> str:
        """Key identifying every setting that changes run segmentation."""

        return "|".join(
            (
                self.live_color,
                self.warn_color,
                self.critical_color,
                f"{self.warning_threshold_ft:g}",
                f"{self.critical_threshold_ft:g}",
            )
        )

    def deviation_config(self) -> DeviationConfig:
        """Return the segmenter configuration with thresholds in metres."""

        return DeviationConfig(
            normal_tag=self.live_color,
            warn_tag=self.warn_color,
            critical_tag=self.critical_color,
            warn_threshold_m=ft_to_m(self.warning_threshold_ft),
            critical_threshold_m=ft_to_m(self.critical_threshold_ft),
        )


def _threshold(value: Any, default: float) -> float:
    if value is None:
        return default
    try:
        number = float(value)
    except (TypeError, ValueError):
        return default
    return number if math.isfinite(number) else default


__all__ = ["RoutePreferences"]
