"""
Geodesy helpers.

A tiny spherical-Earth layer: enough to label AR markers with a distance and to
place fallback points around the user, without pulling in a GIS stack.
"""

from __future__ import annotations

from dataclasses import dataclass
from math import atan2, cos, isfinite, radians, sin, sqrt

EARTH_RADIUS_M = 6_371_000


@dataclass(frozen=True)
class GeoCoordinate:
    """A latitude/longitude pair in decimal degrees (not range-checked)."""

    latitude: float
    longitude: float

    def offset(self, dlat: float = 0.0, dlon: float = 0.0) -> "GeoCoordinate":
        """Return a new coordinate shifted by raw degree deltas."""
        return GeoCoordinate(latitude=self.latitude + dlat, longitude=self.longitude + dlon)


def distance(a: GeoCoordinate, b: GeoCoordinate) -> float:
    """Great-circle distance in meters (haversine, mean Earth radius)."""
    phi1 = radians(a.latitude)
    phi2 = radians(b.latitude)
    dphi = radians(b.latitude - a.latitude)
    dlambda = radians(b.longitude - a.longitude)
    if not (isfinite(dphi) and isfinite(dlambda)):
        # sin() raises on inf; huge out-of-range input overflows the deltas.
        return float("nan")

    h = sin(dphi / 2) ** 2 + cos(phi1) * cos(phi2) * sin(dlambda / 2) ** 2
    # abs() keeps sqrt from raising when rounding or out-of-range input pushes h outside [0, 1].
    return 2 * EARTH_RADIUS_M * atan2(sqrt(abs(h)), sqrt(abs(1 - h)))
