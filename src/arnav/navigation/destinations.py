"""
Navigation destination derivation.

Given the user's position and (optionally) a list of nearby places, pick the
small, ordered set of targets the AR layer should point at:
- places, when a source returned any, in source order (first `MAX_DESTINATIONS`);
- otherwise a fixed compass fan of points around the user.

The fallback offsets are raw degree deltas (~100 m / ~150 m at mid latitudes).
They are not corrected for latitude, so east/west points move closer to the user
toward the poles.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Sequence

from arnav.core.geo import GeoCoordinate

MAX_DESTINATIONS = 5

# (name, dlat, dlon) in the order markers are emitted.
FALLBACK_OFFSETS: tuple[tuple[str, float, float], ...] = (
    ("North", 0.0009, 0.0),
    ("East", 0.0, 0.0009),
    ("South", -0.0009, 0.0),
    ("West", 0.0, -0.0009),
    ("Northeast", 0.00135, 0.00135),
)


@dataclass(frozen=True)
class ExternalPlace:
    """A nearby place from an external source, reduced to name + coordinate."""

    name: str
    coordinate: GeoCoordinate


@dataclass(frozen=True)
class Destination:
    """A named navigation target."""

    name: str
    coordinate: GeoCoordinate


DestinationSet = tuple[Destination, ...]


def fallback_destinations(reference: GeoCoordinate) -> DestinationSet:
    """Synthesize the fixed compass fan around `reference`."""
    return tuple(
        Destination(name=name, coordinate=reference.offset(dlat, dlon))
        for name, dlat, dlon in FALLBACK_OFFSETS
    )


def derive_destinations(
    reference: GeoCoordinate,
    external: Sequence[ExternalPlace] | None = None,
) -> DestinationSet:
    """Return at most `MAX_DESTINATIONS` targets for `reference`.

    `None` and an empty sequence both mean "no external data" and select the
    fallback fan. Fewer than `MAX_DESTINATIONS` places are returned as-is, never
    padded with fallback points.
    """
    if not external:
        return fallback_destinations(reference)
    return tuple(
        Destination(name=place.name, coordinate=place.coordinate)
        for place in list(external)[:MAX_DESTINATIONS]
    )
