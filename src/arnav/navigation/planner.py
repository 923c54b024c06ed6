"""
Navigation planner.

The glue between a position fix, the places source and the AR front-end:
1) ask the places client for nearby venues (fail open: any error means "no data"),
2) derive the bounded destination set (`derive_destinations`),
3) decorate each destination with what a marker needs: distance, color, label text.

Acquiring the position and drawing the markers belong to the caller.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from typing import Literal

from arnav.config.settings import Settings
from arnav.core.cache import FileCache
from arnav.core.env import resolve_project_path
from arnav.core.geo import GeoCoordinate, distance
from arnav.ingestion.places_client import FoursquarePlacesClient
from arnav.navigation.destinations import Destination, ExternalPlace, derive_destinations

logger = logging.getLogger(__name__)

PlanSource = Literal["places", "fallback"]


def rounded_meters(distance_m: float) -> float | int:
    """Nearest whole meter, halves rounded up (100.5 -> 101)."""
    if not math.isfinite(distance_m):
        return distance_m
    return math.floor(distance_m + 0.5)


@dataclass(frozen=True)
class NavigationTarget:
    """One AR marker: a destination plus its presentation data."""

    destination: Destination
    distance_m: float
    color: str
    label: str
    summary: str


@dataclass(frozen=True)
class NavigationPlan:
    origin: GeoCoordinate
    source: PlanSource
    targets: tuple[NavigationTarget, ...]


def marker_label(destination: Destination, distance_m: float) -> str:
    """Text shown above the marker: name, then rounded meters."""
    return f"{destination.name}\n{rounded_meters(distance_m)}m"


def marker_summary(destination: Destination, distance_m: float) -> str:
    """Text shown when the marker is tapped."""
    c = destination.coordinate
    return (
        f"{destination.name}\n"
        f"Distance: {rounded_meters(distance_m)} meters\n"
        f"Lat: {c.latitude:.6f}\n"
        f"Lon: {c.longitude:.6f}"
    )


def build_cache(settings: Settings) -> FileCache:
    return FileCache(
        resolve_project_path(settings.cache.dir),
        enabled=settings.cache.enabled,
        default_ttl_seconds=settings.cache.default_ttl_seconds,
    )


class NavigationPlanner:
    """Builds navigation plans for a position; holds config, no per-request state."""

    def __init__(self, settings: Settings, places_client: FoursquarePlacesClient | None = None):
        self._settings = settings
        self._places_client = places_client

    @classmethod
    def from_settings(cls, settings: Settings) -> "NavigationPlanner":
        """Planner wired to the Foursquare client and the configured file cache."""
        return cls(settings, FoursquarePlacesClient(settings, build_cache(settings)))

    def fetch_places(self, position: GeoCoordinate) -> list[ExternalPlace] | None:
        """Nearby places, or None when unavailable (no client, upstream error, bad data)."""
        if self._places_client is None:
            return None
        try:
            return self._places_client.search_nearby(
                position, radius_m=self._settings.ar.search_radius_m
            )
        except Exception as e:
            # Fail open: the fallback fan still gives the user something to walk to.
            logger.warning(
                "Places lookup failed for lat=%.5f lon=%.5f: %s",
                position.latitude,
                position.longitude,
                str(e),
            )
            return None

    def plan(self, position: GeoCoordinate, *, use_places: bool = True) -> NavigationPlan:
        """Derive destinations for `position` and decorate them as AR markers."""
        places = self.fetch_places(position) if use_places else None
        destinations = derive_destinations(position, places)
        source: PlanSource = "places" if places else "fallback"
        if source == "places":
            logger.info("Loaded %d places; using %d as destinations", len(places or []), len(destinations))
        else:
            logger.info("Using static fallback destinations")

        colors = self._settings.ar.marker_colors
        targets = []
        for index, dest in enumerate(destinations):
            d = distance(position, dest.coordinate)
            targets.append(
                NavigationTarget(
                    destination=dest,
                    distance_m=d,
                    color=colors[index % len(colors)],
                    label=marker_label(dest, d),
                    summary=marker_summary(dest, d),
                )
            )
        return NavigationPlan(origin=position, source=source, targets=tuple(targets))

    def nearby_places(self, position: GeoCoordinate) -> list[Destination]:
        """Every place the source returned (no 5-target cap); empty when unavailable."""
        places = self.fetch_places(position) or []
        return [Destination(name=p.name, coordinate=p.coordinate) for p in places]
