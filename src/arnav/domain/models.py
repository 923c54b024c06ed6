"""
API/CLI boundary models (Pydantic).

The navigation core works on plain frozen dataclasses and does not range-check
anything. These models are where user input is validated (latitude/longitude ranges)
and where plans are turned into consistent JSON for the CLI `--json` output and the API.
"""

from __future__ import annotations

from typing import Any, Literal

from pydantic import BaseModel, Field

from arnav.core.geo import GeoCoordinate
from arnav.navigation.destinations import Destination
from arnav.navigation.planner import NavigationPlan


class GeoPoint(BaseModel):
    """A geographic point in decimal degrees."""

    latitude: float = Field(..., ge=-90, le=90)
    longitude: float = Field(..., ge=-180, le=180)

    def to_coordinate(self) -> GeoCoordinate:
        return GeoCoordinate(latitude=self.latitude, longitude=self.longitude)


class CoordinateOut(BaseModel):
    """A computed or upstream-supplied coordinate, echoed as-is.

    Fallback offsets near a pole or the antimeridian and odd venue records can land
    outside the usual ranges, so output is not range-checked.
    """

    latitude: float
    longitude: float

    @classmethod
    def from_coordinate(cls, c: GeoCoordinate) -> "CoordinateOut":
        return cls(latitude=c.latitude, longitude=c.longitude)


class NavigationRequest(BaseModel):
    origin: GeoPoint
    use_places: bool = True


class DestinationOut(BaseModel):
    name: str
    location: CoordinateOut

    @classmethod
    def from_destination(cls, d: Destination) -> "DestinationOut":
        return cls(name=d.name, location=CoordinateOut.from_coordinate(d.coordinate))


class NavigationTargetOut(BaseModel):
    destination: DestinationOut
    distance_m: float
    color: str
    label: str
    summary: str


class NavigationResult(BaseModel):
    """A navigation plan plus request metadata (cache stats, freshness)."""

    origin: CoordinateOut
    source: Literal["places", "fallback"]
    targets: list[NavigationTargetOut]
    meta: dict[str, Any] = Field(default_factory=dict)

    @classmethod
    def from_plan(cls, plan: NavigationPlan, meta: dict[str, Any] | None = None) -> "NavigationResult":
        return cls(
            origin=CoordinateOut.from_coordinate(plan.origin),
            source=plan.source,
            targets=[
                NavigationTargetOut(
                    destination=DestinationOut.from_destination(t.destination),
                    distance_m=t.distance_m,
                    color=t.color,
                    label=t.label,
                    summary=t.summary,
                )
                for t in plan.targets
            ],
            meta=meta or {},
        )


class DistanceResult(BaseModel):
    origin: GeoPoint
    target: GeoPoint
    distance_m: float


class PlacesResult(BaseModel):
    origin: GeoPoint
    places: list[DestinationOut]
