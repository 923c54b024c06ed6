"""
API routes.

Endpoints:
- GET  `/api/health`: liveness check.
- GET  `/api/distance`: great-circle distance between two points.
- POST `/api/navigation`: main entrypoint; markers for the user's position.
- GET  `/api/places`: nearby places (uncapped list, for "places as links" views).
- GET  `/api/settings`: public settings for the front-end (credentials redacted).
"""

from __future__ import annotations

from functools import lru_cache

from fastapi import APIRouter, HTTPException, Query

from arnav.config.settings import get_settings
from arnav.core.cache import record_cache_stats
from arnav.core.geo import distance
from arnav.core.ingestion_meta import capture_ingestion_meta
from arnav.domain.models import (
    DestinationOut,
    DistanceResult,
    GeoPoint,
    NavigationRequest,
    NavigationResult,
    PlacesResult,
)
from arnav.navigation.planner import NavigationPlanner

router = APIRouter()


@lru_cache
def _planner() -> NavigationPlanner:
    return NavigationPlanner.from_settings(get_settings())


@router.get("/api/health")
def get_health() -> dict:
    return {"status": "ok"}


@router.get("/api/distance", response_model=DistanceResult)
def get_distance(
    from_lat: float = Query(..., ge=-90, le=90),
    from_lon: float = Query(..., ge=-180, le=180),
    to_lat: float = Query(..., ge=-90, le=90),
    to_lon: float = Query(..., ge=-180, le=180),
) -> DistanceResult:
    """Return the haversine distance in meters."""
    a = GeoPoint(latitude=from_lat, longitude=from_lon)
    b = GeoPoint(latitude=to_lat, longitude=to_lon)
    return DistanceResult(origin=a, target=b, distance_m=distance(a.to_coordinate(), b.to_coordinate()))


@router.post("/api/navigation", response_model=NavigationResult)
def post_navigation(request: NavigationRequest) -> NavigationResult:
    """Plan navigation markers for the given origin."""
    planner = _planner()
    try:
        with record_cache_stats() as stats, capture_ingestion_meta() as ing:
            plan = planner.plan(request.origin.to_coordinate(), use_places=request.use_places)
        return NavigationResult.from_plan(plan, meta={"cache": stats.as_dict(), "freshness": ing.sources})
    except ValueError as e:
        raise HTTPException(
            status_code=400,
            detail={"code": "VALIDATION_ERROR", "message": str(e)},
        ) from e
    except Exception as e:
        raise HTTPException(
            status_code=500,
            detail={"code": "INTERNAL_ERROR", "message": str(e)},
        ) from e


@router.get("/api/places", response_model=PlacesResult)
def get_places(
    lat: float = Query(..., ge=-90, le=90),
    lon: float = Query(..., ge=-180, le=180),
) -> PlacesResult:
    """Return every nearby place the source knows about (empty when unavailable)."""
    origin = GeoPoint(latitude=lat, longitude=lon)
    places = _planner().nearby_places(origin.to_coordinate())
    return PlacesResult(origin=origin, places=[DestinationOut.from_destination(p) for p in places])


@router.get("/api/settings")
def get_public_settings() -> dict:
    """Return safe-to-expose settings for the front-end (credentials removed)."""
    data = get_settings().model_dump(mode="json")
    fsq = data.get("places", {}).get("foursquare", {})
    fsq.pop("client_id", None)
    fsq.pop("client_secret", None)
    return {
        "app": {"name": data.get("app", {}).get("name")},
        "ar": data.get("ar", {}),
        "places": {"foursquare": fsq},
    }
