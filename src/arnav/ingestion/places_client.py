"""
Nearby places client (Foursquare venues search, v2 API).

This module is responsible only for:
- calling the venues-search endpoint around a position,
- reducing each venue to an `ExternalPlace` (name + coordinate),
- caching the reduced list on disk with stale-if-error fallback.

Picking which places become navigation targets is `arnav.navigation`'s job.
"""

from __future__ import annotations

import logging
import time
from typing import Any

import httpx

from arnav.config.settings import Settings
from arnav.core.cache import FileCache
from arnav.core.geo import GeoCoordinate
from arnav.core.http import get_json
from arnav.core.ingestion_meta import record_ingestion_source
from arnav.navigation.destinations import ExternalPlace

logger = logging.getLogger(__name__)

CACHE_NAMESPACE = "places"


def parse_venues(payload: Any) -> list[ExternalPlace]:
    """Reduce a venues-search response to `ExternalPlace` records (source order kept).

    Venues without a name or a numeric `location.lat`/`location.lng` are skipped.

    Raises:
        ValueError: If the payload has no `response.venues` list.
    """
    response = payload.get("response") if isinstance(payload, dict) else None
    venues = response.get("venues") if isinstance(response, dict) else None
    if not isinstance(venues, list):
        raise ValueError("Places response is missing response.venues.")

    out: list[ExternalPlace] = []
    for venue in venues:
        if not isinstance(venue, dict):
            continue
        name = venue.get("name")
        location = venue.get("location") or {}
        try:
            lat = float(location["lat"])
            lng = float(location["lng"])
        except (KeyError, TypeError, ValueError):
            continue
        if not isinstance(name, str) or not name.strip():
            continue
        out.append(ExternalPlace(name=name.strip(), coordinate=GeoCoordinate(latitude=lat, longitude=lng)))
    return out


def _places_to_json(places: list[ExternalPlace]) -> list[dict[str, Any]]:
    return [
        {"name": p.name, "lat": p.coordinate.latitude, "lon": p.coordinate.longitude}
        for p in places
    ]


def _places_from_json(items: list[dict[str, Any]]) -> list[ExternalPlace]:
    return [
        ExternalPlace(name=str(i["name"]), coordinate=GeoCoordinate(latitude=float(i["lat"]), longitude=float(i["lon"])))
        for i in items
    ]


class FoursquarePlacesClient:
    """Foursquare venues-search client with on-disk caching."""

    def __init__(self, settings: Settings, cache: FileCache):
        self._settings = settings
        self._cache = cache

    @staticmethod
    def _stale_ok(exc: Exception) -> bool:
        return isinstance(exc, httpx.HTTPError)

    def _require_credentials(self) -> tuple[str, str]:
        """Return (client_id, client_secret) or raise if missing."""
        fsq = self._settings.places.foursquare
        if not fsq.client_id or not fsq.client_secret:
            raise RuntimeError(
                "Foursquare credentials are not configured. "
                "Set FOURSQUARE_CLIENT_ID and FOURSQUARE_CLIENT_SECRET."
            )
        return fsq.client_id, fsq.client_secret

    def _fetch_venues(self, position: GeoCoordinate, *, radius_m: int, limit: int) -> Any:
        """Call the venues-search endpoint and return the raw JSON response."""
        client_id, client_secret = self._require_credentials()
        fsq = self._settings.places.foursquare
        params = {
            "intent": fsq.intent,
            "ll": f"{position.latitude},{position.longitude}",
            "radius": radius_m,
            "client_id": client_id,
            "client_secret": client_secret,
            "limit": limit,
            "v": fsq.version,
        }
        return get_json(
            fsq.base_url,
            params=params,
            timeout_seconds=self._settings.app.http_timeout_seconds,
        )

    def search_nearby(
        self,
        position: GeoCoordinate,
        *,
        radius_m: int | None = None,
        limit: int | None = None,
    ) -> list[ExternalPlace]:
        """Return nearby places around `position`, in the order the API ranked them.

        Raises:
            RuntimeError: If credentials are missing (and nothing is cached).
            httpx.HTTPError: On upstream failure with no cached value to fall back to.
            ValueError: If the upstream response has an unexpected shape.
        """
        fsq = self._settings.places.foursquare
        radius = int(radius_m if radius_m is not None else self._settings.ar.search_radius_m)
        count = int(limit if limit is not None else fsq.limit)
        ttl_seconds = int(fsq.cache_ttl_seconds)
        cache_key = f"venues:{position.latitude:.4f}:{position.longitude:.4f}:{radius}:{count}"
        source_name = f"places:foursquare:{position.latitude:.4f},{position.longitude:.4f}"

        cached = self._cache.get(CACHE_NAMESPACE, cache_key, ttl_seconds=ttl_seconds)
        if isinstance(cached, list):
            meta = self._cache.get_entry_meta(CACHE_NAMESPACE, cache_key) or {}
            record_ingestion_source(source_name, {"mode": "cache", "as_of_unix": meta.get("created_at_unix")})
            return _places_from_json(cached)

        logger.info(
            "Fetching places for lat=%.4f lon=%.4f radius=%sm limit=%s",
            position.latitude,
            position.longitude,
            radius,
            count,
        )
        try:
            payload = self._fetch_venues(position, radius_m=radius, limit=count)
            items = _places_to_json(parse_venues(payload))
        except Exception as exc:
            stale = self._cache.get_stale(CACHE_NAMESPACE, cache_key) if self._stale_ok(exc) else None
            if not isinstance(stale, list):
                record_ingestion_source(source_name, {"mode": "none"})
                raise
            meta = self._cache.get_entry_meta(CACHE_NAMESPACE, cache_key) or {}
            logger.warning("Places lookup failed (%s); serving stale cache from %s", exc, meta.get("created_at_unix"))
            record_ingestion_source(source_name, {"mode": "stale", "as_of_unix": meta.get("created_at_unix")})
            return _places_from_json(stale)

        self._cache.set(CACHE_NAMESPACE, cache_key, items, ttl_seconds=ttl_seconds)
        record_ingestion_source(source_name, {"mode": "live", "as_of_unix": int(time.time())})
        return _places_from_json(items)
