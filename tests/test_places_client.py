import httpx
import pytest

from arnav.core.cache import FileCache, record_cache_stats
from arnav.core.geo import GeoCoordinate
from arnav.core.ingestion_meta import capture_ingestion_meta
from arnav.ingestion.places_client import FoursquarePlacesClient, parse_venues

from conftest import venues_payload

POS = GeoCoordinate(latitude=40.7580, longitude=-73.9855)


def test_parse_venues_keeps_order_and_skips_incomplete_records():
    payload = venues_payload(("Cafe", 40.1, -73.1), ("Museum", 40.2, -73.2))
    payload["response"]["venues"].insert(1, {"name": "No location"})
    payload["response"]["venues"].append({"location": {"lat": 1, "lng": 2}})
    payload["response"]["venues"].append({"name": "Bad lat", "location": {"lat": "x", "lng": 2}})

    places = parse_venues(payload)

    assert [p.name for p in places] == ["Cafe", "Museum"]
    assert places[1].coordinate == GeoCoordinate(40.2, -73.2)


def test_parse_venues_rejects_unexpected_shape():
    with pytest.raises(ValueError, match="response.venues"):
        parse_venues({"meta": {"code": 400}})


def test_search_nearby_sends_configured_query(monkeypatch, tmp_path, settings_with_credentials):
    seen = {}

    def fake_get_json(url, *, params=None, headers=None, timeout_seconds=15):  # noqa: ARG001
        seen["url"] = url
        seen["params"] = params
        return venues_payload(("Times Square", 40.758, -73.9855))

    monkeypatch.setattr("arnav.ingestion.places_client.get_json", fake_get_json)
    client = FoursquarePlacesClient(settings_with_credentials, FileCache(tmp_path, enabled=False))

    places = client.search_nearby(POS, radius_m=300)

    assert [p.name for p in places] == ["Times Square"]
    assert seen["url"] == "https://api.foursquare.com/v2/venues/search"
    params = seen["params"]
    assert params["ll"] == "40.758,-73.9855"
    assert params["radius"] == 300
    assert params["intent"] == "checkin"
    assert params["client_id"] == "test-id"
    assert params["client_secret"] == "test-secret"
    assert params["limit"] == settings_with_credentials.places.foursquare.limit
    assert params["v"] == "20300101"


def test_search_nearby_requires_credentials(monkeypatch, tmp_path):
    from arnav.config.settings import get_settings

    settings = get_settings()
    fsq = settings.places.foursquare.model_copy(update={"client_id": None, "client_secret": None})
    settings = settings.model_copy(update={"places": settings.places.model_copy(update={"foursquare": fsq})})

    def fail_get_json(*_args, **_kwargs):
        raise AssertionError("network must not be called without credentials")

    monkeypatch.setattr("arnav.ingestion.places_client.get_json", fail_get_json)
    client = FoursquarePlacesClient(settings, FileCache(tmp_path, enabled=False))

    with pytest.raises(RuntimeError, match="FOURSQUARE_CLIENT_ID"):
        client.search_nearby(POS)


def test_search_nearby_serves_cache_then_stale_on_error(monkeypatch, tmp_path, settings_with_credentials):
    calls = []

    def fake_get_json(url, *, params=None, headers=None, timeout_seconds=15):  # noqa: ARG001
        calls.append(params)
        if len(calls) > 1:
            raise httpx.ConnectError("upstream down")
        return venues_payload(("Park", 40.76, -73.98))

    monkeypatch.setattr("arnav.ingestion.places_client.get_json", fake_get_json)
    monkeypatch.setattr("arnav.core.cache.time.time", lambda: 0)
    client = FoursquarePlacesClient(settings_with_credentials, FileCache(tmp_path, enabled=True))

    with capture_ingestion_meta() as meta:
        first = client.search_nearby(POS)
        second = client.search_nearby(POS)
    assert first == second
    assert len(calls) == 1
    assert [s["mode"] for s in meta.sources.values()] == ["cache"]

    # Past the TTL the upstream is asked again; it fails, so the expired list is served.
    monkeypatch.setattr("arnav.core.cache.time.time", lambda: 10_000)
    with capture_ingestion_meta() as meta:
        stale = client.search_nearby(POS)
    assert stale == first
    assert len(calls) == 2
    assert [s["mode"] for s in meta.sources.values()] == ["stale"]


def test_search_nearby_raises_when_nothing_cached(monkeypatch, tmp_path, settings_with_credentials):
    def fake_get_json(url, *, params=None, headers=None, timeout_seconds=15):  # noqa: ARG001
        request = httpx.Request("GET", url)
        response = httpx.Response(500, request=request)
        raise httpx.HTTPStatusError("500", request=request, response=response)

    monkeypatch.setattr("arnav.ingestion.places_client.get_json", fake_get_json)
    client = FoursquarePlacesClient(settings_with_credentials, FileCache(tmp_path, enabled=True))

    with capture_ingestion_meta() as meta, pytest.raises(httpx.HTTPStatusError):
        client.search_nearby(POS)
    assert [s["mode"] for s in meta.sources.values()] == ["none"]


def test_cold_lookup_counts_a_single_miss(monkeypatch, tmp_path, settings_with_credentials):
    monkeypatch.setattr(
        "arnav.ingestion.places_client.get_json",
        lambda *_args, **_kwargs: venues_payload(("Pier", 40.7, -74.0)),
    )
    client = FoursquarePlacesClient(settings_with_credentials, FileCache(tmp_path, enabled=True))

    with record_cache_stats() as stats:
        client.search_nearby(POS)
        client.search_nearby(POS)

    assert stats.as_dict() == {"hits": 1, "misses": 1, "expired": 0, "sets": 1, "stale_reads": 0}


def test_expired_lookup_falling_back_to_stale_counts_once(monkeypatch, tmp_path, settings_with_credentials):
    monkeypatch.setattr("arnav.core.cache.time.time", lambda: 0)
    cache = FileCache(tmp_path, enabled=True)
    client = FoursquarePlacesClient(settings_with_credentials, cache)
    monkeypatch.setattr(
        "arnav.ingestion.places_client.get_json",
        lambda *_args, **_kwargs: venues_payload(("Pier", 40.7, -74.0)),
    )
    client.search_nearby(POS)

    def down(*_args, **_kwargs):
        raise httpx.ConnectError("upstream down")

    monkeypatch.setattr("arnav.ingestion.places_client.get_json", down)
    monkeypatch.setattr("arnav.core.cache.time.time", lambda: 10_000)
    with record_cache_stats() as stats:
        assert [p.name for p in client.search_nearby(POS)] == ["Pier"]

    assert stats.as_dict() == {"hits": 0, "misses": 1, "expired": 1, "sets": 0, "stale_reads": 1}
