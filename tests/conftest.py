import pytest

from arnav.config.settings import Settings, get_settings


@pytest.fixture
def settings_with_credentials() -> Settings:
    settings = get_settings()
    fsq = settings.places.foursquare.model_copy(update={"client_id": "test-id", "client_secret": "test-secret"})
    places = settings.places.model_copy(update={"foursquare": fsq})
    return settings.model_copy(update={"places": places})


def venues_payload(*venues: tuple[str, float, float]) -> dict:
    return {
        "meta": {"code": 200},
        "response": {
            "venues": [{"id": f"v{i}", "name": n, "location": {"lat": lat, "lng": lng}} for i, (n, lat, lng) in enumerate(venues)]
        },
    }
