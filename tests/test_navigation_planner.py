import logging

import pytest

from arnav.config.settings import get_settings
from arnav.core.geo import GeoCoordinate
from arnav.navigation.destinations import ExternalPlace
from arnav.navigation.planner import NavigationPlanner, marker_label, marker_summary, rounded_meters

POS = GeoCoordinate(latitude=0.0, longitude=0.0)


class StubPlacesClient:
    def __init__(self, places=None, exc: Exception | None = None):
        self.places = places or []
        self.exc = exc
        self.calls = []

    def search_nearby(self, position, *, radius_m=None, limit=None):
        self.calls.append((position, radius_m))
        if self.exc is not None:
            raise self.exc
        return list(self.places)


def _places(n: int) -> list[ExternalPlace]:
    return [ExternalPlace(name=f"Venue {i}", coordinate=POS.offset(dlat=0.001 * (i + 1))) for i in range(n)]


def test_plan_uses_places_when_available():
    settings = get_settings()
    stub = StubPlacesClient(_places(7))

    plan = NavigationPlanner(settings, stub).plan(POS)

    assert plan.source == "places"
    assert plan.origin == POS
    assert [t.destination.name for t in plan.targets] == [f"Venue {i}" for i in range(5)]
    assert [t.color for t in plan.targets] == settings.ar.marker_colors[:5]
    assert stub.calls == [(POS, settings.ar.search_radius_m)]


def test_plan_falls_back_when_places_fail(caplog):
    stub = StubPlacesClient(exc=RuntimeError("credentials missing"))

    with caplog.at_level(logging.WARNING, logger="arnav.navigation.planner"):
        plan = NavigationPlanner(get_settings(), stub).plan(POS)

    assert plan.source == "fallback"
    assert [t.destination.name for t in plan.targets] == ["North", "East", "South", "West", "Northeast"]
    assert "Places lookup failed" in caplog.text


def test_plan_falls_back_on_empty_places_and_without_client():
    settings = get_settings()

    assert NavigationPlanner(settings, StubPlacesClient([])).plan(POS).source == "fallback"
    assert NavigationPlanner(settings).plan(POS).source == "fallback"


def test_plan_can_skip_places_lookup():
    stub = StubPlacesClient(_places(3))

    plan = NavigationPlanner(get_settings(), stub).plan(POS, use_places=False)

    assert plan.source == "fallback"
    assert stub.calls == []


def test_fallback_markers_carry_distance_labels():
    plan = NavigationPlanner(get_settings()).plan(POS)
    north = plan.targets[0]

    assert north.distance_m == pytest.approx(100.07, abs=0.1)
    assert north.label == "North\n100m"
    assert north.summary == "North\nDistance: 100 meters\nLat: 0.000900\nLon: 0.000000"
    assert plan.targets[-1].label == "Northeast\n212m"


def test_marker_colors_cycle_through_palette():
    settings = get_settings()
    palette = ["#111111", "#222222"]
    ar = settings.ar.model_copy(update={"marker_colors": palette})
    settings = settings.model_copy(update={"ar": ar})

    plan = NavigationPlanner(settings).plan(POS)

    assert [t.color for t in plan.targets] == ["#111111", "#222222", "#111111", "#222222", "#111111"]


def test_nearby_places_is_not_capped():
    stub = StubPlacesClient(_places(9))
    planner = NavigationPlanner(get_settings(), stub)

    assert len(planner.nearby_places(POS)) == 9
    assert NavigationPlanner(get_settings(), StubPlacesClient(exc=ValueError("bad"))).nearby_places(POS) == []


def test_label_helpers_round_distance():
    plan = NavigationPlanner(get_settings()).plan(POS)
    dest = plan.targets[1].destination

    assert marker_label(dest, 49.6) == "East\n50m"
    assert marker_summary(dest, 1234.4).splitlines()[1] == "Distance: 1234 meters"


def test_half_meters_round_up():
    dest = NavigationPlanner(get_settings()).plan(POS).targets[1].destination

    assert rounded_meters(0.5) == 1
    assert rounded_meters(2.5) == 3
    assert rounded_meters(2.4999) == 2
    assert marker_label(dest, 100.5) == "East\n101m"
    assert marker_summary(dest, 212.5).splitlines()[1] == "Distance: 213 meters"
