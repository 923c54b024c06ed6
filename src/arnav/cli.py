"""
ARNav CLI entrypoint.

Quick local checks without a phone or the AR front-end: measure a distance, preview the
markers a position would get, or list nearby places.
"""

from __future__ import annotations

import argparse
import json
from typing import Any

import uvicorn
from pydantic import ValidationError

from arnav.config.settings import get_settings
from arnav.core.geo import distance
from arnav.core.logging import configure_logging
from arnav.domain.models import DestinationOut, DistanceResult, GeoPoint, NavigationResult, PlacesResult
from arnav.navigation.planner import NavigationPlanner, rounded_meters


def _point(parser: argparse.ArgumentParser, lat: float, lon: float) -> GeoPoint:
    """Validate a coordinate pair, reporting range errors as usage errors."""
    try:
        return GeoPoint(latitude=lat, longitude=lon)
    except ValidationError as e:
        parser.error(f"invalid coordinate ({lat}, {lon}): {e.errors()[0]['msg']}")
        raise


def _print_json(model: Any) -> None:
    print(json.dumps(model.model_dump(mode="json"), ensure_ascii=False, indent=2))


def _cmd_distance(args: argparse.Namespace) -> int:
    a = _point(args.parser, args.from_lat, args.from_lon)
    b = _point(args.parser, args.to_lat, args.to_lon)
    meters = distance(a.to_coordinate(), b.to_coordinate())
    if args.json:
        _print_json(DistanceResult(origin=a, target=b, distance_m=meters))
    else:
        print(f"{meters:.1f} m")
    return 0


def _cmd_navigate(args: argparse.Namespace) -> int:
    """Handle the `navigate` subcommand."""
    settings = get_settings()
    origin = _point(args.parser, args.lat, args.lon)
    planner = NavigationPlanner(settings) if args.offline else NavigationPlanner.from_settings(settings)
    plan = planner.plan(origin.to_coordinate(), use_places=not args.offline)

    if args.json:
        _print_json(NavigationResult.from_plan(plan))
        return 0

    print(f"Origin: {origin.latitude:.6f}, {origin.longitude:.6f}  (source: {plan.source})")
    for i, t in enumerate(plan.targets, start=1):
        c = t.destination.coordinate
        print(f"{i:>2}. {t.destination.name}  {rounded_meters(t.distance_m)} m  [{t.color}]  ({c.latitude:.6f}, {c.longitude:.6f})")
    return 0


def _cmd_places(args: argparse.Namespace) -> int:
    settings = get_settings()
    origin = _point(args.parser, args.lat, args.lon)
    places = NavigationPlanner.from_settings(settings).nearby_places(origin.to_coordinate())

    if args.json:
        _print_json(PlacesResult(origin=origin, places=[DestinationOut.from_destination(p) for p in places]))
        return 0

    if not places:
        print("No places found nearby.")
        return 1
    for p in places:
        print(f"- {p.name} ({p.coordinate.latitude:.6f}, {p.coordinate.longitude:.6f})")
    return 0


def _cmd_serve(args: argparse.Namespace) -> int:
    """Run the JSON API (same app as `uvicorn arnav.api.app:app`)."""
    uvicorn.run("arnav.api.app:app", host=args.host, port=int(args.port), reload=bool(args.reload))
    return 0


def build_parser() -> argparse.ArgumentParser:
    """Build the argparse parser for the ARNav CLI."""
    parser = argparse.ArgumentParser(prog="arnav")
    sub = parser.add_subparsers(dest="command", required=True)

    dist = sub.add_parser("distance", help="Great-circle distance between two points (meters).")
    dist.add_argument("--from-lat", required=True, type=float)
    dist.add_argument("--from-lon", required=True, type=float)
    dist.add_argument("--to-lat", required=True, type=float)
    dist.add_argument("--to-lon", required=True, type=float)
    dist.add_argument("--json", action="store_true", help="Output machine-readable JSON")
    dist.set_defaults(func=_cmd_distance, parser=dist)

    nav = sub.add_parser("navigate", help="Preview the AR navigation markers for a position.")
    nav.add_argument("--lat", required=True, type=float)
    nav.add_argument("--lon", required=True, type=float)
    nav.add_argument("--offline", action="store_true", help="Skip the places API; use the fallback points.")
    nav.add_argument("--json", action="store_true", help="Output machine-readable JSON")
    nav.set_defaults(func=_cmd_navigate, parser=nav)

    pl = sub.add_parser("places", help="List nearby places from the places API.")
    pl.add_argument("--lat", required=True, type=float)
    pl.add_argument("--lon", required=True, type=float)
    pl.add_argument("--json", action="store_true", help="Output machine-readable JSON")
    pl.set_defaults(func=_cmd_places, parser=pl)

    srv = sub.add_parser("serve", help="Run the HTTP API for the AR front-end.")
    srv.add_argument("--host", default="127.0.0.1")
    srv.add_argument("--port", type=int, default=8000)
    srv.add_argument("--reload", action="store_true", help="Auto-reload on code changes (development).")
    srv.set_defaults(func=_cmd_serve)
    return parser


def main(argv: list[str] | None = None) -> int:
    """CLI entrypoint callable used by `python -m arnav.cli`."""
    configure_logging()
    parser = build_parser()
    args = parser.parse_args(argv)
    func: Any = getattr(args, "func")
    return int(func(args))


if __name__ == "__main__":
    raise SystemExit(main())
