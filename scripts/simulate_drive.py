"""Headless drive replay — runs the simulator over a route and prints a trip summary.

Usage:
    uv run python scripts/simulate_drive.py                       # MA-181 via Mapbox
    uv run python scripts/simulate_drive.py --route route.json --fast
    uv run python scripts/simulate_drive.py --route route.json --zones zones.json \\
        --speed 55 --output summary.md

``route.json`` is a list of ``[lon, lat]`` pairs; ``zones.json`` a list of
``{"start_distance", "end_distance", "character"}`` objects.  ``--fast``
drives on a virtual clock (one simulated second per tick, no sleeping).

Needs ``DRIVE_COMPANION_MAPBOX_TOKEN`` (or ``MAPBOX_TOKEN``) unless ``--route``
is given.
"""

from __future__ import annotations

import argparse
import json
import sys
import time
from pathlib import Path

from drive_companion.config import Settings, configure_logging
from drive_companion.route.geometry import meters_to_miles
from drive_companion.route.source import MA181_WAYPOINTS, StaticRouteSource
from drive_companion.session import DriveSession
from drive_companion.telemetry.formatter import TripSummaryFormatter
from drive_companion.telemetry.models import Zone


class _VirtualClock:
    """Advances one second per call to :meth:`advance`."""

    def __init__(self) -> None:
        self.now = 0.0

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float = 1.0) -> None:
        self.now += seconds


def _load_zones(path: str | None) -> list[Zone]:
    if not path:
        return []
    raw = json.loads(Path(path).read_text(encoding="utf-8"))
    return [
        Zone(
            start_distance=float(z["start_distance"]),
            end_distance=float(z["end_distance"]),
            character=str(z["character"]),
        )
        for z in raw
    ]


def main() -> None:
    settings = Settings.from_env()

    ap = argparse.ArgumentParser(description="Replay a route through the drive simulator")
    ap.add_argument("--route", help="JSON file of [lon, lat] pairs (default: fetch MA-181)")
    ap.add_argument("--zones", help="JSON file of zone objects")
    ap.add_argument("--speed", type=float, default=settings.speed_mph, help="Speed in mph")
    ap.add_argument("--fast", action="store_true", help="Use a virtual clock (no sleeping)")
    ap.add_argument("--output", help="Write the Markdown summary to this file")
    args = ap.parse_args()

    configure_logging(settings.log_level)

    if args.route:
        coords = json.loads(Path(args.route).read_text(encoding="utf-8"))
        source = StaticRouteSource([tuple(c) for c in coords])
    else:
        if not settings.mapbox_token:
            print("ERROR: set DRIVE_COMPANION_MAPBOX_TOKEN or pass --route", file=sys.stderr)
            sys.exit(1)
        source = settings.route_source()

    clock = _VirtualClock() if args.fast else None
    session = DriveSession(
        source,
        zones=_load_zones(args.zones),
        tick_interval_s=None,
        speed_mph=args.speed,
        _time_fn=clock,
        _wall_time_fn=clock,
    )

    if not session.start(list(MA181_WAYPOINTS)):
        print(f"ERROR: route load failed: {session.driver.last_error}", file=sys.stderr)
        sys.exit(1)

    total = session.progress().total_distance
    print(f"Route: {meters_to_miles(total):.1f} mi at {session.driver.speed_mph:.0f} mph")
    session.play()

    ticks = 0
    try:
        while session.progress().distance_along < total:
            if clock is not None:
                clock.advance(1.0)
            else:
                time.sleep(settings.tick_interval_s)
            session.tick()
            ticks += 1
            if ticks % 60 == 0:
                p = session.progress()
                print(f"  {p.progress_percent:5.1f}%  {meters_to_miles(p.distance_along):.2f} mi")
    except KeyboardInterrupt:
        print("\nInterrupted — ending drive early.")

    stats = session.end()
    formatter = TripSummaryFormatter()
    print()
    print(formatter.format(stats))
    if args.output:
        formatter.write(stats, args.output)
        print(f"Summary written to {args.output}")


if __name__ == "__main__":
    main()
