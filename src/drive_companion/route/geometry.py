"""Great-circle helpers for ``(longitude, latitude)`` coordinates.

All functions are pure and total: they never raise for finite inputs.
"""

from __future__ import annotations

import math

from drive_companion.route.models import LngLat

EARTH_RADIUS_M = 6_371_000.0
METERS_PER_MILE = 1609.34


def distance_meters(a: LngLat, b: LngLat) -> float:
    """Haversine distance between *a* and *b* in metres."""
    lat1 = math.radians(a[1])
    lat2 = math.radians(b[1])
    dlat = lat2 - lat1
    dlon = math.radians(b[0] - a[0])

    h = math.sin(dlat / 2) ** 2 + math.cos(lat1) * math.cos(lat2) * math.sin(dlon / 2) ** 2
    c = 2 * math.atan2(math.sqrt(h), math.sqrt(1 - h))
    return EARTH_RADIUS_M * c


def bearing_degrees(a: LngLat, b: LngLat) -> float:
    """Initial compass bearing from *a* to *b*, normalized to ``[0, 360)``.

    Identical points have no direction; ``0.0`` is returned for them.
    """
    if a[0] == b[0] and a[1] == b[1]:
        return 0.0

    lat1 = math.radians(a[1])
    lat2 = math.radians(b[1])
    dlon = math.radians(b[0] - a[0])

    y = math.sin(dlon) * math.cos(lat2)
    x = math.cos(lat1) * math.sin(lat2) - math.sin(lat1) * math.cos(lat2) * math.cos(dlon)
    bearing = (math.degrees(math.atan2(y, x)) + 360.0) % 360.0
    # (-tiny + 360) % 360 can round up to exactly 360.0
    return 0.0 if bearing >= 360.0 else bearing


def interpolate(a: LngLat, b: LngLat, fraction: float) -> LngLat:
    """Linear interpolation between *a* and *b* (``fraction`` in ``[0, 1]``)."""
    return (
        a[0] + (b[0] - a[0]) * fraction,
        a[1] + (b[1] - a[1]) * fraction,
    )


def mph_to_mps(mph: float) -> float:
    return mph * METERS_PER_MILE / 3600.0


def mps_to_mph(mps: float) -> float:
    return mps * 3600.0 / METERS_PER_MILE


def meters_to_miles(meters: float) -> float:
    return meters / METERS_PER_MILE
