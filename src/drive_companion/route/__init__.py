"""Route geometry: great-circle helpers, path index and route sources.

Public API
----------
LngLat              - ``(longitude, latitude)`` tuple alias
RoutePathIndex      - distance-along-route → position/heading lookup
EmptyRouteError     - raised for routes with fewer than 2 points
RouteFetchError     - raised when a route source fails
MapboxDirectionsSource / StaticRouteSource - route sources
"""

from drive_companion.route.geometry import (
    bearing_degrees,
    distance_meters,
    meters_to_miles,
    mph_to_mps,
    mps_to_mph,
)
from drive_companion.route.models import LngLat, PathPosition, SegmentTable
from drive_companion.route.path_index import EmptyRouteError, RoutePathIndex
from drive_companion.route.source import (
    MapboxDirectionsSource,
    RouteFetchError,
    RouteSource,
    StaticRouteSource,
)

__all__ = [
    "EmptyRouteError",
    "LngLat",
    "MapboxDirectionsSource",
    "PathPosition",
    "RouteFetchError",
    "RoutePathIndex",
    "RouteSource",
    "SegmentTable",
    "StaticRouteSource",
    "bearing_degrees",
    "distance_meters",
    "meters_to_miles",
    "mph_to_mps",
    "mps_to_mph",
]
