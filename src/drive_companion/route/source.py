"""Route geometry sources.

A route source turns an ordered list of waypoints into one drivable polyline.
:class:`MapboxDirectionsSource` asks the Mapbox Directions API; the
:class:`StaticRouteSource` serves a fixed polyline for demos and tests.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from typing import Protocol

import httpx

from drive_companion.route.models import LngLat

_logger = logging.getLogger(__name__)

# MA-181 between Belchertown and Palmer; intermediate waypoints keep the
# router on the technical section.
MA181_WAYPOINTS: tuple[LngLat, ...] = (
    (-72.4099, 42.2871),
    (-72.3952, 42.2562),
    (-72.3621, 42.2103),
    (-72.3388, 42.1773),
)


class RouteFetchError(Exception):
    """Raised when a route source cannot produce a usable polyline."""


class RouteSource(Protocol):
    def fetch(self, waypoints: Sequence[LngLat]) -> list[LngLat]:
        """Return the route polyline through *waypoints*."""
        ...


class StaticRouteSource:
    """Serves a fixed polyline regardless of the requested waypoints.

    Still enforces the two-point minimum so a bad fixture fails the same way
    a bad upstream response would.
    """

    def __init__(self, coordinates: Sequence[LngLat]) -> None:
        self._coords = [(float(c[0]), float(c[1])) for c in coordinates]

    def fetch(self, waypoints: Sequence[LngLat] = ()) -> list[LngLat]:
        if len(self._coords) < 2:
            raise RouteFetchError(
                f"Static route has {len(self._coords)} coordinate(s); need at least 2"
            )
        return list(self._coords)


class MapboxDirectionsSource:
    """Fetches driving geometry from the Mapbox Directions API.

    Parameters
    ----------
    access_token:
        Mapbox access token.
    base_url:
        Directions endpoint up to (excluding) the coordinate list.
    timeout:
        Request timeout in seconds.
    client:
        Optional pre-built :class:`httpx.Client` (injected in tests).
    """

    DEFAULT_BASE_URL = "https://api.mapbox.com/directions/v5/mapbox/driving"

    def __init__(
        self,
        access_token: str,
        base_url: str = DEFAULT_BASE_URL,
        timeout: float = 10.0,
        client: httpx.Client | None = None,
    ) -> None:
        self._token = access_token
        self._base_url = base_url.rstrip("/")
        self._timeout = timeout
        self._client = client

    def fetch(self, waypoints: Sequence[LngLat]) -> list[LngLat]:
        """Return the route polyline through *waypoints*.

        Raises
        ------
        RouteFetchError
            On transport errors, non-2xx responses, malformed payloads, or a
            route with fewer than two coordinates.
        """
        if len(waypoints) < 2:
            raise RouteFetchError("At least 2 waypoints are required")

        waypoint_str = ";".join(f"{lon},{lat}" for lon, lat in waypoints)
        url = f"{self._base_url}/{waypoint_str}"
        params = {
            "geometries": "geojson",
            "overview": "full",
            "access_token": self._token,
        }

        try:
            if self._client is not None:
                response = self._client.get(url, params=params, timeout=self._timeout)
            else:
                with httpx.Client(timeout=self._timeout) as client:
                    response = client.get(url, params=params)
            response.raise_for_status()
            data = response.json()
        except httpx.HTTPStatusError as exc:
            raise RouteFetchError(
                f"Directions API returned HTTP {exc.response.status_code}"
            ) from exc
        except httpx.HTTPError as exc:
            raise RouteFetchError(f"Directions request failed: {exc}") from exc
        except ValueError as exc:
            raise RouteFetchError("Directions API returned invalid JSON") from exc

        coords = _extract_coordinates(data)
        if len(coords) < 2:
            raise RouteFetchError("Directions API returned no route")

        _logger.info("Fetched route with %d coordinates", len(coords))
        return coords


def _extract_coordinates(data: object) -> list[LngLat]:
    """Pull ``routes[0].geometry.coordinates`` out of a Directions payload."""
    try:
        raw = data["routes"][0]["geometry"]["coordinates"]  # type: ignore[index]
        return [(float(c[0]), float(c[1])) for c in raw]
    except (KeyError, IndexError, TypeError, ValueError):
        return []
