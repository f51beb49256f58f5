"""Distance-along-route lookup over a fixed polyline."""

from __future__ import annotations

import bisect
from collections.abc import Sequence

from drive_companion.route.geometry import bearing_degrees, distance_meters, interpolate
from drive_companion.route.models import LngLat, PathPosition, SegmentTable

HEADING_LOOKAHEAD_SEGMENTS = 5


class EmptyRouteError(ValueError):
    """Raised when a route has fewer than two coordinates."""


class RoutePathIndex:
    """Answers "where am I after *d* metres along this route?".

    The geometry and its :class:`SegmentTable` are computed once in
    :meth:`build` and are read-only afterwards, so one index may be shared by
    the simulator and the telemetry side without locking.

    Heading is computed by looking :data:`HEADING_LOOKAHEAD_SEGMENTS`
    coordinates ahead of the current segment rather than along the segment
    itself; short near-straight segments from routing services otherwise
    make the heading jitter.
    """

    def __init__(self, coordinates: tuple[LngLat, ...], segments: SegmentTable) -> None:
        self._coords = coordinates
        self._segments = segments

    @classmethod
    def build(cls, coordinates: Sequence[Sequence[float]]) -> RoutePathIndex:
        """Index *coordinates* (``(lon, lat)`` pairs).

        Raises:
            EmptyRouteError: If fewer than two coordinates are given.
        """
        if len(coordinates) < 2:
            raise EmptyRouteError(
                f"A route needs at least 2 coordinates, got {len(coordinates)}"
            )

        coords = tuple((float(c[0]), float(c[1])) for c in coordinates)
        lengths: list[float] = []
        cumulative = [0.0]
        for i in range(len(coords) - 1):
            seg = distance_meters(coords[i], coords[i + 1])
            lengths.append(seg)
            cumulative.append(cumulative[-1] + seg)

        return cls(coords, SegmentTable(tuple(lengths), tuple(cumulative)))

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    @property
    def coordinates(self) -> tuple[LngLat, ...]:
        return self._coords

    @property
    def segments(self) -> SegmentTable:
        return self._segments

    @property
    def segment_lengths(self) -> tuple[float, ...]:
        return self._segments.segment_lengths

    @property
    def total_length(self) -> float:
        return self._segments.total_length

    def __len__(self) -> int:
        return len(self._coords)

    def position_at_distance(self, distance: float) -> PathPosition:
        """Return the position and heading *distance* metres along the route.

        *distance* is clamped to ``[0, total_length]``.  At (or past) the end
        the last coordinate is returned exactly, headed along the last segment.
        """
        total = self.total_length
        d = min(max(distance, 0.0), total)
        coords = self._coords

        if d >= total:
            last = coords[-1]
            return PathPosition(
                position=last,
                heading=bearing_degrees(coords[-2], last),
                segment_index=len(coords) - 2,
            )

        # Largest i with cumulative[i] <= d; zero-length segments are skipped
        # because bisect_right lands past runs of equal prefix values.
        i = bisect.bisect_right(self._segments.cumulative, d) - 1
        seg_len = self._segments.segment_lengths[i]
        fraction = (d - self._segments.cumulative[i]) / seg_len
        point = interpolate(coords[i], coords[i + 1], fraction)

        look_idx = min(i + HEADING_LOOKAHEAD_SEGMENTS, len(coords) - 1)
        return PathPosition(
            position=point,
            heading=bearing_degrees(point, coords[look_idx]),
            segment_index=i,
        )
