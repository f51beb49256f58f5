"""Route geometry data structures."""

from __future__ import annotations

from dataclasses import dataclass

LngLat = tuple[float, float]
"""A ``(longitude, latitude)`` pair in decimal degrees."""


@dataclass(frozen=True)
class SegmentTable:
    """Per-segment lengths derived from a route polyline.

    ``segment_lengths[i]`` is the length of the segment between coordinate
    ``i`` and ``i + 1``; ``cumulative[i]`` is the distance from the route
    start to coordinate ``i`` (so ``cumulative[-1] == total_length``).
    """

    segment_lengths: tuple[float, ...]
    cumulative: tuple[float, ...]

    @property
    def total_length(self) -> float:
        """Route length in metres."""
        return self.cumulative[-1]


@dataclass(frozen=True)
class PathPosition:
    """Interpolated location at some distance along the route."""

    position: LngLat
    """Interpolated ``(longitude, latitude)``."""

    heading: float
    """Compass heading in degrees ``[0, 360)``."""

    segment_index: int
    """Index of the segment containing the position."""
