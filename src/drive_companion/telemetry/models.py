"""Drive telemetry data models.

Units throughout: distances in metres, times in seconds, speeds in mph.
"""

from __future__ import annotations

import dataclasses
from dataclasses import dataclass, field

TECHNICAL = "technical"
TRANSIT = "transit"
URBAN = "urban"


@dataclass(frozen=True)
class Zone:
    """A classified stretch of the route, supplied by the zone classifier."""

    start_distance: float
    end_distance: float
    character: str
    """E.g. ``'urban'``, ``'technical'`` or ``'transit'`` (highway)."""

    def contains(self, distance: float) -> bool:
        return self.start_distance <= distance <= self.end_distance


@dataclass
class ZoneBreakdownRecord:
    """Cumulative dwell in one zone character across the drive."""

    zone: str
    distance: float = 0.0
    time: float = 0.0


@dataclass(frozen=True)
class FastestApex:
    """Peak speed seen within the observation window after a curve callout."""

    speed: int
    curve_angle: float
    curve_direction: str
    mile: float


@dataclass(frozen=True)
class HardestCurve:
    angle: float
    direction: str
    mile: float


@dataclass
class ZoneEntry:
    """The zone currently being dwelled in (transient)."""

    zone: str
    entered_at: float
    entry_distance: float


@dataclass
class ApexWindow:
    """Open apex observation window (transient, at most one live)."""

    opened_at: float
    curve_angle: float
    curve_direction: str
    mile: float
    max_speed: float


@dataclass
class DriveStats:
    """Aggregate drive summary handed to the report consumer.

    Running values are updated on every sample; the per-zone averages,
    ``highway_top_speed`` and the zone distances are derived at flush time.
    """

    start_time: float | None = None
    total_distance: float = 0.0
    drive_time: float = 0.0
    avg_speed: float = 0.0
    top_speed: float = 0.0

    technical_time: float = 0.0
    technical_curves: int = 0
    technical_avg_speed: float = 0.0
    technical_distance: float = 0.0

    highway_time: float = 0.0
    highway_avg_speed: float = 0.0
    highway_top_speed: float = 0.0
    highway_distance: float = 0.0

    fastest_apex: FastestApex | None = None
    hardest_curve: HardestCurve | None = None

    callouts_delivered: int = 0
    zone_breakdown: list[ZoneBreakdownRecord] = field(default_factory=list)

    def to_dict(self) -> dict:
        """Return a JSON-serializable dict (recursive via :func:`dataclasses.asdict`)."""
        return dataclasses.asdict(self)
