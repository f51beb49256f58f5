"""Drive telemetry aggregation and trip summaries.

Public API
----------
DriveTelemetryAggregator - sample stream + callouts → DriveStats
DriveStats               - aggregate drive summary
Zone                     - classified route stretch
TripSummaryFormatter     - DriveStats → Markdown
"""

from drive_companion.telemetry.aggregator import DriveTelemetryAggregator, resolve_zone
from drive_companion.telemetry.formatter import TripSummaryFormatter, format_duration
from drive_companion.telemetry.models import (
    DriveStats,
    FastestApex,
    HardestCurve,
    Zone,
    ZoneBreakdownRecord,
)

__all__ = [
    "DriveStats",
    "DriveTelemetryAggregator",
    "FastestApex",
    "HardestCurve",
    "TripSummaryFormatter",
    "Zone",
    "ZoneBreakdownRecord",
    "format_duration",
    "resolve_zone",
]
