"""Markdown trip summary formatter."""

from __future__ import annotations

from pathlib import Path

from drive_companion.route.geometry import meters_to_miles
from drive_companion.telemetry.models import DriveStats

_ZONE_LABEL: dict[str, str] = {
    "technical": "Technical",
    "transit": "Highway",
    "urban": "Urban",
}


def format_duration(seconds: float) -> str:
    """``h:mm:ss`` (or ``m:ss`` under an hour)."""
    total = max(0, int(round(seconds)))
    hours, rem = divmod(total, 3600)
    minutes, secs = divmod(rem, 60)
    if hours:
        return f"{hours}:{minutes:02d}:{secs:02d}"
    return f"{minutes}:{secs:02d}"


class TripSummaryFormatter:
    """Format a :class:`~drive_companion.telemetry.models.DriveStats` as Markdown."""

    def format(self, stats: DriveStats) -> str:
        """Return the full Markdown summary as a string."""
        lines: list[str] = [
            "# Drive Summary",
            "",
            f"**Distance**: {meters_to_miles(stats.total_distance):.1f} mi  ",
            f"**Duration**: {format_duration(stats.drive_time)}  ",
            f"**Avg speed**: {stats.avg_speed:.0f} mph  ",
            f"**Top speed**: {stats.top_speed:.0f} mph  ",
            f"**Callouts**: {stats.callouts_delivered}",
            "",
        ]

        if stats.zone_breakdown:
            lines += [
                "## Zones",
                "",
                "| Zone | Distance | Time |",
                "|------|----------|------|",
            ]
            for record in stats.zone_breakdown:
                label = _ZONE_LABEL.get(record.zone, record.zone.title())
                lines.append(
                    f"| {label} | {meters_to_miles(record.distance):.1f} mi "
                    f"| {format_duration(record.time)} |"
                )
            lines.append("")

        if stats.technical_time > 0:
            lines.append(
                f"- **Technical**: {stats.technical_curves} curves, "
                f"avg {stats.technical_avg_speed:.0f} mph"
            )
        if stats.highway_time > 0:
            lines.append(
                f"- **Highway**: avg {stats.highway_avg_speed:.0f} mph, "
                f"top {stats.highway_top_speed:.0f} mph"
            )
        if stats.fastest_apex is not None:
            a = stats.fastest_apex
            lines.append(
                f"- **Fastest apex**: {a.speed} mph through a {a.curve_angle:.0f}° "
                f"{a.curve_direction} at mile {a.mile:.1f}"
            )
        if stats.hardest_curve is not None:
            c = stats.hardest_curve
            lines.append(
                f"- **Hardest curve**: {c.angle:.0f}° {c.direction} at mile {c.mile:.1f}"
            )

        return "\n".join(lines).rstrip() + "\n"

    def write(self, stats: DriveStats, path: str) -> None:
        """Write the formatted summary to *path* (UTF-8)."""
        Path(path).write_text(self.format(stats), encoding="utf-8")
