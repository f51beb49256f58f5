"""DriveTelemetryAggregator — turns a live sample stream into DriveStats."""

from __future__ import annotations

import copy
import logging
import math
import time
from collections import deque
from collections.abc import Sequence

from drive_companion.telemetry.models import (
    TECHNICAL,
    TRANSIT,
    ApexWindow,
    DriveStats,
    FastestApex,
    HardestCurve,
    Zone,
    ZoneBreakdownRecord,
    ZoneEntry,
)

_logger = logging.getLogger(__name__)

SPEED_SAMPLE_INTERVAL_S = 2.0
SPEED_WINDOW_SIZE = 500
APEX_WINDOW_S = 10.0
RECENT_MOTION_WINDOW_S = 30.0
MOVING_THRESHOLD_MPH = 5.0


def resolve_zone(zones: Sequence[Zone], distance: float) -> Zone | None:
    """Return the first zone covering *distance* (bounds inclusive), or None."""
    for zone in zones:
        if zone.contains(distance):
            return zone
    return None


def _mean(values) -> float:
    return sum(values) / len(values)


class DriveTelemetryAggregator:
    """Accumulates drive statistics from position/speed samples and callouts.

    Fed in-line by the host on every position update, whether the update
    came from the simulator or from a real GPS fix; it owns no timers.

    Zone dwell is accounted by distance along the route.  When the zone
    changes between two samples the closing span is split at the new zone's
    start boundary, with the boundary time interpolated between the two
    samples.  A backward jump in distance (a seek) closes the open zone at
    the last forward distance and opens a fresh one at the new distance, so
    no negative distance is ever credited.

    Parameters
    ----------
    _time_fn:
        Callable returning wall-clock seconds — injectable for testing.
    """

    def __init__(self, _time_fn=time.time) -> None:
        self._time_fn = _time_fn
        self._reset()

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    @property
    def is_active(self) -> bool:
        """True between :meth:`start` and :meth:`flush`."""
        return self._active

    def start(self) -> None:
        """Reset all accumulators and begin a new drive."""
        self._reset()
        now = self._time_fn()
        self._stats.start_time = now
        self._last_sample_at = now
        self._active = True
        _logger.info("Drive stats collection started")

    def on_sample(
        self,
        distance_along_route: float,
        speed_now: float,
        active_zones: Sequence[Zone] = (),
    ) -> None:
        """Process one position/speed update.

        Non-finite samples and samples outside an active drive are ignored.
        """
        if not self._active:
            _logger.debug("Ignoring sample outside an active drive")
            return
        if not (math.isfinite(distance_along_route) and math.isfinite(speed_now)):
            _logger.debug(
                "Ignoring invalid sample distance=%r speed=%r", distance_along_route, speed_now
            )
            return

        speed = max(speed_now, 0.0)
        now = self._time_fn()
        stats = self._stats
        self._current_speed = speed

        if distance_along_route < self._last_distance:
            self._reopen_zone_entry(distance_along_route, now, active_zones)
        else:
            stats.total_distance += distance_along_route - self._last_distance
            zone = resolve_zone(active_zones, distance_along_route)
            entry = self._zone_entry
            if zone is not None and (entry is None or entry.zone != zone.character):
                self._transition_zone(zone, distance_along_route, now)

        self._last_distance = distance_along_route
        self._last_sample_at = now

        stats.drive_time = now - stats.start_time
        if speed > stats.top_speed:
            stats.top_speed = speed

        self._sample_speed(speed, now)
        self._update_apex_window(speed, now)

    def record_curve_callout(self, angle: float, direction: str, mile: float) -> None:
        """Record a curve warning at the moment it is spoken.

        Opens a fresh apex observation window seeded with the current speed,
        replacing any window still open from an earlier callout.
        """
        if not self._active:
            return
        stats = self._stats

        if stats.hardest_curve is None or angle > stats.hardest_curve.angle:
            stats.hardest_curve = HardestCurve(angle=angle, direction=direction, mile=mile)

        if self._zone_entry is not None and self._zone_entry.zone == TECHNICAL:
            stats.technical_curves += 1

        self._apex_window = ApexWindow(
            opened_at=self._time_fn(),
            curve_angle=angle,
            curve_direction=direction,
            mile=mile,
            max_speed=self._current_speed,
        )

    def record_callout_spoken(self) -> None:
        """Count one delivered callout of any kind."""
        if self._active:
            self._stats.callouts_delivered += 1

    def was_moving_recently(self) -> bool:
        """True if a retained sample from the last 30 s exceeded 5 mph."""
        now = self._time_fn()
        return any(
            now - t < RECENT_MOTION_WINDOW_S and speed > MOVING_THRESHOLD_MPH
            for t, speed in self._recent_speeds
        )

    def snapshot(self) -> DriveStats:
        """Return a copy of the running stats without closing anything."""
        stats = copy.deepcopy(self._stats)
        if self._active and stats.start_time is not None:
            stats.drive_time = self._time_fn() - stats.start_time
        return self._derive(stats)

    def flush(self) -> DriveStats:
        """Close open windows and return the finalized :class:`DriveStats`.

        Call once at drive end.  Repeated calls return identical stats; the
        open zone entry and apex window are only closed the first time.
        """
        if self._stats.start_time is None:
            return DriveStats()

        if self._closed_at is None:
            now = self._time_fn()
            self._close_zone_entry(self._last_distance, now)
            if self._apex_window is not None:
                self._close_apex_window()
            self._closed_at = now
            self._active = False
            _logger.info(
                "Drive stats flushed: %.0f m in %.0f s, top %.0f mph, %d callouts",
                self._stats.total_distance,
                now - self._stats.start_time,
                self._stats.top_speed,
                self._stats.callouts_delivered,
            )

        stats = copy.deepcopy(self._stats)
        stats.drive_time = self._closed_at - stats.start_time
        return self._derive(stats)

    # ------------------------------------------------------------------
    # Zone tracking
    # ------------------------------------------------------------------

    def _transition_zone(self, zone: Zone, distance: float, now: float) -> None:
        """Close the current entry at *zone*'s start boundary and open *zone*."""
        prev_d = self._last_distance
        prev_t = self._last_sample_at
        boundary = min(max(zone.start_distance, prev_d), distance)
        span = distance - prev_d
        if span > 0:
            at = prev_t + (now - prev_t) * (boundary - prev_d) / span
        else:
            at = now

        self._close_zone_entry(boundary, at)
        self._zone_entry = ZoneEntry(zone=zone.character, entered_at=at, entry_distance=boundary)

    def _reopen_zone_entry(self, distance: float, now: float, zones: Sequence[Zone]) -> None:
        """Handle a backward jump: close at the last forward distance, reopen here."""
        previous = self._zone_entry.zone if self._zone_entry is not None else None
        _logger.debug("Backward jump %.0f → %.0f m", self._last_distance, distance)
        self._close_zone_entry(self._last_distance, now)

        zone = resolve_zone(zones, distance)
        character = zone.character if zone is not None else previous
        if character is not None:
            self._zone_entry = ZoneEntry(zone=character, entered_at=now, entry_distance=distance)

    def _close_zone_entry(self, distance: float, at: float) -> None:
        """Merge the open entry (if any) into the breakdown and clear it."""
        entry = self._zone_entry
        if entry is None:
            return
        self._zone_entry = None

        dwell_m = max(0.0, distance - entry.entry_distance)
        dwell_s = max(0.0, at - entry.entered_at)

        record = self._breakdown.get(entry.zone)
        if record is None:
            record = ZoneBreakdownRecord(zone=entry.zone)
            self._breakdown[entry.zone] = record
            self._stats.zone_breakdown.append(record)
        record.distance += dwell_m
        record.time += dwell_s

        if entry.zone == TECHNICAL:
            self._stats.technical_time += dwell_s
        elif entry.zone == TRANSIT:
            self._stats.highway_time += dwell_s

    # ------------------------------------------------------------------
    # Speed sampling
    # ------------------------------------------------------------------

    def _sample_speed(self, speed: float, now: float) -> None:
        last = self._last_speed_sample_at
        if last is not None and now - last < SPEED_SAMPLE_INTERVAL_S:
            return
        self._last_speed_sample_at = now

        self._speed_samples.append(speed)
        self._stats.avg_speed = _mean(self._speed_samples)

        zone = self._zone_entry.zone if self._zone_entry is not None else None
        if speed > 0:
            if zone == TECHNICAL:
                self._technical_speeds.append(speed)
            elif zone == TRANSIT:
                self._highway_speeds.append(speed)

        self._recent_speeds.append((now, speed))
        while self._recent_speeds and now - self._recent_speeds[0][0] >= RECENT_MOTION_WINDOW_S:
            self._recent_speeds.popleft()

    # ------------------------------------------------------------------
    # Apex window
    # ------------------------------------------------------------------

    def _update_apex_window(self, speed: float, now: float) -> None:
        win = self._apex_window
        if win is None:
            return
        if speed > win.max_speed:
            win.max_speed = speed
        if now - win.opened_at > APEX_WINDOW_S:
            self._close_apex_window()

    def _close_apex_window(self) -> None:
        """Commit the open window to ``fastest_apex`` if it beats the record."""
        win = self._apex_window
        if win is None:
            return
        self._apex_window = None

        best = self._stats.fastest_apex
        if best is None or win.max_speed > best.speed:
            self._stats.fastest_apex = FastestApex(
                speed=round(win.max_speed),
                curve_angle=win.curve_angle,
                curve_direction=win.curve_direction,
                mile=win.mile,
            )

    # ------------------------------------------------------------------
    # Internal
    # ------------------------------------------------------------------

    def _derive(self, stats: DriveStats) -> DriveStats:
        """Fill the derived per-zone fields of *stats* in place and return it."""
        if self._technical_speeds:
            stats.technical_avg_speed = round(_mean(self._technical_speeds))
        if self._highway_speeds:
            stats.highway_avg_speed = round(_mean(self._highway_speeds))
            stats.highway_top_speed = round(max(self._highway_speeds))

        stats.highway_distance = sum(
            r.distance for r in stats.zone_breakdown if r.zone == TRANSIT
        )
        stats.technical_distance = sum(
            r.distance for r in stats.zone_breakdown if r.zone == TECHNICAL
        )
        return stats

    def _reset(self) -> None:
        self._stats = DriveStats()
        self._active = False
        self._closed_at: float | None = None

        self._last_distance = 0.0
        self._last_sample_at = 0.0
        self._current_speed = 0.0

        self._last_speed_sample_at: float | None = None
        self._speed_samples: deque[float] = deque(maxlen=SPEED_WINDOW_SIZE)
        self._technical_speeds: list[float] = []
        self._highway_speeds: list[float] = []
        self._recent_speeds: deque[tuple[float, float]] = deque()

        self._zone_entry: ZoneEntry | None = None
        self._apex_window: ApexWindow | None = None
        self._breakdown: dict[str, ZoneBreakdownRecord] = {}
