"""DriveSession — owns one simulator and one aggregator for a single drive."""

from __future__ import annotations

import logging
import threading
from collections.abc import Sequence

from drive_companion.route.models import LngLat
from drive_companion.route.source import RouteSource
from drive_companion.simulation.driver import DEFAULT_SPEED_MPH, SimProgress, SimulationDriver
from drive_companion.simulation.scheduler import TickScheduler
from drive_companion.simulation.sink import NullPositionSink, SimulationUpdate
from drive_companion.telemetry.aggregator import DriveTelemetryAggregator
from drive_companion.telemetry.models import DriveStats, Zone

_logger = logging.getLogger(__name__)


class _ForwardingSink:
    """Publishes to the host sink, then feeds the aggregator."""

    def __init__(self, session: DriveSession) -> None:
        self._session = session

    def publish(self, update: SimulationUpdate) -> None:
        self._session._on_simulated_update(update)


class DriveSession:
    """Wires a :class:`SimulationDriver` and a :class:`DriveTelemetryAggregator`.

    The session is the only owner of both components: the driver publishes
    to the host's position sink through the session, and the session hands
    every update (simulated via :meth:`tick`, or real via
    :meth:`on_position`) to the aggregator with the current zone list.

    A session is used for exactly one drive; :meth:`end` releases the route
    and a new drive needs a new session.

    Parameters
    ----------
    route_source:
        Object with ``fetch(waypoints) -> list[LngLat]``.
    zones:
        Zone list from the zone classifier (read only).
    sink:
        Host position sink with ``publish(SimulationUpdate)``.
    tick_interval_s:
        Scheduler period; ``None`` disables the background scheduler so the
        host (or a test) calls :meth:`tick` itself.
    speed_mph:
        Initial simulated speed.
    _time_fn / _wall_time_fn:
        Injectable clocks for the driver and the aggregator respectively.
    """

    def __init__(
        self,
        route_source: RouteSource,
        zones: Sequence[Zone] = (),
        sink=None,
        tick_interval_s: float | None = 1.0,
        speed_mph: float = DEFAULT_SPEED_MPH,
        _time_fn=None,
        _wall_time_fn=None,
    ) -> None:
        self._source = route_source
        self._zones: tuple[Zone, ...] = tuple(zones)
        self._sink = sink if sink is not None else NullPositionSink()
        self._lock = threading.RLock()

        driver_kwargs = {"_time_fn": _time_fn} if _time_fn is not None else {}
        agg_kwargs = {"_time_fn": _wall_time_fn} if _wall_time_fn is not None else {}
        self.driver = SimulationDriver(_ForwardingSink(self), speed_mph=speed_mph, **driver_kwargs)
        self.aggregator = DriveTelemetryAggregator(**agg_kwargs)

        self._scheduler = (
            TickScheduler(self.tick, tick_interval_s) if tick_interval_s is not None else None
        )
        self._ended = False
        self._final_stats: DriveStats | None = None

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    @property
    def zones(self) -> tuple[Zone, ...]:
        return self._zones

    @property
    def ended(self) -> bool:
        return self._ended

    def start(self, waypoints: Sequence[LngLat] = ()) -> bool:
        """Load the route and begin collecting stats.

        Returns False when the route could not be loaded; the error is on
        ``driver.last_error`` and :meth:`start` may be called again.
        """
        with self._lock:
            if self._ended:
                raise RuntimeError("DriveSession cannot be restarted; create a new one")
            if not self.driver.load(self._source, waypoints):
                _logger.warning("Drive not started: %s", self.driver.last_error)
                return False
            self.aggregator.start()
        if self._scheduler is not None:
            self._scheduler.start()
        return True

    def end(self) -> DriveStats:
        """Stop the clock, flush the stats and release the route."""
        if self._scheduler is not None:
            self._scheduler.stop()
        with self._lock:
            if self._final_stats is None:
                self._final_stats = self.aggregator.flush()
                self.driver.stop()
                self._ended = True
            return self._final_stats

    # ------------------------------------------------------------------
    # Simulator controls
    # ------------------------------------------------------------------

    def tick(self) -> SimulationUpdate | None:
        with self._lock:
            return self.driver.tick()

    def play(self) -> None:
        with self._lock:
            self.driver.play()

    def pause(self) -> None:
        with self._lock:
            self.driver.pause()

    def toggle_pause(self) -> None:
        with self._lock:
            self.driver.toggle_pause()

    def set_speed(self, mph: float) -> None:
        with self._lock:
            self.driver.set_speed(mph)

    def seek(self, target_meters: float) -> None:
        with self._lock:
            self.driver.seek(target_meters)

    def progress(self) -> SimProgress:
        with self._lock:
            return self.driver.get_progress()

    # ------------------------------------------------------------------
    # Telemetry inputs
    # ------------------------------------------------------------------

    def on_position(self, distance_along_route: float, speed_mph: float) -> None:
        """Feed a real GPS fix (already map-matched to distance along route)."""
        with self._lock:
            self.aggregator.on_sample(distance_along_route, speed_mph, self._zones)

    def record_curve_callout(self, angle: float, direction: str, mile: float) -> None:
        with self._lock:
            self.aggregator.record_curve_callout(angle, direction, mile)

    def record_callout_spoken(self) -> None:
        with self._lock:
            self.aggregator.record_callout_spoken()

    def was_moving_recently(self) -> bool:
        with self._lock:
            return self.aggregator.was_moving_recently()

    def stats(self) -> DriveStats:
        """Live stats, or the final stats once the drive has ended."""
        with self._lock:
            if self._final_stats is not None:
                return self._final_stats
            return self.aggregator.snapshot()

    # ------------------------------------------------------------------
    # Internal
    # ------------------------------------------------------------------

    def _on_simulated_update(self, update: SimulationUpdate) -> None:
        self._sink.publish(update)
        self.aggregator.on_sample(update.distance_along, update.speed_mph, self._zones)
