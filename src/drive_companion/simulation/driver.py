"""SimulationDriver — replays a fixed polyline as a synthetic GPS feed."""

from __future__ import annotations

import enum
import logging
import math
import time
from collections.abc import Sequence
from dataclasses import dataclass

from drive_companion.route.geometry import meters_to_miles, mph_to_mps
from drive_companion.route.models import LngLat
from drive_companion.route.path_index import EmptyRouteError, RoutePathIndex
from drive_companion.route.source import RouteFetchError, RouteSource
from drive_companion.simulation.sink import NullPositionSink, SimulationUpdate

_logger = logging.getLogger(__name__)

MIN_SPEED_MPH = 5.0
MAX_SPEED_MPH = 120.0
DEFAULT_SPEED_MPH = 40.0
MAX_TICK_DT_S = 2.0
"""Upper bound on one tick's time step (e.g. after the host was suspended)."""


class SimState(enum.Enum):
    UNINITIALIZED = "uninitialized"
    LOADING = "loading"
    READY = "ready"
    PLAYING = "playing"
    PAUSED = "paused"
    FINISHED = "finished"


@dataclass(frozen=True)
class SimProgress:
    """Read-only snapshot of the simulator for presentation layers."""

    paused: bool
    speed_mph: float
    distance_along: float
    total_distance: float
    progress_percent: float
    position: LngLat | None
    heading: float
    ready: bool


def clamp_speed(mph: float) -> float:
    return max(MIN_SPEED_MPH, min(MAX_SPEED_MPH, mph))


class SimulationDriver:
    """Advances a simulated vehicle along a route at a configurable speed.

    Lifecycle::

        UNINITIALIZED → LOADING → READY → PLAYING ⇄ PAUSED → FINISHED

    A failed load returns to ``UNINITIALIZED`` so the host can retry; the
    driver never substitutes another route.  Once ``FINISHED``, :meth:`play`
    is a no-op until :meth:`seek` moves the vehicle back along the route.

    Parameters
    ----------
    sink:
        Object with ``publish(SimulationUpdate)``; receives one update per
        tick, seek and successful load.
    speed_mph:
        Initial speed, clamped to ``[5, 120]``.
    _time_fn:
        Callable returning monotonic seconds — injectable for testing.
    """

    def __init__(
        self,
        sink=None,
        speed_mph: float = DEFAULT_SPEED_MPH,
        _time_fn=time.monotonic,
    ) -> None:
        self._sink = sink if sink is not None else NullPositionSink()
        self._time_fn = _time_fn
        self._speed_mph = clamp_speed(speed_mph)

        self._index: RoutePathIndex | None = None
        self._state = SimState.UNINITIALIZED
        self._distance = 0.0
        self._last_tick: float | None = None
        self.last_error: Exception | None = None

    # ------------------------------------------------------------------
    # Loading
    # ------------------------------------------------------------------

    @property
    def state(self) -> SimState:
        return self._state

    @property
    def ready(self) -> bool:
        return self._index is not None

    @property
    def index(self) -> RoutePathIndex | None:
        return self._index

    def load(self, source: RouteSource, waypoints: Sequence[LngLat] = ()) -> bool:
        """Fetch and index the route from *source*.

        Returns True once ``READY``.  Failures are logged and kept in
        :attr:`last_error`; they are never raised to the caller.
        """
        self._state = SimState.LOADING
        try:
            coords = source.fetch(waypoints)
        except RouteFetchError as exc:
            return self._fail(exc)
        return self.load_coordinates(coords)

    def load_coordinates(self, coordinates: Sequence[LngLat]) -> bool:
        """Index pre-fetched *coordinates*; same semantics as :meth:`load`."""
        self._state = SimState.LOADING
        try:
            index = RoutePathIndex.build(coordinates)
        except EmptyRouteError as exc:
            return self._fail(exc)

        self._index = index
        self._distance = 0.0
        self._last_tick = None
        self.last_error = None
        self._state = SimState.READY
        _logger.info(
            "Route loaded: %d coordinates, %.1f mi — ready, waiting for play",
            len(index),
            meters_to_miles(index.total_length),
        )
        self._publish(index, speed_mph=0.0)
        return True

    def stop(self) -> None:
        """Release the route and reset to ``UNINITIALIZED``."""
        self._index = None
        self._distance = 0.0
        self._last_tick = None
        self._state = SimState.UNINITIALIZED
        _logger.info("Simulation stopped")

    # ------------------------------------------------------------------
    # Playback controls
    # ------------------------------------------------------------------

    def play(self) -> None:
        if self._state not in (SimState.READY, SimState.PAUSED):
            return
        self._state = SimState.PLAYING
        # Fresh baseline so time spent paused is not driven through.
        self._last_tick = self._time_fn()
        _logger.info("Playing at %.0f mph", self._speed_mph)

    def pause(self) -> None:
        if self._state is not SimState.PLAYING:
            return
        self._state = SimState.PAUSED
        _logger.info("Paused at %.0f m", self._distance)

    def toggle_pause(self) -> None:
        if self._state is SimState.PLAYING:
            self.pause()
        else:
            self.play()

    def set_speed(self, mph: float) -> None:
        """Set the simulated speed, clamped to ``[5, 120]`` mph."""
        if not math.isfinite(mph):
            _logger.debug("Ignoring non-finite speed %r", mph)
            return
        self._speed_mph = clamp_speed(mph)

    def seek(self, target_meters: float) -> None:
        """Jump to *target_meters* along the route (clamped); keeps pause state."""
        if self._index is None or not math.isfinite(target_meters):
            return
        total = self._index.total_length
        self._distance = max(0.0, min(target_meters, total))
        if self._state is SimState.FINISHED and self._distance < total:
            self._state = SimState.PAUSED
        _logger.info("Seek to %.2f mi", meters_to_miles(self._distance))
        # Stationary unless playing.
        moving = self._state is SimState.PLAYING
        self._publish(self._index, speed_mph=self._speed_mph if moving else 0.0)

    # ------------------------------------------------------------------
    # Clock
    # ------------------------------------------------------------------

    def tick(self) -> SimulationUpdate | None:
        """Advance one step and publish the new position.

        Returns the published update, or None when not playing.
        """
        index = self._index
        if self._state is not SimState.PLAYING or index is None or self._last_tick is None:
            return None

        now = self._time_fn()
        dt = min(max(now - self._last_tick, 0.0), MAX_TICK_DT_S)
        self._last_tick = now

        total = index.total_length
        self._distance += mph_to_mps(self._speed_mph) * dt
        if self._distance >= total:
            self._distance = total
            self._state = SimState.FINISHED
            _logger.info("Reached end of route")

        return self._publish(index, speed_mph=self._speed_mph)

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    @property
    def distance_along(self) -> float:
        return self._distance

    @property
    def speed_mph(self) -> float:
        return self._speed_mph

    def get_progress(self) -> SimProgress:
        """Snapshot of playback state; does not mutate anything."""
        index = self._index
        if index is None:
            return SimProgress(
                paused=self._state is not SimState.PLAYING,
                speed_mph=self._speed_mph,
                distance_along=self._distance,
                total_distance=0.0,
                progress_percent=0.0,
                position=None,
                heading=0.0,
                ready=False,
            )

        total = index.total_length
        pos = index.position_at_distance(self._distance)
        return SimProgress(
            paused=self._state is not SimState.PLAYING,
            speed_mph=self._speed_mph,
            distance_along=self._distance,
            total_distance=total,
            progress_percent=(self._distance / total) * 100.0 if total > 0 else 0.0,
            position=pos.position,
            heading=pos.heading,
            ready=True,
        )

    # ------------------------------------------------------------------
    # Internal
    # ------------------------------------------------------------------

    def _fail(self, exc: Exception) -> bool:
        self._index = None
        self._state = SimState.UNINITIALIZED
        self.last_error = exc
        _logger.error("Route load failed: %s", exc)
        return False

    def _publish(self, index: RoutePathIndex, speed_mph: float) -> SimulationUpdate:
        pos = index.position_at_distance(self._distance)
        update = SimulationUpdate(
            position=pos.position,
            heading=pos.heading,
            speed_mph=speed_mph,
            distance_along=self._distance,
        )
        self._sink.publish(update)
        return update
