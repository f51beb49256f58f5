"""Position sinks — receivers for simulated GPS updates."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass

from drive_companion.route.models import LngLat


@dataclass(frozen=True)
class SimulationUpdate:
    """One atomic position/heading/speed publication."""

    position: LngLat
    heading: float
    speed_mph: float
    distance_along: float


class NullPositionSink:
    """Discards every update; the default when the host passes no sink."""

    def publish(self, update: SimulationUpdate) -> None:
        pass


class RecordingPositionSink:
    """Keeps every published update; used in tests."""

    def __init__(self) -> None:
        self.updates: list[SimulationUpdate] = []

    def publish(self, update: SimulationUpdate) -> None:
        self.updates.append(update)

    @property
    def last(self) -> SimulationUpdate | None:
        return self.updates[-1] if self.updates else None


class CallbackPositionSink:
    """Forwards each update to *callback*."""

    def __init__(self, callback: Callable[[SimulationUpdate], None]) -> None:
        self._callback = callback

    def publish(self, update: SimulationUpdate) -> None:
        self._callback(update)
