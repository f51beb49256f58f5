"""Route-following drive simulator.

Public API
----------
SimulationDriver    - play/pause/seek/speed over a fixed route
SimState            - driver lifecycle states
SimProgress         - read-only progress snapshot
SimulationUpdate    - one published position/heading/speed record
TickScheduler       - ~1 Hz background clock
NullPositionSink / RecordingPositionSink / CallbackPositionSink - update receivers
"""

from drive_companion.simulation.driver import SimProgress, SimState, SimulationDriver
from drive_companion.simulation.scheduler import TickScheduler
from drive_companion.simulation.sink import (
    CallbackPositionSink,
    NullPositionSink,
    RecordingPositionSink,
    SimulationUpdate,
)

__all__ = [
    "CallbackPositionSink",
    "NullPositionSink",
    "RecordingPositionSink",
    "SimProgress",
    "SimState",
    "SimulationDriver",
    "SimulationUpdate",
    "TickScheduler",
]
