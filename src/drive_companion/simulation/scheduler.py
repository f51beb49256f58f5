"""TickScheduler — fixed-cadence background clock for the simulator."""

from __future__ import annotations

import logging
import threading
import time
from collections.abc import Callable

_logger = logging.getLogger(__name__)


class TickScheduler:
    """Calls *callback* every *interval_s* seconds on a daemon thread.

    A callback that raises is logged and the loop keeps running; one bad
    tick must not end the drive.

    Parameters
    ----------
    callback:
        Zero-argument callable invoked once per tick.
    interval_s:
        Target period in seconds (the simulator runs at ~1 Hz).
    """

    def __init__(self, callback: Callable[[], object], interval_s: float = 1.0) -> None:
        if interval_s <= 0:
            raise ValueError("interval_s must be > 0")
        self._callback = callback
        self._interval = interval_s
        self._stop_event = threading.Event()
        self._thread: threading.Thread | None = None

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    @property
    def running(self) -> bool:
        return self._thread is not None and self._thread.is_alive()

    def start(self) -> None:
        """Start the background tick thread (no-op if already running)."""
        if self.running:
            return
        self._stop_event.clear()
        self._thread = threading.Thread(target=self._run, daemon=True, name="SimTick")
        self._thread.start()

    def stop(self) -> None:
        """Signal the tick thread to stop and join it."""
        self._stop_event.set()
        if self._thread is not None:
            self._thread.join(timeout=2.0)
            self._thread = None

    # ------------------------------------------------------------------
    # Internal
    # ------------------------------------------------------------------

    def _run(self) -> None:
        while not self._stop_event.is_set():
            t0 = time.monotonic()
            try:
                self._callback()
            except Exception:
                _logger.exception("Tick callback failed")
            wait = self._interval - (time.monotonic() - t0)
            if wait > 0:
                self._stop_event.wait(wait)
