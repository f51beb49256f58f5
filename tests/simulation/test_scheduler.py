"""Tests for TickScheduler."""

from __future__ import annotations

import threading

import pytest

from drive_companion.simulation.scheduler import TickScheduler


def test_rejects_non_positive_interval():
    with pytest.raises(ValueError):
        TickScheduler(lambda: None, interval_s=0)


def test_calls_callback_until_stopped():
    fired = threading.Event()
    calls = []

    def cb():
        calls.append(1)
        if len(calls) >= 3:
            fired.set()

    sched = TickScheduler(cb, interval_s=0.01)
    sched.start()
    try:
        assert fired.wait(timeout=2.0)
        assert sched.running
    finally:
        sched.stop()
    assert not sched.running
    n = len(calls)
    assert n >= 3


def test_callback_exception_does_not_stop_loop():
    fired = threading.Event()
    calls = []

    def cb():
        calls.append(1)
        if len(calls) == 1:
            raise RuntimeError("bad tick")
        fired.set()

    sched = TickScheduler(cb, interval_s=0.01)
    sched.start()
    try:
        assert fired.wait(timeout=2.0)
    finally:
        sched.stop()
    assert len(calls) >= 2


def test_start_is_idempotent():
    sched = TickScheduler(lambda: None, interval_s=0.05)
    sched.start()
    first = sched._thread
    sched.start()
    assert sched._thread is first
    sched.stop()


def test_stop_without_start_is_safe():
    TickScheduler(lambda: None).stop()
