"""Shared fixtures for web tests."""

from __future__ import annotations

import math

import pytest
from fastapi.testclient import TestClient

from drive_companion.route.geometry import EARTH_RADIUS_M
from drive_companion.route.source import StaticRouteSource
from drive_companion.web.app import app

KM_DEG = 1000.0 / (EARTH_RADIUS_M * math.radians(1.0))


def make_route(n_segments: int = 2) -> list[tuple[float, float]]:
    """Eastbound equator polyline of 1000 m segments."""
    return [(i * KM_DEG, 0.0) for i in range(n_segments + 1)]


@pytest.fixture
def client():
    """FastAPI test client driving a static route with no background ticks."""
    app.state.route_source = StaticRouteSource(make_route())
    app.state.tick_interval_s = None
    app.state.session = None
    with TestClient(app) as c:
        yield c
    session = app.state.session
    if session is not None and not session.ended:
        session.end()
    app.state.session = None
    app.state.route_source = None
