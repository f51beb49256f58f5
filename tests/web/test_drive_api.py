"""Drive control API: start, simulator controls, callouts, stats, end."""

from __future__ import annotations

import pytest

from drive_companion.route.source import StaticRouteSource
from drive_companion.web.app import app


def _start(client, **body):
    return client.post("/api/drive/start", json=body)


# ---------------------------------------------------------------------------
# Start
# ---------------------------------------------------------------------------


def test_start_returns_ready_progress(client):
    resp = _start(client, speed_mph=55)
    assert resp.status_code == 200
    data = resp.json()
    assert data["ready"] is True
    assert data["state"] == "ready"
    assert data["paused"] is True
    assert data["speed_mph"] == 55.0
    assert data["total_distance"] == pytest.approx(2000.0, rel=1e-6)
    assert data["position"] == [0.0, 0.0]


def test_start_failure_returns_502(client):
    app.state.route_source = StaticRouteSource([(0.0, 0.0)])
    resp = _start(client)
    assert resp.status_code == 502
    assert "coordinate" in resp.json()["detail"]


def test_start_ends_previous_drive(client):
    _start(client)
    first = app.state.session
    _start(client)
    assert first.ended
    assert app.state.session is not first


def test_controls_without_drive_return_409(client):
    assert client.get("/api/sim/progress").status_code == 409
    assert client.post("/api/sim/play").status_code == 409
    assert client.post("/api/drive/end").status_code == 409


# ---------------------------------------------------------------------------
# Simulator controls
# ---------------------------------------------------------------------------


def test_play_pause_toggle(client):
    _start(client)
    assert client.post("/api/sim/play").json()["state"] == "playing"
    assert client.post("/api/sim/pause").json()["paused"] is True
    assert client.post("/api/sim/toggle").json()["paused"] is False


def test_speed_is_clamped(client):
    _start(client)
    assert client.post("/api/sim/speed", json={"mph": 500}).json()["speed_mph"] == 120.0
    assert client.post("/api/sim/speed", json={"mph": 1}).json()["speed_mph"] == 5.0


def test_seek_clamps_to_route(client):
    _start(client)
    data = client.post("/api/sim/seek", json={"meters": 1000}).json()
    assert data["distance_along"] == pytest.approx(1000.0)
    assert data["progress_percent"] == pytest.approx(50.0, rel=1e-6)

    data = client.post("/api/sim/seek", json={"meters": 99999}).json()
    assert data["progress_percent"] == pytest.approx(100.0)


def test_progress_endpoint(client):
    _start(client)
    data = client.get("/api/sim/progress").json()
    assert data["ready"] is True
    assert data["heading"] == pytest.approx(90.0)


# ---------------------------------------------------------------------------
# Telemetry
# ---------------------------------------------------------------------------


def test_callouts_feed_stats(client):
    _start(client)
    assert client.post(
        "/api/drive/callout", json={"angle": 62, "direction": "right", "mile": 1.4}
    ).status_code == 204
    assert client.post("/api/drive/callout-spoken").status_code == 204

    stats = client.get("/api/drive/stats").json()
    assert stats["callouts_delivered"] == 1
    assert stats["hardest_curve"] == {"angle": 62.0, "direction": "right", "mile": 1.4}


def test_moving_false_at_start(client):
    _start(client)
    assert client.get("/api/drive/moving").json() == {"moving": False}


def test_zones_reach_the_aggregator(client):
    _start(
        client,
        zones=[
            {"start_distance": 0, "end_distance": 500, "character": "urban"},
            {"start_distance": 500, "end_distance": 2000, "character": "transit"},
        ],
    )
    client.post("/api/sim/seek", json={"meters": 300})
    client.post("/api/sim/seek", json={"meters": 900})
    stats = client.post("/api/drive/end").json()

    zones = {r["zone"]: r["distance"] for r in stats["zone_breakdown"]}
    assert zones["urban"] == pytest.approx(500.0)
    assert zones["transit"] == pytest.approx(400.0)
    assert stats["highway_distance"] == pytest.approx(400.0)
    assert stats["total_distance"] == pytest.approx(900.0)


# ---------------------------------------------------------------------------
# End
# ---------------------------------------------------------------------------


def test_end_returns_final_stats_and_closes_drive(client):
    _start(client)
    client.post("/api/drive/callout-spoken")
    resp = client.post("/api/drive/end")
    assert resp.status_code == 200
    assert resp.json()["callouts_delivered"] == 1

    assert client.get("/api/sim/progress").status_code == 409
    assert client.post("/api/drive/end").status_code == 409
    assert client.get("/api/drive/stats").json()["callouts_delivered"] == 1
