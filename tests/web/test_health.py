"""/health endpoint."""

from __future__ import annotations

from drive_companion import __version__


def test_health_status_200(client):
    resp = client.get("/health")
    assert resp.status_code == 200


def test_health_body(client):
    data = client.get("/health").json()
    assert data["status"] == "ok"
    assert data["version"] == __version__
