"""Tests for environment-driven settings."""

from __future__ import annotations

import logging

import pytest

from drive_companion.config import Settings
from drive_companion.route.source import MapboxDirectionsSource

_VARS = [
    "DRIVE_COMPANION_MAPBOX_TOKEN",
    "MAPBOX_TOKEN",
    "DRIVE_COMPANION_DIRECTIONS_URL",
    "DRIVE_COMPANION_HTTP_TIMEOUT_S",
    "DRIVE_COMPANION_TICK_INTERVAL_S",
    "DRIVE_COMPANION_SPEED_MPH",
    "DRIVE_COMPANION_LOG_LEVEL",
]


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for name in _VARS:
        monkeypatch.delenv(name, raising=False)


def test_defaults():
    s = Settings.from_env(dotenv=False)
    assert s == Settings()
    assert s.directions_url == MapboxDirectionsSource.DEFAULT_BASE_URL


def test_reads_prefixed_variables(monkeypatch):
    monkeypatch.setenv("DRIVE_COMPANION_MAPBOX_TOKEN", "pk.abc")
    monkeypatch.setenv("DRIVE_COMPANION_SPEED_MPH", "55")
    monkeypatch.setenv("DRIVE_COMPANION_TICK_INTERVAL_S", "0.5")
    monkeypatch.setenv("DRIVE_COMPANION_LOG_LEVEL", "debug")
    s = Settings.from_env(dotenv=False)
    assert s.mapbox_token == "pk.abc"
    assert s.speed_mph == 55.0
    assert s.tick_interval_s == 0.5
    assert s.log_level == "DEBUG"


def test_plain_mapbox_token_fallback(monkeypatch):
    monkeypatch.setenv("MAPBOX_TOKEN", "pk.fallback")
    assert Settings.from_env(dotenv=False).mapbox_token == "pk.fallback"


def test_invalid_number_falls_back_with_warning(monkeypatch, caplog):
    monkeypatch.setenv("DRIVE_COMPANION_HTTP_TIMEOUT_S", "soon")
    with caplog.at_level(logging.WARNING):
        s = Settings.from_env(dotenv=False)
    assert s.http_timeout_s == 10.0
    assert "HTTP_TIMEOUT_S" in caplog.text


def test_route_source_uses_settings():
    src = Settings(mapbox_token="pk.x", directions_url="http://local/route", http_timeout_s=3.0)
    source = src.route_source()
    assert isinstance(source, MapboxDirectionsSource)
    assert source._base_url == "http://local/route"
