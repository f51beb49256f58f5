"""Runtime settings read from the environment (and ``.env`` via python-dotenv)."""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass

from dotenv import load_dotenv

from drive_companion.route.source import MapboxDirectionsSource

_logger = logging.getLogger(__name__)

_PREFIX = "DRIVE_COMPANION_"


def _env_float(name: str, default: float) -> float:
    raw = os.environ.get(_PREFIX + name)
    if raw is None or raw == "":
        return default
    try:
        return float(raw)
    except ValueError:
        _logger.warning("Invalid %s%s=%r; using %s", _PREFIX, name, raw, default)
        return default


@dataclass(frozen=True)
class Settings:
    """Drive companion configuration.

    Use :meth:`from_env` at process start; construct directly in tests.
    """

    mapbox_token: str = ""
    directions_url: str = MapboxDirectionsSource.DEFAULT_BASE_URL
    http_timeout_s: float = 10.0
    tick_interval_s: float = 1.0
    speed_mph: float = 40.0
    log_level: str = "INFO"

    @classmethod
    def from_env(cls, dotenv: bool = True) -> Settings:
        """Build settings from ``DRIVE_COMPANION_*`` variables.

        ``MAPBOX_TOKEN`` is accepted as a fallback for the access token.
        Unparseable numbers fall back to their defaults with a warning.
        """
        if dotenv:
            load_dotenv()
        defaults = cls()
        return cls(
            mapbox_token=(
                os.environ.get(_PREFIX + "MAPBOX_TOKEN")
                or os.environ.get("MAPBOX_TOKEN", "")
            ),
            directions_url=os.environ.get(_PREFIX + "DIRECTIONS_URL", defaults.directions_url),
            http_timeout_s=_env_float("HTTP_TIMEOUT_S", defaults.http_timeout_s),
            tick_interval_s=_env_float("TICK_INTERVAL_S", defaults.tick_interval_s),
            speed_mph=_env_float("SPEED_MPH", defaults.speed_mph),
            log_level=os.environ.get(_PREFIX + "LOG_LEVEL", defaults.log_level).upper(),
        )

    def route_source(self) -> MapboxDirectionsSource:
        """Mapbox directions source configured from these settings."""
        return MapboxDirectionsSource(
            access_token=self.mapbox_token,
            base_url=self.directions_url,
            timeout=self.http_timeout_s,
        )


def configure_logging(level: str = "INFO") -> None:
    """Console logging for scripts and the web app."""
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format="%(asctime)s [%(levelname)8s] %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )
