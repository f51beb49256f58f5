"""Drive companion core: route-following simulator and drive telemetry."""

__version__ = "0.1.0"
