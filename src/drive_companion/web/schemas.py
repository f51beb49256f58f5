"""Pydantic request/response schemas for the control API."""

from __future__ import annotations

from pydantic import BaseModel, Field


class HealthResponse(BaseModel):
    status: str
    version: str


class ZoneModel(BaseModel):
    start_distance: float
    end_distance: float
    character: str


class StartDriveRequest(BaseModel):
    waypoints: list[tuple[float, float]] = Field(default_factory=list)
    """``(longitude, latitude)`` pairs; empty uses the default demo waypoints."""
    zones: list[ZoneModel] = Field(default_factory=list)
    speed_mph: float | None = None


class SpeedRequest(BaseModel):
    mph: float


class SeekRequest(BaseModel):
    meters: float


class CurveCalloutRequest(BaseModel):
    angle: float
    direction: str
    mile: float


class ProgressResponse(BaseModel):
    state: str
    paused: bool
    speed_mph: float
    distance_along: float
    total_distance: float
    progress_percent: float
    position: tuple[float, float] | None
    heading: float
    ready: bool


class MovingResponse(BaseModel):
    moving: bool


class ZoneBreakdownModel(BaseModel):
    zone: str
    distance: float
    time: float


class FastestApexModel(BaseModel):
    speed: int
    curve_angle: float
    curve_direction: str
    mile: float


class HardestCurveModel(BaseModel):
    angle: float
    direction: str
    mile: float


class DriveStatsResponse(BaseModel):
    start_time: float | None
    total_distance: float
    drive_time: float
    avg_speed: float
    top_speed: float
    technical_time: float
    technical_curves: int
    technical_avg_speed: float
    technical_distance: float
    highway_time: float
    highway_avg_speed: float
    highway_top_speed: float
    highway_distance: float
    fastest_apex: FastestApexModel | None
    hardest_curve: HardestCurveModel | None
    callouts_delivered: int
    zone_breakdown: list[ZoneBreakdownModel]
