"""FastAPI control surface for a simulated drive."""

from __future__ import annotations

import logging

from dotenv import load_dotenv
from fastapi import FastAPI, HTTPException, Request

from drive_companion import __version__
from drive_companion.config import Settings
from drive_companion.route.source import MA181_WAYPOINTS
from drive_companion.session import DriveSession
from drive_companion.telemetry.models import DriveStats, Zone
from drive_companion.web.schemas import (
    CurveCalloutRequest,
    DriveStatsResponse,
    HealthResponse,
    MovingResponse,
    ProgressResponse,
    SeekRequest,
    SpeedRequest,
    StartDriveRequest,
)

load_dotenv()  # loads .env from project root; must run before env vars are consumed

_logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# App setup
# ---------------------------------------------------------------------------

app = FastAPI(title="Drive Companion", version=__version__)

_settings = Settings.from_env(dotenv=False)
app.state.settings = _settings
app.state.route_source = None  # built from settings on first start
app.state.tick_interval_s = _settings.tick_interval_s
app.state.session = None


def _route_source(request: Request):
    state = request.app.state
    if state.route_source is None:
        state.route_source = state.settings.route_source()
    return state.route_source


def _active_session(request: Request, allow_ended: bool = False) -> DriveSession:
    session: DriveSession | None = request.app.state.session
    if session is None or (session.ended and not allow_ended):
        raise HTTPException(status_code=409, detail="No active drive")
    return session


def _progress(session: DriveSession) -> ProgressResponse:
    p = session.progress()
    return ProgressResponse(
        state=session.driver.state.value,
        paused=p.paused,
        speed_mph=p.speed_mph,
        distance_along=p.distance_along,
        total_distance=p.total_distance,
        progress_percent=p.progress_percent,
        position=p.position,
        heading=p.heading,
        ready=p.ready,
    )


def _stats(stats: DriveStats) -> DriveStatsResponse:
    return DriveStatsResponse.model_validate(stats.to_dict())


# ---------------------------------------------------------------------------
# Endpoints
# ---------------------------------------------------------------------------


@app.get("/health", response_model=HealthResponse)
def health() -> HealthResponse:
    return HealthResponse(status="ok", version=__version__)


@app.post("/api/drive/start", response_model=ProgressResponse)
def start_drive(req: StartDriveRequest, request: Request) -> ProgressResponse:
    """Load the route and start a new drive, ending any previous one."""
    state = request.app.state
    previous: DriveSession | None = state.session
    if previous is not None and not previous.ended:
        previous.end()

    session = DriveSession(
        _route_source(request),
        zones=[Zone(**z.model_dump()) for z in req.zones],
        tick_interval_s=state.tick_interval_s,
        speed_mph=req.speed_mph if req.speed_mph is not None else state.settings.speed_mph,
    )
    state.session = session

    waypoints = [tuple(w) for w in req.waypoints] or list(MA181_WAYPOINTS)
    if not session.start(waypoints):
        raise HTTPException(status_code=502, detail=str(session.driver.last_error))
    return _progress(session)


@app.get("/api/sim/progress", response_model=ProgressResponse)
def progress(request: Request) -> ProgressResponse:
    return _progress(_active_session(request))


@app.post("/api/sim/play", response_model=ProgressResponse)
def play(request: Request) -> ProgressResponse:
    session = _active_session(request)
    session.play()
    return _progress(session)


@app.post("/api/sim/pause", response_model=ProgressResponse)
def pause(request: Request) -> ProgressResponse:
    session = _active_session(request)
    session.pause()
    return _progress(session)


@app.post("/api/sim/toggle", response_model=ProgressResponse)
def toggle(request: Request) -> ProgressResponse:
    session = _active_session(request)
    session.toggle_pause()
    return _progress(session)


@app.post("/api/sim/speed", response_model=ProgressResponse)
def set_speed(req: SpeedRequest, request: Request) -> ProgressResponse:
    session = _active_session(request)
    session.set_speed(req.mph)
    return _progress(session)


@app.post("/api/sim/seek", response_model=ProgressResponse)
def seek(req: SeekRequest, request: Request) -> ProgressResponse:
    session = _active_session(request)
    session.seek(req.meters)
    return _progress(session)


@app.post("/api/drive/callout", status_code=204)
def curve_callout(req: CurveCalloutRequest, request: Request) -> None:
    _active_session(request).record_curve_callout(req.angle, req.direction, req.mile)


@app.post("/api/drive/callout-spoken", status_code=204)
def callout_spoken(request: Request) -> None:
    _active_session(request).record_callout_spoken()


@app.get("/api/drive/moving", response_model=MovingResponse)
def moving(request: Request) -> MovingResponse:
    return MovingResponse(moving=_active_session(request).was_moving_recently())


@app.get("/api/drive/stats", response_model=DriveStatsResponse)
def live_stats(request: Request) -> DriveStatsResponse:
    """Running stats during a drive; the final stats once it has ended."""
    return _stats(_active_session(request, allow_ended=True).stats())


@app.post("/api/drive/end", response_model=DriveStatsResponse)
def end_drive(request: Request) -> DriveStatsResponse:
    """Finish the drive and return the final stats."""
    session = _active_session(request)
    stats = session.end()
    _logger.info("Drive ended via API")
    return _stats(stats)
