"""FastAPI adapter exposing the track mapping engine over HTTP and WebSocket.

The adapter holds no mapping state of its own: everything lives in the
:class:`~racing_map.mapping.session.MappingSession` stored on
``app.state.session``.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Any

from fastapi import Body, FastAPI, HTTPException, Request, WebSocket, WebSocketDisconnect
from starlette.concurrency import run_in_threadpool

from racing_map.config import MappingConfig, configure_logging
from racing_map.mapping.session import MappingSession
from racing_map.telemetry.models import to_iso, utc_now
from racing_map.web.schemas import Envelope, HealthResponse, SessionStartRequest

__version__ = "0.1.0"

_logger = logging.getLogger(__name__)


def _envelope(data: Any = None, message: str | None = None) -> Envelope:
    return Envelope(success=True, data=data, message=message, timestamp=to_iso(utc_now()))


def _active_session(request: Request) -> MappingSession:
    session: MappingSession = request.app.state.session
    if not session.active:
        raise HTTPException(status_code=503, detail="Track mapping service not available")
    return session


def _positions_payload(session: MappingSession) -> dict:
    positions = session.engine.get_current_driver_positions()
    return {
        "positions": {k: v.to_dict() for k, v in positions.items()},
        "count": len(positions),
    }


def _session_state(session: MappingSession) -> dict:
    return {
        "active": session.active,
        "trackName": session.track_name,
        "startedAt": to_iso(session.started_at) if session.started_at else None,
    }


def create_app(session: MappingSession | None = None) -> FastAPI:
    """Build the app around *session* (a fresh one from the environment if omitted)."""
    if session is None:
        config = MappingConfig.from_env()
        configure_logging(config.log_level)
        session = MappingSession(config)

    app = FastAPI(title="Live Track Map", version=__version__)
    app.state.session = session

    # ------------------------------------------------------------------
    # Health / session lifecycle
    # ------------------------------------------------------------------

    @app.get("/health", response_model=HealthResponse)
    def health() -> HealthResponse:
        return HealthResponse(status="ok", version=__version__)

    @app.post("/api/session/start", response_model=Envelope)
    def start_session(request: Request, req: SessionStartRequest | None = None) -> Envelope:
        s: MappingSession = request.app.state.session
        s.start(req.track_name if req else None)
        return _envelope(_session_state(s), "Mapping session started")

    @app.post("/api/session/end", response_model=Envelope)
    def end_session(request: Request) -> Envelope:
        s: MappingSession = request.app.state.session
        s.end()
        return _envelope(_session_state(s), "Mapping session ended")

    @app.get("/api/session", response_model=Envelope)
    def session_state(request: Request) -> Envelope:
        return _envelope(_session_state(request.app.state.session))

    # ------------------------------------------------------------------
    # Feed ingestion
    # ------------------------------------------------------------------

    @app.post("/api/feed/position", response_model=Envelope)
    def ingest_position(request: Request, frame: dict[str, Any] = Body(...)) -> Envelope:
        s = _active_session(request)
        positions = s.engine.process_position_data(frame)
        if positions is None:
            raise HTTPException(status_code=422, detail="Malformed position frame")
        return _envelope({"accepted": len(positions)})

    @app.post("/api/feed/timing", response_model=Envelope)
    def ingest_timing(request: Request, frame: dict[str, Any] = Body(...)) -> Envelope:
        s = _active_session(request)
        if not isinstance(frame.get("drivers"), dict):
            raise HTTPException(status_code=422, detail="Malformed timing frame")
        s.engine.process_timing_data(frame)
        return _envelope({"accepted": len(frame["drivers"])})

    # ------------------------------------------------------------------
    # Track map
    # ------------------------------------------------------------------

    @app.get("/api/track/map", response_model=Envelope)
    def track_map(request: Request) -> Envelope:
        s = _active_session(request)
        return _envelope(s.engine.export_track_map().to_dict())

    @app.get("/api/track/positions", response_model=Envelope)
    def track_positions(request: Request) -> Envelope:
        s = _active_session(request)
        return _envelope(_positions_payload(s))

    @app.get("/api/track/layout", response_model=Envelope)
    def track_layout(request: Request, trackName: str | None = None) -> Envelope:  # noqa: N803
        s = _active_session(request)
        track_map = s.engine.generate_track_map(trackName or s.track_name)
        if track_map is None:
            raise HTTPException(
                status_code=404, detail="Insufficient data to generate track map"
            )
        return _envelope(track_map.to_dict())

    @app.get("/api/track/stats", response_model=Envelope)
    def track_stats(request: Request) -> Envelope:
        s = _active_session(request)
        return _envelope(s.engine.stats().to_dict())

    @app.post("/api/track/clear", response_model=Envelope)
    def track_clear(request: Request) -> Envelope:
        s = _active_session(request)
        s.engine.clear()
        return _envelope(message="Track mapping data cleared")

    # ------------------------------------------------------------------
    # Live push
    # ------------------------------------------------------------------

    @app.websocket("/ws/positions")
    async def positions_ws(websocket: WebSocket) -> None:
        """Push a positions snapshot every broadcast interval.

        Any text message from the client triggers an immediate snapshot.
        Snapshots are taken in the threadpool because the engine lock blocks.
        """
        await websocket.accept()
        s: MappingSession = websocket.app.state.session
        interval = s.config.broadcast_interval_s
        try:
            while True:
                data = await run_in_threadpool(_positions_payload, s)
                await websocket.send_json({
                    "type": "positions",
                    "data": data,
                    "timestamp": to_iso(utc_now()),
                })
                try:
                    await asyncio.wait_for(websocket.receive_text(), timeout=interval)
                except asyncio.TimeoutError:
                    pass
        except WebSocketDisconnect:
            _logger.debug("Position subscriber disconnected")

    return app


app = create_app()
