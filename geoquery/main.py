# geoquery/main.py
from __future__ import annotations

import logging
from datetime import datetime
from typing import Any, Dict, Optional

from fastapi import FastAPI, HTTPException, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import HTMLResponse
from pydantic import BaseModel, Field

from geoquery import settings
from geoquery.client import SpatialIndexClient
from geoquery.models import GeoPoint, QueryOutcome
from geoquery.orchestrator import QueryOrchestrator
from geoquery.overlay import OverlayState
from geoquery.surface import FoliumSurface

log = logging.getLogger("uvicorn.error")


class NearestReq(BaseModel):
    location: str = Field(..., description="lat, lng")


class RangeReq(BaseModel):
    center: str = Field(..., description="lat, lng")
    radius: str = Field(..., description="radius in kilometres", examples=["5"])


class IntersectionReq(BaseModel):
    area: str = Field(..., description="lat,lng; lat,lng; lat,lng")


class UiResp(BaseModel):
    ok: bool
    stale: bool = False
    message: Optional[str] = None
    state: Dict[str, Any]


def _respond(console: QueryOrchestrator, outcome: QueryOutcome) -> UiResp:
    if not outcome.ok and not outcome.stale:
        status = 400 if outcome.error_kind == "ParseError" else 502
        raise HTTPException(status_code=status, detail=outcome.message)
    return UiResp(ok=outcome.ok, stale=outcome.stale, message=outcome.message, state=console.overlay.snapshot())


def create_app(
    client: Optional[SpatialIndexClient] = None,
    surface: Optional[FoliumSurface] = None,
) -> FastAPI:
    app = FastAPI(title="GeoQuery Map Console", version="0.1.0")
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["*"],
        allow_headers=["*"],
    )

    surface = surface or FoliumSurface()
    app.state.surface = surface
    app.state.console = QueryOrchestrator(client or SpatialIndexClient(), OverlayState(surface))

    @app.on_event("startup")
    async def _log_startup() -> None:
        log.info("GeoQuery console using spatial index at %s", app.state.console.client.base_url)
        log.info("GeoQuery routes at startup: %s", [r.path for r in app.routes])

    @app.get("/healthz")
    def healthz() -> Dict[str, bool]:
        return {"ok": True}

    @app.get("/", response_class=HTMLResponse)
    def index(request: Request) -> HTMLResponse:
        return HTMLResponse(request.app.state.surface.render_html())

    @app.get("/ui/state")
    def ui_state(request: Request) -> Dict[str, Any]:
        return request.app.state.console.overlay.snapshot()

    @app.post("/ui/point", response_model=UiResp)
    async def ui_point(req: GeoPoint, request: Request) -> UiResp:
        console: QueryOrchestrator = request.app.state.console
        return _respond(console, await console.add_point(req))

    @app.post("/ui/nearest", response_model=UiResp)
    async def ui_nearest(req: NearestReq, request: Request) -> UiResp:
        console: QueryOrchestrator = request.app.state.console
        return _respond(console, await console.nearest_neighbor(req.location))

    @app.post("/ui/range", response_model=UiResp)
    async def ui_range(req: RangeReq, request: Request) -> UiResp:
        console: QueryOrchestrator = request.app.state.console
        return _respond(console, await console.range_query(req.center, req.radius))

    @app.post("/ui/intersection", response_model=UiResp)
    async def ui_intersection(req: IntersectionReq, request: Request) -> UiResp:
        console: QueryOrchestrator = request.app.state.console
        return _respond(console, await console.intersection(req.area))

    @app.post("/ui/snapshot")
    def ui_snapshot(request: Request) -> Dict[str, str]:
        stamp = datetime.utcnow().strftime("%Y%m%d_%H%M%S")
        out = request.app.state.surface.save(settings.ARTIFACTS_DIR / f"map_{stamp}.html")
        return {"map_path": str(out)}

    return app


app = create_app()
