"""FastAPI application that exposes the tracker's ledgers over a local API."""

from __future__ import annotations

from contextlib import asynccontextmanager
from pathlib import Path
from typing import Any, AsyncIterator, Dict, Iterable, Optional

from fastapi import FastAPI, HTTPException, Request
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel, ConfigDict

from .config import TrackerSettings
from .models import ApplicationUsage, WebsiteUsage
from .reporting import format_duration, sort_by_time
from .tracker import UsageTracker


class HistorySourcePayload(BaseModel):
    path: str

    model_config = ConfigDict(extra="forbid")


def create_app(
    *,
    settings: Optional[TrackerSettings] = None,
    history_path: Optional[Path] = None,
    tracker: Optional[UsageTracker] = None,
    start_tracking: bool = True,
) -> FastAPI:
    """Instantiate the FastAPI application."""
    resolved_tracker = tracker or UsageTracker(settings, history_path=history_path)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        if resolved_tracker.history_path is not None:
            resolved_tracker.refresh_now()
        if start_tracking:
            resolved_tracker.start()
        try:
            yield
        finally:
            resolved_tracker.stop()

    app = FastAPI(title="Screen Time Tracker", version="0.1.0", lifespan=lifespan)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.state.tracker = resolved_tracker

    @app.get("/api/status")
    def status(request: Request) -> Dict[str, Any]:
        tracker: UsageTracker = request.app.state.tracker
        history = tracker.history_path
        return {
            "state": tracker.state.value,
            "history_path": str(history) if history else None,
            "last_refresh": tracker.last_refresh.isoformat(),
            "tick_seconds": tracker.settings.tick_seconds,
            "refresh_seconds": tracker.settings.refresh_interval.total_seconds(),
        }

    @app.get("/api/applications")
    def applications(request: Request) -> Dict[str, Any]:
        usages = request.app.state.tracker.application_usages()
        return {"applications": _application_entries(usages)}

    @app.get("/api/websites")
    def websites(request: Request) -> Dict[str, Any]:
        tracker: UsageTracker = request.app.state.tracker
        return {
            "window_hours": tracker.settings.history_window.total_seconds() / 3600.0,
            "websites": _website_entries(tracker.website_usages()),
        }

    @app.post("/api/refresh")
    def refresh(request: Request) -> Dict[str, Any]:
        usages = request.app.state.tracker.refresh_now()
        return {"websites": _website_entries(usages)}

    @app.put("/api/history-source")
    def set_history_source(payload: HistorySourcePayload, request: Request) -> Dict[str, Any]:
        raw = payload.path.strip()
        if not raw:
            raise HTTPException(status_code=400, detail="path is required")
        path = Path(raw).expanduser()
        if not path.is_file():
            raise HTTPException(status_code=400, detail=f"History file not found: {path}")
        usages = request.app.state.tracker.set_history_path(path)
        return {"history_path": str(path), "websites": _website_entries(usages)}

    return app


def _application_entries(usages: Iterable[ApplicationUsage]) -> list[Dict[str, Any]]:
    return [
        {
            "name": usage.name,
            "seconds": usage.time_spent,
            "display": format_duration(usage.time_spent),
        }
        for usage in sort_by_time(usages)
    ]


def _website_entries(usages: Iterable[WebsiteUsage]) -> list[Dict[str, Any]]:
    return [
        {
            "domain": usage.domain,
            "seconds": usage.time_spent,
            "display": format_duration(usage.time_spent),
        }
        for usage in sort_by_time(usages)
    ]
