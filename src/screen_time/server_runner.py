"""Helpers to launch the local web dashboard."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional

import uvicorn

from .config import TrackerSettings
from .webapp import create_app

logger = logging.getLogger(__name__)


def run_dashboard(
    *,
    host: str = "127.0.0.1",
    port: int = 8765,
    history_path: Optional[Path] = None,
    settings: Optional[TrackerSettings] = None,
    log_level: str = "info",
) -> None:
    """Serve the tracker API with uvicorn until interrupted."""
    app = create_app(
        settings=settings or TrackerSettings(),
        history_path=history_path,
    )
    if history_path is None:
        logger.info("No history source yet; set one with PUT /api/history-source.")
    logging.getLogger("uvicorn.error").setLevel(log_level.upper())
    uvicorn.run(app, host=host, port=port, log_level=log_level)
