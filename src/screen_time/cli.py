"""Command-line interface for the screen time tracker."""

from __future__ import annotations

import logging
import threading
from pathlib import Path
from typing import Optional

import typer

from .config import TrackerSettings
from .paths import find_history_path
from .server_runner import run_dashboard

app = typer.Typer(help="Foreground application and website time tracker.")


@app.callback(no_args_is_help=True)
def main(verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable verbose logs.")) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s %(message)s",
    )


def _resolve_history(history: Optional[Path], auto_detect: bool) -> Optional[Path]:
    if history is not None:
        if not history.is_file():
            raise typer.BadParameter(f"History file not found: {history}", param_hint="--history")
        return history
    return find_history_path() if auto_detect else None


def _build_settings(tick_seconds: float, refresh_seconds: float, window_hours: float) -> TrackerSettings:
    try:
        return TrackerSettings.from_intervals(
            tick_seconds=tick_seconds,
            refresh_seconds=refresh_seconds,
            window_hours=window_hours,
        )
    except ValueError as exc:
        raise typer.BadParameter(str(exc)) from exc


HISTORY_OPTION = typer.Option(
    None,
    "--history",
    path_type=Path,
    help="Chrome History database to read website visits from.",
)
AUTO_DETECT_OPTION = typer.Option(
    True,
    "--auto-detect/--no-auto-detect",
    help="Look for Chrome's History file in its usual location when --history is not given.",
)
WINDOW_OPTION = typer.Option(
    24.0,
    "--window-hours",
    min=0.1,
    help="How far back to read browser history.",
)


@app.command()
def track(
    history: Optional[Path] = HISTORY_OPTION,
    auto_detect: bool = AUTO_DETECT_OPTION,
    tick_seconds: float = typer.Option(
        1.0,
        "--interval",
        min=0.1,
        help="Application sampling interval in seconds.",
    ),
    refresh_seconds: float = typer.Option(
        300.0,
        "--refresh-interval",
        min=1.0,
        help="Seconds between website usage rebuilds.",
    ),
    window_hours: float = WINDOW_OPTION,
    report_every: Optional[float] = typer.Option(
        None,
        "--report-every",
        min=1.0,
        help="Print the summary every N seconds while tracking.",
    ),
) -> None:
    """Track usage until interrupted, then print a summary."""
    from .reporting import SummaryPrinter
    from .tracker import UsageTracker

    settings = _build_settings(tick_seconds, refresh_seconds, window_hours)
    tracker = UsageTracker(settings, history_path=_resolve_history(history, auto_detect))
    printer = SummaryPrinter(window_hours=window_hours)

    tracker.refresh_now()
    tracker.start()
    wait = threading.Event()
    try:
        while not wait.wait(report_every if report_every else 3600.0):
            if report_every:
                printer.print_summary(tracker.application_usages(), tracker.website_usages())
    except KeyboardInterrupt:
        logging.getLogger(__name__).info("Tracking interrupted.")
    finally:
        tracker.stop()
    printer.print_summary(tracker.application_usages(), tracker.website_usages())


@app.command()
def websites(
    history: Optional[Path] = HISTORY_OPTION,
    auto_detect: bool = AUTO_DETECT_OPTION,
    window_hours: float = WINDOW_OPTION,
    browser_active: bool = typer.Option(
        False,
        "--browser-active",
        help="Credit the last visited site with the time since its visit.",
    ),
) -> None:
    """Rebuild website usage once from a history file and print it."""
    from .foreground import NullForegroundSource
    from .reporting import SummaryPrinter
    from .tracker import UsageTracker

    path = _resolve_history(history, auto_detect)
    if path is None:
        raise typer.BadParameter("No Chrome history file found.", param_hint="--history")

    settings = _build_settings(1.0, 300.0, window_hours)
    foreground = _StaticBrowserSource() if browser_active else NullForegroundSource()
    tracker = UsageTracker(settings, foreground=foreground, history_path=path)
    usages = tracker.refresh_now()
    SummaryPrinter(window_hours=window_hours).print_summary([], usages)


class _StaticBrowserSource:
    """Pretends the browser holds focus, for one-shot reports."""

    def current_application_name(self) -> Optional[str]:
        return None

    def is_tracked_browser(self) -> bool:
        return True


@app.command()
def web(
    host: str = typer.Option("127.0.0.1", "--host", help="Interface to bind the dashboard."),
    port: int = typer.Option(
        8765, "--port", min=1, max=65535, help="TCP port for the dashboard."
    ),
    history: Optional[Path] = HISTORY_OPTION,
    auto_detect: bool = AUTO_DETECT_OPTION,
    tick_seconds: float = typer.Option(
        1.0,
        "--interval",
        min=0.1,
        help="Application sampling interval in seconds.",
    ),
    refresh_seconds: float = typer.Option(
        300.0,
        "--refresh-interval",
        min=1.0,
        help="Seconds between website usage rebuilds.",
    ),
    window_hours: float = WINDOW_OPTION,
    log_level: str = typer.Option(
        "info",
        "--log-level",
        help="uvicorn log level (debug, info, warning, error).",
    ),
) -> None:
    """Start the local dashboard with the background tracker."""
    run_dashboard(
        host=host,
        port=port,
        history_path=_resolve_history(history, auto_detect),
        settings=_build_settings(tick_seconds, refresh_seconds, window_hours),
        log_level=log_level.lower(),
    )
