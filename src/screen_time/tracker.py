"""Usage tracker: drives application sampling and website reconstruction."""

from __future__ import annotations

import enum
import logging
import threading
from datetime import datetime, timezone
from pathlib import Path
from typing import Callable, Optional

from .config import TrackerSettings
from .foreground import ForegroundSource, default_foreground_source
from .history import HistoryError, HistoryStore
from .models import ApplicationUsage, VisitEvent, WebsiteUsage
from .paths import get_scratch_dir
from .reconstruction import build_website_ledger, extend_live_session, reconstruct_visits
from .sampler import ApplicationSampler

logger = logging.getLogger(__name__)

Clock = Callable[[], datetime]


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class TrackerState(enum.Enum):
    IDLE = "idle"
    TRACKING = "tracking"


class UsageTracker:
    """Owns the application and website ledgers and the tick loop that feeds them.

    Every tick samples the foreground application. Website usage is rebuilt
    from the history database at most once per ``refresh_interval`` by the tick
    loop, or immediately through :meth:`refresh_now`.
    """

    def __init__(
        self,
        settings: Optional[TrackerSettings] = None,
        *,
        foreground: Optional[ForegroundSource] = None,
        history_path: Optional[Path] = None,
        clock: Optional[Clock] = None,
        temp_dir: Optional[Path] = None,
    ) -> None:
        self.settings = settings or TrackerSettings()
        self._clock = clock or utcnow
        self._foreground = foreground or default_foreground_source(self.settings)
        self._sampler = ApplicationSampler(self._foreground, self.settings.tick_seconds)
        self._history_path = Path(history_path) if history_path else None
        self._temp_dir = temp_dir
        self._websites: list[WebsiteUsage] = []
        self._last_refresh = self._clock()

        # Guards ledger reads and replacement.
        self._ledger_lock = threading.Lock()
        # At most one reconstruction at a time; later requests wait.
        self._refresh_lock = threading.Lock()
        self._control_lock = threading.Lock()
        self._thread: Optional[threading.Thread] = None
        self._stop_event: Optional[threading.Event] = None

    @property
    def state(self) -> TrackerState:
        with self._control_lock:
            running = bool(self._thread and self._thread.is_alive())
        return TrackerState.TRACKING if running else TrackerState.IDLE

    @property
    def history_path(self) -> Optional[Path]:
        with self._ledger_lock:
            return self._history_path

    @property
    def last_refresh(self) -> datetime:
        with self._ledger_lock:
            return self._last_refresh

    def start(self) -> None:
        with self._control_lock:
            if self._thread and self._thread.is_alive():
                return
            stop_event = threading.Event()
            thread = threading.Thread(
                target=self._run_loop,
                args=(stop_event,),
                name="usage-tracker",
                daemon=True,
            )
            self._thread = thread
            self._stop_event = stop_event
            thread.start()
        logger.info("Usage tracking started.")

    def stop(self, timeout: float = 10.0) -> None:
        thread: Optional[threading.Thread] = None
        with self._control_lock:
            if not self._thread or not self._stop_event:
                return
            self._stop_event.set()
            thread = self._thread
            self._thread = None
            self._stop_event = None
        if thread is not threading.current_thread():
            thread.join(timeout=timeout)
        logger.info("Usage tracking stopped.")

    def tick(self) -> None:
        name = self._foreground.current_application_name()
        with self._ledger_lock:
            if name:
                self._sampler.record(name)
            due = self._clock() - self._last_refresh > self.settings.refresh_interval
        if name:
            logger.debug("Sampled foreground application %s", name)
        if due:
            self.refresh_now()

    def refresh_now(self) -> list[WebsiteUsage]:
        """Rebuild the website ledger from scratch and return a snapshot of it."""
        with self._refresh_lock:
            with self._ledger_lock:
                self._websites = []
                history_path = self._history_path

            now = self._clock()
            try:
                events = self._read_events(history_path, now - self.settings.history_window)
                result = reconstruct_visits(
                    events,
                    min_gap=self.settings.min_visit_gap,
                    max_gap=self.settings.max_visit_gap,
                )
                live_seconds = extend_live_session(
                    result.totals,
                    result.previous_visit,
                    now,
                    browser_active=self._foreground.is_tracked_browser(),
                    max_gap=self.settings.max_visit_gap,
                )
                ledger = build_website_ledger(result.totals)
                with self._ledger_lock:
                    self._websites = ledger
            finally:
                # Failed passes are throttled like successful ones.
                with self._ledger_lock:
                    self._last_refresh = now
            logger.info(
                "Website usage rebuilt from %d visits: %d domains, %.0fs live session.",
                len(events),
                len(ledger),
                live_seconds,
            )
            return _copy_websites(ledger)

    def set_history_path(self, path: Optional[Path]) -> list[WebsiteUsage]:
        with self._ledger_lock:
            self._history_path = Path(path) if path else None
        logger.info("History source set to %s", path)
        return self.refresh_now()

    def application_usages(self) -> list[ApplicationUsage]:
        with self._ledger_lock:
            return self._sampler.snapshot()

    def website_usages(self) -> list[WebsiteUsage]:
        with self._ledger_lock:
            return _copy_websites(self._websites)

    def _read_events(self, history_path: Optional[Path], cutoff: datetime) -> list[VisitEvent]:
        if history_path is None:
            logger.debug("No history source configured; skipping website usage.")
            return []
        try:
            temp_dir = self._temp_dir or get_scratch_dir()
            return HistoryStore(history_path, temp_dir=temp_dir).read_visits(cutoff)
        except (HistoryError, OSError) as exc:
            logger.warning("Skipping website usage for this pass: %s", exc)
            return []

    def _run_loop(self, stop_event: threading.Event) -> None:
        interval = self.settings.tick_interval.total_seconds()
        while not stop_event.is_set():
            try:
                self.tick()
            except Exception:
                logger.exception("Tracker tick failed; continuing.")
            # Sleep in an interruptible manner.
            stop_event.wait(interval)


def _copy_websites(ledger: list[WebsiteUsage]) -> list[WebsiteUsage]:
    return [WebsiteUsage(u.domain, u.time_spent) for u in ledger]
