"""Configuration models and helpers for the screen time tracker."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import timedelta


@dataclass(slots=True)
class TrackerSettings:
    """Runtime configuration for the usage tracker."""

    tick_interval: timedelta = timedelta(seconds=1)
    refresh_interval: timedelta = timedelta(minutes=5)
    history_window: timedelta = timedelta(hours=24)
    min_visit_gap: timedelta = timedelta(seconds=5)
    max_visit_gap: timedelta = timedelta(hours=1)
    browser_processes: tuple[str, ...] = ("chrome.exe", "Google Chrome", "chrome")

    def __post_init__(self) -> None:
        for name in ("tick_interval", "refresh_interval", "history_window", "max_visit_gap"):
            if getattr(self, name) <= timedelta(0):
                raise ValueError(f"{name} must be positive")
        if self.min_visit_gap < timedelta(0):
            raise ValueError("min_visit_gap must not be negative")
        if self.min_visit_gap >= self.max_visit_gap:
            raise ValueError("min_visit_gap must be shorter than max_visit_gap")

    @property
    def tick_seconds(self) -> float:
        return self.tick_interval.total_seconds()

    @classmethod
    def from_intervals(
        cls,
        tick_seconds: float,
        refresh_seconds: float,
        window_hours: float | None = None,
        browser_processes: tuple[str, ...] | None = None,
    ) -> "TrackerSettings":
        defaults = cls()
        return cls(
            tick_interval=timedelta(seconds=tick_seconds),
            refresh_interval=timedelta(seconds=refresh_seconds),
            history_window=(
                timedelta(hours=window_hours)
                if window_hours is not None
                else defaults.history_window
            ),
            browser_processes=browser_processes or defaults.browser_processes,
        )
