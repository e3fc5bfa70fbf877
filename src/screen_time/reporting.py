"""Simple reporting utilities for CLI output."""

from __future__ import annotations

from typing import Iterable, Sequence, TypeVar

from .models import ApplicationUsage, WebsiteUsage

Usage = TypeVar("Usage", ApplicationUsage, WebsiteUsage)


class SummaryPrinter:
    """Render the current ledgers in the console."""

    def __init__(self, limit: int = 20, window_hours: float = 24) -> None:
        self.limit = limit
        self.window_hours = window_hours

    def print_summary(
        self,
        applications: Iterable[ApplicationUsage],
        websites: Iterable[WebsiteUsage],
    ) -> None:
        apps = sort_by_time(applications)
        sites = sort_by_time(websites)

        print("Applications")
        print("-" * 40)
        if not apps:
            print("  No application activity recorded yet.")
        for app in apps[: self.limit]:
            print(f"  {app.name[:28]:<28} {format_duration(app.time_spent):>10}")

        print()
        print(f"Websites (last {self.window_hours:g} hours)")
        print("-" * 40)
        if not sites:
            print("  No website activity found.")
        for site in sites[: self.limit]:
            print(f"  {site.domain[:28]:<28} {format_duration(site.time_spent):>10}")


def sort_by_time(usages: Iterable[Usage]) -> Sequence[Usage]:
    return sorted(usages, key=lambda usage: usage.time_spent, reverse=True)


def format_duration(seconds: float) -> str:
    """Format seconds with abbreviated units, e.g. ``1h 2m 3s``."""
    total_seconds = int(seconds)
    hours, remainder = divmod(total_seconds, 3600)
    minutes, secs = divmod(remainder, 60)
    parts = []
    if hours:
        parts.append(f"{hours}h")
    if minutes:
        parts.append(f"{minutes}m")
    if secs or not parts:
        parts.append(f"{secs}s")
    return " ".join(parts)
