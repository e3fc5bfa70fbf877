# ==============================================================================
# Shared Test Fixtures
# ==============================================================================
"""
Pytest fixtures shared across all test modules.

Provides:
- A scriptable foreground source and a manually advanced clock
- A builder for Chrome-shaped History databases in a temp directory
"""

import sqlite3
from datetime import datetime, timedelta, timezone
from typing import Optional

import pytest

from screen_time.chrome_time import to_chrome_time

NOW = datetime(2026, 10, 19, 12, 0, 0, tzinfo=timezone.utc)


class FakeForeground:
    """Foreground source whose answers are set by the test."""

    def __init__(self, name: Optional[str] = None, browser: bool = False):
        self.name = name
        self.browser = browser

    def current_application_name(self):
        return self.name

    def is_tracked_browser(self):
        return self.browser


class FakeClock:
    def __init__(self, start: datetime = NOW):
        self.now = start

    def __call__(self) -> datetime:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += timedelta(seconds=seconds)


def write_history(path, visits):
    """Create a minimal Chrome History database.

    ``visits`` is a list of ``(url, datetime, transition)`` tuples.
    """
    conn = sqlite3.connect(path)
    conn.executescript(
        """
        CREATE TABLE urls (
            id INTEGER PRIMARY KEY,
            url LONGVARCHAR,
            title LONGVARCHAR,
            visit_count INTEGER DEFAULT 0 NOT NULL,
            last_visit_time INTEGER NOT NULL DEFAULT 0
        );
        CREATE TABLE visits (
            id INTEGER PRIMARY KEY,
            url INTEGER NOT NULL,
            visit_time INTEGER NOT NULL,
            from_visit INTEGER,
            transition INTEGER DEFAULT 0 NOT NULL
        );
        """
    )
    url_ids = {}
    for url, when, transition in visits:
        if url not in url_ids:
            cur = conn.execute("INSERT INTO urls (url, title) VALUES (?, ?)", (url, url))
            url_ids[url] = cur.lastrowid
        conn.execute(
            "INSERT INTO visits (url, visit_time, from_visit, transition) VALUES (?, ?, 0, ?)",
            (url_ids[url], to_chrome_time(when), transition),
        )
    conn.commit()
    conn.close()
    return path


@pytest.fixture()
def clock():
    return FakeClock()


@pytest.fixture()
def foreground():
    return FakeForeground()


@pytest.fixture()
def history_factory(tmp_path):
    """Returns a callable that writes a History file and returns its path."""
    counter = {"n": 0}

    def _make(visits):
        counter["n"] += 1
        return write_history(tmp_path / f"History{counter['n']}", visits)

    return _make
