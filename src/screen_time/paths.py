"""Helpers for locating application directories and browser history files."""

from __future__ import annotations

import os
import sys
from pathlib import Path
from typing import Optional

from platformdirs import PlatformDirs


APP_NAME = "ScreenTime"
APP_AUTHOR = "ScreenTime"


def get_scratch_dir() -> Path:
    """Directory that receives temporary copies of the history database."""
    dirs = PlatformDirs(appname=APP_NAME, appauthor=APP_AUTHOR)
    path = Path(dirs.user_cache_path) / "history-copies"
    path.mkdir(parents=True, exist_ok=True)
    return path


def default_history_paths() -> list[Path]:
    """Usual locations of the Chrome history database on this platform."""
    home = Path.home()
    if sys.platform.startswith("win"):
        local = os.environ.get("LOCALAPPDATA")
        base = Path(local) if local else home / "AppData" / "Local"
        return [base / "Google" / "Chrome" / "User Data" / "Default" / "History"]
    if sys.platform == "darwin":
        return [
            home / "Library" / "Application Support" / "Google" / "Chrome" / "Default" / "History"
        ]
    return [
        home / ".config" / "google-chrome" / "Default" / "History",
        home / ".config" / "chromium" / "Default" / "History",
    ]


def find_history_path() -> Optional[Path]:
    for candidate in default_history_paths():
        if candidate.is_file():
            return candidate
    return None
