"""Foreground application sources."""

from __future__ import annotations

import ctypes
import logging
import subprocess
import sys
from ctypes import wintypes
from typing import Iterable, Optional, Protocol

import psutil

from .config import TrackerSettings

logger = logging.getLogger(__name__)


class ForegroundSource(Protocol):
    def current_application_name(self) -> Optional[str]:
        ...

    def is_tracked_browser(self) -> bool:
        ...


def display_name(process_name: str) -> str:
    """Strip a Windows executable suffix, e.g. ``chrome.exe`` -> ``chrome``."""
    if process_name.lower().endswith(".exe"):
        return process_name[:-4]
    return process_name


class WindowsForegroundProbe:
    """Retrieves the process owning the foreground window."""

    def __init__(self, browser_processes: Iterable[str]) -> None:
        self._user32 = ctypes.windll.user32  # type: ignore[attr-defined]
        self._browsers = {name.casefold() for name in browser_processes}

    def foreground_process_name(self) -> Optional[str]:
        hwnd = self._user32.GetForegroundWindow()
        if not hwnd:
            return None

        pid = wintypes.DWORD()
        self._user32.GetWindowThreadProcessId(hwnd, ctypes.byref(pid))
        if not pid.value:
            return None
        try:
            return psutil.Process(pid.value).name()
        except (psutil.Error, ProcessLookupError):
            return None

    def current_application_name(self) -> Optional[str]:
        process_name = self.foreground_process_name()
        return display_name(process_name) if process_name else None

    def is_tracked_browser(self) -> bool:
        process_name = self.foreground_process_name()
        if not process_name:
            return False
        return (
            process_name.casefold() in self._browsers
            or display_name(process_name).casefold() in self._browsers
        )


FRONTMOST_APP_SCRIPT = (
    'tell application "System Events" to get name of first '
    "application process whose frontmost is true"
)


class MacForegroundProbe:
    """Asks System Events for the frontmost application through osascript."""

    def __init__(self, browser_processes: Iterable[str], timeout: float = 3.0) -> None:
        self._browsers = {name.casefold() for name in browser_processes}
        self._timeout = timeout

    def current_application_name(self) -> Optional[str]:
        try:
            result = subprocess.run(
                ["osascript", "-e", FRONTMOST_APP_SCRIPT],
                capture_output=True,
                text=True,
                timeout=self._timeout,
            )
        except (subprocess.TimeoutExpired, OSError):
            return None
        if result.returncode != 0:
            logger.debug("osascript failed: %s", result.stderr.strip())
            return None
        name = result.stdout.strip()
        return name or None

    def is_tracked_browser(self) -> bool:
        name = self.current_application_name()
        return name is not None and name.casefold() in self._browsers


class NullForegroundSource:
    """Used where no foreground probe exists; reports nothing."""

    def current_application_name(self) -> Optional[str]:
        return None

    def is_tracked_browser(self) -> bool:
        return False


def default_foreground_source(settings: TrackerSettings) -> ForegroundSource:
    if sys.platform.startswith("win"):
        return WindowsForegroundProbe(settings.browser_processes)
    if sys.platform == "darwin":
        return MacForegroundProbe(settings.browser_processes)
    logger.warning(
        "No foreground probe for platform %s; application time will not be tracked.",
        sys.platform,
    )
    return NullForegroundSource()
