"""Tests for the foreground application sources."""

import subprocess

import pytest

from screen_time import foreground
from screen_time.config import TrackerSettings
from screen_time.foreground import MacForegroundProbe, NullForegroundSource


def completed(stdout="", returncode=0, stderr=""):
    return subprocess.CompletedProcess(
        args=["osascript"], returncode=returncode, stdout=stdout, stderr=stderr
    )


@pytest.fixture()
def osascript(monkeypatch):
    calls = []
    replies = {"value": completed("Google Chrome\n")}

    def fake_run(args, **kwargs):
        calls.append((args, kwargs))
        reply = replies["value"]
        if isinstance(reply, Exception):
            raise reply
        return reply

    monkeypatch.setattr(foreground.subprocess, "run", fake_run)
    return calls, replies


class TestMacForegroundProbe:
    def test_reads_frontmost_application_name(self, osascript):
        calls, _ = osascript
        probe = MacForegroundProbe(TrackerSettings().browser_processes)
        assert probe.current_application_name() == "Google Chrome"
        args, kwargs = calls[0]
        assert args[:2] == ["osascript", "-e"]
        assert "frontmost is true" in args[2]
        assert kwargs["timeout"] == 3.0

    def test_tracked_browser_matches_case_insensitively(self, osascript):
        _, replies = osascript
        probe = MacForegroundProbe(["google chrome"])
        assert probe.is_tracked_browser()
        replies["value"] = completed("Finder\n")
        assert not probe.is_tracked_browser()

    @pytest.mark.parametrize(
        "reply",
        [
            completed(""),
            completed("   \n"),
            completed("", returncode=1, stderr="not authorised"),
            subprocess.TimeoutExpired(cmd="osascript", timeout=3),
            FileNotFoundError("osascript"),
        ],
    )
    def test_failures_report_no_application(self, osascript, reply):
        _, replies = osascript
        replies["value"] = reply
        probe = MacForegroundProbe(["Google Chrome"])
        assert probe.current_application_name() is None
        assert probe.is_tracked_browser() is False


@pytest.mark.parametrize(
    "platform, expected",
    [("darwin", MacForegroundProbe), ("linux", NullForegroundSource)],
)
def test_default_source_per_platform(monkeypatch, platform, expected):
    monkeypatch.setattr(foreground.sys, "platform", platform)
    assert isinstance(foreground.default_foreground_source(TrackerSettings()), expected)
