"""Per-tick accumulation of foreground application time."""

from __future__ import annotations

import logging
from typing import Optional

from .foreground import ForegroundSource
from .models import ApplicationUsage

logger = logging.getLogger(__name__)


class ApplicationSampler:
    """Adds one tick of time to whichever application is in the foreground."""

    def __init__(self, source: ForegroundSource, tick_seconds: float = 1.0) -> None:
        if tick_seconds <= 0:
            raise ValueError("tick_seconds must be positive")
        self.source = source
        self.tick_seconds = tick_seconds
        self._usages: dict[str, ApplicationUsage] = {}

    def sample(self) -> Optional[str]:
        name = self.source.current_application_name()
        if not name:
            return None
        self.record(name)
        return name

    def record(self, name: str) -> ApplicationUsage:
        usage = self._usages.get(name)
        if usage is None:
            usage = ApplicationUsage(name=name, time_spent=self.tick_seconds)
            self._usages[name] = usage
            logger.debug("First sighting of application %s", name)
        else:
            usage.time_spent += self.tick_seconds
        return usage

    def snapshot(self) -> list[ApplicationUsage]:
        return [ApplicationUsage(u.name, u.time_spent) for u in self._usages.values()]
