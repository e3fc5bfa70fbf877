"""Domain models for tracked usage."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional


@dataclass(slots=True)
class ApplicationUsage:
    """Accumulated foreground time for one application."""

    name: str
    time_spent: float = 0.0


@dataclass(slots=True)
class WebsiteUsage:
    """Time attributed to one domain by a single reconstruction pass."""

    domain: str
    time_spent: float = 0.0


@dataclass(frozen=True, slots=True)
class VisitEvent:
    """One row of the browser's visit log.

    ``visit_time`` is in the browser's native unit (microseconds since 1601).
    """

    url: Optional[str]
    visit_time: int
    transition: int
    from_visit: Optional[int] = None


@dataclass(frozen=True, slots=True)
class PreviousVisit:
    domain: str
    time: datetime


@dataclass(slots=True)
class ReconstructionResult:
    totals: dict[str, float] = field(default_factory=dict)
    previous_visit: Optional[PreviousVisit] = None
