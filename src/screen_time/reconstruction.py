"""Rebuild per-domain dwell time from the browser's visit log.

The history database only records when a navigation started, so the time spent
on a page is inferred as the gap until the next accepted navigation. Gaps that
are too short (redirect churn) or too long (the user was away) are dropped.
"""

from __future__ import annotations

import logging
from datetime import datetime, timedelta
from typing import Iterable, Optional

from .chrome_time import from_chrome_time
from .models import PreviousVisit, ReconstructionResult, VisitEvent, WebsiteUsage
from .normalization import extract_domain, is_internal_url

logger = logging.getLogger(__name__)

# Chrome page transition core types (the low byte of ``visits.transition``).
TRANSITION_LINK = 0
TRANSITION_TYPED = 1
TRANSITION_AUTO_BOOKMARK = 2
TRANSITION_AUTO_SUBFRAME = 3
TRANSITION_MANUAL_SUBFRAME = 4
TRANSITION_GENERATED = 5
TRANSITION_AUTO_TOPLEVEL = 6
TRANSITION_FORM_SUBMIT = 7
TRANSITION_RELOAD = 8
TRANSITION_KEYWORD = 9
TRANSITION_KEYWORD_GENERATED = 10

CORE_TRANSITION_MASK = 0xFF

COUNTED_TRANSITIONS = frozenset({TRANSITION_LINK, TRANSITION_TYPED})

DEFAULT_MIN_GAP = timedelta(seconds=5)
DEFAULT_MAX_GAP = timedelta(hours=1)


def core_transition(transition: int) -> int:
    return transition & CORE_TRANSITION_MASK


def reconstruct_visits(
    events: Iterable[VisitEvent],
    *,
    min_gap: timedelta = DEFAULT_MIN_GAP,
    max_gap: timedelta = DEFAULT_MAX_GAP,
) -> ReconstructionResult:
    """Attribute the gap between consecutive accepted visits to the earlier domain.

    ``events`` must be ordered by ascending ``visit_time``. Events with an
    internal or unparseable URL, or with a transition other than link/typed,
    are ignored completely: they neither add time nor move the cursor.
    """
    lower = min_gap.total_seconds()
    upper = max_gap.total_seconds()
    totals: dict[str, float] = {}
    previous: Optional[PreviousVisit] = None
    skipped = 0

    for event in events:
        url = event.url
        if not url or is_internal_url(url):
            skipped += 1
            continue
        domain = extract_domain(url)
        if domain is None:
            skipped += 1
            continue

        try:
            visit_time = from_chrome_time(event.visit_time)
        except (OverflowError, ValueError, TypeError):
            skipped += 1
            continue
        if core_transition(event.transition) not in COUNTED_TRANSITIONS:
            skipped += 1
            continue

        if previous is not None:
            gap = (visit_time - previous.time).total_seconds()
            if lower < gap < upper:
                totals[previous.domain] = totals.get(previous.domain, 0.0) + gap

        previous = PreviousVisit(domain=domain, time=visit_time)

    logger.debug("Reconstructed %d domains; skipped %d events.", len(totals), skipped)
    return ReconstructionResult(totals=totals, previous_visit=previous)


def extend_live_session(
    totals: dict[str, float],
    previous_visit: Optional[PreviousVisit],
    now: datetime,
    *,
    browser_active: bool,
    max_gap: timedelta = DEFAULT_MAX_GAP,
) -> float:
    """Credit the page still open in the browser with the time since it was visited.

    Mutates ``totals`` and returns the number of seconds added.
    """
    if not browser_active or previous_visit is None:
        return 0.0
    active = (now - previous_visit.time).total_seconds()
    if not 0 < active < max_gap.total_seconds():
        return 0.0
    totals[previous_visit.domain] = totals.get(previous_visit.domain, 0.0) + active
    return active


def build_website_ledger(totals: dict[str, float]) -> list[WebsiteUsage]:
    return [WebsiteUsage(domain=domain, time_spent=seconds) for domain, seconds in totals.items()]
