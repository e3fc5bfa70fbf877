"""Read-only access to a Chrome history database."""

from __future__ import annotations

import logging
import shutil
import sqlite3
import tempfile
import uuid
from contextlib import contextmanager
from datetime import datetime
from pathlib import Path
from typing import Iterator, Optional

from .chrome_time import to_chrome_time
from .models import VisitEvent

logger = logging.getLogger(__name__)

VISITS_QUERY = """
    SELECT
        urls.url AS url,
        visits.visit_time AS visit_time,
        visits.from_visit AS from_visit,
        visits.transition AS transition
    FROM visits
    JOIN urls ON visits.url = urls.id
    WHERE visits.visit_time >= ?
    ORDER BY visits.visit_time ASC
"""


class HistoryError(Exception):
    """Base class for failures reading the history database."""


class HistoryUnavailableError(HistoryError):
    """The database is missing, could not be copied, or could not be opened."""


class HistoryQueryError(HistoryError):
    """The database opened but the visits query failed."""


class HistoryStore:
    """Reads visits from a private copy of a Chrome ``History`` file.

    Chrome keeps the live database locked while it runs, so every read works on
    a fresh copy that is removed afterwards.
    """

    def __init__(self, path: Path, temp_dir: Optional[Path] = None) -> None:
        self.path = Path(path)
        self.temp_dir = Path(temp_dir) if temp_dir else Path(tempfile.gettempdir())

    def read_visits(self, cutoff: datetime) -> list[VisitEvent]:
        """Return visits at or after ``cutoff`` in ascending time order."""
        with self._snapshot() as copy_path:
            conn = _open_readonly(copy_path)
            try:
                rows = conn.execute(VISITS_QUERY, (to_chrome_time(cutoff),)).fetchall()
            except sqlite3.Error as exc:
                raise HistoryQueryError(f"Failed to query visits in {self.path}: {exc}") from exc
            finally:
                conn.close()

        events = [
            VisitEvent(
                url=row["url"],
                visit_time=int(row["visit_time"]),
                transition=int(row["transition"] or 0),
                from_visit=row["from_visit"],
            )
            for row in rows
        ]
        logger.debug("Read %d visits from %s", len(events), self.path)
        return events

    @contextmanager
    def _snapshot(self) -> Iterator[Path]:
        if not self.path.is_file():
            raise HistoryUnavailableError(f"History file not found: {self.path}")
        copy_path = self.temp_dir / f"chrome_history_{uuid.uuid4().hex}.db"
        try:
            shutil.copyfile(self.path, copy_path)
        except OSError as exc:
            raise HistoryUnavailableError(f"Failed to copy {self.path}: {exc}") from exc
        try:
            yield copy_path
        finally:
            try:
                copy_path.unlink()
            except FileNotFoundError:
                pass
            except OSError:
                logger.warning("Could not remove temporary history copy %s", copy_path)


def _open_readonly(path: Path) -> sqlite3.Connection:
    try:
        conn = sqlite3.connect(f"{path.resolve().as_uri()}?mode=ro", uri=True)
    except sqlite3.Error as exc:
        raise HistoryUnavailableError(f"Failed to open {path}: {exc}") from exc
    conn.row_factory = sqlite3.Row
    return conn
