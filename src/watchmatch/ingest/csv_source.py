"""CSV watch-history reader.

Expected columns (header names are case-insensitive):

- ``date watched`` (required) - ``YYYY-MM-DD``, ``MM/DD/YYYY`` or ``MM/DD/YY``
- ``type`` (required) - ``movie`` or ``series``; other rows are ignored
- ``title`` (required) - show or movie name as the platform spells it
- ``episode title`` (optional)
- ``source`` (optional) - platform tag, e.g. ``netflix``
"""

import csv
import logging
from datetime import date, datetime
from pathlib import Path

from watchmatch.core.importer import RawWatchItem
from watchmatch.errors import CSVFormatError
from watchmatch.models.core import SourceType

logger = logging.getLogger(__name__)

REQUIRED_COLUMNS = ("date watched", "type", "title")
DATE_FORMATS = ("%Y-%m-%d", "%m/%d/%Y", "%m/%d/%y")


def parse_date(value: str | None) -> date | None:
    """Parse a CSV date cell, returning None when no known format fits."""
    text = (value or "").strip()
    for fmt in DATE_FORMATS:
        try:
            return datetime.strptime(text, fmt).date()
        except ValueError:
            continue
    return None


def read_watch_csv(path: Path, origin: str = "csv") -> list[RawWatchItem]:
    """Read *path* into raw watch items.

    Raises:
        CSVFormatError: If a required column is missing.
    """
    with Path(path).open("r", encoding="utf-8-sig", newline="") as fh:
        reader = csv.DictReader(fh)
        headers = [h.strip().lower() for h in reader.fieldnames or []]
        missing = [col for col in REQUIRED_COLUMNS if col not in headers]
        if missing:
            raise CSVFormatError(missing)

        items: list[RawWatchItem] = []
        for line_no, row in enumerate(reader, start=2):
            row = {
                (k or "").strip().lower(): (v or "").strip()
                for k, v in row.items()
                if k is not None
            }
            kind = row.get("type", "").lower()
            if kind not in {t.value for t in SourceType}:
                continue
            watched_on = parse_date(row.get("date watched"))
            if watched_on is None:
                logger.warning(
                    "Line %d: unparseable date %r, skipping",
                    line_no,
                    row.get("date watched"),
                )
                continue
            items.append(
                RawWatchItem(
                    watched_on=watched_on,
                    source_type=SourceType(kind),
                    title=row.get("title", ""),
                    episode_title=row.get("episode title", ""),
                    source=row.get("source", "").lower(),
                    origin=origin,
                )
            )
    logger.info("Read %d watch items from %s", len(items), path)
    return items
