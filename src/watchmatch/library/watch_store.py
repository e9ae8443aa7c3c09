"""Watch-event store.

Persists one watch event per (series, season, episode, date). Writes are
idempotent: recording an event that already exists reports ``False`` and
leaves the log untouched.
"""

import json
import logging
from datetime import date
from pathlib import Path

from pydantic import BaseModel, Field

from watchmatch.utils.atomic import atomic_write_json

logger = logging.getLogger(__name__)


class WatchEvent(BaseModel):
    """A single recorded viewing."""

    series: str
    season: int | None = None
    episode: int | None = None
    watched_on: date
    source: str = ""
    raw_title: str = ""
    method: str = ""

    @property
    def identity(self) -> tuple[str, int | None, int | None, date]:
        return (self.series.lower(), self.season, self.episode, self.watched_on)


class WatchLog(BaseModel):
    events: list[WatchEvent] = Field(default_factory=list)


class WatchStore:
    """JSON-backed, append-only log of watch events."""

    def __init__(self, path: Path) -> None:
        self.path = Path(path)
        if self.path.exists():
            self._log = WatchLog.model_validate(
                json.loads(self.path.read_text(encoding="utf-8") or "{}")
            )
        else:
            self._log = WatchLog()
        self._seen = {event.identity for event in self._log.events}

    def record(self, event: WatchEvent) -> bool:
        """Persist *event*; return False when it was already recorded."""
        if event.identity in self._seen:
            logger.debug(
                "Duplicate watch: %s S%sE%s on %s",
                event.series,
                event.season,
                event.episode,
                event.watched_on,
            )
            return False
        self._log.events.append(event)
        self._seen.add(event.identity)
        atomic_write_json(self.path, self._log.model_dump(mode="json"))
        return True

    def events(self) -> list[WatchEvent]:
        return list(self._log.events)
