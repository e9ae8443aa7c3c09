"""Decision memory: aliases, skip lists and manual episode overrides.

Every human decision made during an import is written here so that re-running
the same batch is deterministic and prompt-free. The whole document is read
once when the store is opened and rewritten atomically after *every*
mutation; nothing is buffered, because the process may be killed between
items.

Automatic high-confidence matches never create entries. Entries are only
removed by explicit operator actions (``remove_alias``, ``unmark_skipped``,
...), never implicitly.
"""

import json
import logging
from pathlib import Path

from pydantic import ValidationError

from watchmatch.core.title_utils import normalize_title
from watchmatch.errors import DecisionMemoryError
from watchmatch.memory.schema import (
    EpisodeMapping,
    MemoryDocument,
    SeriesAlias,
    SkipEntry,
)
from watchmatch.models.core import CanonicalSeries
from watchmatch.utils.atomic import atomic_write_json

logger = logging.getLogger(__name__)

__all__ = [
    "DecisionMemory",
    "EpisodeMapping",
    "SeriesAlias",
    "SkipEntry",
    "episode_key",
]


def episode_key(
    season_hint: int | None, episode_hint: int | None, episode_title: str
) -> str:
    """Stable key for a raw episode reference.

    Combines the raw season hint with the normalized raw title, e.g.
    ``"S2:the long night"``. Untitled episodes fall back to the hinted
    numbers (``"S2E5"``).
    """
    season = season_hint or 0
    title = normalize_title(episode_title)
    if title:
        return f"S{season}:{title}"
    return f"S{season}E{episode_hint or 0}"


class DecisionMemory:
    """JSON-backed store of series and episode resolution decisions."""

    def __init__(self, path: Path) -> None:
        """Open the store at *path*, loading the existing document if any.

        Raises:
            DecisionMemoryError: If the file exists but is not a valid document.
        """
        self.path = Path(path)
        self._doc = self._load()

    # ------------------------------------------------------------------
    # Persistence
    # ------------------------------------------------------------------
    def _load(self) -> MemoryDocument:
        if not self.path.exists():
            return MemoryDocument()
        try:
            raw = json.loads(self.path.read_text(encoding="utf-8") or "{}")
            return MemoryDocument.model_validate(raw)
        except (json.JSONDecodeError, ValidationError) as exc:
            raise DecisionMemoryError(
                f"Decision memory at {self.path} is unreadable: {exc}"
            ) from exc

    def _save(self) -> None:
        atomic_write_json(self.path, self._doc.model_dump(by_alias=True))

    # ------------------------------------------------------------------
    # Series aliases
    # ------------------------------------------------------------------
    def lookup_alias(self, raw_name: str) -> CanonicalSeries | None:
        alias = self._doc.series_aliases.get(raw_name)
        if alias is None:
            return None
        return CanonicalSeries(id=alias.canonical_id, name=alias.canonical_name)

    def save_alias(self, raw_name: str, canonical: CanonicalSeries) -> bool:
        """Remember that *raw_name* means *canonical*.

        Returns:
            False when the alias would be a no-op (names equal ignoring case).
        """
        if raw_name.strip().lower() == canonical.name.strip().lower():
            return False
        self._doc.series_aliases[raw_name] = SeriesAlias(
            canonical_name=canonical.name, canonical_id=canonical.id
        )
        self._save()
        logger.info(
            'Added alias: "%s" -> "%s" (id: %s)', raw_name, canonical.name, canonical.id
        )
        return True

    def remove_alias(self, raw_name: str) -> bool:
        if self._doc.series_aliases.pop(raw_name, None) is None:
            return False
        self._save()
        logger.info('Removed alias for "%s"', raw_name)
        return True

    def aliases(self) -> dict[str, SeriesAlias]:
        return dict(self._doc.series_aliases)

    # ------------------------------------------------------------------
    # Skipped series
    # ------------------------------------------------------------------
    def is_skipped(self, raw_name: str) -> bool:
        return raw_name in self._doc.skipped_series

    def skip_entry(self, raw_name: str) -> SkipEntry | None:
        return self._doc.skipped_series.get(raw_name)

    def mark_skipped(self, raw_name: str, reason: str, source: str = "") -> None:
        self._doc.skipped_series[raw_name] = SkipEntry(reason=reason, source=source)
        self._save()
        logger.info('Marked series as skipped: "%s" (%s)', raw_name, reason)

    def unmark_skipped(self, raw_name: str) -> bool:
        if self._doc.skipped_series.pop(raw_name, None) is None:
            return False
        self._save()
        logger.info('Removed series from skip list: "%s"', raw_name)
        return True

    def skipped_series(self) -> dict[str, SkipEntry]:
        return dict(self._doc.skipped_series)

    # ------------------------------------------------------------------
    # Manual episode mappings
    # ------------------------------------------------------------------
    def lookup_manual_episode(
        self, series_name: str, key: str
    ) -> EpisodeMapping | None:
        return self._doc.manual_episode_mappings.get(series_name, {}).get(key)

    def save_manual_episode(
        self, series_name: str, key: str, season: int, episode: int
    ) -> None:
        mappings = self._doc.manual_episode_mappings.setdefault(series_name, {})
        mappings[key] = EpisodeMapping(season=season, episode=episode)
        self._save()
        logger.info(
            'Saved episode mapping for "%s": %s -> S%02dE%02d',
            series_name,
            key,
            season,
            episode,
        )

    def remove_manual_episode(self, series_name: str, key: str) -> bool:
        mappings = self._doc.manual_episode_mappings.get(series_name, {})
        if mappings.pop(key, None) is None:
            return False
        if not mappings:
            self._doc.manual_episode_mappings.pop(series_name, None)
        self._save()
        return True

    def manual_episode_mappings(self) -> dict[str, dict[str, EpisodeMapping]]:
        return {k: dict(v) for k, v in self._doc.manual_episode_mappings.items()}

    # ------------------------------------------------------------------
    # Skipped episodes
    # ------------------------------------------------------------------
    def is_episode_skipped(self, series_name: str, key: str) -> bool:
        return key in self._doc.skipped_episodes.get(series_name, [])

    def mark_episode_skipped(self, series_name: str, key: str) -> None:
        skipped = self._doc.skipped_episodes.setdefault(series_name, [])
        if key in skipped:
            return
        skipped.append(key)
        self._save()
        logger.info('Marked episode as skipped for "%s": %s', series_name, key)

    def skipped_episodes(self) -> dict[str, list[str]]:
        return {k: list(v) for k, v in self._doc.skipped_episodes.items()}

    def unmark_episode_skipped(self, series_name: str, key: str) -> bool:
        skipped = self._doc.skipped_episodes.get(series_name, [])
        if key not in skipped:
            return False
        skipped.remove(key)
        if not skipped:
            self._doc.skipped_episodes.pop(series_name, None)
        self._save()
        return True

    # ------------------------------------------------------------------
    # Processed watch ids (import deduplication)
    # ------------------------------------------------------------------
    def is_processed(self, watch_id: str) -> bool:
        return watch_id in self._doc.processed_watch_ids

    def mark_processed(self, watch_id: str) -> None:
        if watch_id in self._doc.processed_watch_ids:
            return
        self._doc.processed_watch_ids.append(watch_id)
        self._save()

    def reset_processed(self, prefix: str) -> int:
        """Forget processed ids starting with *prefix*; return how many."""
        before = len(self._doc.processed_watch_ids)
        self._doc.processed_watch_ids = [
            watch_id
            for watch_id in self._doc.processed_watch_ids
            if not watch_id.startswith(prefix)
        ]
        removed = before - len(self._doc.processed_watch_ids)
        if removed:
            self._save()
        logger.info('Reset progress: removed %d ids with prefix "%s"', removed, prefix)
        return removed
