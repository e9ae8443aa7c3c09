"""Local series records.

Every series the user has watched gets a folder under the library root with a
``series.yaml`` document holding its canonical identity and the episode list
materialized from the catalog::

    <root>/<Series Name>/series.yaml

    name: Two and a Half Men
    id: '2691'
    seasons:
      1:
      - number: 1
        title: Pilot

These records are what series resolution looks up before it ever talks to
the catalog, and what the episode index is built from.
"""

import logging
import re
from pathlib import Path
from typing import Any

import yaml
from rapidfuzz import fuzz

from watchmatch.core.normalize import normalize_series_name
from watchmatch.models.core import LOCAL_ONLY_ID, CanonicalSeries, EpisodeIndex
from watchmatch.utils.atomic import atomic_write_text

logger = logging.getLogger(__name__)

SERIES_FILE = "series.yaml"
MAX_FUZZY_MATCHES = 15


def safe_filename(name: str, max_length: int = 100) -> str:
    """Turn a series name into a filesystem-safe folder name."""
    result = re.sub(r'[/\\:*?"<>|]', " ", str(name or ""))
    result = re.sub(r"\s+", " ", result).strip()
    result = result[:max_length].strip()
    result = re.sub(r"^[\s.\-]+", "", result)
    return result or "Unknown"


def _comparable(name: str) -> str:
    return normalize_series_name(name).lower()


class LocalLibrary:
    """Folder-per-series store of canonical series records."""

    def __init__(self, root: Path) -> None:
        self.root = Path(root)

    def _series_file(self, name: str) -> Path:
        return self.root / safe_filename(name) / SERIES_FILE

    def _read(self, path: Path) -> dict[str, Any] | None:
        try:
            with path.open("r", encoding="utf-8") as fh:
                data = yaml.safe_load(fh) or {}
        except (OSError, yaml.YAMLError) as exc:
            logger.warning("Ignoring unreadable series record %s: %s", path, exc)
            return None
        if not isinstance(data, dict):
            return None
        # Folder name is the fallback identity for hand-made records.
        data.setdefault("name", path.parent.name)
        return data

    def _records(self) -> list[dict[str, Any]]:
        if not self.root.is_dir():
            return []
        records = []
        for path in sorted(self.root.glob(f"*/{SERIES_FILE}")):
            data = self._read(path)
            if data is not None:
                records.append(data)
        return records

    @staticmethod
    def _to_series(data: dict[str, Any]) -> CanonicalSeries:
        return CanonicalSeries(id=data.get("id") or LOCAL_ONLY_ID, name=data["name"])

    def lookup_series(self, normalized_name: str) -> CanonicalSeries | None:
        """Return the series whose normalized name equals *normalized_name*.

        Comparison ignores case.
        """
        target = _comparable(normalized_name)
        if not target:
            return None
        for data in self._records():
            if _comparable(data["name"]) == target:
                return self._to_series(data)
        return None

    def lookup_fuzzy_series(self, normalized_name: str) -> list[CanonicalSeries]:
        """Series whose names contain, or are contained in, *normalized_name*.

        Ordered by rapidfuzz token-sort similarity (best first), capped at
        :data:`MAX_FUZZY_MATCHES`.
        """
        target = _comparable(normalized_name)
        if not target:
            return []
        scored: list[tuple[float, CanonicalSeries]] = []
        for data in self._records():
            name = _comparable(data["name"])
            if name and (target in name or name in target):
                score = fuzz.token_sort_ratio(target, name)
                scored.append((score, self._to_series(data)))
        scored.sort(key=lambda pair: pair[0], reverse=True)
        return [series for _, series in scored[:MAX_FUZZY_MATCHES]]

    def episode_index(self, series: CanonicalSeries) -> EpisodeIndex:
        """Episode index materialized for *series* (empty when unknown)."""
        path = self._series_file(series.name)
        data = self._read(path) if path.exists() else None
        if not data:
            return EpisodeIndex()
        seasons = data.get("seasons") or {}
        return EpisodeIndex.model_validate({"seasons": seasons})

    def save_series(
        self, series: CanonicalSeries, index: EpisodeIndex | None = None
    ) -> Path:
        """Write (or refresh) the record for *series*.

        An existing episode list is kept when *index* is ``None`` or empty.
        """
        path = self._series_file(series.name)
        existing = self._read(path) if path.exists() else None
        seasons: dict[int, list[dict[str, Any]]] = {}
        if index is not None and not index.is_empty:
            seasons = {
                season: [entry.model_dump() for entry in entries]
                for season, entries in index.seasons.items()
            }
        elif existing:
            seasons = existing.get("seasons") or {}

        doc = {"name": series.name, "id": series.id, "seasons": seasons}
        atomic_write_text(
            path, yaml.safe_dump(doc, sort_keys=False, allow_unicode=True)
        )
        logger.info("Saved series record: %s (%s)", series.name, path)
        return path
