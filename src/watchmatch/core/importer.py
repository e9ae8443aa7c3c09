"""Import coordinator.

Feeds raw watch items one at a time through series resolution, episode
resolution and the watch-event store. Items are processed strictly in order;
each item's decisions are committed before the next one starts, so a cancel
part-way through keeps everything decided so far.

Deduplication happens here, above the resolvers: an item whose watch id is
already in decision memory is never resolved again.
"""

import logging
from dataclasses import dataclass, field
from datetime import date
from typing import Iterable

from pydantic import BaseModel

from watchmatch.core.episode_index import EpisodeIndexBuilder
from watchmatch.core.episode_resolver import EpisodeResolver
from watchmatch.core.series_resolver import (
    MALFORMED_REASON,
    USER_SKIP_REASON,
    ResolutionStatus,
    SeriesResolver,
)
from watchmatch.core.title_utils import extract_part_number, parse_episode_hints
from watchmatch.errors import CatalogError, ImportCancelled
from watchmatch.library.watch_store import WatchEvent, WatchStore
from watchmatch.memory.decision_memory import DecisionMemory
from watchmatch.models.core import (
    CanonicalSeries,
    MatchMethod,
    MatchResult,
    RawEpisodeReference,
    RawShowReference,
    SourceType,
)

logger = logging.getLogger(__name__)


class RawWatchItem(BaseModel):
    """One row of watch history in the common ingestion shape."""

    watched_on: date
    source_type: SourceType
    title: str
    episode_title: str = ""
    source: str = ""
    origin: str = "csv"

    @property
    def watch_id(self) -> str:
        """Composite dedup id: source, date, raw title and raw episode title."""
        return (
            f"{self.source or self.origin}-{self.watched_on.isoformat()}-{self.title}-"
            f"{self.episode_title}"
        ).strip().lower()

    def show_reference(self) -> RawShowReference:
        return RawShowReference(source_name=self.title, source_type=self.source_type)

    def episode_reference(self) -> RawEpisodeReference:
        season, episode = parse_episode_hints(self.episode_title)
        return RawEpisodeReference(
            season_hint=season,
            episode_hint=episode,
            episode_title=self.episode_title,
            part_hint=extract_part_number(self.episode_title).part,
        )


@dataclass
class EpisodeMismatch:
    """A watch whose canonical episode differs from the platform's numbering."""

    series: str
    source_code: str
    source_title: str
    canonical_code: str
    canonical_title: str
    confidence: float
    method: str
    auto_matched: bool


@dataclass
class ImportSummary:
    """Counters for one import run."""

    processed: int = 0
    imported: int = 0
    duplicates: int = 0
    skipped: int = 0
    errors: int = 0
    movies: int = 0
    series_added: int = 0
    series_skipped: int = 0
    cancelled: bool = False
    mismatches: list[EpisodeMismatch] = field(default_factory=list)


def _code(season: int | None, episode: int | None) -> str:
    if season is None or episode is None:
        return "-"
    return f"S{season:02d}E{episode:02d}"


class WatchImporter:
    """Run a batch of raw watch items through the resolution pipeline."""

    def __init__(
        self,
        memory: DecisionMemory,
        series_resolver: SeriesResolver,
        episode_resolver: EpisodeResolver,
        index_builder: EpisodeIndexBuilder,
        watch_store: WatchStore,
    ) -> None:
        self.memory = memory
        self.series_resolver = series_resolver
        self.episode_resolver = episode_resolver
        self.index_builder = index_builder
        self.watch_store = watch_store
        self._hydrated: set[str] = set()

    def pending(self, items: Iterable[RawWatchItem]) -> list[RawWatchItem]:
        """Items not yet processed, with in-batch duplicates removed."""
        seen: set[str] = set()
        result = []
        for item in items:
            watch_id = item.watch_id
            if watch_id in seen or self.memory.is_processed(watch_id):
                continue
            seen.add(watch_id)
            result.append(item)
        return result

    async def run(
        self, items: Iterable[RawWatchItem], limit: int | None = None
    ) -> ImportSummary:
        """Import *items* (at most *limit* pending ones) and summarize."""
        todo = self.pending(items)
        if limit is not None:
            todo = todo[:limit]

        summary = ImportSummary()
        for item in todo:
            try:
                await self._process(item, summary)
            except ImportCancelled as exc:
                logger.info("%s", exc)
                summary.cancelled = True
                break
            except Exception:
                logger.exception("Error processing row: %s", item.title)
                summary.errors += 1
                summary.skipped += 1
            summary.processed += 1
        return summary

    async def _process(self, item: RawWatchItem, summary: ImportSummary) -> None:
        show = item.show_reference()
        if show.source_type is SourceType.MOVIE:
            self._record(
                item,
                summary,
                WatchEvent(
                    series=item.title,
                    watched_on=item.watched_on,
                    source=item.source,
                    raw_title=item.title,
                ),
            )
            summary.movies += 1
            return

        resolution = await self.series_resolver.resolve(
            show.source_name, show.source_type, item.source
        )
        if resolution.status is ResolutionStatus.CANCELLED:
            raise ImportCancelled(item.title)
        if resolution.status is ResolutionStatus.SKIPPED:
            summary.skipped += 1
            if resolution.reason in (USER_SKIP_REASON, MALFORMED_REASON):
                summary.series_skipped += 1
            if resolution.reason != "catalog error":
                self.memory.mark_processed(item.watch_id)
            return

        series = resolution.series
        assert series is not None
        if resolution.is_new:
            summary.series_added += 1
        if not await self._ensure_index(series, force=resolution.is_new):
            # Retried on the next run; nothing about the episode is guessed.
            summary.skipped += 1
            return

        raw_episode = item.episode_reference()
        episode = self.episode_resolver.resolve(series, raw_episode)
        if episode.status is ResolutionStatus.CANCELLED:
            raise ImportCancelled(item.title)
        if episode.status is ResolutionStatus.SKIPPED:
            summary.skipped += 1
            self.memory.mark_processed(item.watch_id)
            return

        match = episode.match
        assert match is not None
        self._note_mismatch(series, raw_episode, match, summary)
        self._record(
            item,
            summary,
            WatchEvent(
                series=series.name,
                season=match.season,
                episode=match.episode,
                watched_on=item.watched_on,
                source=item.source,
                raw_title=item.episode_title or item.title,
                method=match.label,
            ),
        )

    async def _ensure_index(self, series: CanonicalSeries, force: bool) -> bool:
        """Materialize catalog episodes for new or not-yet-hydrated series.

        Returns False when the catalog could not be reached; the series stays
        unhydrated so a later item retries the fetch.
        """
        key = series.name.lower()
        if key in self._hydrated:
            return True
        if not force and (
            series.is_local_only or not self.index_builder.build(series).is_empty
        ):
            return True
        try:
            index = await self.index_builder.hydrate(series)
        except CatalogError as exc:
            logger.error("Could not fetch episodes for %s: %s", series.name, exc)
            return False
        self._hydrated.add(key)
        logger.info(
            "Fetched %d episodes for %s", index.episode_count(), series.name
        )
        return True

    def _note_mismatch(
        self,
        series: CanonicalSeries,
        raw: RawEpisodeReference,
        match: MatchResult,
        summary: ImportSummary,
    ) -> None:
        manual = match.method in (MatchMethod.MANUAL, MatchMethod.DEFAULT)
        if not manual and (raw.season_hint, raw.episode_hint) in (
            (match.season, match.episode),
            (None, None),
        ):
            return
        summary.mismatches.append(
            EpisodeMismatch(
                series=series.name,
                source_code=_code(raw.season_hint, raw.episode_hint),
                source_title=raw.episode_title,
                canonical_code=match.code,
                canonical_title=match.title,
                confidence=match.confidence,
                method=match.label,
                auto_matched=not manual,
            )
        )

    def _record(
        self, item: RawWatchItem, summary: ImportSummary, event: WatchEvent
    ) -> None:
        if self.watch_store.record(event):
            summary.imported += 1
        else:
            summary.duplicates += 1
            logger.info(
                "Skipping duplicate watch: %s on %s", event.series, item.watched_on
            )
        self.memory.mark_processed(item.watch_id)
