"""Series identity resolution.

Turns a raw platform series name into a canonical series, in this order:

1. normalize the name;
2. a remembered alias (raw or normalized name) wins outright;
3. a skip-listed name short-circuits to SKIP without any catalog call;
4. an exact match among local records;
5. fuzzy local matches, disambiguated by the operator;
6. Add / Skip / Cancel, and on Add a catalog search with fallback queries.

Every operator decision is written to decision memory before returning, so a
later run of the same raw name never prompts again.
"""

import logging
from dataclasses import dataclass
from enum import Enum

from rapidfuzz import fuzz

from watchmatch.core.normalize import (
    is_malformed_name,
    normalize_series_name,
    strip_filler_words,
)
from watchmatch.core.prompts import Prompter
from watchmatch.errors import CatalogError
from watchmatch.library.local import LocalLibrary
from watchmatch.memory.decision_memory import DecisionMemory
from watchmatch.metadata.base import CatalogClient
from watchmatch.metadata.models import CatalogSeries
from watchmatch.models.core import CanonicalSeries, SourceType

logger = logging.getLogger(__name__)

DEFAULT_MAX_RESULTS = 20
MALFORMED_REASON = "malformed name"
USER_SKIP_REASON = "user skip"

OPTION_NEW = "None of these - it's a new show"
OPTION_SKIP_ITEM = "Skip this item"
OPTION_ADD = "Add show (search the catalog)"
OPTION_SKIP_SHOW = "Skip show (add to skip list)"
OPTION_CANCEL = "Cancel import (stop entirely)"
OPTION_SKIP_SERIES = "Skip this series"


class ResolutionStatus(str, Enum):
    """Outcome of a resolution attempt."""

    RESOLVED = "resolved"
    SKIPPED = "skipped"
    CANCELLED = "cancelled"


class SeriesSource(str, Enum):
    """Which step produced the canonical series."""

    ALIAS = "alias"
    LOCAL = "local"
    LOCAL_PICK = "local-pick"
    CATALOG = "catalog"


@dataclass(frozen=True)
class SeriesResolution:
    """Result of :meth:`SeriesResolver.resolve`."""

    status: ResolutionStatus
    raw_name: str
    normalized_name: str = ""
    series: CanonicalSeries | None = None
    is_new: bool = False
    source: SeriesSource | None = None
    reason: str = ""

    @property
    def resolved(self) -> bool:
        return self.status is ResolutionStatus.RESOLVED


class SeriesResolver:
    """Resolve raw platform series names to canonical series."""

    def __init__(
        self,
        memory: DecisionMemory,
        library: LocalLibrary,
        catalog: CatalogClient,
        prompter: Prompter,
        *,
        max_results: int = DEFAULT_MAX_RESULTS,
    ) -> None:
        self.memory = memory
        self.library = library
        self.catalog = catalog
        self.prompter = prompter
        self.max_results = max_results

    async def resolve(
        self,
        raw_name: str,
        source_type: SourceType = SourceType.SERIES,
        source: str = "",
    ) -> SeriesResolution:
        """Resolve *raw_name* to a canonical series.

        Args:
            raw_name: Series name exactly as the platform supplied it.
            source_type: Kind of item, only used in prompts and logs.
            source: Platform tag recorded alongside skip entries.

        Returns:
            A SeriesResolution. ``CANCELLED`` means the whole batch must stop.
        """
        raw_name = raw_name or ""
        if is_malformed_name(raw_name):
            logger.info('Skipping malformed series name: "%s"', raw_name)
            self.memory.mark_skipped(raw_name, MALFORMED_REASON, source)
            return self._skipped(raw_name, "", MALFORMED_REASON)

        normalized = normalize_series_name(raw_name)
        names = [raw_name] if normalized == raw_name else [raw_name, normalized]

        for name in names:
            alias = self.memory.lookup_alias(name)
            if alias is not None:
                logger.debug('Alias match: "%s" -> "%s"', raw_name, alias.name)
                return SeriesResolution(
                    ResolutionStatus.RESOLVED,
                    raw_name,
                    normalized,
                    series=alias,
                    source=SeriesSource.ALIAS,
                )

        if any(self.memory.is_skipped(name) for name in names):
            logger.info('Series "%s" is in skip list, skipping', raw_name)
            return self._skipped(raw_name, normalized, "skip list")

        local = self.library.lookup_series(normalized)
        if local is not None:
            return self._accept_local(raw_name, normalized, local, SeriesSource.LOCAL)

        fuzzy = self.library.lookup_fuzzy_series(normalized)
        if fuzzy:
            picked = self._confirm_identity(raw_name, fuzzy)
            if picked is ResolutionStatus.CANCELLED:
                return self._cancelled(raw_name, normalized)
            if picked is ResolutionStatus.SKIPPED:
                self.memory.mark_skipped(raw_name, USER_SKIP_REASON, source)
                return self._skipped(raw_name, normalized, USER_SKIP_REASON)
            if isinstance(picked, CanonicalSeries):
                return self._accept_local(
                    raw_name, normalized, picked, SeriesSource.LOCAL_PICK
                )

        noun = "movie" if source_type is SourceType.MOVIE else "series"
        action = self.prompter.choose(
            f'"{raw_name}" (new {noun})', [OPTION_ADD, OPTION_SKIP_SHOW, OPTION_CANCEL]
        )
        if action == OPTION_SKIP_SHOW:
            self.memory.mark_skipped(raw_name, USER_SKIP_REASON, source)
            return self._skipped(raw_name, normalized, USER_SKIP_REASON)
        if action != OPTION_ADD:
            # Cancel, a declined prompt, or an answer that was never offered.
            return self._cancelled(raw_name, normalized)

        return await self._add_from_catalog(raw_name, normalized, source)

    # ------------------------------------------------------------------
    # Steps
    # ------------------------------------------------------------------
    def _accept_local(
        self,
        raw_name: str,
        normalized: str,
        series: CanonicalSeries,
        how: SeriesSource,
    ) -> SeriesResolution:
        self.memory.save_alias(raw_name, series)
        return SeriesResolution(
            ResolutionStatus.RESOLVED, raw_name, normalized, series=series, source=how
        )

    def _confirm_identity(
        self, raw_name: str, matches: list[CanonicalSeries]
    ) -> CanonicalSeries | ResolutionStatus | None:
        """Ask which existing series *raw_name* is; ``None`` means "new"."""
        display = raw_name if len(raw_name) <= 40 else raw_name[:40] + "..."
        by_label = {series.name: series for series in matches}
        answer = self.prompter.choose(
            f'Which show is "{display}"?',
            [*by_label, OPTION_NEW, OPTION_SKIP_ITEM],
        )
        if answer is None:
            return ResolutionStatus.CANCELLED
        if answer == OPTION_SKIP_ITEM:
            return ResolutionStatus.SKIPPED
        if answer == OPTION_NEW:
            return None
        return by_label.get(answer, ResolutionStatus.CANCELLED)

    def _search_queries(self, raw_name: str, normalized: str) -> list[str]:
        queries: list[str] = []
        for query in (normalized, raw_name, strip_filler_words(normalized)):
            query = query.strip()
            if query and query not in queries:
                queries.append(query)
        return queries

    async def _add_from_catalog(
        self, raw_name: str, normalized: str, source: str
    ) -> SeriesResolution:
        results: list[CatalogSeries] = []
        try:
            for query in self._search_queries(raw_name, normalized):
                logger.info("Searching catalog for: %s", query)
                results = await self.catalog.search_series(query)
                if results:
                    break
        except CatalogError as exc:
            logger.error('Catalog search failed for "%s": %s', raw_name, exc)
            return self._skipped(raw_name, normalized, "catalog error")

        if not results:
            logger.info('Series not found in catalog: "%s"', raw_name)
            return self._skipped(raw_name, normalized, "not found")

        if len(results) == 1:
            chosen = results[0]
            logger.info("Found: %s", chosen.label)
        else:
            picked = self._pick_candidate(raw_name, normalized, results)
            if picked is ResolutionStatus.CANCELLED:
                return self._cancelled(raw_name, normalized)
            if picked is ResolutionStatus.SKIPPED:
                self.memory.mark_skipped(raw_name, USER_SKIP_REASON, source)
                return self._skipped(raw_name, normalized, USER_SKIP_REASON)
            chosen = picked

        series = chosen.to_canonical()
        self.memory.save_alias(raw_name, series)
        return SeriesResolution(
            ResolutionStatus.RESOLVED,
            raw_name,
            normalized,
            series=series,
            is_new=True,
            source=SeriesSource.CATALOG,
        )

    def _pick_candidate(
        self, raw_name: str, normalized: str, results: list[CatalogSeries]
    ) -> CatalogSeries | ResolutionStatus:
        shown = results[: self.max_results]
        # Closest names first; ties keep the catalog's own ranking.
        shown = sorted(
            shown,
            key=lambda c: fuzz.token_sort_ratio(normalized.lower(), c.name.lower()),
            reverse=True,
        )
        by_label: dict[str, CatalogSeries] = {}
        for candidate in shown:
            label = candidate.label
            if label in by_label:
                label = f"{label} [{candidate.id}]"
            by_label[label] = candidate

        answer = self.prompter.choose(
            f'Matching: "{raw_name}"', [*by_label, OPTION_SKIP_SERIES]
        )
        if answer is None:
            return ResolutionStatus.CANCELLED
        if answer == OPTION_SKIP_SERIES:
            return ResolutionStatus.SKIPPED
        return by_label.get(answer, ResolutionStatus.CANCELLED)

    @staticmethod
    def _skipped(raw_name: str, normalized: str, reason: str) -> SeriesResolution:
        return SeriesResolution(
            ResolutionStatus.SKIPPED, raw_name, normalized, reason=reason
        )

    @staticmethod
    def _cancelled(raw_name: str, normalized: str) -> SeriesResolution:
        logger.info('Import cancelled at series "%s"', raw_name)
        return SeriesResolution(
            ResolutionStatus.CANCELLED, raw_name, normalized, reason="cancelled"
        )
