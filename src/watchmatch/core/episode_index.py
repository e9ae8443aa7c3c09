"""Episode index construction.

Indexes are derived from the local series records (catalog data already
materialized on disk) and cached per series for the lifetime of the builder.
An empty index means "cannot title-match"; callers fall back to the numeric
hints or a manual pick.
"""

import logging

from watchmatch.library.local import LocalLibrary
from watchmatch.metadata.base import CatalogClient
from watchmatch.models.core import CanonicalSeries, EpisodeIndex

logger = logging.getLogger(__name__)


class EpisodeIndexBuilder:
    """Builds and caches per-series episode indexes."""

    def __init__(self, library: LocalLibrary, catalog: CatalogClient | None = None):
        self.library = library
        self.catalog = catalog
        self._cache: dict[str, EpisodeIndex] = {}

    @staticmethod
    def _key(series: CanonicalSeries) -> str:
        return series.name.lower()

    def build(self, series: CanonicalSeries) -> EpisodeIndex:
        """Return the episode index for *series* from local records."""
        key = self._key(series)
        if key not in self._cache:
            index = self.library.episode_index(series)
            logger.debug(
                "Built episode index for %s: %d seasons, %d episodes",
                series.name,
                len(index.seasons),
                index.episode_count(),
            )
            self._cache[key] = index
        return self._cache[key]

    async def hydrate(self, series: CanonicalSeries) -> EpisodeIndex:
        """Pull the full episode list from the catalog and materialize it.

        Local-only series and builders without a catalog just save the
        record as-is. The cached index for *series* is replaced.
        """
        index = EpisodeIndex()
        if self.catalog is not None and not series.is_local_only:
            index = await self.catalog.fetch_episodes(series.id)
        self.library.save_series(series, index)
        self.invalidate(series)
        return self.build(series)

    def invalidate(self, series: CanonicalSeries) -> None:
        self._cache.pop(self._key(series), None)
