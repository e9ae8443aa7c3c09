"""Base abstraction for metadata catalog clients.

Defines the two capabilities the resolution core needs from a metadata
provider: free-text series search and a full episode listing for a series.
All provider clients must inherit from this class and implement its methods.
"""

from abc import ABC, abstractmethod

from watchmatch.metadata.models import CatalogSeries
from watchmatch.models.core import EpisodeIndex


class CatalogClient(ABC):
    """Abstract base class for all metadata catalog clients.

    Implementations return empty results for "not found" and raise
    :class:`~watchmatch.errors.CatalogError` for transport failures.
    """

    @abstractmethod
    async def search_series(self, query: str) -> list[CatalogSeries]:
        """Search for TV series by free-text *query*.

        Returns:
            Candidate series, best match first as ranked by the provider.
        """
        raise NotImplementedError

    @abstractmethod
    async def fetch_episodes(self, series_id: str) -> EpisodeIndex:
        """Fetch every season's episode list for *series_id*.

        Returns:
            An EpisodeIndex; empty when the provider has no episode data.
        """
        raise NotImplementedError
