# WARNING: API key loading from .env is for LOCAL DEVELOPMENT ONLY.
# Never commit your .env file or distribute your API keys.

"""TMDB metadata catalog client.

Implements the CatalogClient interface for The Movie Database (TMDB) API:
``/search/tv`` for candidates, ``/tv/{id}`` for the season count and
``/tv/{id}/season/{n}`` for each season's episodes.
"""

import logging
from typing import Any

import httpx

from watchmatch.errors import CatalogError
from watchmatch.metadata.base import CatalogClient
from watchmatch.metadata.models import CatalogSeries
from watchmatch.metadata.settings import Settings
from watchmatch.models.core import EpisodeEntry, EpisodeIndex

logger = logging.getLogger(__name__)

BASE_URL = "https://api.themoviedb.org/3"
YEAR_LENGTH = 4  # Minimum length for a valid year string
DEFAULT_TIMEOUT = 15.0


class TMDBClient(CatalogClient):
    """Client for The Movie Database (TMDB) TV endpoints.

    Loads the API key from the environment via Settings unless one is passed
    explicitly. A shared ``httpx.AsyncClient`` may be injected (tests, or to
    reuse a connection pool across a whole import).
    """

    def __init__(
        self,
        api_key: str | None = None,
        *,
        language: str | None = None,
        http_client: httpx.AsyncClient | None = None,
        timeout: float = DEFAULT_TIMEOUT,
    ) -> None:
        """Initialize TMDBClient and resolve credentials."""
        self.settings = Settings()
        self.api_key = api_key or self.settings.TMDB_API_KEY
        self.read_access_token = self.settings.TMDB_READ_ACCESS_TOKEN
        if not self.api_key and not self.read_access_token:
            self.settings.require_keys()
        self.language = language
        self._http_client = http_client
        self._timeout = timeout

    async def _get(self, endpoint: str, **params: Any) -> dict[str, Any] | None:
        """GET *endpoint*; ``None`` on 404, CatalogError on other failures."""
        query = {k: v for k, v in params.items() if v is not None}
        headers = {}
        if self.api_key:
            query["api_key"] = self.api_key
        else:
            headers["Authorization"] = f"Bearer {self.read_access_token}"
        if self.language:
            query["language"] = self.language

        url = f"{BASE_URL}{endpoint}"
        try:
            if self._http_client is not None:
                resp = await self._http_client.get(url, params=query, headers=headers)
            else:
                async with httpx.AsyncClient(timeout=self._timeout) as client:
                    resp = await client.get(url, params=query, headers=headers)
        except httpx.HTTPError as exc:
            logger.error("TMDB request failed: %s (%s)", endpoint, exc)
            raise CatalogError(f"TMDB request failed: {endpoint}: {exc}") from exc

        if resp.status_code == httpx.codes.NOT_FOUND:
            return None
        if resp.is_error:
            logger.error("TMDB API error %s: %s", resp.status_code, endpoint)
            raise CatalogError(
                f"TMDB API error {resp.status_code} for {endpoint}",
                status_code=resp.status_code,
            )
        return resp.json()

    async def search_series(self, query: str) -> list[CatalogSeries]:
        """Search TMDB for TV series matching *query*."""
        data = await self._get("/search/tv", query=query)
        if not data:
            return []
        results: list[CatalogSeries] = []
        for item in data.get("results", []):
            if item.get("id") is None or not item.get("name"):
                continue
            results.append(
                CatalogSeries(
                    id=item["id"],
                    name=item["name"],
                    year=_extract_year(item.get("first_air_date")),
                    overview=item.get("overview"),
                )
            )
        return results

    async def fetch_episodes(self, series_id: str) -> EpisodeIndex:
        """Fetch all regular seasons of *series_id* into an EpisodeIndex.

        Season 0 (specials) is not fetched. Seasons that 404 are skipped.
        """
        details = await self._get(f"/tv/{series_id}")
        if not details:
            return EpisodeIndex()
        total_seasons = details.get("number_of_seasons") or 0

        seasons: dict[int, list[EpisodeEntry]] = {}
        for season in range(1, total_seasons + 1):
            season_data = await self._get(f"/tv/{series_id}/season/{season}")
            if not season_data:
                continue
            entries = [
                EpisodeEntry(number=ep["episode_number"], title=ep.get("name") or "")
                for ep in season_data.get("episodes", [])
                if ep.get("episode_number") is not None
            ]
            if entries:
                seasons[season] = entries
        logger.debug(
            "TMDB episodes: id=%s seasons=%d episodes=%d",
            series_id,
            len(seasons),
            sum(len(v) for v in seasons.values()),
        )
        return EpisodeIndex(seasons=seasons)


def _extract_year(date_str: str | None) -> int | None:
    """Extracts the year as int from a YYYY-MM-DD string, or returns None."""
    if date_str and len(date_str) >= YEAR_LENGTH and date_str[:YEAR_LENGTH].isdigit():
        return int(date_str[:YEAR_LENGTH])
    return None
