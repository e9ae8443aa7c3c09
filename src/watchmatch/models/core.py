"""Core domain models for watchmatch.

This module defines the structures passed between the resolution stages:
raw platform references on the way in, canonical identities and scored
episode matches on the way out.

Design:
- Raw references are ephemeral and carry whatever the source platform gave us.
- CanonicalSeries is immutable once resolved; its id is either the catalog's
  identifier or LOCAL_ONLY_ID when the series is only known from local records.
- EpisodeIndex is derived data (rebuildable from the catalog) and keeps each
  season's episodes ordered by number with no duplicates.
- MatchResult.method is provenance for logs and reports only; it never feeds
  back into matching.
"""

from enum import Enum
from typing import Iterator

from pydantic import BaseModel, ConfigDict, Field, field_validator

LOCAL_ONLY_ID = "local-only"


class SourceType(str, Enum):
    """Kind of item a watch-history record refers to."""

    MOVIE = "movie"
    SERIES = "series"


class RawShowReference(BaseModel):
    """A show as named by the source platform."""

    source_name: str
    source_type: SourceType = SourceType.SERIES


class RawEpisodeReference(BaseModel):
    """An episode as described by the source platform.

    Either hint may be missing; the title may be empty or generic.
    """

    season_hint: int | None = None
    episode_hint: int | None = None
    episode_title: str = ""
    part_hint: int | None = None


class CanonicalSeries(BaseModel):
    """Authoritative series identity."""

    model_config = ConfigDict(frozen=True)

    id: str
    name: str

    @field_validator("id", mode="before")
    @classmethod
    def _coerce_id(cls, value: object) -> str:
        # TMDB hands out integer ids; keep them opaque strings internally.
        return str(value)

    @property
    def is_local_only(self) -> bool:
        """True when no catalog id is known for this series."""
        return self.id == LOCAL_ONLY_ID


class EpisodeEntry(BaseModel):
    """A single canonical episode within a season."""

    model_config = ConfigDict(frozen=True)

    number: int
    title: str = ""


class EpisodeIndex(BaseModel):
    """Per-season ordered episode lists for one series."""

    seasons: dict[int, list[EpisodeEntry]] = Field(default_factory=dict)

    @field_validator("seasons")
    @classmethod
    def _order_and_dedupe(
        cls, value: dict[int, list[EpisodeEntry]]
    ) -> dict[int, list[EpisodeEntry]]:
        ordered: dict[int, list[EpisodeEntry]] = {}
        for season in sorted(value):
            by_number: dict[int, EpisodeEntry] = {}
            for entry in value[season]:
                by_number.setdefault(entry.number, entry)
            if by_number:
                ordered[season] = [by_number[n] for n in sorted(by_number)]
        return ordered

    @property
    def is_empty(self) -> bool:
        return not any(self.seasons.values())

    def season_numbers(self) -> list[int]:
        """Season numbers in ascending order."""
        return list(self.seasons)

    def episodes(self, season: int) -> list[EpisodeEntry]:
        return self.seasons.get(season, [])

    def find(self, season: int, number: int) -> EpisodeEntry | None:
        for entry in self.episodes(season):
            if entry.number == number:
                return entry
        return None

    def iter_episodes(self) -> Iterator[tuple[int, EpisodeEntry]]:
        """Yield ``(season, entry)`` pairs in season then episode order."""
        for season, entries in self.seasons.items():
            for entry in entries:
                yield season, entry

    def episode_count(self) -> int:
        return sum(len(entries) for entries in self.seasons.values())


class MatchMethod(str, Enum):
    """How an episode match was obtained."""

    EXACT = "exact"
    EXACT_PART = "exact-part"
    COMBINED = "combined"
    SPLIT = "split"
    PREFIX_PART = "prefix-part"
    PREFIX_COMBINED = "prefix-combined"
    FUZZY = "fuzzy"
    PILOT = "pilot"
    NUMBER = "number"
    NUMBER_NO_INDEX = "number-no-index"
    MANUAL = "manual"
    DEFAULT = "default"


class MatchResult(BaseModel):
    """A proposed canonical episode for a raw episode reference."""

    model_config = ConfigDict(frozen=True)

    season: int
    episode: int
    confidence: float = Field(ge=0.0, le=1.0)
    method: MatchMethod
    title: str = ""
    cross_season: bool = False

    @property
    def label(self) -> str:
        """Method tag as shown in logs, e.g. ``exact-cross-season``."""
        if self.cross_season:
            return f"{self.method.value}-cross-season"
        return self.method.value

    @property
    def code(self) -> str:
        """``SxxEyy`` form of the matched episode."""
        return f"S{self.season:02d}E{self.episode:02d}"
