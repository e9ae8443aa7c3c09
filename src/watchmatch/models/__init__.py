"""Data models for watchmatch."""

from watchmatch.models.core import (
    LOCAL_ONLY_ID,
    CanonicalSeries,
    EpisodeEntry,
    EpisodeIndex,
    MatchMethod,
    MatchResult,
    RawEpisodeReference,
    RawShowReference,
    SourceType,
)

__all__ = [
    "LOCAL_ONLY_ID",
    "CanonicalSeries",
    "EpisodeEntry",
    "EpisodeIndex",
    "MatchMethod",
    "MatchResult",
    "RawEpisodeReference",
    "RawShowReference",
    "SourceType",
]
