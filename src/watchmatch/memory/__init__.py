"""Durable store of resolution decisions."""

from watchmatch.memory.decision_memory import (
    DecisionMemory,
    EpisodeMapping,
    SeriesAlias,
    SkipEntry,
    episode_key,
)

__all__ = [
    "DecisionMemory",
    "EpisodeMapping",
    "SeriesAlias",
    "SkipEntry",
    "episode_key",
]
