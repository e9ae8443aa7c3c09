"""On-disk schema of the decision memory JSON document.

The document keeps camelCase top-level keys (``seriesAliases``,
``skippedSeries``, ``manualEpisodeMappings``, ``skippedEpisodes``,
``processedWatchIds``). Entries written by the older watch-import progress
file (``tmdbName``/``tmdbId`` aliases, ``source``-only skips) still load.
"""

from datetime import date

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator


class _Entry(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="ignore")


class SeriesAlias(_Entry):
    """Raw platform name -> canonical identity."""

    canonical_name: str = Field(
        serialization_alias="canonicalName",
        validation_alias=AliasChoices("canonicalName", "canonical_name", "tmdbName"),
    )
    canonical_id: str = Field(
        serialization_alias="canonicalId",
        validation_alias=AliasChoices("canonicalId", "canonical_id", "tmdbId"),
    )

    @field_validator("canonical_id", mode="before")
    @classmethod
    def _id_as_text(cls, value: object) -> str:
        return str(value)


class SkipEntry(_Entry):
    """Why and when a raw series name was put on the skip list."""

    reason: str = "user skip"
    source: str = ""
    skipped_at: str = Field(
        default_factory=lambda: date.today().isoformat(),
        serialization_alias="skippedAt",
        validation_alias=AliasChoices("skippedAt", "skipped_at"),
    )


class EpisodeMapping(_Entry):
    """Canonical season/episode chosen by the operator for a raw episode."""

    season: int
    episode: int


class MemoryDocument(_Entry):
    """Whole decision memory document."""

    series_aliases: dict[str, SeriesAlias] = Field(
        default_factory=dict,
        serialization_alias="seriesAliases",
        validation_alias=AliasChoices("seriesAliases", "series_aliases"),
    )
    skipped_series: dict[str, SkipEntry] = Field(
        default_factory=dict,
        serialization_alias="skippedSeries",
        validation_alias=AliasChoices("skippedSeries", "skipped_series"),
    )
    manual_episode_mappings: dict[str, dict[str, EpisodeMapping]] = Field(
        default_factory=dict,
        serialization_alias="manualEpisodeMappings",
        validation_alias=AliasChoices(
            "manualEpisodeMappings", "manual_episode_mappings"
        ),
    )
    skipped_episodes: dict[str, list[str]] = Field(
        default_factory=dict,
        serialization_alias="skippedEpisodes",
        validation_alias=AliasChoices("skippedEpisodes", "skipped_episodes"),
    )
    processed_watch_ids: list[str] = Field(
        default_factory=list,
        serialization_alias="processedWatchIds",
        validation_alias=AliasChoices("processedWatchIds", "processed_watch_ids"),
    )
