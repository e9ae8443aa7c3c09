"""Tests for episode index construction and hydration."""

import pytest

from tests.helpers.fakes import FakeCatalog
from tests.helpers.library import HALF_MEN, HALF_MEN_EPISODES, make_index
from watchmatch.core.episode_index import EpisodeIndexBuilder
from watchmatch.library import LocalLibrary
from watchmatch.models.core import CanonicalSeries, EpisodeEntry, EpisodeIndex


def test_index_is_ordered_and_deduplicated() -> None:
    index = EpisodeIndex(
        seasons={
            2: [EpisodeEntry(number=1, title="B")],
            1: [
                EpisodeEntry(number=2, title="Second"),
                EpisodeEntry(number=1, title="First"),
                EpisodeEntry(number=2, title="Duplicate"),
            ],
            3: [],
        }
    )
    assert index.season_numbers() == [1, 2]
    assert [e.title for e in index.episodes(1)] == ["First", "Second"]
    assert index.episode_count() == 3
    assert list(index.iter_episodes())[0] == (1, EpisodeEntry(number=1, title="First"))


def test_build_is_cached(library: LocalLibrary, half_men: CanonicalSeries) -> None:
    builder = EpisodeIndexBuilder(library)
    first = builder.build(half_men)
    library.save_series(half_men, make_index({1: ["Changed"]}))
    assert builder.build(half_men) is first

    builder.invalidate(half_men)
    assert builder.build(half_men).episode_count() == 1


@pytest.mark.asyncio
async def test_hydrate_fetches_and_materializes(library: LocalLibrary) -> None:
    catalog = FakeCatalog(episodes={"2691": make_index(HALF_MEN_EPISODES)})
    builder = EpisodeIndexBuilder(library, catalog)
    assert builder.build(HALF_MEN).is_empty

    index = await builder.hydrate(HALF_MEN)

    assert index.episode_count() == 4
    assert catalog.fetched == ["2691"]
    assert library.lookup_series("Two and a Half Men") == HALF_MEN


@pytest.mark.asyncio
async def test_hydrate_local_only_skips_catalog(library: LocalLibrary) -> None:
    catalog = FakeCatalog()
    series = CanonicalSeries(id="local-only", name="Home Videos")

    index = await EpisodeIndexBuilder(library, catalog).hydrate(series)

    assert index.is_empty
    assert catalog.fetched == []
    assert library.lookup_series("Home Videos") == series
