"""Shared fixtures for the watchmatch test suite."""

from pathlib import Path

import pytest

from tests.helpers.library import HALF_MEN, HALF_MEN_EPISODES, make_index
from watchmatch.core.episode_index import EpisodeIndexBuilder
from watchmatch.library import LocalLibrary
from watchmatch.memory import DecisionMemory
from watchmatch.models.core import CanonicalSeries


@pytest.fixture
def memory(tmp_path: Path) -> DecisionMemory:
    return DecisionMemory(tmp_path / "decision-memory.json")


@pytest.fixture
def library(tmp_path: Path) -> LocalLibrary:
    return LocalLibrary(tmp_path / "library")


@pytest.fixture
def half_men(library: LocalLibrary) -> CanonicalSeries:
    """Local record for Two and a Half Men with a two-season episode list."""
    library.save_series(HALF_MEN, make_index(HALF_MEN_EPISODES))
    return HALF_MEN


@pytest.fixture
def index_builder(library: LocalLibrary) -> EpisodeIndexBuilder:
    return EpisodeIndexBuilder(library)
