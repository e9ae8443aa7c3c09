"""Tests for the episode matcher.

Covers each scoring tier, the pilot rule, tier precedence and the
cross-season scan.
"""

import pytest

from tests.helpers.library import make_index
from watchmatch.core.matcher import (
    AUTO_ACCEPT_CONFIDENCE,
    match_across_seasons,
    match_episode,
)
from watchmatch.models.core import EpisodeIndex, MatchMethod


@pytest.fixture
def index() -> EpisodeIndex:
    return make_index(
        {
            1: [
                "Pilot",
                "Big Flappy Bastards",
                "The Long Night, Pt. 1",
                "The Long Night, Pt. 2",
                "Reunion",
            ],
            2: ["Homecoming", "Lost Weekend"],
        }
    )


def test_exact_title(index: EpisodeIndex) -> None:
    result = match_episode(index, 1, "Big Flappy Bastards")
    assert result is not None
    assert (result.episode, result.confidence, result.method) == (
        2,
        1.0,
        MatchMethod.EXACT,
    )
    assert result.title == "Big Flappy Bastards"


def test_exact_part(index: EpisodeIndex) -> None:
    result = match_episode(index, 1, "The Long Night, Pt. 2")
    assert result is not None
    assert result.episode == 4
    assert result.confidence == 1.0
    assert result.method is MatchMethod.EXACT_PART


def test_part_hint_overrides_title(index: EpisodeIndex) -> None:
    result = match_episode(index, 1, "The Long Night, Pt. 2", part_hint=1)
    assert result is not None
    assert result.episode == 3


def test_split_when_only_canonical_has_part(index: EpisodeIndex) -> None:
    result = match_episode(index, 1, "The Long Night")
    assert result is not None
    # First canonical part wins.
    assert result.episode == 3
    assert result.method is MatchMethod.SPLIT
    assert result.confidence == 0.7


def test_combined_when_only_raw_has_part(index: EpisodeIndex) -> None:
    result = match_episode(index, 1, "Reunion, Pt. 1")
    assert result is not None
    assert result.episode == 5
    assert result.method is MatchMethod.COMBINED
    assert result.confidence == 0.7


def test_prefix_part(index: EpisodeIndex) -> None:
    result = match_episode(index, 1, "The Long Ni, Pt. 2")
    assert result is not None
    assert result.episode == 4
    assert result.method is MatchMethod.PREFIX_PART
    assert result.confidence == 0.85


def test_prefix_combined(index: EpisodeIndex) -> None:
    result = match_episode(index, 1, "Reun, Pt. 1")
    assert result is not None
    assert result.episode == 5
    assert result.method is MatchMethod.PREFIX_COMBINED
    assert result.confidence == 0.6


def test_fuzzy(index: EpisodeIndex) -> None:
    result = match_episode(index, 1, "Flappy Bastards Return")
    assert result is not None
    assert result.episode == 2
    assert result.method is MatchMethod.FUZZY
    assert result.confidence == pytest.approx(2 / 3)


def test_no_match(index: EpisodeIndex) -> None:
    assert match_episode(index, 1, "Totally Unrelated") is None


def test_generic_title_never_matches(index: EpisodeIndex) -> None:
    assert match_episode(index, 1, "Episode 4") is None
    assert match_episode(index, 1, "") is None


def test_missing_season_or_index(index: EpisodeIndex) -> None:
    assert match_episode(index, 9, "Pilot") is None
    assert match_episode(None, 1, "Pilot") is None


def test_pilot_rule() -> None:
    index = make_index({1: ["Welcome to the Jungle", "Second One"]})
    result = match_episode(index, 1, "Season 1 Episode 1 (Pilot)", episode_hint=1)
    assert result is not None
    assert result.episode == 1
    assert result.method is MatchMethod.PILOT
    assert result.confidence == 0.8
    assert result.title == "Welcome to the Jungle"


def test_pilot_title_with_episode_one() -> None:
    index = make_index({1: ["Pilot", "Second Chances"]})
    result = match_episode(index, 1, "Pilot", episode_hint=1)
    assert result is not None
    assert (result.season, result.episode) == (1, 1)
    assert result.confidence == 0.8
    assert result.method is MatchMethod.PILOT


def test_fuzzy_prefers_matching_part() -> None:
    index = make_index({1: ["Night Shift (1)", "Night Shift (2)"]})
    result = match_episode(index, 1, "Night Shifts Again, Pt. 1")
    assert result is not None
    assert (result.episode, result.confidence, result.method) == (
        1,
        0.8,
        MatchMethod.FUZZY,
    )

    # Listed first, the wrong part still loses to the matching one.
    swapped = make_index({1: ["Night Shift (2)", "Night Shift (1)"]})
    result = match_episode(swapped, 1, "Night Shifts Again, Pt. 1")
    assert result is not None
    assert result.episode == 2
    assert result.title == "Night Shift (1)"


def test_mismatched_part_is_halved_below_floor() -> None:
    index = make_index({1: ["Night Shift (2)"]})
    # Without a raw part there is no penalty: plain containment scores 0.8.
    unpenalized = match_episode(index, 1, "Night Shifts Again")
    assert unpenalized is not None
    assert unpenalized.confidence == 0.8
    # Part 1 against part 2 halves that to 0.4, under the 0.5 floor.
    assert match_episode(index, 1, "Night Shifts Again, Pt. 1") is None


def test_series_prefix_is_stripped_before_matching(index: EpisodeIndex) -> None:
    result = match_episode(
        index, 1, "Two and a Half Men - Reunion", series_name="Two and a Half Men"
    )
    assert result is not None
    assert result.episode == 5
    assert result.method is MatchMethod.EXACT


def test_first_exact_candidate_wins() -> None:
    index = make_index({1: ["Twins", "Twins"]})
    result = match_episode(index, 1, "Twins")
    assert result is not None
    assert result.episode == 1


def test_cross_season_match(index: EpisodeIndex) -> None:
    result = match_across_seasons(index, "Homecoming", hinted_season=1)
    assert result is not None
    assert (result.season, result.episode) == (2, 1)
    assert result.cross_season
    assert result.label == "exact-cross-season"


def test_hinted_season_wins_without_scan(index: EpisodeIndex) -> None:
    result = match_across_seasons(index, "Pilot", hinted_season=1)
    assert result is not None
    assert (result.season, result.episode) == (1, 1)
    assert not result.cross_season
    assert result.label == "exact"


def test_cross_season_first_highest_wins() -> None:
    index = make_index({1: ["Pilot"], 2: ["Homecoming"], 3: ["Homecoming"]})
    result = match_across_seasons(index, "Homecoming", hinted_season=1)
    assert result is not None
    assert result.season == 2


def test_low_confidence_passes_through_hinted_season(index: EpisodeIndex) -> None:
    result = match_across_seasons(index, "Flappy Bastards Return", hinted_season=1)
    assert result is not None
    assert result.confidence < AUTO_ACCEPT_CONFIDENCE
    assert result.season == 1
    assert not result.cross_season


@pytest.mark.parametrize(
    "title",
    [
        "Pilot",
        "Homecoming",
        "Flappy Bastards Return",
        "Reun, Pt. 1",
        "The Long Night",
        "Lost Weekend",
    ],
)
def test_cross_season_results_always_clear_threshold(
    index: EpisodeIndex, title: str
) -> None:
    result = match_across_seasons(index, title, hinted_season=1)
    if result is not None and result.confidence < AUTO_ACCEPT_CONFIDENCE:
        assert not result.cross_season
        assert result.season == 1


def test_empty_index() -> None:
    assert match_across_seasons(EpisodeIndex(), "Pilot") is None
    assert match_across_seasons(None, "Pilot") is None
