"""Small builders for episode indexes and canned series."""

from watchmatch.models.core import CanonicalSeries, EpisodeEntry, EpisodeIndex


def make_index(seasons: dict[int, list[str]]) -> EpisodeIndex:
    """Build an index from ``{season: [title, ...]}`` numbering from 1."""
    return EpisodeIndex(
        seasons={
            season: [
                EpisodeEntry(number=i, title=title)
                for i, title in enumerate(titles, start=1)
            ]
            for season, titles in seasons.items()
        }
    )


HALF_MEN = CanonicalSeries(id="2691", name="Two and a Half Men")
HALF_MEN_EPISODES = {
    1: ["Pilot", "Big Flappy Bastards", "Go East on Sunset"],
    2: ["Ladies Room"],
}
