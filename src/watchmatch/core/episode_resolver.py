"""Episode identity resolution for an already-resolved series.

Wraps the matcher with decision memory and the interactive picker:

* a remembered manual mapping or episode skip for the same raw key is reused
  without prompting;
* title matches at or above the auto-accept confidence are taken as-is;
* generic or missing titles fall back to the platform's numbers when the
  index confirms that episode exists;
* anything else goes to a paged episode picker, and the operator's answer is
  remembered.
"""

import logging
from dataclasses import dataclass

from watchmatch.core.episode_index import EpisodeIndexBuilder
from watchmatch.core.matcher import AUTO_ACCEPT_CONFIDENCE, match_across_seasons
from watchmatch.core.prompts import Prompter
from watchmatch.core.series_resolver import ResolutionStatus
from watchmatch.core.title_utils import clean_episode_title
from watchmatch.memory.decision_memory import DecisionMemory, episode_key
from watchmatch.models.core import (
    CanonicalSeries,
    EpisodeIndex,
    MatchMethod,
    MatchResult,
    RawEpisodeReference,
)

logger = logging.getLogger(__name__)

PAGE_SIZE = 15

OPTION_SKIP_EPISODE = "Skip this episode"
OPTION_PREVIOUS = "Show previous episodes..."
OPTION_ALL_SEASONS = "Search all seasons..."
OPTION_CANCEL = "Cancel import"
OPTION_DEFAULT = "Use S01E01 (default)"


@dataclass(frozen=True)
class EpisodeResolution:
    """Result of :meth:`EpisodeResolver.resolve`."""

    status: ResolutionStatus
    key: str
    match: MatchResult | None = None
    prompted: bool = False

    @property
    def resolved(self) -> bool:
        return self.status is ResolutionStatus.RESOLVED


@dataclass(frozen=True)
class _Choice:
    season: int
    number: int
    title: str
    distance: int

    @property
    def label(self) -> str:
        return f"S{self.season:02d}E{self.number:02d} - {self.title}"


class EpisodeResolver:
    """Resolve raw episode references against a series' episode index."""

    def __init__(
        self,
        memory: DecisionMemory,
        index_builder: EpisodeIndexBuilder,
        prompter: Prompter,
    ) -> None:
        self.memory = memory
        self.index_builder = index_builder
        self.prompter = prompter

    def resolve(
        self, series: CanonicalSeries, raw: RawEpisodeReference
    ) -> EpisodeResolution:
        key = episode_key(raw.season_hint, raw.episode_hint, raw.episode_title)

        mapping = self.memory.lookup_manual_episode(series.name, key)
        if mapping is not None:
            entry = self.index_builder.build(series).find(
                mapping.season, mapping.episode
            )
            return EpisodeResolution(
                ResolutionStatus.RESOLVED,
                key,
                MatchResult(
                    season=mapping.season,
                    episode=mapping.episode,
                    confidence=1.0,
                    method=MatchMethod.MANUAL,
                    title=entry.title if entry else "",
                ),
            )
        if self.memory.is_episode_skipped(series.name, key):
            return EpisodeResolution(ResolutionStatus.SKIPPED, key)

        index = self.index_builder.build(series)
        if index.is_empty:
            return self._resolve_without_index(series, raw, key)

        suggestion: MatchResult | None = None
        if raw.episode_title.strip():
            suggestion = match_across_seasons(
                index,
                raw.episode_title,
                hinted_season=raw.season_hint or 1,
                part_hint=raw.part_hint,
                # Unnumbered rows count as episode 1, so a bare "Pilot" hits
                # the pilot rule.
                episode_hint=raw.episode_hint or 1,
                series_name=series.name,
            )
            if (
                suggestion is not None
                and suggestion.confidence >= AUTO_ACCEPT_CONFIDENCE
            ):
                logger.debug(
                    'Episode matched: "%s" -> %s (%s, %.2f)',
                    raw.episode_title,
                    suggestion.code,
                    suggestion.label,
                    suggestion.confidence,
                )
                return EpisodeResolution(ResolutionStatus.RESOLVED, key, suggestion)

        numeric = self._numeric_match(index, raw, series.name)
        if numeric is not None:
            return EpisodeResolution(ResolutionStatus.RESOLVED, key, numeric)

        return self._pick_episode(series, raw, key, index, suggestion)

    # ------------------------------------------------------------------
    # Fallbacks
    # ------------------------------------------------------------------
    @staticmethod
    def _numeric_match(
        index: EpisodeIndex, raw: RawEpisodeReference, series_name: str
    ) -> MatchResult | None:
        """Trust the platform numbers when the title carries no signal."""
        if raw.season_hint is None or raw.episode_hint is None:
            return None
        if not clean_episode_title(raw.episode_title, series_name).is_generic:
            return None
        entry = index.find(raw.season_hint, raw.episode_hint)
        if entry is None:
            return None
        return MatchResult(
            season=raw.season_hint,
            episode=entry.number,
            confidence=AUTO_ACCEPT_CONFIDENCE,
            method=MatchMethod.NUMBER,
            title=entry.title,
        )

    def _resolve_without_index(
        self, series: CanonicalSeries, raw: RawEpisodeReference, key: str
    ) -> EpisodeResolution:
        if raw.season_hint is not None and raw.episode_hint is not None:
            return EpisodeResolution(
                ResolutionStatus.RESOLVED,
                key,
                MatchResult(
                    season=raw.season_hint,
                    episode=raw.episode_hint,
                    confidence=AUTO_ACCEPT_CONFIDENCE,
                    method=MatchMethod.NUMBER_NO_INDEX,
                ),
            )

        answer = self.prompter.choose(
            f'{series.name}: no episode list and no numbers in "{raw.episode_title}"',
            [OPTION_DEFAULT, OPTION_SKIP_EPISODE, OPTION_CANCEL],
        )
        if answer == OPTION_SKIP_EPISODE:
            self.memory.mark_episode_skipped(series.name, key)
            return EpisodeResolution(ResolutionStatus.SKIPPED, key, prompted=True)
        if answer != OPTION_DEFAULT:
            return EpisodeResolution(ResolutionStatus.CANCELLED, key, prompted=True)
        self.memory.save_manual_episode(series.name, key, 1, 1)
        return EpisodeResolution(
            ResolutionStatus.RESOLVED,
            key,
            MatchResult(
                season=1, episode=1, confidence=0.0, method=MatchMethod.DEFAULT
            ),
            prompted=True,
        )

    @staticmethod
    def _choices(
        index: EpisodeIndex, season: int, episode: int, all_seasons: bool
    ) -> list[_Choice]:
        choices = []
        for ep_season, entry in index.iter_episodes():
            if not all_seasons and ep_season != season:
                continue
            distance = abs(ep_season - season) * 100 + abs(entry.number - episode)
            choices.append(_Choice(ep_season, entry.number, entry.title, distance))
        # Stable sort keeps index order for equal distances.
        return sorted(choices, key=lambda c: c.distance)

    def _pick_episode(
        self,
        series: CanonicalSeries,
        raw: RawEpisodeReference,
        key: str,
        index: EpisodeIndex,
        suggestion: MatchResult | None,
    ) -> EpisodeResolution:
        season = raw.season_hint or 1
        episode = raw.episode_hint or 1
        all_seasons = season not in index.seasons
        offset = 0

        header = f'{series.name} S{season:02d}E{episode:02d}: "{raw.episode_title}"'
        if suggestion is not None:
            header += (
                f" (best guess {suggestion.code} - {suggestion.title},"
                f" {suggestion.confidence:.0%})"
            )

        while True:
            choices = self._choices(index, season, episode, all_seasons)
            page = choices[offset : offset + PAGE_SIZE]
            remaining = len(choices) - offset - PAGE_SIZE

            options = [OPTION_SKIP_EPISODE]
            if offset > 0:
                options.append(OPTION_PREVIOUS)
            by_label = {choice.label: choice for choice in page}
            options.extend(by_label)
            more_label = f"Show more episodes ({remaining} remaining)..."
            if remaining > 0:
                options.append(more_label)
            if not all_seasons and len(index.seasons) > 1:
                options.append(OPTION_ALL_SEASONS)
            options.append(OPTION_CANCEL)

            if len(choices) > PAGE_SIZE:
                end = min(offset + PAGE_SIZE, len(choices))
                question = f"{header} ({offset + 1}-{end} of {len(choices)})"
            else:
                question = header
            answer = self.prompter.choose(question, options)

            if answer is None or answer == OPTION_CANCEL:
                return EpisodeResolution(ResolutionStatus.CANCELLED, key, prompted=True)
            if answer == OPTION_SKIP_EPISODE:
                self.memory.mark_episode_skipped(series.name, key)
                return EpisodeResolution(ResolutionStatus.SKIPPED, key, prompted=True)
            if answer == OPTION_PREVIOUS:
                offset = max(0, offset - PAGE_SIZE)
                continue
            if answer == more_label:
                offset += PAGE_SIZE
                continue
            if answer == OPTION_ALL_SEASONS:
                all_seasons = True
                offset = 0
                continue

            choice = by_label.get(answer)
            if choice is None:
                # Never offered; treat like a declined prompt.
                return EpisodeResolution(ResolutionStatus.CANCELLED, key, prompted=True)
            self.memory.save_manual_episode(
                series.name, key, choice.season, choice.number
            )
            return EpisodeResolution(
                ResolutionStatus.RESOLVED,
                key,
                MatchResult(
                    season=choice.season,
                    episode=choice.number,
                    confidence=1.0,
                    method=MatchMethod.MANUAL,
                    title=choice.title,
                ),
                prompted=True,
            )
