"""Episode matcher.

Scores the episodes of a season against a raw platform episode title and
returns the best canonical candidate with a confidence and a method tag.

Tiers, in resolution order:

* exact  - base titles equal (or similarity >= 0.9); part numbers decide
  between ``exact``/``exact-part`` (1.0) and ``combined``/``split`` (0.7).
* prefix - the raw base title is a truncation of the canonical one;
  ``prefix-part`` (0.85) when parts agree, ``prefix-combined`` (0.6) when only
  the raw title carries a part.
* fuzzy  - best token-overlap similarity, halved when both sides carry
  different part numbers; only accepted at >= 0.5.

The matcher never prompts. Callers treat anything below
:data:`AUTO_ACCEPT_CONFIDENCE` as needing an explicit decision.
"""

import logging

from watchmatch.core.title_utils import (
    clean_episode_title,
    extract_part_number,
    is_title_prefix,
    normalize_base_title,
    string_similarity,
)
from watchmatch.models.core import EpisodeIndex, MatchMethod, MatchResult

logger = logging.getLogger(__name__)

AUTO_ACCEPT_CONFIDENCE = 0.7
EXACT_SIMILARITY = 0.9
MIN_FUZZY_SCORE = 0.5
MISMATCHED_PART_PENALTY = 0.5

PILOT_CONFIDENCE = 0.8
PARTIAL_PART_CONFIDENCE = 0.7
PREFIX_PART_CONFIDENCE = 0.85
PREFIX_COMBINED_CONFIDENCE = 0.6


def match_episode(
    index: EpisodeIndex | None,
    season: int,
    raw_title: str,
    part_hint: int | None = None,
    episode_hint: int | None = None,
    series_name: str = "",
) -> MatchResult | None:
    """Find the best episode of *season* for *raw_title*.

    Args:
        index: Episode index of the series; ``None``/empty yields ``None``.
        season: Season to search.
        raw_title: Episode title as supplied by the platform.
        part_hint: Explicit part number, overriding any parsed from the title.
        episode_hint: Platform episode number, used for the pilot rule.
        series_name: Canonical series name, used to strip title prefixes.

    Returns:
        The winning :class:`MatchResult` or ``None`` when nothing qualifies.
    """
    if index is None:
        return None
    episodes = index.episodes(season)
    if not episodes:
        return None

    cleaned = clean_episode_title(raw_title, series_name)
    if cleaned.is_generic:
        return None

    if cleaned.is_pilot and episode_hint == 1:
        first = index.find(season, 1)
        if first is not None:
            return MatchResult(
                season=season,
                episode=first.number,
                confidence=PILOT_CONFIDENCE,
                method=MatchMethod.PILOT,
                title=first.title,
            )

    title_to_match = cleaned.cleaned_title or raw_title
    raw_base = normalize_base_title(title_to_match)
    if not raw_base:
        return None
    raw_part = part_hint
    if raw_part is None:
        raw_part = extract_part_number(title_to_match).part

    exact: MatchResult | None = None
    partial: MatchResult | None = None
    prefix_part: MatchResult | None = None
    prefix_combined: MatchResult | None = None
    best_fuzzy: MatchResult | None = None
    best_fuzzy_score = 0.0

    def candidate(
        number: int, title: str, confidence: float, method: MatchMethod
    ) -> MatchResult:
        return MatchResult(
            season=season,
            episode=number,
            confidence=confidence,
            method=method,
            title=title,
        )

    for ep in episodes:
        ep_part = extract_part_number(ep.title).part
        ep_base = normalize_base_title(ep.title)
        similarity = string_similarity(raw_base, ep_base)

        if raw_base == ep_base or similarity >= EXACT_SIMILARITY:
            if raw_part is not None and ep_part is not None:
                if raw_part == ep_part and exact is None:
                    exact = candidate(ep.number, ep.title, 1.0, MatchMethod.EXACT_PART)
            elif raw_part is not None:
                if partial is None:
                    partial = candidate(
                        ep.number,
                        ep.title,
                        PARTIAL_PART_CONFIDENCE,
                        MatchMethod.COMBINED,
                    )
            elif ep_part is not None:
                if partial is None:
                    partial = candidate(
                        ep.number, ep.title, PARTIAL_PART_CONFIDENCE, MatchMethod.SPLIT
                    )
            elif exact is None:
                exact = candidate(ep.number, ep.title, 1.0, MatchMethod.EXACT)
            continue

        is_prefix = is_title_prefix(raw_base, ep_base)
        if is_prefix and raw_part is not None and ep_part is not None:
            if raw_part == ep_part and prefix_part is None:
                prefix_part = candidate(
                    ep.number, ep.title, PREFIX_PART_CONFIDENCE, MatchMethod.PREFIX_PART
                )
            continue
        if is_prefix and raw_part is not None:
            if prefix_combined is None:
                prefix_combined = candidate(
                    ep.number,
                    ep.title,
                    PREFIX_COMBINED_CONFIDENCE,
                    MatchMethod.PREFIX_COMBINED,
                )
            continue

        score = similarity
        if raw_part is not None and ep_part is not None and raw_part != ep_part:
            score *= MISMATCHED_PART_PENALTY
        if score > best_fuzzy_score:
            best_fuzzy_score = score
            best_fuzzy = candidate(ep.number, ep.title, score, MatchMethod.FUZZY)

    for result in (exact, partial, prefix_part, prefix_combined):
        if result is not None:
            return result
    if best_fuzzy is not None and best_fuzzy_score >= MIN_FUZZY_SCORE:
        return best_fuzzy
    return None


def match_across_seasons(
    index: EpisodeIndex | None,
    raw_title: str,
    hinted_season: int = 1,
    part_hint: int | None = None,
    episode_hint: int | None = None,
    series_name: str = "",
) -> MatchResult | None:
    """Match *raw_title* in the hinted season, then in every other season.

    A hinted-season result at or above :data:`AUTO_ACCEPT_CONFIDENCE` wins
    immediately. Otherwise the remaining seasons are scanned in ascending
    order and the first highest-confidence result that clears the threshold
    is returned (flagged ``cross_season``). When no season clears it, the
    hinted-season result (whatever its confidence) is passed through so the
    caller can decide.
    """
    if index is None or index.is_empty:
        return None

    direct = match_episode(
        index, hinted_season, raw_title, part_hint, episode_hint, series_name
    )
    if direct is not None and direct.confidence >= AUTO_ACCEPT_CONFIDENCE:
        return direct

    best: MatchResult | None = None
    for season in index.season_numbers():
        if season == hinted_season:
            continue
        result = match_episode(
            index, season, raw_title, part_hint, episode_hint, series_name
        )
        if result is None or result.confidence < AUTO_ACCEPT_CONFIDENCE:
            continue
        if best is None or result.confidence > best.confidence:
            best = result

    if best is not None:
        logger.debug(
            "Cross-season match for %r: S%02dE%02d (%s, %.2f)",
            raw_title,
            best.season,
            best.episode,
            best.method.value,
            best.confidence,
        )
        return best.model_copy(update={"cross_season": True})
    return direct
