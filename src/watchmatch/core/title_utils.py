"""Episode title helpers used by the episode matcher.

Covers part-number extraction ("Finale, Pt. 2", "Finale (2)"), title
cleaning for streaming-service prefixes, prefix detection for truncated
titles and a cheap token-overlap similarity.
"""

import re
from typing import NamedTuple

PREFIX_SIMILARITY_THRESHOLD = 0.7

# First matching pattern wins.
_PART_PATTERNS = (
    re.compile(r"^(.+?),\s*Pt\.?\s*(\d+)$", re.IGNORECASE),
    re.compile(r"^(.+?)\s*[-–:]\s*Part\s*(\d+)$", re.IGNORECASE),
    re.compile(r"^(.+?)\s+Part\s*(\d+)$", re.IGNORECASE),
    re.compile(r"^(.+?)\s*\((\d+)\)$"),
    re.compile(r"^(.+?)\s+Pt\.?\s*(\d+)$", re.IGNORECASE),
)

_SEASON_EPISODE_PREFIX = re.compile(
    r"^(.+?):\s*Season\s*\d+\s*Episode\s*\d+\s+(.+)$", re.IGNORECASE
)
_DASH_PREFIX = re.compile(r"^(.+?)\s*[-–]\s*(.+)$")
_PILOT_SUFFIX = re.compile(r"\s*\(Pilot\)\s*", re.IGNORECASE)
_PILOT_ONLY = re.compile(r"^Pilot$", re.IGNORECASE)
_GENERIC = re.compile(r"^Episode\s*\d+$", re.IGNORECASE)


class PartInfo(NamedTuple):
    """Title with any trailing part marker removed."""

    base_title: str
    part: int | None


class CleanedTitle(NamedTuple):
    """Result of stripping platform noise from an episode title."""

    cleaned_title: str
    is_generic: bool
    is_pilot: bool


def extract_part_number(title: str | None) -> PartInfo:
    """Split ``"Finale, Pt. 2"`` into ``PartInfo("Finale", 2)``.

    Titles without a recognised part marker come back unchanged with
    ``part=None``.
    """
    text = str(title or "").strip()
    for pattern in _PART_PATTERNS:
        match = pattern.match(text)
        if match:
            return PartInfo(match.group(1).strip(), int(match.group(2)))
    return PartInfo(text, None)


def normalize_title(title: str | None) -> str:
    """Lowercase, drop non-word characters and collapse whitespace."""
    text = re.sub(r"[^\w\s]", "", str(title or "").lower())
    return re.sub(r"\s+", " ", text).strip()


def normalize_base_title(title: str | None) -> str:
    """Normalized title with any part marker stripped."""
    return normalize_title(extract_part_number(title).base_title)


def string_similarity(a: str, b: str) -> float:
    """Cheap similarity in [0, 1].

    1.0 for equal strings, 0.8 when one contains the other, otherwise the
    share of tokens in ``a`` that substring-match some token of ``b``, over
    the longer token count.
    """
    a = a.lower()
    b = b.lower()
    if a == b:
        return 1.0
    if not a or not b:
        return 0.0
    if a in b or b in a:
        return 0.8

    words_a = a.split()
    words_b = b.split()
    if not words_a or not words_b:
        return 0.0
    matches = [w for w in words_a if any(w2 in w or w in w2 for w2 in words_b)]
    return len(matches) / max(len(words_a), len(words_b))


def clean_episode_title(raw_title: str | None, series_name: str = "") -> CleanedTitle:
    """Strip streaming-service prefixes from an episode title.

    Handles ``"Show: Season 1 Episode 2 Title"`` and ``"Show - Title"``
    prefixes, detects pilots, and flags bare ``"Episode N"`` titles as
    generic. The dash prefix is only removed when the text before the dash
    looks like the series name, so titles like ``"Life - The Sequel"`` keep
    their dash.
    """
    title = str(raw_title or "").strip()
    if not title:
        return CleanedTitle("", True, False)

    normalized_series = normalize_title(series_name)

    match = _SEASON_EPISODE_PREFIX.match(title)
    if match:
        title = match.group(2).strip()

    match = _DASH_PREFIX.match(title)
    if match and normalized_series:
        before_dash = normalize_title(match.group(1))
        if (
            string_similarity(before_dash, normalized_series)
            >= PREFIX_SIMILARITY_THRESHOLD
        ):
            title = match.group(2).strip()

    if _PILOT_SUFFIX.search(title):
        title = _PILOT_SUFFIX.sub(" ", title).strip()
        return CleanedTitle(title or "Pilot", False, True)
    if _PILOT_ONLY.match(title):
        return CleanedTitle("Pilot", False, True)
    if _GENERIC.match(title):
        return CleanedTitle(title, True, False)
    return CleanedTitle(title, False, False)


def is_title_prefix(short_title: str, long_title: str) -> bool:
    """Return True when *short_title* looks like a truncation of *long_title*.

    Either the normalized string is a prefix, or every token lines up with
    the token at the same position on its first three characters.
    """
    short = normalize_title(short_title)
    full = normalize_title(long_title)
    if not short or not full:
        return False
    if full.startswith(short):
        return True

    short_words = short.split()
    full_words = full.split()
    if len(short_words) > len(full_words):
        return False
    return all(
        full_word.startswith(word[:3]) or word.startswith(full_word[:3])
        for word, full_word in zip(short_words, full_words)
    )


_SEASON_EPISODE_HINT = re.compile(
    r"\b(?:S|Season\s*)(\d+)\s*(?:E|Episode\s*)(\d+)", re.IGNORECASE
)
_EPISODE_ONLY_HINT = re.compile(r"\bEpisode\s+(\d+)", re.IGNORECASE)


def parse_episode_hints(text: str | None) -> tuple[int | None, int | None]:
    """Pull platform season/episode numbers out of free text.

    ``"S2E5"`` and ``"Season 2 Episode 5"`` give ``(2, 5)``; a bare
    ``"Episode 5"`` is taken as season 1. Returns ``(None, None)`` otherwise.
    """
    text = str(text or "")
    match = _SEASON_EPISODE_HINT.search(text)
    if match:
        return int(match.group(1)), int(match.group(2))
    match = _EPISODE_ONLY_HINT.search(text)
    if match:
        return 1, int(match.group(1))
    return None, None
