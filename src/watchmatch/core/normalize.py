"""Series name normalization.

Turns a platform-supplied show name such as ``"Two and a Half Men: Season 1"``
into a catalog-search-friendly query (``"Two and a Half Men"``). Everything
here is pure and deterministic.
"""

import re

# Unicode punctuation variants that platforms love to emit.
_DASHES = re.compile(r"[\u2010-\u2015\u2212]")
_SINGLE_QUOTES = re.compile(r"[\u2018\u2019]")
_DOUBLE_QUOTES = re.compile(r"[\u201C\u201D]")

# Trailing season markers, tried in order.
_SEASON_SUFFIXES = (
    re.compile(r"\s*[:|-]\s*Season\s*\d+\s*$", re.IGNORECASE),
    re.compile(r"\s*\(Season\s*\d+\)\s*$", re.IGNORECASE),
    re.compile(r"\s+Season\s*\d+\s*$", re.IGNORECASE),
    re.compile(r"\s+S\d+\s*$", re.IGNORECASE),
)
_TRAILING_PUNCT = re.compile(r"[\s,\-:]+$")

# Words some platforms bolt onto a reissued show's name.
FILLER_WORDS = ("Classic",)


def normalize_unicode_punctuation(text: str) -> str:
    """Map unicode dashes, smart quotes and NBSP to their ASCII equivalents."""
    text = _DASHES.sub("-", text)
    text = _SINGLE_QUOTES.sub("'", text)
    text = _DOUBLE_QUOTES.sub('"', text)
    return text.replace("\u00a0", " ")


def _strip_once(name: str) -> str:
    for pattern in _SEASON_SUFFIXES:
        name = pattern.sub("", name)
    return _TRAILING_PUNCT.sub("", name).strip()


def normalize_series_name(raw_name: str | None) -> str:
    """Normalize a raw series name for catalog search.

    Examples:
        >>> normalize_series_name("Jeremiah (Season 1)")
        'Jeremiah'
        >>> normalize_series_name("Battlestar Galactica Classic Season 1")
        'Battlestar Galactica Classic'

    The suffix stripping is repeated until the name stops changing, so the
    function is idempotent even for inputs like ``"Show: Season 1 -"``.
    """
    name = normalize_unicode_punctuation(str(raw_name or "")).strip()
    while True:
        stripped = _strip_once(name)
        if stripped == name:
            return name
        name = stripped


def strip_filler_words(name: str) -> str:
    """Drop filler words such as "Classic" used for reissued shows."""
    for word in FILLER_WORDS:
        name = re.sub(rf"\s*\b{word}\b\s*", " ", name, flags=re.IGNORECASE)
    return re.sub(r"\s+", " ", name).strip()


def is_malformed_name(raw_name: str | None) -> bool:
    """True for names that are empty or contain no letters or digits."""
    text = str(raw_name or "").strip()
    return not any(ch.isalnum() for ch in text)
