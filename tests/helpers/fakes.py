"""Deterministic stand-ins for the interactive and network capabilities.

``FakePrompter`` answers prompts from a script and records every question so
tests can assert that a prompt was (or was never) issued. ``FakeCatalog``
serves canned search results and episode indexes and records every call so
tests can assert the catalog was never contacted. ``fetch_error`` fails only
the episode fetch, for series that resolve but cannot be hydrated.
"""

from typing import Optional

from watchmatch.core.prompts import Prompter
from watchmatch.errors import CatalogError
from watchmatch.metadata.base import CatalogClient
from watchmatch.metadata.models import CatalogSeries
from watchmatch.models.core import EpisodeIndex


class FakePrompter(Prompter):
    """Scripted prompter.

    Each scripted answer is either ``None`` (operator backs out), an exact
    option string, or a prefix of one (handy for labels carrying counts such
    as "Show more episodes (5 remaining)..."). With ``verbatim`` set, answers
    are handed back unchecked, like a frontend returning text it was never
    offered.
    """

    def __init__(
        self,
        answers: Optional[list[Optional[str]]] = None,
        confirms: Optional[list[bool]] = None,
        verbatim: bool = False,
    ) -> None:
        self.verbatim = verbatim
        self.answers = list(answers or [])
        self.confirms = list(confirms or [])
        self.calls: list[tuple[str, list[str]]] = []
        self.confirm_calls: list[str] = []

    def choose(self, question: str, options: list[str]) -> Optional[str]:
        self.calls.append((question, list(options)))
        if not self.answers:
            raise AssertionError(f"Unexpected prompt: {question!r} {options!r}")
        answer = self.answers.pop(0)
        if self.verbatim or answer is None or answer in options:
            return answer
        for option in options:
            if option.startswith(answer):
                return option
        raise AssertionError(f"Scripted answer {answer!r} not in {options!r}")

    def confirm(self, question: str) -> bool:
        self.confirm_calls.append(question)
        if not self.confirms:
            raise AssertionError(f"Unexpected confirmation: {question!r}")
        return self.confirms.pop(0)


class FakeCatalog(CatalogClient):
    """In-memory catalog keyed by exact query and series id."""

    def __init__(
        self,
        results: Optional[dict[str, list[CatalogSeries]]] = None,
        episodes: Optional[dict[str, EpisodeIndex]] = None,
        error: Optional[CatalogError] = None,
        fetch_error: Optional[CatalogError] = None,
    ) -> None:
        self.results = results or {}
        self.episodes = episodes or {}
        self.error = error
        self.fetch_error = fetch_error or error
        self.queries: list[str] = []
        self.fetched: list[str] = []

    async def search_series(self, query: str) -> list[CatalogSeries]:
        self.queries.append(query)
        if self.error is not None:
            raise self.error
        return list(self.results.get(query, []))

    async def fetch_episodes(self, series_id: str) -> EpisodeIndex:
        self.fetched.append(series_id)
        if self.fetch_error is not None:
            raise self.fetch_error
        return self.episodes.get(series_id, EpisodeIndex())
