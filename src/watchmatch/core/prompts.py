"""Interactive decision capability.

The resolvers never talk to a terminal directly. They ask a :class:`Prompter`
to pick one of a list of option strings or to answer yes/no. A ``None``
answer means the operator backed out; it is never treated as a default.
"""

from abc import ABC, abstractmethod


class Prompter(ABC):
    """Abstract interactive capability injected into the resolvers."""

    @abstractmethod
    def choose(self, question: str, options: list[str]) -> str | None:
        """Ask the operator to pick one of *options*.

        Returns:
            The chosen option string, or ``None`` when the operator declined.
        """
        raise NotImplementedError

    @abstractmethod
    def confirm(self, question: str) -> bool:
        """Ask a yes/no question; declining counts as "no"."""
        raise NotImplementedError
