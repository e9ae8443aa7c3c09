"""Console utilities for CLI commands.

Centralises Rich configuration: a module-level :class:`rich.console.Console`
and opt-out via the ``--no-rich`` flag (sets ``WATCHMATCH_NO_RICH``) or the
environment variable being set externally.
"""

from __future__ import annotations

import os

from rich.console import Console

__all__ = ["ENV_DISABLE_RICH", "console", "rich_enabled"]

# ENV VAR used to disable rich output entirely (useful for piping or testing)
ENV_DISABLE_RICH = "WATCHMATCH_NO_RICH"


def rich_enabled() -> bool:
    """Return False when rich output has been disabled via the environment."""
    return os.getenv(ENV_DISABLE_RICH, "0").lower() not in {"1", "true", "yes"}


# colour_system=None suppresses escape codes in plain output.
console: Console = (
    Console() if rich_enabled() else Console(color_system=None, force_terminal=False)
)
