"""Command-line interface for watchmatch.

This package provides the Typer app and global console for all CLI commands and
user-facing output.

- app: The Typer application object, used by all CLI entrypoints and subcommands.
- console: Rich Console instance for consistent, styled output.
- Command modules import app and console from this package so that the
  global ``--no-rich`` option applies uniformly.
"""

import os

import typer
from rich.traceback import install

from watchmatch.cli.console import ENV_DISABLE_RICH, console

# Install rich traceback handler for all CLI commands
install(show_locals=False)

app = typer.Typer(
    name="watchmatch",
    help="Resolve streaming watch history to canonical series and episodes.",
    add_completion=True,
)


@app.callback()
def callback(
    ctx: typer.Context,  # noqa: D401 - Typer requires ctx param first
    no_rich: bool = typer.Option(
        False,
        "--no-rich",
        help=(
            "Disable Rich coloured output. "
            "Can also be set with the WATCHMATCH_NO_RICH environment variable."
        ),
    ),
) -> None:
    """Top-level CLI callback adding global options.

    The *--no-rich* flag sets ``WATCHMATCH_NO_RICH`` so that the console
    helpers respond the same way whether the flag is passed or the variable
    is set externally.
    """
    if no_rich:
        os.environ[ENV_DISABLE_RICH] = "1"
        console.no_color = True


@app.command()
def version() -> None:
    """Show the version of watchmatch."""
    from watchmatch.__about__ import __version__

    console.print(f"watchmatch version: [bold]{__version__}[/bold]")


# Registers the remaining commands on ``app``.
from watchmatch.cli import commands  # noqa: E402,F401

__all__ = ["app", "console"]

if __name__ == "__main__":
    app()
