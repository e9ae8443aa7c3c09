"""CLI commands for watchmatch.

Implements import-csv, resolve, match, the corrective commands that edit
decision memory (aliases, skipped, episodes, reset-progress) and config.

Design:
- Commands register on the shared Typer ``app`` from :mod:`watchmatch.cli`.
- Paths and catalog options come from :mod:`watchmatch.utils.config`
  (CLI > env > config.toml > default).
- Async pipelines run under ``asyncio.run``; interactive decisions go through
  :class:`~watchmatch.cli.prompter.RichPrompter`.
- Exit codes are defined as an Enum for clarity.
"""

import asyncio
from enum import Enum
from pathlib import Path
from typing import Annotated, Optional

import typer

from watchmatch.cli import app, console
from watchmatch.cli.prompter import RichPrompter
from watchmatch.cli.renderer import (
    render_aliases,
    render_episode_decisions,
    render_mismatches,
    render_settings,
    render_skipped,
    render_summary,
)
from watchmatch.core.episode_index import EpisodeIndexBuilder
from watchmatch.core.episode_resolver import EpisodeResolver
from watchmatch.core.importer import WatchImporter
from watchmatch.core.matcher import AUTO_ACCEPT_CONFIDENCE, match_across_seasons
from watchmatch.core.normalize import normalize_series_name
from watchmatch.core.series_resolver import ResolutionStatus, SeriesResolver
from watchmatch.core.title_utils import extract_part_number
from watchmatch.errors import CSVFormatError, DecisionMemoryError
from watchmatch.ingest import read_watch_csv
from watchmatch.library import LocalLibrary, WatchStore
from watchmatch.memory import DecisionMemory
from watchmatch.metadata.base import CatalogClient
from watchmatch.metadata.clients import TMDBClient
from watchmatch.metadata.settings import MissingAPIKeyError
from watchmatch.utils.config import (
    DEFAULT_LANGUAGE,
    DEFAULT_MAX_RESULTS,
    known_settings,
    library_dir,
    memory_file,
    parse_setting,
    resolve_setting,
    set_setting,
    watch_log_file,
)
from watchmatch.utils.debug import debug, setup_logger


class ExitCode(int, Enum):
    """Exit codes for CLI commands."""

    SUCCESS = 0
    ERROR = 1
    CANCELLED = 2


MEMORY_FILE = Annotated[
    Optional[Path],
    typer.Option("--memory-file", help="Decision memory JSON document"),
]

LIBRARY_DIR = Annotated[
    Optional[Path],
    typer.Option("--library-dir", help="Folder holding the local series records"),
]

aliases_app = typer.Typer(help="Inspect or remove remembered series aliases.")
skipped_app = typer.Typer(help="Inspect or remove skip-listed series names.")
episodes_app = typer.Typer(help="Inspect or remove manual episode decisions.")
config_app = typer.Typer(help="Show or change persistent settings.")
app.add_typer(aliases_app, name="aliases")
app.add_typer(skipped_app, name="skipped")
app.add_typer(episodes_app, name="episodes")
app.add_typer(config_app, name="config")


def _build_catalog(language: str) -> CatalogClient:
    """Catalog client used by interactive commands."""
    return TMDBClient(language=language)


def _open_memory(path: Path | None) -> DecisionMemory:
    try:
        return DecisionMemory(memory_file(path))
    except DecisionMemoryError as exc:
        console.print(f"[red]Error: {exc}[/red]")
        raise typer.Exit(ExitCode.ERROR)


def _catalog_or_exit() -> CatalogClient:
    language = resolve_setting("catalog.language", default=DEFAULT_LANGUAGE)
    try:
        return _build_catalog(language)
    except MissingAPIKeyError as exc:
        console.print(f"[red]Error: {exc}[/red]")
        raise typer.Exit(ExitCode.ERROR)


def _series_resolver(
    memory: DecisionMemory, library: LocalLibrary, catalog: CatalogClient
) -> SeriesResolver:
    return SeriesResolver(
        memory,
        library,
        catalog,
        RichPrompter(console),
        max_results=resolve_setting(
            "catalog.max_results", default=DEFAULT_MAX_RESULTS
        ),
    )


@app.command("import-csv")
def import_csv(
    path: Annotated[
        Path,
        typer.Argument(
            exists=True, dir_okay=False, readable=True, help="Watch-history CSV"
        ),
    ],
    limit: Annotated[
        Optional[int],
        typer.Option("--limit", "-n", min=1, help="Import at most N pending items"),
    ] = None,
    yes: Annotated[
        bool, typer.Option("--yes", "-y", help="Do not ask before starting")
    ] = False,
    memory_path: MEMORY_FILE = None,
    library_path: LIBRARY_DIR = None,
) -> None:
    """Import a watch-history CSV, resolving series and episodes."""
    setup_logger()
    try:
        items = read_watch_csv(path)
    except CSVFormatError as exc:
        console.print(f"[red]Error: {exc}[/red]")
        raise typer.Exit(ExitCode.ERROR)
    debug(f"Read {len(items)} watch rows from {path}")

    memory = _open_memory(memory_path)
    library = LocalLibrary(library_dir(library_path))
    catalog = _catalog_or_exit()
    index_builder = EpisodeIndexBuilder(library, catalog)
    prompter = RichPrompter(console)
    importer = WatchImporter(
        memory,
        _series_resolver(memory, library, catalog),
        EpisodeResolver(memory, index_builder, prompter),
        index_builder,
        WatchStore(watch_log_file()),
    )

    pending = importer.pending(items)
    if limit is not None:
        pending = pending[:limit]
    if not pending:
        console.print("[yellow]Nothing to import; every row was seen before.[/yellow]")
        raise typer.Exit(ExitCode.SUCCESS)
    console.print(f"{len(pending)} of {len(items)} rows pending.")
    if not yes and not prompter.confirm("Start import?"):
        raise typer.Exit(ExitCode.CANCELLED)

    summary = asyncio.run(importer.run(pending))
    render_summary(summary, console=console)
    render_mismatches(summary.mismatches, console=console)
    if summary.cancelled:
        raise typer.Exit(ExitCode.CANCELLED)


@app.command()
def resolve(
    name: Annotated[str, typer.Argument(help="Series name as the platform spells it")],
    memory_path: MEMORY_FILE = None,
    library_path: LIBRARY_DIR = None,
) -> None:
    """Resolve one series name interactively and print the result."""
    setup_logger()
    memory = _open_memory(memory_path)
    library = LocalLibrary(library_dir(library_path))
    resolver = _series_resolver(memory, library, _catalog_or_exit())

    result = asyncio.run(resolver.resolve(name))
    if result.status is ResolutionStatus.CANCELLED:
        console.print("[yellow]Cancelled.[/yellow]")
        raise typer.Exit(ExitCode.CANCELLED)
    if result.status is ResolutionStatus.SKIPPED:
        console.print(f"[yellow]Skipped[/yellow] ({result.reason})")
        return
    assert result.series is not None
    source = result.source.value if result.source else "?"
    console.print(
        f"[green]{name}[/green] -> [bold]{result.series.name}[/bold] "
        f"(id {result.series.id}, via {source})"
    )


@app.command()
def match(
    series: Annotated[str, typer.Argument(help="Series name in the local library")],
    title: Annotated[str, typer.Argument(help="Episode title to match")],
    season: Annotated[
        Optional[int], typer.Option("--season", "-s", help="Hinted season")
    ] = None,
    episode: Annotated[
        Optional[int], typer.Option("--episode", "-e", help="Hinted episode")
    ] = None,
    library_path: LIBRARY_DIR = None,
) -> None:
    """Match an episode title against a local series without prompting."""
    library = LocalLibrary(library_dir(library_path))
    canonical = library.lookup_series(normalize_series_name(series))
    if canonical is None:
        console.print(f"[red]Error: series not in library: {series}[/red]")
        raise typer.Exit(ExitCode.ERROR)

    index = EpisodeIndexBuilder(library).build(canonical)
    result = match_across_seasons(
        index,
        title,
        hinted_season=season or 1,
        part_hint=extract_part_number(title).part,
        episode_hint=episode,
        series_name=canonical.name,
    )
    if result is None:
        console.print("[yellow]No match.[/yellow]")
        raise typer.Exit(ExitCode.ERROR)

    style = "green" if result.confidence >= AUTO_ACCEPT_CONFIDENCE else "yellow"
    console.print(
        f"[{style}]{result.code}[/{style}] {result.title} "
        f"(confidence {result.confidence:.2f}, method {result.label})"
    )


@aliases_app.command("list")
def aliases_list(memory_path: MEMORY_FILE = None) -> None:
    """List remembered raw-name -> canonical-series aliases."""
    render_aliases(_open_memory(memory_path).aliases(), console=console)


@aliases_app.command("remove")
def aliases_remove(
    name: Annotated[str, typer.Argument(help="Raw series name")],
    memory_path: MEMORY_FILE = None,
) -> None:
    """Forget the alias for NAME so it is resolved again next time."""
    if not _open_memory(memory_path).remove_alias(name):
        console.print(f"[yellow]No alias for: {name}[/yellow]")
        raise typer.Exit(ExitCode.ERROR)
    console.print(f"Removed alias: {name}")


@skipped_app.command("list")
def skipped_list(memory_path: MEMORY_FILE = None) -> None:
    """List skip-listed series names."""
    render_skipped(_open_memory(memory_path).skipped_series(), console=console)


@skipped_app.command("remove")
def skipped_remove(
    name: Annotated[str, typer.Argument(help="Raw series name")],
    memory_path: MEMORY_FILE = None,
) -> None:
    """Take NAME off the skip list."""
    memory = _open_memory(memory_path)
    entry = memory.skip_entry(name)
    if entry is None:
        console.print(f"[yellow]Not skipped: {name}[/yellow]")
        raise typer.Exit(ExitCode.ERROR)
    memory.unmark_skipped(name)
    console.print(f"Removed from skip list: {name} (was: {entry.reason})")


@episodes_app.command("list")
def episodes_list(memory_path: MEMORY_FILE = None) -> None:
    """List manual episode picks and skipped episodes."""
    memory = _open_memory(memory_path)
    render_episode_decisions(
        memory.manual_episode_mappings(), memory.skipped_episodes(), console=console
    )


@episodes_app.command("remove")
def episodes_remove(
    series: Annotated[str, typer.Argument(help="Canonical series name")],
    key: Annotated[str, typer.Argument(help="Raw episode key, e.g. S1:pilot")],
    memory_path: MEMORY_FILE = None,
) -> None:
    """Forget the decision for KEY so the episode is resolved again."""
    memory = _open_memory(memory_path)
    removed = memory.remove_manual_episode(series, key)
    removed = memory.unmark_episode_skipped(series, key) or removed
    if not removed:
        console.print(f"[yellow]No episode decision for {series}: {key}[/yellow]")
        raise typer.Exit(ExitCode.ERROR)
    console.print(f"Removed episode decision for {series}: {key}")


@config_app.command("show")
def config_show() -> None:
    """Print every setting with its effective value."""
    render_settings(known_settings(), console=console)


@config_app.command("set")
def config_set(
    key: Annotated[str, typer.Argument(help="Dotted key, e.g. catalog.language")],
    value: Annotated[str, typer.Argument(help="New value")],
) -> None:
    """Persist VALUE for KEY in config.toml."""
    try:
        parsed = parse_setting(key, value)
    except KeyError:
        known = ", ".join(known_settings())
        console.print(f"[red]Error: unknown setting {key}. Known: {known}[/red]")
        raise typer.Exit(ExitCode.ERROR)
    except ValueError:
        console.print(f"[red]Error: invalid value for {key}: {value}[/red]")
        raise typer.Exit(ExitCode.ERROR)
    set_setting(key, parsed)
    console.print(f"Set {key} = {parsed}")


@app.command("reset-progress")
def reset_progress(
    prefix: Annotated[str, typer.Argument(help="Processed-id prefix, e.g. netflix-")],
    memory_path: MEMORY_FILE = None,
) -> None:
    """Forget processed rows whose id starts with PREFIX."""
    removed = _open_memory(memory_path).reset_processed(prefix.lower())
    console.print(f"Reset {removed} processed item(s).")


def main() -> None:
    """Main entry point for the CLI."""
    app()
