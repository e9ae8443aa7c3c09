"""Renderer for CLI output.

Renders import summaries, episode mismatches and the decision-memory
listings as Rich tables.
"""

from rich.console import Console
from rich.table import Table

from watchmatch.core.importer import EpisodeMismatch, ImportSummary
from watchmatch.memory import EpisodeMapping, SeriesAlias, SkipEntry


def render_summary(summary: ImportSummary, console: Console | None = None) -> None:
    """Render the counters of an import run."""
    console = console or Console()

    title = "Import cancelled" if summary.cancelled else "Import complete"
    table = Table(title=title)
    table.add_column("Metric", style="cyan")
    table.add_column("Count", justify="right", style="bold")
    table.add_row("Processed", str(summary.processed))
    table.add_row("Imported", str(summary.imported), style="green")
    table.add_row("Movies", str(summary.movies))
    table.add_row("Duplicates", str(summary.duplicates))
    table.add_row("Skipped", str(summary.skipped), style="yellow")
    table.add_row("Series added", str(summary.series_added))
    table.add_row("Series skipped", str(summary.series_skipped))
    if summary.errors:
        table.add_row("Errors", str(summary.errors), style="red bold")
    console.print(table)


def render_mismatches(
    mismatches: list[EpisodeMismatch], console: Console | None = None
) -> None:
    """Render episodes whose canonical numbering differs from the platform's."""
    if not mismatches:
        return
    console = console or Console()

    table = Table(title=f"Episode mismatches ({len(mismatches)})")
    table.add_column("Series", style="cyan")
    table.add_column("Source")
    table.add_column("Canonical", style="green")
    table.add_column("Confidence", justify="right")
    table.add_column("Method", style="yellow")
    for m in mismatches:
        source = f"{m.source_code} {m.source_title}".strip()
        canonical = f"{m.canonical_code} {m.canonical_title}".strip()
        method = m.method if m.auto_matched else f"{m.method} (manual)"
        table.add_row(m.series, source, canonical, f"{m.confidence:.0%}", method)
    console.print(table)


def render_aliases(
    aliases: dict[str, SeriesAlias], console: Console | None = None
) -> None:
    console = console or Console()
    table = Table(title=f"Series aliases ({len(aliases)})")
    table.add_column("Raw name", style="cyan")
    table.add_column("Canonical name", style="green")
    table.add_column("Id")
    for raw, alias in sorted(aliases.items(), key=lambda kv: kv[0].lower()):
        table.add_row(raw, alias.canonical_name, alias.canonical_id)
    console.print(table)


def render_skipped(
    skipped: dict[str, SkipEntry], console: Console | None = None
) -> None:
    console = console or Console()
    table = Table(title=f"Skipped series ({len(skipped)})")
    table.add_column("Raw name", style="cyan")
    table.add_column("Reason", style="yellow")
    table.add_column("Source")
    table.add_column("Skipped at")
    for raw, entry in sorted(skipped.items(), key=lambda kv: kv[0].lower()):
        table.add_row(raw, entry.reason, entry.source, entry.skipped_at)
    console.print(table)


def render_episode_decisions(
    mappings: dict[str, dict[str, EpisodeMapping]],
    skipped: dict[str, list[str]],
    console: Console | None = None,
) -> None:
    """Render manual episode picks and skipped episodes per series."""
    console = console or Console()
    rows = [
        (series, key, f"S{m.season:02d}E{m.episode:02d}")
        for series, by_key in mappings.items()
        for key, m in by_key.items()
    ]
    rows += [
        (series, key, "skipped") for series, keys in skipped.items() for key in keys
    ]
    table = Table(title=f"Episode decisions ({len(rows)})")
    table.add_column("Series", style="cyan")
    table.add_column("Raw key")
    table.add_column("Decision", style="green")
    for series, key, decision in sorted(rows, key=lambda r: (r[0].lower(), r[1])):
        table.add_row(series, key, decision)
    console.print(table)


def render_settings(
    settings: dict[str, object], console: Console | None = None
) -> None:
    console = console or Console()
    table = Table(title="Settings")
    table.add_column("Key", style="cyan")
    table.add_column("Value")
    for key, value in settings.items():
        table.add_row(key, str(value))
    console.print(table)
