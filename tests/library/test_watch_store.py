"""Tests for the watch-event store."""

from datetime import date
from pathlib import Path

from watchmatch.library import WatchEvent, WatchStore


def _event(**overrides) -> WatchEvent:
    values = dict(
        series="Two and a Half Men",
        season=1,
        episode=1,
        watched_on=date(2024, 1, 5),
        source="netflix",
        raw_title="Pilot",
        method="exact",
    )
    values.update(overrides)
    return WatchEvent(**values)


def test_record_is_idempotent(tmp_path: Path) -> None:
    path = tmp_path / "watch-log.json"
    store = WatchStore(path)

    assert store.record(_event())
    assert not store.record(_event(series="two and a half men", raw_title="x"))
    assert store.record(_event(watched_on=date(2024, 1, 6)))

    reopened = WatchStore(path)
    assert len(reopened.events()) == 2
    assert not reopened.record(_event())
    assert reopened.events()[0].watched_on == date(2024, 1, 5)
