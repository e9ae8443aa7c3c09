"""Tests for the CSV watch-history reader."""

from datetime import date
from pathlib import Path

import pytest

from watchmatch.errors import CSVFormatError
from watchmatch.ingest import read_watch_csv
from watchmatch.ingest.csv_source import parse_date
from watchmatch.models.core import SourceType


def _write(tmp_path: Path, text: str) -> Path:
    path = tmp_path / "history.csv"
    path.write_text(text, encoding="utf-8")
    return path


def test_reads_rows(tmp_path: Path) -> None:
    path = _write(
        tmp_path,
        "Date Watched,Type,Title,Episode Title,Source\n"
        "2024-01-05,series,Two and a Half Men: Season 1,Pilot,Netflix\n"
        "01/06/2024,Movie,Inception,,\n"
        "01/07/24,documentary,Planet Earth,,netflix\n"
        "yesterday,series,Lost,Pilot,netflix\n",
    )

    items = read_watch_csv(path)

    assert len(items) == 2
    first, second = items
    assert first.watched_on == date(2024, 1, 5)
    assert first.source_type is SourceType.SERIES
    assert first.title == "Two and a Half Men: Season 1"
    assert first.episode_title == "Pilot"
    assert first.source == "netflix"
    assert second.source_type is SourceType.MOVIE
    assert second.watched_on == date(2024, 1, 6)
    assert second.episode_title == ""


def test_optional_columns_and_bom(tmp_path: Path) -> None:
    path = tmp_path / "history.csv"
    path.write_bytes("﻿date watched,type,title\n2024-02-01,series,Lost\n".encode())
    [item] = read_watch_csv(path)
    assert item.title == "Lost"
    assert item.source == ""


def test_missing_required_columns(tmp_path: Path) -> None:
    path = _write(tmp_path, "Date Watched,Title\n2024-01-05,Lost\n")
    with pytest.raises(CSVFormatError) as excinfo:
        read_watch_csv(path)
    assert excinfo.value.missing == ["type"]


@pytest.mark.parametrize(
    ("text", "expected"),
    [
        ("2024-03-09", date(2024, 3, 9)),
        ("03/09/2024", date(2024, 3, 9)),
        ("3/9/24", date(2024, 3, 9)),
        ("", None),
        ("09.03.2024", None),
    ],
)
def test_parse_date(text: str, expected: date | None) -> None:
    assert parse_date(text) == expected
