"""Watch-history sources producing raw watch items."""

from watchmatch.ingest.csv_source import read_watch_csv

__all__ = ["read_watch_csv"]
