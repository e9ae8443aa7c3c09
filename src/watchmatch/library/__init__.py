"""Local records: materialized series data and the watch-event log."""

from watchmatch.library.local import LocalLibrary, safe_filename
from watchmatch.library.watch_store import WatchEvent, WatchStore

__all__ = ["LocalLibrary", "WatchEvent", "WatchStore", "safe_filename"]
