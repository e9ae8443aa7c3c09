"""Exception hierarchy for watchmatch.

Only :class:`ImportCancelled` is allowed to unwind a whole import batch. Every
other error is scoped to the item being processed: the importer logs it, counts
the item as skipped and moves on.
"""


class WatchmatchError(Exception):
    """Base class for all watchmatch errors."""


class CatalogError(WatchmatchError):
    """Raised when the metadata catalog cannot be reached or misbehaves.

    A "not found" answer is *not* an error; clients return an empty result for
    it. This covers timeouts, connection failures and non-404 error statuses.
    """

    def __init__(self, message: str, *, status_code: int | None = None) -> None:
        """Initialize with a message and the HTTP status (if any)."""
        super().__init__(message)
        self.status_code = status_code


class ImportCancelled(WatchmatchError):
    """Raised when the operator cancels the import at a prompt."""

    def __init__(self, raw_name: str | None = None) -> None:
        """Remember which raw item was being resolved when cancel happened."""
        message = "Import cancelled by user"
        if raw_name:
            message += f" while resolving {raw_name!r}"
        super().__init__(message)
        self.raw_name = raw_name


class DecisionMemoryError(WatchmatchError):
    """Raised when the decision memory file exists but cannot be parsed."""


class CSVFormatError(WatchmatchError):
    """Raised when a watch-history CSV lacks required columns."""

    def __init__(self, missing: list[str]) -> None:
        """Initialize with the names of the missing columns."""
        super().__init__(
            "CSV missing required columns: "
            + ", ".join(missing)
            + " (expected: date watched, type, title, episode title, source)"
        )
        self.missing = missing
