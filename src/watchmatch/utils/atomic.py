"""Crash-safe file replacement helpers.

Files are written to a sibling temporary file, fsynced, then moved over the
target with :func:`os.replace`, so a reader only ever sees the old or the new
document.
"""

import json
import os
import tempfile
from pathlib import Path
from typing import Any


def atomic_write_text(path: Path, content: str, encoding: str = "utf-8") -> None:
    """Atomically replace *path* with *content*.

    Args:
        path: Destination file. Parent directories are created as needed.
        content: Full text of the new file.
        encoding: Text encoding used for the write.
    """
    path.parent.mkdir(parents=True, exist_ok=True)
    fd, tmp_name = tempfile.mkstemp(
        prefix=f".{path.name}.", suffix=".tmp", dir=str(path.parent)
    )
    try:
        with os.fdopen(fd, "w", encoding=encoding) as fh:
            fh.write(content)
            fh.flush()
            os.fsync(fh.fileno())
        os.replace(tmp_name, path)
    except BaseException:
        # Leave the previous document in place and drop the partial temp file.
        if os.path.exists(tmp_name):
            os.unlink(tmp_name)
        raise


def atomic_write_json(path: Path, data: Any) -> None:
    """Serialize *data* as pretty JSON and atomically write it to *path*."""
    atomic_write_text(path, json.dumps(data, indent=2, ensure_ascii=False) + "\n")
