"""Utility modules for watchmatch."""

from watchmatch.utils.atomic import atomic_write_json, atomic_write_text
from watchmatch.utils.config import default_data_dir, resolve_setting

__all__ = [
    "atomic_write_json",
    "atomic_write_text",
    "default_data_dir",
    "resolve_setting",
]
