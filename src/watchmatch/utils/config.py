"""Config utility for persistent watchmatch settings.

Settings live in ``~/.config/watchmatch/config.toml`` (or under
``$XDG_CONFIG_HOME``). Uses tomli/tomli-w for TOML parsing and writing.
"""

from pathlib import Path
from typing import Any, TypeVar, cast
import os
import contextlib

import tomli
import tomli_w

# Determine config directory respecting XDG_CONFIG_HOME if set.
_xdg_config_home = Path(os.environ.get("XDG_CONFIG_HOME", Path.home() / ".config"))
CONFIG_DIR = _xdg_config_home / "watchmatch"
CONFIG_FILE = CONFIG_DIR / "config.toml"

DEFAULT_MAX_RESULTS = 20
DEFAULT_LANGUAGE = "en-US"

T = TypeVar("T")


def default_data_dir() -> Path:
    """Return the directory holding decision memory, library and watch log.

    Respects ``XDG_DATA_HOME``; falls back to ``~/.local/share/watchmatch``.
    """
    base = os.environ.get("XDG_DATA_HOME")
    if base:
        return Path(base) / "watchmatch"
    return Path.home() / ".local" / "share" / "watchmatch"


def _read_config_file() -> dict[str, Any]:
    """Read the TOML config file if it exists, returning a (nested) dict."""

    if not CONFIG_FILE.exists():
        return {}
    with CONFIG_FILE.open("rb") as f:
        return tomli.load(f)


def _lookup_nested(data: dict[str, Any], dotted_key: str) -> Any | None:
    """Retrieve a nested value from *data* given a dotted key path.

    Example: dotted_key="paths.memory_file" will attempt
    ``data["paths"]["memory_file"]`` returning None if any level is missing.
    """

    current: Any = data
    for part in dotted_key.split("."):
        if not isinstance(current, dict):
            return None
        current = current.get(part)
        if current is None:
            return None
    return current


def _make_env_var_name(dotted_key: str, prefix: str = "WATCHMATCH_") -> str:
    """Convert a dotted key path to an uppercase ENV var name.

    Example: "catalog.max_results" -> "WATCHMATCH_CATALOG_MAX_RESULTS".
    """

    return prefix + dotted_key.replace(".", "_").upper()


def _coerce(raw: Any, default: T) -> T:
    """Coerce a string/TOML scalar to the type of *default* where possible."""
    if isinstance(default, bool):
        if isinstance(raw, bool):
            return cast(T, raw)
        if isinstance(raw, str):
            return cast(T, raw.lower() in {"1", "true", "yes", "on"})
        return default
    if isinstance(default, int):
        if isinstance(raw, int) and not isinstance(raw, bool):
            return cast(T, raw)
        with contextlib.suppress(ValueError, TypeError):
            return cast(T, int(raw))
        return default
    if isinstance(default, float):
        with contextlib.suppress(ValueError, TypeError):
            return cast(T, float(raw))
        return default
    if isinstance(default, Path):
        return cast(T, Path(str(raw)).expanduser())
    return cast(T, raw)


def resolve_setting(
    key: str,
    *,
    default: T,
    cli_value: T | None = None,
) -> T:
    """Resolve a configuration *key* using precedence CLI > env > config > default.

    Args:
        key: Dotted key path, e.g. ``"catalog.max_results"``.
        default: Value to fall back to when no overrides found.
        cli_value: Value passed from CLI option (may be ``None`` when not provided).

    Returns:
        The resolved value with type matching *default* (or *cli_value*).
    """

    if cli_value is not None:
        return cli_value

    env_var = _make_env_var_name(key)
    if env_var in os.environ:
        return _coerce(os.environ[env_var], default)

    file_val = _lookup_nested(_read_config_file(), key)
    if file_val is not None:
        return _coerce(file_val, default)

    return default


def set_setting(key: str, value: Any) -> None:
    """Persist *value* under the dotted *key* in config.toml."""
    CONFIG_DIR.mkdir(parents=True, exist_ok=True)
    data = _read_config_file()
    parts = key.split(".")
    node = data
    for part in parts[:-1]:
        node = node.setdefault(part, {})
    node[parts[-1]] = str(value) if isinstance(value, Path) else value
    with CONFIG_FILE.open("wb") as f:
        tomli_w.dump(data, f)


def memory_file(cli_value: Path | None = None) -> Path:
    """Location of the decision memory JSON document."""
    return resolve_setting(
        "paths.memory_file",
        default=default_data_dir() / "decision-memory.json",
        cli_value=cli_value,
    )


def library_dir(cli_value: Path | None = None) -> Path:
    """Root folder of the local series records."""
    return resolve_setting(
        "paths.library_dir", default=default_data_dir() / "series", cli_value=cli_value
    )


def watch_log_file(cli_value: Path | None = None) -> Path:
    """Location of the watch-event store."""
    return resolve_setting(
        "paths.watch_log",
        default=default_data_dir() / "watch-log.json",
        cli_value=cli_value,
    )


def known_settings() -> dict[str, Any]:
    """Every recognised key with its effective value."""
    return {
        "paths.memory_file": memory_file(),
        "paths.library_dir": library_dir(),
        "paths.watch_log": watch_log_file(),
        "catalog.max_results": resolve_setting(
            "catalog.max_results", default=DEFAULT_MAX_RESULTS
        ),
        "catalog.language": resolve_setting(
            "catalog.language", default=DEFAULT_LANGUAGE
        ),
    }


def parse_setting(key: str, raw: str) -> Any:
    """Convert command-line text for *key* to the type of its current value.

    Raises:
        KeyError: *key* is not a recognised setting.
        ValueError: *raw* does not parse as the setting's type.
    """
    current = known_settings()[key]
    if isinstance(current, int):
        return int(raw)
    if isinstance(current, Path):
        return Path(raw).expanduser()
    return raw
