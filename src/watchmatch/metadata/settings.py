"""TMDB credentials.

Read from the process environment or a ``.env`` file in the working
directory. Either ``TMDB_API_KEY`` (v3 key, sent as a query parameter) or
``TMDB_READ_ACCESS_TOKEN`` (v4 token, sent as a bearer header) is enough.
Keep the ``.env`` file out of version control.
"""

from pydantic_settings import BaseSettings, SettingsConfigDict


class MissingAPIKeyError(Exception):
    """No usable catalog credential was configured."""

    def __init__(self, key: str) -> None:
        super().__init__(
            f"{key} is not set.\n"
            "Export it, or add it to a .env file in the directory you run "
            "watchmatch from."
        )
        self.key = key


class Settings(BaseSettings):
    """Catalog provider credentials."""

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    TMDB_API_KEY: str | None = None
    TMDB_READ_ACCESS_TOKEN: str | None = None

    def require_keys(self) -> None:
        """Raise :class:`MissingAPIKeyError` when neither credential is set."""
        if self.TMDB_API_KEY or self.TMDB_READ_ACCESS_TOKEN:
            return
        raise MissingAPIKeyError("TMDB_API_KEY")
