"""Data models for catalog search results."""

from pydantic import BaseModel, field_validator

from watchmatch.models.core import CanonicalSeries


class CatalogSeries(BaseModel):
    """A series candidate returned by a catalog search.

    Only the fields needed for disambiguation are kept: the opaque catalog id,
    the catalog's own name, the first-air year and a short overview.
    """

    id: str
    name: str
    year: int | None = None
    overview: str | None = None
    provider: str = "tmdb"

    @field_validator("id", mode="before")
    @classmethod
    def _id_as_text(cls, value: object) -> str:
        return str(value)

    @property
    def label(self) -> str:
        """Display label used in pickers, e.g. ``"Lost (2004)"``."""
        return f"{self.name} ({self.year or '?'})"

    def to_canonical(self) -> CanonicalSeries:
        return CanonicalSeries(id=self.id, name=self.name)
