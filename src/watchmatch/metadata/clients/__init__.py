"""Client implementations for metadata catalogs."""

from watchmatch.metadata.clients.tmdb import TMDBClient

__all__ = ["TMDBClient"]
