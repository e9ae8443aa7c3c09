"""Metadata catalog access for watchmatch."""
