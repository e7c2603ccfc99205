"""File discovery."""

from .discovery import discover_sources, is_excluded, read_source

__all__ = ["discover_sources", "is_excluded", "read_source"]
