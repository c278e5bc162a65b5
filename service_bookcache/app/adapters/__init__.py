"""
Adapters package for the Book Cache service.

Contains HTTP client wrappers for external dependencies. Adapters own
request shapes, timeouts and the mapping of transport failures onto shared
errors; they never touch the cache.
"""

from .open_library_client import OpenLibraryClient

__all__ = ["OpenLibraryClient"]
