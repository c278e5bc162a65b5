"""
Book lookup domain types.

The read-through service lives in ``books.service``; it is not re-exported
here so the caching package can import these types without a cycle.
"""

from .models import ByIdentifier, ByQuery, CacheSource, LookupOutcome, LookupRequest

__all__ = ["ByIdentifier", "ByQuery", "CacheSource", "LookupOutcome", "LookupRequest"]
