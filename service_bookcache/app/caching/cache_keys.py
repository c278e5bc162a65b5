"""
Cache-key policy for book lookups.
"""

from service_bookcache.app.books.models import ByIdentifier, ByQuery, LookupRequest


BOOK_PREFIX = "book:"
SEARCH_PREFIX = "search:"


def derive_key(request: LookupRequest) -> str:
    """Map a lookup request to its storage key.

    Identifiers are used verbatim; callers normalize them (e.g. strip
    hyphens from an ISBN) if they need to. Query text is lowercased so that
    searches differing only in case share an entry. The per-variant prefix
    keeps identifier and search keys disjoint.
    """
    if isinstance(request, ByIdentifier):
        return f"{BOOK_PREFIX}{request.identifier}"
    if isinstance(request, ByQuery):
        return f"{SEARCH_PREFIX}{request.text.lower()}"
    raise TypeError(f"Unsupported lookup request: {type(request).__name__}")
