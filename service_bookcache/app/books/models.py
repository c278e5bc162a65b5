"""
Value types flowing through a book lookup.
"""

from __future__ import annotations

import json
from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Union

from shared.errors import ClientInputError


@dataclass(frozen=True)
class ByIdentifier:
    """Lookup of a single book by identifier (an ISBN)."""

    identifier: str

    def __post_init__(self) -> None:
        if not isinstance(self.identifier, str) or not self.identifier:
            raise ClientInputError("Book identifier is required")

    @property
    def lookup_type(self) -> str:
        return "book"


@dataclass(frozen=True)
class ByQuery:
    """Free-text title search."""

    text: str

    def __post_init__(self) -> None:
        if not isinstance(self.text, str) or not self.text.strip():
            raise ClientInputError("Title query parameter is required")

    @property
    def lookup_type(self) -> str:
        return "search"


LookupRequest = Union[ByIdentifier, ByQuery]


class CacheSource(str, Enum):
    """Where a lookup was answered from."""

    CACHE = "cache"
    ORIGIN = "api"


@dataclass(frozen=True)
class LookupOutcome:
    """Result of a read-through lookup."""

    source: CacheSource
    payload: bytes

    def data(self) -> Any:
        """Decode the origin payload; bodies that are not JSON pass through as text."""
        text = self.payload.decode("utf-8", errors="replace")
        try:
            return json.loads(text)
        except json.JSONDecodeError:
            return text

    def to_dict(self) -> Dict[str, Any]:
        return {"source": self.source.value, "data": self.data()}
