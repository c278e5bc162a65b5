"""
Process-wide hit/miss accounting for the read-through cache.
"""

import threading
from dataclasses import dataclass
from typing import Any, Dict


@dataclass(frozen=True)
class MetricsSnapshot:
    """Point-in-time view of the hit/miss counters."""

    hits: int
    misses: int

    @property
    def total(self) -> int:
        return self.hits + self.misses

    @property
    def hit_rate_percent(self) -> str:
        if self.total == 0:
            return "0.00"
        return f"{self.hits / self.total * 100:.2f}"

    def to_dict(self) -> Dict[str, Any]:
        return {
            "hits": self.hits,
            "misses": self.misses,
            "total": self.total,
            "hitRate": f"{self.hit_rate_percent}%",
        }


class HitRateAccumulator:
    """Monotonic hit and miss counters.

    Counters start at zero and are never reset. Increments take a lock so
    that concurrent lookups (tasks or threads) never lose an update.
    """

    def __init__(self):
        self._lock = threading.Lock()
        self._hits = 0
        self._misses = 0

    def record_hit(self) -> None:
        with self._lock:
            self._hits += 1

    def record_miss(self) -> None:
        with self._lock:
            self._misses += 1

    def snapshot(self) -> MetricsSnapshot:
        with self._lock:
            return MetricsSnapshot(hits=self._hits, misses=self._misses)
