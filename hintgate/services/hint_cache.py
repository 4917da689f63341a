"""
In-memory response cache for generated hint sets.
Entries expire after a TTL and the store is bounded by evicting the oldest-inserted entry (FIFO).
"""
import threading
import time
from dataclasses import dataclass
from typing import Callable, Dict, List, Optional


@dataclass
class CacheEntry:
    hints: List[str]
    created_at: float


class HintCache:
    def __init__(self, ttl_seconds: int = 24 * 60 * 60, max_entries: int = 1000,
                 clock: Callable[[], float] = time.time):
        self.ttl_seconds = ttl_seconds
        self.max_entries = max_entries
        self.clock = clock
        # dicts keep insertion order, which is the eviction order
        self._entries: Dict[str, CacheEntry] = {}
        self._lock = threading.Lock()

    @staticmethod
    def make_key(word: str, topic: str, language: str) -> str:
        return f"{word.lower()}:{topic}:{language}"

    def get(self, key: str) -> Optional[List[str]]:
        """Returns cached hints, or None when absent or stale. Stale entries are left in place."""
        with self._lock:
            entry = self._entries.get(key)
            if entry and self.clock() - entry.created_at < self.ttl_seconds:
                return list(entry.hints)
            return None

    def save(self, key: str, hints: List[str]) -> None:
        with self._lock:
            if key not in self._entries and len(self._entries) >= self.max_entries:
                oldest_key = next(iter(self._entries))
                del self._entries[oldest_key]
            self._entries[key] = CacheEntry(hints=list(hints), created_at=self.clock())
