import math
import threading
import time
from collections import deque
from dataclasses import dataclass
from typing import Callable, Deque, Dict, Optional


@dataclass
class RateLimitDecision:
    allowed: bool
    retry_after: Optional[int] = None  # seconds until the oldest counted request leaves the window


class RateLimiter:
    """
    In-memory sliding window rate limiter guarding the expensive LLM pipeline.
    Keyed by identity (Firebase uid or client IP). State lives for the process lifetime;
    running several instances gives each its own limits.
    """
    def __init__(self, limit: int = 15, window_seconds: int = 60,
                 clock: Callable[[], float] = time.time):
        self.limit = limit
        self.window_seconds = window_seconds
        self.clock = clock
        # Stores identity -> timestamps inside the trailing window, oldest first
        self._store: Dict[str, Deque[float]] = {}
        self._lock = threading.Lock()

    def check_rate_limit(self, identity: str) -> RateLimitDecision:
        """Admits and records the request, or reports when the caller may retry."""
        with self._lock:
            now = self.clock()
            window_start = now - self.window_seconds

            requests = self._store.get(identity)
            if requests is None:
                # Drop identities whose whole window has gone quiet
                self._sweep(window_start)
                requests = self._store[identity] = deque()

            while requests and requests[0] <= window_start:
                requests.popleft()

            if len(requests) >= self.limit:
                retry_after = math.ceil(requests[0] + self.window_seconds - now)
                return RateLimitDecision(allowed=False, retry_after=max(retry_after, 1))

            requests.append(now)
            return RateLimitDecision(allowed=True)

    def _sweep(self, window_start: float) -> None:
        stale = [k for k, requests in self._store.items() if not requests or requests[-1] <= window_start]
        for identity in stale:
            del self._store[identity]
