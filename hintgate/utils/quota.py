import threading
import time
from dataclasses import dataclass
from datetime import date, datetime, time as dt_time, timedelta
from typing import Callable, Dict, Optional, Tuple


@dataclass
class QuotaDecision:
    allowed: bool
    remaining_time: Optional[int] = None  # milliseconds until local midnight


class DeviceQuotaTracker:
    """
    Daily request ceiling per device id.
    Counts are keyed by (device_id, local calendar date) so the reset at midnight is implicit:
    a new day means a new key. Keys from other days are swept whenever a new key is created.
    """
    def __init__(self, daily_limit: int = 200, clock: Callable[[], float] = time.time):
        self.daily_limit = daily_limit
        self.clock = clock
        self._counts: Dict[Tuple[str, date], int] = {}
        self._lock = threading.Lock()

    def check_device_limit(self, device_id: str) -> QuotaDecision:
        with self._lock:
            now = datetime.fromtimestamp(self.clock())
            today = now.date()
            key = (device_id, today)

            if key not in self._counts:
                self._counts[key] = 0
                # Clean up entries from previous days
                for stale in [k for k in self._counts if k[1] != today]:
                    del self._counts[stale]

            count = self._counts[key]
            if count >= self.daily_limit:
                midnight = datetime.combine(today + timedelta(days=1), dt_time.min)
                remaining_ms = int((midnight.timestamp() - self.clock()) * 1000)
                return QuotaDecision(allowed=False, remaining_time=max(remaining_ms, 0))

            self._counts[key] = count + 1
            return QuotaDecision(allowed=True)
