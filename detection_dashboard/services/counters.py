# detection_dashboard/services/counters.py
"""
Process-lifetime counters behind the dashboard metrics.
Each counter is updated on its own; there is no cross-counter atomicity, so a
reader may see a call counted before its processing time is added.
"""

import threading
from collections import defaultdict

from detection_dashboard.config import settings

SUCCESS_RATE_PLACEHOLDER = 97.7   # Shown before the first call


class AtomicCounter:
    """Monotonic integer counter. Only ever increases."""

    def __init__(self):
        self._value = 0
        self._lock = threading.Lock()

    def add(self, amount: int = 1) -> int:
        if amount < 0:
            raise ValueError("counters never decrease")
        with self._lock:
            self._value += amount
            return self._value

    def increment(self) -> int:
        return self.add(1)

    @property
    def value(self) -> int:
        return self._value


class KeyedCounter:
    """Per-key tallies (category → count, device → count)."""

    def __init__(self):
        self._counts: dict[str, int] = defaultdict(int)
        self._lock = threading.Lock()

    def increment(self, key: str) -> None:
        with self._lock:
            self._counts[key] += 1

    def get(self, key: str) -> int:
        with self._lock:
            return self._counts.get(key, 0)

    def as_dict(self) -> dict[str, int]:
        with self._lock:
            return dict(self._counts)

    def most_common(self, n: int) -> list[tuple[str, int]]:
        # Stable sort keeps first-seen order among equal counts
        return sorted(self.as_dict().items(), key=lambda kv: kv[1], reverse=True)[:n]

    def __len__(self) -> int:
        with self._lock:
            return len(self._counts)


class CounterSet:
    def __init__(self):
        self.active_sessions = AtomicCounter()
        self.total_api_calls = AtomicCounter()
        self.total_processing_time_ms = AtomicCounter()
        self.total_errors = AtomicCounter()
        self.category_counts = KeyedCounter()
        self.device_counts = KeyedCounter()

    # ── Derived metrics ──────────────────────────────────────────────────
    def average_response_time(self) -> int:
        """Mean processing time in whole milliseconds, 0 before the first call."""
        calls = self.total_api_calls.value
        return self.total_processing_time_ms.value // calls if calls else 0

    def error_rate(self) -> float:
        calls = self.total_api_calls.value
        return round(self.total_errors.value / calls * 100, 1) if calls else 0

    def success_rate(self) -> float:
        calls = self.total_api_calls.value
        if not calls:
            return SUCCESS_RATE_PLACEHOLDER
        return round((calls - self.total_errors.value) / calls * 100, 1)

    def baseline_response_time(self) -> float:
        """Fallback for empty chart buckets: overall mean, or the configured default."""
        calls = self.total_api_calls.value
        if not calls:
            return settings.BASELINE_RESPONSE_TIME_MS
        return self.total_processing_time_ms.value / calls
