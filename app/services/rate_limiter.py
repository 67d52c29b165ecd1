"""
Rate Limiter
Sliding-window submission limits per client address
"""
import math
import time
from collections import deque
from typing import Callable, Deque, Dict, Optional, Tuple

from app.core.exceptions import RateLimitError


class InMemoryCounterStore:
    """
    Admission timestamps per client key

    Process-local: each instance of the API keeps its own counters
    """

    def __init__(self):
        self._hits: Dict[str, Deque[float]] = {}

    def hits(self, key: str, since: float) -> Deque[float]:
        """Timestamps for key newer than since; older ones are dropped"""
        bucket = self._hits.get(key)
        if bucket is None:
            return deque()
        while bucket and bucket[0] <= since:
            bucket.popleft()
        if not bucket:
            del self._hits[key]
            return deque()
        return bucket

    def add(self, key: str, timestamp: float) -> None:
        self._hits.setdefault(key, deque()).append(timestamp)

    def prune(self, since: float) -> None:
        """Forget every key with no admissions after since"""
        for key in list(self._hits):
            self.hits(key, since)

    def __len__(self) -> int:
        return len(self._hits)


class RateLimiter:
    """Admit at most max_requests per key within any window_seconds span"""

    def __init__(
        self,
        window_seconds: int,
        max_requests: int,
        message: Optional[str] = None,
        store: Optional[InMemoryCounterStore] = None,
        clock: Callable[[], float] = time.monotonic,
        enabled: bool = True
    ):
        self.window_seconds = window_seconds
        self.max_requests = max_requests
        self.message = message
        self.store = store if store is not None else InMemoryCounterStore()
        self.clock = clock
        self.enabled = enabled

    def check(self, key: str) -> Tuple[bool, Optional[int]]:
        """
        Check and, when admitted, count a request for key

        Args:
            key: Client address

        Returns:
            Tuple[bool, Optional[int]]:
                - is_allowed: Whether the request may proceed
                - seconds_remaining: Seconds until the next slot frees up (if limited)
        """
        if not self.enabled:
            return True, None

        now = self.clock()
        window_start = now - self.window_seconds
        recent = self.store.hits(key, window_start)

        if len(recent) >= self.max_requests:
            # The oldest admission in the window is the next to expire
            seconds_remaining = max(1, math.ceil(recent[0] + self.window_seconds - now))
            return False, seconds_remaining

        self.store.add(key, now)
        if len(self.store) > 10000:
            self.store.prune(window_start)
        return True, None

    def hit(self, key: str) -> None:
        """
        Count a request for key

        Raises:
            RateLimitError: If the client is over its ceiling
        """
        is_allowed, seconds_remaining = self.check(key)
        if not is_allowed:
            message = self.message or (
                "Too many requests from this IP, please try again in "
                f"{self.format_time_remaining(seconds_remaining)}."
            )
            raise RateLimitError(seconds_remaining, message)

    @staticmethod
    def format_time_remaining(seconds: int) -> str:
        """
        Format seconds into human-readable time

        Args:
            seconds: Seconds remaining

        Returns:
            str: Formatted time string
        """
        if seconds < 60:
            return f"{seconds} seconds"
        elif seconds < 3600:
            minutes = math.ceil(seconds / 60)
            return f"{minutes} minute{'s' if minutes != 1 else ''}"
        else:
            hours = seconds // 3600
            minutes = (seconds % 3600) // 60
            if minutes > 0:
                return f"{hours} hour{'s' if hours != 1 else ''} and {minutes} minute{'s' if minutes != 1 else ''}"
            return f"{hours} hour{'s' if hours != 1 else ''}"
