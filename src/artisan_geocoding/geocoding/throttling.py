"""
Request pacing for the geocoding service.

The public Nominatim service allows one request per second; the pipeline
spaces every lookup by a fixed minimum interval instead of relying on
ambient sleeps.
"""

from __future__ import annotations

import time
import threading

from .base import RateLimiter


class SimpleRateGate(RateLimiter):
    """
    Fixed-interval gate between consecutive requests.

    The first request goes through immediately; every following request
    waits until at least `1 / requests_per_second` seconds have passed
    since the previous one was released.
    """

    def __init__(self, requests_per_second: float):
        """
        Initialize rate gate.

        Args:
            requests_per_second: Target rate (requests per second)
        """
        if requests_per_second <= 0:
            raise ValueError("requests_per_second must be > 0")

        self.dt = 1.0 / float(requests_per_second)
        self.next_time = time.perf_counter()
        self.lock = threading.Lock()

    @classmethod
    def from_interval(cls, min_interval_s: float) -> "SimpleRateGate":
        """Build a gate from the minimum number of seconds between requests."""
        if min_interval_s <= 0:
            raise ValueError("min_interval_s must be > 0")
        return cls(1.0 / float(min_interval_s))

    def wait(self) -> None:
        """Block until the next request slot opens, then claim it."""
        with self.lock:
            now = time.perf_counter()
            if self.next_time > now:
                time.sleep(self.next_time - now)
                now = time.perf_counter()
            self.next_time = now + self.dt


class NoOpRateLimiter(RateLimiter):
    """Releases every request at once; for tests and self-hosted services."""

    def wait(self) -> None:
        pass


def rate_limiter_for_interval(min_interval_s: float) -> RateLimiter:
    """Return a SimpleRateGate for a positive interval, a no-op limiter otherwise."""
    if min_interval_s and min_interval_s > 0:
        return SimpleRateGate.from_interval(min_interval_s)
    return NoOpRateLimiter()
