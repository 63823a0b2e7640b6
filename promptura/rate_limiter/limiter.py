"""Rate limiting for outbound optimization calls"""

import time
from typing import Callable


class RateLimiter:
    """
    Fixed-window rate limiter held in process memory

    Throttles a single client's outbound calls to the completion API.
    State is lost on restart and is not shared between processes or threads.
    The counter only moves when ``record_request`` is called, so a check
    alone never consumes budget.
    """

    def __init__(
        self,
        max_requests: int = 10,
        window_seconds: float = 60.0,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.max_requests = max_requests
        self.window_seconds = window_seconds
        self.clock = clock
        self.request_count = 0
        self.window_start = clock()

    def check_limit(self) -> bool:
        """Return True while the current window still has budget"""
        now = self.clock()
        if now - self.window_start > self.window_seconds:
            self.request_count = 0
            self.window_start = now
        return self.request_count < self.max_requests

    def record_request(self):
        """Count an attempted remote call against the current window"""
        self.request_count += 1

    def remaining(self) -> int:
        """Requests left in the current window"""
        self.check_limit()
        return max(self.max_requests - self.request_count, 0)

    def reset(self):
        """Clear the counter and start a new window"""
        self.request_count = 0
        self.window_start = self.clock()
