"""
Per-caller request limiting for the chat endpoint.

Each caller (keyed by client address) gets a fixed window that starts with
its first request. Every hit inside the window is counted, rejected ones
included; once the window elapses the counter starts over.

Usage:
    limiter = FixedWindowRateLimiter(max_requests=20, window_seconds=60)

    decision = limiter.hit("203.0.113.7")
    if not decision.allowed:
        raise RateLimitError(retry_after=decision.reset_after)
"""

import math
import threading
import time
from dataclasses import dataclass
from typing import Callable, Optional

from site_assistant.logging import get_logger

logger = get_logger("ratelimit")


@dataclass(frozen=True)
class RateLimitDecision:
    """Outcome of a single hit."""
    allowed: bool
    limit: int
    remaining: int
    reset_after: float  # seconds until the caller's window resets

    def headers(self) -> dict[str, str]:
        """Standard ``RateLimit-*`` response headers."""
        headers = {
            "RateLimit-Limit": str(self.limit),
            "RateLimit-Remaining": str(self.remaining),
            "RateLimit-Reset": str(math.ceil(self.reset_after)),
        }
        if not self.allowed:
            headers["Retry-After"] = str(math.ceil(self.reset_after))
        return headers


@dataclass
class _Window:
    started_at: float
    count: int = 0


class FixedWindowRateLimiter:
    """
    Fixed-window request counter keyed by caller identity.

    Args:
        max_requests: Requests accepted per caller per window
        window_seconds: Window length
        clock: Monotonic time source (injectable for tests)
    """

    def __init__(
        self,
        max_requests: int = 20,
        window_seconds: float = 60.0,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.max_requests = max_requests
        self.window_seconds = window_seconds
        self._clock = clock
        self._windows: dict[str, _Window] = {}
        self._lock = threading.Lock()

    def hit(self, key: str) -> RateLimitDecision:
        """Count one request for ``key`` and decide whether it may proceed."""
        with self._lock:
            now = self._clock()
            self._evict_expired(now)

            window = self._windows.get(key)
            if window is None:
                window = _Window(started_at=now)
                self._windows[key] = window
            window.count += 1
            count = window.count

            allowed = count <= self.max_requests
            reset_after = max(0.0, window.started_at + self.window_seconds - now)

        if not allowed:
            logger.warn("Rate limit exceeded", caller=key, count=count)

        return RateLimitDecision(
            allowed=allowed,
            limit=self.max_requests,
            remaining=max(0, self.max_requests - count),
            reset_after=reset_after,
        )

    def reset(self, key: Optional[str] = None) -> None:
        """Forget one caller's window, or every window when ``key`` is None."""
        with self._lock:
            if key is None:
                self._windows.clear()
            else:
                self._windows.pop(key, None)

    def _evict_expired(self, now: float) -> None:
        expired = [
            key for key, window in self._windows.items()
            if now - window.started_at >= self.window_seconds
        ]
        for key in expired:
            del self._windows[key]

    def __len__(self) -> int:
        return len(self._windows)
