"""Inbound request rate limiting.

Fixed window per client key, kept in process memory. Each worker process
counts on its own.
"""

import logging
import time
from collections.abc import Callable

from .errors import RequestRateLimitError

logger = logging.getLogger(__name__)

MAX_TRACKED_CLIENTS = 10_000


class RateLimiter:
    """Allow ``max_requests`` per ``window_seconds`` for each client key.

    Args:
        max_requests: Requests allowed per window
        window_seconds: Window length
        clock: Monotonic time source (tests pass a fake)
    """

    def __init__(
        self,
        max_requests: int,
        window_seconds: float,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self.max_requests = max_requests
        self.window_seconds = window_seconds
        self._clock = clock
        self._windows: dict[str, tuple[float, int]] = {}

    def hit(self, key: str) -> None:
        """Count one request for ``key``.

        Raises:
            RequestRateLimitError: the window's budget is spent
        """
        now = self._clock()
        started, count = self._windows.get(key, (now, 0))
        if now - started >= self.window_seconds:
            started, count = now, 0

        if count >= self.max_requests:
            retry_after = max(1, int(self.window_seconds - (now - started)))
            logger.warning(
                "Rate limit exceeded",
                extra={"client": key, "limit": self.max_requests, "retry_after": retry_after},
            )
            raise RequestRateLimitError("Too many requests from this IP, please try again later.", retry_after)

        self._windows[key] = (started, count + 1)
        if len(self._windows) > MAX_TRACKED_CLIENTS:
            self._evict(now)

    def _evict(self, now: float) -> None:
        expired = [key for key, (started, _) in self._windows.items() if now - started >= self.window_seconds]
        for key in expired:
            del self._windows[key]
