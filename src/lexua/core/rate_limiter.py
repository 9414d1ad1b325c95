"""Request pacing for portal fetches."""

import logging
import time
from collections import deque
from typing import Any, Callable, Dict, Optional

from lexua.settings import HTTP_MIN_DELAY

logger = logging.getLogger(__name__)


class AdaptiveRateLimiter:
    """Adaptive rate limiter that enforces a minimum gap between requests.

    The gap starts at ``min_delay`` and grows whenever the portal answers with
    HTTP 429 (honouring Retry-After when present), then decays back towards
    the minimum after sustained success.
    """

    def __init__(
        self,
        min_delay: float = HTTP_MIN_DELAY,
        max_delay: float = 300.0,
        success_reduction_factor: float = 0.95,
        failure_increase_factor: float = 2.0,
        clock: Callable[[], float] = time.monotonic,
        sleep: Callable[[float], None] = time.sleep,
    ):
        """
        Initialize the adaptive rate limiter.

        Args:
            min_delay: Minimum delay between requests in seconds
            max_delay: Maximum delay between requests in seconds
            success_reduction_factor: Factor to reduce delay after success (0-1)
            failure_increase_factor: Factor to increase delay after rate limit
            clock: Monotonic time source
            sleep: Function used to wait
        """
        self.successful_requests: deque[float] = deque(maxlen=1000)
        self.rate_limit_events: deque[Dict[str, Any]] = deque(maxlen=100)
        self.current_delay = min_delay
        self.min_delay = min_delay
        self.max_delay = max_delay
        self.success_reduction_factor = success_reduction_factor
        self.failure_increase_factor = failure_increase_factor
        self._clock = clock
        self._sleep = sleep
        self._last_request: Optional[float] = None

    def wait(self) -> float:
        """Block until the current delay has elapsed since the previous request.

        Returns the number of seconds slept.
        """
        now = self._clock()
        slept = 0.0
        if self._last_request is not None:
            remaining = self.current_delay - (now - self._last_request)
            if remaining > 0:
                logger.debug(f"Applying rate limit delay: {remaining:.2f}s")
                self._sleep(remaining)
                slept = remaining
                now = self._clock()
        self._last_request = now
        return slept

    def record_success(self) -> None:
        """Record a successful request and potentially reduce delay."""
        self.successful_requests.append(self._clock())

        if len(self.successful_requests) > 10 and self.current_delay > self.min_delay:
            self.current_delay *= self.success_reduction_factor
            self.current_delay = max(self.current_delay, self.min_delay)

    def record_rate_limit(self, retry_after: Optional[int] = None) -> None:
        """Record a rate limit event and increase delay."""
        self.rate_limit_events.append({"time": self._clock(), "retry_after": retry_after})

        if retry_after:
            self.current_delay = min(float(retry_after), self.max_delay)
        else:
            new_delay = self.current_delay * self.failure_increase_factor + 0.5
            self.current_delay = min(new_delay, self.max_delay)

        logger.info(
            f"Rate limit recorded. New delay: {self.current_delay}s",
            extra={
                "rate_limiter_delay": self.current_delay,
                "retry_after": retry_after,
                "recent_rate_limits": len(self.rate_limit_events),
            },
        )

    def get_current_delay(self) -> float:
        """Get the current delay to apply before next request."""
        return self.current_delay

    def get_stats(self) -> Dict[str, Any]:
        """Get current rate limiter statistics."""
        return {
            "current_delay": self.current_delay,
            "rate_limit_count": len(self.rate_limit_events),
            "total_requests": len(self.successful_requests),
        }
