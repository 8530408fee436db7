"""
Fixed-window login rate limiter.

State lives in process memory only: restarting the process, or running more
than one instance, resets every limit.
"""

import logging
import math
import time
from collections.abc import Callable
from dataclasses import dataclass

logger = logging.getLogger(__name__)

MAX_ATTEMPTS = 5
ATTEMPT_WINDOW_SECONDS = 5 * 60
BLOCK_DURATION_SECONDS = 15 * 60


@dataclass
class AttemptRecord:
    count: int
    last_attempt: float
    blocked_until: float | None = None


@dataclass(frozen=True)
class RateLimitStatus:
    limited: bool
    remaining_time: int | None = None  # seconds until the block lifts


class RateLimiter:
    """Counts attempts per identifier and blocks after too many in a window."""

    def __init__(
        self,
        max_attempts: int = MAX_ATTEMPTS,
        attempt_window: float = ATTEMPT_WINDOW_SECONDS,
        block_duration: float = BLOCK_DURATION_SECONDS,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.max_attempts = max_attempts
        self.attempt_window = attempt_window
        self.block_duration = block_duration
        self._clock = clock
        self._attempts: dict[str, AttemptRecord] = {}

    def is_limited(self, identifier: str) -> RateLimitStatus:
        record = self._attempts.get(identifier)
        if record is None:
            return RateLimitStatus(limited=False)

        now = self._clock()

        if record.blocked_until is not None and now < record.blocked_until:
            return RateLimitStatus(
                limited=True, remaining_time=math.ceil(record.blocked_until - now)
            )

        # Window (or block) expired: forget the identifier
        if now - record.last_attempt > self.attempt_window:
            del self._attempts[identifier]
            return RateLimitStatus(limited=False)

        if record.count >= self.max_attempts:
            if record.blocked_until is None:
                record.blocked_until = now + self.block_duration
                logger.warning(
                    "Blocking %s for %ss after %d attempts",
                    identifier,
                    self.block_duration,
                    record.count,
                )
            return RateLimitStatus(
                limited=True,
                remaining_time=max(math.ceil(record.blocked_until - now), 0),
            )

        return RateLimitStatus(limited=False)

    def record_attempt(self, identifier: str) -> None:
        now = self._clock()
        record = self._attempts.get(identifier)
        if record is None:
            self._attempts[identifier] = AttemptRecord(count=1, last_attempt=now)
            return

        if now - record.last_attempt > self.attempt_window:
            record.count = 1
        else:
            record.count += 1
        record.last_attempt = now

    def reset_attempts(self, identifier: str) -> None:
        self._attempts.pop(identifier, None)

    def clear(self) -> None:
        self._attempts.clear()
