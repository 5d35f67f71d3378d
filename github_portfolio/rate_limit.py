"""Rate limit gate for the GitHub API.

Tracks the latest quota observation and decides whether new searches must be
refused until the quota resets.
"""

import logging
import time
from enum import Enum
from typing import Callable

from .models import RateLimitStatus

logger = logging.getLogger(__name__)


class GateState(str, Enum):
    OPEN = "open"
    LIMITED = "limited"


def format_countdown(seconds: float) -> str:
    """Format a wait as H:MM:SS when at least an hour, else M:SS."""
    total = max(0, int(seconds))
    hours, rest = divmod(total, 3600)
    minutes, secs = divmod(rest, 60)
    if hours > 0:
        return f"{hours}:{minutes:02d}:{secs:02d}"
    return f"{minutes}:{secs:02d}"


class RateLimitGate:
    """Open/Limited state machine fed by response headers and the /rate_limit poll.

    The most recent observation always wins. ``status`` is only ever written
    from an observation; ``block_until`` limits the gate without touching it.
    """

    def __init__(self, clock: Callable[[], float] = time.time):
        self._clock = clock
        self.status: RateLimitStatus | None = None
        self._reset_at: float | None = None

    @property
    def state(self) -> GateState:
        return GateState.LIMITED if self._reset_at is not None else GateState.OPEN

    @property
    def reset_at(self) -> float | None:
        return self._reset_at

    def observe(self, remaining: int, limit: int, reset_at: float) -> None:
        """Record a quota observation."""
        self.status = RateLimitStatus(remaining=remaining, limit=limit, reset_at=reset_at)
        if remaining == 0:
            if self._reset_at is None:
                logger.info("Rate limit exhausted, resets at %s", reset_at)
            self._reset_at = reset_at
        else:
            self._reset_at = None

    def block_until(self, reset_at: float) -> None:
        """Enter Limited after a rate-limited response."""
        logger.info("Rate limited until %s", reset_at)
        self._reset_at = reset_at

    def is_limited(self, now: float | None = None) -> bool:
        if self._reset_at is None:
            return False
        now = self._clock() if now is None else now
        return now < self._reset_at

    def countdown(self, now: float | None = None) -> str:
        """Time left until the quota resets, formatted for display."""
        if self._reset_at is None:
            return format_countdown(0)
        now = self._clock() if now is None else now
        return format_countdown(self._reset_at - now)

    def tick(self, now: float | None = None) -> GateState:
        """Return to Open once the reset instant has passed."""
        now = self._clock() if now is None else now
        if self._reset_at is not None and now >= self._reset_at:
            logger.info("Rate limit window reset")
            self._reset_at = None
        return self.state
