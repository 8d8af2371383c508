"""
In-memory sliding-window rate limiter for card operations.

Limits are kept per process and reset on restart.
"""

from __future__ import annotations

from collections import defaultdict
from collections.abc import Callable
from dataclasses import dataclass
from datetime import datetime, timedelta

from lingua.core.errors import RateLimitExceeded
from lingua.core.timeutil import utc_now


@dataclass(frozen=True)
class RateLimitConfig:
    max_actions: int
    window_minutes: int

    @property
    def window(self) -> timedelta:
        return timedelta(minutes=self.window_minutes)


DEFAULT_LIMITS = {
    "card_creation": RateLimitConfig(max_actions=50, window_minutes=60),
    "card_bulk_create": RateLimitConfig(max_actions=100, window_minutes=60),
    "card_update": RateLimitConfig(max_actions=100, window_minutes=60),
    "card_delete": RateLimitConfig(max_actions=50, window_minutes=60),
}


class RateLimiter:
    """
    Sliding-window limiter keyed by (user_id, action).

    Actions without a configured limit are always allowed.
    """

    def __init__(
        self,
        limits: dict[str, RateLimitConfig] | None = None,
        clock: Callable[[], datetime] = utc_now,
    ):
        self.limits = dict(DEFAULT_LIMITS if limits is None else limits)
        self._clock = clock
        self._timestamps: dict[tuple[str, str], list[datetime]] = defaultdict(list)

    def _recent(self, user_id: str, action: str, config: RateLimitConfig) -> list[datetime]:
        """Drop timestamps that left the window and return the rest."""
        window_start = self._clock() - config.window
        key = (user_id, action)
        recent = [t for t in self._timestamps.get(key, []) if t > window_start]
        if recent:
            self._timestamps[key] = recent
        else:
            self._timestamps.pop(key, None)
        return recent

    def is_allowed(self, user_id: str, action: str) -> bool:
        """Check the limit and record the action when it is allowed."""
        config = self.limits.get(action)
        if config is None:
            return True
        if len(self._recent(user_id, action, config)) >= config.max_actions:
            return False
        self._timestamps[(user_id, action)].append(self._clock())
        return True

    def remaining(self, user_id: str, action: str) -> int | None:
        """Actions left in the current window; None when unlimited."""
        config = self.limits.get(action)
        if config is None:
            return None
        used = len(self._recent(user_id, action, config))
        return max(0, config.max_actions - used)

    def retry_after(self, user_id: str, action: str) -> timedelta | None:
        """Time until the next action is allowed (zero if allowed now)."""
        config = self.limits.get(action)
        if config is None:
            return None
        recent = self._recent(user_id, action, config)
        if len(recent) < config.max_actions:
            return timedelta(0)
        return min(recent) + config.window - self._clock()

    def error_message(self, user_id: str, action: str) -> str:
        config = self.limits.get(action)
        if config is None:
            return "Rate limit exceeded"
        wait = self.retry_after(user_id, action)
        if wait is not None and wait > timedelta(0):
            minutes = int(wait.total_seconds() // 60)
            if minutes > 0:
                return f"Rate limit exceeded. Try again in {minutes} minute{'s' if minutes != 1 else ''}."
            seconds = int(wait.total_seconds()) % 60
            return f"Rate limit exceeded. Try again in {seconds} second{'s' if seconds != 1 else ''}."
        return (
            f"Rate limit exceeded. Maximum {config.max_actions} actions "
            f"per {config.window_minutes} minutes."
        )

    def check(self, user_id: str, action: str) -> None:
        """Record the action or raise RateLimitExceeded."""
        if not self.is_allowed(user_id, action):
            raise RateLimitExceeded(
                self.error_message(user_id, action),
                retry_after=self.retry_after(user_id, action),
            )

    def clear_user(self, user_id: str) -> None:
        for key in [k for k in self._timestamps if k[0] == user_id]:
            del self._timestamps[key]

    def clear_all(self) -> None:
        self._timestamps.clear()
