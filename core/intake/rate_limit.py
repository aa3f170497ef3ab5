"""
Rate Limiting - Fixed Window Counters per Client

Bounds state-changing requests per client within a fixed time window.
Each endpoint category (login, submission creation) owns an independent
limiter and store, so a client throttled on one is not throttled on another.

The counter state sits behind RateLimitStore so a deployment running several
processes can back it with a shared cache. The in-memory store is only
correct per process.
"""

from __future__ import annotations

import logging
import threading
import time
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Callable, Final, Optional

from utils.config import Config


logger = logging.getLogger(__name__)


# =============================================================================
# Constants
# =============================================================================

RATE_WINDOW_MS: Final[int] = 60 * 1000


def current_time_ms() -> int:
    """Wall-clock milliseconds, shared-store friendly."""
    return int(time.time() * 1000)


# =============================================================================
# Entry and Store
# =============================================================================


@dataclass(frozen=True)
class RateLimitEntry:
    """Request count for one client in its current window."""

    count: int
    window_reset_at: int  # epoch milliseconds

    def is_expired(self, now: int) -> bool:
        return now >= self.window_reset_at


class RateLimitStore(ABC):
    """Key/value storage for rate limit entries."""

    @abstractmethod
    def get(self, key: str) -> Optional[RateLimitEntry]:
        """Return the entry for ``key`` or None."""

    @abstractmethod
    def set(self, key: str, entry: RateLimitEntry) -> None:
        """Create or replace the entry for ``key``."""

    def sweep(self, now: int) -> int:
        """Drop expired entries. Stores with native expiry need not override."""
        return 0


class InMemoryRateLimitStore(RateLimitStore):
    """
    Dict-backed store for single-process deployments.

    Expired entries are swept at most once per ``sweep_interval_ms`` so the
    key space stays proportional to the clients seen in the last window.
    """

    def __init__(self, sweep_interval_ms: int = RATE_WINDOW_MS):
        self._entries: dict[str, RateLimitEntry] = {}
        self._lock = threading.Lock()
        self._sweep_interval_ms = sweep_interval_ms
        self._next_sweep_at = 0

    def get(self, key: str) -> Optional[RateLimitEntry]:
        with self._lock:
            return self._entries.get(key)

    def set(self, key: str, entry: RateLimitEntry) -> None:
        with self._lock:
            self._entries[key] = entry

    def sweep(self, now: int) -> int:
        with self._lock:
            if now < self._next_sweep_at:
                return 0
            self._next_sweep_at = now + self._sweep_interval_ms
            expired = [k for k, e in self._entries.items() if e.is_expired(now)]
            for key in expired:
                del self._entries[key]
        if expired:
            logger.debug("Swept %d expired rate limit entries", len(expired))
        return len(expired)

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)


# =============================================================================
# Limiting
# =============================================================================


def is_rate_limited(
    client_id: str,
    store: RateLimitStore,
    max_count: int,
    window_ms: int,
    now: int,
) -> bool:
    """
    Record a request from ``client_id`` and report whether it is over the limit.

    The first request of a window opens it with count 1. Later requests in the
    same window increment the count; the request that takes the count past
    ``max_count`` is the first one limited.
    """
    entry = store.get(client_id)
    if entry is None or entry.is_expired(now):
        store.set(client_id, RateLimitEntry(count=1, window_reset_at=now + window_ms))
        return False

    count = entry.count + 1
    store.set(client_id, RateLimitEntry(count=count, window_reset_at=entry.window_reset_at))
    return count > max_count


class RateLimiter:
    """
    A named fixed-window limiter bound to its own store.

    ``hit`` serialises the read-modify-write per process so concurrent
    requests from one client never lose an increment.
    """

    def __init__(
        self,
        name: str,
        max_count: int,
        window_ms: int = RATE_WINDOW_MS,
        store: Optional[RateLimitStore] = None,
        clock: Optional[Callable[[], int]] = None,
    ):
        self.name = name
        self.max_count = max_count
        self.window_ms = window_ms
        self.store = store if store is not None else InMemoryRateLimitStore(window_ms)
        self._clock = clock or current_time_ms
        self._lock = threading.Lock()

    def hit(self, client_id: str) -> bool:
        """Count a request; True when the client is over the limit."""
        now = self._clock()
        with self._lock:
            limited = is_rate_limited(
                client_id, self.store, self.max_count, self.window_ms, now
            )
        self.store.sweep(now)

        if limited:
            logger.warning("Rate limit %s exceeded for client %s", self.name, client_id)
        return limited


# =============================================================================
# Singleton Instances
# =============================================================================

_login_limiter: Optional[RateLimiter] = None
_submission_limiter: Optional[RateLimiter] = None


def get_login_limiter() -> RateLimiter:
    """Get the login limiter singleton (3 attempts per minute by default)."""
    global _login_limiter
    if _login_limiter is None:
        config = Config.load()
        _login_limiter = RateLimiter(
            "login", config.login_rate_limit, config.rate_limit_window_ms
        )
    return _login_limiter


def get_submission_limiter() -> RateLimiter:
    """Get the submission-creation limiter singleton (5 per minute by default)."""
    global _submission_limiter
    if _submission_limiter is None:
        config = Config.load()
        _submission_limiter = RateLimiter(
            "submission", config.submission_rate_limit, config.rate_limit_window_ms
        )
    return _submission_limiter


def reset_rate_limiters() -> None:
    """Reset the singleton instances (for testing)."""
    global _login_limiter, _submission_limiter
    _login_limiter = None
    _submission_limiter = None
