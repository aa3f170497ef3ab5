"""
Tests for Fixed-Window Rate Limiting

Tests covering:
1. The request after max_count in a window is the first one limited
2. Windows reset once their reset time is reached
3. Clients and limiters are counted independently
4. Expired entries are swept from the in-memory store
5. Concurrent hits never lose an increment
"""

from __future__ import annotations

import threading

import pytest

from core.intake.rate_limit import (
    InMemoryRateLimitStore,
    RateLimitEntry,
    RateLimiter,
    get_login_limiter,
    get_submission_limiter,
    is_rate_limited,
    reset_rate_limiters,
)


# =============================================================================
# Fixtures
# =============================================================================


class FakeClock:
    """Manually advanced millisecond clock."""

    def __init__(self, now: int = 0):
        self.now = now

    def __call__(self) -> int:
        return self.now


@pytest.fixture
def store():
    return InMemoryRateLimitStore()


@pytest.fixture
def clock():
    return FakeClock(1_000_000)


@pytest.fixture(autouse=True)
def fresh_singletons():
    reset_rate_limiters()
    yield
    reset_rate_limiters()


# =============================================================================
# Window Counting
# =============================================================================


class TestIsRateLimited:
    """Counting semantics of a single fixed window."""

    def test_first_request_opens_window(self, store):
        assert is_rate_limited("1.2.3.4", store, 3, 60000, now=1000) is False
        assert store.get("1.2.3.4") == RateLimitEntry(count=1, window_reset_at=61000)

    def test_request_after_max_is_limited(self, store):
        results = [is_rate_limited("c", store, 3, 60000, now=1000 + i) for i in range(5)]
        assert results == [False, False, False, True, True]

    def test_window_keeps_original_reset_time(self, store):
        is_rate_limited("c", store, 3, 60000, now=1000)
        is_rate_limited("c", store, 3, 60000, now=30000)
        assert store.get("c").window_reset_at == 61000

    def test_window_resets_at_reset_time(self, store):
        for i in range(4):
            is_rate_limited("c", store, 3, 60000, now=1000)

        assert is_rate_limited("c", store, 3, 60000, now=61000) is False
        assert store.get("c").count == 1

    def test_still_limited_just_before_reset(self, store):
        for i in range(4):
            is_rate_limited("c", store, 3, 60000, now=1000)
        assert is_rate_limited("c", store, 3, 60000, now=60999) is True

    def test_clients_are_independent(self, store):
        for i in range(4):
            is_rate_limited("a", store, 3, 60000, now=1000)
        assert is_rate_limited("b", store, 3, 60000, now=1000) is False


# =============================================================================
# Store Sweeping
# =============================================================================


class TestInMemoryStore:
    """Expired entries do not accumulate."""

    def test_sweep_drops_expired_only(self):
        store = InMemoryRateLimitStore(sweep_interval_ms=0)
        store.set("old", RateLimitEntry(count=1, window_reset_at=100))
        store.set("new", RateLimitEntry(count=1, window_reset_at=500))

        assert store.sweep(200) == 1
        assert len(store) == 1
        assert store.get("old") is None
        assert store.get("new") is not None

    def test_sweep_runs_at_most_once_per_interval(self):
        store = InMemoryRateLimitStore(sweep_interval_ms=1000)
        store.sweep(200)
        store.set("old", RateLimitEntry(count=1, window_reset_at=100))

        assert store.sweep(300) == 0
        assert len(store) == 1
        assert store.sweep(1200) == 1

    def test_limiter_sweeps_stale_clients(self, clock):
        limiter = RateLimiter("test", 3, window_ms=1000, clock=clock)
        for i in range(10):
            limiter.hit(f"client-{i}")
        assert len(limiter.store) == 10

        clock.now += 5000
        limiter.hit("late")
        assert len(limiter.store) == 1


# =============================================================================
# Limiter
# =============================================================================


class TestRateLimiter:
    """Named limiters with their own store and clock."""

    def test_hit_uses_clock(self, clock):
        limiter = RateLimiter("test", 2, window_ms=60000, clock=clock)
        assert [limiter.hit("c") for _ in range(3)] == [False, False, True]

        clock.now += 60000
        assert limiter.hit("c") is False

    def test_limited_hit_is_logged(self, clock, caplog):
        limiter = RateLimiter("login", 1, clock=clock)
        limiter.hit("9.9.9.9")
        with caplog.at_level("WARNING"):
            limiter.hit("9.9.9.9")
        assert "login" in caplog.text
        assert "9.9.9.9" in caplog.text

    def test_concurrent_hits_are_all_counted(self, clock):
        limiter = RateLimiter("test", 5, clock=clock)
        results = []
        results_lock = threading.Lock()

        def worker():
            limited = limiter.hit("shared")
            with results_lock:
                results.append(limited)

        threads = [threading.Thread(target=worker) for _ in range(20)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        assert results.count(False) == 5
        assert results.count(True) == 15
        assert limiter.store.get("shared").count == 20


# =============================================================================
# Singletons
# =============================================================================


class TestLimiterSingletons:
    """Login and submission limiters come from configuration."""

    def test_defaults(self, monkeypatch):
        monkeypatch.delenv("LOGIN_RATE_LIMIT", raising=False)
        monkeypatch.delenv("SUBMISSION_RATE_LIMIT", raising=False)
        monkeypatch.delenv("RATE_LIMIT_WINDOW_MS", raising=False)

        assert get_login_limiter().max_count == 3
        assert get_submission_limiter().max_count == 5
        assert get_submission_limiter().window_ms == 60000

    def test_same_instance_until_reset(self):
        first = get_login_limiter()
        assert get_login_limiter() is first

        reset_rate_limiters()
        assert get_login_limiter() is not first

    def test_limit_from_environment(self, monkeypatch):
        monkeypatch.setenv("SUBMISSION_RATE_LIMIT", "2")
        assert get_submission_limiter().max_count == 2

    def test_limiters_do_not_share_counts(self):
        login = get_login_limiter()
        for _ in range(10):
            login.hit("same-client")

        assert get_submission_limiter().hit("same-client") is False
