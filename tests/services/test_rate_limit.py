"""
Unit tests for rate limiting service.

Covers the fixed-window memory backend (driven by a fake clock), the Redis
backend (with RedisService mocked) and the RateLimiter facade.
"""

from datetime import datetime, timezone
from unittest.mock import AsyncMock, patch

import pytest

from app.core.services.rate_limit import (
    MemoryBackend,
    RateLimiter,
    RateLimitResult,
    RedisBackend,
    format_rate_limit_key,
)


# ============================================================================
# Tests for RateLimitResult
# ============================================================================


class TestRateLimitResult:

    def test_rate_limit_result_defaults_retry_after_to_none(self):
        result = RateLimitResult(
            allowed=True,
            remaining=4,
            limit=5,
            reset_at=datetime.now(timezone.utc),
        )

        assert result.allowed is True
        assert result.retry_after is None


# ============================================================================
# Tests for MemoryBackend
# ============================================================================


class TestMemoryBackend:

    async def test_first_request_opens_window(self, clock):
        backend = MemoryBackend(clock=clock)

        result = await backend.check("rate_limit:quote:10.0.0.1", limit=5, window=3600)

        assert result.allowed is True
        assert result.remaining == 4
        assert result.limit == 5
        assert (result.reset_at - clock()).total_seconds() == 3600

    async def test_requests_count_down_remaining(self, clock):
        backend = MemoryBackend(clock=clock)

        remaining = [
            (await backend.check("key", limit=5, window=3600)).remaining
            for _ in range(5)
        ]

        assert remaining == [4, 3, 2, 1, 0]

    async def test_request_over_limit_is_denied(self, clock):
        backend = MemoryBackend(clock=clock)
        for _ in range(5):
            await backend.check("key", limit=5, window=3600)

        clock.advance(600)
        result = await backend.check("key", limit=5, window=3600)

        assert result.allowed is False
        assert result.remaining == 0
        assert result.retry_after == 3000

    async def test_denied_requests_are_not_counted(self, clock):
        backend = MemoryBackend(clock=clock)
        for _ in range(7):
            await backend.check("key", limit=5, window=3600)

        assert backend._store["key"][0] == 5

    async def test_window_resets_at_reset_time(self, clock):
        backend = MemoryBackend(clock=clock)
        for _ in range(6):
            await backend.check("key", limit=5, window=3600)

        clock.advance(3600)
        result = await backend.check("key", limit=5, window=3600)

        assert result.allowed is True
        assert result.remaining == 4

    async def test_retry_after_is_at_least_one_second(self, clock):
        backend = MemoryBackend(clock=clock)
        await backend.check("key", limit=1, window=3600)

        clock.advance(3599.5)
        result = await backend.check("key", limit=1, window=3600)

        assert result.allowed is False
        assert result.retry_after == 1

    async def test_keys_are_independent(self, clock):
        backend = MemoryBackend(clock=clock)
        await backend.check("rate_limit:quote:10.0.0.1", limit=1, window=3600)

        other = await backend.check("rate_limit:quote:10.0.0.2", limit=1, window=3600)
        other_form = await backend.check(
            "rate_limit:contact:10.0.0.1", limit=1, window=3600
        )

        assert other.allowed is True
        assert other_form.allowed is True

    async def test_reset_forgets_counter(self, clock):
        backend = MemoryBackend(clock=clock)
        await backend.check("key", limit=1, window=3600)

        await backend.reset("key")
        result = await backend.check("key", limit=1, window=3600)

        assert result.allowed is True

    async def test_get_remaining(self, clock):
        backend = MemoryBackend(clock=clock)
        assert await backend.get_remaining("key", limit=5, window=3600) == 5

        await backend.check("key", limit=5, window=3600)
        await backend.check("key", limit=5, window=3600)
        assert await backend.get_remaining("key", limit=5, window=3600) == 3

        clock.advance(3600)
        assert await backend.get_remaining("key", limit=5, window=3600) == 5

    async def test_purge_expired(self, clock):
        backend = MemoryBackend(clock=clock)
        await backend.check("old", limit=5, window=60)
        clock.advance(30)
        await backend.check("new", limit=5, window=60)
        clock.advance(30)

        assert backend.purge_expired() == 1
        assert "old" not in backend._store
        assert "new" in backend._store

    async def test_expired_keys_dropped_by_later_checks(self, clock):
        backend = MemoryBackend(clock=clock)
        for index in range(1000):
            await backend.check(f"rate_limit:quote:10.0.{index // 256}.{index % 256}", 5, 3600)

        clock.advance(7200)
        await backend.check("rate_limit:quote:10.9.9.9", limit=5, window=3600)

        assert list(backend._store) == ["rate_limit:quote:10.9.9.9"]

    async def test_purge_runs_at_most_once_per_interval(self, clock):
        backend = MemoryBackend(clock=clock, purge_interval=60)
        await backend.check("first", limit=5, window=10)
        clock.advance(10)
        await backend.check("second", limit=5, window=10)
        assert list(backend._store) == ["second"]

        clock.advance(10)
        await backend.check("third", limit=5, window=10)
        assert "second" in backend._store

        clock.advance(50)
        await backend.check("fourth", limit=5, window=10)
        assert list(backend._store) == ["fourth"]

    async def test_memory_backend_ping(self, clock):
        assert await MemoryBackend(clock=clock).ping() is True


# ============================================================================
# Tests for RedisBackend
# ============================================================================


class TestRedisBackend:

    async def test_allows_within_limit(self, clock):
        backend = RedisBackend(clock=clock)
        with patch(
            "app.core.services.rate_limit.RedisService.rate_limit_incr",
            new=AsyncMock(return_value=(2, 3500)),
        ) as mock_incr:
            result = await backend.check("key", limit=5, window=3600)

        mock_incr.assert_awaited_once_with("key", 3600)
        assert result.allowed is True
        assert result.remaining == 3
        assert (result.reset_at - clock()).total_seconds() == 3500

    async def test_denies_over_limit(self, clock):
        backend = RedisBackend(clock=clock)
        with patch(
            "app.core.services.rate_limit.RedisService.rate_limit_incr",
            new=AsyncMock(return_value=(6, 1200)),
        ):
            result = await backend.check("key", limit=5, window=3600)

        assert result.allowed is False
        assert result.retry_after == 1200

    async def test_fails_open_when_redis_unavailable(self, clock):
        backend = RedisBackend(clock=clock)
        with patch(
            "app.core.services.rate_limit.RedisService.rate_limit_incr",
            new=AsyncMock(return_value=None),
        ):
            result = await backend.check("key", limit=5, window=3600)

        assert result.allowed is True
        assert result.remaining == 4

    async def test_missing_ttl_falls_back_to_window(self, clock):
        backend = RedisBackend(clock=clock)
        with patch(
            "app.core.services.rate_limit.RedisService.rate_limit_incr",
            new=AsyncMock(return_value=(6, -1)),
        ):
            result = await backend.check("key", limit=5, window=3600)

        assert result.retry_after == 3600

    async def test_get_remaining_reads_counter(self, clock):
        backend = RedisBackend(clock=clock)
        with patch(
            "app.core.services.rate_limit.RedisService.get",
            new=AsyncMock(side_effect=["3", None, "garbage"]),
        ):
            assert await backend.get_remaining("key", limit=5, window=3600) == 2
            assert await backend.get_remaining("key", limit=5, window=3600) == 5
            assert await backend.get_remaining("key", limit=5, window=3600) == 5

    async def test_reset_deletes_key(self, clock):
        backend = RedisBackend(clock=clock)
        with patch(
            "app.core.services.rate_limit.RedisService.delete",
            new=AsyncMock(return_value=True),
        ) as mock_delete:
            await backend.reset("key")

        mock_delete.assert_awaited_once_with("key")

    async def test_ping_delegates_to_redis(self, clock):
        backend = RedisBackend(clock=clock)
        with patch(
            "app.core.services.rate_limit.RedisService.ping",
            new=AsyncMock(return_value=False),
        ):
            assert await backend.ping() is False


# ============================================================================
# Tests for RateLimiter
# ============================================================================


class TestRateLimiter:

    def test_uses_memory_backend(self, clock):
        limiter = RateLimiter(backend="memory", clock=clock)

        assert limiter.backend_name == "memory"
        assert isinstance(limiter._backend, MemoryBackend)

    def test_uses_redis_backend(self, clock):
        limiter = RateLimiter(backend="redis", clock=clock)

        assert limiter.backend_name == "redis"
        assert isinstance(limiter._backend, RedisBackend)

    def test_defaults_to_configured_backend(self):
        with patch("app.core.services.rate_limit.settings") as mock_settings:
            mock_settings.RATE_LIMIT_BACKEND = "memory"
            limiter = RateLimiter()

        assert limiter.backend_name == "memory"

    async def test_delegates_to_backend(self, rate_limiter, clock):
        for _ in range(5):
            assert (await rate_limiter.check("key", 5, 3600)).allowed is True

        assert (await rate_limiter.check("key", 5, 3600)).allowed is False
        assert await rate_limiter.get_remaining("key", 5, 3600) == 0

        await rate_limiter.reset("key")
        assert await rate_limiter.get_remaining("key", 5, 3600) == 5
        assert await rate_limiter.ping() is True


class TestFormatRateLimitKey:

    def test_format_rate_limit_key(self):
        assert format_rate_limit_key("quote", "192.168.1.1") == "rate_limit:quote:192.168.1.1"
