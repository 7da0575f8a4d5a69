"""
Rate limiting service with configurable backends.

Submissions are counted per (form type, client address) in fixed windows.
The in-memory backend keeps counters in process memory and takes an
injectable clock; the Redis backend shares counters between processes.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Callable, Literal

from app.core.config import rate_limit_logger, settings
from app.core.services.redis_service import RedisService

Clock = Callable[[], datetime]


def utc_clock() -> datetime:
    return datetime.now(timezone.utc)


@dataclass
class RateLimitResult:
    """
    Result of a rate limit check.

    Attributes:
        allowed: Whether the request is allowed.
        remaining: Number of remaining requests in the current window.
        limit: The maximum number of requests allowed.
        reset_at: When the rate limit window resets.
        retry_after: Seconds until the client can retry (only if not allowed).
    """

    allowed: bool
    remaining: int
    limit: int
    reset_at: datetime
    retry_after: int | None = None


class RateLimitBackend(ABC):
    """Storage for rate limit counters."""

    @abstractmethod
    async def check(self, key: str, limit: int, window: float) -> RateLimitResult:
        """
        Count one request against the key and report whether it is allowed.

        Args:
            key: The rate limit key (e.g., "rate_limit:quote:192.168.1.1").
            limit: Maximum number of requests allowed in the window.
            window: Window length in seconds.

        Returns:
            RateLimitResult with the check outcome.
        """

    @abstractmethod
    async def reset(self, key: str) -> None:
        """Forget the counter for a key."""

    @abstractmethod
    async def get_remaining(self, key: str, limit: int, window: float) -> int:
        """Number of requests the key may still make in its current window."""

    async def ping(self) -> bool:
        return True


class MemoryBackend(RateLimitBackend):
    """
    In-memory fixed-window counters.

    A window opens with the first request for a key and lasts ``window``
    seconds; a request at or after ``reset_at`` opens a new one. Denied
    requests are not counted. Expired counters are dropped during ``check``
    once the earliest window has ended, at most every ``purge_interval``
    seconds.

    Note:
        Counters are lost on restart and are not shared between processes.
    """

    def __init__(self, clock: Clock | None = None, purge_interval: float = 60):
        self._clock: Clock = clock or utc_clock
        self._store: dict[str, tuple[int, datetime]] = {}
        self._purge_interval = timedelta(seconds=purge_interval)
        self._next_expiry: datetime | None = None
        self._last_purge: datetime | None = None

    def _open_window(self, key: str, limit: int, window: float) -> RateLimitResult:
        reset_at = self._clock() + timedelta(seconds=window)
        self._store[key] = (1, reset_at)
        if self._next_expiry is None or reset_at < self._next_expiry:
            self._next_expiry = reset_at
        return RateLimitResult(
            allowed=True,
            remaining=limit - 1,
            limit=limit,
            reset_at=reset_at,
        )

    def _purge_due(self, now: datetime) -> bool:
        if self._next_expiry is None or now < self._next_expiry:
            return False
        return self._last_purge is None or now >= self._last_purge + self._purge_interval

    async def check(self, key: str, limit: int, window: float) -> RateLimitResult:
        now = self._clock()

        if self._purge_due(now):
            self.purge_expired()

        if key not in self._store:
            rate_limit_logger.debug(f"New rate limit entry created for key: {key}")
            return self._open_window(key, limit, window)

        count, reset_at = self._store[key]

        if now >= reset_at:
            rate_limit_logger.debug(f"Rate limit window reset for key: {key}")
            return self._open_window(key, limit, window)

        if count >= limit:
            retry_after = int((reset_at - now).total_seconds())
            rate_limit_logger.warning(
                f"Rate limit exceeded for key: {key}, retry after: {retry_after}s"
            )
            return RateLimitResult(
                allowed=False,
                remaining=0,
                limit=limit,
                reset_at=reset_at,
                retry_after=max(1, retry_after),
            )

        self._store[key] = (count + 1, reset_at)
        remaining = limit - count - 1
        rate_limit_logger.debug(
            f"Rate limit check passed for key: {key}, remaining: {remaining}"
        )
        return RateLimitResult(
            allowed=True,
            remaining=remaining,
            limit=limit,
            reset_at=reset_at,
        )

    async def reset(self, key: str) -> None:
        if self._store.pop(key, None) is not None:
            rate_limit_logger.debug(f"Rate limit reset for key: {key}")

    async def get_remaining(self, key: str, limit: int, window: float) -> int:
        if key not in self._store:
            return limit

        count, reset_at = self._store[key]
        if self._clock() >= reset_at:
            return limit

        return max(0, limit - count)

    def purge_expired(self) -> int:
        """
        Drop counters whose window has ended.

        Returns:
            Number of keys removed.
        """
        now = self._clock()
        expired = [key for key, (_, reset_at) in self._store.items() if now >= reset_at]
        for key in expired:
            del self._store[key]
        self._next_expiry = min(
            (reset_at for _, reset_at in self._store.values()), default=None
        )
        self._last_purge = now
        if expired:
            rate_limit_logger.debug(f"Purged {len(expired)} expired rate limit keys")
        return len(expired)


class RedisBackend(RateLimitBackend):
    """
    Redis fixed-window counters shared by every API process.

    If Redis is unreachable the request is allowed and a warning is logged;
    rate limiting is abuse mitigation, not an access control.
    """

    def __init__(self, clock: Clock | None = None):
        self._clock: Clock = clock or utc_clock

    async def check(self, key: str, limit: int, window: float) -> RateLimitResult:
        now = self._clock()
        outcome = await RedisService.rate_limit_incr(key, int(window))

        if outcome is None:
            rate_limit_logger.warning(
                f"Redis error during rate limit check for key: {key}, allowing request"
            )
            return RateLimitResult(
                allowed=True,
                remaining=limit - 1,
                limit=limit,
                reset_at=now + timedelta(seconds=window),
            )

        count, ttl = outcome
        if ttl < 0:
            ttl = int(window)
        reset_at = now + timedelta(seconds=ttl)

        if count > limit:
            rate_limit_logger.warning(
                f"Rate limit exceeded for key: {key}, count: {count}, retry after: {ttl}s"
            )
            return RateLimitResult(
                allowed=False,
                remaining=0,
                limit=limit,
                reset_at=reset_at,
                retry_after=max(1, ttl),
            )

        return RateLimitResult(
            allowed=True,
            remaining=limit - count,
            limit=limit,
            reset_at=reset_at,
        )

    async def reset(self, key: str) -> None:
        await RedisService.delete(key)
        rate_limit_logger.debug(f"Rate limit reset for key: {key}")

    async def get_remaining(self, key: str, limit: int, window: float) -> int:
        value = await RedisService.get(key)
        if value is None:
            return limit

        try:
            return max(0, limit - int(value))
        except ValueError:
            return limit

    async def ping(self) -> bool:
        return await RedisService.ping()


class RateLimiter:
    """
    Rate limiter with configurable backend.

    One instance is shared by the whole application so counters survive
    between requests.

    Args:
        backend: The backend to use ("memory" or "redis").
                 If None, uses settings.RATE_LIMIT_BACKEND.
        clock: Returns the current UTC time. Defaults to the system clock.

    Example:
        >>> limiter = RateLimiter(backend="memory")
        >>> result = await limiter.check("rate_limit:quote:10.0.0.1", limit=5, window=3600)
        >>> result.allowed
        True
    """

    def __init__(
        self,
        backend: Literal["memory", "redis"] | None = None,
        clock: Clock | None = None,
    ):
        if backend is None:
            backend = settings.RATE_LIMIT_BACKEND

        if backend == "redis":
            self._backend: RateLimitBackend = RedisBackend(clock=clock)
        else:
            self._backend = MemoryBackend(clock=clock)

        self.backend_name = backend
        rate_limit_logger.debug(f"RateLimiter initialized with {backend} backend")

    async def check(self, key: str, limit: int, window: float) -> RateLimitResult:
        return await self._backend.check(key, limit, window)

    async def reset(self, key: str) -> None:
        await self._backend.reset(key)

    async def get_remaining(self, key: str, limit: int, window: float) -> int:
        return await self._backend.get_remaining(key, limit, window)

    async def ping(self) -> bool:
        return await self._backend.ping()


def format_rate_limit_key(scope: str, identifier: str) -> str:
    """
    Format a rate limit key with consistent structure.

    Args:
        scope: What is being limited (e.g., a form type).
        identifier: Who is being limited (e.g., a client IP address).

    Returns:
        Formatted rate limit key string.

    Example:
        >>> format_rate_limit_key("quote", "192.168.1.1")
        'rate_limit:quote:192.168.1.1'
    """
    return f"rate_limit:{scope}:{identifier}"


__all__ = [
    "Clock",
    "RateLimitResult",
    "RateLimitBackend",
    "MemoryBackend",
    "RedisBackend",
    "RateLimiter",
    "format_rate_limit_key",
    "utc_clock",
]
