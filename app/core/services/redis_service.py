"""
Redis client used for shared rate limit counters.

Only needed when RATE_LIMIT_BACKEND is "redis", so several API processes
count submissions from the same client together.
"""

from __future__ import annotations

from redis.asyncio import Redis

from app.core.config import redis_logger, settings


class RedisService:
    """
    Process-wide async Redis client.

    Every operation returns a neutral value (None/False) when the client is
    missing or Redis fails, and logs the problem; callers decide how to
    degrade.

    Example:
        >>> await RedisService.init("redis://localhost:6379/0")
        >>> await RedisService.rate_limit_incr("rate_limit:quote:10.0.0.1", 3600)
        (1, 3600)
        >>> await RedisService.aclose()
    """

    _client: Redis | None = None
    _url: str = settings.REDIS_URL

    # INCR, start the window on the first hit, and read the TTL in one round trip
    _RATE_LIMIT_SCRIPT = """
    local count = redis.call('INCR', KEYS[1])
    if count == 1 then
        redis.call('EXPIRE', KEYS[1], ARGV[1])
    end
    local ttl = redis.call('TTL', KEYS[1])
    return {count, ttl}
    """

    @classmethod
    async def init(cls, url: str | None = None) -> None:
        """
        Create the Redis client, replacing any existing one.

        Args:
            url: The Redis connection URL. If None, uses settings.REDIS_URL.
        """
        if url is not None:
            cls._url = url

        await cls.aclose()

        cls._client = Redis.from_url(cls._url, encoding="utf-8", decode_responses=True)
        redis_logger.info(f"Redis client initialized with URL: {cls._url}")

    @classmethod
    async def aclose(cls) -> None:
        """Close the Redis client. Safe to call when it was never initialized."""
        if cls._client is None:
            return

        try:
            await cls._client.aclose()
            redis_logger.info("Redis client closed successfully")
        except Exception as e:
            redis_logger.warning(f"Error closing Redis client: {str(e)}")
        finally:
            cls._client = None

    @classmethod
    async def ping(cls) -> bool:
        """
        Ping the Redis server to check connectivity.

        Returns:
            bool: True if ping succeeds, False otherwise.
        """
        if cls._client is None:
            redis_logger.warning("Redis ping attempted but client not initialized")
            return False

        try:
            return bool(await cls._client.ping())  # type: ignore[misc]
        except Exception as e:
            redis_logger.error(f"Redis ping failed: {str(e)}")
            return False

    @classmethod
    async def get(cls, key: str) -> str | None:
        if cls._client is None:
            redis_logger.warning(f"Redis get({key}) attempted but client not initialized")
            return None

        try:
            return await cls._client.get(key)
        except Exception as e:
            redis_logger.error(f"Redis get({key}) failed: {str(e)}")
            return None

    @classmethod
    async def delete(cls, key: str) -> bool:
        if cls._client is None:
            redis_logger.warning(
                f"Redis delete({key}) attempted but client not initialized"
            )
            return False

        try:
            return bool(await cls._client.delete(key))
        except Exception as e:
            redis_logger.error(f"Redis delete({key}) failed: {str(e)}")
            return False

    @classmethod
    async def rate_limit_incr(
        cls, key: str, window_seconds: int
    ) -> tuple[int, int] | None:
        """
        Count one hit against a fixed-window counter.

        Args:
            key: The rate limit key.
            window_seconds: Window length, applied when the counter is created.

        Returns:
            Tuple of (count, ttl) or None if Redis is unavailable.
        """
        if cls._client is None:
            redis_logger.warning(
                f"Redis rate_limit_incr({key}) attempted but client not initialized"
            )
            return None

        try:
            result = await cls._client.eval(  # type: ignore[misc]
                cls._RATE_LIMIT_SCRIPT,
                1,
                key,
                str(int(window_seconds)),
            )
            return int(result[0]), int(result[1])
        except Exception as e:
            redis_logger.error(f"Redis rate_limit_incr({key}) failed: {str(e)}")
            return None


__all__ = ["RedisService"]
