from app.core.services.rate_limit import (
    MemoryBackend,
    RateLimitBackend,
    RateLimiter,
    RateLimitResult,
    RedisBackend,
    format_rate_limit_key,
)
from app.core.services.redis_service import RedisService

__all__ = [
    "RedisService",
    # Rate limiting
    "MemoryBackend",
    "RateLimitBackend",
    "RateLimiter",
    "RateLimitResult",
    "RedisBackend",
    "format_rate_limit_key",
]
