"""
Unit tests for RedisService.

The Redis client is mocked; no server is needed.
"""

from unittest.mock import AsyncMock, patch

import pytest

from app.core.services.redis_service import RedisService


@pytest.fixture
async def redis_client():
    """Install a mocked client on RedisService and remove it afterwards."""
    mock_client = AsyncMock()
    RedisService._client = mock_client
    yield mock_client
    RedisService._client = None


class TestRedisServiceInit:

    async def test_init_success(self):
        with patch("app.core.services.redis_service.Redis") as mock_redis_class:
            mock_redis_class.from_url.return_value = AsyncMock()

            await RedisService.init("redis://localhost:6379/0")

            mock_redis_class.from_url.assert_called_once_with(
                "redis://localhost:6379/0", encoding="utf-8", decode_responses=True
            )
            assert RedisService._client is not None

        await RedisService.aclose()
        assert RedisService._client is None

    async def test_init_closes_existing_connection(self):
        with patch("app.core.services.redis_service.Redis") as mock_redis_class:
            first_client = AsyncMock()
            mock_redis_class.from_url.side_effect = [first_client, AsyncMock()]

            await RedisService.init("redis://localhost:6379/0")
            await RedisService.init("redis://localhost:6379/1")

            first_client.aclose.assert_awaited_once()

        await RedisService.aclose()

    async def test_aclose_without_client_is_noop(self):
        RedisService._client = None
        await RedisService.aclose()
        assert RedisService._client is None

    async def test_aclose_swallows_close_errors(self, redis_client):
        redis_client.aclose.side_effect = ConnectionError("gone")

        await RedisService.aclose()

        assert RedisService._client is None


class TestRedisServiceOperations:

    async def test_ping(self, redis_client):
        redis_client.ping.return_value = True
        assert await RedisService.ping() is True

    async def test_ping_failure(self, redis_client):
        redis_client.ping.side_effect = ConnectionError("refused")
        assert await RedisService.ping() is False

    async def test_operations_without_client(self):
        RedisService._client = None

        assert await RedisService.ping() is False
        assert await RedisService.get("key") is None
        assert await RedisService.delete("key") is False
        assert await RedisService.rate_limit_incr("key", 3600) is None

    async def test_get(self, redis_client):
        redis_client.get.return_value = "3"
        assert await RedisService.get("key") == "3"

    async def test_delete(self, redis_client):
        redis_client.delete.return_value = 1
        assert await RedisService.delete("key") is True

    async def test_rate_limit_incr(self, redis_client):
        redis_client.eval.return_value = [1, 3600]

        result = await RedisService.rate_limit_incr("rate_limit:quote:10.0.0.1", 3600)

        assert result == (1, 3600)
        args = redis_client.eval.await_args.args
        assert args[1:] == (1, "rate_limit:quote:10.0.0.1", "3600")

    async def test_rate_limit_incr_failure(self, redis_client):
        redis_client.eval.side_effect = ConnectionError("refused")

        assert await RedisService.rate_limit_incr("key", 3600) is None
