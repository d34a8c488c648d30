"""Redis-backed store holding the single live refresh token per user."""

import logging

import redis.asyncio as redis
from redis.exceptions import RedisError

from anyhire.db.models import REFRESH_TOKEN_KEY
from anyhire.errors import StoreUnavailable

logger = logging.getLogger(__name__)

DEFAULT_TTL_SECONDS = 7 * 24 * 60 * 60

# Global Redis client
_redis_client: redis.Redis | None = None


async def connect_redis(url: str) -> redis.Redis:
    """Create the Redis client. A failed ping is logged, not fatal."""
    global _redis_client

    _redis_client = redis.from_url(url, encoding="utf-8", decode_responses=True)
    try:
        await _redis_client.ping()
        logger.info("Redis connected (%s)", url.split("@")[-1])
    except RedisError as e:
        logger.warning("Redis ping failed, continuing without a verified connection: %s", e)
    return _redis_client


async def close_redis() -> None:
    global _redis_client

    if _redis_client is not None:
        await _redis_client.aclose()
        _redis_client = None
        logger.info("Redis connection closed")


def get_redis() -> redis.Redis:
    if _redis_client is None:
        raise StoreUnavailable("Session store not initialised")
    return _redis_client


class RefreshTokenStore:
    """set/get/delete of ``refresh_token:<userId>`` with a fixed TTL.

    Failures are surfaced as StoreUnavailable so callers answer with a server
    error instead of treating the user as logged out.
    """

    def __init__(self, client: redis.Redis, ttl_seconds: int = DEFAULT_TTL_SECONDS):
        self.client = client
        self.ttl_seconds = ttl_seconds

    @staticmethod
    def key(user_id: str) -> str:
        return REFRESH_TOKEN_KEY.format(user_id=user_id)

    async def store(self, user_id: str, token: str) -> None:
        try:
            await self.client.set(self.key(user_id), token, ex=self.ttl_seconds)
        except RedisError as e:
            logger.error("refresh token store failed for user %s: %s", user_id, e)
            raise StoreUnavailable() from e

    async def fetch(self, user_id: str) -> str | None:
        try:
            return await self.client.get(self.key(user_id))
        except RedisError as e:
            logger.error("refresh token fetch failed for user %s: %s", user_id, e)
            raise StoreUnavailable() from e

    async def remove(self, user_id: str) -> None:
        try:
            await self.client.delete(self.key(user_id))
        except RedisError as e:
            logger.error("refresh token delete failed for user %s: %s", user_id, e)
            raise StoreUnavailable() from e
