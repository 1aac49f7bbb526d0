from typing import Optional
import logging
from redis import asyncio as aioredis
from vetconnect.core.config import settings

logger = logging.getLogger(__name__)


class RedisCache:
    """Fail-open string cache for geocoding lookups.

    Every Redis error is logged and treated as a miss, so a dead cache only
    costs an extra Nominatim call.
    """

    def __init__(self, redis_url: Optional[str] = None, prefix: str = "vetconnect:"):
        self.redis_url = redis_url or settings.REDIS_URL
        self.prefix = prefix
        self.redis: Optional[aioredis.Redis] = None

    def _key(self, key: str) -> str:
        return f"{self.prefix}{key}"

    async def connect(self):
        if self.redis is None:
            self.redis = aioredis.from_url(self.redis_url, encoding="utf-8", decode_responses=True)

    async def get(self, key: str) -> Optional[str]:
        try:
            await self.connect()
            return await self.redis.get(self._key(key))
        except Exception as e:
            logger.error(f"Redis get error for key {key}: {e}")
            return None

    async def set(self, key: str, value: str, ttl: int = 3600) -> None:
        try:
            await self.connect()
            await self.redis.set(self._key(key), value, ex=ttl)
        except Exception as e:
            logger.error(f"Redis set error for key {key}: {e}")

    async def ping(self) -> bool:
        try:
            await self.connect()
            return bool(await self.redis.ping())
        except Exception as e:
            logger.warning(f"Redis ping failed: {e}")
            return False

    async def close(self):
        if self.redis is not None:
            await self.redis.aclose()
            self.redis = None


# Singleton instance
redis_cache = RedisCache()
