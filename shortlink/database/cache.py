"""Redis lookup cache for short codes."""

import logging
from typing import Any, Awaitable, Callable, Optional

import redis.asyncio as redis
from redis.exceptions import RedisError


class RedisCache:
    """Read-through cache of code -> original URL.

    The store stays the source of truth. A cache built without a URL, or
    whose first ping failed, is disabled and every call is a no-op; a Redis
    error on a live cache is logged and treated as a miss.
    """

    KEY_PREFIX = "shortlink:code:"

    def __init__(
        self,
        redis_url: Optional[str] = None,
        ttl_seconds: int = 3600,
        logger: Optional[logging.Logger] = None,
    ):
        self.redis_url = redis_url
        self.ttl_seconds = ttl_seconds
        self.logger = logger or logging.getLogger(__name__)
        self.enabled = redis_url is not None
        self.client: Optional[redis.Redis] = None

    async def connect(self) -> None:
        """Open the client and ping it; disables the cache on failure."""
        if not self.enabled:
            return

        self.client = redis.from_url(self.redis_url, encoding="utf-8", decode_responses=True)
        try:
            await self.client.ping()
        except RedisError as e:
            self.logger.error(f"Redis unreachable, caching disabled: {e}")
            await self.client.aclose()
            self.client = None
            self.enabled = False
            return

        self.logger.info(f"Redis cache connected (ttl={self.ttl_seconds}s)")

    @property
    def live(self) -> bool:
        return self.enabled and self.client is not None

    async def _run(self, op: str, call: Callable[[], Awaitable[Any]], default: Any) -> Any:
        if not self.live:
            return default
        try:
            return await call()
        except RedisError as e:
            self.logger.error(f"Cache {op} error: {e}")
            return default

    # Raw key operations

    async def get(self, key: str) -> Optional[str]:
        return await self._run("get", lambda: self.client.get(key), None)

    async def set(self, key: str, value: str, ttl: Optional[int] = None) -> bool:
        return await self._run(
            "set", lambda: self.client.set(key, value, ex=ttl or self.ttl_seconds), False
        )

    async def delete(self, key: str) -> bool:
        removed = await self._run("delete", lambda: self.client.delete(key), 0)
        return bool(removed)

    async def ping(self) -> bool:
        """A disabled cache counts as healthy."""
        if not self.live:
            return True
        return await self._run("ping", self.client.ping, False)

    async def close(self) -> None:
        if self.client is not None:
            await self.client.aclose()
            self.client = None
            self.logger.info("Redis connection closed")

    # Short code operations

    def key_for(self, code: str) -> str:
        return f"{self.KEY_PREFIX}{code}"

    async def get_url(self, code: str) -> Optional[str]:
        return await self.get(self.key_for(code))

    async def put_url(self, code: str, original_url: str) -> bool:
        return await self.set(self.key_for(code), original_url)

    async def invalidate(self, code: str) -> bool:
        return await self.delete(self.key_for(code))
