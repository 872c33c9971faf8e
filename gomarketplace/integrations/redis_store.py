"""Redis-backed key-value store for the cart snapshot."""
from __future__ import annotations

import logging
from typing import Any

import redis.asyncio as aioredis

from gomarketplace.core.constants import REDIS_SOCKET_TIMEOUT_SECONDS
from gomarketplace.integrations.kv_store import BaseKeyValueStore

logger = logging.getLogger(__name__)


class RedisKeyValueStore(BaseKeyValueStore):
    """
    Redis store backend.

    The connection is created lazily on first use; keys are namespaced with
    an optional prefix so several apps can share one database.
    """

    def __init__(self, redis_url: str, prefix: str = ""):
        self._redis_url = redis_url
        self._prefix = prefix
        self._redis: Any = None

    def _ensure_connected(self) -> Any:
        if self._redis is None:
            self._redis = aioredis.from_url(
                self._redis_url,
                encoding="utf-8",
                decode_responses=True,
                socket_connect_timeout=REDIS_SOCKET_TIMEOUT_SECONDS,
                socket_timeout=REDIS_SOCKET_TIMEOUT_SECONDS,
            )
            logger.info("Redis cart storage enabled")
        return self._redis

    def _make_key(self, key: str) -> str:
        """Add prefix to key."""
        return f"{self._prefix}{key}"

    async def get(self, key: str) -> str | None:
        client = self._ensure_connected()
        value = await client.get(self._make_key(key))
        if isinstance(value, bytes):
            value = value.decode("utf-8")
        return value

    async def set(self, key: str, value: str) -> None:
        client = self._ensure_connected()
        await client.set(self._make_key(key), value)

    async def close(self) -> None:
        """Close Redis connection."""
        if self._redis is not None:
            await self._redis.aclose()
            self._redis = None
