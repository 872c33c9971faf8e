"""Integrations package - durable storage backends for the cart."""

from gomarketplace.integrations.kv_store import (
    BaseKeyValueStore,
    JsonFileKeyValueStore,
    MemoryKeyValueStore,
)
from gomarketplace.integrations.redis_store import RedisKeyValueStore

__all__ = [
    "BaseKeyValueStore",
    "MemoryKeyValueStore",
    "JsonFileKeyValueStore",
    "RedisKeyValueStore",
]
