"""Application bootstrap wiring settings, storage backend and cart store."""
from __future__ import annotations

import logging

from gomarketplace.core.config import Settings
from gomarketplace.core.constants import STORAGE_BACKEND_FILE, STORAGE_BACKEND_REDIS
from gomarketplace.core.exceptions import ConfigurationException
from gomarketplace.core.logging_config import setup_logging
from gomarketplace.integrations.kv_store import (
    BaseKeyValueStore,
    JsonFileKeyValueStore,
    MemoryKeyValueStore,
)
from gomarketplace.integrations.redis_store import RedisKeyValueStore
from gomarketplace.services.cart_store import CartStore

logger = logging.getLogger(__name__)


def create_store(settings: Settings) -> BaseKeyValueStore:
    """Create the durable store backend named by the settings."""
    storage = settings.storage

    # Priority 1: Redis (shared between app instances)
    if storage.backend == STORAGE_BACKEND_REDIS:
        if not storage.redis_url:
            raise ConfigurationException("Redis cart storage requires a redis_url")
        logger.info("Using Redis for cart storage")
        return RedisKeyValueStore(storage.redis_url, prefix=storage.redis_key_prefix)

    # Priority 2: JSON file (survives restarts on this machine)
    if storage.backend == STORAGE_BACKEND_FILE:
        logger.info(f"Using JSON file {storage.path} for cart storage")
        return JsonFileKeyValueStore(storage.path)

    # Priority 3: Memory (previews and tests)
    logger.warning("Using in-memory cart storage, cart will be LOST on restart")
    return MemoryKeyValueStore()


def _cart_options(settings: Settings) -> dict:
    return {
        "storage_key": settings.cart_storage_key,
        "write_attempts": settings.write_attempts,
        "owns_store": True,
    }


def build_cart_store(settings: Settings) -> CartStore:
    """Create a cart store that owns its backend. Call hydrate() before use."""
    return CartStore(create_store(settings), **_cart_options(settings))


async def open_cart(settings: Settings) -> CartStore:
    """Configure logging, then create and hydrate the cart store."""
    setup_logging(settings.log_level)
    return await CartStore.open(create_store(settings), **_cart_options(settings))
