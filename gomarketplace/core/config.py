"""Environment-driven configuration objects for the cart."""
from __future__ import annotations

import os
from dataclasses import dataclass

from dotenv import load_dotenv

from gomarketplace.core.constants import (
    CART_STORAGE_KEY,
    CART_WRITE_ATTEMPTS,
    DEFAULT_LOG_LEVEL,
    DEFAULT_STORAGE_PATH,
    STORAGE_BACKEND_FILE,
    STORAGE_BACKEND_MEMORY,
    STORAGE_BACKEND_REDIS,
    STORAGE_BACKENDS,
)
from gomarketplace.core.exceptions import ConfigurationException


@dataclass(slots=True)
class StorageConfig:
    backend: str
    path: str
    redis_url: str | None
    redis_key_prefix: str


@dataclass(slots=True)
class Settings:
    storage: StorageConfig
    cart_storage_key: str
    write_attempts: int
    log_level: str


def _detect_backend(path: str | None, redis_url: str | None) -> str:
    # CART_STORAGE_PATH wins over REDIS_URL
    if path:
        return STORAGE_BACKEND_FILE
    if redis_url:
        return STORAGE_BACKEND_REDIS
    return STORAGE_BACKEND_MEMORY


def load_settings() -> Settings:
    """Load environment variables once and expose typed settings."""
    load_dotenv()

    storage_path = os.getenv("CART_STORAGE_PATH")
    redis_url = os.getenv("REDIS_URL") or None

    backend = (os.getenv("CART_STORAGE_BACKEND") or "").strip().lower()
    if not backend:
        backend = _detect_backend(storage_path, redis_url)
    if backend not in STORAGE_BACKENDS:
        raise ConfigurationException(
            f"CART_STORAGE_BACKEND must be one of {', '.join(STORAGE_BACKENDS)}, got {backend!r}"
        )
    if backend == STORAGE_BACKEND_REDIS and not redis_url:
        raise ConfigurationException("CART_STORAGE_BACKEND=redis requires REDIS_URL")

    raw_attempts = os.getenv("CART_WRITE_ATTEMPTS", str(CART_WRITE_ATTEMPTS))
    try:
        write_attempts = int(raw_attempts)
    except ValueError:
        raise ConfigurationException(f"CART_WRITE_ATTEMPTS is not an integer: {raw_attempts!r}")
    if write_attempts < 1:
        raise ConfigurationException("CART_WRITE_ATTEMPTS must be at least 1")

    storage_key = os.getenv("CART_STORAGE_KEY") or CART_STORAGE_KEY

    storage = StorageConfig(
        backend=backend,
        path=storage_path or DEFAULT_STORAGE_PATH,
        redis_url=redis_url,
        redis_key_prefix=os.getenv("REDIS_KEY_PREFIX", ""),
    )

    return Settings(
        storage=storage,
        cart_storage_key=storage_key,
        write_attempts=write_attempts,
        log_level=os.getenv("LOG_LEVEL", DEFAULT_LOG_LEVEL),
    )
