from __future__ import annotations

import json
import logging

import pytest

from gomarketplace.core.bootstrap import build_cart_store, create_store, open_cart
from gomarketplace.core.config import Settings, StorageConfig
from gomarketplace.core.exceptions import ConfigurationException, CorruptPersistedData
from gomarketplace.core.logging_config import setup_logging
from gomarketplace.integrations.kv_store import JsonFileKeyValueStore, MemoryKeyValueStore
from gomarketplace.integrations.redis_store import RedisKeyValueStore


def _settings(backend: str, path: str = "storage.json", redis_url: str | None = None) -> Settings:
    return Settings(
        storage=StorageConfig(backend=backend, path=path, redis_url=redis_url, redis_key_prefix="p:"),
        cart_storage_key="@Test:products",
        write_attempts=2,
        log_level="WARNING",
    )


def test_create_store_per_backend(tmp_path) -> None:
    assert isinstance(create_store(_settings("memory")), MemoryKeyValueStore)
    assert isinstance(create_store(_settings("file", str(tmp_path / "s.json"))), JsonFileKeyValueStore)
    assert isinstance(create_store(_settings("redis", redis_url="redis://fake")), RedisKeyValueStore)


def test_create_store_rejects_redis_without_url() -> None:
    with pytest.raises(ConfigurationException):
        create_store(_settings("redis", redis_url=None))


def test_build_cart_store_applies_settings() -> None:
    cart = build_cart_store(_settings("memory"))

    assert cart.storage_key == "@Test:products"
    assert not cart.is_ready


@pytest.mark.asyncio
async def test_open_cart_hydrates_from_file(tmp_path) -> None:
    path = tmp_path / "storage.json"
    path.write_text(
        json.dumps({"@Test:products": json.dumps([{"id": "7", "title": "Tea", "price": 2.5, "quantity": 2}])}),
        encoding="utf-8",
    )

    cart = await open_cart(_settings("file", str(path)))

    assert cart.is_ready
    assert [(item.id, item.quantity) for item in cart.products] == [("7", 2)]
    await cart.close()


@pytest.mark.asyncio
async def test_open_cart_closes_on_corrupt_snapshot(tmp_path) -> None:
    path = tmp_path / "storage.json"
    path.write_text(json.dumps({"@Test:products": "[{]"}), encoding="utf-8")

    with pytest.raises(CorruptPersistedData):
        await open_cart(_settings("file", str(path)))


def test_setup_logging_accepts_level_names() -> None:
    logger = setup_logging("debug")
    assert logger.level == logging.DEBUG

    logger = setup_logging("not-a-level")
    assert logger.level == logging.INFO


@pytest.mark.asyncio
async def test_open_cart_rejects_redis_without_url() -> None:
    with pytest.raises(ConfigurationException):
        await open_cart(_settings("redis"))
