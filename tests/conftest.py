"""Shared pytest fixtures for cart tests."""
from __future__ import annotations

import asyncio
import json
from dataclasses import dataclass, field

import pytest

from gomarketplace.core.constants import CART_STORAGE_KEY
from gomarketplace.integrations.kv_store import BaseKeyValueStore


@dataclass
class RecordingStore(BaseKeyValueStore):
    """In-memory store that records writes and can be told to fail them."""

    data: dict[str, str] = field(default_factory=dict)
    set_calls: list[tuple[str, str]] = field(default_factory=list)
    get_calls: list[str] = field(default_factory=list)
    failures_left: int = 0
    closed: bool = False

    async def get(self, key: str) -> str | None:
        self.get_calls.append(key)
        return self.data.get(key)

    async def set(self, key: str, value: str) -> None:
        await asyncio.sleep(0)
        self.set_calls.append((key, value))
        if self.failures_left:
            self.failures_left -= 1
            raise OSError("disk full")
        self.data[key] = value

    async def close(self) -> None:
        self.closed = True

    def stored_items(self, key: str = CART_STORAGE_KEY) -> list[dict]:
        return json.loads(self.data[key])


@pytest.fixture()
def kv_store() -> RecordingStore:
    return RecordingStore()


@pytest.fixture()
def shirt() -> dict:
    return {"id": "1", "title": "Shirt", "image_url": "https://img/shirt.png", "price": 50}


@pytest.fixture()
def mug() -> dict:
    return {"id": "2", "title": "Mug", "image_url": "https://img/mug.png", "price": 12.9}


@pytest.fixture(autouse=True)
def _clean_cart_env(monkeypatch) -> None:
    """Keep host environment out of settings tests."""
    for name in (
        "CART_STORAGE_BACKEND",
        "CART_STORAGE_PATH",
        "CART_STORAGE_KEY",
        "CART_WRITE_ATTEMPTS",
        "REDIS_URL",
        "REDIS_KEY_PREFIX",
        "LOG_LEVEL",
    ):
        monkeypatch.delenv(name, raising=False)
