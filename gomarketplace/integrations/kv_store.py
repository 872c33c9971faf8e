"""
Durable key-value stores for the cart snapshot.

Backends:
- MemoryKeyValueStore: process-local, lost on restart (tests, previews)
- JsonFileKeyValueStore: single JSON file on disk, survives restarts
- RedisKeyValueStore (see redis_store): shared Redis instance

Values are opaque strings; the cart only ever reads and writes one key.
"""
from __future__ import annotations

import asyncio
import json
import logging
import os
import tempfile
from abc import ABC, abstractmethod
from pathlib import Path

logger = logging.getLogger(__name__)


class BaseKeyValueStore(ABC):
    """Abstract async key -> string store."""

    @abstractmethod
    async def get(self, key: str) -> str | None:
        """Get value for key, None if absent."""
        pass

    @abstractmethod
    async def set(self, key: str, value: str) -> None:
        """Store value under key, replacing any previous value."""
        pass

    async def close(self) -> None:
        """Release backend resources."""
        return None


class MemoryKeyValueStore(BaseKeyValueStore):
    """In-memory store. State is lost when the process exits."""

    def __init__(self, initial: dict[str, str] | None = None):
        self._data: dict[str, str] = dict(initial or {})

    async def get(self, key: str) -> str | None:
        return self._data.get(key)

    async def set(self, key: str, value: str) -> None:
        self._data[key] = value


class JsonFileKeyValueStore(BaseKeyValueStore):
    """
    Key-value store kept in one JSON object file.

    Every write rewrites the whole file through a temp file and an atomic
    rename, so a crash mid-write leaves the previous content intact.
    Disk I/O runs in a worker thread to keep the event loop free.
    """

    def __init__(self, path: str | os.PathLike[str]):
        self._path = Path(path)
        self._lock = asyncio.Lock()

    @property
    def path(self) -> Path:
        return self._path

    def _read_all(self) -> dict[str, str]:
        if not self._path.exists():
            return {}
        text = self._path.read_text(encoding="utf-8").strip()
        if not text:
            return {}
        data = json.loads(text)
        if not isinstance(data, dict):
            raise ValueError(f"{self._path} does not hold a JSON object")
        return data

    def _write_all(self, data: dict[str, str]) -> None:
        self._path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp_name = tempfile.mkstemp(
            prefix=f".{self._path.name}.", suffix=".tmp", dir=self._path.parent
        )
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                json.dump(data, f, indent=2, ensure_ascii=False)
            os.replace(tmp_name, self._path)
        except BaseException:
            Path(tmp_name).unlink(missing_ok=True)
            raise

    async def get(self, key: str) -> str | None:
        async with self._lock:
            data = await asyncio.to_thread(self._read_all)
        value = data.get(key)
        if value is not None and not isinstance(value, str):
            raise ValueError(f"Value under {key!r} in {self._path} is not a string")
        return value

    async def set(self, key: str, value: str) -> None:
        async with self._lock:
            data = await asyncio.to_thread(self._read_all)
            data[key] = value
            await asyncio.to_thread(self._write_all, data)
        logger.debug(f"Stored {len(value)} chars under {key!r} in {self._path}")
