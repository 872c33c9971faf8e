"""Cart store - in-memory cart mirrored to a durable key-value store.

Every mutation updates memory first, so readers see it immediately, then
writes the full snapshot under one storage key. Writes are queued behind a
lock and land in the order the operations were called.

Callers should await hydrate() (or build the store with CartStore.open())
before mutating: a mutation issued while hydration is still running races
with it and the loaded snapshot may overwrite it.
"""
from __future__ import annotations

import asyncio
import logging
from collections.abc import Callable

from gomarketplace.core.constants import (
    CART_STORAGE_KEY,
    CART_WRITE_ATTEMPTS,
    CART_WRITE_INITIAL_DELAY,
)
from gomarketplace.core.exceptions import StorageWriteFailure, UsageError
from gomarketplace.core.retry import run_with_retry
from gomarketplace.domain.entities.line_item import (
    CandidateLike,
    LineItem,
    coerce_candidate,
    dump_snapshot,
    parse_snapshot,
)
from gomarketplace.integrations.kv_store import BaseKeyValueStore

logger = logging.getLogger(__name__)

CartSnapshot = tuple[LineItem, ...]
Listener = Callable[[CartSnapshot], None]


class CartStore:
    """Ordered cart of line items, unique by product id, persisted on every change."""

    def __init__(
        self,
        store: BaseKeyValueStore,
        storage_key: str = CART_STORAGE_KEY,
        write_attempts: int = CART_WRITE_ATTEMPTS,
        retry_delay: float = CART_WRITE_INITIAL_DELAY,
        owns_store: bool = False,
    ):
        self._store = store
        self._key = storage_key
        self._write_attempts = write_attempts
        self._retry_delay = retry_delay
        self._owns_store = owns_store

        self._products: CartSnapshot = ()
        self._listeners: list[Listener] = []
        self._write_lock = asyncio.Lock()
        self._hydrate_lock = asyncio.Lock()
        self._hydrated = False
        self._closed = False

    @classmethod
    async def open(cls, store: BaseKeyValueStore, **kwargs) -> CartStore:
        """Create a cart and load its persisted snapshot.

        The cart is closed again if hydration fails.
        """
        cart = cls(store, **kwargs)
        try:
            await cart.hydrate()
        except Exception:
            await cart.close()
            raise
        return cart

    # ------------------------------------------------------------------
    # Read surface
    # ------------------------------------------------------------------

    @property
    def products(self) -> CartSnapshot:
        """Current line items; a new tuple after each change."""
        self._ensure_open()
        return self._products

    @property
    def storage_key(self) -> str:
        return self._key

    @property
    def is_ready(self) -> bool:
        return self._hydrated

    @property
    def closed(self) -> bool:
        return self._closed

    def on_change(self, listener: Listener) -> Callable[[], None]:
        """Call ``listener(snapshot)`` after every change. Returns an unsubscribe function."""
        self._ensure_open()
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    async def hydrate(self) -> CartSnapshot:
        """Replace the in-memory cart with the stored snapshot, once.

        Raises:
            CorruptPersistedData: stored value is unreadable. The cart is left
                as it was and hydrate() may be retried.
        """
        self._ensure_open()
        async with self._hydrate_lock:
            if self._hydrated:
                logger.debug(f"Cart {self._key!r} already hydrated")
                return self._products

            raw = await self._store.get(self._key)
            if raw:
                self._replace(parse_snapshot(raw, self._key))
                logger.info(f"Hydrated cart {self._key!r} with {len(self._products)} line(s)")
            else:
                logger.info(f"No stored cart under {self._key!r}, starting empty")
            self._hydrated = True
            return self._products

    async def close(self) -> None:
        """End the cart's lifetime after pending writes finish."""
        if self._closed:
            return
        self._closed = True
        async with self._write_lock:
            pass
        self._listeners.clear()
        if self._owns_store:
            await self._store.close()
        logger.debug(f"Cart {self._key!r} closed")

    # ------------------------------------------------------------------
    # Mutations
    # ------------------------------------------------------------------

    async def add_to_cart(self, item: CandidateLike) -> LineItem:
        """Add one unit of a product: new line at the end, or +1 on its existing line."""
        self._ensure_open()
        candidate = coerce_candidate(item)
        products = list(self._products)
        index = self._index_of(candidate.id)

        if index >= 0:
            line = products[index].with_quantity(products[index].quantity + 1)
            products[index] = line
        else:
            line = LineItem.from_candidate(candidate)
            products.append(line)

        self._replace(tuple(products))
        logger.info(f"Added product {line.id} to cart, qty={line.quantity}")
        await self._persist()
        return line

    async def increment(self, product_id: str) -> bool:
        """Add one unit to an existing line. Returns False if the id is not in the cart."""
        self._ensure_open()
        index = self._index_of(product_id)
        if index < 0:
            logger.debug(f"increment ignored: product {product_id} not in cart")
            return False

        products = list(self._products)
        products[index] = products[index].with_quantity(products[index].quantity + 1)
        self._replace(tuple(products))
        logger.info(f"Incremented product {product_id}, qty={products[index].quantity}")
        await self._persist()
        return True

    async def decrement(self, product_id: str) -> bool:
        """Remove one unit; the line disappears when its last unit goes.

        Returns False if the id is not in the cart.
        """
        self._ensure_open()
        index = self._index_of(product_id)
        if index < 0:
            logger.debug(f"decrement ignored: product {product_id} not in cart")
            return False

        products = list(self._products)
        current = products[index]
        if current.quantity == 1:
            del products[index]
            logger.info(f"Removed product {product_id} from cart")
        else:
            products[index] = current.with_quantity(current.quantity - 1)
            logger.info(f"Decremented product {product_id}, qty={current.quantity - 1}")

        self._replace(tuple(products))
        await self._persist()
        return True

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _ensure_open(self) -> None:
        if self._closed:
            raise UsageError("Cart store is closed; use it within its provider scope")

    def _index_of(self, product_id: str) -> int:
        for index, item in enumerate(self._products):
            if item.id == product_id:
                return index
        return -1

    def _replace(self, products: CartSnapshot) -> None:
        self._products = products
        for listener in list(self._listeners):
            try:
                listener(products)
            except Exception:
                logger.exception(f"Cart listener {listener!r} failed")

    async def _persist(self) -> None:
        # Captured before waiting on the lock: each write carries its own mutation.
        payload = dump_snapshot(self._products)
        async with self._write_lock:
            try:
                await run_with_retry(
                    lambda: self._store.set(self._key, payload),
                    max_attempts=self._write_attempts,
                    initial_delay=self._retry_delay,
                    name=f"Cart write {self._key!r}",
                )
            except Exception as e:
                logger.error(
                    f"Cart {self._key!r} not persisted, storage is behind memory until the next write: {e}"
                )
                raise StorageWriteFailure(self._key, str(e)) from e
