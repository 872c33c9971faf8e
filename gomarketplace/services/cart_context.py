"""Scoped access to the active cart store.

The composition root normally hands a CartStore to whatever needs it.
Code that cannot be given one directly looks it up with use_cart(), which
only works inside a cart_provider() block.
"""
from __future__ import annotations

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from contextvars import ContextVar

from gomarketplace.core.exceptions import UsageError
from gomarketplace.integrations.kv_store import BaseKeyValueStore
from gomarketplace.services.cart_store import CartStore

_current_cart: ContextVar[CartStore | None] = ContextVar("current_cart", default=None)


@asynccontextmanager
async def cart_provider(store: BaseKeyValueStore, **kwargs) -> AsyncIterator[CartStore]:
    """Open and hydrate a cart, bind it for use_cart(), close it on exit."""
    cart = await CartStore.open(store, **kwargs)
    token = _current_cart.set(cart)
    try:
        yield cart
    finally:
        _current_cart.reset(token)
        await cart.close()


def use_cart() -> CartStore:
    """Return the cart bound by the enclosing cart_provider()."""
    cart = _current_cart.get()
    if cart is None or cart.closed:
        raise UsageError("use_cart must be used within a cart_provider")
    return cart
