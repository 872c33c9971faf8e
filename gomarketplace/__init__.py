"""GoMarketplace cart: in-memory cart state persisted to a key-value store."""

from gomarketplace.core.cart_math import cart_count, cart_total
from gomarketplace.core.exceptions import (
    CorruptPersistedData,
    GoMarketplaceException,
    StorageWriteFailure,
    UsageError,
)
from gomarketplace.domain.entities.line_item import LineItem, ProductCandidate
from gomarketplace.services.cart_context import cart_provider, use_cart
from gomarketplace.services.cart_store import CartStore

__all__ = [
    "CartStore",
    "LineItem",
    "ProductCandidate",
    "cart_provider",
    "use_cart",
    "cart_total",
    "cart_count",
    "GoMarketplaceException",
    "UsageError",
    "CorruptPersistedData",
    "StorageWriteFailure",
]
