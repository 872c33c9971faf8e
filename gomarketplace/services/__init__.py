"""Services package - cart state and its scope."""

from gomarketplace.services.cart_context import cart_provider, use_cart
from gomarketplace.services.cart_store import CartSnapshot, CartStore

__all__ = [
    "CartStore",
    "CartSnapshot",
    "cart_provider",
    "use_cart",
]
