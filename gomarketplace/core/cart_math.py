"""Shared helpers for cart totals and quantities."""
from __future__ import annotations

from collections.abc import Iterable

from gomarketplace.domain.entities.line_item import LineItem


def line_total(item: LineItem) -> float:
    return round(item.price * item.quantity, 2)


def cart_total(items: Iterable[LineItem]) -> float:
    """Sum of price * quantity over the cart, rounded to cents."""
    return round(sum(line_total(item) for item in items), 2)


def cart_count(items: Iterable[LineItem]) -> int:
    return sum(item.quantity for item in items)
