"""Domain package."""

from .entities import LineItem, ProductCandidate

__all__ = [
    # Entities
    "ProductCandidate",
    "LineItem",
]
