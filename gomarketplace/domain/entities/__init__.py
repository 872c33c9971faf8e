"""Domain entities package."""

from .line_item import LineItem, ProductCandidate, dump_snapshot, parse_snapshot

__all__ = [
    "ProductCandidate",
    "LineItem",
    "dump_snapshot",
    "parse_snapshot",
]
