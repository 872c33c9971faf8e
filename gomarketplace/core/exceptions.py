"""Custom exceptions for the GoMarketplace cart."""
from __future__ import annotations


class GoMarketplaceException(Exception):
    """Base exception for all cart errors."""

    def __init__(self, message: str, *args: object) -> None:
        super().__init__(message, *args)
        self.message = message


class UsageError(GoMarketplaceException):
    """Cart accessed outside an active provider scope or after close()."""

    pass


class CorruptPersistedData(GoMarketplaceException):
    """Stored cart snapshot cannot be parsed into line items."""

    def __init__(self, key: str, reason: str) -> None:
        super().__init__(f"Stored cart under {key!r} is corrupt: {reason}")
        self.key = key
        self.reason = reason


class StorageWriteFailure(GoMarketplaceException):
    """Durable store rejected a cart snapshot write.

    In-memory state already holds the change; storage lags behind until a
    later write succeeds.
    """

    def __init__(self, key: str, reason: str) -> None:
        super().__init__(f"Failed to persist cart under {key!r}: {reason}")
        self.key = key
        self.reason = reason


class ConfigurationException(GoMarketplaceException):
    """Configuration errors."""

    pass
