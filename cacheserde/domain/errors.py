"""Error taxonomy for the caching layer.

Infrastructure errors describe faults of the cache store itself (I/O,
encoding) and are always distinct from the wrapped operation's own failure.
Configuration errors are raised once, when an operation is wrapped.
"""

from typing import Optional


class CacheError(Exception):
    """Base exception for cache-layer errors."""

    def __init__(self, message: str, key: Optional[str] = None):
        self.key = key
        super().__init__(message)


class CacheNamespaceError(CacheError):
    """Raised when the namespace (directory) for a key cannot be created."""
    pass


class CacheProbeError(CacheError):
    """Raised when the existence or age of an entry cannot be determined."""
    pass


class CacheReadError(CacheError):
    """Raised when an entry believed fresh cannot be read."""
    pass


class CacheDeserializationError(CacheError):
    """Raised when an entry believed fresh cannot be decoded."""
    pass


class CacheSerializationError(CacheError):
    """Raised when a success payload cannot be encoded for storage."""
    pass


class CacheWriteError(CacheError):
    """Describes a failed entry write or delete.

    Background write failures are logged and reported as events, never raised
    to callers. Only ``invalidate`` raises it, when deleting an entry fails.
    """
    pass


class CacheConfigError(CacheError, ValueError):
    """Raised at wrapping-setup time for a malformed TTL or cache root."""
    pass
