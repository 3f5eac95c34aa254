"""Interface for durable cache storage (the Store Adapter).

Maps a cache key to a physical entry and answers whether it exists, how old
it is, and reads or writes its bytes. Creating the containing namespace is
the store's concern, so the engine's algorithm stays storage-agnostic.
"""

import abc

from ..models.common import CacheKey


class CacheStore(abc.ABC):
    """Abstract Base Class for cache entry storage."""

    @abc.abstractmethod
    async def ensure_namespace(self, key: CacheKey) -> None:
        """Creates the namespace holding the entry for ``key`` if missing.

        Idempotent: an already existing namespace is not an error.

        Raises:
            OSError: On unrecoverable I/O (permissions, disk full).
        """
        pass

    @abc.abstractmethod
    async def exists(self, key: CacheKey) -> bool:
        """Checks whether an entry exists for ``key``.

        Returns:
            True if the entry exists. Absence is a normal False, not an error.
        """
        pass

    @abc.abstractmethod
    async def age(self, key: CacheKey) -> float:
        """Seconds elapsed since the entry was last modified.

        Only defined when ``exists(key)`` is True. Computed from the store's
        modification metadata, never from the payload.
        """
        pass

    @abc.abstractmethod
    async def read(self, key: CacheKey) -> bytes:
        """Reads the raw bytes stored for ``key``."""
        pass

    @abc.abstractmethod
    async def write(self, key: CacheKey, data: bytes) -> None:
        """Stores ``data`` for ``key``, overwriting any existing entry."""
        pass

    @abc.abstractmethod
    async def delete(self, key: CacheKey) -> None:
        """Removes the entry for ``key``. A missing entry is not an error."""
        pass

    def entry_path(self, key: CacheKey) -> str:
        """Human-readable location of the entry, used in log messages."""
        return str(key)
