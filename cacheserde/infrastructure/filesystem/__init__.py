"""Filesystem-backed cache storage.

Bounded Context: Cache Management
"""

from cacheserde.infrastructure.filesystem.local_store import LocalFileStore

__all__ = ["LocalFileStore"]
