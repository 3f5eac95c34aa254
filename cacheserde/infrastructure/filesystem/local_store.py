"""Concrete implementation of the CacheStore interface for the local disk.

Each cache key is a directory; the entry lives in a single file inside it
(``<key>/data.json`` by default). The file's modification time is the only
staleness signal. Uses ``aiofiles`` for async I/O.
"""

import logging
import time
import uuid
from pathlib import Path
from typing import Callable

import aiofiles
import aiofiles.os

# Domain Layer Imports
from cacheserde.domain.interfaces.store import CacheStore
from cacheserde.domain.models.common import CacheKey, DEFAULT_ENTRY_FILENAME

logger = logging.getLogger(__name__)


class LocalFileStore(CacheStore):
    """Stores one artifact file per cache key under the key's directory."""

    def __init__(
        self,
        entry_filename: str = DEFAULT_ENTRY_FILENAME,
        clock: Callable[[], float] = time.time,
    ):
        """Initializes the LocalFileStore adapter.

        Args:
            entry_filename: Name of the artifact file inside each key directory.
            clock: Returns the current time as a Unix timestamp. Compared
                against file modification times to compute entry age.
        """
        if not entry_filename or "/" in entry_filename:
            raise ValueError(f"Invalid entry filename: {entry_filename!r}")
        self.entry_filename = entry_filename
        self._clock = clock

    def _entry_file(self, key: CacheKey) -> Path:
        return Path(key) / self.entry_filename

    def entry_path(self, key: CacheKey) -> str:
        return str(self._entry_file(key))

    async def ensure_namespace(self, key: CacheKey) -> None:
        namespace = Path(key)
        # makedirs with exist_ok also tolerates a concurrent creator
        await aiofiles.os.makedirs(namespace, exist_ok=True)

    async def exists(self, key: CacheKey) -> bool:
        path = self._entry_file(key)
        try:
            await aiofiles.os.stat(path)
        except (FileNotFoundError, NotADirectoryError):
            logger.debug(f"No cache entry at {path}")
            return False
        return True

    async def age(self, key: CacheKey) -> float:
        stat_result = await aiofiles.os.stat(self._entry_file(key))
        return self._clock() - stat_result.st_mtime

    async def read(self, key: CacheKey) -> bytes:
        path = self._entry_file(key)
        async with aiofiles.open(path, mode="rb") as f:
            data = await f.read()
        logger.debug(f"Read {len(data)} bytes from {path}")
        return data

    async def write(self, key: CacheKey, data: bytes) -> None:
        path = self._entry_file(key)
        # Unique temp name per writer; concurrent writers each replace the entry whole
        temp_path = path.with_name(f".{path.name}.{uuid.uuid4().hex}.tmp")
        try:
            async with aiofiles.open(temp_path, mode="wb") as f:
                await f.write(data)
            await aiofiles.os.replace(temp_path, path)
        except BaseException:
            try:
                await aiofiles.os.remove(temp_path)
            except OSError:
                pass  # temp file was never created or already moved
            raise
        logger.debug(f"Wrote {len(data)} bytes to {path}")

    async def delete(self, key: CacheKey) -> None:
        path = self._entry_file(key)
        try:
            await aiofiles.os.remove(path)
            logger.debug(f"Deleted cache entry {path}")
        except FileNotFoundError:
            logger.debug(f"Cache entry {path} already absent")
