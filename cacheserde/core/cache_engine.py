"""The Cache Engine: time-bounded, store-backed memoization of async operations.

Each call to ``get_or_compute`` is an independent run of the protocol against
the store, which is the sole source of truth:

1. ensure the key's namespace exists;
2. if an entry exists and is younger than the TTL, decode and return it (hit);
3. otherwise run the operation (miss); failures are returned untouched;
4. schedule a background write of the encoded success payload and return
   without waiting for it.

There is no locking and no single-flight deduplication. Two concurrent misses
on the same key both run the operation and the last write wins.
"""

import asyncio
import logging
import time
from datetime import timedelta
from typing import Any, Awaitable, Callable, Optional, Set, Union

# Domain Layer Imports
from cacheserde.domain.errors import (
    CacheDeserializationError,
    CacheNamespaceError,
    CacheProbeError,
    CacheReadError,
    CacheSerializationError,
    CacheWriteError,
)
from cacheserde.domain.events.cache_events import (
    CacheHit,
    CacheMiss,
    CacheWriteCompleted,
    CacheWriteFailed,
    CacheWriteScheduled,
    DomainEvent,
    OperationFailurePassedThrough,
)
from cacheserde.domain.interfaces.serializer import Serializer
from cacheserde.domain.interfaces.store import CacheStore
from cacheserde.domain.models.common import CacheKey

from cacheserde.core.result_adapter import BARE_VALUE, OUTCOME, ResultAdapter

logger = logging.getLogger(__name__)

Compute = Callable[[], Awaitable[Any]]
EventListener = Callable[[DomainEvent], None]

# Marker for an entry deleted between the freshness check and the read
_VANISHED = object()


class CacheEngine:
    """Runs the read / compute / write protocol for one store and serializer."""

    def __init__(
        self,
        store: CacheStore,
        serializer: Optional[Serializer] = None,
        on_event: Optional[EventListener] = None,
    ):
        """Initializes the engine.

        Args:
            store: Durable storage for cache entries.
            serializer: Encoding of success payloads. Defaults to JSON.
            on_event: Optional callback receiving every domain event. Must not
                raise; it runs inside the protocol and inside background writes.
        """
        if serializer is None:
            from cacheserde.infrastructure.serialization.json_serializer import JsonSerializer
            serializer = JsonSerializer()
        self.store = store
        self.serializer = serializer
        self._on_event = on_event
        # Strong references so scheduled writes are not garbage collected mid-flight
        self._pending_writes: Set[asyncio.Task] = set()

    @property
    def pending_writes(self) -> int:
        """Number of background writes still in flight."""
        return len(self._pending_writes)

    def _dispatch(self, event: DomainEvent) -> None:
        logger.debug(f"EVENT: {event}")
        if self._on_event is not None:
            self._on_event(event)

    async def get_or_compute(
        self,
        key: CacheKey,
        ttl: Union[int, float, timedelta],
        compute: Compute,
        adapter: ResultAdapter = BARE_VALUE,
    ) -> Any:
        """Returns the cached payload for ``key`` or computes and caches it.

        Args:
            key: Namespace identifying the entry.
            ttl: Maximum entry age in seconds (or a timedelta). 0 always recomputes.
            compute: Zero-argument coroutine function producing the outcome.
            adapter: How to interpret the outcome (bare value or Ok/Err).

        Returns:
            The success payload wrapped per ``adapter``, or the operation's
            failure outcome unchanged.

        Raises:
            CacheNamespaceError: The key's namespace could not be created.
            CacheProbeError: Existence or age of the entry could not be checked.
            CacheReadError: A fresh entry could not be read.
            CacheDeserializationError: A fresh entry could not be decoded.
            Exception: Whatever ``compute`` raises, unchanged.
        """
        ttl_seconds = ttl.total_seconds() if isinstance(ttl, timedelta) else float(ttl)

        try:
            await self.store.ensure_namespace(key)
        except OSError as e:
            raise CacheNamespaceError(f"Failed to create cache namespace {key}: {e}", key=key) from e

        age = await self._entry_age(key)
        if age is not None and age < ttl_seconds:
            payload = await self._read_entry(key)
            if payload is not _VANISHED:
                logger.debug(f"Cache hit for key: {key} (age {age:.3f}s < ttl {ttl_seconds}s)")
                self._dispatch(CacheHit(key=key, age_seconds=age))
                return adapter.wrap_success(payload)
            age = None

        reason = "absent" if age is None else "stale"
        logger.debug(f"Cache miss for key: {key} ({reason})")
        self._dispatch(CacheMiss(key=key, reason=reason, age_seconds=age))

        outcome = await compute()
        if adapter.is_failure(outcome):
            logger.debug(f"Operation failed for key: {key}; nothing cached")
            self._dispatch(OperationFailurePassedThrough(key=key))
            return adapter.pass_failure(outcome)

        payload = adapter.unwrap_success(outcome)
        self._schedule_write(key, payload)
        return adapter.wrap_success(payload)

    async def get_or_compute_outcome(
        self,
        key: CacheKey,
        ttl: Union[int, float, timedelta],
        compute: Compute,
    ) -> Any:
        """``get_or_compute`` for operations returning ``Ok``/``Err``."""
        return await self.get_or_compute(key, ttl, compute, adapter=OUTCOME)

    async def _entry_age(self, key: CacheKey) -> Optional[float]:
        """Age of the entry in seconds, or None if there is no entry."""
        try:
            if not await self.store.exists(key):
                return None
            return await self.store.age(key)
        except FileNotFoundError:
            logger.debug(f"Cache entry for key {key} disappeared while probing")
            return None
        except OSError as e:
            raise CacheProbeError(f"Failed to check cache entry {self.store.entry_path(key)}: {e}", key=key) from e

    async def _read_entry(self, key: CacheKey) -> Any:
        """Reads and decodes a fresh entry. Errors are reported, never treated as a miss."""
        path = self.store.entry_path(key)
        try:
            data = await self.store.read(key)
        except FileNotFoundError:
            logger.debug(f"Cache entry {path} deleted before it could be read")
            return _VANISHED
        except OSError as e:
            raise CacheReadError(f"Failed to read cache entry {path}: {e}", key=key) from e
        try:
            return self.serializer.deserialize(data)
        except (ValueError, TypeError) as e:
            raise CacheDeserializationError(f"Corrupt cache entry {path}: {e}", key=key) from e

    def _schedule_write(self, key: CacheKey, payload: Any) -> None:
        """Encodes the payload and persists it in a detached background task."""
        try:
            data = self.serializer.serialize(payload)
        except (TypeError, ValueError) as e:
            error = CacheSerializationError(f"Cannot encode payload for key {key}: {e}", key=key)
            logger.error(f"Not caching result: {error}")
            self._dispatch(CacheWriteFailed(key=key, error_type=type(error).__name__, error_message=str(error)))
            return

        task = asyncio.get_running_loop().create_task(self._write_entry(key, data))
        self._pending_writes.add(task)
        task.add_done_callback(self._pending_writes.discard)
        self._dispatch(CacheWriteScheduled(key=key, size_bytes=len(data)))

    async def _write_entry(self, key: CacheKey, data: bytes) -> None:
        path = self.store.entry_path(key)
        start_time = time.perf_counter()
        try:
            await self.store.write(key, data)
        except asyncio.CancelledError:
            logger.warning(f"Cache write to {path} was cancelled")
            self._dispatch(CacheWriteFailed(key=key, error_type="CancelledError", error_message="write cancelled"))
            raise
        except Exception as e:
            error = CacheWriteError(f"Failed to write cache entry {path}: {e}", key=key)
            logger.error(str(error), exc_info=True)
            self._dispatch(CacheWriteFailed(key=key, error_type=type(e).__name__, error_message=str(e)))
            return
        latency_ms = (time.perf_counter() - start_time) * 1000
        logger.debug(f"Stored cache entry {path} in {latency_ms:.1f}ms")
        self._dispatch(CacheWriteCompleted(key=key, latency_ms=latency_ms))

    async def wait_for_pending_writes(self) -> None:
        """Waits until every scheduled background write has finished.

        Call before shutting down the event loop; ``asyncio.run`` cancels
        tasks that are still pending when the main coroutine returns.
        """
        while self._pending_writes:
            await asyncio.gather(*list(self._pending_writes), return_exceptions=True)

    async def invalidate(self, key: CacheKey) -> None:
        """Deletes the entry for ``key``, if any."""
        try:
            await self.store.delete(key)
        except OSError as e:
            raise CacheWriteError(f"Failed to delete cache entry {self.store.entry_path(key)}: {e}", key=key) from e
