"""cacheserde: time-bounded, disk-backed memoization of async functions.

Results are stored as one JSON file per cache key and reused until the entry
is older than the configured ``invalidate_rate``.
"""

from cacheserde.core.cache_engine import CacheEngine
from cacheserde.core.decorator import cache_async
from cacheserde.core.result_adapter import (
    BARE_VALUE,
    OUTCOME,
    BareValueAdapter,
    OutcomeAdapter,
    ResultAdapter,
    select_adapter,
)
from cacheserde.domain.errors import (
    CacheConfigError,
    CacheDeserializationError,
    CacheError,
    CacheNamespaceError,
    CacheProbeError,
    CacheReadError,
    CacheSerializationError,
    CacheWriteError,
)
from cacheserde.domain.models.common import CacheKey
from cacheserde.domain.models.outcome import Err, Ok, Outcome
from cacheserde.infrastructure.filesystem.local_store import LocalFileStore
from cacheserde.infrastructure.monitoring.logger_setup import setup_logging
from cacheserde.infrastructure.serialization.json_serializer import JsonSerializer

__all__ = [
    "BARE_VALUE",
    "OUTCOME",
    "BareValueAdapter",
    "CacheConfigError",
    "CacheDeserializationError",
    "CacheEngine",
    "CacheError",
    "CacheKey",
    "CacheNamespaceError",
    "CacheProbeError",
    "CacheReadError",
    "CacheSerializationError",
    "CacheWriteError",
    "Err",
    "JsonSerializer",
    "LocalFileStore",
    "Ok",
    "Outcome",
    "OutcomeAdapter",
    "ResultAdapter",
    "cache_async",
    "select_adapter",
    "setup_logging",
]
