"""Domain Events related to cache lookups and background writes."""

from dataclasses import dataclass, field
import time
from typing import Optional


@dataclass
class DomainEvent:
    """Base class for domain events."""
    pass


@dataclass
class CacheHit(DomainEvent):
    """A call was answered from storage without invoking the operation."""
    key: str
    age_seconds: float
    timestamp: float = field(default_factory=time.time)


@dataclass
class CacheMiss(DomainEvent):
    """No valid entry existed; the operation will be invoked."""
    key: str
    reason: str  # 'absent' or 'stale'
    age_seconds: Optional[float] = None
    timestamp: float = field(default_factory=time.time)


@dataclass
class OperationFailurePassedThrough(DomainEvent):
    """The operation returned a failure outcome; nothing was written."""
    key: str
    timestamp: float = field(default_factory=time.time)


@dataclass
class CacheWriteScheduled(DomainEvent):
    """A background write of a success payload was scheduled."""
    key: str
    size_bytes: int
    timestamp: float = field(default_factory=time.time)


@dataclass
class CacheWriteCompleted(DomainEvent):
    """A background write finished."""
    key: str
    latency_ms: float
    timestamp: float = field(default_factory=time.time)


@dataclass
class CacheWriteFailed(DomainEvent):
    """A background write failed or was cancelled. The caller is unaffected."""
    key: str
    error_type: str
    error_message: str
    timestamp: float = field(default_factory=time.time)
