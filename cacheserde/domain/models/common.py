"""Common Value Objects for the caching context."""

from typing import NewType

# === Caching Context ===
CacheKey = NewType("CacheKey", str)    # Namespace path identifying one cache entry
CacheRoot = NewType("CacheRoot", str)  # Cache root template, may contain {arg} placeholders

DEFAULT_ENTRY_FILENAME = "data.json"
DEFAULT_CACHE_ROOT = "~/.cache/cache_serde"
DEFAULT_INVALIDATE_RATE_SECONDS = 3600  # 1 hour
