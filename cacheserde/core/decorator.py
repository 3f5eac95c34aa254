"""Decorator binding async functions to the cache engine.

Usage:
    @cache_async(cache_root="./cache/{city}", invalidate_rate=600)
    async def forecast(city: str) -> dict:
        ...

    @cache_async(cache_root="./cache/users/{user_id}", fallible=True)
    async def load_user(user_id: int) -> Outcome[dict, str]:
        ...

The cache root is a ``str.format`` template filled from the call's bound
arguments, so distinct argument sets resolve to distinct entries. Every
setting is validated and resolved once, when the function is decorated.
"""

import functools
import inspect
import logging
import string
from datetime import timedelta
from typing import Any, Callable, Optional, Set, Union

from cacheserde.domain.errors import CacheConfigError
from cacheserde.domain.interfaces.serializer import Serializer
from cacheserde.domain.interfaces.store import CacheStore
from cacheserde.domain.models.common import CacheKey, CacheRoot

from cacheserde.core.cache_engine import CacheEngine
from cacheserde.core.result_adapter import select_adapter

from cacheserde.infrastructure.config.settings import (
    expand_home,
    get_default_cache_root,
    get_default_invalidate_rate,
    validate_cache_root,
    validate_invalidate_rate,
)
from cacheserde.infrastructure.filesystem.local_store import LocalFileStore
from cacheserde.infrastructure.serialization.json_serializer import JsonSerializer

logger = logging.getLogger(__name__)


def template_fields(template: str) -> Set[str]:
    """Argument names referenced by a cache root template.

    Raises:
        CacheConfigError: For malformed templates or positional fields.
    """
    names = set()
    try:
        parsed = list(string.Formatter().parse(template))
    except ValueError as e:
        raise CacheConfigError(f"Malformed cache_root template {template!r}: {e}") from e
    for _, field_name, _, _ in parsed:
        if field_name is None:
            continue
        # "{user.id}" and "{items[0]}" both refer to the argument before the accessor
        root = field_name.split(".", 1)[0].split("[", 1)[0]
        if not root or root.isdigit():
            raise CacheConfigError(
                f"cache_root template {template!r} must use argument names, not positional fields"
            )
        names.add(root)
    return names


def cache_async(
    cache_root: Optional[str] = None,
    invalidate_rate: Union[int, float, timedelta, None] = None,
    *,
    fallible: bool = False,
    serializer: Optional[Serializer] = None,
    store: Optional[CacheStore] = None,
    engine: Optional[CacheEngine] = None,
) -> Callable[[Callable[..., Any]], Callable[..., Any]]:
    """Caches the results of an async function on disk for ``invalidate_rate`` seconds.

    The success payload must be serializable by ``serializer`` (JSON by
    default). With ``fallible=True`` the function returns ``Ok``/``Err`` and only
    ``Ok`` payloads are cached; an ``Err`` is returned unchanged and never stored.

    Args:
        cache_root: Template for the entry directory; defaults to the
            ``cache_root`` setting or ``~/.cache/cache_serde``.
        invalidate_rate: Seconds after which an entry is stale; defaults to
            the ``invalidate_rate`` setting or 3600.
        fallible: Whether the function returns an ``Ok``/``Err`` outcome.
        serializer: Payload encoding, used when ``engine`` is not given.
        store: Entry storage, used when ``engine`` is not given.
        engine: A shared engine, e.g. to await its pending writes at shutdown.

    Raises:
        CacheConfigError: If any setting is invalid or the function is not async.
    """
    root_template = CacheRoot(
        expand_home(
            validate_cache_root(cache_root) if cache_root is not None else get_default_cache_root(),
            template=True,
        )
    )
    ttl = (
        validate_invalidate_rate(invalidate_rate)
        if invalidate_rate is not None
        else get_default_invalidate_rate()
    )
    adapter = select_adapter(fallible)
    if engine is None:
        engine = CacheEngine(store or LocalFileStore(), serializer or JsonSerializer())
    elif store is not None or serializer is not None:
        raise CacheConfigError("Pass either an engine or a store/serializer, not both")
    fields = template_fields(root_template)

    def decorator(func: Callable[..., Any]) -> Callable[..., Any]:
        if not inspect.iscoroutinefunction(func):
            raise CacheConfigError(f"cache_async requires an async function, got {func!r}")
        signature = inspect.signature(func)
        unknown = fields - set(signature.parameters)
        if unknown:
            raise CacheConfigError(
                f"cache_root template {root_template!r} references unknown arguments "
                f"of {func.__qualname__}: {sorted(unknown)}"
            )

        def cache_key(*args: Any, **kwargs: Any) -> CacheKey:
            bound = signature.bind(*args, **kwargs)
            bound.apply_defaults()
            return CacheKey(root_template.format(**bound.arguments))

        @functools.wraps(func)
        async def wrapper(*args: Any, **kwargs: Any) -> Any:
            key = cache_key(*args, **kwargs)
            return await engine.get_or_compute(key, ttl, lambda: func(*args, **kwargs), adapter)

        async def invalidate(*args: Any, **kwargs: Any) -> None:
            await engine.invalidate(cache_key(*args, **kwargs))

        wrapper.engine = engine
        wrapper.invalidate_rate = ttl
        wrapper.cache_key = cache_key
        wrapper.invalidate = invalidate
        logger.debug(f"Caching {func.__qualname__} under {root_template!r} for {ttl}s")
        return wrapper

    return decorator
