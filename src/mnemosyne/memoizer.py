"""Memoizer - the cache interceptor.

Provides:
- intercept(): run one call through the cache
- memoize(): decorator for module-level async functions
- invalidate_key(), invalidate_keys(), invalidate_tag(): manual invalidation
- clear(), disconnect(): lifecycle methods
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable, Sequence
from functools import wraps
from typing import Any, TypeVar

from mnemosyne.adapters.base import AsyncStore
from mnemosyne.codecs import Codec, PickleCodec
from mnemosyne.duration import parse_ttl
from mnemosyne.errors import SerializationError
from mnemosyne.operation import CachedOperation
from mnemosyne.tags import TAG_PREFIX, TagRegistry
from mnemosyne.templates import KeyResolver
from mnemosyne.types import CacheConfig, Compute, Duration

logger = logging.getLogger(__name__)

F = TypeVar("F", bound=Callable[..., Any])


class Memoizer:
    """Turns configured calls into cache reads, writes and invalidations.

    Store writes and deletes made on behalf of a call are best effort: a
    failing store is logged and the computed result is still returned.
    Manual invalidation calls let store errors propagate.
    """

    def __init__(
        self,
        store: AsyncStore,
        *,
        prefix: str = "",
        tag_prefix: str = TAG_PREFIX,
        default_ttl: Duration | None = None,
        codec: Codec | None = None,
    ) -> None:
        self._store = store
        self._prefix = prefix
        self._default_ttl_ms = parse_ttl(default_ttl)
        self._codec: Codec = codec if codec is not None else PickleCodec()
        self._resolver = KeyResolver()
        self._tags = TagRegistry(store, tag_prefix=self._qualify(tag_prefix))

    @property
    def store(self) -> AsyncStore:
        return self._store

    @property
    def resolver(self) -> KeyResolver:
        return self._resolver

    @property
    def tags(self) -> TagRegistry:
        return self._tags

    def _qualify(self, key: str) -> str:
        return f"{self._prefix}:{key}" if self._prefix else key

    def resolve_key(
        self,
        template: str | None,
        param_names: Sequence[str],
        args: Sequence[Any],
        *,
        operation: str,
    ) -> str:
        """Resolve a key template into the storage key used for it."""
        key = self._resolver.resolve(template, param_names, args, operation=operation)
        return self._qualify(key)

    async def intercept(
        self,
        config: CacheConfig | None,
        operation: str,
        param_names: Sequence[str],
        args: Sequence[Any],
        compute: Compute,
    ) -> Any:
        """Run one call through the cache.

        Args:
            config: Cache configuration of the operation, None for no caching
            operation: Stable identity of the operation, used for auto keys
            param_names: Formal parameter names in declaration order
            args: Argument values in the same order
            compute: Zero-argument coroutine factory doing the real work

        Returns:
            Cached or freshly computed result
        """
        if config is None:
            return await compute()

        for template in config.invalidates:
            stale_key = self.resolve_key(template, param_names, args, operation=operation)
            await self._delete_quietly(stale_key)

        key = self.resolve_key(config.key, param_names, args, operation=operation)

        cached = await self._get_quietly(key)
        if cached is not None:
            logger.debug("Cache hit for %s", key)
            return self._codec.decode(cached) if config.serialize else cached

        logger.debug("Cache miss for %s", key)
        result = await compute()

        stored = await self._store_quietly(key, result, config)
        if stored:
            for template in config.tags:
                tag = self._resolver.resolve(
                    template, param_names, args, operation=operation
                )
                await self._tag_quietly(tag, key)

        return result

    def memoize(
        self,
        key: str | None = None,
        *,
        ttl: Duration | None = None,
        invalidates: str | Iterable[str] = (),
        tags: str | Iterable[str] = (),
        serialize: bool = False,
    ) -> Callable[[F], F]:
        """Decorator caching a module-level async function.

        Usage:
            @memoizer.memoize("user:{id}", ttl="1h", tags=["users"])
            async def get_user(id: int) -> dict:
                return await fetch_user(id)
        """
        config = CacheConfig(
            key=key,
            ttl=ttl,
            invalidates=invalidates,  # type: ignore[arg-type]
            tags=tags,  # type: ignore[arg-type]
            serialize=serialize,
        )

        def decorator(fn: F) -> F:
            operation = CachedOperation(fn, config)

            @wraps(fn)
            async def wrapper(*args: Any, **kwargs: Any) -> Any:
                values = operation.bind(args, kwargs)
                return await self.intercept(
                    operation.config,
                    operation.name,
                    operation.param_names,
                    values,
                    lambda: fn(*args, **kwargs),
                )

            return wrapper  # type: ignore[return-value]

        return decorator

    async def invalidate_key(self, key: str) -> None:
        """Delete one cache key."""
        await self._store.delete(self._qualify(key))

    async def invalidate_keys(self, keys: Iterable[str]) -> None:
        """Delete several cache keys, in order."""
        if isinstance(keys, str):
            keys = [keys]
        for key in keys:
            await self._store.delete(self._qualify(key))

    async def invalidate_tag(self, tag: str) -> None:
        """Delete every key registered under a tag, then the tag entry."""
        await self._tags.invalidate_tag(tag)

    async def clear(self) -> None:
        """Clear the whole store."""
        await self._store.clear()

    async def disconnect(self) -> None:
        """Disconnect from the store."""
        await self._store.disconnect()

    # -------------------------------------------------------------------------
    # Internal helpers
    # -------------------------------------------------------------------------

    def _ttl_ms(self, config: CacheConfig) -> int | None:
        if config.ttl is None:
            return self._default_ttl_ms
        return parse_ttl(config.ttl)

    async def _get_quietly(self, key: str) -> Any | None:
        try:
            return await self._store.get(key)
        except Exception:
            logger.warning("Cache read failed for %s, treating as miss", key, exc_info=True)
            return None

    async def _delete_quietly(self, key: str) -> None:
        try:
            await self._store.delete(key)
        except Exception:
            logger.warning("Cache delete failed for %s", key, exc_info=True)

    async def _store_quietly(self, key: str, result: Any, config: CacheConfig) -> bool:
        ttl_ms = self._ttl_ms(config)
        try:
            value = self._codec.encode(result) if config.serialize else result
            await self._store.set(key, value, ttl_ms)
        except SerializationError:
            logger.warning("Cannot encode result for %s, not caching", key, exc_info=True)
            return False
        except Exception:
            logger.warning("Cache write failed for %s", key, exc_info=True)
            return False
        return True

    async def _tag_quietly(self, tag: str, key: str) -> None:
        try:
            await self._tags.add_key_to_tag(tag, key)
        except Exception:
            logger.warning("Tagging %s with %r failed", key, tag, exc_info=True)


def create_memoizer(
    *,
    store: AsyncStore,
    prefix: str = "",
    tag_prefix: str = TAG_PREFIX,
    default_ttl: Duration | None = None,
    codec: Codec | None = None,
) -> Memoizer:
    """Create a memoizer.

    Args:
        store: Key-value store
        prefix: Prefix for every cache and tag key (none by default)
        tag_prefix: Prefix of tag registry entries
        default_ttl: TTL for operations that declare none (default: never expire)
        codec: Codec for operations declared with serialize=True

    Returns:
        Memoizer instance with intercept, memoize and invalidation methods
    """
    return Memoizer(
        store,
        prefix=prefix,
        tag_prefix=tag_prefix,
        default_ttl=default_ttl,
        codec=codec,
    )


__all__ = ["Memoizer", "create_memoizer"]
