"""CachedService - classes whose methods declare their own caching.

Provides:
- CachedService: Base class owning a Memoizer
- @cached(key, ttl=..., invalidates=..., tags=..., serialize=...): Decorator for
  cached methods
- invalidate_cache(), invalidate_cache_keys(), invalidate_tag(): manual
  invalidation from inside or outside the service
"""

from __future__ import annotations

from collections.abc import Iterable
from typing import Any

from mnemosyne.adapters.base import AsyncStore
from mnemosyne.memoizer import Memoizer
from mnemosyne.operation import CachedOperation
from mnemosyne.types import CacheConfig, Duration


class CachedMethod:
    """Descriptor that wraps cached methods."""

    def __init__(self, fn: Any, config: CacheConfig) -> None:
        self._operation = CachedOperation(fn, config, method=True)
        self.__doc__ = fn.__doc__
        self.__wrapped__ = fn

    @property
    def operation(self) -> CachedOperation:
        return self._operation

    @property
    def config(self) -> CacheConfig:
        return self._operation.config  # type: ignore[return-value]

    def __set_name__(self, owner: type, name: str) -> None:
        if not issubclass(owner, CachedService):
            raise TypeError(
                f"@cached on {owner.__name__}.{name}: class must subclass CachedService"
            )

    def __get__(self, obj: Any, owner: type) -> Any:
        if obj is None:
            return self
        return BoundCachedMethod(self._operation, obj)


class BoundCachedMethod:
    """A cached method bound to a service instance."""

    __slots__ = ("_operation", "_service")

    def __init__(self, operation: CachedOperation, service: CachedService) -> None:
        self._operation = operation
        self._service = service

    async def __call__(self, *args: Any, **kwargs: Any) -> Any:
        operation = self._operation
        values = operation.bind(args, kwargs)

        async def compute() -> Any:
            return await operation.fn(self._service, *args, **kwargs)

        return await self._service.memoizer.intercept(
            operation.config,
            operation.name,
            operation.param_names,
            values,
            compute,
        )


def cached(
    key: str | None = None,
    *,
    ttl: Duration | None = None,
    invalidates: str | Iterable[str] = (),
    tags: str | Iterable[str] = (),
    serialize: bool = False,
) -> Any:
    """Decorator for cached service methods.

    Usage:
        class UserService(CachedService):
            @cached("user:{id}", ttl="1h", tags=["users"])
            async def get_user(self, id: int) -> User:
                return await fetch_user(id)

            @cached(invalidates=["user:{id}"])
            async def rename_user(self, id: int, name: str) -> None:
                await save_name(id, name)

    Placeholders in ``key``, ``invalidates`` and ``tags`` name method
    parameters (excluding self). Without ``key`` an auto key is derived
    from the method and its arguments.
    """
    config = CacheConfig(
        key=key,
        ttl=ttl,
        invalidates=invalidates,  # type: ignore[arg-type]
        tags=tags,  # type: ignore[arg-type]
        serialize=serialize,
    )

    def decorator(fn: Any) -> CachedMethod:
        return CachedMethod(fn, config)

    return decorator


class CachedService:
    """Base class for services with cached methods.

    Subclass and add @cached methods:

        class UserService(CachedService):
            @cached("user:{id}", ttl="1h")
            async def get_user(self, id: int) -> User:
                return await fetch_user(id)

    Usage:
        service = UserService(store=AsyncMemoryStore())
        user = await service.get_user(42)
        await service.invalidate_cache("user:42")
    """

    _memoizer: Memoizer

    def __init__(
        self,
        *,
        store: AsyncStore | None = None,
        memoizer: Memoizer | None = None,
        **options: Any,
    ) -> None:
        if memoizer is not None:
            if store is not None or options:
                raise TypeError("Pass either memoizer or store options, not both")
            self._memoizer = memoizer
        elif store is not None:
            self._memoizer = Memoizer(store, **options)
        else:
            raise TypeError("CachedService needs a store or a memoizer")

    @property
    def memoizer(self) -> Memoizer:
        """The memoizer serving this instance's cached methods."""
        return self._memoizer

    async def invalidate_cache(self, key: str) -> None:
        """Delete one cache key."""
        await self._memoizer.invalidate_key(key)

    async def invalidate_cache_keys(self, keys: Iterable[str]) -> None:
        """Delete several cache keys."""
        await self._memoizer.invalidate_keys(keys)

    async def invalidate_tag(self, tag: str) -> None:
        """Delete every entry registered under a tag."""
        await self._memoizer.invalidate_tag(tag)


__all__ = ["CachedService", "cached"]
