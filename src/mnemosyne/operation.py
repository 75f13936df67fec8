"""Cached operations: a function paired with its cache configuration."""

from __future__ import annotations

import inspect
from collections.abc import Callable
from typing import Any

from mnemosyne.duration import parse_ttl
from mnemosyne.errors import DispatchError
from mnemosyne.types import CacheConfig


class CachedOperation:
    """An async function bound to the configuration it was declared with.

    Signature inspection happens once, here; per call only argument binding
    is left to do.
    """

    __slots__ = ("config", "fn", "name", "param_names", "_signature", "_skip_first")

    def __init__(
        self,
        fn: Callable[..., Any],
        config: CacheConfig | None,
        *,
        method: bool = False,
    ) -> None:
        if not inspect.iscoroutinefunction(fn):
            raise DispatchError(
                f"Cached operation {getattr(fn, '__qualname__', fn)!r} "
                "must be an async function"
            )
        if config is not None:
            parse_ttl(config.ttl)  # fail at declaration, not on first miss
        self.fn = fn
        self.config = config
        self.name = f"{fn.__module__}.{fn.__qualname__}"
        self._signature = inspect.signature(fn)
        self._skip_first = method

        params = list(self._signature.parameters)
        if method:
            if not params:
                raise DispatchError(f"{self.name} is declared as a method but takes no self")
            params = params[1:]
        self.param_names: tuple[str, ...] = tuple(params)

    def bind(self, args: tuple[Any, ...], kwargs: dict[str, Any]) -> list[Any]:
        """Return argument values in declaration order, defaults applied.

        ``args`` excludes ``self`` for methods.
        """
        call_args = (None, *args) if self._skip_first else args
        try:
            bound = self._signature.bind(*call_args, **kwargs)
        except TypeError as e:
            raise DispatchError(f"{self.name}: {e}") from e
        bound.apply_defaults()
        values = list(bound.arguments.values())
        return values[1:] if self._skip_first else values


__all__ = ["CachedOperation"]
