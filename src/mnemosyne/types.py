"""Core types for mnemosyne."""

from collections.abc import Awaitable, Callable, Iterable
from dataclasses import dataclass
from datetime import timedelta
from typing import Any

# Duration type alias
Duration = str | int | timedelta  # "30s", "5m", "2h", "1d", milliseconds or timedelta

# Zero-argument coroutine factory performing the real computation
Compute = Callable[[], Awaitable[Any]]


def _as_templates(templates: str | Iterable[str]) -> tuple[str, ...]:
    """Normalize a template list; a bare string is one template, not its characters."""
    if isinstance(templates, str):
        return (templates,)
    return tuple(templates)


@dataclass(frozen=True, slots=True)
class CacheConfig:
    """Declarative cache configuration attached to one operation."""

    key: str | None = None  # "user:{id}", None for an auto key
    ttl: Duration | None = None  # None never expires
    invalidates: tuple[str, ...] = ()
    tags: tuple[str, ...] = ()
    serialize: bool = False

    def __post_init__(self) -> None:
        # Accept lists from callers but keep the config hashable
        object.__setattr__(self, "invalidates", _as_templates(self.invalidates))
        object.__setattr__(self, "tags", _as_templates(self.tags))
