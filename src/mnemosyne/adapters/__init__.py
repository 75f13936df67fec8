"""Store adapters for mnemosyne (async only)."""

from contextlib import suppress

from mnemosyne.adapters.base import AsyncStore
from mnemosyne.adapters.memory import AsyncMemoryStore

# Optional adapters - only available when dependencies are installed
with suppress(ImportError):
    from mnemosyne.adapters.redis import AsyncRedisStore

__all__ = [
    "AsyncMemoryStore",
    "AsyncRedisStore",
    "AsyncStore",
]
