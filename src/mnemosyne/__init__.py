"""mnemosyne - Declarative memoization with key templates and tag invalidation."""

from contextlib import suppress

# Adapters (async only)
from mnemosyne.adapters import (
    AsyncMemoryStore,
    AsyncStore,
)

# Codecs
from mnemosyne.codecs import Codec, JsonCodec, PickleCodec

# Duration parsing
from mnemosyne.duration import parse_duration

# Errors
from mnemosyne.errors import DispatchError, MnemosyneError, SerializationError

# Memoizer API
from mnemosyne.memoizer import Memoizer, create_memoizer

# Service API
from mnemosyne.service import CachedService, cached
from mnemosyne.tags import TagRegistry
from mnemosyne.templates import KeyResolver

# Core types
from mnemosyne.types import CacheConfig, Duration

# Optional adapter imports - only available when dependencies are installed
with suppress(ImportError):
    from mnemosyne.adapters import AsyncRedisStore

__version__ = "0.1.0"

__all__ = [
    "AsyncMemoryStore",
    "AsyncRedisStore",
    "AsyncStore",
    "CacheConfig",
    "CachedService",
    "Codec",
    "DispatchError",
    "Duration",
    "JsonCodec",
    "KeyResolver",
    "Memoizer",
    "MnemosyneError",
    "PickleCodec",
    "SerializationError",
    "TagRegistry",
    "cached",
    "create_memoizer",
    "parse_duration",
]
