"""Tag registry: which cache keys were stored under which tag."""

from __future__ import annotations

import logging

from mnemosyne.adapters.base import AsyncStore

logger = logging.getLogger(__name__)

TAG_PREFIX = "tag:"


class TagRegistry:
    """Keeps, per tag, the ordered list of cache keys registered under it.

    The list lives in the store itself under ``tag_prefix + tag``. Appends are
    a read-modify-write with no locking, so concurrent writers to one tag can
    lose an append. The worst outcome is a key that a cascade misses and that
    lives until its own TTL.
    """

    def __init__(self, store: AsyncStore, *, tag_prefix: str = TAG_PREFIX) -> None:
        self._store = store
        self._tag_prefix = tag_prefix

    def registry_key(self, tag: str) -> str:
        """Storage key of a tag's key list."""
        return f"{self._tag_prefix}{tag}"

    async def keys_for_tag(self, tag: str) -> list[str]:
        """Return the keys registered under a tag (empty when unknown)."""
        keys = await self._store.get(self.registry_key(tag))
        return list(keys) if keys else []

    async def add_key_to_tag(self, tag: str, key: str) -> None:
        """Register a key under a tag unless it is already there."""
        keys = await self.keys_for_tag(tag)
        if key in keys:
            return
        keys.append(key)
        await self._store.set(self.registry_key(tag), keys, None)

    async def invalidate_tag(self, tag: str) -> None:
        """Delete every key registered under a tag, then the tag entry itself.

        Entries go first: if the cascade stops midway the registry still
        lists keys that are already gone, which only costs a recompute.
        """
        keys = await self.keys_for_tag(tag)
        logger.debug("Invalidating tag %r (%d keys)", tag, len(keys))
        for key in keys:
            await self._store.delete(key)
        await self._store.delete(self.registry_key(tag))


__all__ = ["TAG_PREFIX", "TagRegistry"]
