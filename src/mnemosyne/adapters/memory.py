"""In-memory store (async only)."""

import asyncio
import time
from collections import OrderedDict
from typing import Any


def _now_ms() -> int:
    return int(time.time() * 1000)


class AsyncMemoryStore:
    """Async in-memory store with per-entry expiry and optional LRU eviction."""

    def __init__(self, max_items: int | None = None) -> None:
        # key -> (value, expires_at ms or None)
        self._data: OrderedDict[str, tuple[Any, int | None]] = OrderedDict()
        self._max_items = max_items
        self._lock = asyncio.Lock()

    async def get(self, key: str) -> Any | None:
        """Get a value by key, dropping it if expired."""
        async with self._lock:
            item = self._data.get(key)
            if item is None:
                return None
            value, expires_at = item
            if expires_at is not None and _now_ms() >= expires_at:
                del self._data[key]
                return None
            self._data.move_to_end(key)  # LRU touch
            return value

    async def set(self, key: str, value: Any, ttl_ms: int | None = None) -> None:
        """Store a value."""
        expires_at = _now_ms() + ttl_ms if ttl_ms is not None else None
        async with self._lock:
            self._data[key] = (value, expires_at)
            self._data.move_to_end(key)
            if self._max_items and len(self._data) > self._max_items:
                self._data.popitem(last=False)

    async def delete(self, key: str) -> None:
        """Delete a value."""
        async with self._lock:
            self._data.pop(key, None)

    async def clear(self) -> None:
        """Clear all stored values."""
        async with self._lock:
            self._data.clear()

    async def disconnect(self) -> None:
        """Disconnect from the storage backend (no-op for memory)."""
        pass

    def __len__(self) -> int:
        return len(self._data)

    def __contains__(self, key: object) -> bool:
        return key in self._data
