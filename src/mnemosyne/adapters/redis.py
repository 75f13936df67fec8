"""Redis store."""

from __future__ import annotations

import json
from typing import Any


def _serialize_value(value: Any) -> str:
    """Serialize a value to JSON."""
    return json.dumps({"value": value})


def _deserialize_value(data: bytes | str) -> Any:
    """Deserialize JSON back to a value."""
    if isinstance(data, bytes):
        data = data.decode("utf-8")
    return json.loads(data)["value"]


class AsyncRedisStore:
    """Async Redis store.

    Values are stored as JSON, so they must be JSON compatible. Operations
    that cache richer objects should set ``serialize=True`` so the codec
    turns them into text first.
    """

    def __init__(
        self,
        client: Any,  # redis.asyncio.Redis
        *,
        prefix: str = "mnemosyne",
    ) -> None:
        self._client = client
        self._prefix = prefix

    def _full_key(self, key: str) -> str:
        """Generate full Redis key."""
        return f"{self._prefix}:{key}"

    async def get(self, key: str) -> Any | None:
        """Get a value by key."""
        data = await self._client.get(self._full_key(key))
        if data is None:
            return None
        return _deserialize_value(data)

    async def set(self, key: str, value: Any, ttl_ms: int | None = None) -> None:
        """Store a value, expiring it after ``ttl_ms`` when given."""
        if ttl_ms is not None and ttl_ms <= 0:
            # Redis rejects non-positive expiry; an already-expired entry is a delete
            await self.delete(key)
            return
        await self._client.set(
            self._full_key(key),
            _serialize_value(value),
            px=ttl_ms,
        )

    async def delete(self, key: str) -> None:
        """Delete a value."""
        await self._client.delete(self._full_key(key))

    async def clear(self) -> None:
        """Clear all values under this store's prefix."""
        # Use SCAN to find and delete all prefixed keys
        cursor: int = 0
        pattern = f"{self._prefix}:*"
        while True:
            result = await self._client.scan(cursor, match=pattern, count=100)
            cursor = result[0]
            keys = result[1]
            if keys:
                await self._client.delete(*keys)
            if cursor == 0:
                break

    async def disconnect(self) -> None:
        """Close the Redis connection."""
        await self._client.aclose()
