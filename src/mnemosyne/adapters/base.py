"""Base store protocol."""

from typing import Any, Protocol, runtime_checkable


@runtime_checkable
class AsyncStore(Protocol):
    """Async key-value store interface.

    ``get`` returns None for an absent key. ``ttl_ms`` of None means the
    entry never expires. Failures are raised, not returned.
    """

    async def get(self, key: str) -> Any | None:
        """Get a value by key."""
        ...

    async def set(self, key: str, value: Any, ttl_ms: int | None = None) -> None:
        """Store a value, optionally expiring after ``ttl_ms`` milliseconds."""
        ...

    async def delete(self, key: str) -> None:
        """Delete a value."""
        ...

    async def clear(self) -> None:
        """Clear all stored values."""
        ...

    async def disconnect(self) -> None:
        """Disconnect from the storage backend."""
        ...
