"""Shared pytest fixtures."""

from typing import Any

import pytest

from mnemosyne import AsyncMemoryStore, CachedService, Memoizer, cached


class RecordingStore(AsyncMemoryStore):
    """Memory store that records every operation in order."""

    def __init__(self) -> None:
        super().__init__()
        self.operations: list[tuple[Any, ...]] = []

    async def get(self, key: str) -> Any | None:
        self.operations.append(("get", key))
        return await super().get(key)

    async def set(self, key: str, value: Any, ttl_ms: int | None = None) -> None:
        self.operations.append(("set", key, value, ttl_ms))
        await super().set(key, value, ttl_ms)

    async def delete(self, key: str) -> None:
        self.operations.append(("delete", key))
        await super().delete(key)

    def calls(self, name: str) -> list[tuple[Any, ...]]:
        return [op for op in self.operations if op[0] == name]


class FailingStore(AsyncMemoryStore):
    """Memory store whose selected operations raise."""

    def __init__(self, *failing: str) -> None:
        super().__init__()
        self.failing = set(failing)

    async def get(self, key: str) -> Any | None:
        if "get" in self.failing:
            raise ConnectionError("store down")
        return await super().get(key)

    async def set(self, key: str, value: Any, ttl_ms: int | None = None) -> None:
        if "set" in self.failing:
            raise ConnectionError("store down")
        await super().set(key, value, ttl_ms)

    async def delete(self, key: str) -> None:
        if "delete" in self.failing:
            raise ConnectionError("store down")
        await super().delete(key)


class UserService(CachedService):
    """Service exercising every kind of cache declaration."""

    def __init__(self, **kwargs: Any) -> None:
        super().__init__(**kwargs)
        self.counter = 0

    @cached(ttl="1h")
    async def simple_method(self) -> int:
        self.counter += 1
        return self.counter

    @cached("user:{id}", ttl="1h")
    async def method_with_params(self, id: int) -> dict:
        self.counter += 1
        return {"id": id, "count": self.counter}

    @cached("users:dept:{dept_id}:status:{status}", ttl="1h")
    async def method_with_multiple_params(self, dept_id: int, status: str) -> dict:
        self.counter += 1
        return {"dept_id": dept_id, "status": status, "count": self.counter}

    @cached(invalidates=["user:{id}"])
    async def invalidating_method(self, id: int) -> None:
        self.counter += 1

    @cached(
        "complex:{id}",
        ttl="1h",
        invalidates=["user:{id}", "users:dept:{dept_id}:status:active"],
    )
    async def complex_method(self, id: int, dept_id: int) -> dict:
        self.counter += 1
        return {"id": id, "dept_id": dept_id, "count": self.counter}

    @cached("serialized:{id}", ttl="1h", serialize=True)
    async def method_with_serialization(self, id: int) -> "Profile":
        self.counter += 1
        return Profile(id=id, count=self.counter)

    @cached("plain:{id}", ttl="1h", serialize=False)
    async def method_without_serialization(self, id: int) -> dict:
        self.counter += 1
        return {"id": id, "count": self.counter}

    @cached("user:1", ttl="1h", tags=["user", "user-1"])
    async def get_user1(self) -> dict:
        self.counter += 1
        return {"id": 1, "name": "John", "count": self.counter}

    @cached("user:2", ttl="1h", tags=["user", "user-2"])
    async def get_user2(self) -> dict:
        self.counter += 1
        return {"id": 2, "name": "Jane", "count": self.counter}

    @cached("post:{post_id}", tags=["author:{author}"])
    async def get_post(self, post_id: int, author: str = "anonymous") -> dict:
        self.counter += 1
        return {"post_id": post_id, "author": author, "count": self.counter}

    async def uncached(self, id: int) -> int:
        self.counter += 1
        return id


class Profile:
    """Plain object that only survives the store through a codec."""

    def __init__(self, id: int, count: int) -> None:
        self.id = id
        self.count = count

    def __eq__(self, other: object) -> bool:
        return (
            isinstance(other, Profile)
            and other.id == self.id
            and other.count == self.count
        )


@pytest.fixture
def store() -> RecordingStore:
    """Create a fresh RecordingStore for each test."""
    return RecordingStore()


@pytest.fixture
def memoizer(store: RecordingStore) -> Memoizer:
    """Create a Memoizer over the recording store."""
    return Memoizer(store)


@pytest.fixture
def service(store: RecordingStore) -> UserService:
    """Create a UserService over the recording store."""
    return UserService(store=store)
