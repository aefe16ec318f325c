from __future__ import annotations

import asyncio
from contextlib import asynccontextmanager
from typing import TYPE_CHECKING

import pytest


if TYPE_CHECKING:
    from collections.abc import AsyncIterator


class InterfaceError(Exception):
    pass


class UndefinedTableError(Exception):
    pass


class ServerSelectionTimeoutError(Exception):
    pass


class BucketNotFoundError(Exception):
    pass


class KeyNotFoundError(Exception):
    pass


class KeyDeletedError(KeyNotFoundError):
    pass


class FakeRedisClient:
    def __init__(self, *, reachable: bool = True) -> None:
        super().__init__()
        self.store: dict[str, bytes] = {}
        self.closed = False
        self.reachable = reachable

    async def ping(self) -> bool:
        if not self.reachable:
            msg = "Error 111 connecting to localhost:6379. Connection refused."
            raise ConnectionRefusedError(msg)
        return True

    async def get(self, key: str) -> bytes | None:
        return self.store.get(key)

    async def set(self, key: str, value: bytes) -> bool:
        self.store[key] = value
        return True

    async def delete(self, key: str) -> int:
        return 1 if self.store.pop(key, None) is not None else 0

    async def aclose(self) -> None:
        self.closed = True


class FakePostgresClient:
    """Single-connection fake that, like asyncpg, refuses overlapping operations."""

    def __init__(self, *, table_exists: bool = True) -> None:
        super().__init__()
        self.store: dict[str, bytes] = {}
        self.closed = False
        self.table_exists = table_exists
        self.queries: list[str] = []
        self._busy = False

    @asynccontextmanager
    async def _operation(self, query: str) -> AsyncIterator[None]:
        if self._busy:
            msg = "cannot perform operation: another operation is in progress"
            raise InterfaceError(msg)
        self._busy = True
        self.queries.append(query)
        try:
            await asyncio.sleep(0)
            yield
        finally:
            self._busy = False

    async def fetchrow(self, query: str, key: str) -> dict[str, bytes] | None:
        async with self._operation(query):
            if not self.table_exists:
                raise UndefinedTableError
            if key not in self.store:
                return None
            return {"v": self.store[key]}

    async def execute(self, query: str, *args: str | bytes) -> str:
        async with self._operation(query):
            if query.startswith("CREATE TABLE IF NOT EXISTS"):
                self.table_exists = True
                return "CREATE TABLE"

            if not self.table_exists:
                raise UndefinedTableError

            if query.startswith("INSERT INTO"):
                key, value = args
                self.store[str(key)] = bytes(value, "utf-8") if isinstance(value, str) else value
                return "INSERT 0 1"
            if query.startswith("DELETE FROM"):
                _ = self.store.pop(str(args[0]), None)
                return "DELETE 1"

            return "OK"

    async def close(self) -> None:
        self.closed = True


class FakeEntry:
    def __init__(self, value: bytes | str | None) -> None:
        super().__init__()
        self.value = value


class FakeKVBucket:
    def __init__(self) -> None:
        super().__init__()
        self.store: dict[str, bytes] = {}
        self.tombstones: set[str] = set()

    async def get(self, key: str) -> FakeEntry:
        if key in self.tombstones:
            raise KeyDeletedError
        if key not in self.store:
            raise KeyNotFoundError
        return FakeEntry(self.store[key])

    async def put(self, key: str, value: bytes) -> int:
        self.tombstones.discard(key)
        self.store[key] = value
        return len(self.store)

    async def delete(self, key: str) -> bool:
        _ = self.store.pop(key, None)
        self.tombstones.add(key)
        return True


class FakeJetStream:
    def __init__(self, buckets: dict[str, FakeKVBucket]) -> None:
        super().__init__()
        self.buckets = buckets

    async def key_value(self, bucket: str) -> FakeKVBucket:
        if bucket not in self.buckets:
            raise BucketNotFoundError
        return self.buckets[bucket]

    async def create_key_value(self, bucket: str) -> FakeKVBucket:
        created = FakeKVBucket()
        self.buckets[bucket] = created
        return created


class FakeNatsClient:
    def __init__(self, buckets: dict[str, FakeKVBucket] | None = None) -> None:
        super().__init__()
        self.buckets: dict[str, FakeKVBucket] = {} if buckets is None else buckets
        self._js = FakeJetStream(self.buckets)
        self.closed = False

    def jetstream(self) -> FakeJetStream:
        return self._js

    async def close(self) -> None:
        self.closed = True


class FakeMongoCollection:
    def __init__(self) -> None:
        super().__init__()
        self.documents: dict[str, dict[str, object]] = {}

    async def find_one(self, query: dict[str, str]) -> dict[str, object] | None:
        document = self.documents.get(query["_id"])
        return dict(document) if document is not None else None

    async def replace_one(self, query: dict[str, str], document: dict[str, object], *, upsert: bool = False) -> None:
        if query["_id"] in self.documents or upsert:
            self.documents[query["_id"]] = dict(document)

    async def delete_one(self, query: dict[str, str]) -> None:
        _ = self.documents.pop(query["_id"], None)


class FakeMongoAdmin:
    def __init__(self, *, reachable: bool) -> None:
        super().__init__()
        self.reachable = reachable

    async def command(self, name: str) -> dict[str, float]:
        if not self.reachable:
            msg = "localhost:27017: [Errno 111] Connection refused"
            raise ServerSelectionTimeoutError(msg)
        assert name == "ping"
        return {"ok": 1.0}


class FakeMongoDatabase:
    def __init__(self) -> None:
        super().__init__()
        self.collections: dict[str, FakeMongoCollection] = {}

    def __getitem__(self, name: str) -> FakeMongoCollection:
        return self.collections.setdefault(name, FakeMongoCollection())


class FakeMongoClient:
    def __init__(self, *, reachable: bool = True) -> None:
        super().__init__()
        self.databases: dict[str, FakeMongoDatabase] = {}
        self.admin = FakeMongoAdmin(reachable=reachable)
        self.closed = False

    def __getitem__(self, name: str) -> FakeMongoDatabase:
        return self.databases.setdefault(name, FakeMongoDatabase())

    async def close(self) -> None:
        self.closed = True


@pytest.fixture
def redis_client() -> FakeRedisClient:
    return FakeRedisClient()


@pytest.fixture
def postgres_client() -> FakePostgresClient:
    return FakePostgresClient()


@pytest.fixture
def nats_client() -> FakeNatsClient:
    return FakeNatsClient({"kv_store": FakeKVBucket()})


@pytest.fixture
def redis_client_factory() -> type[FakeRedisClient]:
    return FakeRedisClient


@pytest.fixture
def postgres_client_factory() -> type[FakePostgresClient]:
    return FakePostgresClient


@pytest.fixture
def nats_client_factory() -> type[FakeNatsClient]:
    return FakeNatsClient


@pytest.fixture
def mongo_client() -> FakeMongoClient:
    return FakeMongoClient()


@pytest.fixture
def mongo_client_factory() -> type[FakeMongoClient]:
    return FakeMongoClient
