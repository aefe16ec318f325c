"""Store contract and implementations."""

from .adapters import MongoStore, NatsStore, PostgresStore, RedisStore
from .map_store import MapStore
from .protocol import Store
from .remote import RemoteStore


__all__ = ["MapStore", "MongoStore", "NatsStore", "PostgresStore", "RedisStore", "RemoteStore", "Store"]
