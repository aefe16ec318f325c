"""Engine backend contracts and implementations."""

from .mongodb import MongoBackend
from .nats import NatsBackend
from .postgres import PostgresBackend
from .protocol import Backend
from .redis import RedisBackend


__all__ = ["Backend", "MongoBackend", "NatsBackend", "PostgresBackend", "RedisBackend"]
