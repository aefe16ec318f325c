"""Stores for external engines, configured through immutable options."""

from __future__ import annotations

from typing import Any

from kv_store.backends import MongoBackend, NatsBackend, PostgresBackend, RedisBackend
from kv_store.encoding import JSON
from kv_store.options import (
    DEFAULT_MONGO_OPTIONS,
    DEFAULT_NATS_OPTIONS,
    DEFAULT_POSTGRES_OPTIONS,
    DEFAULT_REDIS_OPTIONS,
    MongoOptions,
    NatsOptions,
    PostgresOptions,
    RedisOptions,
    with_defaults,
)

from .remote import RemoteStore


class RedisStore(RemoteStore):
    """Store keeping each entry as one Redis string value."""

    def __init__(self, options: RedisOptions | None = None, *, client: Any | None = None) -> None:
        """Connect to Redis, raising EngineError when the server is unreachable."""
        self.options = with_defaults(options, DEFAULT_REDIS_OPTIONS)
        backend = RedisBackend(
            self.options.address,
            username=self.options.username,
            password=self.options.password,
            db=self.options.db,
            connect_timeout=self.options.connect_timeout,
            client=client,
        )
        super().__init__(backend, self.options.codec or JSON, connect_timeout=self.options.connect_timeout)


class PostgresStore(RemoteStore):
    """Store keeping each entry as one ``(k, v)`` row of a PostgreSQL table."""

    def __init__(self, options: PostgresOptions | None = None, *, client: Any | None = None) -> None:
        """Connect to PostgreSQL, raising EngineError when the server is unreachable."""
        self.options = with_defaults(options, DEFAULT_POSTGRES_OPTIONS)
        backend = PostgresBackend(
            self.options.dsn,
            self.options.table,
            user=self.options.user,
            password=self.options.password,
            connect_timeout=self.options.connect_timeout,
            max_connections=self.options.max_connections,
            client=client,
            create_table=self.options.create_table,
        )
        super().__init__(backend, self.options.codec or JSON, connect_timeout=self.options.connect_timeout)


class NatsStore(RemoteStore):
    """Store keeping each entry in a NATS JetStream KV bucket."""

    def __init__(self, options: NatsOptions | None = None, *, client: Any | None = None) -> None:
        """Connect to NATS and bind the bucket, raising EngineError on failure."""
        self.options = with_defaults(options, DEFAULT_NATS_OPTIONS)
        backend = NatsBackend(
            self.options.url,
            self.options.bucket,
            user=self.options.user,
            password=self.options.password,
            token=self.options.token,
            connect_timeout=self.options.connect_timeout,
            client=client,
            create_bucket=self.options.create_bucket,
        )
        super().__init__(backend, self.options.codec or JSON, connect_timeout=self.options.connect_timeout)


class MongoStore(RemoteStore):
    """Store keeping each entry as one document of a MongoDB collection."""

    def __init__(self, options: MongoOptions | None = None, *, client: Any | None = None) -> None:
        """Connect to MongoDB, raising EngineError when no server is selectable in time."""
        self.options = with_defaults(options, DEFAULT_MONGO_OPTIONS)
        backend = MongoBackend(
            self.options.connection_string,
            self.options.database,
            self.options.collection,
            username=self.options.username,
            password=self.options.password,
            connect_timeout=self.options.connect_timeout,
            client=client,
        )
        super().__init__(backend, self.options.codec or JSON, connect_timeout=self.options.connect_timeout)
