"""Redis-compatible backend implementation."""

from __future__ import annotations

import logging
from inspect import isawaitable
from typing import Any, override


try:
    import redis.asyncio as redis_async
except ImportError:  # pragma: no cover - exercised when dependency is absent
    redis_async = None

from .protocol import Backend


logger = logging.getLogger(__name__)


def _normalize_bytes(value: str | bytes | None) -> bytes | None:
    if value is None:
        return None
    if isinstance(value, str):
        return value.encode()
    return value


class RedisBackend(Backend):
    """Redis-compatible async backend using ``redis.asyncio`` client APIs."""

    def __init__(
        self,
        address: str = "localhost:6379",
        *,
        username: str = "",
        password: str = "",
        db: int = 0,
        connect_timeout: float = 2.0,
        client: Any | None = None,
    ) -> None:
        """Create a backend from an address or an injected async client.

        Parameters
        ----------
        address
            ``host:port`` of the Redis server, used when ``client`` is not provided.
        username, password
            Optional ACL credentials. Empty strings mean no authentication.
        db
            Logical database number.
        connect_timeout
            Seconds to wait for the TCP connection before failing.
        client
            Optional injected client with ``ping/get/set/delete/aclose`` API.
        """
        super().__init__()
        self._address = address
        self._db = db
        if client is not None:
            self._client = client
            return

        if redis_async is None:
            msg = "redis dependency is required for RedisBackend; install with `pip install kv-store[redis]`"
            raise RuntimeError(msg)

        host, _, port = address.rpartition(":")
        self._client = redis_async.Redis(
            host=host or address,
            port=int(port) if host and port else 6379,
            db=db,
            username=username or None,
            password=password or None,
            socket_connect_timeout=connect_timeout,
            decode_responses=False,
        )

    @override
    async def connect(self) -> None:
        """Ping the server so an unreachable address fails at construction."""
        _ = await self._client.ping()
        logger.debug("connected to redis at %s (db %d)", self._address, self._db)

    @override
    async def get(self, key: str) -> bytes | None:
        """Return payload for key, or None when key does not exist."""
        return _normalize_bytes(await self._client.get(key))

    @override
    async def set(self, key: str, value: bytes) -> None:
        """Store payload for key."""
        _ = await self._client.set(key, value)

    @override
    async def delete(self, key: str) -> None:
        """Delete key if present."""
        _ = await self._client.delete(key)

    @override
    async def close(self) -> None:
        """Release backend resources."""
        close_method = getattr(self._client, "aclose", None)
        if close_method is None:
            close_method = getattr(self._client, "close", None)
        if close_method is None:
            return

        maybe_awaitable = close_method()
        if isawaitable(maybe_awaitable):
            await maybe_awaitable
