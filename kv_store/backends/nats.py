"""NATS JetStream KV backend implementation."""

from __future__ import annotations

import logging
from typing import Any, override


try:
    import nats as nats_module
except ImportError:  # pragma: no cover - exercised when dependency is absent
    nats_module = None

from kv_store.errors import EngineError

from .protocol import Backend


logger = logging.getLogger(__name__)

_NOT_FOUND_ERROR_NAMES = {"BucketNotFoundError", "KeyNotFoundError", "KeyDeletedError"}


def _is_not_found_error(error: Exception) -> bool:
    return any(cls.__name__ in _NOT_FOUND_ERROR_NAMES for cls in type(error).__mro__)


class NatsBackend(Backend):
    """NATS JetStream KV backend.

    The backend uses an existing KV bucket by default.
    Set ``create_bucket=True`` to allow creating it when missing.
    Deleted keys leave a tombstone in the bucket and read back as absent.
    """

    def __init__(
        self,
        url: str = "nats://localhost:4222",
        bucket: str = "kv_store",
        *,
        user: str = "",
        password: str = "",
        token: str = "",
        connect_timeout: float = 2.0,
        client: Any | None = None,
        create_bucket: bool = False,
    ) -> None:
        """Create a backend using a NATS URL or injected client.

        Parameters
        ----------
        url
            NATS server URL used when ``client`` is not provided.
        bucket
            JetStream KV bucket name.
        user, password, token
            Optional credentials. Empty strings are not sent.
        connect_timeout
            Seconds to wait for the connection before failing.
        client
            Optional injected connected NATS client with ``jetstream`` API.
        create_bucket
            When True, creates bucket if missing. Defaults to False.
        """
        super().__init__()
        self._url = url
        self._bucket_name = bucket
        self._credentials = {"user": user, "password": password, "token": token}
        self._connect_timeout = connect_timeout
        self._client = client
        self._create_bucket = create_bucket
        self._kv: Any | None = None

    async def _ensure_kv(self) -> Any:
        if self._kv is not None:
            return self._kv

        if self._client is None:
            if nats_module is None:
                msg = "nats-py dependency is required for NatsBackend; install with `pip install kv-store[nats]`"
                raise RuntimeError(msg)
            connect = getattr(nats_module, "connect", None)
            if connect is None:
                msg = "nats.connect is unavailable in installed nats-py package"
                raise RuntimeError(msg)
            self._client = await connect(
                servers=[self._url],
                connect_timeout=self._connect_timeout,
                allow_reconnect=False,
                **{name: value for name, value in self._credentials.items() if value},
            )

        jetstream = self._client.jetstream()

        try:
            self._kv = await jetstream.key_value(self._bucket_name)
        except Exception as error:
            if _is_not_found_error(error) and self._create_bucket:
                self._kv = await jetstream.create_key_value(bucket=self._bucket_name)
                logger.debug("created jetstream KV bucket %s", self._bucket_name)
            else:
                detail = (
                    f"jetstream KV bucket '{self._bucket_name}' is not available; "
                    "create it first or initialize with create_bucket=True"
                )
                raise EngineError("connect", detail) from error

        return self._kv

    @override
    async def connect(self) -> None:
        """Connect and bind the KV bucket."""
        _ = await self._ensure_kv()
        logger.debug("connected to nats at %s (bucket %s)", self._url, self._bucket_name)

    @override
    async def get(self, key: str) -> bytes | None:
        """Return payload for key, or None when key does not exist."""
        kv = await self._ensure_kv()
        try:
            entry = await kv.get(key)
        except Exception as error:
            if _is_not_found_error(error):
                return None
            raise

        value = entry.value
        if value is None:
            return None
        if isinstance(value, str):
            return value.encode()
        return value

    @override
    async def set(self, key: str, value: bytes) -> None:
        """Store payload for key."""
        kv = await self._ensure_kv()
        _ = await kv.put(key, value)

    @override
    async def delete(self, key: str) -> None:
        """Delete key if present."""
        kv = await self._ensure_kv()
        _ = await kv.delete(key)

    @override
    async def close(self) -> None:
        """Close NATS client resources."""
        if self._client is None:
            return
        await self._client.close()
