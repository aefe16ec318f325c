"""Synchronous store facade over an async engine backend."""

from __future__ import annotations

import asyncio
import logging
import threading
from typing import TYPE_CHECKING, Any, TypeVar, override

from kv_store.encoding import JSON
from kv_store.errors import EngineError, KVStoreError
from kv_store.validation import check_key, check_key_and_value

from .protocol import Store


if TYPE_CHECKING:
    from collections.abc import Coroutine
    from concurrent.futures import Future

    from kv_store.backends import Backend
    from kv_store.encoding import Codec


logger = logging.getLogger(__name__)

_T = TypeVar("_T")

_TRANSIENT_NAME_MARKERS = ("Connection", "Timeout", "NoServers")


def _is_transient(error: BaseException) -> bool:
    if isinstance(error, OSError):
        return True
    return any(marker in cls.__name__ for cls in type(error).__mro__ for marker in _TRANSIENT_NAME_MARKERS)


class _AsyncLoopBridge:
    """Bridge sync calls to async backend operations on a dedicated loop."""

    def __init__(self) -> None:
        super().__init__()
        self._loop_ready = threading.Event()
        self._loop: asyncio.AbstractEventLoop | None = None
        self._thread = threading.Thread(target=self._run, name="kv-store-remote", daemon=True)
        self._thread.start()
        _ = self._loop_ready.wait()

    def _run(self) -> None:
        loop = asyncio.new_event_loop()
        asyncio.set_event_loop(loop)
        self._loop = loop
        self._loop_ready.set()
        try:
            loop.run_forever()
        finally:
            loop.close()

    def run(self, coroutine: Coroutine[Any, Any, _T], timeout: float | None = None) -> _T:
        loop = self._loop
        if loop is None or loop.is_closed():
            coroutine.close()
            msg = "remote store async loop is not running"
            raise RuntimeError(msg)
        future: Future[_T] = asyncio.run_coroutine_threadsafe(coroutine, loop)
        try:
            return future.result(timeout)
        except TimeoutError:
            _ = future.cancel()
            raise

    def close(self) -> None:
        loop = self._loop
        if loop is None:
            return
        self._loop = None
        _ = loop.call_soon_threadsafe(loop.stop)
        self._thread.join(timeout=5)


class RemoteStore(Store):
    """Store running an async :class:`~kv_store.backends.Backend` on a background loop.

    Values are marshalled with the store's codec before they reach the backend.
    Backend failures surface as :class:`~kv_store.errors.EngineError`; kv-store's
    own errors propagate unchanged.
    """

    def __init__(self, backend: Backend, codec: Codec = JSON, *, connect_timeout: float | None = None) -> None:
        """Start the loop thread and connect the backend.

        Raises
        ------
        EngineError
            When the backend cannot connect within ``connect_timeout`` seconds.
        """
        super().__init__()
        self._backend = backend
        self._codec = codec
        self._closed = False
        self._bridge = _AsyncLoopBridge()
        try:
            self._call("connect", backend.connect(), connect_timeout)
        except BaseException:
            self._bridge.close()
            raise

    @property
    def codec(self) -> Codec:
        """Codec used for every entry of this store."""
        return self._codec

    def _call(self, operation: str, coroutine: Coroutine[Any, Any, _T], timeout: float | None) -> _T:
        try:
            return self._bridge.run(coroutine, timeout)
        except KVStoreError:
            raise
        except Exception as error:
            transient = _is_transient(error)
            logger.debug(
                "%s on %s failed (transient=%s): %r", operation, type(self._backend).__name__, transient, error
            )
            detail = str(error) or type(error).__name__
            raise EngineError(operation, detail, transient=transient) from error

    @override
    def set(self, key: str, value: Any, *, timeout: float | None = None) -> None:
        """Marshal value and store it under key."""
        check_key_and_value(key, value)
        data = self._codec.marshal(value)
        self._call("set", self._backend.set(key, data), timeout)

    @override
    def get(self, key: str, target: type[_T], *, timeout: float | None = None) -> tuple[bool, _T | None]:
        """Fetch and unmarshal the value for key, or ``(False, None)`` when missing."""
        check_key_and_value(key, target)
        data = self._call("get", self._backend.get(key), timeout)
        if data is None:
            return False, None
        return True, self._codec.unmarshal(data, target)

    @override
    def delete(self, key: str, *, timeout: float | None = None) -> None:
        """Delete key if present."""
        check_key(key)
        self._call("delete", self._backend.delete(key), timeout)

    @override
    def close(self) -> None:
        """Close backend and bridge resources."""
        if self._closed:
            return
        self._closed = True
        try:
            self._call("close", self._backend.close(), None)
        finally:
            self._bridge.close()
            logger.debug("closed %s", type(self._backend).__name__)
