"""In-process store backed by a lock-guarded dict."""

from __future__ import annotations

import threading
from typing import Any, TypeVar, override

from kv_store.encoding import JSON, Codec
from kv_store.options import DEFAULT_MAP_OPTIONS, MapOptions, with_defaults
from kv_store.validation import check_key, check_key_and_value

from .protocol import Store


_T = TypeVar("_T")


class MapStore(Store):
    """Thread-safe in-process store.

    Values are kept as codec output rather than live references, so mutating an
    object after ``set`` does not change the stored entry and every ``get``
    returns a fresh instance. Every dict access happens under one lock, which
    makes each operation atomic.
    """

    def __init__(self, options: MapOptions | None = None) -> None:
        super().__init__()
        self.options = with_defaults(options, DEFAULT_MAP_OPTIONS)
        self._codec: Codec = self.options.codec or JSON
        self._store: dict[str, bytes] = {}
        self._lock = threading.Lock()

    @property
    def codec(self) -> Codec:
        """Codec used for every entry of this store."""
        return self._codec

    @override
    def set(self, key: str, value: Any, *, timeout: float | None = None) -> None:
        """Store value under key."""
        check_key_and_value(key, value)
        data = self._codec.marshal(value)
        with self._lock:
            self._store[key] = data

    @override
    def get(self, key: str, target: type[_T], *, timeout: float | None = None) -> tuple[bool, _T | None]:
        """Return the decoded value for key, or ``(False, None)`` when missing."""
        check_key_and_value(key, target)
        with self._lock:
            data = self._store.get(key)
        if data is None:
            return False, None
        return True, self._codec.unmarshal(data, target)

    @override
    def delete(self, key: str, *, timeout: float | None = None) -> None:
        """Delete key if present."""
        check_key(key)
        with self._lock:
            _ = self._store.pop(key, None)

    @override
    def close(self) -> None:
        """Nothing to release for an in-process store."""
        return
