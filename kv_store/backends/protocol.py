"""Engine backend interface definitions."""

from __future__ import annotations

from abc import ABC, abstractmethod


class Backend(ABC):
    """Async engine backend storing opaque payload bytes under string keys.

    Backends never interpret the payload; encoding happens in the store above.
    """

    @abstractmethod
    async def connect(self) -> None:
        """Establish the engine connection, failing fast when it is unreachable."""

    @abstractmethod
    async def get(self, key: str) -> bytes | None:
        """Return payload for key, or None when key does not exist."""

    @abstractmethod
    async def set(self, key: str, value: bytes) -> None:
        """Store payload for key, overwriting any existing entry."""

    @abstractmethod
    async def delete(self, key: str) -> None:
        """Delete key if present."""

    @abstractmethod
    async def close(self) -> None:
        """Close any backend resources."""
