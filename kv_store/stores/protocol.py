"""Store contract shared by every engine."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Any, Self, TypeVar


if TYPE_CHECKING:
    from types import TracebackType


_T = TypeVar("_T")


class Store(ABC):
    """Synchronous key-value store interface.

    Implementations validate keys and values before touching engine state and
    let validation errors propagate unchanged. ``timeout`` is the number of
    seconds to wait for the engine; stores without blocking I/O ignore it.
    """

    @abstractmethod
    def set(self, key: str, value: Any, *, timeout: float | None = None) -> None:
        """Store value under key, overwriting any existing entry."""

    @abstractmethod
    def get(self, key: str, target: type[_T], *, timeout: float | None = None) -> tuple[bool, _T | None]:
        """Return ``(True, value)`` decoded as target, or ``(False, None)`` when key is absent."""

    @abstractmethod
    def delete(self, key: str, *, timeout: float | None = None) -> None:
        """Delete key if present."""

    @abstractmethod
    def close(self) -> None:
        """Release store resources. Calling it again is a no-op."""

    def __enter__(self) -> Self:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_value: BaseException | None,
        traceback: TracebackType | None,
    ) -> None:
        self.close()
