"""Preconditions checked by every store before touching engine state."""

from __future__ import annotations

from typing import Any

from kv_store.errors import InvalidKeyError, InvalidValueError


def check_key(key: Any) -> None:
    """Raise InvalidKeyError unless key is a non-empty string."""
    if not isinstance(key, str) or not key:
        raise InvalidKeyError(key)


def check_key_and_value(key: Any, value: Any) -> None:
    """Check the key, then reject a None value.

    Reads pass their target type as ``value``.
    """
    check_key(key)
    if value is None:
        raise InvalidValueError
