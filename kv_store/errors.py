"""Error taxonomy shared by every store implementation."""

from __future__ import annotations


class KVStoreError(Exception):
    """Base exception for all kv-store errors."""


class ValidationError(KVStoreError):
    """Raised when a caller passes an unusable key or value."""


class InvalidKeyError(ValidationError):
    """Raised when a key is empty or not a string."""

    def __init__(self, key: object) -> None:
        self.key = key
        super().__init__(f"key must be a non-empty string, got {key!r}")


class InvalidValueError(ValidationError):
    """Raised when a value (or read target) is None."""

    def __init__(self, detail: str = "value must not be None") -> None:
        super().__init__(detail)


class CodecError(KVStoreError):
    """Base exception for marshalling failures."""


class SerializationError(CodecError):
    """Raised when a value cannot be represented by a codec."""


class DeserializationError(CodecError):
    """Raised when stored bytes do not decode into the requested type."""


class EngineError(KVStoreError):
    """Raised when the storage engine behind a store fails.

    ``transient`` is True for failures worth retrying (connection loss, timeouts).
    The originating exception is chained as ``__cause__``.
    """

    def __init__(self, operation: str, detail: str = "", *, transient: bool = False) -> None:
        self.operation = operation
        self.transient = transient
        msg = f"engine error during '{operation}'"
        if detail:
            msg += f": {detail}"
        super().__init__(msg)
