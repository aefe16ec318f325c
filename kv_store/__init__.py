"""kv-store - one key-value store contract over interchangeable engines"""

import importlib.metadata

from .encoding import JSON, PICKLE, Codec, JSONCodec, PickleCodec
from .errors import (
    CodecError,
    DeserializationError,
    EngineError,
    InvalidKeyError,
    InvalidValueError,
    KVStoreError,
    SerializationError,
    ValidationError,
)
from .options import MapOptions, MongoOptions, NatsOptions, Options, PostgresOptions, RedisOptions, with_defaults
from .stores import MapStore, MongoStore, NatsStore, PostgresStore, RedisStore, RemoteStore, Store
from .validation import check_key, check_key_and_value


try:
    __version__ = importlib.metadata.version("kv-store")
except importlib.metadata.PackageNotFoundError:  # pragma: no cover - running from a source checkout
    __version__ = "0.0.0"


__all__ = [
    "JSON",
    "PICKLE",
    "Codec",
    "CodecError",
    "DeserializationError",
    "EngineError",
    "InvalidKeyError",
    "InvalidValueError",
    "JSONCodec",
    "KVStoreError",
    "MapOptions",
    "MapStore",
    "MongoOptions",
    "MongoStore",
    "NatsOptions",
    "NatsStore",
    "Options",
    "PickleCodec",
    "PostgresOptions",
    "PostgresStore",
    "RedisOptions",
    "RedisStore",
    "RemoteStore",
    "SerializationError",
    "Store",
    "ValidationError",
    "__version__",
    "check_key",
    "check_key_and_value",
    "with_defaults",
]
