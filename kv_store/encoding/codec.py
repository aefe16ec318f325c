"""Codec contract and the JSON and pickle implementations."""

from __future__ import annotations

import math
import pickle
from abc import ABC, abstractmethod
from functools import lru_cache
from types import UnionType
from typing import Any, ClassVar, TypeVar, Union, get_args, get_origin, override

from pydantic import TypeAdapter
from pydantic import ValidationError as PydanticValidationError

from kv_store.errors import DeserializationError, SerializationError


_T = TypeVar("_T")


class Codec(ABC):
    """Symmetric conversion between Python values and bytes.

    For any ``value`` that ``marshal`` accepts,
    ``unmarshal(marshal(value), type(value)) == value``.
    """

    name: ClassVar[str]

    @abstractmethod
    def marshal(self, value: Any) -> bytes:
        """Encode value, raising SerializationError when it cannot be represented."""

    @abstractmethod
    def unmarshal(self, data: bytes, target: type[_T]) -> _T:
        """Decode data into target, raising DeserializationError on a mismatch."""

    @override
    def __repr__(self) -> str:
        return f"{self.__class__.__name__}()"


@lru_cache(maxsize=256)
def _type_adapter(target: Any) -> TypeAdapter[Any]:
    return TypeAdapter(target)


def _reject_non_finite(value: Any) -> None:
    if isinstance(value, float):
        if not math.isfinite(value):
            msg = f"unsupported float value {value!r}"
            raise ValueError(msg)
    elif isinstance(value, dict):
        for key, item in value.items():
            _reject_non_finite(key)
            _reject_non_finite(item)
    elif isinstance(value, (list, tuple, set, frozenset)):
        for item in value:
            _reject_non_finite(item)


def _instance_types(target: Any) -> tuple[type, ...]:
    """Return the classes a pickled value must be an instance of; empty means unchecked."""
    origin = get_origin(target)
    if origin is Union or origin is UnionType:
        members: list[type] = []
        for arg in get_args(target):
            arg_types = _instance_types(arg)
            if not arg_types:
                return ()
            members.extend(arg_types)
        return tuple(members)

    expected = origin or target
    if expected is None:
        return (type(None),)
    if isinstance(expected, type) and expected not in (object, Any):
        return (expected,)
    return ()


class JSONCodec(Codec):
    """Self-describing JSON text codec.

    Typed decoding goes through :class:`pydantic.TypeAdapter`, so dataclasses,
    pydantic models, typed dicts and builtin containers all come back as the
    requested ``target`` type.

    JSON object keys are always strings: a mapping with non-``str`` keys only
    round-trips when read back with a parameterised target such as
    ``dict[int, str]``; a bare ``dict`` target yields string keys. NaN and
    infinite floats have no JSON form and are rejected on write.
    """

    name = "json"

    @override
    def marshal(self, value: Any) -> bytes:
        try:
            adapter = _type_adapter(type(value))
            _reject_non_finite(adapter.dump_python(value))
            return adapter.dump_json(value)
        except (ValueError, TypeError, RecursionError) as error:
            msg = f"cannot encode {type(value).__name__} as JSON: {error}"
            raise SerializationError(msg) from error

    @override
    def unmarshal(self, data: bytes, target: type[_T]) -> _T:
        try:
            adapter = _type_adapter(target)
        except (TypeError, ValueError) as error:
            msg = f"cannot decode JSON into {target!r}: {error}"
            raise DeserializationError(msg) from error

        try:
            return adapter.validate_json(data)
        except PydanticValidationError as error:
            msg = f"stored JSON does not match {target!r}: {error.error_count()} validation error(s)"
            raise DeserializationError(msg) from error


class PickleCodec(Codec):
    """Python-specific binary codec built on :mod:`pickle`.

    Only read payloads written by a trusted process; unpickling runs arbitrary code.
    """

    name = "pickle"

    def __init__(self, protocol: int = pickle.HIGHEST_PROTOCOL) -> None:
        super().__init__()
        self._protocol = protocol

    @override
    def marshal(self, value: Any) -> bytes:
        try:
            return pickle.dumps(value, protocol=self._protocol)
        except (pickle.PicklingError, TypeError, AttributeError, RecursionError) as error:
            msg = f"cannot pickle {type(value).__name__}: {error}"
            raise SerializationError(msg) from error

    @override
    def unmarshal(self, data: bytes, target: type[_T]) -> _T:
        try:
            value = pickle.loads(data)  # noqa: S301
        except Exception as error:
            msg = f"stored payload is not a valid pickle: {error}"
            raise DeserializationError(msg) from error

        expected = _instance_types(target)
        if expected and not isinstance(value, expected):
            names = " | ".join(cls.__name__ for cls in expected)
            msg = f"stored {type(value).__name__} is not an instance of {names}"
            raise DeserializationError(msg)
        return value

    @override
    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(protocol={self._protocol})"


JSON = JSONCodec()
PICKLE = PickleCodec()
