"""
Keyed and single-value containers over JSON-compatible Python values.

Encoding builds plain ``dict`` / ``list`` / scalar trees; decoding walks them.
Every container remembers the coding path that led to it so errors can point
at the offending location.
"""

from __future__ import annotations

import types
import typing
from enum import Enum
from typing import Any, Union, get_args, get_origin
from uuid import UUID

from .codable import Codable
from .errors import (
    DataCorruptedError,
    EncodingError,
    InvalidValueError,
    KeyNotFoundError,
    TypeMismatchError,
    ValueNotFoundError,
)
from .keys import CodingKey, DynamicKey, key_string

_UNSET = object()


class Encoder:
    """Collects the encoded form of a single value."""

    def __init__(self, coding_path: tuple = ()):
        self.coding_path = tuple(coding_path)
        self._storage: Any = _UNSET

    @property
    def value(self) -> Any:
        if self._storage is _UNSET:
            raise InvalidValueError(None, self.coding_path, reason="Top-level value did not encode any values")
        return self._storage

    def container(self, keyed_by: type) -> KeyedEncodingContainer:
        """Return a keyed container; repeated calls share the same storage."""
        if self._storage is _UNSET:
            self._storage = {}
        elif not isinstance(self._storage, dict):
            raise EncodingError("Cannot open a keyed container over a single value", self.coding_path)
        return KeyedEncodingContainer(keyed_by, self._storage, self.coding_path)

    def single_value_container(self) -> SingleValueEncodingContainer:
        return SingleValueEncodingContainer(self)


class KeyedEncodingContainer:
    def __init__(self, keyed_by: type, storage: dict, coding_path: tuple):
        self.keyed_by = keyed_by
        self.coding_path = coding_path
        self._storage = storage

    def _check_key(self, key: Any) -> str:
        if not isinstance(key, self.keyed_by):
            raise EncodingError(f"Key {key!r} is not a {self.keyed_by.__name__}", self.coding_path)
        return key_string(key)

    def encode(self, value: Any, key: CodingKey | DynamicKey) -> None:
        wire_key = self._check_key(key)
        self._storage[wire_key] = encode_value(value, self.coding_path + (key,))

    def encode_if_present(self, value: Any, key: CodingKey | DynamicKey) -> None:
        if value is not None:
            self.encode(value, key)

    def encode_nil(self, key: CodingKey | DynamicKey) -> None:
        self._storage[self._check_key(key)] = None

    def nested_container(self, keyed_by: type, key: CodingKey | DynamicKey) -> KeyedEncodingContainer:
        """Return the keyed container stored under ``key``, creating it if needed.

        An existing nested map is reused so that several fields can write
        into the same nested object.
        """
        wire_key = self._check_key(key)
        nested = self._storage.get(wire_key)
        if not isinstance(nested, dict):
            nested = {}
            self._storage[wire_key] = nested
        return KeyedEncodingContainer(keyed_by, nested, self.coding_path + (key,))


class SingleValueEncodingContainer:
    def __init__(self, encoder: Encoder):
        self._encoder = encoder

    def encode(self, value: Any) -> None:
        self._encoder._storage = encode_value(value, self._encoder.coding_path)

    def encode_nil(self) -> None:
        self._encoder._storage = None


class Decoder:
    """Wraps one JSON-compatible value for decoding."""

    def __init__(self, value: Any, coding_path: tuple = ()):
        self.value = value
        self.coding_path = tuple(coding_path)

    def container(self, keyed_by: type) -> KeyedDecodingContainer:
        if self.value is None:
            raise ValueNotFoundError(dict, self.coding_path)
        if not isinstance(self.value, dict):
            raise TypeMismatchError(dict, self.value, self.coding_path)
        return KeyedDecodingContainer(keyed_by, self.value, self.coding_path)

    def single_value_container(self) -> SingleValueDecodingContainer:
        return SingleValueDecodingContainer(self.value, self.coding_path)


class KeyedDecodingContainer:
    def __init__(self, keyed_by: type, storage: dict, coding_path: tuple):
        self.keyed_by = keyed_by
        self.coding_path = coding_path
        self._storage = storage

    @property
    def all_keys(self) -> list:
        """Keys present in the source that belong to ``keyed_by``, in source order."""
        if not (isinstance(self.keyed_by, type) and issubclass(self.keyed_by, CodingKey)):
            return [self.keyed_by(wire_key) for wire_key in self._storage]
        known = self.keyed_by._value2member_map_
        return [known[wire_key] for wire_key in self._storage if wire_key in known]

    def contains(self, key: CodingKey | DynamicKey) -> bool:
        return key_string(key) in self._storage

    def _raw(self, key: CodingKey | DynamicKey) -> Any:
        wire_key = key_string(key)
        if wire_key not in self._storage:
            raise KeyNotFoundError(key, self.coding_path)
        return self._storage[wire_key]

    def decode(self, type_: Any, key: CodingKey | DynamicKey) -> Any:
        raw = self._raw(key)
        path = self.coding_path + (key,)
        if raw is None and not _accepts_none(type_):
            raise ValueNotFoundError(type_, path)
        return decode_value(type_, raw, path)

    def decode_if_present(self, type_: Any, key: CodingKey | DynamicKey) -> Any:
        """Decode ``key`` or return ``None`` when it is absent or null."""
        raw = self._storage.get(key_string(key))
        if raw is None:
            return None
        return decode_value(type_, raw, self.coding_path + (key,))

    def decode_nil(self, key: CodingKey | DynamicKey) -> bool:
        return self._raw(key) is None

    def nested_container(self, keyed_by: type, key: CodingKey | DynamicKey) -> KeyedDecodingContainer:
        raw = self._raw(key)
        path = self.coding_path + (key,)
        if raw is None:
            raise ValueNotFoundError(dict, path)
        if not isinstance(raw, dict):
            raise TypeMismatchError(dict, raw, path)
        return KeyedDecodingContainer(keyed_by, raw, path)


class SingleValueDecodingContainer:
    def __init__(self, value: Any, coding_path: tuple):
        self.value = value
        self.coding_path = coding_path

    def decode_nil(self) -> bool:
        return self.value is None

    def decode(self, type_: Any) -> Any:
        if self.value is None and not _accepts_none(type_):
            raise ValueNotFoundError(type_, self.coding_path)
        return decode_value(type_, self.value, self.coding_path)


def encode_value(value: Any, coding_path: tuple = ()) -> Any:
    """Convert ``value`` into its JSON-compatible form."""
    if value is None:
        return None
    if isinstance(value, Codable):
        encoder = Encoder(coding_path)
        value.encode(encoder)
        return encoder.value
    # raw-value enums may also be str or int instances
    if isinstance(value, Enum):
        return encode_value(value.value, coding_path)
    if isinstance(value, (bool, str, int, float)):
        return value
    if isinstance(value, UUID):
        return str(value)
    if isinstance(value, (list, tuple)):
        return [encode_value(item, coding_path + (index,)) for index, item in enumerate(value)]
    if isinstance(value, (set, frozenset)):
        items = sorted(value, key=repr)
        return [encode_value(item, coding_path + (index,)) for index, item in enumerate(items)]
    if isinstance(value, dict):
        result = {}
        for key, item in value.items():
            wire_key = _encode_dict_key(key, coding_path)
            result[wire_key] = encode_value(item, coding_path + (DynamicKey(wire_key),))
        return result
    raise InvalidValueError(value, coding_path)


def _encode_dict_key(key: Any, coding_path: tuple) -> str:
    if isinstance(key, Enum):
        key = key.value
    if isinstance(key, str):
        return key
    if isinstance(key, int) and not isinstance(key, bool):
        return str(key)
    raise InvalidValueError(key, coding_path, reason=f"Cannot use {type(key).__name__} as an object key")


def decode_value(type_: Any, raw: Any, coding_path: tuple = ()) -> Any:
    """Build a value of ``type_`` from its JSON-compatible form ``raw``."""
    if type_ is Any or type_ is object:
        return raw

    origin = get_origin(type_)
    if origin is typing.Annotated:
        return decode_value(get_args(type_)[0], raw, coding_path)
    if origin is Union or origin is types.UnionType:
        return _decode_union(type_, raw, coding_path)
    if origin is typing.Literal:
        if raw not in get_args(type_):
            raise DataCorruptedError(f"Value {raw!r} is not one of {list(get_args(type_))}", coding_path)
        return raw
    if origin in (list, set, frozenset, tuple):
        return _decode_sequence(type_, origin, raw, coding_path)
    if origin is dict:
        return _decode_mapping(type_, raw, coding_path)

    if type_ is None or type_ is type(None):
        if raw is not None:
            raise TypeMismatchError(type(None), raw, coding_path)
        return None
    if raw is None:
        raise ValueNotFoundError(type_, coding_path)
    if type_ is dict:
        return _decode_mapping(type_, raw, coding_path)
    if type_ in (list, tuple, set, frozenset):
        return _decode_sequence(type_, type_, raw, coding_path)
    if type_ is bool:
        if not isinstance(raw, bool):
            raise TypeMismatchError(bool, raw, coding_path)
        return raw
    if type_ is int:
        if isinstance(raw, bool) or not isinstance(raw, int):
            if isinstance(raw, float) and raw.is_integer():
                return int(raw)
            raise TypeMismatchError(int, raw, coding_path)
        return raw
    if type_ is float:
        if isinstance(raw, bool) or not isinstance(raw, (int, float)):
            raise TypeMismatchError(float, raw, coding_path)
        return float(raw)
    if type_ is str:
        if not isinstance(raw, str):
            raise TypeMismatchError(str, raw, coding_path)
        return raw
    if isinstance(type_, type) and issubclass(type_, Codable):
        return type_.from_decoder(Decoder(raw, coding_path))
    if isinstance(type_, type) and issubclass(type_, Enum):
        try:
            return type_(raw)
        except ValueError as e:
            raise DataCorruptedError(f"Cannot initialize {type_.__name__} from invalid value {raw!r}", coding_path) from e
    if type_ is UUID:
        if not isinstance(raw, str):
            raise TypeMismatchError(UUID, raw, coding_path)
        try:
            return UUID(raw)
        except ValueError as e:
            raise DataCorruptedError(f"Attempted to decode UUID from invalid UUID string: {raw}", coding_path) from e
    raise TypeError(f"Unsupported type for decoding: {type_!r}")


def _accepts_none(type_: Any) -> bool:
    if type_ is Any or type_ is None or type_ is type(None):
        return True
    if get_origin(type_) is typing.Annotated:
        return _accepts_none(get_args(type_)[0])
    if get_origin(type_) in (Union, types.UnionType):
        return type(None) in get_args(type_)
    return False


def _decode_union(type_: Any, raw: Any, coding_path: tuple) -> Any:
    members = get_args(type_)
    if raw is None:
        if type(None) in members:
            return None
        raise ValueNotFoundError(type_, coding_path)
    failures: list[Exception] = []
    for member in members:
        if member is type(None):
            continue
        try:
            return decode_value(member, raw, coding_path)
        except (DataCorruptedError, TypeMismatchError, ValueNotFoundError, KeyNotFoundError) as e:
            failures.append(e)
    raise TypeMismatchError(type_, raw, coding_path) from (failures[-1] if failures else None)


def _decode_sequence(type_: Any, origin: type, raw: Any, coding_path: tuple) -> Any:
    if not isinstance(raw, list):
        raise TypeMismatchError(origin, raw, coding_path)
    args = get_args(type_)
    if origin is tuple and args and not (len(args) == 2 and args[1] is Ellipsis):
        if len(args) != len(raw):
            raise DataCorruptedError(f"Expected {len(args)} elements but found {len(raw)}", coding_path)
        return tuple(decode_value(arg, item, coding_path + (index,)) for index, (arg, item) in enumerate(zip(args, raw)))
    item_type = args[0] if args else Any
    items = [decode_value(item_type, item, coding_path + (index,)) for index, item in enumerate(raw)]
    if origin is list:
        return items
    return origin(items)


def _decode_mapping(type_: Any, raw: Any, coding_path: tuple) -> dict:
    if not isinstance(raw, dict):
        raise TypeMismatchError(dict, raw, coding_path)
    args = get_args(type_)
    key_type, value_type = args if len(args) == 2 else (str, Any)
    result = {}
    for wire_key, item in raw.items():
        path = coding_path + (DynamicKey(wire_key),)
        if key_type is int:
            try:
                key = int(wire_key)
            except ValueError as e:
                raise DataCorruptedError(f"Expected an integer key but found {wire_key!r}", path) from e
        elif key_type in (str, Any):
            key = wire_key
        else:
            key = decode_value(key_type, wire_key, path)
        result[key] = decode_value(value_type, item, path)
    return result
