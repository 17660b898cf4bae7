"""
Runtime errors raised by generated coding routines.

Decode failures carry the coding path at which they happened. Transform
failures are raised by the transformers and propagate unchanged.
"""

from __future__ import annotations

from typing import Any

from .keys import format_coding_path, key_string


class DecodingError(Exception):
    """Base class for all decode-time failures."""

    def __init__(self, message: str, coding_path: tuple = ()):
        self.message = message
        self.coding_path = tuple(coding_path)
        super().__init__(message)

    def __str__(self) -> str:
        return f"{self.message} (at {format_coding_path(self.coding_path)})"


class KeyNotFoundError(DecodingError):
    """A required key is absent from the keyed source."""

    def __init__(self, key: Any, coding_path: tuple = ()):
        self.key = key
        super().__init__(f"No value associated with key '{key_string(key)}'", coding_path)


class ValueNotFoundError(DecodingError):
    """A key is present but holds null where a value was required."""

    def __init__(self, expected_type: Any, coding_path: tuple = ()):
        self.expected_type = expected_type
        super().__init__(f"Expected {_type_name(expected_type)} value but found null instead", coding_path)


class TypeMismatchError(DecodingError):
    """A value is present but has the wrong shape."""

    def __init__(self, expected_type: Any, actual_value: Any, coding_path: tuple = ()):
        self.expected_type = expected_type
        self.actual_value = actual_value
        super().__init__(
            f"Expected to decode {_type_name(expected_type)} but found {type(actual_value).__name__} instead",
            coding_path,
        )


class DataCorruptedError(DecodingError):
    """The data is well-formed but cannot be interpreted."""


class UnrecognizedCaseTagError(DataCorruptedError):
    """A simple sum type's wire scalar does not name any case."""

    def __init__(self, value: Any, coding_path: tuple = ()):
        self.value = value
        super().__init__(f"Invalid enum case: {value}", coding_path)


class AmbiguousOrMissingVariantError(DataCorruptedError):
    """A payload-bearing sum type's wire object does not hold exactly one case key."""

    def __init__(self, keys: Any, coding_path: tuple = ()):
        self.keys = tuple(keys)
        super().__init__(
            f"Expected exactly one key, found {len(self.keys)}: {[key_string(k) for k in self.keys]}",
            coding_path,
        )


class EncodingError(Exception):
    """Base class for encode-time failures."""

    def __init__(self, message: str, coding_path: tuple = ()):
        self.message = message
        self.coding_path = tuple(coding_path)
        super().__init__(message)

    def __str__(self) -> str:
        return f"{self.message} (at {format_coding_path(self.coding_path)})"


class InvalidValueError(EncodingError):
    """A value cannot be represented on the wire."""

    def __init__(self, value: Any, coding_path: tuple = (), reason: str | None = None):
        self.value = value
        message = reason or f"Cannot encode value of type {type(value).__name__}"
        super().__init__(message, coding_path)


class TransformError(Exception):
    """Base class for transformer failures."""

    def __init__(self, message: str = "Invalid value for transformation"):
        super().__init__(message)


class InvalidURLError(TransformError):
    def __init__(self, value: str):
        self.value = value
        super().__init__(f"Invalid URL string: {value}")


class InvalidUUIDError(TransformError):
    def __init__(self, value: str):
        self.value = value
        super().__init__(f"Invalid UUID string: {value}")


class InvalidISO8601DateError(TransformError):
    def __init__(self, value: str):
        self.value = value
        super().__init__(f"Invalid ISO8601 date string: {value}")


class InvalidBoolIntError(TransformError):
    def __init__(self, value: Any):
        self.value = value
        super().__init__(f"Invalid Bool Int value (expected 0 or 1): {value}")


class DictConversionError(Exception):
    """Base class for map-bridging failures."""


class InvalidMapShapeError(DictConversionError):
    """The encoded form of a value is not a string-keyed map."""

    def __init__(self, value: Any = None):
        self.value = value
        super().__init__(f"Invalid dictionary structure: expected dict[str, Any], got {type(value).__name__}")


def _type_name(tp: Any) -> str:
    return getattr(tp, "__name__", None) or repr(tp)
