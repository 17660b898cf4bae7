"""
Coding keys used by generated containers.

Generated key enumerations subclass ``CodingKey``; fields that bypass the
enumeration (transformed or nested fields) are addressed with ``DynamicKey``.
"""

from __future__ import annotations

from enum import Enum


class CodingKey(str, Enum):
    """Base class for generated key enumerations.

    Member names are Python field names, member values are wire names.
    """

    @property
    def string_value(self) -> str:
        return self._value_


class DynamicKey:
    """A key built from an arbitrary wire name at runtime."""

    __slots__ = ("string_value",)

    def __init__(self, string_value: str):
        self.string_value = string_value

    def __eq__(self, other: object) -> bool:
        if isinstance(other, DynamicKey):
            return self.string_value == other.string_value
        return NotImplemented

    def __hash__(self) -> int:
        return hash(self.string_value)

    def __repr__(self) -> str:
        return f"DynamicKey({self.string_value!r})"


def key_string(key: CodingKey | DynamicKey | int) -> str:
    """Return the wire name of a key (list indices render as ``[n]``)."""
    if isinstance(key, CodingKey):
        # _value_ is used so a member named ``string_value`` cannot shadow it
        return key._value_
    if isinstance(key, DynamicKey):
        return key.string_value
    return f"[{key}]"


def format_coding_path(coding_path: tuple) -> str:
    """Render a coding path as ``a.b[0].c``."""
    parts: list[str] = []
    for key in coding_path:
        text = key_string(key)
        if parts and not text.startswith("["):
            parts.append(".")
        parts.append(text)
    return "".join(parts) or "<root>"
