"""
Registry of built-in value transformers.

Maps a transformer reference (``CodingTransformer.url``) or type name
(``"URLTransform"``) to the wire and value types the generated code needs.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
from types import MappingProxyType

from .ir_nodes import TransformInfo

WIRE_TYPES = ("str", "int", "float", "bool")


@dataclass(frozen=True)
class TransformTemplate:
    reference_name: str
    transformer_type_name: str
    wire_type: str
    value_type: str

    def info(self) -> TransformInfo:
        return TransformInfo(
            transformer_type_name=self.transformer_type_name,
            wire_type=self.wire_type,
            value_type=self.value_type,
            is_builtin=True,
        )


BUILTIN_TEMPLATES = (
    TransformTemplate("url", "URLTransform", "str", "SplitResult"),
    TransformTemplate("uuid", "UUIDTransform", "str", "UUID"),
    TransformTemplate("iso8601_date", "ISO8601DateTransform", "str", "datetime"),
    TransformTemplate("timestamp_date", "TimestampDateTransform", "float", "datetime"),
    TransformTemplate("bool_int", "BoolIntTransform", "int", "bool"),
)


class TransformRegistry:
    """Immutable lookup table of transformer templates."""

    _default: TransformRegistry | None = None

    def __init__(self, templates: Iterable[TransformTemplate]):
        templates = tuple(templates)
        self._by_type = MappingProxyType({t.transformer_type_name: t for t in templates})
        self._by_reference = MappingProxyType({t.reference_name: t for t in templates})

    @classmethod
    def default(cls) -> TransformRegistry:
        """Registry of the five built-in transformers, built once."""
        if cls._default is None:
            cls._default = cls(BUILTIN_TEMPLATES)
        return cls._default

    def resolve(self, transformer_type_name: str) -> TransformTemplate | None:
        return self._by_type.get(transformer_type_name)

    def resolve_reference(self, reference_name: str) -> TransformTemplate | None:
        return self._by_reference.get(reference_name)

    @property
    def type_names(self) -> frozenset[str]:
        return frozenset(self._by_type)
