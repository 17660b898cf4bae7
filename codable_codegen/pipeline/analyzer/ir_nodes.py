"""
IR (Intermediate Representation) node definitions.

These nodes represent an analyzed declaration, ready for code synthesis.
Each declaration is resolved once into a ``RecordIR`` or a ``VariantIR``;
the synthesizer dispatches on that type and never re-inspects syntax.
"""

from __future__ import annotations

import ast
from dataclasses import dataclass, field
from enum import Enum


class DeclarationKind(Enum):
    """Kind of declaration in the IR."""

    RECORD = "record"  # plain class, gets a memberwise __init__
    REFERENCE = "reference"  # class with a base class, chains to super()
    SUM_TYPE = "sum_type"  # Variant or Enum


class VariantClassification(Enum):
    RAW_REPRESENTABLE = "raw_representable"
    SIMPLE = "simple"
    PAYLOAD_BEARING = "payload_bearing"


class Visibility(str, Enum):
    """Access level of a declaration, copied onto everything emitted for it."""

    PUBLIC = "public"
    INTERNAL = "internal"
    PRIVATE = "private"

    @property
    def qualifier(self) -> str:
        """Prefix for emitted nested type names."""
        return "_" if self is Visibility.PRIVATE else ""

    @property
    def documents(self) -> bool:
        """Whether emitted declarations carry docstrings."""
        return self is Visibility.PUBLIC


@dataclass(frozen=True)
class TransformInfo:
    """A transformer attached to a field."""

    transformer_type_name: str
    wire_type: str  # "str", "int", "float" or "bool"
    value_type: str
    is_builtin: bool = True


@dataclass(frozen=True)
class Field:
    """A stored field of a record declaration."""

    name: str
    declared_type: str  # source text, nullable marker included
    type_node: ast.expr
    wrapped_type_node: ast.expr  # nullable marker removed
    is_optional: bool = False
    is_mutable: bool = True
    custom_key: str | None = None
    key_path: tuple[str, ...] | None = None
    is_ignored: bool = False
    default_value: ast.expr | None = None
    transform: TransformInfo | None = None
    index: int = 0
    line: int = 0
    column: int = 0

    @property
    def wire_name(self) -> str:
        if self.key_path is not None:
            return ".".join(self.key_path)
        return self.custom_key or self.name

    @property
    def leaf_key(self) -> str:
        """Key read in the innermost container."""
        return self.key_path[-1] if self.key_path else self.wire_name

    @property
    def wrapped_type(self) -> str:
        return ast.unparse(self.wrapped_type_node)

    @property
    def has_default(self) -> bool:
        return self.default_value is not None

    @property
    def is_fixed(self) -> bool:
        """Immutable, non-optional and defaulted: never read from the wire."""
        return not self.is_mutable and not self.is_optional and self.has_default

    @property
    def is_simple(self) -> bool:
        return not self.is_ignored and self.key_path is None and self.transform is None

    @property
    def is_nested(self) -> bool:
        return not self.is_ignored and self.key_path is not None


@dataclass(frozen=True)
class CaseParameter:
    label: str | None
    type_node: ast.expr
    index: int = 0

    @property
    def wire_label(self) -> str:
        return self.label if self.label is not None else f"_{self.index}"

    @property
    def is_optional(self) -> bool:
        node = self.type_node
        if isinstance(node, ast.BinOp) and isinstance(node.op, ast.BitOr):
            return any(isinstance(side, ast.Constant) and side.value is None for side in (node.left, node.right))
        return isinstance(node, ast.Subscript) and isinstance(node.value, ast.Name) and node.value.id == "Optional"


@dataclass(frozen=True)
class VariantCase:
    name: str
    parameters: tuple[CaseParameter, ...] = ()
    line: int = 0

    @property
    def has_parameters(self) -> bool:
        return bool(self.parameters)


@dataclass
class PathGroup:
    """Nested fields sharing a container chain."""

    fields: list[Field] = field(default_factory=list)
    prefix: tuple[str, ...] = ()


@dataclass
class RecordIR:
    """A record or reference-type declaration."""

    name: str
    kind: DeclarationKind = DeclarationKind.RECORD
    visibility: Visibility = Visibility.INTERNAL
    fields: list[Field] = field(default_factory=list)  # coded fields, declaration order
    ignored_fields: list[Field] = field(default_factory=list)
    path_groups: list[PathGroup] = field(default_factory=list)
    has_custom_init: bool = False
    line: int = 0
    column: int = 0

    @property
    def simple_fields(self) -> list[Field]:
        return [f for f in self.fields if f.is_simple]

    @property
    def transformed_fields(self) -> list[Field]:
        return [f for f in self.fields if f.transform is not None and f.key_path is None]

    @property
    def all_fields(self) -> list[Field]:
        """Coded and ignored fields in declaration order."""
        return sorted(self.fields + self.ignored_fields, key=lambda f: f.index)


@dataclass
class VariantIR:
    """A case-based sum type."""

    name: str
    classification: VariantClassification = VariantClassification.SIMPLE
    visibility: Visibility = Visibility.INTERNAL
    cases: list[VariantCase] = field(default_factory=list)
    is_enum: bool = False
    line: int = 0
    column: int = 0
