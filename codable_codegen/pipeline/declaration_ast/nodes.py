"""
Syntax nodes for decorated declarations.

These nodes describe a ``@codable`` declaration as written, before any
classification: members keep declaration order and their original ``ast``
expressions.
"""

from __future__ import annotations

import ast
from dataclasses import dataclass, field
from enum import Enum


class DeclarationForm(str, Enum):
    """Syntactic form of the decorated statement."""

    CLASS = "class"
    FUNCTION = "function"


@dataclass
class MemberNode:
    """Base class for class-body members."""

    name: str = ""
    line: int = 0
    column: int = 0


@dataclass
class StoredMemberNode(MemberNode):
    """An annotated assignment: ``name: T`` or ``name: T = value``."""

    annotation: ast.expr | None = None
    value: ast.expr | None = None


@dataclass
class UnannotatedMemberNode(MemberNode):
    """A plain assignment ``name = value`` (an enum member, a case, or an error)."""

    value: ast.expr | None = None


@dataclass
class ComputedMemberNode(MemberNode):
    """A property-like method; never stored, never coded."""


@dataclass
class MethodMemberNode(MemberNode):
    decorators: list[str] = field(default_factory=list)


@dataclass
class DeclarationNode:
    """A module-level statement carrying the ``@codable`` decorator."""

    name: str
    form: DeclarationForm
    node: ast.ClassDef | ast.FunctionDef | ast.AsyncFunctionDef
    marker: ast.expr
    bases: list[str] = field(default_factory=list)
    decorators: list[str] = field(default_factory=list)
    members: list[MemberNode] = field(default_factory=list)
    line: int = 0
    column: int = 0

    def member_names(self, kind: type[MemberNode]) -> set[str]:
        return {m.name for m in self.members if isinstance(m, kind)}

    def defines(self, method_name: str) -> bool:
        return any(isinstance(m, MethodMemberNode) and m.name == method_name for m in self.members)


@dataclass
class SourceModule:
    """A parsed declaration source."""

    tree: ast.Module
    declarations: list[DeclarationNode] = field(default_factory=list)

    # Names listed in ``__all__``; None when the module has no ``__all__``
    exported_names: set[str] | None = None
