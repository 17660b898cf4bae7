"""
Declaration source parsing.
"""

from __future__ import annotations

from .nodes import (
    ComputedMemberNode,
    DeclarationForm,
    DeclarationNode,
    MemberNode,
    MethodMemberNode,
    SourceModule,
    StoredMemberNode,
    UnannotatedMemberNode,
)
from .parser import DeclarationParser, dotted_name, simple_name

__all__ = [
    "ComputedMemberNode",
    "DeclarationForm",
    "DeclarationNode",
    "DeclarationParser",
    "MemberNode",
    "MethodMemberNode",
    "SourceModule",
    "StoredMemberNode",
    "UnannotatedMemberNode",
    "dotted_name",
    "simple_name",
]
