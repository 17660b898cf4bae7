"""
Classification of sum-type declarations.
"""

from __future__ import annotations

import ast

from ..declaration_ast import DeclarationNode, UnannotatedMemberNode, simple_name
from ..diagnostics import MalformedAttributeError, UnsupportedDeclarationError
from .ir_nodes import CaseParameter, VariantCase, VariantClassification, VariantIR, Visibility

ENUM_BASES = {"Enum", "IntEnum", "StrEnum", "Flag", "IntFlag", "ReprEnum"}

# Bases that give an enum an underlying wire value
RAW_VALUE_BASES = {"str", "int", "float", "bytes", "IntEnum", "StrEnum", "IntFlag", "ReprEnum"}

RESERVED_ENUM_NAMES = {"_ignore_", "_order_", "_generate_next_value_", "_missing_"}


def _is_case_call(node: ast.expr | None) -> bool:
    return isinstance(node, ast.Call) and simple_name(node.func) == "Case"


class VariantClassifier:
    """Decides whether a declaration is a sum type and how it is coded."""

    def is_sum_type(self, declaration: DeclarationNode) -> bool:
        base_names = {b.rsplit(".", 1)[-1] for b in declaration.bases}
        if base_names & (ENUM_BASES | {"Variant"}):
            return True
        return any(
            isinstance(m, UnannotatedMemberNode) and _is_case_call(m.value) for m in declaration.members
        )

    def classify(self, declaration: DeclarationNode, visibility: Visibility) -> VariantIR:
        """
        Resolve the cases and coding strategy of a sum type.

        Raises:
            UnsupportedDeclarationError: An Enum declares cases with associated values
            MalformedAttributeError: A Case(...) argument could not be interpreted
        """
        base_names = {b.rsplit(".", 1)[-1] for b in declaration.bases}
        is_enum = bool(base_names & ENUM_BASES)
        variant = VariantIR(
            name=declaration.name,
            visibility=visibility,
            is_enum=is_enum,
            line=declaration.line,
            column=declaration.column,
        )

        if is_enum and base_names & RAW_VALUE_BASES:
            variant.classification = VariantClassification.RAW_REPRESENTABLE
            return variant

        for member in declaration.members:
            if not isinstance(member, UnannotatedMemberNode):
                continue
            if is_enum:
                if member.name.startswith("__") or member.name in RESERVED_ENUM_NAMES:
                    continue
            elif not _is_case_call(member.value):
                continue
            variant.cases.append(self._parse_case(member))

        if any(case.has_parameters for case in variant.cases):
            if is_enum:
                raise UnsupportedDeclarationError(
                    f"Enum '{declaration.name}' cannot declare cases with associated values; derive from Variant instead",
                    declaration.line,
                    declaration.column,
                )
            variant.classification = VariantClassification.PAYLOAD_BEARING
        else:
            variant.classification = VariantClassification.SIMPLE
        return variant

    @staticmethod
    def _parse_case(member: UnannotatedMemberNode) -> VariantCase:
        if not _is_case_call(member.value):
            return VariantCase(name=member.name, line=member.line)

        call = member.value
        if any(isinstance(arg, ast.Starred) for arg in call.args):
            raise MalformedAttributeError(
                f"Case '{member.name}' must list its parameters explicitly", member.line, member.column
            )
        parameters = [CaseParameter(label=None, type_node=arg, index=i) for i, arg in enumerate(call.args)]
        for keyword in call.keywords:
            if keyword.arg is None:
                raise MalformedAttributeError(
                    f"Case '{member.name}' must list its parameters explicitly", member.line, member.column
                )
            parameters.append(CaseParameter(label=keyword.arg, type_node=keyword.value, index=len(parameters)))
        return VariantCase(name=member.name, parameters=tuple(parameters), line=member.line)
