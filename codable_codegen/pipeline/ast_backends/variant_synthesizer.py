"""
Synthesis of sum-type members.

Simple sum types travel as a bare case-name string. Payload-bearing sum
types travel as a single-key object whose key is the case name and whose
value is an object of the case's parameters.
"""

from __future__ import annotations

import ast
from typing import TYPE_CHECKING

from ...utils import snake_to_pascal_case
from ..analyzer.ir_nodes import VariantCase, VariantClassification, VariantIR
from . import builders as b
from .bridging import bridging_methods

if TYPE_CHECKING:
    from .python_ast_backend import PythonAstBackend


class VariantSynthesizer:
    """Builds the generated members of one sum-type declaration."""

    def __init__(self, backend: PythonAstBackend, variant: VariantIR):
        self.backend = backend
        self.variant = variant
        self.prefix = variant.visibility.qualifier
        self.keys_path = f"{variant.name}.{self.prefix}CodingKeys"

    def members(self) -> list[ast.stmt]:
        classification = self.variant.classification
        if classification is VariantClassification.RAW_REPRESENTABLE:
            return []
        if classification is VariantClassification.SIMPLE:
            members: list[ast.stmt] = [self.simple_decode(), self.simple_encode()]
        else:
            members = self.case_key_enums() + [self.payload_decode(), self.payload_encode()]
        if self.backend.config.generate_dict_bridging:
            members.extend(bridging_methods(self.backend, self.variant.name, self.variant.visibility.documents))
        return members

    def _doc(self, text: str) -> list[ast.stmt]:
        return [b.docstring(text)] if self.variant.visibility.documents else []

    def _case_keys_name(self, case: VariantCase) -> str:
        return f"{self.prefix}{snake_to_pascal_case(case.name)}CodingKeys"

    def _decoder_signature(self, body: list[ast.stmt]) -> ast.FunctionDef:
        self.backend.require("Decoder")
        self.backend.require_typing("Self")
        return b.function(
            "from_decoder",
            [b.arg("cls"), b.arg("decoder", b.name("Decoder"))],
            body,
            returns=b.name("Self"),
            decorators=[b.name("classmethod")],
        )

    def _encoder_signature(self, body: list[ast.stmt]) -> ast.FunctionDef:
        self.backend.require("Encoder")
        return b.function("encode", [b.arg("self"), b.arg("encoder", b.name("Encoder"))], body, returns=b.const(None))

    # Simple

    def simple_decode(self) -> ast.FunctionDef:
        self.backend.require("UnrecognizedCaseTagError")
        cases = [b.case_value(b.const(case.name), [b.ret(b.attr("cls", case.name))]) for case in self.variant.cases]
        cases.append(
            b.case_default(
                [b.raise_(b.call("UnrecognizedCaseTagError", b.name("value"), b.attr("decoder", "coding_path")))]
            )
        )
        body = self._doc(f"Decode a {self.variant.name} from its case name.") + [
            b.assign("container", b.method_call("decoder", "single_value_container")),
            b.assign("value", b.method_call("container", "decode", b.name("str"))),
            b.match(b.name("value"), cases),
        ]
        return self._decoder_signature(body)

    def simple_encode(self) -> ast.FunctionDef:
        body = self._doc(f"Encode this {self.variant.name} as its case name.") + [
            b.assign("container", b.method_call("encoder", "single_value_container")),
        ]
        if self.variant.cases:
            cases = [
                b.case_value(
                    b.attr(self.variant.name, case.name),
                    [b.expr(b.method_call("container", "encode", b.const(case.name)))],
                )
                for case in self.variant.cases
            ]
            body.append(b.match(b.name("self"), cases))
        return self._encoder_signature(body)

    # Payload-bearing

    def case_key_enums(self) -> list[ast.stmt]:
        self.backend.require("CodingKey")
        variant = self.variant
        tag_body = self._doc(f"Case tags of {variant.name}.")
        tag_body += [b.assign(case.name, b.const(case.name)) for case in variant.cases]
        enums: list[ast.stmt] = [b.class_def(f"{self.prefix}CodingKeys", [b.name("CodingKey")], tag_body)]

        for case in variant.cases:
            if not case.has_parameters:
                continue
            body = self._doc(f"Parameter keys of {variant.name}.{case.name}.")
            body += [b.assign(p.wire_label, b.const(p.wire_label)) for p in case.parameters]
            enums.append(b.class_def(self._case_keys_name(case), [b.name("CodingKey")], body))
        return enums

    def payload_decode(self) -> ast.FunctionDef:
        self.backend.require("AmbiguousOrMissingVariantError")
        cases = []
        for case in self.variant.cases:
            tag = b.attr(self.keys_path, case.name)
            if not case.has_parameters:
                cases.append(b.case_value(tag, [b.ret(b.attr("cls", case.name))]))
                continue

            case_keys = f"{self.variant.name}.{self._case_keys_name(case)}"
            args: list[ast.expr] = []
            keywords: dict[str, ast.expr] = {}
            for parameter in case.parameters:
                method = "decode_if_present" if parameter.is_optional else "decode"
                value = b.method_call(
                    "nested_container", method, b.runtime_type(parameter.type_node), b.attr(case_keys, parameter.wire_label)
                )
                if parameter.label is None:
                    args.append(value)
                else:
                    keywords[parameter.label] = value
            cases.append(
                b.case_value(
                    tag,
                    [
                        b.assign(
                            "nested_container",
                            b.method_call("container", "nested_container", b.dotted(case_keys), b.clone(tag)),
                        ),
                        b.ret(b.call(b.attr("cls", case.name), *args, **keywords)),
                    ],
                )
            )

        body = self._doc(f"Decode a {self.variant.name} from a single-key object.") + [
            b.assign("container", b.method_call("decoder", "container", b.dotted(self.keys_path))),
            b.assign("keys", b.attr("container", "all_keys")),
            b.if_(
                b.not_equal(b.call("len", b.name("keys")), b.const(1)),
                [
                    b.raise_(
                        b.call("AmbiguousOrMissingVariantError", b.name("keys"), b.attr("decoder", "coding_path"))
                    )
                ],
            ),
            b.match(b.subscript("keys", b.const(0)), cases),
        ]
        return self._decoder_signature(body)

    def payload_encode(self) -> ast.FunctionDef:
        cases = []
        for case in self.variant.cases:
            tag = b.attr(self.keys_path, case.name)
            if not case.has_parameters:
                statements: list[ast.stmt] = [
                    b.expr(b.method_call("container", "nested_container", b.dotted(self.keys_path), tag))
                ]
            else:
                case_keys = f"{self.variant.name}.{self._case_keys_name(case)}"
                statements = [
                    b.assign(
                        "nested_container",
                        b.method_call("container", "nested_container", b.dotted(case_keys), tag),
                    )
                ]
                for position, parameter in enumerate(case.parameters):
                    method = "encode_if_present" if parameter.is_optional else "encode"
                    statements.append(
                        b.expr(
                            b.method_call(
                                "nested_container",
                                method,
                                b.subscript(b.attr("self", "values"), b.const(position)),
                                b.attr(case_keys, parameter.wire_label),
                            )
                        )
                    )
            cases.append(b.case_value(b.const(case.name), statements))

        body = self._doc(f"Encode this {self.variant.name} as a single-key object.") + [
            b.assign("container", b.method_call("encoder", "container", b.dotted(self.keys_path))),
            b.match(b.attr("self", "case"), cases),
        ]
        return self._encoder_signature(body)
