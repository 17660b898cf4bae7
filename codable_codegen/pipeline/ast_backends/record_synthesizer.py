"""
Synthesis of record and reference-type members.

Emits, in order: the key enumeration, the memberwise initializer (plain
records only), ``from_decoder``, ``encode`` and the map-bridging routines.
Fields are coded in three passes: simple fields through the key
enumeration, transformed fields through a ``DynamicKey`` container, then
nested key paths group by group.
"""

from __future__ import annotations

import ast
from typing import TYPE_CHECKING

from ..analyzer.ir_nodes import DeclarationKind, Field, PathGroup, RecordIR
from . import builders as b
from .bridging import bridging_methods

if TYPE_CHECKING:
    from .python_ast_backend import PythonAstBackend


def is_shareable_default(node: ast.expr) -> bool:
    """True if a default expression can be evaluated once and shared between instances."""
    if isinstance(node, (ast.Constant, ast.Name, ast.Attribute)):
        return True
    if isinstance(node, ast.UnaryOp) and isinstance(node.op, (ast.USub, ast.UAdd)):
        return isinstance(node.operand, ast.Constant)
    if isinstance(node, ast.Tuple):
        return all(is_shareable_default(e) for e in node.elts)
    return False


class RecordSynthesizer:
    """Builds the generated members of one record declaration."""

    def __init__(self, backend: PythonAstBackend, record: RecordIR):
        self.backend = backend
        self.record = record
        self.keys_name = f"{record.visibility.qualifier}CodingKeys"
        self.keys_path = f"{record.name}.{self.keys_name}"

    def members(self) -> list[ast.stmt]:
        members: list[ast.stmt] = [self.key_enum()]
        if self.record.kind is DeclarationKind.RECORD and not self.record.has_custom_init:
            members.append(self.initializer())
        members.append(self.decode_method())
        members.append(self.encode_method())
        if self.backend.config.generate_dict_bridging:
            members.extend(bridging_methods(self.backend, self.record.name, self.record.visibility.documents))
        return members

    def _doc(self, text: str) -> list[ast.stmt]:
        return [b.docstring(text)] if self.record.visibility.documents else []

    def _key(self, field: Field) -> ast.expr:
        return b.attr(self.keys_path, field.name)

    # Key enumeration

    def key_enum(self) -> ast.ClassDef:
        self.backend.require("CodingKey")
        body = self._doc(f"Wire keys of {self.record.name}.")
        body += [b.assign(f.name, b.const(f.wire_name)) for f in self.record.simple_fields]
        return b.class_def(self.keys_name, [b.name("CodingKey")], body)

    # Memberwise initializer

    def initializer(self) -> ast.FunctionDef:
        """Keyword-only ``__init__`` with one parameter per assignable field."""
        params: list[ast.arg] = []
        defaults: list[ast.expr | None] = []
        body = self._doc(f"Create a {self.record.name}.")

        for field in self.record.all_fields:
            target = b.store_attr("self", field.name)
            if field.is_ignored:
                if field.has_default:
                    body.append(b.assign(target, b.clone(field.default_value)))
                elif field.is_optional:
                    body.append(b.assign(target, b.const(None)))
                continue
            if field.is_fixed:
                body.append(b.assign(target, b.clone(field.default_value)))
                continue

            annotation = b.clone(field.type_node)
            value: ast.expr = b.name(field.name)
            if field.has_default and is_shareable_default(field.default_value):
                default = b.clone(field.default_value)
            elif field.has_default and field.is_optional:
                # Fresh default per instance, UNSET stands for "not given" so None can be passed
                self.backend.require("UNSET")
                default = b.name("UNSET")
                value = b.if_exp(
                    b.is_(b.name(field.name), b.name("UNSET")), b.clone(field.default_value), b.name(field.name)
                )
            elif field.has_default:
                # Fresh default per instance, None stands for "not given"
                default = b.const(None)
                annotation = b.union_none(annotation)
                value = b.if_exp(b.is_none(b.name(field.name)), b.clone(field.default_value), b.name(field.name))
            elif field.is_optional:
                default = b.const(None)
            else:
                default = None

            params.append(b.arg(field.name, annotation))
            defaults.append(default)
            body.append(b.assign(target, value))

        return b.function(
            "__init__", [b.arg("self")], body, returns=b.const(None), kwonly=params, kw_defaults=defaults
        )

    # Decoding

    def decode_method(self) -> ast.FunctionDef:
        self.backend.require("Decoder")
        self.backend.require_typing("Self")
        record = self.record
        body = self._doc(f"Decode a {record.name} from a keyed source.")

        if record.kind is DeclarationKind.REFERENCE:
            instance = b.method_call(b.call("super"), "from_decoder", b.name("decoder"))
        else:
            instance = b.method_call("cls", "__new__", b.name("cls"))
        body.append(b.assign("instance", instance))

        for field in record.all_fields:
            target = b.store_attr("instance", field.name)
            if field.is_ignored:
                if field.has_default:
                    body.append(b.assign(target, b.clone(field.default_value)))
                elif field.is_optional:
                    body.append(b.assign(target, b.const(None)))
            elif field.is_fixed:
                body.append(b.assign(target, b.clone(field.default_value)))

        decoded = [f for f in record.simple_fields if not f.is_fixed]
        open_keys = b.method_call("decoder", "container", b.dotted(self.keys_path))
        if decoded:
            body.append(b.assign("container", open_keys))
        elif not record.fields:
            # Still require a keyed source
            body.append(b.expr(open_keys))
        for field in decoded:
            body.extend(self._read_value(field, "container", self._key(field)))

        for field in record.transformed_fields:
            if field.is_fixed:
                continue
            self.backend.require("DynamicKey")
            body.append(b.assign("transform_container", b.method_call("decoder", "container", b.name("DynamicKey"))))
            body.append(self._transformer(field))
            body.extend(self._read_transformed(field, "transform_container", self._dynamic_key(field.wire_name)))

        for group in record.path_groups:
            body.extend(self._decode_group(group))

        body.append(b.ret(b.name("instance")))
        return b.function(
            "from_decoder",
            [b.arg("cls"), b.arg("decoder", b.name("Decoder"))],
            body,
            returns=b.name("Self"),
            decorators=[b.name("classmethod")],
        )

    def _dynamic_key(self, wire_name: str) -> ast.Call:
        self.backend.require("DynamicKey")
        return b.call("DynamicKey", b.const(wire_name))

    def _transformer(self, field: Field) -> ast.Assign:
        self.backend.require_transform(field.transform)
        return b.assign("transformer", b.call(field.transform.transformer_type_name))

    def _read_value(self, field: Field, container: str, key: ast.expr) -> list[ast.stmt]:
        target = b.store_attr("instance", field.name)
        value_type = b.runtime_type(field.wrapped_type_node)
        if not field.is_optional and not field.has_default:
            return [b.assign(target, b.method_call(container, "decode", value_type, key))]

        statements: list[ast.stmt] = [b.assign(target, b.method_call(container, "decode_if_present", value_type, key))]
        if field.has_default:
            statements.append(
                b.if_(
                    b.is_none(b.attr("instance", field.name)),
                    [b.assign(b.store_attr("instance", field.name), b.clone(field.default_value))],
                )
            )
        return statements

    def _read_transformed(self, field: Field, container: str, key: ast.expr) -> list[ast.stmt]:
        wire_type = b.name(field.transform.wire_type)
        decoded = b.method_call("transformer", "decode", b.name("json_value"))
        if not field.is_optional and not field.has_default:
            return [
                b.assign("json_value", b.method_call(container, "decode", wire_type, key)),
                b.assign(b.store_attr("instance", field.name), decoded),
            ]
        fallback = b.clone(field.default_value) if field.has_default else b.const(None)
        return [
            b.assign("json_value", b.method_call(container, "decode_if_present", wire_type, key)),
            b.if_(
                b.is_not_none(b.name("json_value")),
                [b.assign(b.store_attr("instance", field.name), decoded)],
                [b.assign(b.store_attr("instance", field.name), fallback)],
            ),
        ]

    def _open_chain(
        self, statements: list[ast.stmt], parent: str, segments: tuple[str, ...], depth: int
    ) -> str:
        """Append one ``nested_container`` call per segment; return the innermost container name."""
        for segment in segments:
            depth += 1
            name = f"container_{depth}"
            statements.append(
                b.assign(
                    name,
                    b.method_call(parent, "nested_container", b.name("DynamicKey"), self._dynamic_key(segment)),
                )
            )
            parent = name
        return parent

    def _member_container(
        self, statements: list[ast.stmt], group: PathGroup, chain_end: str, field: Field
    ) -> str:
        parent_path = field.key_path[:-1]
        if len(parent_path) == len(group.prefix):
            return chain_end
        return self._open_chain(statements, chain_end, parent_path[len(group.prefix) :], len(group.prefix))

    def _decode_group(self, group: PathGroup) -> list[ast.stmt]:
        members = [f for f in group.fields if not f.is_fixed]
        if not members:
            return []
        statements: list[ast.stmt] = [
            b.assign("root_container", b.method_call("decoder", "container", b.name("DynamicKey")))
        ]
        chain_end = self._open_chain(statements, "root_container", group.prefix, 0)
        for field in members:
            container = self._member_container(statements, group, chain_end, field)
            key = self._dynamic_key(field.leaf_key)
            if field.transform is not None:
                statements.append(self._transformer(field))
                statements.extend(self._read_transformed(field, container, key))
            else:
                statements.extend(self._read_value(field, container, key))
        return statements

    # Encoding

    def encode_method(self) -> ast.FunctionDef:
        self.backend.require("Encoder")
        record = self.record
        body = self._doc(f"Encode this {record.name} into a keyed sink.")

        if record.kind is DeclarationKind.REFERENCE:
            body.append(b.expr(b.method_call(b.call("super"), "encode", b.name("encoder"))))

        simple = record.simple_fields
        open_keys = b.method_call("encoder", "container", b.dotted(self.keys_path))
        if simple:
            body.append(b.assign("container", open_keys))
        elif not record.fields:
            body.append(b.expr(open_keys))
        for field in simple:
            body.append(self._write_value(field, "container", self._key(field)))

        for field in record.transformed_fields:
            self.backend.require("DynamicKey")
            body.append(b.assign("transform_container", b.method_call("encoder", "container", b.name("DynamicKey"))))
            body.append(self._transformer(field))
            body.extend(self._write_transformed(field, "transform_container", self._dynamic_key(field.wire_name)))

        for group in record.path_groups:
            statements: list[ast.stmt] = [
                b.assign("root_container", b.method_call("encoder", "container", b.name("DynamicKey")))
            ]
            chain_end = self._open_chain(statements, "root_container", group.prefix, 0)
            for field in group.fields:
                container = self._member_container(statements, group, chain_end, field)
                key = self._dynamic_key(field.leaf_key)
                if field.transform is not None:
                    statements.append(self._transformer(field))
                    statements.extend(self._write_transformed(field, container, key))
                else:
                    statements.append(self._write_value(field, container, key))
            body.extend(statements)

        return b.function(
            "encode", [b.arg("self"), b.arg("encoder", b.name("Encoder"))], body, returns=b.const(None)
        )

    def _write_value(self, field: Field, container: str, key: ast.expr) -> ast.stmt:
        method = "encode_if_present" if field.is_optional else "encode"
        return b.expr(b.method_call(container, method, b.attr("self", field.name), key))

    def _write_transformed(self, field: Field, container: str, key: ast.expr) -> list[ast.stmt]:
        write = [
            b.assign("json_value", b.method_call("transformer", "encode", b.attr("self", field.name))),
            b.expr(b.method_call(container, "encode", b.name("json_value"), key)),
        ]
        if field.is_optional:
            return [b.if_(b.is_not_none(b.attr("self", field.name)), write)]
        return write
