"""
Field model extraction.

Turns the ordered members of a record declaration into ``Field`` values:
type annotation, optionality, mutability, key markers, transform reference
and default value.
"""

from __future__ import annotations

import ast
import copy
import logging
from dataclasses import dataclass, field

from ...utils import snake_to_pascal_case
from ..declaration_ast import (
    ComputedMemberNode,
    DeclarationNode,
    StoredMemberNode,
    UnannotatedMemberNode,
    simple_name,
)
from ..diagnostics import (
    Diagnostic,
    DuplicateCodingKeyError,
    MalformedAttributeError,
    MissingTypeAnnotationError,
    Severity,
)
from .ir_nodes import Field, TransformInfo
from .transform_registry import WIRE_TYPES, TransformRegistry

logger = logging.getLogger(__name__)


@dataclass
class FieldModel:
    fields: list[Field] = field(default_factory=list)
    ignored_fields: list[Field] = field(default_factory=list)
    warnings: list[Diagnostic] = field(default_factory=list)


@dataclass
class _KeyMarker:
    key: str | None = None
    transform: ast.expr | None = None


def split_optional(node: ast.expr) -> tuple[ast.expr, bool]:
    """Return ``(wrapped_type, is_optional)`` for a type expression.

    Recognizes ``T | None``, ``None | T``, ``Optional[T]`` and
    ``Union[..., None]``.
    """
    if isinstance(node, ast.BinOp) and isinstance(node.op, ast.BitOr):
        if _is_none(node.right):
            return node.left, True
        if _is_none(node.left):
            return node.right, True
    if isinstance(node, ast.Subscript):
        wrapper = simple_name(node.value)
        if wrapper == "Optional":
            return node.slice, True
        if wrapper == "Union" and isinstance(node.slice, ast.Tuple):
            members = [e for e in node.slice.elts if not _is_none(e)]
            if len(members) < len(node.slice.elts):
                if len(members) == 1:
                    return members[0], True
                union = ast.Subscript(
                    value=copy.deepcopy(node.value), slice=ast.Tuple(elts=members, ctx=ast.Load()), ctx=ast.Load()
                )
                return union, True
    return node, False


def _is_none(node: ast.expr) -> bool:
    return isinstance(node, ast.Constant) and node.value is None


def _wrapper_args(node: ast.expr, wrapper: str) -> list[ast.expr] | None:
    if isinstance(node, ast.Subscript) and simple_name(node.value) == wrapper:
        if isinstance(node.slice, ast.Tuple):
            return list(node.slice.elts)
        return [node.slice]
    return None


class FieldExtractor:
    """Extracts the field model of a record declaration."""

    def __init__(self, registry: TransformRegistry):
        self.registry = registry

    def extract(self, declaration: DeclarationNode) -> FieldModel:
        """
        Extract fields in declaration order.

        Args:
            declaration: A record or reference-type declaration

        Returns:
            FieldModel with coded fields, ignored fields and warnings

        Raises:
            MissingTypeAnnotationError: A public stored member has no annotation
            MalformedAttributeError: A marker could not be interpreted
        """
        model = FieldModel()
        computed = declaration.member_names(ComputedMemberNode)
        index = 0

        for member in declaration.members:
            if isinstance(member, UnannotatedMemberNode):
                if not member.name.startswith("_"):
                    raise MissingTypeAnnotationError(
                        f"Field '{member.name}' needs an explicit type annotation", member.line, member.column
                    )
                continue
            if not isinstance(member, StoredMemberNode) or member.name in computed:
                continue

            extracted = self._extract_field(member, index, model)
            if extracted is None:
                continue
            index += 1
            if extracted.is_ignored:
                model.ignored_fields.append(extracted)
            else:
                model.fields.append(extracted)

        self._check_unique_wire_keys(model.fields)
        return model

    def _extract_field(self, member: StoredMemberNode, index: int, model: FieldModel) -> Field | None:
        annotation = member.annotation
        is_mutable = True
        metadata: list[ast.expr] = []

        # Annotated and Final may nest in either order
        while True:
            annotated = _wrapper_args(annotation, "Annotated")
            if annotated is not None:
                if len(annotated) < 2:
                    raise MalformedAttributeError(
                        f"Annotated type of '{member.name}' needs at least one marker", member.line, member.column
                    )
                annotation, metadata = annotated[0], metadata + annotated[1:]
                continue
            final = _wrapper_args(annotation, "Final")
            if final is not None:
                annotation, is_mutable = final[0], False
                continue
            break

        if _wrapper_args(annotation, "ClassVar") is not None or simple_name(annotation) == "ClassVar":
            return None
        if isinstance(annotation, (ast.Name, ast.Attribute)) and simple_name(annotation) == "Final":
            raise MissingTypeAnnotationError(
                f"Field '{member.name}' is declared Final without a type; add Final[T]", member.line, member.column
            )

        key_marker, is_ignored = self._read_markers(member, metadata)
        wrapped, is_optional = split_optional(annotation)

        custom_key = None
        key_path = None
        transform = None
        if key_marker is not None:
            if key_marker.key is not None:
                custom_key, key_path = self._parse_key(member, key_marker.key)
            if key_marker.transform is not None:
                transform = self._resolve_transform(member, key_marker.transform, wrapped, model)

        return Field(
            name=member.name,
            declared_type=ast.unparse(annotation),
            type_node=annotation,
            wrapped_type_node=wrapped,
            is_optional=is_optional,
            is_mutable=is_mutable,
            custom_key=custom_key,
            key_path=key_path,
            is_ignored=is_ignored,
            default_value=member.value,
            transform=transform,
            index=index,
            line=member.line,
            column=member.column,
        )

    def _read_markers(self, member: StoredMemberNode, metadata: list[ast.expr]) -> tuple[_KeyMarker | None, bool]:
        key_marker = None
        is_ignored = False
        for item in metadata:
            if not isinstance(item, ast.Call):
                continue
            marker_name = simple_name(item.func)
            if marker_name == "coding_ignored":
                is_ignored = True
            elif marker_name == "coding_key":
                if key_marker is not None:
                    raise DuplicateCodingKeyError(
                        f"Field '{member.name}' has more than one coding_key marker", member.line, member.column
                    )
                key_marker = self._parse_key_marker(member, item)
        return key_marker, is_ignored

    def _parse_key_marker(self, member: StoredMemberNode, call: ast.Call) -> _KeyMarker:
        if len(call.args) > 2:
            raise MalformedAttributeError(
                f"coding_key on '{member.name}' takes at most a key and a transform", member.line, member.column
            )
        arguments = dict(zip(("key", "transform"), call.args))
        for keyword in call.keywords:
            if keyword.arg not in ("key", "transform") or keyword.arg in arguments:
                raise MalformedAttributeError(
                    f"Unexpected argument {keyword.arg!r} in coding_key on '{member.name}'", member.line, member.column
                )
            arguments[keyword.arg] = keyword.value

        marker = _KeyMarker()
        key = arguments.get("key")
        if key is not None and not _is_none(key):
            if not (isinstance(key, ast.Constant) and isinstance(key.value, str)):
                raise MalformedAttributeError(
                    f"The key of '{member.name}' must be a string literal", member.line, member.column
                )
            marker.key = key.value
        transform = arguments.get("transform")
        if transform is not None and not _is_none(transform):
            marker.transform = transform
        return marker

    @staticmethod
    def _parse_key(member: StoredMemberNode, key: str) -> tuple[str | None, tuple[str, ...] | None]:
        if not key:
            raise MalformedAttributeError(f"The key of '{member.name}' is empty", member.line, member.column)
        if "." not in key:
            return key, None
        segments = tuple(key.split("."))
        if any(not segment for segment in segments):
            raise MalformedAttributeError(
                f"The key path '{key}' of '{member.name}' has an empty segment", member.line, member.column
            )
        return None, segments

    def _resolve_transform(
        self, member: StoredMemberNode, node: ast.expr, wrapped: ast.expr, model: FieldModel
    ) -> TransformInfo:
        # CodingTransformer.<builtin>
        if isinstance(node, ast.Attribute) and simple_name(node.value) == "CodingTransformer":
            template = self.registry.resolve_reference(node.attr)
            if template is not None:
                return template.info()
            type_name = snake_to_pascal_case(node.attr) + "Transform"
            self._warn_wire_type(member, type_name, model)
            return TransformInfo(type_name, "str", ast.unparse(wrapped), is_builtin=False)

        # CodingTransformer("TypeName", wire_type="int")
        if isinstance(node, ast.Call) and simple_name(node.func) == "CodingTransformer":
            arguments = dict(zip(("type_name", "wire_type"), node.args))
            arguments.update({k.arg: k.value for k in node.keywords if k.arg})
            type_name = self._string_argument(member, arguments.get("type_name"), "transformer type name")
            wire_type = None
            if arguments.get("wire_type") is not None:
                wire_type = self._string_argument(member, arguments["wire_type"], "wire type")
                if wire_type not in WIRE_TYPES:
                    raise MalformedAttributeError(
                        f"Wire type of '{member.name}' must be one of {', '.join(WIRE_TYPES)}, got '{wire_type}'",
                        member.line,
                        member.column,
                    )

            template = self.registry.resolve(type_name)
            if template is not None:
                info = template.info()
                if wire_type is not None and wire_type != info.wire_type:
                    raise MalformedAttributeError(
                        f"{type_name} uses wire type {info.wire_type}, not {wire_type}", member.line, member.column
                    )
                return info
            if wire_type is None:
                self._warn_wire_type(member, type_name, model)
                wire_type = "str"
            return TransformInfo(type_name, wire_type, ast.unparse(wrapped), is_builtin=False)

        raise MalformedAttributeError(
            f"Transform of '{member.name}' must be CodingTransformer.<name> or CodingTransformer(\"TypeName\")",
            member.line,
            member.column,
        )

    @staticmethod
    def _string_argument(member: StoredMemberNode, node: ast.expr | None, what: str) -> str:
        if isinstance(node, ast.Constant) and isinstance(node.value, str) and node.value:
            return node.value
        raise MalformedAttributeError(
            f"The {what} of '{member.name}' must be a string literal", member.line, member.column
        )

    @staticmethod
    def _warn_wire_type(member: StoredMemberNode, type_name: str, model: FieldModel) -> None:
        message = f"Custom transformer {type_name} on '{member.name}' is assumed to use a str wire type"
        logger.debug(message)
        model.warnings.append(Diagnostic(Severity.WARNING, message, member.line, member.column))

    @staticmethod
    def _check_unique_wire_keys(fields: list[Field]) -> None:
        # A value stored at a path must not also be an object on another field's path
        seen: list[tuple[tuple[str, ...], Field]] = []
        for extracted in fields:
            path = extracted.key_path or (extracted.wire_name,)
            for other_path, other in seen:
                shared = min(len(path), len(other_path))
                if path[:shared] != other_path[:shared]:
                    continue
                if len(path) == len(other_path):
                    message = (
                        f"Fields '{other.name}' and '{extracted.name}' both use the wire key '{extracted.wire_name}'"
                    )
                else:
                    message = (
                        f"Wire key '{other.wire_name}' of '{other.name}' and '{extracted.wire_name}' "
                        f"of '{extracted.name}' overlap"
                    )
                raise DuplicateCodingKeyError(message, extracted.line, extracted.column)
            seen.append((path, extracted))
