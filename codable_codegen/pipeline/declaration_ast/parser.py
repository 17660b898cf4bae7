"""
Declaration source parser.

Phase 1 of the pipeline: parse a Python module with ``ast`` and collect the
statements decorated with ``@codable``, without interpreting their members.
"""

from __future__ import annotations

import ast
import logging

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

logger = logging.getLogger(__name__)

PROPERTY_DECORATORS = {"property", "cached_property"}
ACCESSOR_SUFFIXES = {"setter", "getter", "deleter"}


def dotted_name(node: ast.expr) -> str | None:
    """Return ``a.b.c`` for a name/attribute chain (subscripts and calls are looked through)."""
    if isinstance(node, ast.Name):
        return node.id
    if isinstance(node, ast.Attribute):
        owner = dotted_name(node.value)
        return f"{owner}.{node.attr}" if owner else None
    if isinstance(node, ast.Subscript):
        return dotted_name(node.value)
    if isinstance(node, ast.Call):
        return dotted_name(node.func)
    return None


def simple_name(node: ast.expr) -> str | None:
    """Return the last segment of ``dotted_name(node)``."""
    name = dotted_name(node)
    return name.rsplit(".", 1)[-1] if name else None


class DeclarationParser:
    """Parses declaration sources into ``SourceModule`` trees."""

    MARKER = "codable"

    def parse(self, source: str, source_name: str = "<source>") -> SourceModule:
        """
        Parse a Python module.

        Args:
            source: Module source text
            source_name: File name used in syntax errors

        Returns:
            SourceModule with one DeclarationNode per decorated statement

        Raises:
            SyntaxError: If the source is not valid Python
        """
        tree = ast.parse(source, filename=source_name)
        module = SourceModule(tree=tree, exported_names=self._exported_names(tree))

        for statement in tree.body:
            if not isinstance(statement, (ast.ClassDef, ast.FunctionDef, ast.AsyncFunctionDef)):
                continue
            marker = self._find_marker(statement)
            if marker is None:
                continue
            module.declarations.append(self._parse_declaration(statement, marker))

        logger.debug("Found %d decorated declaration(s) in %s", len(module.declarations), source_name)
        return module

    def _find_marker(self, statement: ast.ClassDef | ast.FunctionDef | ast.AsyncFunctionDef) -> ast.expr | None:
        for decorator in statement.decorator_list:
            if simple_name(decorator) == self.MARKER:
                return decorator
        return None

    def _parse_declaration(
        self, statement: ast.ClassDef | ast.FunctionDef | ast.AsyncFunctionDef, marker: ast.expr
    ) -> DeclarationNode:
        declaration = DeclarationNode(
            name=statement.name,
            form=DeclarationForm.CLASS if isinstance(statement, ast.ClassDef) else DeclarationForm.FUNCTION,
            node=statement,
            marker=marker,
            decorators=[dotted_name(d) or ast.unparse(d) for d in statement.decorator_list if d is not marker],
            line=statement.lineno,
            column=statement.col_offset,
        )
        if isinstance(statement, ast.ClassDef):
            declaration.bases = [dotted_name(b) or ast.unparse(b) for b in statement.bases]
            for item in statement.body:
                declaration.members.extend(self._parse_member(item))
        return declaration

    def _parse_member(self, item: ast.stmt) -> list[MemberNode]:
        position = {"line": item.lineno, "column": item.col_offset}

        if isinstance(item, ast.AnnAssign) and isinstance(item.target, ast.Name):
            return [StoredMemberNode(name=item.target.id, annotation=item.annotation, value=item.value, **position)]

        if isinstance(item, ast.Assign):
            return [
                UnannotatedMemberNode(name=target.id, value=item.value, **position)
                for target in item.targets
                if isinstance(target, ast.Name)
            ]

        if isinstance(item, (ast.FunctionDef, ast.AsyncFunctionDef)):
            decorators = [dotted_name(d) or "" for d in item.decorator_list]
            for decorator in decorators:
                segments = decorator.split(".")
                if segments[-1] in PROPERTY_DECORATORS or (len(segments) > 1 and segments[-1] in ACCESSOR_SUFFIXES):
                    return [ComputedMemberNode(name=item.name, **position)]
            return [MethodMemberNode(name=item.name, decorators=decorators, **position)]

        return []

    @staticmethod
    def _exported_names(tree: ast.Module) -> set[str] | None:
        for statement in tree.body:
            targets: list[ast.expr] = []
            if isinstance(statement, ast.Assign):
                targets = statement.targets
            elif isinstance(statement, ast.AnnAssign) and statement.value is not None:
                targets = [statement.target]
            if not any(isinstance(t, ast.Name) and t.id == "__all__" for t in targets):
                continue
            value = statement.value
            if isinstance(value, (ast.List, ast.Tuple, ast.Set)):
                return {e.value for e in value.elts if isinstance(e, ast.Constant) and isinstance(e.value, str)}
        return None
