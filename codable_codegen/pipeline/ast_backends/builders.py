"""
Typed constructors for the ``ast`` nodes emitted by the synthesizer.

Synthesized code is assembled from these helpers rather than from source
strings, so every emitted declaration is well-formed by construction.
"""

from __future__ import annotations

import ast
import copy
from typing import Any


def name(identifier: str) -> ast.Name:
    return ast.Name(id=identifier, ctx=ast.Load())


def store(identifier: str) -> ast.Name:
    return ast.Name(id=identifier, ctx=ast.Store())


def dotted(path: str) -> ast.expr:
    """``"a.b.c"`` as a load expression."""
    head, *rest = path.split(".")
    node: ast.expr = name(head)
    for part in rest:
        node = ast.Attribute(value=node, attr=part, ctx=ast.Load())
    return node


def attr(value: ast.expr | str, attribute: str) -> ast.Attribute:
    if isinstance(value, str):
        value = dotted(value)
    return ast.Attribute(value=value, attr=attribute, ctx=ast.Load())


def store_attr(value: str, attribute: str) -> ast.Attribute:
    return ast.Attribute(value=name(value), attr=attribute, ctx=ast.Store())


def const(value: Any) -> ast.Constant:
    return ast.Constant(value=value)


def clone(node: ast.AST) -> Any:
    """Deep copy of a source node, so emitted trees never share nodes."""
    return copy.deepcopy(node)


def call(func: ast.expr | str, *args: ast.expr, **keywords: ast.expr) -> ast.Call:
    if isinstance(func, str):
        func = dotted(func)
    return ast.Call(
        func=func,
        args=list(args),
        keywords=[ast.keyword(arg=k, value=v) for k, v in keywords.items()],
    )


def method_call(owner: ast.expr | str, method: str, *args: ast.expr, **keywords: ast.expr) -> ast.Call:
    return call(attr(owner, method), *args, **keywords)


def assign(target: ast.expr | str, value: ast.expr) -> ast.Assign:
    if isinstance(target, str):
        target = store(target)
    return ast.Assign(targets=[target], value=value)


def expr(value: ast.expr) -> ast.Expr:
    return ast.Expr(value=value)


def docstring(text: str) -> ast.Expr:
    return ast.Expr(value=ast.Constant(value=text))


def ret(value: ast.expr | None = None) -> ast.Return:
    return ast.Return(value=value)


def raise_(exc: ast.expr) -> ast.Raise:
    return ast.Raise(exc=exc, cause=None)


def if_(test: ast.expr, body: list[ast.stmt], orelse: list[ast.stmt] | None = None) -> ast.If:
    return ast.If(test=test, body=body, orelse=orelse or [])


def is_(left: ast.expr, right: ast.expr) -> ast.Compare:
    return ast.Compare(left=left, ops=[ast.Is()], comparators=[right])


def is_none(value: ast.expr) -> ast.Compare:
    return is_(value, const(None))


def is_not_none(value: ast.expr) -> ast.Compare:
    return ast.Compare(left=value, ops=[ast.IsNot()], comparators=[const(None)])


def not_equal(left: ast.expr, right: ast.expr) -> ast.Compare:
    return ast.Compare(left=left, ops=[ast.NotEq()], comparators=[right])


def if_exp(test: ast.expr, body: ast.expr, orelse: ast.expr) -> ast.IfExp:
    return ast.IfExp(test=test, body=body, orelse=orelse)


def subscript(value: ast.expr | str, index: ast.expr) -> ast.Subscript:
    if isinstance(value, str):
        value = dotted(value)
    return ast.Subscript(value=value, slice=index, ctx=ast.Load())


def union_none(type_node: ast.expr) -> ast.BinOp:
    """``T | None``"""
    return ast.BinOp(left=type_node, op=ast.BitOr(), right=const(None))


def list_comp(element: ast.expr, target: str, iterable: ast.expr) -> ast.ListComp:
    return ast.ListComp(
        elt=element,
        generators=[ast.comprehension(target=store(target), iter=iterable, ifs=[], is_async=0)],
    )


def arg(identifier: str, annotation: ast.expr | None = None) -> ast.arg:
    return ast.arg(arg=identifier, annotation=annotation)


def function(
    function_name: str,
    args: list[ast.arg],
    body: list[ast.stmt],
    returns: ast.expr | None = None,
    decorators: list[ast.expr] | None = None,
    kwonly: list[ast.arg] | None = None,
    kw_defaults: list[ast.expr | None] | None = None,
) -> ast.FunctionDef:
    return ast.FunctionDef(
        name=function_name,
        args=ast.arguments(
            posonlyargs=[],
            args=args,
            vararg=None,
            kwonlyargs=kwonly or [],
            kw_defaults=kw_defaults or [],
            kwarg=None,
            defaults=[],
        ),
        body=body or [ast.Pass()],
        decorator_list=decorators or [],
        returns=returns,
        type_params=[],
    )


def class_def(
    class_name: str, bases: list[ast.expr], body: list[ast.stmt], decorators: list[ast.expr] | None = None
) -> ast.ClassDef:
    return ast.ClassDef(
        name=class_name,
        bases=bases,
        keywords=[],
        body=body or [ast.Pass()],
        decorator_list=decorators or [],
        type_params=[],
    )


def match(subject: ast.expr, cases: list[ast.match_case]) -> ast.Match:
    return ast.Match(subject=subject, cases=cases)


def case_value(value: ast.expr, body: list[ast.stmt]) -> ast.match_case:
    """``case <value>:`` where value is a literal or a dotted name."""
    return ast.match_case(pattern=ast.MatchValue(value=value), guard=None, body=body)


def case_default(body: list[ast.stmt]) -> ast.match_case:
    """``case _:``"""
    return ast.match_case(pattern=ast.MatchAs(pattern=None, name=None), guard=None, body=body)


def import_from(module: str, names: list[str]) -> ast.ImportFrom:
    return ast.ImportFrom(module=module, names=[ast.alias(name=n, asname=None) for n in names], level=0)


def import_module(module: str) -> ast.Import:
    return ast.Import(names=[ast.alias(name=module, asname=None)])


class _ForwardRefUnquoter(ast.NodeTransformer):
    def visit_Subscript(self, node: ast.Subscript) -> ast.AST:
        head = node.value
        if isinstance(head, ast.Attribute) and head.attr == "Literal":
            return node
        if isinstance(head, ast.Name) and head.id == "Literal":
            return node
        return self.generic_visit(node)

    def visit_Constant(self, node: ast.Constant) -> ast.AST:
        if isinstance(node.value, str):
            try:
                return ast.parse(node.value, mode="eval").body
            except SyntaxError:
                return node
        return node


def runtime_type(type_node: ast.expr) -> ast.expr:
    """Copy of a type expression usable as a runtime value.

    Quoted forward references (``"Address"``, ``list["Address"]``) are
    unquoted, since decoding runs after the module has been fully defined.
    ``Literal`` arguments are left alone.
    """
    return _ForwardRefUnquoter().visit(clone(type_node))
