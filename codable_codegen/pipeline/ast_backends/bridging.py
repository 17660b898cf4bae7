"""
Map-bridging routines shared by records and sum types.

The four routines round-trip through the JSON byte form so that a map and
its decoded value always agree with the wire format.
"""

from __future__ import annotations

import ast
from typing import TYPE_CHECKING

from . import builders as b

if TYPE_CHECKING:
    from .python_ast_backend import PythonAstBackend


def _dict_annotation() -> ast.expr:
    return b.subscript("dict", ast.Tuple(elts=[b.name("str"), b.name("Any")], ctx=ast.Load()))


def _list_of(element: ast.expr) -> ast.expr:
    return b.subscript("list", element)


def bridging_methods(backend: PythonAstBackend, type_name: str, documents: bool) -> list[ast.stmt]:
    """Build ``from_dict``, ``from_dict_list``, ``to_dict`` and ``to_dict_list``."""
    backend.require("JSONDecoder", "JSONEncoder", "InvalidMapShapeError")
    backend.require_typing("Any", "Self")
    backend.needs_json_import = True

    def doc(text: str) -> list[ast.stmt]:
        return [b.docstring(text)] if documents else []

    from_dict = b.function(
        "from_dict",
        [b.arg("cls"), b.arg("data", _dict_annotation())],
        doc(f"Build a {type_name} from a JSON-compatible dictionary.")
        + [
            b.assign(
                "json_data",
                b.method_call(b.method_call("json", "dumps", b.name("data")), "encode", b.const("utf-8")),
            ),
            b.ret(b.method_call(b.call("JSONDecoder"), "decode", b.name("cls"), b.name("json_data"))),
        ],
        returns=b.name("Self"),
        decorators=[b.name("classmethod")],
    )

    from_dict_list = b.function(
        "from_dict_list",
        [b.arg("cls"), b.arg("items", _list_of(_dict_annotation()))],
        doc(f"Build a list of {type_name} from a list of dictionaries.")
        + [b.ret(b.list_comp(b.method_call("cls", "from_dict", b.name("item")), "item", b.name("items")))],
        returns=_list_of(b.name("Self")),
        decorators=[b.name("classmethod")],
    )

    to_dict = b.function(
        "to_dict",
        [b.arg("self")],
        doc(f"Convert this {type_name} to a JSON-compatible dictionary.")
        + [
            b.assign("json_data", b.method_call(b.call("JSONEncoder"), "encode", b.name("self"))),
            b.assign("result", b.method_call("json", "loads", b.name("json_data"))),
            b.if_(
                ast.UnaryOp(op=ast.Not(), operand=b.call("isinstance", b.name("result"), b.name("dict"))),
                [b.raise_(b.call("InvalidMapShapeError", b.name("result")))],
            ),
            b.ret(b.name("result")),
        ],
        returns=_dict_annotation(),
    )

    to_dict_list = b.function(
        "to_dict_list",
        [b.arg("cls"), b.arg("items", _list_of(b.name("Self")))],
        doc(f"Convert a list of {type_name} to a list of dictionaries.")
        + [b.ret(b.list_comp(b.method_call("item", "to_dict"), "item", b.name("items")))],
        returns=_list_of(_dict_annotation()),
        decorators=[b.name("classmethod")],
    )

    return [from_dict, from_dict_list, to_dict, to_dict_list]
