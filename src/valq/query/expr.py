"""Compilation of expressions embedded in query text.

Bracket keys, parenthesised roots, ``>>`` targets and ``??`` fallbacks are
small Python expressions. They are parsed and checked once, when the query is
compiled, and evaluated later against the caller's environment with a reduced
set of builtins.
"""

from __future__ import annotations

import ast
import builtins
from collections.abc import Mapping

from .ast import ConstExpr, DeferredExpr, Expr
from .validate import validate_expression_tree

_SAFE_BUILTIN_NAMES = (
    "abs",
    "all",
    "any",
    "bool",
    "bytes",
    "dict",
    "float",
    "frozenset",
    "int",
    "len",
    "list",
    "max",
    "min",
    "range",
    "reversed",
    "round",
    "set",
    "sorted",
    "str",
    "sum",
    "tuple",
)

SAFE_BUILTINS: dict[str, object] = {
    name: getattr(builtins, name) for name in _SAFE_BUILTIN_NAMES
}


def _scalar_literal(tree: ast.Expression) -> tuple[bool, object]:
    try:
        value = ast.literal_eval(tree)
    except (ValueError, TypeError, SyntaxError):
        return False, None
    if value is None or isinstance(value, (str, int, float, bool)):
        return True, value
    # containers are rebuilt on every evaluation
    return False, None


def compile_expression(
    source: str,
    *,
    max_node_count: int,
    max_depth: int,
) -> Expr:
    """Compile ``source`` into a constant or deferred expression.

    Raises ``ValueError`` for empty, malformed or disallowed expressions.
    """

    text = source.strip()
    if not text:
        raise ValueError("empty expression")

    try:
        tree = ast.parse(text, mode="eval")
    except SyntaxError as exc:
        raise ValueError(f"invalid expression {text!r}: {exc.msg}") from exc

    validate_expression_tree(tree, max_node_count=max_node_count, max_depth=max_depth)

    is_literal, value = _scalar_literal(tree)
    if is_literal:
        return ConstExpr(value=value)

    code = compile(tree, filename=f"<valq: {text}>", mode="eval")
    globals_ = {"__builtins__": SAFE_BUILTINS}

    def thunk(env: Mapping[str, object]) -> object:
        return eval(code, globals_, env)  # noqa: S307

    return DeferredExpr(source=text, thunk=thunk)


def name_lookup(name: str) -> DeferredExpr:
    """Deferred expression reading ``name`` from the environment."""

    def thunk(env: Mapping[str, object]) -> object:
        try:
            return env[name]
        except KeyError:
            raise NameError(f"name {name!r} is not bound for this query") from None

    return DeferredExpr(source=name, thunk=thunk)


__all__ = ["SAFE_BUILTINS", "compile_expression", "name_lookup"]
