from __future__ import annotations

import ast

from .ast import CastFinisher, DeserializeFinisher, NoCoalesce, Query
from .shapes import supports_mutable

_MAX_QUERY_STEPS = 64
_MAX_EXPRESSION_NODES = 64
_MAX_EXPRESSION_DEPTH = 16

_ALLOWED_EXPRESSION_NODES = (
    ast.Expression,
    ast.Constant,
    ast.Name,
    ast.Attribute,
    ast.Subscript,
    ast.Slice,
    ast.Tuple,
    ast.List,
    ast.Dict,
    ast.Set,
    ast.BinOp,
    ast.UnaryOp,
    ast.BoolOp,
    ast.Compare,
    ast.IfExp,
    ast.Call,
    ast.keyword,
    ast.operator,
    ast.unaryop,
    ast.boolop,
    ast.cmpop,
)


def validate_expression_tree(
    tree: ast.AST,
    *,
    max_node_count: int = _MAX_EXPRESSION_NODES,
    max_depth: int = _MAX_EXPRESSION_DEPTH,
) -> None:
    """Reject embedded expressions that are too large or use unsupported syntax.

    Raises ``ValueError`` describing the first violation found.
    """

    node_count = 0
    stack: list[tuple[ast.AST, int]] = [(tree, 1)]
    while stack:
        current, depth = stack.pop()
        if isinstance(current, ast.expr_context):
            continue
        node_count += 1

        if node_count > max_node_count:
            raise ValueError(f"expression exceeds max node count ({max_node_count})")
        if depth > max_depth:
            raise ValueError(f"expression exceeds max depth ({max_depth})")
        if not isinstance(current, _ALLOWED_EXPRESSION_NODES):
            raise ValueError(
                f"unsupported syntax in expression: {type(current).__name__}"
            )
        if isinstance(current, ast.Name) and current.id.startswith("__"):
            raise ValueError(f"dunder name {current.id!r} is not allowed")
        if isinstance(current, ast.Attribute) and current.attr.startswith("_"):
            raise ValueError(f"private attribute {current.attr!r} is not allowed")

        for child in ast.iter_child_nodes(current):
            stack.append((child, depth + 1))


def validate_query(query: Query, *, max_steps: int = _MAX_QUERY_STEPS) -> None:
    """Check the combinations a compiled query may not contain.

    Mutable queries hand back live references, so they cannot be combined
    with deserialization, fallbacks, or casts to shapes without a mutable
    accessor. Raises ``ValueError``.
    """

    step_count = len(query.plan.steps)
    if step_count > max_steps:
        raise ValueError(f"query has {step_count} steps; max allowed is {max_steps}")

    if query.mutability != "mutable":
        return

    finisher = query.plan.finisher
    if isinstance(finisher, DeserializeFinisher):
        raise ValueError("'mut' queries cannot deserialize with '>>'")
    if isinstance(finisher, CastFinisher) and not supports_mutable(finisher.shape):
        raise ValueError(
            f"unsupported target type {finisher.shape.value!r} for a 'mut' query"
        )
    if not isinstance(query.coalesce, NoCoalesce):
        raise ValueError("'mut' queries cannot have a '??' fallback")


__all__ = ["validate_expression_tree", "validate_query"]
