import ast

import pytest

from valq.query.ast import (
    CastFinisher,
    ConstExpr,
    DefaultCoalesce,
    DeserializeFinisher,
    ExprCoalesce,
    FieldStep,
    Query,
    QueryPlan,
)
from valq.query.shapes import Shape
from valq.query.validate import validate_expression_tree, validate_query


def _query(*, finisher=None, coalesce=None, mutability="immutable", steps=1) -> Query:
    kwargs = {} if coalesce is None else {"coalesce": coalesce}
    return Query(
        root=ConstExpr(value={}),
        plan=QueryPlan(
            steps=[FieldStep(name=f"s{i}") for i in range(steps)],
            finisher=finisher,
        ),
        mutability=mutability,
        **kwargs,
    )


def test_validate_query_accepts_immutable_combinations() -> None:
    validate_query(
        _query(
            finisher=DeserializeFinisher(target=ConstExpr(value=int)),
            coalesce=DefaultCoalesce(),
        )
    )
    validate_query(_query(finisher=CastFinisher(shape=Shape.STR)))


def test_validate_query_accepts_mutable_container_casts() -> None:
    validate_query(_query(mutability="mutable"))
    validate_query(
        _query(finisher=CastFinisher(shape=Shape.OBJECT), mutability="mutable")
    )
    validate_query(_query(finisher=CastFinisher(shape=Shape.VAL), mutability="mutable"))


def test_validate_query_rejects_mutable_deserialize() -> None:
    query = _query(
        finisher=DeserializeFinisher(target=ConstExpr(value=int)),
        mutability="mutable",
    )

    with pytest.raises(ValueError, match="cannot deserialize"):
        validate_query(query)


def test_validate_query_rejects_mutable_coalesce() -> None:
    query = _query(coalesce=ExprCoalesce(expr=ConstExpr(value=1)), mutability="mutable")

    with pytest.raises(ValueError, match="fallback"):
        validate_query(query)


def test_validate_query_rejects_mutable_scalar_cast() -> None:
    query = _query(finisher=CastFinisher(shape=Shape.U64), mutability="mutable")

    with pytest.raises(ValueError, match="unsupported target type 'u64'"):
        validate_query(query)


def test_validate_query_rejects_step_limit() -> None:
    with pytest.raises(ValueError, match="max allowed is 2"):
        validate_query(_query(steps=3), max_steps=2)


def test_validate_expression_rejects_node_limit() -> None:
    tree = ast.parse("a + b + c + d", mode="eval")

    with pytest.raises(ValueError, match="max node count"):
        validate_expression_tree(tree, max_node_count=3, max_depth=10)


def test_validate_expression_rejects_depth_limit() -> None:
    tree = ast.parse("f(g(h(x)))", mode="eval")

    with pytest.raises(ValueError, match="max depth"):
        validate_expression_tree(tree, max_node_count=50, max_depth=3)


def test_validate_expression_rejects_private_access() -> None:
    with pytest.raises(ValueError, match="dunder name"):
        validate_expression_tree(ast.parse("__import__('os')", mode="eval"))
    with pytest.raises(ValueError, match="private attribute"):
        validate_expression_tree(ast.parse("obj._secret", mode="eval"))


def test_validate_expression_rejects_lambdas() -> None:
    with pytest.raises(ValueError, match="Lambda"):
        validate_expression_tree(ast.parse("lambda: 1", mode="eval"))
