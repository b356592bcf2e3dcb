"""Tests for query plan model definitions."""

import pytest
from pydantic import ValidationError

from valq import QueryExpressionError
from valq.query.ast import (
    CastFinisher,
    ConstExpr,
    DeferredExpr,
    FieldStep,
    IndexStep,
    NoCoalesce,
    Query,
    QueryPlan,
)
from valq.query.shapes import Shape


def test_query_plan_requires_at_least_one_step() -> None:
    with pytest.raises(ValidationError):
        QueryPlan(steps=[])


def test_plan_nodes_are_frozen_and_strict() -> None:
    step = FieldStep(name="foo")

    with pytest.raises(ValidationError):
        step.name = "bar"  # type: ignore[misc]
    with pytest.raises(ValidationError):
        FieldStep(name="foo", extra=1)  # type: ignore[call-arg]
    with pytest.raises(ValidationError):
        FieldStep(name="")


def test_steps_resolve_their_keys() -> None:
    assert FieldStep(name="foo").resolve_key({}) == "foo"
    assert IndexStep(expr=ConstExpr(value=3)).resolve_key({}) == 3

    dynamic = IndexStep(
        expr=DeferredExpr(source="i", thunk=lambda env: env["i"] + 1)
    )
    assert dynamic.resolve_key({"i": 1}) == 2


def test_deferred_expression_wraps_caller_errors() -> None:
    expr = DeferredExpr(source="boom()", thunk=lambda env: 1 / 0)

    with pytest.raises(QueryExpressionError, match="boom\\(\\)") as exc_info:
        expr.evaluate({})
    assert isinstance(exc_info.value.__cause__, ZeroDivisionError)


def test_query_defaults() -> None:
    query = Query(
        root=ConstExpr(value={"a": 1}),
        plan=QueryPlan(
            steps=[FieldStep(name="a")],
            finisher=CastFinisher(shape=Shape.INT),
        ),
    )

    assert query.mutability == "immutable"
    assert isinstance(query.coalesce, NoCoalesce)
    assert query.plan.finisher == CastFinisher(shape=Shape.INT)


def test_steps_validate_from_tagged_dicts() -> None:
    plan = QueryPlan.model_validate(
        {
            "steps": [
                {"op": "field", "name": "foo"},
                {"op": "index", "expr": {"op": "const", "value": 0}},
            ],
            "finisher": {"op": "cast", "shape": "u64"},
        }
    )

    assert plan.steps == [
        FieldStep(name="foo"),
        IndexStep(expr=ConstExpr(value=0)),
    ]
    assert plan.finisher == CastFinisher(shape=Shape.U64)
