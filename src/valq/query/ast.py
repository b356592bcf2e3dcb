"""Plan models for compiled value queries."""

from __future__ import annotations

from collections.abc import Callable, Mapping
from typing import Annotated, Any, Literal, TypeAlias

from pydantic import BaseModel, ConfigDict, Field

from ..errors import QueryExpressionError
from .shapes import Shape

Env: TypeAlias = Mapping[str, object]
Mutability: TypeAlias = Literal["immutable", "mutable"]


class _PlanNode(BaseModel):
    model_config = ConfigDict(extra="forbid", frozen=True)


class ConstExpr(_PlanNode):
    """An expression whose value is known when the query is compiled."""

    op: Literal["const"] = "const"
    value: Any

    def evaluate(self, env: Env) -> object:
        return self.value

    def render(self) -> str:
        return repr(self.value)


class DeferredExpr(_PlanNode):
    """An expression evaluated against the caller's environment on demand.

    ``thunk`` is invoked once per evaluation, at the moment its value is
    needed.
    """

    op: Literal["deferred"] = "deferred"
    source: str
    thunk: Callable[[Mapping[str, object]], object]

    def evaluate(self, env: Env) -> object:
        try:
            return self.thunk(env)
        except QueryExpressionError:
            raise
        except Exception as exc:
            raise QueryExpressionError(self.source, exc) from exc

    def render(self) -> str:
        return self.source


Expr: TypeAlias = Annotated[ConstExpr | DeferredExpr, Field(discriminator="op")]


class FieldStep(_PlanNode):
    op: Literal["field"] = "field"
    name: str = Field(min_length=1)

    def resolve_key(self, env: Env) -> object:
        return self.name


class IndexStep(_PlanNode):
    op: Literal["index"] = "index"
    expr: Expr

    def resolve_key(self, env: Env) -> object:
        return self.expr.evaluate(env)


Step: TypeAlias = Annotated[FieldStep | IndexStep, Field(discriminator="op")]


class CastFinisher(_PlanNode):
    op: Literal["cast"] = "cast"
    shape: Shape


class DeserializeFinisher(_PlanNode):
    op: Literal["deserialize"] = "deserialize"
    target: Expr


Finisher: TypeAlias = Annotated[
    CastFinisher | DeserializeFinisher, Field(discriminator="op")
]


class NoCoalesce(_PlanNode):
    op: Literal["none"] = "none"


class DefaultCoalesce(_PlanNode):
    op: Literal["default"] = "default"


class ExprCoalesce(_PlanNode):
    op: Literal["expr"] = "expr"
    expr: Expr


Coalesce: TypeAlias = Annotated[
    NoCoalesce | DefaultCoalesce | ExprCoalesce, Field(discriminator="op")
]


class QueryPlan(_PlanNode):
    steps: list[Step] = Field(min_length=1)
    finisher: Finisher | None = None


class Query(_PlanNode):
    root: Expr
    plan: QueryPlan
    coalesce: Coalesce = Field(default_factory=NoCoalesce)
    mutability: Mutability = "immutable"
    source: str = ""


__all__ = [
    "Coalesce",
    "CastFinisher",
    "ConstExpr",
    "DefaultCoalesce",
    "DeferredExpr",
    "DeserializeFinisher",
    "Env",
    "Expr",
    "ExprCoalesce",
    "FieldStep",
    "Finisher",
    "IndexStep",
    "Mutability",
    "NoCoalesce",
    "Query",
    "QueryPlan",
    "Step",
]
