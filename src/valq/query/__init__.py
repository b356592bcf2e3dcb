from .ast import (
    CastFinisher,
    Coalesce,
    ConstExpr,
    DefaultCoalesce,
    DeferredExpr,
    DeserializeFinisher,
    Expr,
    ExprCoalesce,
    FieldStep,
    Finisher,
    IndexStep,
    Mutability,
    NoCoalesce,
    Query,
    QueryPlan,
    Step,
)
from .dsl import PathRef, V
from .eval import evaluate, render_path
from .outcome import (
    CastFailed,
    DeserializeFailed,
    Found,
    NotFoundAtStep,
    Outcome,
    Presentation,
    adapt,
)
from .parser import parse_query
from .paths import (
    MISSING,
    SupportsLookup,
    SupportsLookupMut,
    SupportsShapes,
    ValueRef,
    lookup,
    lookup_mut,
)
from .shapes import Shape, parse_shape
from .validate import validate_query

__all__ = [
    "MISSING",
    "CastFailed",
    "CastFinisher",
    "Coalesce",
    "ConstExpr",
    "DefaultCoalesce",
    "DeferredExpr",
    "DeserializeFailed",
    "DeserializeFinisher",
    "Expr",
    "ExprCoalesce",
    "FieldStep",
    "Finisher",
    "Found",
    "IndexStep",
    "Mutability",
    "NoCoalesce",
    "NotFoundAtStep",
    "Outcome",
    "PathRef",
    "Presentation",
    "Query",
    "QueryPlan",
    "Shape",
    "Step",
    "SupportsLookup",
    "SupportsLookupMut",
    "SupportsShapes",
    "V",
    "ValueRef",
    "adapt",
    "evaluate",
    "lookup",
    "lookup_mut",
    "parse_query",
    "parse_shape",
    "render_path",
    "validate_query",
]
