"""Python builder for query plans.

``V.foo.bar[0]`` builds the same plan as the text ``doc.foo.bar[0]``.
Zero-argument callables used as keys become dynamic keys, called once per
evaluation when their step is reached. Keys that clash with the builder's
own methods (``get``, ``cast``, ...) can be written with brackets:
``V["get"]``.
"""

from __future__ import annotations

from collections.abc import Callable, Mapping
from dataclasses import dataclass

from .ast import (
    CastFinisher,
    ConstExpr,
    DefaultCoalesce,
    DeferredExpr,
    DeserializeFinisher,
    ExprCoalesce,
    FieldStep,
    Finisher,
    IndexStep,
    NoCoalesce,
    QueryPlan,
    Step,
)
from .eval import evaluate
from .outcome import Outcome, adapt
from .shapes import Shape, parse_shape, supports_mutable


def _thunk_expr(key: Callable[[], object]) -> DeferredExpr:
    name = getattr(key, "__name__", type(key).__name__)

    def thunk(env: Mapping[str, object]) -> object:
        return key()

    return DeferredExpr(source=f"{name}()", thunk=thunk)


@dataclass(frozen=True)
class PathRef:
    steps: tuple[Step, ...] = ()
    finisher: Finisher | None = None

    def _extend(self, step: Step) -> PathRef:
        if self.finisher is not None:
            raise ValueError("cannot add accessors after '->' or '>>'")
        return PathRef(steps=(*self.steps, step))

    def __getattr__(self, segment: str) -> PathRef:
        if segment.startswith("_"):
            raise AttributeError(segment)
        return self._extend(FieldStep(name=segment))

    def __getitem__(self, key: int | str | Callable[[], object]) -> PathRef:
        if isinstance(key, bool):
            raise TypeError("query keys cannot be booleans")
        if isinstance(key, (int, str)):
            return self._extend(IndexStep(expr=ConstExpr(value=key)))
        if callable(key):
            return self._extend(IndexStep(expr=_thunk_expr(key)))
        raise TypeError(
            f"query keys must be int, str or a zero-argument callable, got {type(key).__name__}"
        )

    def cast(self, shape: str | Shape) -> PathRef:
        resolved = shape if isinstance(shape, Shape) else parse_shape(shape)
        return PathRef(steps=self.steps, finisher=CastFinisher(shape=resolved))

    def deserialize(self, target: object) -> PathRef:
        return PathRef(
            steps=self.steps,
            finisher=DeserializeFinisher(target=ConstExpr(value=target)),
        )

    @property
    def plan(self) -> QueryPlan:
        if not self.steps:
            raise ValueError("a query needs at least one field or index access")
        return QueryPlan(steps=list(self.steps), finisher=self.finisher)

    def outcome(self, root: object) -> Outcome:
        return evaluate(root, self.plan)

    def get(self, root: object) -> object | None:
        return adapt(self.outcome(root), NoCoalesce(), "optional")

    def require(self, root: object) -> object:
        return adapt(self.outcome(root), NoCoalesce(), "strict")

    def get_or(self, root: object, fallback: Callable[[], object]) -> object:
        """Return the value or ``fallback()``; ``fallback`` only runs on failure."""

        coalesce = ExprCoalesce(expr=_thunk_expr(fallback))
        return adapt(self.outcome(root), coalesce, "optional")

    def get_or_default(self, root: object) -> object:
        return adapt(
            self.outcome(root), DefaultCoalesce(), "optional", finisher=self.finisher
        )

    def get_mut(self, root: object) -> object | None:
        finisher = self.finisher
        if isinstance(finisher, DeserializeFinisher):
            raise ValueError("mutable queries cannot deserialize")
        if isinstance(finisher, CastFinisher) and not supports_mutable(finisher.shape):
            raise ValueError(
                f"unsupported target type {finisher.shape.value!r} for a mutable query"
            )
        return adapt(evaluate(root, self.plan, "mutable"), NoCoalesce(), "optional")


V = PathRef()


__all__ = ["PathRef", "V"]
