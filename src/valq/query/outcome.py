"""Evaluation outcomes and their adaptation into public results."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Literal, TypeAlias

from ..errors import (
    AsCastFailed,
    DeserializationFailed,
    QueryValueError,
    ValueNotFoundAtPath,
)
from .ast import (
    CastFinisher,
    Coalesce,
    DefaultCoalesce,
    DeserializeFinisher,
    Env,
    ExprCoalesce,
    Finisher,
)
from .shapes import Shape, zero_value
from .types import default_for, resolve_target

Presentation: TypeAlias = Literal["optional", "strict"]


@dataclass(frozen=True)
class Found:
    value: object

    @property
    def ok(self) -> bool:
        return True


@dataclass(frozen=True)
class NotFoundAtStep:
    step: int
    path: str

    @property
    def ok(self) -> bool:
        return False

    def to_error(self) -> QueryValueError:
        return ValueNotFoundAtPath(self.path, self.step)


@dataclass(frozen=True)
class CastFailed:
    shape: Shape
    accessor: str

    @property
    def ok(self) -> bool:
        return False

    def to_error(self) -> QueryValueError:
        return AsCastFailed(self.accessor, self.shape.value)


@dataclass(frozen=True)
class DeserializeFailed:
    message: str
    cause: BaseException | None = field(default=None, compare=False, repr=False)

    @property
    def ok(self) -> bool:
        return False

    def to_error(self) -> QueryValueError:
        error = DeserializationFailed(self.message)
        error.__cause__ = self.cause
        return error


Outcome: TypeAlias = Found | NotFoundAtStep | CastFailed | DeserializeFailed


def default_value(finisher: Finisher | None, env: Env) -> object:
    """Zero value of the type a query would have produced."""

    if isinstance(finisher, CastFinisher):
        return zero_value(finisher.shape)
    if isinstance(finisher, DeserializeFinisher):
        return default_for(resolve_target(finisher.target, env))
    return None


def adapt(
    outcome: Outcome,
    coalesce: Coalesce,
    presentation: Presentation,
    *,
    finisher: Finisher | None = None,
    env: Env | None = None,
) -> object:
    """Turn an ``Outcome`` into the value a caller sees.

    Without a fallback, ``"optional"`` maps failures to ``None`` and
    ``"strict"`` raises the matching ``QueryValueError``. With a fallback,
    failures are replaced by the default or the fallback expression, which
    is only evaluated here, on the failure path.
    """

    if isinstance(outcome, Found):
        return outcome.value

    env = {} if env is None else env
    if isinstance(coalesce, DefaultCoalesce):
        return default_value(finisher, env)
    if isinstance(coalesce, ExprCoalesce):
        return coalesce.expr.evaluate(env)

    if presentation == "optional":
        return None
    raise outcome.to_error()


__all__ = [
    "CastFailed",
    "DeserializeFailed",
    "Found",
    "NotFoundAtStep",
    "Outcome",
    "Presentation",
    "adapt",
    "default_value",
]
