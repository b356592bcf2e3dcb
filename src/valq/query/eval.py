"""Query plan evaluator."""

from __future__ import annotations

import json
from collections.abc import Sequence

from pydantic import ValidationError

from ..config import VALQ_CONFIG
from ..runtime.logging import get_logger
from .ast import CastFinisher, DeserializeFinisher, Env, Mutability, QueryPlan
from .outcome import CastFailed, DeserializeFailed, Found, NotFoundAtStep, Outcome
from .paths import MISSING, ValueRef, lookup, lookup_mut
from .shapes import Shape, accessor_name, cast_node
from .types import deserialize, resolve_target


def render_path(keys: Sequence[object]) -> str:
    """Render resolved keys as a root-relative path such as ``.arr[0].name``."""

    parts: list[str] = []
    for key in keys:
        if isinstance(key, str) and key.isidentifier():
            parts.append(f".{key}")
        elif isinstance(key, str):
            parts.append(f"[{json.dumps(key)}]")
        else:
            parts.append(f"[{key!r}]")
    return "".join(parts)


def evaluate(
    root: object,
    plan: QueryPlan,
    mode: Mutability = "immutable",
    env: Env | None = None,
) -> Outcome:
    """Walk ``root`` along ``plan`` and return the single resulting outcome.

    Step keys are resolved one at a time, left to right; the first missing
    lookup stops the walk and later keys are never evaluated.
    """

    env = {} if env is None else env
    mutable = mode == "mutable"
    fetch = lookup_mut if mutable else lookup

    keys: list[object] = []
    container: object = None
    current = root
    for index, step in enumerate(plan.steps):
        key = step.resolve_key(env)
        keys.append(key)
        child = fetch(current, key)
        if child is MISSING:
            path = render_path(keys)
            get_logger().debug(
                "miss %s (step %d)",
                path,
                index,
                extra={"valq_action_color": "yellow"},
            )
            return NotFoundAtStep(step=index, path=path)
        container, current = current, child

    outcome = _finish(current, container, keys[-1], plan, mutable, env)
    if isinstance(outcome, Found):
        get_logger().debug(
            "found %s", render_path(keys), extra={"valq_action_color": "green"}
        )
    return outcome


def _finish(
    node: object,
    container: object,
    key: object,
    plan: QueryPlan,
    mutable: bool,
    env: Env,
) -> Outcome:
    finisher = plan.finisher

    if finisher is None or (
        isinstance(finisher, CastFinisher) and finisher.shape is Shape.VAL
    ):
        if mutable:
            return Found(ValueRef(container, key))
        return Found(node)

    if isinstance(finisher, CastFinisher):
        value = cast_node(node, finisher.shape, mutable=mutable)
        if value is MISSING:
            accessor = accessor_name(finisher.shape, mutable=mutable)
            get_logger().debug(
                "cast-failed %s()", accessor, extra={"valq_action_color": "red"}
            )
            return CastFailed(shape=finisher.shape, accessor=accessor)
        return Found(value)

    if isinstance(finisher, DeserializeFinisher):
        target = resolve_target(finisher.target, env)
        try:
            value = deserialize(node, target, strict=VALQ_CONFIG.strict_deserialize)
        except ValidationError as exc:
            get_logger().debug(
                "decode-failed into %r", target, extra={"valq_action_color": "red"}
            )
            return DeserializeFailed(message=str(exc), cause=exc)
        return Found(value)

    raise TypeError(f"unknown finisher {finisher!r}")


__all__ = ["evaluate", "render_path"]
