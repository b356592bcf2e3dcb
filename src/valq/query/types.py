"""Deserialization target resolution and decoding for the ``>>`` finisher."""

from __future__ import annotations

import builtins
import importlib
import re
from functools import lru_cache

from pydantic import TypeAdapter, ValidationError

from ..errors import DefaultUnavailableError, QueryExpressionError
from .ast import ConstExpr, Env, Expr

_DOTTED_NAME = re.compile(r"[A-Za-z_]\w*(\.[A-Za-z_]\w*)*")

_TYPE_CACHE: dict[str, type | None] = {}


def resolve_type(type_path: str) -> type | None:
    """Look up a class by dotted path, e.g. ``decimal.Decimal``.

    Bare names are looked up in ``builtins``. Otherwise the longest importable
    module prefix wins and the remaining segments are read as attributes.
    Results, including misses, are cached per path.
    """

    try:
        return _TYPE_CACHE[type_path]
    except KeyError:
        pass

    resolved: type | None = None
    if _DOTTED_NAME.fullmatch(type_path):
        segments = type_path.split(".")
        if len(segments) == 1:
            resolved = _as_type(getattr(builtins, type_path, None))
        else:
            resolved = _import_type(segments)
    _TYPE_CACHE[type_path] = resolved
    return resolved


def _as_type(candidate: object) -> type | None:
    return candidate if isinstance(candidate, type) else None


def _import_type(segments: list[str]) -> type | None:
    for split in reversed(range(1, len(segments))):
        try:
            owner: object = importlib.import_module(".".join(segments[:split]))
        except ModuleNotFoundError:
            continue
        for attr in segments[split:]:
            owner = getattr(owner, attr, None)
            if owner is None:
                break
        if _as_type(owner) is not None:
            return owner  # type: ignore[return-value]
    return None


def resolve_target(target: Expr, env: Env) -> object:
    """Evaluate a ``>>`` target, falling back to importable dotted type paths."""

    if isinstance(target, ConstExpr):
        return target.value

    try:
        return target.evaluate(env)
    except QueryExpressionError as exc:
        if not isinstance(exc.__cause__, (NameError, AttributeError)):
            raise
        if not _DOTTED_NAME.fullmatch(target.source):
            raise
        resolved = resolve_type(target.source)
        if resolved is None:
            raise
        return resolved


@lru_cache(maxsize=128)
def _cached_adapter(target: object) -> TypeAdapter:
    return TypeAdapter(target)


def _adapter_for(target: object) -> TypeAdapter:
    try:
        hash(target)
    except TypeError:
        return TypeAdapter(target)
    return _cached_adapter(target)


def deserialize(node: object, target: object, *, strict: bool = False) -> object:
    """Decode ``node`` into ``target``.

    Raises pydantic's ``ValidationError`` when ``node`` does not fit
    ``target``. A target pydantic cannot build a schema for raises
    ``PydanticSchemaGenerationError`` (a ``TypeError``) instead, which
    ``??`` fallbacks do not catch.
    """

    return _adapter_for(target).validate_python(node, strict=strict)


def default_for(target: object) -> object:
    if not callable(target):
        raise DefaultUnavailableError(target)
    try:
        return target()
    except (TypeError, ValidationError) as exc:
        raise DefaultUnavailableError(target, exc) from exc


__all__ = ["default_for", "deserialize", "resolve_target", "resolve_type"]
