"""Castable shapes for the ``->`` finisher.

Every shape has an accessor for shared reads, optionally one for mutable
queries, and a zero value used by ``?? default``. Accessors return
``MISSING`` when the node does not have the shape.
"""

from __future__ import annotations

import datetime
from collections.abc import Callable, Mapping, MutableMapping, MutableSequence
from dataclasses import dataclass
from enum import Enum

from ..errors import DefaultUnavailableError
from .paths import MISSING, SupportsShapes

_U64_MAX = 2**64
_I64_MIN = -(2**63)
_I64_MAX = 2**63


class Shape(str, Enum):
    VAL = "val"
    STR = "str"
    INT = "int"
    U64 = "u64"
    I64 = "i64"
    FLOAT = "float"
    F64 = "f64"
    NUMBER = "number"
    BOOL = "bool"
    NULL = "null"
    OBJECT = "object"
    ARRAY = "array"
    DATETIME = "datetime"


_ALIASES: dict[str, Shape] = {
    "mapping": Shape.OBJECT,
    "table": Shape.OBJECT,
    "dict": Shape.OBJECT,
    "sequence": Shape.ARRAY,
    "list": Shape.ARRAY,
}


def parse_shape(name: str) -> Shape:
    """Return the shape called ``name``, accepting the container aliases."""

    if name in _ALIASES:
        return _ALIASES[name]
    try:
        return Shape(name)
    except ValueError:
        supported = sorted({s.value for s in Shape} | set(_ALIASES))
        raise ValueError(
            f"unsupported shape {name!r}; supported shapes are {', '.join(supported)}"
        ) from None


def _is_int(node: object) -> bool:
    return isinstance(node, int) and not isinstance(node, bool)


def _is_number(node: object) -> bool:
    return _is_int(node) or isinstance(node, float)


def _as_val(node: object) -> object:
    return node


def _as_str(node: object) -> object:
    return node if isinstance(node, str) else MISSING


def _as_int(node: object) -> object:
    return node if _is_int(node) else MISSING


def _as_u64(node: object) -> object:
    if _is_int(node) and 0 <= node < _U64_MAX:  # type: ignore[operator]
        return node
    return MISSING


def _as_i64(node: object) -> object:
    if _is_int(node) and _I64_MIN <= node < _I64_MAX:  # type: ignore[operator]
        return node
    return MISSING


def _as_f64(node: object) -> object:
    return float(node) if _is_number(node) else MISSING  # type: ignore[arg-type]


def _as_number(node: object) -> object:
    return node if _is_number(node) else MISSING


def _as_bool(node: object) -> object:
    return node if isinstance(node, bool) else MISSING


def _as_null(node: object) -> object:
    return None if node is None else MISSING


def _as_object(node: object) -> object:
    return node if isinstance(node, Mapping) else MISSING


def _as_array(node: object) -> object:
    return node if isinstance(node, (list, tuple)) else MISSING


def _as_datetime(node: object) -> object:
    return node if isinstance(node, (datetime.datetime, datetime.date)) else MISSING


def _as_object_mut(node: object) -> object:
    return node if isinstance(node, MutableMapping) else MISSING


def _as_array_mut(node: object) -> object:
    return node if isinstance(node, MutableSequence) else MISSING


@dataclass(frozen=True)
class ShapeSpec:
    accessor: Callable[[object], object]
    accessor_mut: Callable[[object], object] | None
    zero: Callable[[], object] | None


_SHAPES: dict[Shape, ShapeSpec] = {
    Shape.VAL: ShapeSpec(_as_val, _as_val, lambda: None),
    Shape.STR: ShapeSpec(_as_str, None, str),
    Shape.INT: ShapeSpec(_as_int, None, int),
    Shape.U64: ShapeSpec(_as_u64, None, int),
    Shape.I64: ShapeSpec(_as_i64, None, int),
    Shape.FLOAT: ShapeSpec(_as_f64, None, float),
    Shape.F64: ShapeSpec(_as_f64, None, float),
    Shape.NUMBER: ShapeSpec(_as_number, None, int),
    Shape.BOOL: ShapeSpec(_as_bool, None, bool),
    Shape.NULL: ShapeSpec(_as_null, None, lambda: None),
    Shape.OBJECT: ShapeSpec(_as_object, _as_object_mut, dict),
    Shape.ARRAY: ShapeSpec(_as_array, _as_array_mut, list),
    Shape.DATETIME: ShapeSpec(_as_datetime, None, None),
}


def accessor_name(shape: Shape, *, mutable: bool = False) -> str:
    suffix = "_mut" if mutable else ""
    return f"as_{shape.value}{suffix}"


def supports_mutable(shape: Shape) -> bool:
    return _SHAPES[shape].accessor_mut is not None


def zero_value(shape: Shape) -> object:
    zero = _SHAPES[shape].zero
    if zero is None:
        raise DefaultUnavailableError(shape.value)
    return zero()


def cast_node(node: object, shape: Shape, *, mutable: bool = False) -> object:
    """Narrow ``node`` to ``shape``; returns ``MISSING`` on a shape mismatch."""

    if isinstance(node, SupportsShapes):
        return node.as_shape(shape, mutable)

    spec = _SHAPES[shape]
    if mutable:
        if spec.accessor_mut is None:
            return MISSING
        return spec.accessor_mut(node)
    return spec.accessor(node)


__all__ = [
    "Shape",
    "ShapeSpec",
    "accessor_name",
    "cast_node",
    "parse_shape",
    "supports_mutable",
    "zero_value",
]
