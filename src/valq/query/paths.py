"""Lookup capabilities for queried tree nodes.

Builtin JSON-like values (mappings, lists and tuples) are supported out of the
box. Any other node type opts in by implementing the protocols below.
"""

from __future__ import annotations

from collections.abc import Mapping, MutableMapping, MutableSequence
from dataclasses import dataclass
from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from .shapes import Shape


class _Missing:
    """Sentinel for lookups that found nothing."""

    def __repr__(self) -> str:
        return "MISSING"

    def __bool__(self) -> bool:
        return False


MISSING: _Missing = _Missing()


@runtime_checkable
class SupportsLookup(Protocol):
    def lookup(self, key: object) -> object: ...


@runtime_checkable
class SupportsLookupMut(Protocol):
    def lookup_mut(self, key: object) -> object: ...

    def replace(self, key: object, value: object) -> None: ...


@runtime_checkable
class SupportsShapes(Protocol):
    def as_shape(self, shape: Shape, mutable: bool) -> object: ...


def _is_index(key: object) -> bool:
    return isinstance(key, int) and not isinstance(key, bool) and key >= 0


def _mapping_get(node: Mapping, key: object) -> object:
    # True == 1 and hash(True) == hash(1), so a bool would match an int key
    if isinstance(key, bool):
        return MISSING
    try:
        if key not in node:
            return MISSING
    except TypeError:
        # unhashable key
        return MISSING
    return node[key]


def lookup(node: object, key: object) -> object:
    """Return the child of ``node`` at ``key``, or ``MISSING``."""

    if isinstance(node, SupportsLookup):
        return node.lookup(key)

    if isinstance(node, Mapping):
        return _mapping_get(node, key)

    if isinstance(node, (list, tuple)):
        if not _is_index(key) or key >= len(node):  # type: ignore[operator]
            return MISSING
        return node[key]  # type: ignore[index]

    return MISSING


def lookup_mut(node: object, key: object) -> object:
    """Like :func:`lookup`, but only through containers that can be written to."""

    if isinstance(node, SupportsLookupMut):
        return node.lookup_mut(key)

    if isinstance(node, MutableMapping):
        return _mapping_get(node, key)

    if isinstance(node, MutableSequence):
        if not _is_index(key) or key >= len(node):  # type: ignore[operator]
            return MISSING
        return node[key]  # type: ignore[index]

    return MISSING


def replace(container: object, key: object, value: object) -> None:
    if isinstance(container, SupportsLookupMut):
        container.replace(key, value)
        return
    container[key] = value  # type: ignore[index]


@dataclass(frozen=True)
class ValueRef:
    """Live handle on ``container[key]`` returned by mutable queries."""

    container: object
    key: object

    def get(self) -> object:
        value = lookup_mut(self.container, self.key)
        if value is MISSING:
            raise LookupError(f"{self.key!r} is no longer present in its container")
        return value

    def set(self, value: object) -> None:
        replace(self.container, self.key, value)

    @property
    def value(self) -> object:
        return self.get()


__all__ = [
    "MISSING",
    "SupportsLookup",
    "SupportsLookupMut",
    "SupportsShapes",
    "ValueRef",
    "lookup",
    "lookup_mut",
    "replace",
]
