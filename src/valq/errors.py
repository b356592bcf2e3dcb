"""Exception types raised by valq."""

from __future__ import annotations


class ValqError(Exception):
    """Base exception for all valq errors."""


class QuerySyntaxError(ValqError, ValueError):
    """Raised when query text cannot be compiled into a plan."""

    def __init__(self, query: str, reason: str, position: int | None = None):
        self.query = query
        self.reason = reason
        self.position = position
        if position is None:
            message = f"invalid query {query!r}: {reason}"
        else:
            message = f"invalid query {query!r} at position {position}: {reason}"
        super().__init__(message)


class QueryExpressionError(ValqError):
    """Raised when an embedded expression fails while a query is evaluated."""

    def __init__(self, source: str, cause: BaseException):
        self.source = source
        super().__init__(
            f"expression {source!r} failed: {type(cause).__name__}: {cause}"
        )


class DefaultUnavailableError(ValqError, TypeError):
    """Raised when ``?? default`` targets a type without a zero-argument constructor."""

    def __init__(self, target: object, cause: BaseException | None = None):
        self.target = target
        name = getattr(target, "__name__", repr(target))
        detail = f": {cause}" if cause is not None else ""
        super().__init__(f"type {name} has no default value{detail}")


class QueryValueError(ValqError):
    """Base class for the runtime failures of a strict query."""


class ValueNotFoundAtPath(QueryValueError):
    """No value exists at the rendered path."""

    def __init__(self, path: str, step: int):
        self.path = path
        self.step = step
        super().__init__(f"value not found at the path: {path}")


class AsCastFailed(QueryValueError):
    """The queried value does not have the requested shape."""

    def __init__(self, accessor: str, shape: str):
        self.accessor = accessor
        self.shape = shape
        super().__init__(f"conversion with {accessor}() failed")


class DeserializationFailed(QueryValueError):
    """The queried value could not be decoded into the requested type."""

    def __init__(self, message: str):
        self.message = message
        super().__init__(f"failed to deserialize the queried value: {message}")


__all__ = [
    "AsCastFailed",
    "DefaultUnavailableError",
    "DeserializationFailed",
    "QueryExpressionError",
    "QuerySyntaxError",
    "QueryValueError",
    "ValqError",
    "ValueNotFoundAtPath",
]
