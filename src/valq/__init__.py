"""
valq: query values in JSON-like trees with a compact path language.

This package uses a src-layout. Import the package as `valq`.
"""

from importlib.metadata import version

__version__ = version("valq")

from .config import VALQ_CONFIG, ValqConfig
from .core import CompiledQuery, compile_query, query_value, query_value_result
from .errors import (
    AsCastFailed,
    DefaultUnavailableError,
    DeserializationFailed,
    QueryExpressionError,
    QuerySyntaxError,
    QueryValueError,
    ValqError,
    ValueNotFoundAtPath,
)
from .query import MISSING, Shape, V, ValueRef, evaluate, parse_query
from .runtime import configure_logging, get_logger

__all__ = [
    "__version__",
    "MISSING",
    "VALQ_CONFIG",
    "AsCastFailed",
    "CompiledQuery",
    "DefaultUnavailableError",
    "DeserializationFailed",
    "QueryExpressionError",
    "QuerySyntaxError",
    "QueryValueError",
    "Shape",
    "V",
    "ValqConfig",
    "ValqError",
    "ValueNotFoundAtPath",
    "ValueRef",
    "compile_query",
    "configure_logging",
    "evaluate",
    "get_logger",
    "parse_query",
    "query_value",
    "query_value_result",
]
