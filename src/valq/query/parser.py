"""Parser for the textual query language.

::

    query    := "mut"? root accessor* finisher? coalesce?
    root     := identifier | "(" expr ")"
    accessor := "." identifier | "." string | "[" expr "]"
    finisher := "->" shape | ">>" "(" type_expr ")" | ">>" dotted_name
    coalesce := "??" ("default" | expr)
"""

from __future__ import annotations

import ast
import re

from ..config import VALQ_CONFIG
from ..errors import QuerySyntaxError
from ..runtime.logging import get_logger
from .ast import (
    CastFinisher,
    Coalesce,
    DefaultCoalesce,
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
from .expr import compile_expression, name_lookup
from .shapes import parse_shape
from .validate import validate_query

_IDENT = re.compile(r"[A-Za-z_]\w*")
_DOTTED_NAME = re.compile(r"[A-Za-z_]\w*(?:\.[A-Za-z_]\w*)*")
_MUT_PREFIX = re.compile(r"mut(?=[\s(])")
_WHITESPACE = re.compile(r"\s*")

_OPENERS = {"(": ")", "[": "]", "{": "}"}
_CLOSERS = {")", "]", "}"}
_QUOTES = {'"', "'"}


class _Scanner:
    def __init__(self, text: str, max_expression_nodes: int, max_expression_depth: int):
        self.text = text
        self.pos = 0
        self._max_nodes = max_expression_nodes
        self._max_depth = max_expression_depth

    def error(self, reason: str, position: int | None = None) -> QuerySyntaxError:
        return QuerySyntaxError(
            self.text, reason, self.pos if position is None else position
        )

    def skip_ws(self) -> None:
        match = _WHITESPACE.match(self.text, self.pos)
        assert match is not None
        self.pos = match.end()

    def at_end(self) -> bool:
        return self.pos >= len(self.text)

    def peek(self, token: str) -> bool:
        return self.text.startswith(token, self.pos)

    def accept(self, token: str) -> bool:
        if self.peek(token):
            self.pos += len(token)
            return True
        return False

    def match(self, pattern: re.Pattern[str]) -> str | None:
        match = pattern.match(self.text, self.pos)
        if match is None:
            return None
        self.pos = match.end()
        return match.group(0)

    def _skip_string(self, start: int) -> int:
        quote = self.text[start]
        index = start + 1
        while index < len(self.text):
            char = self.text[index]
            if char == "\\":
                index += 2
                continue
            if char == quote:
                return index + 1
            index += 1
        raise self.error("unterminated string literal", start)

    def take_balanced(self) -> tuple[str, int]:
        """Consume a bracketed group and return its inner text and offset."""

        start = self.pos
        stack = [_OPENERS[self.text[start]]]
        index = start + 1
        while index < len(self.text):
            char = self.text[index]
            if char in _QUOTES:
                index = self._skip_string(index)
                continue
            if char in _OPENERS:
                stack.append(_OPENERS[char])
            elif char in _CLOSERS:
                if char != stack.pop():
                    raise self.error(f"mismatched {char!r}", index)
                if not stack:
                    self.pos = index + 1
                    return self.text[start + 1 : index], start + 1
            index += 1
        raise self.error(f"unclosed {self.text[start]!r}", start)

    def take_string(self) -> str:
        start = self.pos
        end = self._skip_string(start)
        self.pos = end
        try:
            literal = ast.literal_eval(self.text[start:end])
        except (ValueError, SyntaxError) as exc:
            raise self.error(f"invalid string literal: {exc}", start) from exc
        if not isinstance(literal, str):
            raise self.error("expected a string literal", start)
        return literal

    def expression(self, source: str, position: int) -> Expr:
        try:
            return compile_expression(
                source,
                max_node_count=self._max_nodes,
                max_depth=self._max_depth,
            )
        except ValueError as exc:
            raise self.error(str(exc), position) from exc


def _parse_root(scanner: _Scanner) -> Expr:
    if scanner.peek("("):
        inner, offset = scanner.take_balanced()
        return scanner.expression(inner, offset)
    name = scanner.match(_IDENT)
    if name is None:
        raise scanner.error("expected a root identifier or a parenthesised expression")
    return name_lookup(name)


def _parse_steps(scanner: _Scanner) -> list[Step]:
    steps: list[Step] = []
    while True:
        scanner.skip_ws()
        if scanner.accept("."):
            scanner.skip_ws()
            if scanner.at_end():
                raise scanner.error("expected a field name after '.'")
            if scanner.text[scanner.pos] in _QUOTES:
                position = scanner.pos
                name = scanner.take_string()
                if not name:
                    raise scanner.error("field names cannot be empty", position)
            else:
                name = scanner.match(_IDENT)
                if name is None:
                    raise scanner.error("expected a field name after '.'")
            steps.append(FieldStep(name=name))
        elif scanner.peek("["):
            inner, offset = scanner.take_balanced()
            steps.append(IndexStep(expr=scanner.expression(inner, offset)))
        else:
            return steps


def _parse_finisher(scanner: _Scanner) -> Finisher | None:
    scanner.skip_ws()
    if scanner.accept("->"):
        scanner.skip_ws()
        position = scanner.pos
        name = scanner.match(_IDENT)
        if name is None:
            raise scanner.error("expected a shape name after '->'")
        try:
            return CastFinisher(shape=parse_shape(name))
        except ValueError as exc:
            raise scanner.error(str(exc), position) from exc

    if scanner.accept(">>"):
        scanner.skip_ws()
        if scanner.peek("("):
            inner, offset = scanner.take_balanced()
            return DeserializeFinisher(target=scanner.expression(inner, offset))
        position = scanner.pos
        name = scanner.match(_DOTTED_NAME)
        if name is None:
            raise scanner.error("expected a type name after '>>'")
        return DeserializeFinisher(target=scanner.expression(name, position))

    return None


def _parse_coalesce(scanner: _Scanner) -> Coalesce:
    scanner.skip_ws()
    if not scanner.accept("??"):
        return NoCoalesce()

    position = scanner.pos
    rest = scanner.text[position:].strip()
    scanner.pos = len(scanner.text)
    if not rest:
        raise scanner.error("expected 'default' or an expression after '??'", position)
    if rest == "default":
        return DefaultCoalesce()
    return ExprCoalesce(expr=scanner.expression(rest, position))


def parse_query(
    text: str,
    *,
    max_steps: int | None = None,
    max_expression_nodes: int | None = None,
    max_expression_depth: int | None = None,
) -> Query:
    """Compile query text into a validated ``Query``.

    Limits default to ``VALQ_CONFIG``. Raises ``QuerySyntaxError`` for text
    that does not follow the grammar or combines operators that cannot be
    used together.
    """

    scanner = _Scanner(
        text,
        max_expression_nodes=max_expression_nodes or VALQ_CONFIG.max_expression_nodes,
        max_expression_depth=max_expression_depth or VALQ_CONFIG.max_expression_depth,
    )
    scanner.skip_ws()

    mutability: Mutability = "immutable"
    if scanner.match(_MUT_PREFIX) is not None:
        mutability = "mutable"
        scanner.skip_ws()

    root = _parse_root(scanner)
    steps = _parse_steps(scanner)
    if not steps:
        raise scanner.error("a query needs at least one field or index access")
    finisher = _parse_finisher(scanner)
    coalesce = _parse_coalesce(scanner)

    scanner.skip_ws()
    if not scanner.at_end():
        raise scanner.error(f"unexpected {scanner.text[scanner.pos:]!r}")

    query = Query(
        root=root,
        plan=QueryPlan(steps=steps, finisher=finisher),
        coalesce=coalesce,
        mutability=mutability,
        source=text,
    )
    try:
        validate_query(query, max_steps=max_steps or VALQ_CONFIG.max_steps)
    except ValueError as exc:
        raise QuerySyntaxError(text, str(exc)) from exc

    get_logger().debug(
        "compiled %r into %d steps", text, len(steps), extra={"valq_action_color": "cyan"}
    )
    return query


__all__ = ["parse_query"]
