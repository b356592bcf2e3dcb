from __future__ import annotations

from dataclasses import dataclass
from functools import lru_cache

from .config import VALQ_CONFIG
from .query.ast import Query
from .query.eval import evaluate
from .query.outcome import Outcome, adapt
from .query.parser import parse_query


@dataclass(frozen=True)
class CompiledQuery:
    """A parsed query, reusable across evaluations.

    Keyword arguments of the evaluation methods form the environment the
    query's root name and embedded expressions are resolved in.
    """

    query: Query

    @property
    def source(self) -> str:
        return self.query.source

    def outcome(self, /, **env: object) -> Outcome:
        root = self.query.root.evaluate(env)
        return evaluate(root, self.query.plan, self.query.mutability, env)

    def value(self, /, **env: object) -> object:
        """Evaluate the query; failures become ``None`` unless a fallback is set."""

        return adapt(
            self.outcome(**env),
            self.query.coalesce,
            "optional",
            finisher=self.query.plan.finisher,
            env=env,
        )

    def result(self, /, **env: object) -> object:
        """Evaluate the query; failures raise ``QueryValueError`` unless a fallback is set."""

        return adapt(
            self.outcome(**env),
            self.query.coalesce,
            "strict",
            finisher=self.query.plan.finisher,
            env=env,
        )


@lru_cache(maxsize=256)
def _compile_cached(
    text: str,
    max_steps: int,
    max_expression_nodes: int,
    max_expression_depth: int,
) -> CompiledQuery:
    return CompiledQuery(
        parse_query(
            text,
            max_steps=max_steps,
            max_expression_nodes=max_expression_nodes,
            max_expression_depth=max_expression_depth,
        )
    )


def compile_query(text: str) -> CompiledQuery:
    """Parse ``text`` once; repeated calls with the same text share the plan."""

    return _compile_cached(
        text,
        VALQ_CONFIG.max_steps,
        VALQ_CONFIG.max_expression_nodes,
        VALQ_CONFIG.max_expression_depth,
    )


def query_value(query: str, /, **env: object) -> object:
    """Run ``query`` and return the found value or ``None``.

    >>> query_value("doc.foo.bar.x -> int", doc={"foo": {"bar": {"x": 1}}})
    1
    """

    return compile_query(query).value(**env)


def query_value_result(query: str, /, **env: object) -> object:
    """Run ``query`` and return the found value, raising ``QueryValueError`` on failure."""

    return compile_query(query).result(**env)


__all__ = ["CompiledQuery", "compile_query", "query_value", "query_value_result"]
