from collections.abc import Generator
from contextlib import contextmanager
from dataclasses import dataclass

from .config import VALQ_CONFIG
from .core import _compile_cached


@dataclass(frozen=True)
class _ValqConfigSnapshot:
    max_steps: int
    max_expression_nodes: int
    max_expression_depth: int
    strict_deserialize: bool
    log_level: str

    @classmethod
    def capture(cls) -> "_ValqConfigSnapshot":
        return cls(
            max_steps=VALQ_CONFIG.max_steps,
            max_expression_nodes=VALQ_CONFIG.max_expression_nodes,
            max_expression_depth=VALQ_CONFIG.max_expression_depth,
            strict_deserialize=VALQ_CONFIG.strict_deserialize,
            log_level=VALQ_CONFIG.log_level,
        )

    def restore(self) -> None:
        VALQ_CONFIG.max_steps = self.max_steps
        VALQ_CONFIG.max_expression_nodes = self.max_expression_nodes
        VALQ_CONFIG.max_expression_depth = self.max_expression_depth
        VALQ_CONFIG.strict_deserialize = self.strict_deserialize
        VALQ_CONFIG.log_level = self.log_level


def _apply_test_config() -> None:
    VALQ_CONFIG.max_steps = 64
    VALQ_CONFIG.max_expression_nodes = 64
    VALQ_CONFIG.max_expression_depth = 16
    VALQ_CONFIG.strict_deserialize = False
    VALQ_CONFIG.log_level = "DEBUG"


@contextmanager
def valq_test_env() -> Generator[None, None, None]:
    """Run with default limits and an empty compile cache, restoring afterwards."""

    snapshot = _ValqConfigSnapshot.capture()
    _apply_test_config()
    _compile_cached.cache_clear()
    try:
        yield
    finally:
        snapshot.restore()
        _compile_cached.cache_clear()
