from __future__ import annotations

import os


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    try:
        value = int(raw)
    except ValueError as exc:
        raise ValueError(f"{name} must be an integer, got {raw!r}") from exc
    if value < 1:
        raise ValueError(f"{name} must be >= 1, got {value}")
    return value


def _env_bool(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    match raw.strip().lower():
        case "1" | "true" | "yes" | "on":
            return True
        case "0" | "false" | "no" | "off":
            return False
        case _:
            raise ValueError(f"{name} must be a boolean flag, got {raw!r}")


class ValqConfig:
    """Process-wide settings, read from ``VALQ_*`` environment variables."""

    def __init__(self) -> None:
        self.max_steps = _env_int("VALQ_MAX_STEPS", 64)
        self.max_expression_nodes = _env_int("VALQ_MAX_EXPRESSION_NODES", 64)
        self.max_expression_depth = _env_int("VALQ_MAX_EXPRESSION_DEPTH", 16)
        self.strict_deserialize = _env_bool("VALQ_STRICT_DESERIALIZE", False)
        self.log_level = os.getenv("VALQ_LOG_LEVEL", "WARNING").strip().upper()


VALQ_CONFIG = ValqConfig()


__all__ = ["VALQ_CONFIG", "ValqConfig"]
