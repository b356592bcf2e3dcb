from __future__ import annotations

import logging
from pathlib import Path

from rich.console import Console
from rich.text import Text

from ..config import VALQ_CONFIG

LOGGER_NAME = "valq"


class _ValqRichConsoleHandler(logging.Handler):
    """Console handler that renders valq records through rich.

    Records may carry a ``valq_action_color`` attribute; only the first token
    of the message (the action, e.g. ``found`` or ``miss``) is coloured.
    """

    def __init__(self, level: int = logging.NOTSET) -> None:
        super().__init__(level)
        self._console = Console(stderr=True)

    @staticmethod
    def _format_location(record: logging.LogRecord) -> str:
        return f"[{Path(record.pathname).name}:{record.lineno}]"

    @staticmethod
    def _format_message_text(record: logging.LogRecord) -> Text:
        message = record.getMessage()
        text = Text(message)
        color = getattr(record, "valq_action_color", None)
        if color:
            action, _, _ = message.partition(" ")
            text.stylize(color, 0, len(action))
        return text

    def emit(self, record: logging.LogRecord) -> None:
        try:
            line = Text.assemble(
                (f"{record.levelname:<7}", "bold"),
                " ",
                self._format_message_text(record),
                " ",
                (self._format_location(record), "dim"),
            )
            self._console.print(line, soft_wrap=True)
        except Exception:
            self.handleError(record)


def get_logger() -> logging.Logger:
    return logging.getLogger(LOGGER_NAME)


def configure_logging(level: str | int | None = None) -> logging.Logger:
    """Attach the rich console handler to the root logger once.

    ``level`` defaults to ``VALQ_CONFIG.log_level`` and is applied to the valq
    logger on every call.
    """

    root = logging.getLogger()
    if not any(isinstance(h, _ValqRichConsoleHandler) for h in root.handlers):
        root.addHandler(_ValqRichConsoleHandler())

    logger = get_logger()
    logger.setLevel(VALQ_CONFIG.log_level if level is None else level)
    return logger


__all__ = ["LOGGER_NAME", "configure_logging", "get_logger"]
