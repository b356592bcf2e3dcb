import logging

import valq
from valq import query_value
from valq.runtime.logging import _ValqRichConsoleHandler


def test_configure_logging_rich_handler_is_idempotent() -> None:
    root = logging.getLogger()
    before = [h for h in root.handlers if isinstance(h, _ValqRichConsoleHandler)]

    try:
        logger = valq.configure_logging("INFO")
        after = sum(isinstance(h, _ValqRichConsoleHandler) for h in root.handlers)
        valq.configure_logging("INFO")
        after2 = sum(isinstance(h, _ValqRichConsoleHandler) for h in root.handlers)

        assert logger is valq.get_logger()
        assert logger.level == logging.INFO
        assert after >= len(before)
        assert after2 == after
    finally:
        for handler in list(root.handlers):
            if isinstance(handler, _ValqRichConsoleHandler) and handler not in before:
                root.removeHandler(handler)
        valq.get_logger().setLevel(logging.NOTSET)


def test_configure_logging_defaults_to_config_level() -> None:
    root = logging.getLogger()
    before = list(root.handlers)
    valq.VALQ_CONFIG.log_level = "ERROR"

    try:
        assert valq.configure_logging().level == logging.ERROR
    finally:
        for handler in list(root.handlers):
            if handler not in before:
                root.removeHandler(handler)
        valq.get_logger().setLevel(logging.NOTSET)


def test_evaluation_logs_misses_and_hits(caplog) -> None:
    caplog.set_level(logging.DEBUG, logger="valq")

    query_value("doc.unknown", doc={})
    query_value("doc.arr[1]", doc={"arr": [1, 2]})

    messages = [r.getMessage() for r in caplog.records if r.name == "valq"]
    assert "miss .unknown (step 0)" in messages
    assert "found .arr[1]" in messages

    miss = next(r for r in caplog.records if r.getMessage().startswith("miss"))
    assert miss.valq_action_color == "yellow"


def test_rich_console_colors_only_action_token() -> None:
    record = logging.LogRecord(
        name="valq",
        level=logging.DEBUG,
        pathname=__file__,
        lineno=1,
        msg="found .foo.bar",
        args=(),
        exc_info=None,
    )
    record.valq_action_color = "green"

    text = _ValqRichConsoleHandler._format_message_text(record)
    assert text.plain == "found .foo.bar"
    assert len(text.spans) == 1
    span = text.spans[0]
    assert span.start == 0
    assert span.end == len("found")
    assert str(span.style) == "green"


def test_rich_console_leaves_plain_records_unstyled() -> None:
    record = logging.LogRecord(
        name="valq",
        level=logging.INFO,
        pathname=__file__,
        lineno=1,
        msg="compiled %r",
        args=("doc.x",),
        exc_info=None,
    )

    text = _ValqRichConsoleHandler._format_message_text(record)
    assert text.plain == "compiled 'doc.x'"
    assert text.spans == []


def test_rich_console_wraps_location_in_brackets() -> None:
    record = logging.LogRecord(
        name="valq",
        level=logging.INFO,
        pathname=__file__,
        lineno=123,
        msg="hello",
        args=(),
        exc_info=None,
    )
    assert _ValqRichConsoleHandler._format_location(record) == "[test_logger.py:123]"
