import pytest

from valq import VALQ_CONFIG, QuerySyntaxError, ValqConfig, query_value


def test_config_defaults(monkeypatch) -> None:
    for name in (
        "VALQ_MAX_STEPS",
        "VALQ_MAX_EXPRESSION_NODES",
        "VALQ_MAX_EXPRESSION_DEPTH",
        "VALQ_STRICT_DESERIALIZE",
        "VALQ_LOG_LEVEL",
    ):
        monkeypatch.delenv(name, raising=False)

    config = ValqConfig()
    assert config.max_steps == 64
    assert config.max_expression_nodes == 64
    assert config.max_expression_depth == 16
    assert config.strict_deserialize is False
    assert config.log_level == "WARNING"


def test_config_reads_environment(monkeypatch) -> None:
    monkeypatch.setenv("VALQ_MAX_STEPS", "8")
    monkeypatch.setenv("VALQ_MAX_EXPRESSION_NODES", "12")
    monkeypatch.setenv("VALQ_MAX_EXPRESSION_DEPTH", " ")
    monkeypatch.setenv("VALQ_STRICT_DESERIALIZE", "yes")
    monkeypatch.setenv("VALQ_LOG_LEVEL", "debug")

    config = ValqConfig()
    assert config.max_steps == 8
    assert config.max_expression_nodes == 12
    assert config.max_expression_depth == 16
    assert config.strict_deserialize is True
    assert config.log_level == "DEBUG"


@pytest.mark.parametrize(
    ("name", "raw", "message"),
    [
        ("VALQ_MAX_STEPS", "many", "must be an integer"),
        ("VALQ_MAX_STEPS", "0", "must be >= 1"),
        ("VALQ_STRICT_DESERIALIZE", "maybe", "must be a boolean flag"),
    ],
)
def test_config_rejects_invalid_values(monkeypatch, name, raw, message) -> None:
    monkeypatch.setenv(name, raw)

    with pytest.raises(ValueError, match=message):
        ValqConfig()


def test_step_limit_applies_to_queries() -> None:
    doc = {"a": {"b": {"c": 1}}}
    assert query_value("doc.a.b.c", doc=doc) == 1

    VALQ_CONFIG.max_steps = 2
    with pytest.raises(QuerySyntaxError, match="max allowed is 2"):
        query_value("doc.a.b.c", doc=doc)
    assert query_value("doc.a.b", doc=doc) == {"c": 1}


def test_expression_limits_apply_to_queries() -> None:
    VALQ_CONFIG.max_expression_nodes = 3

    with pytest.raises(QuerySyntaxError, match="max node count"):
        query_value("doc[i + j + k]", doc={}, i=0, j=0, k=0)
