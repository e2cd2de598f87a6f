import json
import logging

import pytest

from compton_config.logging import TRACE, JsonFormatter, parse_log_level


@pytest.mark.parametrize(
    "text,level",
    [
        ("trace", TRACE),
        ("DEBUG", logging.DEBUG),
        ("Info", logging.INFO),
        ("warn", logging.WARNING),
        ("error", logging.ERROR),
        ("FATAL", logging.CRITICAL),
    ],
)
def test_parse_log_level(text: str, level: int) -> None:
    assert parse_log_level(text) == level


@pytest.mark.parametrize("text", ["warning", "verbose", ""])
def test_parse_log_level_unknown(text: str) -> None:
    assert parse_log_level(text) is None


def test_trace_level_name_registered() -> None:
    assert logging.getLevelName(TRACE) == "TRACE"


def test_json_formatter_includes_extra_fields() -> None:
    record = logging.LogRecord(
        name="compton.config",
        level=logging.WARNING,
        pathname=__file__,
        lineno=1,
        msg="Option `%s` is deprecated",
        args=("no-dock-shadow",),
        exc_info=None,
    )
    record.key = "no-dock-shadow"
    payload = json.loads(JsonFormatter().format(record))
    assert payload["level"] == "WARNING"
    assert payload["logger"] == "compton.config"
    assert payload["message"] == "Option `no-dock-shadow` is deprecated"
    assert payload["key"] == "no-dock-shadow"
