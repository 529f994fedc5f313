# src/user_service/tests/test_logging/test_formatters.py
import json
import logging
import sys

from user_service.core.logging.formatters import ColorFormatter, JsonFormatter
from user_service.core.logging.levels import TRACE


def make_record(level=logging.INFO, exc_info=None):
    return logging.LogRecord("user_service", level, __file__, 10, "hello %s", ("tester",), exc_info)


def test_json_formatter_basic_fields():
    rec = make_record()
    rec.custom = "value"
    rec.request_id = "req-1"

    data = json.loads(JsonFormatter(env="testing", service="svc").format(rec))

    assert data["message"] == "hello tester"
    assert data["level"] == "INFO"
    assert data["service"] == "svc"
    assert data["env"] == "testing"
    assert data["request_id"] == "req-1"
    assert data["custom"] == "value"
    assert "timestamp" in data
    assert "version" in data


def test_json_formatter_non_serializable_extra():
    rec = make_record()

    class X:
        def __repr__(self):
            return "<X>"

    rec.obj = X()

    data = json.loads(JsonFormatter(env="dev").format(rec))

    assert data["obj"] == "<X>"


def test_json_formatter_skips_standard_attributes():
    data = json.loads(JsonFormatter().format(make_record()))

    for attr in ("args", "msg", "levelno", "created", "thread"):
        assert attr not in data


def test_json_formatter_includes_traceback():
    try:
        raise RuntimeError("boom")
    except RuntimeError:
        rec = make_record(logging.ERROR, exc_info=sys.exc_info())

    data = json.loads(JsonFormatter().format(rec))

    assert "RuntimeError: boom" in data["exc_info"]


def test_trace_level_name():
    assert logging.getLevelName(TRACE) == "TRACE"

    data = json.loads(JsonFormatter().format(make_record(TRACE)))
    assert data["level"] == "TRACE"


def test_color_formatter_line_layout():
    rec = make_record(logging.WARNING)
    rec.request_id = "rid-9"

    line = ColorFormatter().format(rec)

    assert "WARNING" in line
    assert "rid-9" in line
    assert line.endswith("hello tester")
