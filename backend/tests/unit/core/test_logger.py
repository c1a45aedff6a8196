"""Unit tests for the logging utilities."""

from __future__ import annotations

import json
import logging

import pytest
from flask import Flask

from authgate.core.logger import (
    REQUEST_ID_HEADER,
    JSONFormatter,
    RequestIdFilter,
    configure_logging,
    ensure_request_id,
)


def _record(**extra) -> logging.LogRecord:
    record = logging.LogRecord("authgate.test", logging.INFO, __file__, 1, "hello %s", ("x",), None)
    for key, value in extra.items():
        setattr(record, key, value)
    return record


def test_configure_logging_sets_level() -> None:
    configure_logging("DEBUG")
    assert logging.getLogger().level == logging.DEBUG
    configure_logging("INFO")


def test_json_formatter_renders_extras() -> None:
    payload = json.loads(JSONFormatter().format(_record(user_id="u1", request_id="rid")))

    assert payload["message"] == "hello x"
    assert payload["level"] == "INFO"
    assert payload["logger"] == "authgate.test"
    assert payload["user_id"] == "u1"
    assert payload["request_id"] == "rid"
    assert "elapsed_ms" not in payload


def test_request_id_filter_outside_request() -> None:
    record = _record()
    assert RequestIdFilter().filter(record) is True
    assert record.request_id is None


def test_incoming_request_id_is_reused() -> None:
    app = Flask(__name__)
    with app.test_request_context(headers={REQUEST_ID_HEADER: "abc-123"}):
        assert ensure_request_id() == "abc-123"
        assert ensure_request_id() == "abc-123"


@pytest.mark.parametrize("incoming", ["bad id;<x>", "x" * 129])
def test_malformed_request_id_is_replaced(incoming: str) -> None:
    app = Flask(__name__)
    with app.test_request_context(headers={REQUEST_ID_HEADER: incoming}):
        rid = ensure_request_id()

    assert rid != incoming
    assert len(rid) == 32
    int(rid, 16)
