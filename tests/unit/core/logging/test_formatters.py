"""
Tests for log formatters.
"""

import json
import logging

import pytest

from api_client.core.logging.formatters import (
    ColoredFormatter,
    JSONFormatter,
    TextFormatter,
    extract_fields,
    get_formatter,
)


def make_record(message="Request completed", level=logging.INFO, **fields):
    record = logging.LogRecord(
        name="api_client",
        level=level,
        pathname=__file__,
        lineno=10,
        msg=message,
        args=(),
        exc_info=None,
    )
    for key, value in fields.items():
        setattr(record, key, value)
    return record


class TestExtractFields:

    def test_only_custom_fields(self):
        record = make_record(method="GET", status_code=200)
        assert extract_fields(record) == {"method": "GET", "status_code": 200}

    def test_private_attributes_skipped(self):
        record = make_record(_internal=1)
        assert extract_fields(record) == {}


class TestJSONFormatter:

    def test_structure(self):
        output = JSONFormatter().format(make_record(method="GET", attempt=2))
        data = json.loads(output)

        assert data["level"] == "INFO"
        assert data["logger"] == "api_client"
        assert data["message"] == "Request completed"
        assert data["method"] == "GET"
        assert data["attempt"] == 2
        assert data["timestamp"].endswith("+00:00")

    def test_non_serializable_values(self):
        data = json.loads(JSONFormatter().format(make_record(value=object())))
        assert isinstance(data["value"], str)

    def test_exception_included(self):
        try:
            raise RuntimeError("boom")
        except RuntimeError:
            import sys
            record = make_record()
            record.exc_info = sys.exc_info()

        data = json.loads(JSONFormatter().format(record))
        assert "RuntimeError: boom" in data["exception"]


class TestTextFormatter:

    def test_fields_appended(self):
        output = TextFormatter().format(make_record(method="GET", status_code=200))
        assert "[INFO] [api_client] Request completed" in output
        assert output.endswith("method=GET status_code=200")

    def test_no_fields(self):
        assert TextFormatter().format(make_record()).endswith("Request completed")


class TestColoredFormatter:

    def test_level_colored_and_restored(self):
        record = make_record(level=logging.WARNING, wait_time_s=1.5)
        output = ColoredFormatter().format(record)

        assert "\033[33mWARNING\033[0m" in output
        assert output.endswith("wait_time_s=1.5")
        assert record.levelname == "WARNING"


class TestGetFormatter:

    @pytest.mark.parametrize("name,cls", [
        ("json", JSONFormatter), ("text", TextFormatter), ("COLORED", ColoredFormatter),
    ])
    def test_known(self, name, cls):
        assert isinstance(get_formatter(name), cls)

    def test_unknown(self):
        with pytest.raises(ValueError, match="Unknown format type"):
            get_formatter("xml")
