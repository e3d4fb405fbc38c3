import json
import logging
import sys

from snapshots.utils.logging import JsonFormatter, configure_logging


def test_json_formatter_merges_extra_fields():
    record = logging.LogRecord("snapshots.pipeline", logging.INFO, __file__, 10, "ingest.stored", None, None)
    record.session_id = "s1"
    record.inserted = 5

    payload = json.loads(JsonFormatter().format(record))

    assert payload["event"] == "ingest.stored"
    assert payload["level"] == "INFO"
    assert payload["logger"] == "snapshots.pipeline"
    assert payload["session_id"] == "s1"
    assert payload["inserted"] == 5
    assert "lineno" not in payload


def test_configure_logging_replaces_handlers():
    configure_logging("DEBUG", json_enabled=True)
    configure_logging("WARNING", json_enabled=True)

    root = logging.getLogger()
    assert root.level == logging.WARNING
    assert len(root.handlers) == 1
    assert isinstance(root.handlers[0].formatter, JsonFormatter)


def test_json_formatter_includes_exception_text():
    try:
        raise ValueError("disk full")
    except ValueError:
        record = logging.LogRecord(
            "snapshots.pipeline", logging.ERROR, __file__, 20, "ingest.storage_failed", None, sys.exc_info()
        )

    payload = json.loads(JsonFormatter().format(record))

    assert payload["event"] == "ingest.storage_failed"
    assert "ValueError: disk full" in payload["exc"]
    assert "exc_info" not in payload
