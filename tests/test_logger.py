"""Unit tests for structured JSON logging."""
import sys
from pathlib import Path

# Add backend to path
sys.path.insert(0, str(Path(__file__).parent.parent / "backend"))

import json
import logging
from logger import JSONFormatter, setup_logging


def _record(message, **extra):
    record = logging.LogRecord(
        name="services.bookmark_store",
        level=logging.INFO,
        pathname=__file__,
        lineno=1,
        msg=message,
        args=(),
        exc_info=None
    )
    for key, value in extra.items():
        setattr(record, key, value)
    return record


def test_format_basic_fields():
    data = json.loads(JSONFormatter().format(_record("Bookmark added at 120 in plan-1")))

    assert data["level"] == "INFO"
    assert data["logger"] == "services.bookmark_store"
    assert data["message"] == "Bookmark added at 120 in plan-1"
    assert data["timestamp"].endswith("Z")


def test_format_includes_extra_fields():
    data = json.loads(JSONFormatter().format(_record("search", document_id="plan-1", match_count=3)))

    assert data["document_id"] == "plan-1"
    assert data["match_count"] == 3
    assert "lineno" not in data


def test_format_exception():
    try:
        raise ValueError("bad blob")
    except ValueError:
        record = _record("failed")
        record.exc_info = sys.exc_info()

    data = json.loads(JSONFormatter().format(record))

    assert "ValueError: bad blob" in data["exception"]


def test_setup_logging_replaces_handlers():
    root_logger = logging.getLogger()
    original_handlers = list(root_logger.handlers)
    original_level = root_logger.level
    try:
        setup_logging("DEBUG")

        assert root_logger.level == logging.DEBUG
        assert len(root_logger.handlers) == 1
        assert isinstance(root_logger.handlers[0].formatter, JSONFormatter)
    finally:
        for handler in list(root_logger.handlers):
            root_logger.removeHandler(handler)
        for handler in original_handlers:
            root_logger.addHandler(handler)
        root_logger.setLevel(original_level)
