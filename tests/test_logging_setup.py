import json
import logging

import pytest

from bodyfilter.logging_setup import StructuredFormatter, configure_logging


@pytest.fixture
def restore_root_logger():
    root = logging.getLogger()
    handlers, level = list(root.handlers), root.level
    yield root
    root.handlers[:] = handlers
    root.setLevel(level)


def test_structured_formatter_emits_context():
    record = logging.LogRecord(
        "bodyfilter.body_filter", logging.WARNING, __file__, 1, "Bound %s", ("body",), None
    )
    record.context = {"shape": "Account"}

    payload = json.loads(StructuredFormatter().format(record))

    assert payload["level"] == "WARNING"
    assert payload["service"] == "bodyfilter"
    assert payload["logger"] == "bodyfilter.body_filter"
    assert payload["message"] == "Bound body"
    assert payload["context"] == {"shape": "Account"}
    assert payload["timestamp"].endswith("Z")


def test_configure_logging_installs_single_handler(restore_root_logger):
    configure_logging("debug", json_format=True)
    configure_logging("warning", json_format=True)

    assert len(restore_root_logger.handlers) == 1
    assert restore_root_logger.level == logging.WARNING
    assert isinstance(restore_root_logger.handlers[0].formatter, StructuredFormatter)
