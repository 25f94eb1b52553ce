"""Unit tests for structured logging"""

import json
import logging
from pos_ledger.config import settings
from pos_ledger.infrastructure.observability.logging import LOG_FORMAT, CustomJsonFormatter, setup_logging


def make_record(**extra) -> logging.LogRecord:
    record = logging.LogRecord("pos_ledger", logging.INFO, __file__, 1, "Sale processed", None, None)
    for key, value in extra.items():
        setattr(record, key, value)
    return record


def test_formatter_stamps_service_and_level():
    formatter = CustomJsonFormatter(LOG_FORMAT, service_name="till-2")

    payload = json.loads(formatter.format(make_record(sale_id="BILL-1")))

    assert payload["service"] == "till-2"
    assert payload["level"] == "INFO"
    assert payload["message"] == "Sale processed"
    assert payload["sale_id"] == "BILL-1"
    assert payload["timestamp"]


def test_formatter_defaults_to_configured_service():
    payload = json.loads(CustomJsonFormatter(LOG_FORMAT).format(make_record()))
    assert payload["service"] == settings.service_name


def test_setup_logging_installs_single_json_handler():
    root = logging.getLogger()
    saved_handlers, saved_level = root.handlers[:], root.level
    try:
        setup_logging("WARNING", service_name="till-2")
        handler = setup_logging("WARNING", service_name="till-3")

        assert root.level == logging.WARNING
        assert root.handlers == [handler]
        assert handler.formatter.service_name == "till-3"
    finally:
        root.handlers[:] = saved_handlers
        root.setLevel(saved_level)
