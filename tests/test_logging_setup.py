import logging

from app.core.logging_setup import (
    LOG_COMPANY_ID,
    LOG_FORMAT,
    LOG_SHOW_ID,
    ContextFilter,
    log_context,
)


def _record():
    return logging.LogRecord("test.logger", logging.INFO, __file__, 1, "hello", (), None)


def test_context_filter_defaults():
    record = _record()
    ContextFilter().filter(record)
    assert record.company_id == "-"
    assert record.show_id == "-"


def test_log_context_injects_and_resets_values():
    with log_context(company_id="co-1", show_id="show-1"):
        record = _record()
        ContextFilter().filter(record)
        assert record.company_id == "co-1"
        assert record.show_id == "show-1"
    assert LOG_COMPANY_ID.get() is None
    assert LOG_SHOW_ID.get() is None


def test_log_context_leaves_unset_fields_alone():
    with log_context(company_id="co-1"):
        with log_context(show_id="show-9"):
            record = _record()
            ContextFilter().filter(record)
            assert record.company_id == "co-1"
            assert record.show_id == "show-9"
        assert LOG_SHOW_ID.get() is None


def test_formatting_uses_expected_fields():
    record = _record()
    ContextFilter().filter(record)
    formatted = logging.Formatter(LOG_FORMAT).format(record)
    assert "test.logger" in formatted
    assert "hello" in formatted
    assert "|" in formatted
