"""
Tests for darkmaker.core.logging
"""

import json
import logging

import pytest

from darkmaker.core.logging import (
    StructuredFormatter,
    DevelopmentFormatter,
    LogTimer,
    clear_context,
    get_logger,
    set_job_id,
    set_request_id,
    setup_logging,
)


def _record(msg="hello", **extra):
    record = logging.LogRecord("darkmaker.test", logging.INFO, __file__, 10, msg, None, None)
    for key, value in extra.items():
        setattr(record, key, value)
    return record


@pytest.fixture(autouse=True)
def reset_context():
    clear_context()
    yield
    clear_context()


class TestStructuredFormatter:
    def test_outputs_json_with_extra(self):
        payload = json.loads(StructuredFormatter().format(_record(stage="transcribed")))
        assert payload["message"] == "hello"
        assert payload["level"] == "INFO"
        assert payload["extra"]["stage"] == "transcribed"

    def test_includes_correlation_ids(self):
        set_request_id("req-1")
        set_job_id("job-1")
        payload = json.loads(StructuredFormatter().format(_record()))
        assert payload["request_id"] == "req-1"
        assert payload["job_id"] == "job-1"

    def test_redacts_sensitive_fields(self):
        payload = json.loads(StructuredFormatter().format(
            _record(api_key="sk-123", headers={"Authorization": "Bearer x", "Accept": "a"})
        ))
        assert payload["extra"]["api_key"] == "***REDACTED***"
        assert payload["extra"]["headers"]["Authorization"] == "***REDACTED***"
        assert payload["extra"]["headers"]["Accept"] == "a"


def test_development_formatter_shows_context():
    set_job_id("abcdef1234567890")
    line = DevelopmentFormatter().format(_record("stage done"))
    assert "stage done" in line
    assert "job:abcdef12" in line


def test_adapter_merges_bound_and_call_extras(caplog):
    logger = get_logger("darkmaker.test.adapter", component="unit")
    with caplog.at_level(logging.INFO, logger="darkmaker.test.adapter"):
        logger.info("tick", extra={"step": 2})
    record = caplog.records[-1]
    assert record.component == "unit"
    assert record.step == 2


def test_log_timer_records_duration(caplog):
    logger = get_logger("darkmaker.test.timer")
    with caplog.at_level(logging.INFO, logger="darkmaker.test.timer"):
        with LogTimer(logger, "probe") as timer:
            pass
    assert timer.duration is not None and timer.duration >= 0
    assert any("Completed: probe" in r.getMessage() for r in caplog.records)


def test_log_timer_logs_failure(caplog):
    logger = get_logger("darkmaker.test.timer_fail")
    with caplog.at_level(logging.INFO, logger="darkmaker.test.timer_fail"):
        with pytest.raises(RuntimeError):
            with LogTimer(logger, "mux"):
                raise RuntimeError("boom")
    assert any("Failed: mux" in r.getMessage() for r in caplog.records)


def test_setup_logging_writes_json_file(tmp_path):
    log_file = tmp_path / "logs" / "app.jsonl"
    root = logging.getLogger()
    previous_handlers, previous_level = root.handlers[:], root.level
    try:
        setup_logging(level="DEBUG", log_file=log_file)
        get_logger("darkmaker.test.file").info("to file", extra={"stage": "muxed"})
        for handler in root.handlers:
            handler.flush()
        line = log_file.read_text(encoding="utf-8").strip().splitlines()[-1]
        assert json.loads(line)["extra"]["stage"] == "muxed"
    finally:
        for handler in root.handlers[:]:
            root.removeHandler(handler)
            handler.close()
        for handler in previous_handlers:
            root.addHandler(handler)
        root.setLevel(previous_level)
