"""Unit tests for structured logging."""

import json
import logging
import sys

from feed_scraper.logging_config import (
    ExecutionLogger,
    StructuredFormatter,
    create_execution_logger,
    setup_structured_logging,
)


def make_record(**extra) -> logging.LogRecord:
    record = logging.LogRecord(
        name="feed_scraper.scraper",
        level=logging.INFO,
        pathname=__file__,
        lineno=10,
        msg="Visiting: %s",
        args=("https://example.com/feed",),
        exc_info=None,
    )
    for key, value in extra.items():
        setattr(record, key, value)
    return record


class TestStructuredFormatterUnit:
    """Unit tests for StructuredFormatter."""

    def test_base_fields(self):
        entry = json.loads(StructuredFormatter().format(make_record()))

        assert entry["level"] == "INFO"
        assert entry["logger"] == "feed_scraper.scraper"
        assert entry["message"] == "Visiting: https://example.com/feed"
        assert entry["line"] == 10
        assert "timestamp" in entry
        assert "execution_id" not in entry

    def test_context_fields(self):
        record = make_record(
            execution_id="req_1",
            component="scraper",
            feed_url="https://example.com/feed",
            status_code=404,
            metrics={"rows_written": 3},
        )

        entry = json.loads(StructuredFormatter().format(record))

        assert entry["execution_id"] == "req_1"
        assert entry["component"] == "scraper"
        assert entry["feed_url"] == "https://example.com/feed"
        assert entry["status_code"] == 404
        assert entry["metrics"] == {"rows_written": 3}

    def test_exception_is_included(self):
        try:
            raise RuntimeError("boom")
        except RuntimeError:
            record = make_record()
            record.exc_info = sys.exc_info()

        entry = json.loads(StructuredFormatter().format(record))

        assert "RuntimeError: boom" in entry["exception"]


class TestExecutionLoggerUnit:
    """Unit tests for ExecutionLogger."""

    def test_records_carry_execution_context(self, caplog):
        logger = ExecutionLogger("req_42", "scraper")

        with caplog.at_level(logging.INFO, logger="feed_scraper.scraper"):
            logger.log_response("https://example.com/feed", 503)

        (record,) = caplog.records
        assert record.getMessage() == "Response received with status code: 503"
        assert record.execution_id == "req_42"
        assert record.component == "scraper"
        assert record.status_code == 503

    def test_execution_end_reports_duration(self, caplog):
        logger = create_execution_logger("api")

        with caplog.at_level(logging.INFO, logger="feed_scraper.api"):
            logger.log_started()
            logger.log_finished(success=False)

        end = caplog.records[-1]
        assert end.success is False
        assert end.duration_seconds >= 0

    def test_generated_execution_id(self):
        logger = create_execution_logger("api")

        assert logger.execution_id.startswith("exec_")
        assert logger.logger.name == "feed_scraper.api"

    def test_setup_installs_structured_handler(self):
        root = logging.getLogger()
        saved_handlers = root.handlers[:]
        saved_level = root.level
        try:
            setup_structured_logging("warning")

            assert root.level == logging.WARNING
            assert len(root.handlers) == 1
            assert isinstance(root.handlers[0].formatter, StructuredFormatter)
        finally:
            for handler in root.handlers[:]:
                root.removeHandler(handler)
            for handler in saved_handlers:
                root.addHandler(handler)
            root.setLevel(saved_level)
            for name in list(logging.root.manager.loggerDict):
                if name.startswith("feed_scraper"):
                    logging.getLogger(name).setLevel(logging.NOTSET)
