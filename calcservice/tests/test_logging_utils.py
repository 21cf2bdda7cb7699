"""
Tests for the structured logger and logging configuration.
"""

import logging
import os

import pytest

from calcservice.shared.config import AppConfig
from calcservice.shared.logging_utils import (
    RequestIDFilter, StructuredLogger, configure_logging, get_logger, request_id_ctx,
)


class _ListHandler(logging.Handler):
    def __init__(self):
        super().__init__()
        self.records = []

    def emit(self, record):
        self.records.append(record)


@pytest.fixture
def captured():
    base = logging.getLogger("calcservice.tests.structured")
    base.setLevel(logging.DEBUG)
    handler = _ListHandler()
    base.addHandler(handler)
    yield base, handler
    base.removeHandler(handler)


class TestStructuredLogger:
    def test_fields_appended_to_message(self, captured):
        base, handler = captured
        StructuredLogger(base).info("Saved", operation="add", result=5)
        record = handler.records[-1]
        assert record.getMessage() == "Saved operation=add result=5"
        assert record.levelno == logging.INFO

    def test_fields_attached_as_extra(self, captured):
        base, handler = captured
        StructuredLogger(base, service="calc").error("Boom", code=1)
        assert handler.records[-1].fields == {"service": "calc", "code": 1}

    def test_bind_adds_fields_without_touching_message(self, captured):
        base, handler = captured
        StructuredLogger(base).bind(request="abc").warning("Careful")
        record = handler.records[-1]
        assert record.getMessage() == "Careful"
        assert record.fields == {"request": "abc"}

    def test_log_with_explicit_level(self, captured):
        base, handler = captured
        StructuredLogger(base).log(logging.DEBUG, "detail", n=2)
        assert handler.records[-1].levelno == logging.DEBUG

    def test_disabled_level_is_skipped(self, captured):
        base, handler = captured
        base.setLevel(logging.ERROR)
        StructuredLogger(base).info("quiet")
        assert handler.records == []

    def test_child_extends_logger_name(self):
        parent = StructuredLogger(logging.getLogger("calcservice"), service="calc")
        child = parent.child("history")
        assert child.name == "calcservice.history"

    def test_get_logger_binds_service_name(self):
        log = get_logger("calcservice.x", AppConfig(service_name="calc-svc"))
        assert log._bound == {"service": "calc-svc"}


class TestRequestIDFilter:
    def test_injects_current_request_id(self):
        token = request_id_ctx.set("req-123")
        try:
            record = logging.LogRecord("x", logging.INFO, __file__, 1, "msg", None, None)
            assert RequestIDFilter().filter(record) is True
            assert record.request_id == "req-123"
        finally:
            request_id_ctx.reset(token)

    def test_default_request_id(self):
        record = logging.LogRecord("x", logging.INFO, __file__, 1, "msg", None, None)
        RequestIDFilter().filter(record)
        assert record.request_id == "-"


class TestConfigureLogging:
    def test_creates_combined_and_error_handlers(self, tmp_dir):
        root = logging.getLogger()
        before = list(root.handlers)
        level = root.level
        log_dir = os.path.join(tmp_dir, "logs")
        try:
            configure_logging(AppConfig(log_file_dir=log_dir))
            configure_logging(AppConfig(log_file_dir=log_dir))
            names = [h.get_name() for h in root.handlers]
            assert names.count("calcservice.combined") == 1
            assert names.count("calcservice.error") == 1
            assert os.path.isdir(log_dir)
            error_handler = next(h for h in root.handlers if h.get_name() == "calcservice.error")
            assert error_handler.level == logging.ERROR
        finally:
            root.setLevel(level)
            for handler in list(root.handlers):
                if handler not in before:
                    root.removeHandler(handler)
                    handler.close()
            for name in ("uvicorn", "uvicorn.access", "uvicorn.error"):
                uv_log = logging.getLogger(name)
                for handler in list(uv_log.handlers):
                    if handler.get_name() in ("calcservice.combined", "calcservice.error"):
                        uv_log.removeHandler(handler)
                        handler.close()

    def test_request_id_filter_attached_once(self):
        root = logging.getLogger()
        before = list(root.filters)
        level = root.level
        uv_log = logging.getLogger("uvicorn")
        uv_before = list(uv_log.filters)
        try:
            configure_logging(AppConfig(log_file_dir=""))
            configure_logging(AppConfig(log_file_dir=""))
            assert sum(isinstance(f, RequestIDFilter) for f in root.filters) == 1
            assert sum(isinstance(f, RequestIDFilter) for f in uv_log.filters) == 1
            for handler in root.handlers:
                assert sum(isinstance(f, RequestIDFilter) for f in handler.filters) == 1
        finally:
            root.setLevel(level)
            for flt in list(root.filters):
                if flt not in before:
                    root.removeFilter(flt)
            for flt in list(uv_log.filters):
                if flt not in uv_before:
                    uv_log.removeFilter(flt)
