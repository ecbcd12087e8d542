"""Tests for structured logging and run context."""

import json
import logging
import sys
import time

import pytest

from src.logging_config.config import LogFormat, LoggingConfig, LogLevel
from src.logging_config.context import (
    RunContext,
    bind_guest,
    generate_run_id,
    get_context_dict,
    get_guest_id,
    get_run_id,
)
from src.logging_config.performance import PerformanceTimer, log_performance
from src.logging_config.setup import (
    ConsoleFormatter,
    StructuredFormatter,
    configure_logging,
    get_logger,
)


def _record(msg="test", level=logging.INFO, lineno=1, exc_info=None):
    return logging.LogRecord(
        name="test", level=level, pathname="test.py",
        lineno=lineno, msg=msg, args=(), exc_info=exc_info,
    )


class TestLoggingConfig:
    """Tests for logging configuration dataclasses."""

    def test_default_config_values(self):
        config = LoggingConfig()
        assert config.level == LogLevel.INFO
        assert config.format == LogFormat.CONSOLE
        assert config.include_caller is True
        assert config.slow_threshold_ms == 500.0
        assert config.service_name == "pgledger"

    def test_custom_config(self):
        config = LoggingConfig(
            level=LogLevel.DEBUG,
            format=LogFormat.JSON,
            slow_threshold_ms=50.0,
            service_name="nightly",
        )
        assert config.level == LogLevel.DEBUG
        assert config.format == LogFormat.JSON
        assert config.slow_threshold_ms == 50.0
        assert config.service_name == "nightly"

    def test_log_format_enum_values(self):
        assert LogFormat.JSON.value == "json"
        assert LogFormat.CONSOLE.value == "console"


class TestRunContext:
    """Tests for run and guest context binding."""

    def test_generate_run_id_unique(self):
        ids = {generate_run_id() for _ in range(100)}
        assert len(ids) == 100

    def test_context_sets_run_id(self):
        with RunContext(run_id="run-1"):
            assert get_run_id() == "run-1"
        assert get_run_id() == ""

    def test_auto_generates_run_id(self):
        with RunContext() as ctx:
            assert ctx.run_id != ""
            assert get_run_id() == ctx.run_id

    def test_context_dict_includes_operator(self):
        with RunContext(run_id="r1", operator="admin"):
            ctx = get_context_dict()
            assert ctx == {"run_id": "r1", "operator": "admin"}

    def test_context_dict_empty_outside(self):
        assert get_context_dict() == {}

    def test_bind_extra_context(self):
        with RunContext(run_id="r1") as ctx:
            ctx.bind(source="users.json")
            assert get_context_dict()["source"] == "users.json"
        assert "source" not in get_context_dict()

    def test_nested_contexts_restore_outer(self):
        with RunContext(run_id="outer"):
            with RunContext(run_id="inner"):
                assert get_run_id() == "inner"
            assert get_run_id() == "outer"

    def test_bind_guest(self):
        with RunContext(run_id="r1"):
            with bind_guest("guest-7"):
                assert get_guest_id() == "guest-7"
                assert get_context_dict()["guest_id"] == "guest-7"
            assert get_guest_id() == ""

    def test_bind_guest_resets_on_error(self):
        with pytest.raises(RuntimeError):
            with bind_guest("guest-7"):
                raise RuntimeError("boom")
        assert get_guest_id() == ""

    def test_elapsed_ms(self):
        with RunContext() as ctx:
            time.sleep(0.01)
            assert ctx.elapsed_ms >= 10


class TestStructuredFormatter:
    """Tests for JSON structured log formatting."""

    def test_formats_as_json(self):
        parsed = json.loads(StructuredFormatter().format(_record("hello world")))
        assert parsed["message"] == "hello world"
        assert parsed["level"] == "INFO"
        assert parsed["logger"] == "test"
        assert parsed["service"] == "pgledger"
        assert "timestamp" in parsed

    def test_includes_caller_info(self):
        parsed = json.loads(StructuredFormatter(include_caller=True).format(_record(lineno=42)))
        assert parsed["line"] == 42
        assert "function" in parsed

    def test_excludes_caller_when_disabled(self):
        parsed = json.loads(StructuredFormatter(include_caller=False).format(_record()))
        assert "line" not in parsed
        assert "function" not in parsed

    def test_includes_guest_context(self):
        formatter = StructuredFormatter()
        with RunContext(run_id="batch-1"), bind_guest("g-42"):
            parsed = json.loads(formatter.format(_record()))
        assert parsed["run_id"] == "batch-1"
        assert parsed["guest_id"] == "g-42"

    def test_formats_exception(self):
        formatter = StructuredFormatter()
        try:
            raise ValueError("bad date")
        except ValueError:
            record = _record("failed", level=logging.ERROR, exc_info=sys.exc_info())
            parsed = json.loads(formatter.format(record))
        assert parsed["exception"]["type"] == "ValueError"
        assert "bad date" in parsed["exception"]["message"]

    def test_includes_extra_fields(self):
        record = _record()
        record.duration_ms = 42.5
        record.error_code = "INVALID_DATE"
        parsed = json.loads(StructuredFormatter().format(record))
        assert parsed["duration_ms"] == 42.5
        assert parsed["error_code"] == "INVALID_DATE"


class TestConsoleFormatter:
    """Tests for colored console log formatting."""

    def test_formats_readable_output(self):
        record = logging.LogRecord(
            name="src.billing_cycle.dues", level=logging.INFO, pathname="dues.py",
            lineno=1, msg="hello", args=(), exc_info=None,
        )
        output = ConsoleFormatter().format(record)
        assert "src.billing_cycle.dues" in output
        assert "hello" in output

    def test_includes_context_info(self):
        with bind_guest("abc"):
            output = ConsoleFormatter().format(_record())
        assert "guest_id=abc" in output

    def test_has_color_codes(self):
        output = ConsoleFormatter().format(_record(level=logging.ERROR))
        assert "\033[31m" in output


class TestConfigureLogging:
    """Tests for the configure_logging setup function."""

    def test_configures_root_logger(self):
        configure_logging(LoggingConfig(format=LogFormat.CONSOLE))
        assert len(logging.getLogger().handlers) == 1

    def test_json_format(self):
        configure_logging(LoggingConfig(format=LogFormat.JSON))
        assert isinstance(logging.getLogger().handlers[0].formatter, StructuredFormatter)

    def test_console_format(self):
        configure_logging(LoggingConfig(format=LogFormat.CONSOLE))
        assert isinstance(logging.getLogger().handlers[0].formatter, ConsoleFormatter)

    def test_sets_log_level(self):
        configure_logging(LoggingConfig(level=LogLevel.DEBUG))
        assert logging.getLogger().level == logging.DEBUG

    def test_get_logger_returns_logger(self):
        logger = get_logger("test.module")
        assert isinstance(logger, logging.Logger)
        assert logger.name == "test.module"

    def test_env_var_override_level(self, monkeypatch):
        monkeypatch.setenv("PGLEDGER_LOG_LEVEL", "DEBUG")
        configure_logging(LoggingConfig(level=LogLevel.ERROR))
        assert logging.getLogger().level == logging.DEBUG

    def test_env_var_override_format(self, monkeypatch):
        monkeypatch.setenv("PGLEDGER_LOG_FORMAT", "JSON")
        configure_logging(LoggingConfig(format=LogFormat.CONSOLE))
        assert isinstance(logging.getLogger().handlers[0].formatter, StructuredFormatter)

    def test_invalid_env_var_ignored(self, monkeypatch):
        monkeypatch.setenv("PGLEDGER_LOG_LEVEL", "LOUD")
        configure_logging(LoggingConfig(level=LogLevel.WARNING))
        assert logging.getLogger().level == logging.WARNING


class TestPerformanceLogging:
    """Tests for performance timing decorator and context manager."""

    def test_log_performance_returns_value(self):
        @log_performance(threshold_ms=10000)
        def fast_func():
            return 42

        assert fast_func() == 42

    def test_log_performance_preserves_name(self):
        @log_performance()
        def my_function():
            """My docstring."""

        assert my_function.__name__ == "my_function"
        assert my_function.__doc__ == "My docstring."

    def test_log_performance_with_exception(self):
        @log_performance(threshold_ms=10000)
        def failing_func():
            raise ValueError("test error")

        with pytest.raises(ValueError, match="test error"):
            failing_func()

    def test_slow_call_logs_warning(self, caplog):
        @log_performance(threshold_ms=0)
        def slow_func():
            return None

        with caplog.at_level(logging.WARNING):
            slow_func()
        assert any("Slow operation" in r.getMessage() for r in caplog.records)

    def test_performance_timer_records_duration(self):
        with PerformanceTimer("fast_op", threshold_ms=10000) as timer:
            time.sleep(0.01)
        assert timer.duration_ms >= 10

    def test_performance_timer_with_exception(self):
        with pytest.raises(ValueError):
            with PerformanceTimer("failing_op") as timer:
                raise ValueError("oops")
        assert timer.duration_ms >= 0

    def test_failure_logged_once_at_error(self, caplog):
        @log_performance(threshold_ms=0)
        def failing_func():
            raise ValueError("test error")

        with caplog.at_level(logging.DEBUG):
            with pytest.raises(ValueError):
                failing_func()
        records = [r for r in caplog.records if "failing_func" in r.getMessage()]
        assert len(records) == 1
        assert records[0].levelno == logging.ERROR
        assert "ValueError" in records[0].getMessage()
        assert records[0].duration_ms >= 0

    def test_zero_threshold_timer_warns(self, caplog):
        with caplog.at_level(logging.WARNING):
            with PerformanceTimer("ingest", threshold_ms=0) as timer:
                pass
        assert timer.threshold_ms == 0
        assert any("Slow operation: ingest" in r.getMessage() for r in caplog.records)
