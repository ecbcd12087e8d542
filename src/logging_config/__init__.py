"""Structured Logging & Run Context.

Provides structured JSON logging, batch-run and guest context binding,
and performance timing for the ledger.
"""

from src.logging_config.config import LogFormat, LoggingConfig, LogLevel
from src.logging_config.context import RunContext, bind_guest, generate_run_id
from src.logging_config.performance import PerformanceTimer, log_performance
from src.logging_config.setup import configure_logging, get_logger

__all__ = [
    "LogFormat",
    "LogLevel",
    "LoggingConfig",
    "PerformanceTimer",
    "RunContext",
    "bind_guest",
    "configure_logging",
    "generate_run_id",
    "get_logger",
    "log_performance",
]
