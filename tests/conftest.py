"""Pytest configuration and shared fixtures."""

import logging
import sys
from datetime import date
from decimal import Decimal
from pathlib import Path

import pytest

# Add project root to path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))


@pytest.fixture(autouse=True)
def reset_settings_and_logging(monkeypatch):
    """Isolate settings, log context and root handlers per test."""
    from src.logging_config.context import reset_context
    from src.settings import get_settings

    for var in ("PGLEDGER_LOG_LEVEL", "PGLEDGER_LOG_FORMAT"):
        monkeypatch.delenv(var, raising=False)

    root = logging.getLogger()
    original_handlers = root.handlers[:]
    original_level = root.level
    get_settings.cache_clear()

    yield

    root.handlers[:] = original_handlers
    root.setLevel(original_level)
    reset_context()
    get_settings.cache_clear()


@pytest.fixture
def today():
    return date(2026, 3, 15)


@pytest.fixture
def fee():
    return Decimal("3000")
