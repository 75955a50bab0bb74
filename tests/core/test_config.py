"""Unit tests for src/core/config.py and src/core/logging_setup.py"""

import logging

import pytest

from src.core.config import Settings, get_settings
from src.core.logging_setup import setup_logging


def test_defaults(monkeypatch: pytest.MonkeyPatch) -> None:
    for name in ("INITIAL_CLOCK_SECONDS", "LOG_LEVEL", "SQL_ECHO"):
        monkeypatch.delenv(f"CHESS_DUEL_{name}", raising=False)
    settings = Settings(_env_file=None)
    assert settings.initial_clock_seconds == 600
    assert settings.log_level == "INFO"
    assert not settings.sql_echo


def test_environment_overrides(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("CHESS_DUEL_INITIAL_CLOCK_SECONDS", "180")
    monkeypatch.setenv("CHESS_DUEL_LOG_LEVEL", "debug")
    settings = Settings(_env_file=None)
    assert settings.initial_clock_seconds == 180
    assert settings.log_level == "debug"


def test_settings_are_cached() -> None:
    assert get_settings() is get_settings()


def test_setup_logging() -> None:
    root_logger = logging.getLogger()
    handlers_before = list(root_logger.handlers)
    level_before = root_logger.level
    try:
        setup_logging("debug")
        new_handlers = [h for h in root_logger.handlers if h not in handlers_before]
        assert len(new_handlers) == 1
        assert new_handlers[0].level == logging.DEBUG
        assert root_logger.level == logging.DEBUG
        assert logging.getLogger("sqlalchemy.engine").level == logging.WARNING
    finally:
        for handler in root_logger.handlers[:]:
            if handler not in handlers_before:
                root_logger.removeHandler(handler)
        root_logger.setLevel(level_before)
