"""Unit tests for logging configuration module.

Tests verify levels, formats, file output and the per-package levels applied
by ``setup_logging``.
"""

import logging
from unittest.mock import patch

import pytest

from agentmem.core.config import LoggingConfig
from agentmem.core.logging_config import (
    DATE_FORMAT,
    FORMATS,
    LOG_FILE_NAME,
    PACKAGE_LOG_LEVELS,
    get_logger,
    setup_logging,
)


def _console_handler():
    root_logger = logging.getLogger()
    return next(
        (
            h
            for h in root_logger.handlers
            if isinstance(h, logging.StreamHandler) and not isinstance(h, logging.FileHandler)
        ),
        None,
    )


def _file_handler():
    root_logger = logging.getLogger()
    return next((h for h in root_logger.handlers if isinstance(h, logging.FileHandler)), None)


@pytest.fixture(autouse=True)
def _close_file_handlers():
    yield
    root_logger = logging.getLogger()
    for handler in root_logger.handlers[:]:
        if isinstance(handler, logging.FileHandler):
            root_logger.removeHandler(handler)
            handler.close()


class TestSetupLoggingLogLevels:
    """Test setup_logging with different log levels."""

    @pytest.mark.parametrize(
        "log_level,expected_level",
        [
            ("DEBUG", logging.DEBUG),
            ("INFO", logging.INFO),
            ("WARNING", logging.WARNING),
            ("ERROR", logging.ERROR),
            ("CRITICAL", logging.CRITICAL),
            ("debug", logging.DEBUG),  # Test lowercase
        ],
    )
    def test_setup_logging_with_different_levels(self, log_level, expected_level):
        setup_logging(log_level=log_level, enable_file=False)

        console_handler = _console_handler()
        assert console_handler is not None
        assert console_handler.level == expected_level

    def test_level_defaults_to_settings(self):
        with patch("agentmem.core.logging_config.settings.agentmem_log_level", "warning"):
            setup_logging(enable_file=False)

        assert _console_handler().level == logging.WARNING

    def test_root_logger_captures_everything(self):
        setup_logging(log_level="WARNING", enable_file=False)

        assert logging.getLogger().level == logging.DEBUG


class TestSetupLoggingFormats:
    """Test setup_logging with different log formats."""

    @pytest.mark.parametrize(
        "log_format,expected_format",
        [
            ("simple", FORMATS["simple"]),
            ("detailed", FORMATS["detailed"]),
            ("json", FORMATS["json"]),
            ("unknown", FORMATS["detailed"]),
        ],
    )
    def test_setup_logging_with_different_formats(self, log_format, expected_format):
        setup_logging(log_format=log_format, enable_file=False)

        console_handler = _console_handler()
        assert console_handler.formatter._fmt == expected_format
        assert console_handler.formatter.datefmt == DATE_FORMAT

    def test_format_defaults_to_config(self):
        setup_logging(enable_file=False, config=LoggingConfig(format="json"))

        assert _console_handler().formatter._fmt == FORMATS["json"]


class TestSetupLoggingFileHandling:
    """Test setup_logging file logging functionality."""

    def test_file_handler_created_when_enabled(self, tmp_path):
        log_dir = tmp_path / "new_logs"

        setup_logging(log_level="ERROR", config=LoggingConfig(enable_file=True, file_dir=str(log_dir)))

        file_handler = _file_handler()
        assert file_handler is not None
        assert file_handler.level == logging.DEBUG
        assert (log_dir / LOG_FILE_NAME).exists()

    def test_file_logging_off_by_default(self, tmp_path):
        setup_logging(config=LoggingConfig(file_dir=str(tmp_path)))

        assert _file_handler() is None

    def test_enable_file_false_wins(self, tmp_path):
        setup_logging(enable_file=False, config=LoggingConfig(enable_file=True, file_dir=str(tmp_path)))

        assert _file_handler() is None
        assert not (tmp_path / LOG_FILE_NAME).exists()


class TestSetupLoggingHandlerManagement:
    """Test setup_logging handler management."""

    def test_repeated_setup_does_not_duplicate_handlers(self):
        setup_logging(enable_file=False)
        setup_logging(enable_file=False)

        assert len(logging.getLogger().handlers) == 1


class TestSetupLoggingPackageLevels:
    """Test per-package log level configuration."""

    @pytest.mark.parametrize(
        "package,expected_level",
        [
            ("agentmem.core.database.repositories", logging.INFO),
            ("agentmem.services", logging.DEBUG),
            ("sqlalchemy.engine", logging.WARNING),
            ("aiosqlite", logging.WARNING),
        ],
    )
    def test_package_log_levels(self, package, expected_level):
        setup_logging(enable_file=False)

        assert logging.getLogger(package).level == expected_level

    def test_all_package_levels_configured(self):
        setup_logging(enable_file=False)

        for package, level_name in PACKAGE_LOG_LEVELS.items():
            assert logging.getLogger(package).level == getattr(logging, level_name)


class TestGetLogger:
    """Test get_logger helper."""

    def test_get_logger_returns_named_logger(self):
        assert get_logger("agentmem.test") is logging.getLogger("agentmem.test")
