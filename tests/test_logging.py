"""Tests for logging module."""

import logging
import re

import pytest

from spothost.config import Config
from spothost.errors import ConfigError
from spothost.logging import parse_level, reset_logging, setup_logging


class TestParseLevel:
    """Test level name parsing."""

    @pytest.mark.parametrize(
        "name,expected",
        [("debug", logging.DEBUG), ("INFO", logging.INFO), ("Warning", logging.WARNING)],
    )
    def test_known_levels(self, name, expected):
        assert parse_level(name) == expected

    def test_unknown_level(self):
        with pytest.raises(ConfigError):
            parse_level("chatty")


class TestSetupLogging:
    """Test logging setup."""

    def test_setup_logging_returns_package_logger(self):
        logger = setup_logging(Config())

        assert isinstance(logger, logging.Logger)
        assert logger.name == "spothost"
        assert logger.level == logging.INFO
        assert not logger.propagate

    def test_setup_logging_is_idempotent(self):
        """Second setup returns the same logger without new handlers."""
        first = setup_logging(Config())
        handlers = list(first.handlers)

        second = setup_logging(Config(log_level="DEBUG"))

        assert second is first
        assert second.handlers == handlers
        assert second.level == logging.INFO

    def test_level_override(self):
        """An explicit level wins over the configured one."""
        logger = setup_logging(Config(log_level="WARNING"), level="DEBUG")
        assert logger.level == logging.DEBUG

    def test_invalid_level_rejected(self):
        with pytest.raises(ConfigError):
            setup_logging(Config(log_level="loud"))

    def test_log_file_and_directory_created(self, tmp_path):
        log_file = tmp_path / "subdir" / "host.log"
        logger = setup_logging(Config(log_file=str(log_file)))

        logger.info("test message")

        assert "test message" in log_file.read_text()

    def test_format_names_module(self, tmp_path):
        """Entries carry timestamp, level and the module logger name."""
        log_file = tmp_path / "host.log"
        setup_logging(Config(log_file=str(log_file)))

        logging.getLogger("spothost.join_code").info("Join code refreshed")

        pattern = (
            r"\d{4}-\d{2}-\d{2} \d{2}:\d{2}:\d{2} \[INFO\] "
            r"spothost\.join_code: Join code refreshed"
        )
        assert re.search(pattern, log_file.read_text())

    def test_module_levels(self, tmp_path):
        """log_levels tune single modules independently of the package."""
        log_file = tmp_path / "host.log"
        setup_logging(
            Config(
                log_file=str(log_file),
                log_level="WARNING",
                log_levels={"spothost.router": "DEBUG", "spothost.service": "ERROR"},
            )
        )

        logging.getLogger("spothost.router").debug("routing detail")
        logging.getLogger("spothost.service").warning("service warning")
        logging.getLogger("spothost.join_code").info("rotation info")

        content = log_file.read_text()
        assert "routing detail" in content
        assert "service warning" not in content
        assert "rotation info" not in content

    def test_invalid_module_level_rejected(self):
        with pytest.raises(ConfigError):
            setup_logging(Config(log_levels={"spothost.router": "verbose"}))

    def test_reset_restores_defaults(self, tmp_path):
        setup_logging(
            Config(log_file=str(tmp_path / "host.log"), log_levels={"spothost.router": "DEBUG"})
        )

        reset_logging()

        logger = logging.getLogger("spothost")
        assert logger.handlers == []
        assert logger.propagate
        assert logging.getLogger("spothost.router").level == logging.NOTSET
