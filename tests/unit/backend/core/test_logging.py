"""Unit tests for logging setup."""

import logging

import pytest

from notekeeper.backend.core.logging import (
    VALID_SOURCES,
    get_logger,
    log_with_source,
    setup_logging,
)


class TestSetupLogging:
    """Tests for setup_logging."""

    @pytest.fixture(autouse=True)
    def restore_root_logger(self):
        """Put the root logger back after each test."""
        root = logging.getLogger()
        level, handlers = root.level, root.handlers[:]
        yield
        root.setLevel(level)
        root.handlers[:] = handlers

    def test_level_override(self) -> None:
        """Should apply the level passed in over the YAML level."""
        setup_logging(level="DEBUG", enable_file_logging=False)
        assert logging.getLogger().level == logging.DEBUG

    def test_console_only(self) -> None:
        """Should install a single stream handler without file logging."""
        setup_logging(level="WARNING", format_type="json", enable_file_logging=False)
        handlers = logging.getLogger().handlers
        assert len(handlers) == 1
        assert isinstance(handlers[0], logging.StreamHandler)

    def test_no_handlers_when_disabled(self) -> None:
        """Should leave the root logger without handlers."""
        setup_logging(enable_console=False, enable_file_logging=False)
        assert logging.getLogger().handlers == []

    def test_get_logger_logs_with_fields(self) -> None:
        """Should accept structured keyword fields."""
        setup_logging(level="DEBUG", enable_console=False, enable_file_logging=False)
        get_logger("notekeeper.test").info("Note created", note_id="abc")


class TestLogWithSource:
    """Tests for log_with_source."""

    def test_passes_source(self, mock_logger) -> None:
        """Should call the level method with the source field."""
        log_with_source(mock_logger, "cli", "info", "Opened store", owner_id="u1")
        mock_logger.info.assert_called_once_with("Opened store", source="cli", owner_id="u1")

    def test_invalid_level(self, mock_logger) -> None:
        """Should raise for an unknown level."""
        del mock_logger.verbose
        with pytest.raises(AttributeError):
            log_with_source(mock_logger, "cli", "verbose", "x")

    def test_sources_known(self) -> None:
        """Should recognize the CLI and HTTP sources."""
        assert {"cli", "web", "api"} <= VALID_SOURCES
