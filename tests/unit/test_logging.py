"""Tests for logging system."""

import logging
from datetime import datetime, timedelta
import os

from draftdesk.utils import logging as draftdesk_logging
from draftdesk.utils.logging import cleanup_old_logs, setup_logging, get_logger


class TestLogging:
    """Test logging functionality."""

    def test_setup_logging_default(self, temp_dir):
        """Test setting up logging with default parameters."""
        log_file = temp_dir / "test.log"
        logger = setup_logging(log_file=log_file, level="INFO")

        assert logger.name == "draftdesk"
        assert logger.level == logging.INFO
        assert len(logger.handlers) == 1
        assert isinstance(logger.handlers[0], logging.FileHandler)

    def test_setup_logging_with_console(self, temp_dir):
        """Test setting up logging with console output."""
        log_file = temp_dir / "test.log"
        logger = setup_logging(log_file=log_file, level="DEBUG", console_output=True)

        assert logger.level == logging.DEBUG
        assert len(logger.handlers) == 2

        handler_types = [type(h).__name__ for h in logger.handlers]
        assert 'FileHandler' in handler_types
        assert 'StreamHandler' in handler_types

    def test_log_levels(self, temp_dir):
        """Only records at or above the configured level reach the file."""
        log_file = temp_dir / "test.log"
        logger = setup_logging(log_file=log_file, level="WARNING")

        logger.debug("Debug message")
        logger.info("Info message")
        logger.warning("Warning message")
        logger.error("Error message")

        content = log_file.read_text(encoding='utf-8')

        assert "Debug message" not in content
        assert "Info message" not in content
        assert "Warning message" in content
        assert "Error message" in content

    def test_log_file_creation(self, temp_dir):
        """Test that log file and its directory are created."""
        log_file = temp_dir / "logs" / "test.log"
        assert not log_file.exists()

        logger = setup_logging(log_file=log_file)
        logger.info("Test message")

        assert log_file.exists()

    def test_default_log_location(self, monkeypatch, temp_dir):
        """Default log goes to a dated file under the user config dir."""
        monkeypatch.setattr(draftdesk_logging, 'USER_CONFIG_DIR', temp_dir / ".draftdesk")

        logger = setup_logging()
        logger.info("Test message")

        timestamp = datetime.now().strftime("%Y%m%d")
        expected_log = temp_dir / ".draftdesk" / "logs" / f"draftdesk_{timestamp}.log"
        assert expected_log.exists()

    def test_log_format(self, temp_dir):
        """Test log message format."""
        log_file = temp_dir / "test.log"
        logger = setup_logging(log_file=log_file)

        logger.info("Test message")

        content = log_file.read_text(encoding='utf-8')
        assert "INFO" in content
        assert "Test message" in content
        assert "draftdesk" in content
        assert datetime.now().strftime("%Y-%m-%d") in content

    def test_get_logger(self):
        """Named loggers live under the draftdesk hierarchy."""
        assert get_logger().name == "draftdesk"

        logger = get_logger("store")
        assert logger.name == "draftdesk.store"
        assert get_logger("store") is logger

    def test_child_logger_reaches_file(self, temp_dir):
        """Module loggers need no handlers of their own."""
        log_file = temp_dir / "test.log"
        setup_logging(log_file=log_file, level="DEBUG")

        get_logger("persistence").info("Saved 3 chapters")

        content = log_file.read_text(encoding='utf-8')
        assert "draftdesk.persistence" in content
        assert "Saved 3 chapters" in content

    def test_logger_startup_message(self, temp_dir):
        """Test that startup banner is logged."""
        log_file = temp_dir / "test.log"
        setup_logging(log_file=log_file, level="INFO")

        content = log_file.read_text(encoding='utf-8')
        assert "DraftDesk logging started" in content
        assert "Level: INFO" in content
        assert str(log_file) in content
        assert "=" * 60 in content

    def test_exception_logging(self, temp_dir):
        """Test logging exceptions with traceback."""
        log_file = temp_dir / "test.log"
        logger = setup_logging(log_file=log_file)

        try:
            raise ValueError("Test exception")
        except ValueError:
            logger.error("Error occurred", exc_info=True)

        content = log_file.read_text(encoding='utf-8')
        assert "Error occurred" in content
        assert "ValueError: Test exception" in content
        assert "Traceback" in content

    def test_multiple_setup_calls(self, temp_dir):
        """Test that multiple setup calls replace existing handlers."""
        log_file1 = temp_dir / "test1.log"
        log_file2 = temp_dir / "test2.log"

        logger = setup_logging(log_file=log_file1)
        initial_handlers = len(logger.handlers)

        logger = setup_logging(log_file=log_file2)
        assert len(logger.handlers) == initial_handlers

        logger.info("Test message")
        assert "Test message" in log_file2.read_text(encoding='utf-8')


class TestCleanupOldLogs:
    """Test log retention."""

    def test_missing_directory(self, temp_dir):
        assert cleanup_old_logs(temp_dir / "nope") == 0

    def test_removes_only_old_logs(self, temp_dir):
        old_log = temp_dir / "old.log"
        new_log = temp_dir / "new.log"
        other = temp_dir / "notes.txt"
        for path in (old_log, new_log, other):
            path.write_text("x")

        old_time = (datetime.now() - timedelta(days=30)).timestamp()
        os.utime(old_log, (old_time, old_time))
        os.utime(other, (old_time, old_time))

        assert cleanup_old_logs(temp_dir, days_to_keep=7) == 1
        assert not old_log.exists()
        assert new_log.exists()
        assert other.exists()
