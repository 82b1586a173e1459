"""Tests for logging utility."""

import logging
from io import StringIO


class TestLoggerConfiguration:
    """Test that logger configures correctly from settings."""

    def test_configure_logging_creates_package_logger(self):
        """configure_logging should return the package logger."""
        from resume_builder.utils.logging import configure_logging

        logger = configure_logging()
        assert isinstance(logger, logging.Logger)
        assert logger.name == "resume_builder"

    def test_configure_logging_respects_level(self):
        """Logger should respect the configured log level."""
        from resume_builder.utils.logging import configure_logging

        logger = configure_logging(level="DEBUG")
        assert logger.level == logging.DEBUG

        logger = configure_logging(level="warning")
        assert logger.level == logging.WARNING

    def test_configure_logging_default_level_is_info(self):
        """Default log level should be INFO."""
        from resume_builder.utils.logging import configure_logging

        logger = configure_logging()
        assert logger.level == logging.INFO

    def test_configure_logging_is_idempotent(self):
        """Repeated configuration should not stack handlers."""
        from resume_builder.utils.logging import configure_logging

        configure_logging()
        logger = configure_logging(level="ERROR")

        assert len(logger.handlers) == 1
        assert logger.handlers[0].level == logging.ERROR


class TestLogOutput:
    """Test that log output format is correct."""

    def test_log_message_includes_level_and_name(self):
        """Log messages should include the level and logger name."""
        from resume_builder.utils.logging import configure_logging

        logger = configure_logging(level="INFO")

        buffer = StringIO()
        handler = logging.StreamHandler(buffer)
        handler.setFormatter(logger.handlers[0].formatter)
        logger.addHandler(handler)

        logger.info("Loaded corpus")

        output = buffer.getvalue()
        assert "INFO" in output
        assert "resume_builder" in output
        assert "Loaded corpus" in output


class TestModuleLoggers:
    """Test module and library loggers."""

    def test_library_loggers_held_at_warning(self):
        """Provider and storage libraries stay quiet at INFO."""
        from resume_builder.utils.logging import NOISY_LOGGERS, configure_logging

        configure_logging(level="INFO")

        for name in NOISY_LOGGERS:
            assert logging.getLogger(name).level == logging.WARNING

    def test_library_loggers_follow_debug(self):
        """At DEBUG, library loggers are not silenced."""
        from resume_builder.utils.logging import configure_logging

        configure_logging(level="DEBUG")

        assert logging.getLogger("LiteLLM").level == logging.DEBUG

    def test_module_loggers_inherit_level(self):
        """Module loggers created from __name__ inherit the package level."""
        from resume_builder.utils.logging import configure_logging

        configure_logging(level="DEBUG")

        logger = logging.getLogger("resume_builder.matching.service")
        assert logger.getEffectiveLevel() == logging.DEBUG


class TestResetLogging:
    """Test reset_logging."""

    def test_reset_clears_handlers(self):
        """reset_logging should remove handlers and restore propagation."""
        from resume_builder.utils.logging import configure_logging, reset_logging

        logger = configure_logging()
        reset_logging()

        assert logger.handlers == []
        assert logger.propagate is True
