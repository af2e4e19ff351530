"""Tests for logging setup."""

import pytest

from firebolt_client.core.logging import get_logger, setup_logging


@pytest.mark.unit
class TestSetupLogging:
    def test_setup_without_errors(self):
        setup_logging()

    def test_setup_verbose(self):
        setup_logging(verbose=True)


@pytest.mark.unit
class TestGetLogger:
    def test_get_logger_without_name(self):
        setup_logging()
        log = get_logger()
        assert log is not None

    def test_get_logger_with_name(self):
        setup_logging()
        log = get_logger("firebolt_client.test")
        assert log is not None


@pytest.mark.unit
class TestLogOutput:
    def test_log_to_stderr(self, capsys):
        """Log output goes to stderr, not stdout."""
        setup_logging(verbose=True)
        log = get_logger()
        log.info("test message")

        captured = capsys.readouterr()
        assert captured.out == ""
        assert "test message" in captured.err

    def test_debug_hidden_when_not_verbose(self, capsys):
        setup_logging(verbose=False)
        get_logger().debug("hidden message")

        captured = capsys.readouterr()
        assert "hidden message" not in captured.err


@pytest.mark.unit
class TestUnconfiguredDefault:
    @pytest.fixture(autouse=True)
    def _unconfigured(self, monkeypatch):
        monkeypatch.setattr("firebolt_client.core.logging._configured", False)

    def test_debug_and_info_dropped(self, capsys):
        log = get_logger("firebolt_client.test")
        log.debug("debug chatter")
        log.info("info chatter")

        captured = capsys.readouterr()
        assert captured.out == ""
        assert captured.err == ""

    def test_errors_reach_stderr(self, capsys):
        get_logger("firebolt_client.test").error("query failed")

        captured = capsys.readouterr()
        assert captured.out == ""
        assert "query failed" in captured.err
