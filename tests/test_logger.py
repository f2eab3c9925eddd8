"""Tests for logging utilities."""

import logging

from gransac.logger import LOG_LEVEL_ENV, level_from_env, setup_logger


class TestLogger:

    def test_console_and_file_handlers(self, tmp_path):
        log_file = tmp_path / "logs" / "run.log"
        logger = setup_logger("gransac_test.files", log_level=logging.DEBUG, log_file=str(log_file))
        assert logger.level == logging.DEBUG
        assert len(logger.handlers) == 2

        logger.debug("hello")
        for handler in logger.handlers:
            handler.flush()
        assert "hello" in log_file.read_text()

        for handler in list(logger.handlers):
            logger.removeHandler(handler)
            handler.close()

    def test_setup_is_idempotent(self):
        setup_logger("gransac_test.repeat")
        logger = setup_logger("gransac_test.repeat")
        assert len(logger.handlers) == 1

    def test_level_from_env(self, monkeypatch):
        monkeypatch.setenv(LOG_LEVEL_ENV, "debug")
        assert level_from_env() == logging.DEBUG
        monkeypatch.setenv(LOG_LEVEL_ENV, "not-a-level")
        assert level_from_env(logging.ERROR) == logging.ERROR
        monkeypatch.delenv(LOG_LEVEL_ENV)
        assert level_from_env() == logging.INFO

    def test_setup_reads_env(self, monkeypatch):
        monkeypatch.setenv(LOG_LEVEL_ENV, "WARNING")
        logger = setup_logger("gransac_test.env")
        assert logger.level == logging.WARNING
