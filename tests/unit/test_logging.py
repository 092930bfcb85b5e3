"""Unit tests for legallens.utils.logging."""

from __future__ import annotations

import logging

import structlog

from legallens.utils.logging import configure_logging, get_logger


class TestConfigureLogging:
    def test_root_logger_level(self) -> None:
        configure_logging(log_level="DEBUG")
        assert logging.getLogger().level == logging.DEBUG
        assert len(logging.getLogger().handlers) == 1

    def test_http_client_loggers_quietened(self) -> None:
        configure_logging(log_level="DEBUG")
        assert logging.getLogger("httpx").level == logging.WARNING
        assert logging.getLogger("openai").level == logging.WARNING

    def test_unknown_level_falls_back_to_info(self) -> None:
        configure_logging(log_level="chatty")
        assert logging.getLogger().level == logging.INFO

    def test_get_logger_returns_usable_logger(self) -> None:
        configure_logging()
        logger = get_logger("legallens.tests")
        logger.info("logging_test_event", document_id="d1")
        assert structlog.is_configured()
