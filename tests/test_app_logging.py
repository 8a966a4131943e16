"""Tests for logging configuration."""

import logging

from fastapi.testclient import TestClient

from paid_chat.api.app import create_app
from paid_chat.app_logging import configure_logging


def test_configure_logging_installs_one_handler() -> None:
    logger = logging.getLogger("paid_chat")
    logger.handlers.clear()

    configure_logging()
    configure_logging("debug")

    assert len(logger.handlers) == 1
    assert logger.level == logging.DEBUG
    assert logger.propagate is False


def test_create_app_applies_configured_level(container) -> None:
    container.settings = container.settings.model_copy(update={"log_level": "warning"})

    TestClient(create_app(container)).get("/health")

    assert logging.getLogger("paid_chat").level == logging.WARNING
