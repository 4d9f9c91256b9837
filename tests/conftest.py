"""Shared fixtures for the objective tests."""

import pytest
from loguru import logger


@pytest.fixture
def log_messages():
    """Collect loguru records emitted during a test."""
    messages = []
    handler_id = logger.add(
        lambda message: messages.append(message.record), level="DEBUG"
    )
    yield messages
    logger.remove(handler_id)
