from collections.abc import Iterator

import pytest
from loguru import logger


@pytest.fixture
def log_messages() -> Iterator[list[str]]:
    """Collect loguru messages emitted during a test (caplog does not see loguru)."""
    messages: list[str] = []
    handler_id = logger.add(
        lambda msg: messages.append(f"{msg.record['level'].name} {msg.record['message']}"),
        level="DEBUG",
    )
    yield messages
    logger.remove(handler_id)
