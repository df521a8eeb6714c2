from collections.abc import Iterator
from typing import Any

import pytest
from loguru import logger

from imbue.condition_waiter.test_utils import RecordingPollScheduler


@pytest.fixture
def recording_scheduler() -> RecordingPollScheduler:
    return RecordingPollScheduler()


@pytest.fixture
def log_messages() -> Iterator[list[str]]:
    """Collect every loguru message (TRACE and up) emitted during the test."""
    captured: list[str] = []

    def sink(message: Any) -> None:
        captured.append(message.record["message"])

    handler_id = logger.add(sink, level="TRACE", format="{message}")
    try:
        yield captured
    finally:
        logger.remove(handler_id)
