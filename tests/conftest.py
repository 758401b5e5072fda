import sys
from collections.abc import Callable, Iterator
from unittest.mock import MagicMock

import pytest
from loguru import logger

from chartdriver.deployment.shell_commands.types import CommandResult


@pytest.fixture(autouse=True)
def _restore_loguru() -> Iterator[None]:
    """CLI commands replace loguru's sinks; put back a plain stderr sink."""
    yield
    logger.remove()
    logger.add(sys.stderr, level="DEBUG")


@pytest.fixture
def log_records() -> Iterator[list[dict]]:
    """Collect loguru records emitted during a test."""
    records: list[dict] = []
    handler_id = logger.add(lambda message: records.append(message.record), level="DEBUG")
    yield records
    logger.remove(handler_id)


@pytest.fixture
def logged_warnings(log_records: list[dict]) -> Callable[[], list[str]]:
    """Return a function listing the WARNING messages logged so far."""

    def _warnings() -> list[str]:
        return [r["message"] for r in log_records if r["level"].name == "WARNING"]

    return _warnings


@pytest.fixture
def mock_runner() -> MagicMock:
    """Create a mock command runner that succeeds by default."""
    runner = MagicMock()
    runner.run.return_value = CommandResult(success=True)
    return runner
