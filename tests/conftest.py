"""
Pytest configuration and fixtures for api-client-core tests.
"""

import logging

import pytest
import pytest_asyncio
import respx

from api_client import AsyncAPIClient
from api_client.core.logging.config import LoggingConfig


@pytest.fixture
def base_url():
    """Base URL for testing."""
    return "https://api.example.com"


@pytest.fixture
def mock_router():
    """Mock httpx transport using respx."""
    with respx.mock(assert_all_called=False) as router:
        yield router


@pytest_asyncio.fixture
async def client(base_url):
    """
    AsyncAPIClient without backoff delays.

    retry_delay=0 and retry_jitter=0 keep retry tests instant.
    """
    client = AsyncAPIClient(base_url, timeout=5, retry_delay=0, retry_jitter=0)
    yield client
    await client.close()


@pytest.fixture
def capture_logger():
    """Stdlib logger with records collected into a list."""
    records = []

    class ListHandler(logging.Handler):
        def emit(self, record):
            records.append(record)

    logger = logging.getLogger("api_client.tests.capture")
    logger.setLevel(logging.DEBUG)
    logger.propagate = False
    handler = ListHandler(level=logging.DEBUG)
    logger.addHandler(handler)
    logger.records = records
    yield logger
    logger.removeHandler(handler)


@pytest.fixture
def logging_config():
    """Console logging configuration at DEBUG level."""
    return LoggingConfig.create(
        level="DEBUG",
        enable_console=True,
        enable_file=False
    )


@pytest.fixture
def logging_config_with_file(tmp_path):
    """
    LoggingConfig fixture with file logging enabled.

    Uses temporary directory for log files to avoid cleanup issues.
    """
    log_file = tmp_path / "test.log"
    return LoggingConfig.create(
        level="DEBUG",
        format="json",
        enable_console=False,
        enable_file=True,
        file_path=str(log_file)
    )
