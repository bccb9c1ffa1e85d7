"""
Tests for RetryEngine, the retryability predicate and backoff delays.
"""

import asyncio
from unittest.mock import AsyncMock, patch

import pytest

from api_client.core.exceptions import (
    ApiError,
    ConfigurationError,
    HTTPError,
    NetworkError,
    TimeoutError,
)
from api_client.core.retry_engine import (
    RETRYABLE_CODES,
    RetryEngine,
    calculate_retry_delay,
    is_retryable_error,
)


def http_error(status):
    return HTTPError(f"HTTP {status}: x", status_code=status)


class TestIsRetryableError:
    """Test retryability predicate."""

    @pytest.mark.parametrize("code", sorted(RETRYABLE_CODES))
    def test_transient_network_codes(self, code):
        assert is_retryable_error(NetworkError("boom", code=code))

    def test_timeout_error(self):
        assert is_retryable_error(TimeoutError(5))

    def test_unknown_network_code_is_terminal(self):
        assert not is_retryable_error(NetworkError("boom", code="EPROTO"))
        assert not is_retryable_error(NetworkError("boom"))

    @pytest.mark.parametrize("status", [500, 502, 503, 504, 599, 429])
    def test_retryable_statuses(self, status):
        assert is_retryable_error(http_error(status))

    @pytest.mark.parametrize("status", [400, 401, 403, 404, 409, 422, 600])
    def test_terminal_statuses(self, status):
        assert not is_retryable_error(http_error(status))

    def test_unclassified_errors_are_terminal(self):
        assert not is_retryable_error(ValueError("x"))
        assert not is_retryable_error(ConfigurationError("x"))

    def test_wrapped_error_keeps_classification(self):
        assert is_retryable_error(ApiError(http_error(503)))


class TestCalculateRetryDelay:
    """Test backoff schedule."""

    def test_exponential_without_jitter(self):
        delays = [calculate_retry_delay(n, 1.0, jitter=0) for n in range(1, 6)]
        assert delays == [1.0, 2.0, 4.0, 8.0, 16.0]

    def test_capped(self):
        assert calculate_retry_delay(6, 1.0, jitter=0) == 30.0
        assert calculate_retry_delay(50, 1.0, jitter=1.0) == 30.0

    def test_custom_cap(self):
        assert calculate_retry_delay(4, 1.0, jitter=0, max_delay=5.0) == 5.0

    def test_jitter_range(self):
        with patch("api_client.core.retry_engine.random.random", return_value=0.5):
            assert calculate_retry_delay(2, 1.0, jitter=1.0) == 2.5

        for _ in range(100):
            delay = calculate_retry_delay(1, 1.0)
            assert 1.0 <= delay < 2.0

    def test_never_exceeds_cap(self):
        for attempt in range(1, 20):
            assert calculate_retry_delay(attempt, 1.0) <= 30.0

    def test_non_decreasing_in_expectation(self):
        """Expected delay (base part + jitter/2) never decreases with attempt."""
        with patch("api_client.core.retry_engine.random.random", return_value=0.5):
            delays = [calculate_retry_delay(n, 1.0) for n in range(1, 10)]
        assert delays == sorted(delays)

    def test_zero_base_delay(self):
        assert calculate_retry_delay(3, 0, jitter=0) == 0


class TestRetryEngine:
    """Test per-call retry state."""

    def test_initial_state(self):
        engine = RetryEngine(max_retries=3, base_delay=1.0)
        assert engine.attempt == 0
        assert engine.max_attempts == 4
        assert not engine.exhausted

    def test_negative_retries_rejected(self):
        with pytest.raises(ValueError):
            RetryEngine(max_retries=-1, base_delay=1.0)

    def test_should_retry_until_exhausted(self):
        engine = RetryEngine(max_retries=2, base_delay=0)
        error = http_error(503)

        engine.increment()
        assert engine.should_retry(error)
        engine.increment()
        assert engine.should_retry(error)
        engine.increment()
        assert engine.exhausted
        assert not engine.should_retry(error)

    def test_zero_retries(self):
        engine = RetryEngine(max_retries=0, base_delay=1.0)
        engine.increment()
        assert not engine.should_retry(http_error(503))

    def test_should_not_retry_terminal_error(self):
        engine = RetryEngine(max_retries=5, base_delay=0)
        engine.increment()
        assert not engine.should_retry(http_error(404))

    def test_wait_time_uses_failed_attempt(self):
        engine = RetryEngine(max_retries=5, base_delay=0.5, jitter=0)
        engine.increment()
        assert engine.get_wait_time() == 0.5
        engine.increment()
        assert engine.get_wait_time() == 1.0

    def test_reset(self):
        engine = RetryEngine(max_retries=1, base_delay=0)
        engine.increment()
        engine.reset()
        assert engine.attempt == 0


class TestAsyncWait:
    """Test cancellable backoff wait."""

    @pytest.mark.asyncio
    async def test_sleeps_without_event(self):
        engine = RetryEngine(max_retries=1, base_delay=0)
        with patch("api_client.core.retry_engine.asyncio.sleep", new_callable=AsyncMock) as mock_sleep:
            cancelled = await engine.async_wait(1.5)

        assert cancelled is False
        mock_sleep.assert_awaited_once_with(1.5)

    @pytest.mark.asyncio
    async def test_wait_completes_when_event_not_set(self):
        engine = RetryEngine(max_retries=1, base_delay=0)
        event = asyncio.Event()
        assert await engine.async_wait(0.01, event) is False

    @pytest.mark.asyncio
    async def test_already_set_event(self):
        engine = RetryEngine(max_retries=1, base_delay=0)
        event = asyncio.Event()
        event.set()
        assert await engine.async_wait(10, event) is True

    @pytest.mark.asyncio
    async def test_event_interrupts_wait(self):
        engine = RetryEngine(max_retries=1, base_delay=0)
        event = asyncio.Event()
        loop = asyncio.get_running_loop()
        loop.call_later(0.01, event.set)

        started = loop.time()
        assert await engine.async_wait(10, event) is True
        assert loop.time() - started < 5
