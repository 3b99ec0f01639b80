# tests/unit/test_resilience.py
"""
Unit tests for the circuit breaker guarding refinement calls and the retry
decorator used for record-store reads.
"""

from unittest.mock import AsyncMock, patch

import pytest

from brandswap.llm.base import RefinementServiceError
from brandswap.services.resilience import CircuitBreaker, CircuitOpenError, CircuitState, with_retry


async def _refine_ok():
    return '{"title": "ok"}'


async def _refine_down():
    raise RefinementServiceError("provider unavailable")


class TestCircuitBreaker:
    """Tests for CircuitBreaker."""

    def test_starts_closed(self):
        assert CircuitBreaker(name="refinement:test").state == CircuitState.CLOSED

    @pytest.mark.asyncio
    async def test_passes_result_through(self):
        breaker = CircuitBreaker(name="refinement:test")
        assert await breaker.call(_refine_ok) == '{"title": "ok"}'

    @pytest.mark.asyncio
    async def test_opens_after_threshold(self):
        breaker = CircuitBreaker(name="refinement:test", failure_threshold=2)

        with pytest.raises(RefinementServiceError):
            await breaker.call(_refine_down)
        assert breaker.state == CircuitState.CLOSED

        with pytest.raises(RefinementServiceError):
            await breaker.call(_refine_down)
        assert breaker.state == CircuitState.OPEN

        with pytest.raises(CircuitOpenError):
            await breaker.call(_refine_ok)

    @pytest.mark.asyncio
    async def test_success_clears_failure_count(self):
        breaker = CircuitBreaker(name="refinement:test", failure_threshold=2)

        with pytest.raises(RefinementServiceError):
            await breaker.call(_refine_down)
        await breaker.call(_refine_ok)

        # One more failure should not open the circuit
        with pytest.raises(RefinementServiceError):
            await breaker.call(_refine_down)
        assert breaker.state == CircuitState.CLOSED

    @pytest.mark.asyncio
    async def test_half_open_probe_closes_on_success(self):
        breaker = CircuitBreaker(name="refinement:test", failure_threshold=1, reset_timeout_seconds=0)

        with pytest.raises(RefinementServiceError):
            await breaker.call(_refine_down)
        assert breaker.state == CircuitState.HALF_OPEN

        await breaker.call(_refine_ok)
        assert breaker.state == CircuitState.CLOSED

    @pytest.mark.asyncio
    async def test_half_open_probe_failure_reopens(self):
        breaker = CircuitBreaker(name="refinement:test", failure_threshold=1, reset_timeout_seconds=60)

        with pytest.raises(RefinementServiceError):
            await breaker.call(_refine_down)

        # Pretend the cooldown has elapsed
        breaker._last_failure_time -= 120
        assert breaker.state == CircuitState.HALF_OPEN

        with pytest.raises(RefinementServiceError):
            await breaker.call(_refine_down)
        assert breaker.state == CircuitState.OPEN

    @pytest.mark.asyncio
    async def test_half_open_allows_limited_probes(self):
        breaker = CircuitBreaker(name="refinement:test", failure_threshold=1, reset_timeout_seconds=0)
        breaker._state = CircuitState.OPEN
        breaker._half_open_calls = breaker.half_open_max_calls

        with pytest.raises(CircuitOpenError):
            await breaker.call(_refine_ok)

    @pytest.mark.asyncio
    async def test_sync_callable(self):
        breaker = CircuitBreaker(name="refinement:test")
        assert await breaker.call(lambda: "sync") == "sync"

    def test_reset(self):
        breaker = CircuitBreaker(name="refinement:test")
        breaker._state = CircuitState.OPEN
        breaker._failure_count = 9

        breaker.reset()

        assert breaker.state == CircuitState.CLOSED
        assert breaker._failure_count == 0


class TestWithRetry:
    """Tests for the with_retry decorator."""

    @pytest.mark.asyncio
    async def test_retries_listed_exceptions(self):
        attempts = 0

        @with_retry(max_attempts=3, min_wait=0.001, max_wait=0.002, retry_exceptions=(ConnectionError,))
        async def fetch_entries():
            nonlocal attempts
            attempts += 1
            if attempts < 3:
                raise ConnectionError("reset by peer")
            return ["entry"]

        assert await fetch_entries() == ["entry"]
        assert attempts == 3

    @pytest.mark.asyncio
    async def test_gives_up_after_max_attempts(self):
        attempts = 0

        @with_retry(max_attempts=2, min_wait=0.001, retry_exceptions=(ConnectionError,))
        async def fetch_entries():
            nonlocal attempts
            attempts += 1
            raise ConnectionError("down")

        with pytest.raises(ConnectionError):
            await fetch_entries()
        assert attempts == 2

    @pytest.mark.asyncio
    async def test_other_exceptions_not_retried(self):
        attempts = 0

        @with_retry(max_attempts=3, retry_exceptions=(ConnectionError,))
        async def fetch_entries():
            nonlocal attempts
            attempts += 1
            raise KeyError("entries")

        with pytest.raises(KeyError):
            await fetch_entries()
        assert attempts == 1

    @pytest.mark.asyncio
    async def test_backoff_is_exponential_and_capped(self):
        sleep = AsyncMock()

        @with_retry(max_attempts=5, min_wait=1.0, max_wait=3.0, retry_exceptions=(ConnectionError,))
        async def fetch_entries():
            raise ConnectionError("down")

        with patch("brandswap.services.resilience.asyncio.sleep", new=sleep):
            with pytest.raises(ConnectionError):
                await fetch_entries()

        assert [call.args[0] for call in sleep.await_args_list] == [1.0, 2.0, 3.0, 3.0]

    def test_preserves_function_name(self):
        @with_retry()
        async def fetch_entries():
            return None

        assert fetch_entries.__name__ == "fetch_entries"
