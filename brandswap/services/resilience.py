"""
Failure handling for calls to external services.

- CircuitBreaker: stops sending documents to a refinement provider that keeps
  failing, so one dead provider costs a single timeout per cooldown instead of
  one per entry in a preview.
- with_retry: exponential backoff for idempotent record-store reads. Writes
  are never wrapped.
"""

import asyncio
import logging
import time
from collections.abc import Awaitable, Callable
from enum import Enum
from functools import wraps
from typing import Any

logger = logging.getLogger(__name__)


class CircuitState(str, Enum):
    CLOSED = "closed"
    OPEN = "open"
    HALF_OPEN = "half_open"  # cooldown over, probing


class CircuitOpenError(Exception):
    """The breaker rejected a call without attempting it."""


class CircuitBreaker:
    """
    Count consecutive failures of a guarded call.

    Once ``failure_threshold`` is reached the breaker opens and rejects calls
    for ``reset_timeout_seconds``. After the cooldown up to
    ``half_open_max_calls`` probes go through: a successful probe closes the
    breaker, a failed one restarts the cooldown.

    Usage:
        breaker = CircuitBreaker(name="refinement:gemini")
        raw = await breaker.call(provider.refine_text, document_text, "Everest", "K2")
    """

    def __init__(
        self,
        name: str,
        failure_threshold: int = 5,
        reset_timeout_seconds: float = 60.0,
        half_open_max_calls: int = 1,
    ):
        self.name = name
        self.failure_threshold = failure_threshold
        self.reset_timeout_seconds = reset_timeout_seconds
        self.half_open_max_calls = half_open_max_calls

        self._state = CircuitState.CLOSED
        self._failure_count = 0
        self._last_failure_time = 0.0
        self._half_open_calls = 0
        self._lock = asyncio.Lock()

    def __repr__(self) -> str:
        return f"CircuitBreaker(name={self.name!r}, state={self.state.value}, failures={self._failure_count})"

    @property
    def state(self) -> CircuitState:
        if self._state == CircuitState.OPEN and self._cooldown_elapsed():
            return CircuitState.HALF_OPEN
        return self._state

    def _cooldown_elapsed(self) -> bool:
        return time.monotonic() - self._last_failure_time >= self.reset_timeout_seconds

    async def _admit(self) -> None:
        async with self._lock:
            state = self.state
            if state == CircuitState.CLOSED:
                return
            if state == CircuitState.OPEN:
                raise CircuitOpenError(f"Circuit '{self.name}' is open; retry in up to {self.reset_timeout_seconds}s")
            if self._half_open_calls >= self.half_open_max_calls:
                raise CircuitOpenError(f"Circuit '{self.name}' is waiting on a probe call")
            self._half_open_calls += 1

    async def _record_failure(self) -> None:
        async with self._lock:
            self._failure_count += 1
            self._last_failure_time = time.monotonic()

            if self._state == CircuitState.OPEN:
                # A probe failed: start a fresh cooldown
                self._half_open_calls = 0
                logger.warning(f"Circuit '{self.name}' probe failed, staying open")
            elif self._failure_count >= self.failure_threshold:
                self._state = CircuitState.OPEN
                logger.warning(
                    f"Circuit '{self.name}' open after {self._failure_count} consecutive failures "
                    f"(cooldown {self.reset_timeout_seconds}s)"
                )

    async def _record_success(self) -> None:
        async with self._lock:
            if self._state != CircuitState.CLOSED:
                logger.info(f"Circuit '{self.name}' closed again")
            self.reset()

    async def call(self, func: Callable[..., Any], *args: Any, **kwargs: Any) -> Any:
        """
        Run ``func`` if the breaker admits it.

        Raises:
            CircuitOpenError: the call was rejected and ``func`` never ran
        """
        await self._admit()
        try:
            result = func(*args, **kwargs)
            if asyncio.iscoroutine(result):
                result = await result
        except Exception:
            await self._record_failure()
            raise
        await self._record_success()
        return result

    def reset(self) -> None:
        self._state = CircuitState.CLOSED
        self._failure_count = 0
        self._half_open_calls = 0


def with_retry(
    max_attempts: int = 3,
    min_wait: float = 0.5,
    max_wait: float = 8.0,
    retry_exceptions: tuple[type[Exception], ...] = (Exception,),
) -> Callable[[Callable[..., Awaitable[Any]]], Callable[..., Awaitable[Any]]]:
    """
    Retry an async function on ``retry_exceptions`` with doubling waits.

    The wait before retry ``n`` is ``min_wait * 2**(n-1)``, capped at
    ``max_wait``. The last failure is re-raised.

    Usage:
        @with_retry(retry_exceptions=(httpx.TransportError,))
        async def _get(self, path): ...
    """
    if max_attempts < 1:
        raise ValueError("max_attempts must be at least 1")

    def decorator(func: Callable[..., Awaitable[Any]]) -> Callable[..., Awaitable[Any]]:
        @wraps(func)
        async def wrapper(*args: Any, **kwargs: Any) -> Any:
            delay = min_wait
            attempt = 1
            while True:
                try:
                    return await func(*args, **kwargs)
                except retry_exceptions as e:
                    if attempt >= max_attempts:
                        logger.error(f"{func.__name__} gave up after {attempt} attempts: {e}")
                        raise
                    wait = min(delay, max_wait)
                    logger.warning(f"{func.__name__} failed ({e}); attempt {attempt + 1}/{max_attempts} in {wait:.1f}s")
                    await asyncio.sleep(wait)
                    delay *= 2
                    attempt += 1

        return wrapper

    return decorator
