from __future__ import annotations
"""Bounded retry with an overall timeout.

Usage:
    policy = RetryPolicy('load_jobs')
    result = await policy.execute(load_once, RetryConfig(max_attempts=3, delay_ms=300, timeout_ms=30000))

Semantics:
 - `operation` is awaited up to `max_attempts` times
 - a raised exception or a failure result (``result.success is False`` or a
   caller-supplied `is_failure` predicate) counts as a failed attempt
 - `delay_ms` is slept between attempts, never after the last one
 - `timeout_ms` bounds the entire call; the attempt in flight is cancelled and
   `OperationTimeout` raised even if attempts remain
 - running out of attempts raises `RetryExhausted` with the last failure attached

`operation` is re-run from scratch on every attempt, so it must be safe to repeat.
"""
import asyncio
import logging
from typing import Any, Awaitable, Callable, Optional, TypeVar

from .errors import OperationTimeout, RetryExhausted
from .models import RetryConfig

T = TypeVar('T')

logger = logging.getLogger('jobfeed.retry')


def _default_is_failure(result: Any) -> bool:
    return getattr(result, 'success', True) is False


class RetryPolicy:
    def __init__(self, name: str = 'operation'):
        self.name = name

    async def execute(
        self,
        operation: Callable[[], Awaitable[T]],
        config: RetryConfig,
        is_failure: Optional[Callable[[Any], bool]] = None,
    ) -> T:
        check = is_failure or _default_is_failure
        try:
            return await asyncio.wait_for(
                self._attempts(operation, config, check),
                timeout=config.timeout_ms / 1000.0,
            )
        except asyncio.TimeoutError as exc:
            logger.warning(f"{self.name}: timed out after {config.timeout_ms}ms")
            raise OperationTimeout(f"{self.name} timed out after {config.timeout_ms}ms", config.timeout_ms) from exc

    async def _attempts(self, operation: Callable[[], Awaitable[T]], config: RetryConfig, check: Callable[[Any], bool]) -> T:
        last_error: Optional[BaseException] = None
        last_result: Any = None
        for attempt in range(1, config.max_attempts + 1):
            try:
                result = await operation()
            except Exception as e:
                last_error, last_result = e, None
                logger.warning(f"{self.name}: attempt {attempt}/{config.max_attempts} failed: {e}")
            else:
                if not check(result):
                    return result
                last_error, last_result = None, result
                logger.warning(f"{self.name}: attempt {attempt}/{config.max_attempts} returned failure result")
            if attempt < config.max_attempts and config.delay_ms > 0:
                await asyncio.sleep(config.delay_ms / 1000.0)
        message = f"{self.name} failed after {config.max_attempts} attempts"
        if last_error is not None:
            raise RetryExhausted(message, config.max_attempts, last_error=last_error) from last_error
        raise RetryExhausted(message, config.max_attempts, last_result=last_result)
