"""Retry decorators for outbound calls."""
import functools
import logging
from typing import Callable, Any, Optional, Union
from tenacity import (
    AsyncRetrying,
    stop_after_attempt,
    wait_exponential,
    retry_if_exception_type,
    before_sleep_log
)

from ..core.logging import logger


def retry_async(
    max_attempts: Union[int, Callable[[Any], int]] = 3,
    min_wait: float = 1.0,
    max_wait: float = 30.0,
    backoff_multiplier: float = 2.0,
    retry_exceptions: Optional[tuple] = None
):
    """
    Decorator for retrying async methods with exponential backoff.

    ``max_attempts`` may be a callable receiving the bound instance, so a
    client can read its attempt budget from its own settings. With a budget
    of 1 the call is made exactly once and the error is re-raised.

    Args:
        max_attempts: Attempt budget, or callable ``(self) -> int``
        min_wait: Minimum wait time between retries (seconds)
        max_wait: Maximum wait time between retries (seconds)
        backoff_multiplier: Exponential backoff multiplier
        retry_exceptions: Exception types to retry on (default: all exceptions)
    """
    if retry_exceptions is None:
        retry_exceptions = (Exception,)

    def decorator(func: Callable) -> Callable:
        @functools.wraps(func)
        async def wrapper(*args, **kwargs) -> Any:
            attempts = max_attempts(args[0]) if callable(max_attempts) else max_attempts

            retrying = AsyncRetrying(
                stop=stop_after_attempt(max(1, attempts)),
                wait=wait_exponential(
                    multiplier=backoff_multiplier,
                    min=min_wait,
                    max=max_wait
                ),
                retry=retry_if_exception_type(retry_exceptions),
                before_sleep=before_sleep_log(logger, logging.WARNING),
                reraise=True
            )

            async for attempt in retrying:
                with attempt:
                    return await func(*args, **kwargs)

        return wrapper
    return decorator
