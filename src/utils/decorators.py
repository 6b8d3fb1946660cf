import asyncio
import functools
import logging
from typing import Any, Awaitable, Callable

logger = logging.getLogger("grok.retry")


def _always(_: BaseException) -> bool:
    return True


def async_retry(
    attempts: int = 3,
    delay: float = 2.0,
    retry_if: Callable[[BaseException], bool] = _always,
    sleep: Callable[[float], Awaitable[Any]] | None = None,
):
    """
    Decorator to retry an async function upon exception.

    Args:
        attempts: Max number of calls, including the first one.
        delay: Base sleep time in seconds. Attempt n waits n * delay.
        retry_if: Predicate deciding whether a failure may be retried.
            Failures it rejects are re-raised immediately.
        sleep: Awaitable sleep used between attempts. Defaults to asyncio.sleep.
    """
    def decorator(func):
        @functools.wraps(func)
        async def wrapper(*args, **kwargs):
            for attempt in range(attempts):
                try:
                    return await func(*args, **kwargs)
                except Exception as e:
                    if not retry_if(e):
                        raise

                    if attempt == attempts - 1:
                        logger.error(f"Function {func.__name__} failed after {attempts} attempts. Error: {e!r}")
                        raise

                    wait = (attempt + 1) * delay
                    logger.warning(f"Function {func.__name__} failed (Attempt {attempt + 1}/{attempts}). Retrying in {wait}s... Error: {e!r}")
                    await (sleep or asyncio.sleep)(wait)
        return wrapper
    return decorator
