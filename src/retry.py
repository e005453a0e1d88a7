from __future__ import annotations

import asyncio
import functools
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Generic, Optional, TypeVar

from loguru import logger

T = TypeVar("T")

DEFAULT_TIMES = 3
DEFAULT_BASE_DELAY = 0.5  # seconds


@dataclass
class RetryResult(Generic[T]):
    """Outcome of a retried call.

    ``ok`` is False only when every attempt raised; an empty ``value`` with
    ``ok`` True is a legitimate result.
    """

    ok: bool
    value: Optional[T] = None
    error: Optional[BaseException] = None
    attempts: int = 0

    def unwrap_or(self, default: T) -> T:
        return self.value if self.ok else default


def with_retry(
    func: Callable[..., Awaitable[T]],
    times: int = DEFAULT_TIMES,
    base_delay: float = DEFAULT_BASE_DELAY,
) -> Callable[..., Awaitable[RetryResult[T]]]:
    """Wrap an async callable with bounded exponential backoff.

    Attempt ``i`` (0-based) that fails is followed by a wait of
    ``base_delay * 2 ** i`` before the next attempt. The last failure is not
    followed by a wait. Failures never propagate to the caller.
    """
    name = getattr(func, "__qualname__", repr(func))

    @functools.wraps(func)
    async def wrapper(*args: Any, **kwargs: Any) -> RetryResult[T]:
        last_error: Optional[BaseException] = None
        for attempt in range(times):
            try:
                value = await func(*args, **kwargs)
                return RetryResult(ok=True, value=value, attempts=attempt + 1)
            except Exception as e:
                last_error = e
                logger.warning(f"Attempt {attempt + 1}/{times} of {name} failed: {e}")
                if attempt < times - 1:
                    await asyncio.sleep(base_delay * 2**attempt)

        logger.error(f"{name} failed after {times} attempts")
        return RetryResult(ok=False, error=last_error, attempts=times)

    return wrapper


def retry(times: int = DEFAULT_TIMES, base_delay: float = DEFAULT_BASE_DELAY):
    """Decorator form of :func:`with_retry`."""

    def decorator(func: Callable[..., Awaitable[T]]):
        return with_retry(func, times=times, base_delay=base_delay)

    return decorator
