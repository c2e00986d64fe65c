"""Retry logic with exponential backoff for transient failures.

Only idempotent reads against network services (pull-request lookups) are
wrapped with this decorator. Mutating VCS commands are never retried: a
repeated rebase or push could duplicate or corrupt history.
"""

import logging
from collections.abc import Callable
from functools import wraps
from typing import Any, TypeVar

from ship.core.time.abc import Time

logger = logging.getLogger(__name__)

T = TypeVar("T")


def retry_with_backoff(
    time: Time,
    max_attempts: int = 3,
    base_delay: float = 0.5,
    *,
    backoff_factor: float = 2.0,
    retry_on: tuple[type[Exception], ...] = (Exception,),
) -> Callable[[Callable[..., T]], Callable[..., T]]:
    """Retry function with exponential backoff for transient failures.

    Delay calculation: delay = base_delay * (backoff_factor ** (attempt - 1))
    Example with defaults: 0.5s, 1.0s before attempts 2 and 3.

    Args:
        time: Time integration used for sleeping between attempts
        max_attempts: Maximum number of attempts (default: 3)
        base_delay: Initial delay in seconds (default: 0.5)
        backoff_factor: Multiplier for exponential backoff (default: 2.0)
        retry_on: Exception types that trigger a retry; anything else propagates
            immediately

    Example:
        @retry_with_backoff(ctx.time, retry_on=(TransientPrError,))
        def lookup() -> PullRequest | None:
            return ctx.github.get_pr_by_branch(repo_root, "feature")

    Raises:
        Exception: Re-raises the last exception after max_attempts exhausted
    """

    def decorator(func: Callable[..., T]) -> Callable[..., T]:
        @wraps(func)
        def wrapper(*args: Any, **kwargs: Any) -> T:
            for attempt in range(max_attempts):
                if attempt > 0:
                    delay = base_delay * (backoff_factor ** (attempt - 1))
                    logger.info(
                        "Retrying %s after %.1fs (attempt %d/%d)",
                        func.__name__,
                        delay,
                        attempt + 1,
                        max_attempts,
                    )
                    time.sleep(delay)

                try:
                    return func(*args, **kwargs)
                except retry_on as e:
                    if attempt == max_attempts - 1:
                        raise
                    logger.warning("%s failed: %s", func.__name__, e)

            msg = f"Function {func.__name__} completed without result or exception"
            raise RuntimeError(msg)

        return wrapper

    return decorator
