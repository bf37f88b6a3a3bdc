"""
Resilience utilities for remote calls.

This module provides the retry_with_backoff decorator used around
Bitbucket Server API requests that fail transiently.
"""

import logging
import time
from functools import wraps
from typing import Callable, ParamSpec, TypeVar

logger = logging.getLogger(__name__)

P = ParamSpec('P')
T = TypeVar('T')


def retry_with_backoff(
    max_retries: int = 3,
    base_delay: float = 1.0,
    max_delay: float = 60.0,
    exponential_base: float = 2.0,
    exceptions: tuple = (Exception,)
):
    """
    Decorator for retrying functions with exponential backoff.

    Only the exception types listed in ``exceptions`` are retried; anything
    else propagates on the first attempt.

    Args:
        max_retries: Maximum number of attempts (default: 3)
        base_delay: Initial delay in seconds between retries (default: 1.0)
        max_delay: Maximum delay in seconds between retries (default: 60.0)
        exponential_base: Base for exponential backoff calculation (default: 2.0)
        exceptions: Tuple of exception types to catch and retry (default: all exceptions)

    Returns:
        Decorated function with retry logic

    Example:
        @retry_with_backoff(max_retries=3, base_delay=1.0, exceptions=(TransientApiError,))
        def fetch_page():
            return client.get(url)
    """
    def decorator(func: Callable[P, T]) -> Callable[P, T]:
        @wraps(func)
        def wrapper(*args: P.args, **kwargs: P.kwargs) -> T:
            attempts = max(1, max_retries)

            for attempt in range(attempts):
                try:
                    result = func(*args, **kwargs)

                    if attempt > 0:
                        logger.info(
                            f"{func.__name__} succeeded on attempt {attempt + 1}/{attempts}"
                        )

                    return result

                except exceptions as e:
                    if attempt == attempts - 1:
                        logger.error(
                            f"{func.__name__} failed after {attempts} attempts: {e}"
                        )
                        raise

                    delay = min(base_delay * (exponential_base ** attempt), max_delay)

                    logger.warning(
                        f"{func.__name__} failed on attempt {attempt + 1}/{attempts}: {e}. "
                        f"Retrying in {delay:.1f}s..."
                    )

                    time.sleep(delay)

            # This should never be reached
            raise RuntimeError(f"{func.__name__} was not attempted")

        return wrapper

    return decorator
