"""Retry logic with exponential backoff for transient HTTP transport failures."""

import logging
import time
from collections.abc import Callable
from typing import Any, TypeVar

import httpx

T = TypeVar("T")

logger = logging.getLogger(__name__)


class RetryConfig:
    """
    Configuration for retry behavior.

    Only transport-level failures (timeouts, refused connections) are
    retried; HTTP error statuses are returned to the caller unchanged.

    Parameters
    ----------
    max_retries : int
        Maximum number of retry attempts after the first call
    base_delay : float
        Initial delay in seconds before first retry
    max_delay : float
        Maximum delay between retries
    exponential_base : float
        Base for exponential backoff calculation
    retry_on : tuple[type[BaseException], ...]
        Exception types that trigger a retry

    """

    def __init__(
        self,
        max_retries: int = 2,
        base_delay: float = 0.5,
        max_delay: float = 10.0,
        exponential_base: float = 2.0,
        retry_on: tuple[type[BaseException], ...] = (httpx.TransportError,),
    ) -> None:
        self.max_retries = max_retries
        self.base_delay = base_delay
        self.max_delay = max_delay
        self.exponential_base = exponential_base
        self.retry_on = retry_on

    def get_delay(self, attempt: int) -> float:
        """
        Calculate delay for a given retry attempt using exponential backoff.

        Parameters
        ----------
        attempt : int
            Current attempt number (0-indexed)

        Returns
        -------
        float
            Delay in seconds

        """
        delay = self.base_delay * (self.exponential_base**attempt)
        return min(delay, self.max_delay)


def call_with_retry(config: RetryConfig, func: Callable[..., T], *args: Any, **kwargs: Any) -> T:
    """
    Call ``func`` and retry on the exception types listed in ``config``.

    Parameters
    ----------
    config : RetryConfig
        Retry configuration
    func : Callable[..., T]
        Function to call
    *args, **kwargs
        Arguments forwarded to ``func``

    Returns
    -------
    T
        Result of the first successful call

    Raises
    ------
    Exception
        The last exception once all retries are exhausted, or any exception
        not listed in ``config.retry_on`` immediately

    """
    for attempt in range(config.max_retries + 1):
        try:
            return func(*args, **kwargs)
        except config.retry_on as e:
            if attempt == config.max_retries:
                raise

            delay = config.get_delay(attempt)
            logger.warning(
                "Attempt %d/%d failed (%s), retrying in %.1fs",
                attempt + 1,
                config.max_retries + 1,
                e,
                delay,
            )
            time.sleep(delay)

    msg = "max_retries must be non-negative"
    raise ValueError(msg)
