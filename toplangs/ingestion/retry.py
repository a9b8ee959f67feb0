"""
Retry with exponential backoff for the GitHub fetch.

Attempts are strictly sequential: attempt, sleep, attempt again. The delay
starts at ``initial_delay`` and doubles after every failure, so the default
budget of 3 retries waits 0.5s, 1s and 2s across 4 attempts. Only
TransportError is retried; anything else propagates immediately.
"""
import logging
import time
from typing import Callable, TypeVar

from toplangs.config import DEFAULT_CONFIG
from toplangs.errors import TransportError, UpstreamError

logger = logging.getLogger(__name__)

T = TypeVar("T")


def retry_with_backoff(
    operation: Callable[[], T],
    retries: int = DEFAULT_CONFIG.fetch_retries,
    initial_delay: float = DEFAULT_CONFIG.retry_initial_delay_s,
    sleep: Callable[[float], None] = time.sleep,
) -> T:
    """Call ``operation`` until it succeeds or the retry budget is spent.

    Args:
        operation: Zero-argument callable performing one attempt.
        retries: Number of retries after the first attempt.
        initial_delay: Seconds to wait before the first retry.
        sleep: Sleep function; injectable so tests can record delays.

    Returns:
        Whatever ``operation`` returns on its first successful attempt.

    Raises:
        UpstreamError: When the final attempt still fails with a
            TransportError. The last failure is attached as ``cause``.
    """
    delay = initial_delay
    attempt = 0

    while True:
        try:
            return operation()
        except TransportError as exc:
            if attempt >= retries:
                logger.warning(
                    "Transport failure on attempt %d/%d — giving up: %s",
                    attempt + 1, retries + 1, exc,
                )
                raise UpstreamError(
                    f"Request failed after {attempt + 1} attempts: {exc}",
                    cause=exc,
                ) from exc
            logger.warning(
                "Transport failure on attempt %d/%d — sleeping %.1fs before retry: %s",
                attempt + 1, retries + 1, delay, exc,
            )
            sleep(delay)
            delay *= 2
            attempt += 1
