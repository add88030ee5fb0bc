"""
Bounded waiting for dependencies that take a while to accept connections.
"""

import logging
import time
from dataclasses import dataclass
from typing import Callable

from .config import LilaDockerConfig
from .models import ReadinessTimeoutError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RetryPolicy:
    """How often and how long to probe before giving up."""

    max_attempts: int = 300
    interval: float = 1.0
    backoff: float = 1.0
    max_interval: float = 10.0

    @classmethod
    def from_config(cls, config: LilaDockerConfig) -> "RetryPolicy":
        return cls(
            max_attempts=config.db_wait_max_attempts,
            interval=config.db_wait_interval,
            backoff=config.db_wait_backoff,
            max_interval=config.db_wait_max_interval,
        )

    def delay(self, attempt: int) -> float:
        """Sleep before the probe following `attempt` (1-based)."""
        return min(self.interval * self.backoff ** (attempt - 1), self.max_interval)


def wait_until(
    probe: Callable[[], bool],
    policy: RetryPolicy,
    description: str,
    clock: Callable[[], float] = time.monotonic,
    sleep: Callable[[float], None] = time.sleep,
) -> int:
    """
    Call `probe` until it returns True.

    Returns:
        Number of attempts it took

    Raises:
        ReadinessTimeoutError: If every attempt allowed by the policy failed
    """
    start_time = clock()

    for attempt in range(1, policy.max_attempts + 1):
        if probe():
            logger.debug(f"{description} ready after {attempt} attempt(s)")
            return attempt

        if attempt == policy.max_attempts:
            break

        logger.info(f"Waiting for {description} to be ready...")
        sleep(policy.delay(attempt))

    raise ReadinessTimeoutError(description, policy.max_attempts, clock() - start_time)
