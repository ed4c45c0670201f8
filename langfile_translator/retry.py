import asyncio
import logging
import random
import time
from dataclasses import dataclass
from typing import Optional

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RetryPolicy:
    """
    Bounded retry policy for backend calls that report "not ready" or fail in transit.

    Attributes:
        max_attempts: Total attempts, the first one included.
        base_delay: Fixed delay in seconds, or the first delay when exponential.
        exponential: Double the delay on every attempt and add up to a second of jitter.
        max_delay: Upper bound for a single delay.
        max_elapsed_seconds: Give up once this much time has passed since the first attempt.
    """
    max_attempts: int = 10
    base_delay: float = 2.0
    exponential: bool = False
    max_delay: float = 30.0
    max_elapsed_seconds: Optional[float] = 120.0

    def delay_for(self, attempt: int) -> float:
        """Delay before the attempt following ``attempt`` (1-based)."""
        if not self.exponential:
            return min(self.base_delay, self.max_delay)
        delay = self.base_delay * (2 ** (attempt - 1)) + random.uniform(0, 1)
        return min(delay, self.max_delay)

    def start(self) -> "RetryState":
        return RetryState(self, time.monotonic())


class RetryState:
    """Tracks the attempts of one logical call."""

    def __init__(self, policy: RetryPolicy, started_at: float):
        self.policy = policy
        self.started_at = started_at
        self.attempt = 1

    def exhausted(self) -> bool:
        if self.attempt >= self.policy.max_attempts:
            return True
        if self.policy.max_elapsed_seconds is None:
            return False
        return time.monotonic() - self.started_at >= self.policy.max_elapsed_seconds

    async def wait(self, reason: str) -> bool:
        """
        Sleep before the next attempt.

        Args:
            reason (str): Why the call is retried, for the log.

        Returns:
            bool: True if the caller should retry, False if the policy is exhausted.
        """
        if self.exhausted():
            logger.error(f"Giving up after {self.attempt} attempt(s): {reason}")
            return False
        delay = self.policy.delay_for(self.attempt)
        logger.info(f"{reason}. Retrying in {delay:.2f} seconds (Attempt {self.attempt}/{self.policy.max_attempts})")
        await asyncio.sleep(delay)
        self.attempt += 1
        return True
