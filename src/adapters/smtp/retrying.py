"""
Retrying email sender - Wraps any EmailSender with bounded retries.

Email delivery is the most failure-prone external call in the
registration flow, so it alone gets retries with exponential backoff.
"""

import logging
import random
import time
from collections.abc import Callable
from dataclasses import dataclass

from src.domain.exceptions import NotificationError
from src.domain.ports import EmailSender

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RetryPolicy:
    """Exponential backoff configuration for delivery retries."""

    max_attempts: int = 3
    initial_delay: float = 0.5  # seconds
    max_delay: float = 5.0  # seconds
    jitter: bool = True

    def __post_init__(self) -> None:
        if self.max_attempts < 1:
            raise ValueError("max_attempts must be at least 1")
        if self.initial_delay < 0:
            raise ValueError("initial_delay must be non-negative")
        if self.max_delay < self.initial_delay:
            raise ValueError("max_delay must be >= initial_delay")

    def calculate_delay(self, attempt: int) -> float:
        """
        Delay before the retry that follows a failed attempt.

        Args:
            attempt: Failed attempt number (1-based)

        Returns:
            Delay in seconds
        """
        if attempt <= 0:
            return 0.0

        delay = min(self.initial_delay * (2 ** (attempt - 1)), self.max_delay)

        # 10% jitter to spread simultaneous retries
        if self.jitter and delay > 0:
            spread = delay * 0.1
            delay = max(0.0, delay + random.uniform(-spread, spread))

        return delay


class RetryingEmailSender:
    """
    Implements EmailSender protocol by delegating to another sender.

    Retries on NotificationError up to policy.max_attempts, then
    re-raises the last error. Other exceptions propagate immediately.
    """

    def __init__(
        self,
        sender: EmailSender,
        policy: RetryPolicy | None = None,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        self._sender = sender
        self._policy = policy or RetryPolicy()
        self._sleep = sleep

    def send_verification_code(self, email: str, code: str) -> None:
        for attempt in range(1, self._policy.max_attempts + 1):
            try:
                self._sender.send_verification_code(email, code)
                return
            except NotificationError as e:
                if attempt == self._policy.max_attempts:
                    raise
                delay = self._policy.calculate_delay(attempt)
                logger.warning(
                    "Delivery attempt %d/%d to %s failed (%s); retrying in %.2fs",
                    attempt,
                    self._policy.max_attempts,
                    email,
                    e,
                    delay,
                )
                self._sleep(delay)
