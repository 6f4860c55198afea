"""
Cancellation and deadline signal shared by the gateway and the orchestrator
"""

import time
import threading
import logging
from typing import Optional

from ..common.errors import OperationCancelledError

logger = logging.getLogger(__name__)


class CancellationToken:
    """
    Thread-safe cancellation flag with an optional deadline

    Another thread may call cancel() at any time. Waits performed through
    sleep() or wait() wake up immediately when that happens.
    """

    def __init__(self, timeout: Optional[float] = None):
        """
        Args:
            timeout: Seconds from now until the token expires (None = never)
        """
        self._event = threading.Event()
        self._deadline = time.monotonic() + timeout if timeout is not None else None

    def cancel(self) -> None:
        logger.info("Cancellation requested")
        self._event.set()

    @property
    def cancelled(self) -> bool:
        if self._event.is_set():
            return True
        return self._deadline is not None and time.monotonic() >= self._deadline

    def remaining(self) -> Optional[float]:
        """Seconds left before the deadline, or None without a deadline"""
        if self._deadline is None:
            return None
        return max(0.0, self._deadline - time.monotonic())

    def sleep(self, seconds: float) -> bool:
        """
        Wait up to `seconds`, returning early on cancellation

        Returns:
            True if the full wait elapsed, False if cancelled
        """
        remaining = self.remaining()
        if remaining is not None and remaining < seconds:
            self._event.wait(remaining)
            return False
        return not self._event.wait(seconds)

    def wait(self, seconds: float) -> bool:
        """Block up to `seconds` (less if the deadline is sooner), return cancelled"""
        remaining = self.remaining()
        if remaining is not None:
            seconds = min(seconds, remaining)
        self._event.wait(seconds)
        return self.cancelled

    def raise_if_cancelled(self) -> None:
        if self.cancelled:
            reason = "cancelled" if self._event.is_set() else "deadline exceeded"
            raise OperationCancelledError(f"Operation {reason}")
