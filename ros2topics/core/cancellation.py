"""
ros2topics Cancellation - Cooperative stop signal for the publish and echo loops.

cancel() is called from a SIGINT handler, so it only flips a flag: no locks,
nothing that could already be held by the interrupted main thread.
"""

import logging
import time

logger = logging.getLogger(__name__)

# Longest sleep between two checks of the flag while waiting
POLL_INTERVAL_SEC = 0.05


class CancellationToken:
    """
    Stop flag checked once per loop iteration.

    Usage:
        token = CancellationToken()
        signal.signal(signal.SIGINT, lambda *_: token.cancel())
        while not token.cancelled:
            ...
            if token.wait(0.5):
                break
    """

    def __init__(self):
        self._cancelled = False

    @property
    def cancelled(self) -> bool:
        return self._cancelled

    def cancel(self) -> None:
        self._cancelled = True

    def wait(self, timeout: float) -> bool:
        """Sleep up to timeout seconds. Returns True if cancelled meanwhile."""
        deadline = time.monotonic() + timeout
        while not self._cancelled:
            remaining = deadline - time.monotonic()
            if remaining <= 0:
                break
            time.sleep(min(remaining, POLL_INTERVAL_SEC))

        if self._cancelled:
            logger.debug("Wait ended by cancellation")
        return self._cancelled
