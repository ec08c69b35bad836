"""Caller-supplied deadlines for graph traversals."""

import threading
import time

from family_tree.errors import TraversalCancelled


class Deadline:
    """A timeout plus an explicit cancel switch.

    Traversals call ``check()`` at every step and stop as soon as either the
    timeout passes or ``cancel()`` has been called from another thread.
    """

    def __init__(self, timeout: float | None = None):
        """Initialize the deadline.

        Args:
            timeout: Seconds from now until expiry (None for no time limit)
        """
        self._expires_at = time.monotonic() + timeout if timeout is not None else None
        self._cancelled = threading.Event()

    def cancel(self) -> None:
        """Cancel every traversal watching this deadline."""
        self._cancelled.set()

    @property
    def cancelled(self) -> bool:
        return self._cancelled.is_set()

    @property
    def expired(self) -> bool:
        if self.cancelled:
            return True
        return self._expires_at is not None and time.monotonic() >= self._expires_at

    def remaining(self) -> float | None:
        """Seconds left before expiry, or None without a time limit."""
        if self._expires_at is None:
            return None
        return max(0.0, self._expires_at - time.monotonic())

    def check(self) -> None:
        """Raise TraversalCancelled once the deadline has passed."""
        if self.cancelled:
            raise TraversalCancelled("traversal cancelled by caller")
        if self.expired:
            raise TraversalCancelled("traversal deadline exceeded")


def check_deadline(deadline: Deadline | None) -> None:
    if deadline is not None:
        deadline.check()
