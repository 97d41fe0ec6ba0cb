"""Cancellation and deadline context for API calls.

Every public operation takes an optional ``ctx``. The transport checks it
before sending a request, stops waiting for the response as soon as the
context is cancelled or its deadline passes, and bounds the HTTP timeout by
the time left before the deadline.

Example
-------
>>> ctx = Context(timeout=5)
>>> client.auth.authenticate("jane@example.com", "secret", ctx=ctx)
"""

import threading
import time
from typing import Callable, Optional

from .utils.exceptions import DeadlineExceeded, RequestCancelled


class Context:
    """Caller-controlled cancellation flag with an optional deadline."""

    def __init__(
        self,
        timeout: Optional[float] = None,
        clock: Callable[[], float] = time.monotonic,
    ):
        """
        Initialize a context.

        Args:
            timeout: Seconds from now until the deadline (None for no deadline)
            clock: Monotonic time source
        """
        self._clock = clock
        self._cancelled = threading.Event()
        self._lock = threading.Lock()
        self._callbacks: list[Callable[[], None]] = []
        self.deadline: Optional[float] = clock() + timeout if timeout is not None else None

    @classmethod
    def background(cls) -> "Context":
        """Context that is never cancelled and has no deadline."""
        return cls()

    def cancel(self) -> None:
        with self._lock:
            self._cancelled.set()
            callbacks, self._callbacks = self._callbacks, []
        for callback in callbacks:
            callback()

    def on_cancel(self, callback: Callable[[], None]) -> Callable[[], None]:
        """
        Run ``callback`` when the context is cancelled.

        The callback runs at once if the context is already cancelled.

        Returns:
            Function that unregisters the callback
        """
        with self._lock:
            if not self._cancelled.is_set():
                self._callbacks.append(callback)
                return lambda: self._discard(callback)
        callback()
        return lambda: None

    def _discard(self, callback: Callable[[], None]) -> None:
        with self._lock:
            if callback in self._callbacks:
                self._callbacks.remove(callback)

    @property
    def cancelled(self) -> bool:
        return self._cancelled.is_set()

    def remaining(self) -> Optional[float]:
        """Seconds left before the deadline, None when there is none."""
        if self.deadline is None:
            return None
        return max(0.0, self.deadline - self._clock())

    def raise_if_done(self) -> None:
        """
        Abort if the context is cancelled or past its deadline.

        Raises:
            RequestCancelled: If cancel() was called
            DeadlineExceeded: If the deadline passed
        """
        if self.cancelled:
            raise RequestCancelled("context cancelled")
        if self.deadline is not None and self._clock() >= self.deadline:
            raise DeadlineExceeded("context deadline exceeded")
