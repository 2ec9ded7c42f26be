"""Caller-supplied cancellation for blocking discovery calls."""

from __future__ import annotations

import threading
import time
from typing import Optional

from graphsource.errors import CancelledError, DeadlineExceededError


class RequestContext:
    """Thread-safe cancellation token with an optional deadline.

    Pass one per request. Waiting code polls ``done()`` or ``err()``; any
    thread may call ``cancel()``.
    """

    def __init__(self, deadline: Optional[float] = None) -> None:
        # deadline is a time.monotonic() value
        self._deadline = deadline
        self._cancelled = threading.Event()

    @classmethod
    def with_timeout(cls, seconds: float) -> "RequestContext":
        return cls(deadline=time.monotonic() + seconds)

    def cancel(self) -> None:
        self._cancelled.set()

    def remaining(self) -> Optional[float]:
        """Seconds until the deadline, or None without one."""
        if self._deadline is None:
            return None
        return max(self._deadline - time.monotonic(), 0.0)

    def done(self) -> bool:
        return self.err() is not None

    def err(self) -> Optional[CancelledError]:
        """Return the error describing why the context is done, if it is."""
        if self._cancelled.is_set():
            return CancelledError("context cancelled")
        if self._deadline is not None and time.monotonic() >= self._deadline:
            return DeadlineExceededError("context deadline exceeded")
        return None

    def raise_if_done(self) -> None:
        exc = self.err()
        if exc is not None:
            raise exc


def background() -> RequestContext:
    """A context that is never cancelled unless cancel() is called."""
    return RequestContext()
