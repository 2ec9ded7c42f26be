"""Shared rate-limit budget for provider API calls."""

from __future__ import annotations

import logging
import threading
import time
from contextlib import contextmanager
from typing import Generator

from graphsource.context import RequestContext

logger = logging.getLogger("graphsource.limiter")


class LimitBucket:
    """Token bucket with a cap on in-flight requests.

    One instance is shared by every source talking to the same account so
    that the whole process stays within the API's request budget. Each
    ``acquire`` consumes a token (refilled at ``refill_rate`` per second up to
    ``max_capacity``) and occupies one of ``max_in_flight`` slots until
    ``release`` is called.

    Waiters are woken by ``release`` and by their own timed waits, never by
    ``RequestContext.cancel``. A cancelled waiter therefore notices within
    ``poll_interval`` seconds; a deadline is noticed on time because each
    wait is capped by ``ctx.remaining()``.
    """

    def __init__(
        self,
        max_capacity: int = 50,
        refill_rate: float = 20.0,
        max_in_flight: int = 10,
        poll_interval: float = 0.05,
    ) -> None:
        if max_capacity < 1:
            raise ValueError("max_capacity must be at least 1")
        if refill_rate <= 0:
            raise ValueError("refill_rate must be positive")
        if max_in_flight < 1:
            raise ValueError("max_in_flight must be at least 1")
        self.max_capacity = max_capacity
        self.refill_rate = refill_rate
        self.max_in_flight = max_in_flight
        self._poll_interval = poll_interval
        self._tokens = float(max_capacity)
        self._in_flight = 0
        self._last_refill = time.monotonic()
        self._cond = threading.Condition()

    @property
    def in_flight(self) -> int:
        with self._cond:
            return self._in_flight

    def _refill(self) -> None:
        now = time.monotonic()
        elapsed = now - self._last_refill
        self._last_refill = now
        self._tokens = min(float(self.max_capacity), self._tokens + elapsed * self.refill_rate)

    def acquire(self, ctx: RequestContext) -> None:
        """Block until a token and an in-flight slot are free.

        Raises CancelledError / DeadlineExceededError if ``ctx`` finishes
        first.
        """
        waited = False
        with self._cond:
            while True:
                ctx.raise_if_done()
                self._refill()
                if self._tokens >= 1 and self._in_flight < self.max_in_flight:
                    self._tokens -= 1
                    self._in_flight += 1
                    return

                if not waited:
                    logger.debug(
                        "Rate limited, waiting (tokens=%.2f in_flight=%d)",
                        self._tokens, self._in_flight,
                    )
                    waited = True

                timeout = self._poll_interval
                if self._tokens < 1:
                    timeout = min(timeout, (1 - self._tokens) / self.refill_rate)
                remaining = ctx.remaining()
                if remaining is not None:
                    timeout = min(timeout, remaining)
                self._cond.wait(timeout)

    def release(self) -> None:
        with self._cond:
            if self._in_flight == 0:
                raise RuntimeError("release() called without a matching acquire()")
            self._in_flight -= 1
            self._cond.notify()

    @contextmanager
    def slot(self, ctx: RequestContext) -> Generator[None, None, None]:
        self.acquire(ctx)
        try:
            yield
        finally:
            self.release()
