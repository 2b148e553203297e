"""Cooperative cancellation for command execution.

A single Context is created per CLI invocation and passed down to every
process spawn. Cancelling it (or reaching its deadline) makes the runner kill
the in-flight child and makes every later spawn return immediately.

Usage:
    ctx = Context.with_timeout(60.0)
    signal.signal(signal.SIGINT, lambda *_: ctx.cancel())
    result = run(ctx, workdir, ["go", "build", "./..."])
"""

from __future__ import annotations

import threading
import time
from dataclasses import dataclass

__all__ = ["Cancelled", "Context", "CANCELED", "DEADLINE_EXCEEDED"]

CANCELED = "context canceled"
DEADLINE_EXCEEDED = "context deadline exceeded"


@dataclass(frozen=True, slots=True)
class Cancelled:
    """Error returned when work stops because its context is done.

    Attributes:
        reason: CANCELED or DEADLINE_EXCEEDED
    """

    reason: str

    @property
    def message(self) -> str:
        return self.reason

    def __str__(self) -> str:
        return self.reason


class Context:
    """Cancellation token with an optional monotonic deadline.

    Safe to cancel from a signal handler or another thread; everything else
    assumes single-threaded use.
    """

    def __init__(self, deadline: float | None = None) -> None:
        self._deadline = deadline
        self._cancelled = threading.Event()

    @classmethod
    def background(cls) -> Context:
        """A context that is only done when cancelled explicitly."""
        return cls()

    @classmethod
    def with_timeout(cls, seconds: float | None) -> Context:
        """A context whose deadline is ``seconds`` from now (None: no deadline)."""
        if seconds is None:
            return cls()
        return cls(deadline=time.monotonic() + seconds)

    @property
    def deadline(self) -> float | None:
        return self._deadline

    def cancel(self) -> None:
        self._cancelled.set()

    def remaining(self) -> float | None:
        """Seconds until the deadline, clamped at 0. None without a deadline."""
        if self._deadline is None:
            return None
        return max(self._deadline - time.monotonic(), 0.0)

    def err(self) -> Cancelled | None:
        """Why the context is done, or None while it is still live."""
        if self._cancelled.is_set():
            return Cancelled(CANCELED)
        if self._deadline is not None and time.monotonic() >= self._deadline:
            return Cancelled(DEADLINE_EXCEEDED)
        return None

    @property
    def done(self) -> bool:
        return self.err() is not None
