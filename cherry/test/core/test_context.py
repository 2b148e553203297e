"""Tests for cherry.core.context module."""

from __future__ import annotations

import threading
import time

from cherry.core.context import CANCELED, DEADLINE_EXCEEDED, Cancelled, Context


class TestContext:
    def test_background_never_expires(self) -> None:
        ctx = Context.background()
        assert ctx.deadline is None
        assert ctx.remaining() is None
        assert ctx.err() is None
        assert not ctx.done

    def test_cancel(self) -> None:
        ctx = Context.background()
        ctx.cancel()
        assert ctx.err() == Cancelled(CANCELED)
        assert ctx.done

    def test_cancel_is_idempotent(self) -> None:
        ctx = Context.background()
        ctx.cancel()
        ctx.cancel()
        assert ctx.err() == Cancelled(CANCELED)

    def test_with_timeout_none(self) -> None:
        assert Context.with_timeout(None).deadline is None

    def test_deadline_exceeded(self) -> None:
        ctx = Context.with_timeout(0)
        assert ctx.err() == Cancelled(DEADLINE_EXCEEDED)
        assert ctx.remaining() == 0.0

    def test_remaining_counts_down(self) -> None:
        ctx = Context.with_timeout(30.0)
        remaining = ctx.remaining()
        assert remaining is not None
        assert 0 < remaining <= 30.0
        assert ctx.err() is None

    def test_cancel_wins_over_deadline(self) -> None:
        ctx = Context.with_timeout(0)
        ctx.cancel()
        assert ctx.err() == Cancelled(CANCELED)

    def test_cancel_from_another_thread(self) -> None:
        ctx = Context.background()
        thread = threading.Thread(target=ctx.cancel)
        thread.start()
        thread.join()
        assert ctx.done

    def test_short_deadline_expires(self) -> None:
        ctx = Context.with_timeout(0.01)
        time.sleep(0.05)
        assert ctx.err() == Cancelled(DEADLINE_EXCEEDED)


def test_cancelled_message() -> None:
    error = Cancelled(DEADLINE_EXCEEDED)
    assert str(error) == "context deadline exceeded"
    assert error.message == "context deadline exceeded"
