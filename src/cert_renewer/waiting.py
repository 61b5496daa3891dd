"""Cancellation-aware sleeping for the workflow's polling loops."""

from __future__ import annotations

import threading
import time
from collections.abc import Callable

from cert_renewer.errors import WorkflowCancelledError, WorkflowDeadlineError


class Waiter:
    """Sleeps between poll attempts, honouring an optional deadline and an external cancel signal.

    Every polling loop in the workflow sleeps through one shared ``Waiter`` so a
    single ``cancel()`` (or the deadline expiring) aborts whichever loop is
    currently running instead of letting it spin until its own retry budget.
    """

    def __init__(
        self,
        timeout_seconds: float | None = None,
        cancel_event: threading.Event | None = None,
        _clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self._clock = _clock
        self._cancel_event = cancel_event or threading.Event()
        self._deadline = None if timeout_seconds is None else _clock() + timeout_seconds

    def cancel(self) -> None:
        self._cancel_event.set()

    def remaining(self) -> float | None:
        """Seconds left before the deadline, or None when there is no deadline."""
        if self._deadline is None:
            return None
        return max(0.0, self._deadline - self._clock())

    def check(self) -> None:
        """Raise if the workflow has been cancelled or its deadline has passed."""
        if self._cancel_event.is_set():
            raise WorkflowCancelledError("Workflow cancelled")
        if self._deadline is not None and self._clock() >= self._deadline:
            raise WorkflowDeadlineError("Workflow deadline exceeded")

    def attempt_timeout(self, timeout: float) -> float:
        """Clamp a per-attempt timeout so a single call cannot outlive the deadline."""
        self.check()
        remaining = self.remaining()
        return timeout if remaining is None else min(timeout, remaining)

    def sleep(self, seconds: float) -> None:
        self.check()
        remaining = self.remaining()
        delay = seconds if remaining is None else min(seconds, remaining)
        if delay > 0:
            self._cancel_event.wait(delay)
        self.check()
