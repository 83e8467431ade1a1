"""Cancellation and deadline propagation for blocking SDK calls."""

from __future__ import annotations

import threading
import time
import weakref

from .exceptions import ErrorKind, SolusError


CANCELED_MESSAGE = "context canceled"
DEADLINE_EXCEEDED_MESSAGE = "context deadline exceeded"


class Context:
    """Caller-owned cancellation token with an optional deadline.

    Every blocking operation of the client accepts one. Only the waits between
    retry attempts and poll ticks are interruptible; a request already handed
    to the HTTP transport runs until it completes or hits its own timeout.
    Cancelling a parent also cancels the contexts derived from it. A parent
    holds its children weakly, so derived contexts are freed once the caller
    drops them.
    """

    def __init__(self, *, deadline: float | None = None, parent: Context | None = None) -> None:
        if parent is not None and parent.deadline is not None:
            deadline = parent.deadline if deadline is None else min(deadline, parent.deadline)
        self.deadline = deadline
        self._cancelled = threading.Event()
        self._children: weakref.WeakSet[Context] = weakref.WeakSet()
        self._lock = threading.Lock()
        if parent is not None:
            parent._attach(self)

    @classmethod
    def background(cls) -> Context:
        return cls()

    @classmethod
    def with_timeout(cls, seconds: float, *, parent: Context | None = None) -> Context:
        return cls(deadline=time.monotonic() + seconds, parent=parent)

    @classmethod
    def with_deadline(cls, deadline: float, *, parent: Context | None = None) -> Context:
        """Derive a context expiring at ``deadline`` (a ``time.monotonic()`` value)."""
        return cls(deadline=deadline, parent=parent)

    def _attach(self, child: Context) -> None:
        with self._lock:
            self._children.add(child)
        if self._cancelled.is_set():
            child.cancel()

    def cancel(self) -> None:
        self._cancelled.set()
        with self._lock:
            children = list(self._children)
        for child in children:
            child.cancel()

    def remaining(self) -> float | None:
        if self.deadline is None:
            return None
        return max(0.0, self.deadline - time.monotonic())

    def err(self) -> SolusError | None:
        """Return the cancellation error, or ``None`` while the context is live."""
        if self._cancelled.is_set():
            return SolusError(ErrorKind.CANCELLED, CANCELED_MESSAGE)
        if self.deadline is not None and time.monotonic() >= self.deadline:
            return SolusError(ErrorKind.CANCELLED, DEADLINE_EXCEEDED_MESSAGE)
        return None

    def raise_if_done(self) -> None:
        error = self.err()
        if error is not None:
            raise error

    def sleep(self, seconds: float) -> None:
        """Block for ``seconds`` unless the context ends first.

        Raises the context error as soon as the context is cancelled or its
        deadline passes, without waiting for the full delay.
        """
        self.raise_if_done()
        end = time.monotonic() + max(0.0, seconds)
        while True:
            now = time.monotonic()
            timeout = end - now
            if self.deadline is not None:
                timeout = min(timeout, self.deadline - now)
            if timeout <= 0:
                break
            if self._cancelled.wait(timeout):
                break
        self.raise_if_done()

    @property
    def done(self) -> bool:
        return self.err() is not None


def ensure_context(ctx: Context | None) -> Context:
    return ctx if ctx is not None else Context.background()
