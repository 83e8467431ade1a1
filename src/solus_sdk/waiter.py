"""Blocking wait for server-side convergence."""

from __future__ import annotations

import logging
from typing import Callable

from .context import Context, ensure_context

logger = logging.getLogger(__name__)

DEFAULT_POLL_INTERVAL = 5.0


def wait_for(ctx: Context | None, interval: float, predicate: Callable[[], bool]) -> None:
    """Call ``predicate`` every ``interval`` seconds until it returns ``True``.

    The first call happens one interval after entry. An exception raised by
    the predicate ends the wait immediately and propagates unchanged; only a
    ``False`` result keeps polling. Cancellation or an elapsed deadline on
    ``ctx`` raises the context error right away, even in the middle of an
    interval, and a context that is already done never reaches the
    predicate. There is no built-in time limit: derive a context with a
    deadline to bound the wait.
    """
    if interval <= 0:
        raise ValueError("interval must be greater than 0")
    ctx = ensure_context(ctx)
    tick = 0
    while True:
        ctx.sleep(interval)
        tick += 1
        if predicate():
            logger.debug("Wait finished", extra={"ticks": tick})
            return
