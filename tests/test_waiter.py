from __future__ import annotations

import time

import pytest

from conftest import RecordingContext
from solus_sdk.context import Context
from solus_sdk.exceptions import ErrorKind, SolusError
from solus_sdk.waiter import wait_for


def test_wait_for_stops_on_first_true() -> None:
    ctx = RecordingContext()
    results = iter([False, False, True])
    calls: list[int] = []

    def predicate() -> bool:
        calls.append(1)
        return next(results)

    wait_for(ctx, 2.5, predicate)

    assert len(calls) == 3
    assert ctx.sleeps == [2.5, 2.5, 2.5]


def test_wait_for_propagates_predicate_error() -> None:
    ctx = RecordingContext()
    calls: list[int] = []
    boom = SolusError(ErrorKind.TASK_FAILED, "disk is full")

    def predicate() -> bool:
        calls.append(1)
        if len(calls) == 2:
            raise boom
        return False

    with pytest.raises(SolusError) as excinfo:
        wait_for(ctx, 1, predicate)

    assert excinfo.value is boom
    assert len(calls) == 2


def test_wait_for_with_cancelled_context_never_polls() -> None:
    ctx = Context()
    ctx.cancel()
    calls: list[int] = []

    with pytest.raises(SolusError, match="context canceled"):
        wait_for(ctx, 0.01, lambda: calls.append(1) or True)

    assert calls == []


def test_wait_for_with_elapsed_deadline_never_polls() -> None:
    ctx = Context.with_deadline(time.monotonic() - 0.001)
    calls: list[int] = []

    with pytest.raises(SolusError) as excinfo:
        wait_for(ctx, 0.01, lambda: calls.append(1) or True)

    assert excinfo.value.kind is ErrorKind.CANCELLED
    assert str(excinfo.value) == "context deadline exceeded"
    assert calls == []


def test_wait_for_deadline_ends_long_wait() -> None:
    ctx = Context.with_timeout(0.05)

    started = time.monotonic()
    with pytest.raises(SolusError, match="context deadline exceeded"):
        wait_for(ctx, 0.01, lambda: False)
    assert time.monotonic() - started < 5


@pytest.mark.parametrize("interval", [0, -1])
def test_wait_for_rejects_non_positive_interval(interval: float) -> None:
    with pytest.raises(ValueError):
        wait_for(RecordingContext(), interval, lambda: True)
