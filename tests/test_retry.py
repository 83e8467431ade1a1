from __future__ import annotations

import pytest

from conftest import RecordingContext
from solus_sdk.exceptions import ErrorKind, SolusError, normalize_http_error
from solus_sdk.retry import RetryPolicy, retry, should_retry


def _failing_attempts(status_code: int, calls: list[int], succeed_on: int | None = None):
    def attempt(number: int):
        calls.append(number)
        if succeed_on is not None and number >= succeed_on:
            return False, None, "ok"
        return should_retry(status_code, None), normalize_http_error(b"", "GET", "servers", status_code), None

    return attempt


@pytest.mark.parametrize("status_code", [500, 502, 503, 0])
def test_retryable_status_exhausts_budget(status_code: int) -> None:
    ctx = RecordingContext()
    calls: list[int] = []
    policy = RetryPolicy(retries=3, retry_after=0.25)

    with pytest.raises(SolusError) as excinfo:
        retry(_failing_attempts(status_code, calls), policy, ctx)

    assert excinfo.value.kind is ErrorKind.RETRIES_EXHAUSTED
    assert str(excinfo.value) == "exceeded retry limit"
    assert calls == [1, 2, 3, 4]
    assert ctx.sleeps == [0.25, 0.25, 0.25]


@pytest.mark.parametrize("status_code", [500, 502, 503, 0])
@pytest.mark.parametrize("succeed_on", [1, 2, 6])
def test_retryable_status_within_budget(status_code: int, succeed_on: int) -> None:
    ctx = RecordingContext()
    calls: list[int] = []

    result = retry(_failing_attempts(status_code, calls, succeed_on=succeed_on), RetryPolicy(), ctx)

    assert result == "ok"
    assert len(calls) == succeed_on
    assert ctx.sleeps == [1.0] * (succeed_on - 1)


def test_default_policy_allows_six_attempts() -> None:
    ctx = RecordingContext()
    calls: list[int] = []

    with pytest.raises(SolusError, match="exceeded retry limit"):
        retry(_failing_attempts(503, calls), RetryPolicy(), ctx)

    assert len(calls) == 6
    assert len(ctx.sleeps) == 5


def test_absolute_ceiling_caps_attempts() -> None:
    ctx = RecordingContext()
    calls: list[int] = []

    with pytest.raises(SolusError, match="exceeded retry limit"):
        retry(_failing_attempts(500, calls), RetryPolicy(retries=50, retry_after=0), ctx)

    assert len(calls) == 10


def test_client_error_is_terminal() -> None:
    ctx = RecordingContext()
    calls: list[int] = []

    def attempt(number: int):
        calls.append(number)
        return should_retry(404, None), normalize_http_error(b"", "GET", "servers/9", 404), None

    with pytest.raises(SolusError) as excinfo:
        retry(attempt, RetryPolicy(), ctx)

    assert excinfo.value.status_code == 404
    assert calls == [1]
    assert ctx.sleeps == []


def test_exhausted_error_chains_last_failure() -> None:
    ctx = RecordingContext()
    last = SolusError(ErrorKind.TRANSPORT, "connection refused")

    with pytest.raises(SolusError) as excinfo:
        retry(lambda number: (True, last, None), RetryPolicy(retries=1, retry_after=0), ctx)

    assert excinfo.value.kind is ErrorKind.RETRIES_EXHAUSTED
    assert excinfo.value.__cause__ is last


def test_cancellation_during_delay_passes_through() -> None:
    ctx = RecordingContext()
    calls: list[int] = []

    def attempt(number: int):
        calls.append(number)
        ctx.cancel()
        return True, SolusError(ErrorKind.TRANSPORT, "connection reset"), None

    with pytest.raises(SolusError) as excinfo:
        retry(attempt, RetryPolicy(), ctx)

    assert excinfo.value.kind is ErrorKind.CANCELLED
    assert str(excinfo.value) == "context canceled"
    assert calls == [1]


@pytest.mark.parametrize(
    ("status_code", "exc", "expected"),
    [
        (None, ConnectionError("refused"), True),
        (0, None, True),
        (500, None, True),
        (504, None, True),
        (200, None, False),
        (204, None, False),
        (404, None, False),
        (422, None, False),
        (429, None, False),
    ],
)
def test_should_retry_classification(status_code: int | None, exc: Exception | None, expected: bool) -> None:
    assert should_retry(status_code, exc) is expected


def test_policy_rejects_invalid_values() -> None:
    with pytest.raises(ValueError):
        RetryPolicy(retries=-1)
    with pytest.raises(ValueError):
        RetryPolicy(retry_after=-0.5)
    with pytest.raises(ValueError):
        RetryPolicy(max_attempts=0)
