import pytest

from substore.shared.core.exceptions import CorruptStateError, StorageIOError
from substore.shared.core.retry import RetryPolicy, run_with_backoff


def test_policy_arithmetic():
    policy = RetryPolicy(max_retries=3, base_delay=1.0)

    assert policy.max_attempts == 4
    assert [policy.delay_before_retry(n) for n in (1, 2, 3)] == [1.0, 2.0, 3.0]


@pytest.mark.asyncio
async def test_exhausted_retries_sleep_linearly(recording_sleep):
    attempts = []
    failures = []

    async def always_fails(retry_count):
        attempts.append(retry_count)
        raise StorageIOError("backend down", operation="get")

    with pytest.raises(StorageIOError, match="backend down"):
        await run_with_backoff(
            always_fails,
            RetryPolicy(max_retries=3, base_delay=1.0),
            recording_sleep,
            operation="load",
            on_failure=lambda error, retry_count: failures.append(retry_count),
        )

    assert attempts == [0, 1, 2, 3]
    assert failures == [0, 1, 2, 3]
    assert recording_sleep.delays == [1.0, 2.0, 3.0]


@pytest.mark.asyncio
async def test_backoff_scales_with_base_delay(recording_sleep):
    async def always_fails(retry_count):
        raise StorageIOError()

    with pytest.raises(StorageIOError):
        await run_with_backoff(always_fails, RetryPolicy(max_retries=2, base_delay=0.5), recording_sleep)

    assert recording_sleep.delays == [0.5, 1.0]


@pytest.mark.asyncio
async def test_success_after_transient_failures(recording_sleep):
    calls = {"n": 0}

    async def flaky(retry_count):
        calls["n"] += 1
        if calls["n"] < 3:
            raise StorageIOError("hiccup")
        return "ok"

    result = await run_with_backoff(flaky, RetryPolicy(), recording_sleep)

    assert result == "ok"
    assert recording_sleep.delays == [1.0, 2.0]


@pytest.mark.asyncio
async def test_permanent_error_is_not_retried(recording_sleep):
    calls = {"n": 0}

    async def corrupt(retry_count):
        calls["n"] += 1
        raise CorruptStateError("bad bytes")

    with pytest.raises(CorruptStateError):
        await run_with_backoff(corrupt, RetryPolicy(), recording_sleep)

    assert calls["n"] == 1
    assert recording_sleep.delays == []


@pytest.mark.asyncio
async def test_zero_retries_means_single_attempt(recording_sleep):
    calls = {"n": 0}

    async def fails(retry_count):
        calls["n"] += 1
        raise StorageIOError()

    with pytest.raises(StorageIOError):
        await run_with_backoff(fails, RetryPolicy(max_retries=0), recording_sleep)

    assert calls["n"] == 1
    assert recording_sleep.delays == []
