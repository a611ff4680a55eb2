import pytest
from querybot.core.common.exceptions import QueryParseError, QueryTransportError
from querybot.core.services.retry import RetryPolicy, retry_async


class Flaky:
    def __init__(self, failures: list[BaseException], result: str = "ok") -> None:
        self.failures = list(failures)
        self.result = result
        self.calls = 0

    async def __call__(self) -> str:
        self.calls += 1
        if self.failures:
            raise self.failures.pop(0)
        return self.result


@pytest.mark.asyncio
async def test_first_success_needs_no_sleep(sleep_recorder) -> None:
    op = Flaky([])

    result = await retry_async(
        op, RetryPolicy(3, 0.25), (QueryTransportError,), sleep=sleep_recorder
    )

    assert result == "ok"
    assert op.calls == 1
    assert sleep_recorder.delays == []


@pytest.mark.asyncio
async def test_retries_until_success(sleep_recorder) -> None:
    op = Flaky([QueryTransportError(), QueryTransportError()])

    result = await retry_async(
        op, RetryPolicy(3, 0.25), (QueryTransportError,), sleep=sleep_recorder
    )

    assert result == "ok"
    assert op.calls == 3
    assert sleep_recorder.delays == [0.25, 0.25]


@pytest.mark.asyncio
async def test_exhaustion_reraises_last_error(sleep_recorder) -> None:
    errors = [QueryTransportError("one"), QueryTransportError("two")]
    op = Flaky(list(errors))

    with pytest.raises(QueryTransportError) as exc_info:
        await retry_async(
            op, RetryPolicy(2, 0.1), (QueryTransportError,), sleep=sleep_recorder
        )

    assert exc_info.value is errors[1]
    assert op.calls == 2
    assert sleep_recorder.delays == [0.1]


@pytest.mark.asyncio
async def test_unlisted_errors_are_not_retried(sleep_recorder) -> None:
    op = Flaky([QueryParseError()])

    with pytest.raises(QueryParseError):
        await retry_async(
            op, RetryPolicy(3, 0.25), (QueryTransportError,), sleep=sleep_recorder
        )

    assert op.calls == 1
    assert sleep_recorder.delays == []


@pytest.mark.parametrize(("attempts", "delay"), [(0, 0.1), (-1, 0.1), (1, -0.5)])
def test_invalid_policy(attempts: int, delay: float) -> None:
    with pytest.raises(ValueError):
        RetryPolicy(attempts, delay)
