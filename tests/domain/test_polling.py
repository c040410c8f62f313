from __future__ import annotations

import asyncio
import logging

import pytest

from vcstatus.domain.polling import PollingTimeoutError, StatusWatcher, poll_until_terminal


class _Sequence:
    def __init__(self, values: list[str]) -> None:
        self._values = values
        self.calls = 0

    async def __call__(self) -> str:
        value = self._values[min(self.calls, len(self._values) - 1)]
        self.calls += 1
        return value


class _RecordingSleep:
    def __init__(self) -> None:
        self.delays: list[float] = []

    async def __call__(self, seconds: float) -> None:
        self.delays.append(seconds)


def test_poll_returns_first_terminal_value() -> None:
    fetch = _Sequence(["request-sent", "presentation-received", "verified", "done"])
    sleep = _RecordingSleep()

    result = asyncio.run(
        poll_until_terminal(
            fetch,
            is_terminal=lambda state: state in {"verified", "done"},
            interval_seconds=3.0,
            sleep=sleep,
        )
    )

    assert result == "verified"
    assert fetch.calls == 3
    assert sleep.delays == [3.0, 3.0]


def test_poll_does_not_sleep_when_already_terminal() -> None:
    fetch = _Sequence(["active"])
    sleep = _RecordingSleep()

    result = asyncio.run(
        poll_until_terminal(fetch, is_terminal=lambda state: state == "active", sleep=sleep)
    )

    assert result == "active"
    assert sleep.delays == []


def test_poll_gives_up_after_max_attempts() -> None:
    fetch = _Sequence(["request"])

    with pytest.raises(PollingTimeoutError) as excinfo:
        asyncio.run(
            poll_until_terminal(
                fetch,
                is_terminal=lambda _state: False,
                max_attempts=4,
                sleep=_RecordingSleep(),
            )
        )

    assert excinfo.value.attempts == 4
    assert excinfo.value.last == "request"
    assert fetch.calls == 4


def test_poll_recovers_from_transient_fetch_errors(caplog: pytest.LogCaptureFixture) -> None:
    outcomes: list[str | Exception] = [ConnectionError("verifier down"), "request-sent", "done"]
    sleep = _RecordingSleep()

    async def flaky() -> str:
        outcome = outcomes.pop(0)
        if isinstance(outcome, Exception):
            raise outcome
        return outcome

    with caplog.at_level(logging.WARNING, logger="vcstatus.domain.polling"):
        result = asyncio.run(
            poll_until_terminal(
                flaky,
                is_terminal=lambda state: state == "done",
                transient_errors=(ConnectionError,),
                sleep=sleep,
            )
        )

    assert result == "done"
    assert sleep.delays == [3.0, 3.0]
    assert "Polling attempt 1 failed: verifier down" in caplog.text


def test_poll_counts_failed_fetches_towards_max_attempts() -> None:
    async def failing() -> str:
        raise ConnectionError("verifier down")

    with pytest.raises(PollingTimeoutError) as excinfo:
        asyncio.run(
            poll_until_terminal(
                failing,
                is_terminal=lambda _state: True,
                max_attempts=3,
                transient_errors=(ConnectionError,),
                sleep=_RecordingSleep(),
            )
        )

    assert excinfo.value.attempts == 3
    assert isinstance(excinfo.value.last, ConnectionError)


def test_poll_propagates_unexpected_fetch_errors() -> None:
    async def failing() -> str:
        raise KeyError("bug")

    with pytest.raises(KeyError, match="bug"):
        asyncio.run(
            poll_until_terminal(
                failing,
                is_terminal=lambda _state: True,
                transient_errors=(ConnectionError,),
            )
        )


@pytest.mark.parametrize(
    ("interval", "max_attempts"),
    [(-1.0, None), (1.0, 0)],
)
def test_poll_rejects_invalid_settings(interval: float, max_attempts: int | None) -> None:
    with pytest.raises(ValueError):
        asyncio.run(
            poll_until_terminal(
                _Sequence(["x"]),
                is_terminal=lambda _state: True,
                interval_seconds=interval,
                max_attempts=max_attempts,
            )
        )


def test_watcher_returns_result() -> None:
    async def scenario() -> str:
        fetch = _Sequence(["invitation", "response", "active"])
        async with StatusWatcher(
            fetch,
            is_terminal=lambda state: state == "active",
            sleep=_RecordingSleep(),
        ) as watcher:
            return await watcher.result()

    assert asyncio.run(scenario()) == "active"


def test_watcher_cancel_stops_polling() -> None:
    async def scenario() -> tuple[bool, int]:
        fetch = _Sequence(["request"])
        watcher = StatusWatcher(fetch, is_terminal=lambda _state: False, interval_seconds=0.01)
        async with watcher:
            await asyncio.sleep(0.05)
            assert watcher.running
        calls_at_exit = fetch.calls
        await asyncio.sleep(0.05)
        assert fetch.calls == calls_at_exit
        return watcher.running, fetch.calls

    running, calls = asyncio.run(scenario())

    assert running is False
    assert calls >= 1


def test_watcher_cannot_start_twice() -> None:
    async def scenario() -> None:
        watcher = StatusWatcher(_Sequence(["active"]), is_terminal=lambda _state: True)
        watcher.start()
        try:
            watcher.start()
        finally:
            await watcher.cancel()

    with pytest.raises(RuntimeError, match="already started"):
        asyncio.run(scenario())


def test_watcher_result_requires_start() -> None:
    watcher = StatusWatcher(_Sequence(["active"]), is_terminal=lambda _state: True)

    with pytest.raises(RuntimeError, match="not started"):
        asyncio.run(watcher.result())
