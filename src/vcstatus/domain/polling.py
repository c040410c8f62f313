"""Fixed-interval polling for external exchange state.

The loop stops as soon as a terminal value is observed. ``StatusWatcher`` owns
the loop as an ``asyncio.Task`` so the caller can tear it down, and always
cancels it when used as an async context manager.
"""

from __future__ import annotations

import asyncio
from logging import getLogger
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Awaitable, Callable
    from types import TracebackType

log = getLogger(__name__)

DEFAULT_POLL_INTERVAL_SECONDS = 3.0


class PollingTimeoutError(RuntimeError):
    """Raised when polling gives up before a terminal state is observed."""

    def __init__(self, attempts: int, last: object) -> None:
        super().__init__(f"No terminal state after {attempts} attempts (last: {last!r})")
        self.attempts = attempts
        self.last = last


async def poll_until_terminal[T](
    fetch: Callable[[], Awaitable[T]],
    *,
    is_terminal: Callable[[T], bool],
    interval_seconds: float = DEFAULT_POLL_INTERVAL_SECONDS,
    max_attempts: int | None = None,
    transient_errors: tuple[type[Exception], ...] = (),
    sleep: Callable[[float], Awaitable[object]] = asyncio.sleep,
) -> T:
    """Call ``fetch`` until ``is_terminal`` accepts its result.

    A fetch failing with one of ``transient_errors`` is logged and counts as an
    attempt; polling carries on. Any other error propagates, as does
    cancellation of the pending ``fetch`` or ``sleep``.
    """

    if interval_seconds < 0:
        raise ValueError("Polling interval must be non-negative")
    if max_attempts is not None and max_attempts < 1:
        raise ValueError("max_attempts must be at least 1")

    attempts = 0
    last: object = None
    while True:
        attempts += 1
        try:
            value = await fetch()
        except transient_errors as exc:
            log.warning("Polling attempt %s failed: %s", attempts, exc)
            last = exc
        else:
            if is_terminal(value):
                log.debug("Polling reached terminal value after %s attempts", attempts)
                return value
            last = value
        if max_attempts is not None and attempts >= max_attempts:
            raise PollingTimeoutError(attempts, last)
        await sleep(interval_seconds)


class StatusWatcher[T]:
    """Run ``poll_until_terminal`` in a background task owned by the caller."""

    def __init__(
        self,
        fetch: Callable[[], Awaitable[T]],
        *,
        is_terminal: Callable[[T], bool],
        interval_seconds: float = DEFAULT_POLL_INTERVAL_SECONDS,
        max_attempts: int | None = None,
        transient_errors: tuple[type[Exception], ...] = (),
        sleep: Callable[[float], Awaitable[object]] = asyncio.sleep,
    ) -> None:
        self._fetch = fetch
        self._is_terminal = is_terminal
        self._interval_seconds = interval_seconds
        self._max_attempts = max_attempts
        self._transient_errors = transient_errors
        self._sleep = sleep
        self._task: asyncio.Task[T] | None = None

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    def start(self) -> asyncio.Task[T]:
        if self._task is not None:
            raise RuntimeError("Watcher already started")
        self._task = asyncio.create_task(
            poll_until_terminal(
                self._fetch,
                is_terminal=self._is_terminal,
                interval_seconds=self._interval_seconds,
                max_attempts=self._max_attempts,
                transient_errors=self._transient_errors,
                sleep=self._sleep,
            )
        )
        return self._task

    async def result(self) -> T:
        if self._task is None:
            raise RuntimeError("Watcher not started")
        return await self._task

    async def cancel(self) -> None:
        task = self._task
        if task is None or task.done():
            return
        task.cancel()
        try:
            await task
        except asyncio.CancelledError:
            log.debug("Status watcher cancelled")

    async def __aenter__(self) -> StatusWatcher[T]:
        self.start()
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        await self.cancel()
