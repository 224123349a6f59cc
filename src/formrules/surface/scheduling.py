"""Timer schedulers used to auto-clear message areas.

The only suspended work in the engine is the message auto-clear timer.
Schedulers hand out opaque handles that can be cancelled before they fire.
"""

import asyncio
import logging
import threading
from collections.abc import Callable
from dataclasses import dataclass, field
from typing import Any, Protocol

logger = logging.getLogger(__name__)


class Scheduler(Protocol):
    """Schedules callbacks after a delay in milliseconds."""

    def schedule(self, delay_ms: int, callback: Callable[[], Any]) -> Any: ...

    def cancel(self, handle: Any) -> None: ...


class AsyncioScheduler:
    """Scheduler backed by an asyncio event loop's call_later."""

    def __init__(self, loop: asyncio.AbstractEventLoop | None = None):
        self._loop = loop

    @property
    def loop(self) -> asyncio.AbstractEventLoop:
        if self._loop is None:
            self._loop = asyncio.get_running_loop()
        return self._loop

    def schedule(self, delay_ms: int, callback: Callable[[], Any]) -> asyncio.TimerHandle:
        return self.loop.call_later(delay_ms / 1000, callback)

    def cancel(self, handle: asyncio.TimerHandle) -> None:
        handle.cancel()


class ThreadingScheduler:
    """Scheduler backed by threading.Timer, for hosts without an event loop.

    Callbacks run on the timer's own daemon thread.
    """

    def schedule(self, delay_ms: int, callback: Callable[[], Any]) -> threading.Timer:
        timer = threading.Timer(delay_ms / 1000, callback)
        timer.daemon = True
        timer.start()
        return timer

    def cancel(self, handle: threading.Timer) -> None:
        handle.cancel()


@dataclass(eq=False)
class _ManualTimer:
    due: int
    callback: Callable[[], Any]
    cancelled: bool = False


@dataclass
class ManualScheduler:
    """Scheduler driven by explicit calls to advance().

    Used by the CLI and tests, where there is no event loop to wait on.

    Attributes:
        now: Current virtual time in milliseconds
    """

    now: int = 0
    _timers: list[_ManualTimer] = field(default_factory=list)

    def schedule(self, delay_ms: int, callback: Callable[[], Any]) -> _ManualTimer:
        timer = _ManualTimer(due=self.now + delay_ms, callback=callback)
        self._timers.append(timer)
        return timer

    def cancel(self, handle: _ManualTimer) -> None:
        handle.cancelled = True
        if handle in self._timers:
            self._timers.remove(handle)

    @property
    def pending(self) -> list[_ManualTimer]:
        return [t for t in self._timers if not t.cancelled]

    def advance(self, ms: int) -> int:
        """Move virtual time forward, firing due timers in order.

        Returns:
            Number of callbacks fired
        """
        self.now += ms
        fired = 0
        for timer in sorted(self._timers, key=lambda t: t.due):
            if timer.cancelled or timer.due > self.now:
                continue
            self._timers.remove(timer)
            timer.callback()
            fired += 1
        if fired:
            logger.debug("Fired %d timer(s) at %dms", fired, self.now)
        return fired


def default_scheduler() -> Scheduler:
    """AsyncioScheduler inside a running event loop, else ThreadingScheduler."""
    try:
        loop = asyncio.get_running_loop()
    except RuntimeError:
        return ThreadingScheduler()
    return AsyncioScheduler(loop)
