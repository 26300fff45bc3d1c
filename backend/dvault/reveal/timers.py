"""
Cancellable scheduled tasks used for auto-masking.

A handle is returned by ``call_after`` and owns exactly one pending callback.
``cancel()`` may be called any number of times, before or after the callback
ran, and never raises.
"""

import asyncio
from collections.abc import Callable
from typing import Optional, Protocol


class TimerHandle(Protocol):
    @property
    def active(self) -> bool: ...

    def cancel(self) -> None: ...


class Scheduler(Protocol):
    def call_after(self, delay: float, callback: Callable[[], None]) -> TimerHandle: ...

    def now(self) -> float: ...


class LoopTimer:
    """Wraps an ``asyncio.TimerHandle`` and tracks whether it already fired."""

    def __init__(self, loop: asyncio.AbstractEventLoop, delay: float, callback: Callable[[], None]):
        self._callback = callback
        self._fired = False
        self._handle: Optional[asyncio.TimerHandle] = loop.call_later(delay, self._fire)

    def _fire(self) -> None:
        if self._handle is None:
            return
        self._fired = True
        self._handle = None
        self._callback()

    @property
    def active(self) -> bool:
        return self._handle is not None

    @property
    def fired(self) -> bool:
        return self._fired

    def cancel(self) -> None:
        if self._handle is not None:
            self._handle.cancel()
            self._handle = None


class LoopScheduler:
    """Schedules callbacks on the running asyncio event loop."""

    def __init__(self, loop: Optional[asyncio.AbstractEventLoop] = None):
        self._loop = loop

    @property
    def loop(self) -> asyncio.AbstractEventLoop:
        if self._loop is None:
            self._loop = asyncio.get_running_loop()
        return self._loop

    def call_after(self, delay: float, callback: Callable[[], None]) -> LoopTimer:
        return LoopTimer(self.loop, max(delay, 0.0), callback)

    def now(self) -> float:
        return self.loop.time()
