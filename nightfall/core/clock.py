"""
Clock abstraction driving timed waits (night decisions, day voting window).
"""

import asyncio
import time
from abc import ABC, abstractmethod
from typing import Awaitable, Optional, TypeVar

T = TypeVar("T")


class Clock(ABC):
    """Source of elapsed time and of suspension ticks."""

    @abstractmethod
    def now(self) -> float:
        """Current time in seconds."""
        pass

    @abstractmethod
    async def sleep(self, seconds: float) -> None:
        """Suspend for one tick of the given length."""
        pass


class SystemClock(Clock):
    """Wall clock backed by time.monotonic and asyncio.sleep."""

    def now(self) -> float:
        return time.monotonic()

    async def sleep(self, seconds: float) -> None:
        await asyncio.sleep(seconds)


class ManualClock(Clock):
    """
    Virtual clock for deterministic runs.

    Each sleep advances virtual time immediately and yields once to the
    event loop, so pending decisions get a chance to run.
    """

    def __init__(self, start: float = 0.0):
        self._now = start
        self.ticks = 0

    def now(self) -> float:
        return self._now

    def advance(self, seconds: float) -> None:
        self._now += seconds

    async def sleep(self, seconds: float) -> None:
        self._now += seconds
        self.ticks += 1
        await asyncio.sleep(0)


async def wait_with_deadline(clock: Clock, awaitable: Awaitable[T], timeout: float,
                             tick: float) -> Optional[T]:
    """
    Await a single decision, giving up after `timeout` seconds of clock time.

    Returns None on timeout; the pending decision is cancelled.
    """
    task = asyncio.ensure_future(awaitable)
    # Let decisions that answer immediately finish without spending a tick
    await asyncio.sleep(0)
    start = clock.now()
    try:
        while not task.done() and clock.now() - start < timeout:
            await clock.sleep(tick)
    finally:
        if not task.done():
            task.cancel()
            try:
                await task
            except asyncio.CancelledError:
                pass
    if task.cancelled():
        return None
    return task.result()
