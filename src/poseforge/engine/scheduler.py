"""Frame schedulers: the "next display refresh" as an injectable dependency.

A frame callback receives the current timestamp in milliseconds, the same
contract as a browser's ``requestAnimationFrame``.  Callbacks are one-shot;
a loop re-requests a frame from inside its own callback.
"""

from __future__ import annotations

import asyncio
import itertools
import logging
from collections.abc import Callable
from typing import Protocol, TypeAlias, runtime_checkable

logger = logging.getLogger(__name__)

FrameCallback: TypeAlias = Callable[[float], None]  # (timestamp_ms)


@runtime_checkable
class FrameScheduler(Protocol):
    """Protocol for display-refresh sources."""

    def request_frame(self, callback: FrameCallback) -> int:
        """Run *callback* on the next frame; returns a handle for :meth:`cancel`."""
        ...

    def cancel(self, handle: int) -> None:
        """Drop a pending callback.  Unknown handles are ignored."""
        ...


class ManualFrameScheduler:
    """A scheduler driven by explicit elapsed-time values.

    Used by tests and offline simulation: nothing happens until
    :meth:`advance` is called, which moves the clock and fires every callback
    that was pending at that moment.
    """

    def __init__(self, start_ms: float = 0.0) -> None:
        self.now = start_ms
        self._pending: dict[int, FrameCallback] = {}
        self._handles = itertools.count(1)

    def request_frame(self, callback: FrameCallback) -> int:
        handle = next(self._handles)
        self._pending[handle] = callback
        return handle

    def cancel(self, handle: int) -> None:
        self._pending.pop(handle, None)

    @property
    def pending(self) -> int:
        return len(self._pending)

    def advance(self, elapsed_ms: float) -> int:
        """Move the clock forward and run one frame; returns callbacks fired."""
        self.now += elapsed_ms
        due = self._pending
        self._pending = {}
        for callback in due.values():
            callback(self.now)
        return len(due)

    def run_frames(self, count: int, frame_ms: float) -> None:
        for _ in range(count):
            self.advance(frame_ms)


class AsyncioFrameScheduler:
    """Fires frame callbacks from the running asyncio loop at a target rate."""

    def __init__(self, fps: float = 60.0, loop: asyncio.AbstractEventLoop | None = None) -> None:
        if fps <= 0:
            msg = "fps must be positive"
            raise ValueError(msg)
        self.frame_interval = 1.0 / fps
        self._loop = loop
        self._pending: dict[int, asyncio.TimerHandle] = {}
        self._handles = itertools.count(1)

    @property
    def loop(self) -> asyncio.AbstractEventLoop:
        if self._loop is None:
            self._loop = asyncio.get_running_loop()
        return self._loop

    def request_frame(self, callback: FrameCallback) -> int:
        handle = next(self._handles)

        def _fire() -> None:
            self._pending.pop(handle, None)
            callback(self.loop.time() * 1000.0)

        self._pending[handle] = self.loop.call_later(self.frame_interval, _fire)
        return handle

    def cancel(self, handle: int) -> None:
        timer = self._pending.pop(handle, None)
        if timer is not None:
            timer.cancel()

    def cancel_all(self) -> None:
        for timer in self._pending.values():
            timer.cancel()
        self._pending.clear()
        logger.debug("Cancelled all pending frames")
