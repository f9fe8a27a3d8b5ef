"""Marshal work onto the context that owns presentation state.

Gateway completions fire on worker threads. Everything that touches the
screen (error text, navigation) is posted through a ``UIDispatcher`` so it
runs on the UI context instead.

Dispatchers:
    - EventLoopDispatcher: the UI context is an asyncio event loop.
    - QueueDispatcher: a UI main loop drains posted callbacks itself.
    - InlineDispatcher: run immediately on the calling thread (headless).
"""
from __future__ import annotations

import asyncio
import logging
import queue
from abc import ABC, abstractmethod
from typing import Any, Callable, Optional

logger = logging.getLogger(__name__)


class UIDispatcher(ABC):
    """Schedules callbacks on the UI-owning execution context."""

    @abstractmethod
    def post(self, callback: Callable[..., Any], *args: Any) -> None:
        pass


class EventLoopDispatcher(UIDispatcher):
    def __init__(self, loop: asyncio.AbstractEventLoop) -> None:
        self._loop = loop

    def post(self, callback: Callable[..., Any], *args: Any) -> None:
        self._loop.call_soon_threadsafe(callback, *args)


class QueueDispatcher(UIDispatcher):
    """Thread-safe FIFO that the UI thread drains with ``run_pending``."""

    def __init__(self) -> None:
        self._queue: "queue.Queue[tuple]" = queue.Queue()

    def post(self, callback: Callable[..., Any], *args: Any) -> None:
        self._queue.put((callback, args))

    def run_pending(self, timeout: Optional[float] = None) -> int:
        """Run every queued callback on the calling thread.

        Args:
            timeout: If given, wait up to this many seconds for the first
                callback to arrive.

        Returns:
            Number of callbacks run.
        """
        ran = 0
        if timeout is not None:
            try:
                callback, args = self._queue.get(timeout=timeout)
            except queue.Empty:
                return 0
            callback(*args)
            ran += 1
        while True:
            try:
                callback, args = self._queue.get_nowait()
            except queue.Empty:
                return ran
            callback(*args)
            ran += 1

    def pending(self) -> int:
        """Number of callbacks waiting to run."""
        return self._queue.qsize()


class InlineDispatcher(UIDispatcher):
    def post(self, callback: Callable[..., Any], *args: Any) -> None:
        callback(*args)
