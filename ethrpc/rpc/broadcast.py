"""
Fan-out broadcast streams.

A :class:`Broadcast` delivers every published value to every current
subscriber. Async-iterator subscribers each get their own
``asyncio.Queue``; plain callbacks are run through a dispatcher that is
either ``"inline"`` (on the event loop, in publish order) or ``"thread"``
(a shared ``ThreadPoolExecutor``).
"""

from __future__ import annotations

import asyncio
from concurrent.futures import ThreadPoolExecutor
from typing import Any, AsyncIterator, Awaitable, Callable, Generic, List, Optional, Set, TypeVar

from ..logger import get_logger

logger = get_logger(__name__)

T = TypeVar("T")

CALLBACK_MODES = ("inline", "thread")

_CLOSED = object()


class Broadcast(Generic[T]):
    """Append-only fan-out of values to queue subscribers and listeners."""

    def __init__(self, name: str = "broadcast", callback_mode: str = "inline"):
        if callback_mode not in CALLBACK_MODES:
            raise ValueError(f"callback_mode must be one of {CALLBACK_MODES}, got {callback_mode!r}")
        self.name = name
        self.callback_mode = callback_mode
        self._queues: Set[asyncio.Queue] = set()
        self._listeners: List[Callable[[T], Any]] = []
        self._executor: Optional[ThreadPoolExecutor] = None
        self._closed = False

        # Stats
        self.total_published: int = 0

    @property
    def closed(self) -> bool:
        return self._closed

    @property
    def subscriber_count(self) -> int:
        return len(self._queues) + len(self._listeners)

    # -- Subscribing --------------------------------------------------------

    def add_listener(self, callback: Callable[[T], Any]) -> Callable[[], None]:
        """
        Register a callback for every future value.

        Returns:
            A function that removes the listener again.
        """
        self._listeners.append(callback)

        def remove() -> None:
            if callback in self._listeners:
                self._listeners.remove(callback)

        return remove

    def open_queue(self) -> asyncio.Queue:
        queue: asyncio.Queue = asyncio.Queue()
        if self._closed:
            queue.put_nowait(_CLOSED)
        else:
            self._queues.add(queue)
        return queue

    def close_queue(self, queue: asyncio.Queue) -> None:
        self._queues.discard(queue)

    def subscribe(self) -> AsyncIterator[T]:
        """
        Async iterator over values published after this call; ends on close().

        The subscription is registered immediately, not on first iteration.
        """
        return self._drain(self.open_queue())

    async def _drain(self, queue: asyncio.Queue) -> AsyncIterator[T]:
        try:
            async for value in self.iterate(queue):
                yield value
        finally:
            self.close_queue(queue)

    @staticmethod
    async def iterate(queue: asyncio.Queue) -> AsyncIterator[Any]:
        while True:
            value = await queue.get()
            if value is _CLOSED:
                return
            yield value

    # -- Publishing ---------------------------------------------------------

    def publish(self, value: T) -> None:
        """Copy ``value`` to every subscriber. Never blocks."""
        if self._closed:
            logger.debug("%s: publish after close ignored", self.name)
            return
        self.total_published += 1
        for queue in list(self._queues):
            queue.put_nowait(value)
        for callback in list(self._listeners):
            self._dispatch(callback, value)

    def _dispatch(self, callback: Callable[[T], Any], value: T) -> None:
        if self.callback_mode == "thread":
            if self._executor is None:
                self._executor = ThreadPoolExecutor(
                    max_workers=1, thread_name_prefix=f"ethrpc-{self.name}"
                )
            self._executor.submit(self._run_callback, callback, value)
        else:
            self._run_callback(callback, value)

    def _run_callback(self, callback: Callable[[T], Any], value: T) -> None:
        try:
            callback(value)
        except Exception:
            logger.exception("%s: listener %r raised", self.name, callback)

    def close(self) -> None:
        """End every subscriber iterator and drop listeners."""
        if self._closed:
            return
        self._closed = True
        for queue in list(self._queues):
            queue.put_nowait(_CLOSED)
        self._queues.clear()
        self._listeners.clear()
        if self._executor is not None:
            self._executor.shutdown(wait=False)
            self._executor = None


class ResultStream(Broadcast):
    """
    Broadcast of :class:`~ethrpc.rpc.correlator.RPCResult` values.

    Adds :meth:`wait_for`, a blocking-style helper layered on the stream:
    it resolves with the first result published for a caller id after the
    call to ``wait_for`` begins.
    """

    def __init__(self, callback_mode: str = "inline"):
        super().__init__(name="results", callback_mode=callback_mode)

    def expect(self, caller_id: int, timeout: Optional[float] = None) -> Awaitable[Any]:
        """
        Register interest in ``caller_id`` now; await the returned object later.

        Use this to subscribe *before* writing a request, so a fast response
        can never be published ahead of the waiter.
        """
        return self._await_match(self.open_queue(), caller_id, timeout)

    async def wait_for(self, caller_id: int, timeout: Optional[float] = None) -> Any:
        """
        Wait for the next result published with ``caller_id``.

        Raises:
            asyncio.TimeoutError: when no matching result arrives in time
            EOFError: when the stream is closed first
        """
        return await self.expect(caller_id, timeout)

    async def _await_match(self, queue: asyncio.Queue, caller_id: int, timeout: Optional[float]) -> Any:
        try:
            return await asyncio.wait_for(self._match(queue, caller_id), timeout)
        finally:
            self.close_queue(queue)

    async def _match(self, queue: asyncio.Queue, caller_id: int) -> Any:
        async for item in self.iterate(queue):
            if item.id == caller_id:
                return item.result
        raise EOFError("Result stream closed")
