"""
WebSocket connection status.

``ConnectionStatus`` is either :class:`Connected` or :class:`Disconnected`.
The tracker holds exactly one current value and replays it to every new
subscriber before any later transition.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, AsyncIterator, Callable, Optional, Union

from ..logger import get_logger
from .broadcast import Broadcast

logger = get_logger(__name__)


@dataclass(frozen=True)
class DisconnectReason:
    """Close frame contents: reason text and close code."""

    text: str
    code: int


@dataclass(frozen=True)
class Connected:
    def __str__(self) -> str:
        return "connected"


@dataclass(frozen=True)
class Disconnected:
    reason: Optional[DisconnectReason] = None
    error: Optional[BaseException] = None

    def __str__(self) -> str:
        if self.reason is not None:
            return f"disconnected ({self.reason.code}: {self.reason.text})"
        if self.error is not None:
            return f"disconnected ({type(self.error).__name__}: {self.error})"
        return "disconnected"


ConnectionStatus = Union[Connected, Disconnected]


class ConnectionStatusTracker:
    """Current connection status plus a replay-latest broadcast of changes."""

    def __init__(self, callback_mode: str = "inline"):
        self._status: ConnectionStatus = Disconnected()
        self._broadcast: Broadcast = Broadcast(name="status", callback_mode=callback_mode)

    @property
    def status(self) -> ConnectionStatus:
        return self._status

    @property
    def is_connected(self) -> bool:
        return isinstance(self._status, Connected)

    def update(self, status: ConnectionStatus) -> None:
        """Record a transition and broadcast it."""
        previous = self._status
        self._status = status
        logger.debug("Connection status %s -> %s", previous, status)
        self._broadcast.publish(status)

    def subscribe(self) -> AsyncIterator[ConnectionStatus]:
        """
        Async iterator yielding the current status first, then every
        transition, until :meth:`close`.
        """
        queue = self._broadcast.open_queue()
        # Replay goes in ahead of anything published afterwards
        if not self._broadcast.closed:
            queue.put_nowait(self._status)
        return self._drain(queue)

    async def _drain(self, queue: Any) -> AsyncIterator[ConnectionStatus]:
        try:
            async for status in self._broadcast.iterate(queue):
                yield status
        finally:
            self._broadcast.close_queue(queue)

    def add_listener(self, callback: Callable[[ConnectionStatus], Any]) -> Callable[[], None]:
        """Call ``callback`` with the current status now and on every transition."""
        remove = self._broadcast.add_listener(callback)
        self._broadcast._dispatch(callback, self._status)
        return remove

    def close(self) -> None:
        self._broadcast.close()
