"""
Shared fixtures: an in-memory stand-in for ``websockets.connect``.
"""

import asyncio

import pytest
from websockets.exceptions import ConnectionClosed
from websockets.frames import Close


class FakeConnection:
    """In-memory stand-in for a websockets client connection."""

    def __init__(self):
        self.inbox = asyncio.Queue()
        self.sent = []
        self.closed_with = None

    async def recv(self):
        item = await self.inbox.get()
        if isinstance(item, BaseException):
            raise item
        return item

    async def send(self, data):
        if self.closed_with is not None:
            raise ConnectionClosed(None, Close(*self.closed_with))
        self.sent.append(data)

    async def close(self, code=1000, reason=""):
        self.closed_with = (code, reason)
        # Client-initiated close: ours was sent before the echo arrived
        frame = Close(code, reason)
        self.inbox.put_nowait(ConnectionClosed(frame, frame, rcvd_then_sent=False))

    def feed(self, item):
        """Queue a frame (or an exception to raise) for the next recv()."""
        self.inbox.put_nowait(item)


class FakeConnector:
    def __init__(self, exc=None, delay=0):
        self.exc = exc
        self.delay = delay
        self.calls = []
        self.connections = []

    async def __call__(self, url, **kwargs):
        self.calls.append((url, kwargs))
        if self.delay:
            await asyncio.sleep(self.delay)
        if self.exc is not None:
            raise self.exc
        conn = FakeConnection()
        self.connections.append(conn)
        return conn


@pytest.fixture
def connector():
    return FakeConnector()


@pytest.fixture
def refused():
    """Connector whose handshake always fails."""
    return FakeConnector(exc=OSError("connection refused"))


@pytest.fixture
def slow_connector():
    """Connector whose handshake takes a few event-loop turns."""
    return FakeConnector(delay=0.01)


@pytest.fixture
def slow_refused():
    return FakeConnector(exc=OSError("connection refused"), delay=0.01)
