"""
ethrpc WebSocket Transport

Owns the one persistent connection and multiplexes calls over it.

Connection management:
  - States: IDLE -> CONNECTING -> CONNECTED -> DISCONNECTED (connect() may retry)
  - Handshake failures are reported through the status tracker, not raised
  - One reader task hands every inbound frame to the correlator, in order
  - Ping/pong keepalive stays inside ``websockets``
  - Writes are never queued: writing while disconnected raises
"""

from __future__ import annotations

import asyncio
from enum import Enum
from typing import Any, Awaitable, Callable, Dict, Optional, Union

import websockets
from websockets.exceptions import ConnectionClosed

from ..config.loader import TLSConfig, WebSocketConfig
from ..constants import ETHRPC_USER_AGENT
from ..exceptions import ConfigurationError, TransportError
from ..logger import get_logger
from ..network.tls import client_ssl_context
from ..rpc.correlator import ResponseCorrelator
from ..rpc.status import Connected, ConnectionStatusTracker, Disconnected, DisconnectReason

logger = get_logger(__name__)

Connector = Callable[..., Awaitable[Any]]

CLOSE_CODE_NORMAL = 1000
CLIENT_CLOSE_REASON = "client disconnect"


class WSState(str, Enum):
    IDLE = "idle"
    CONNECTING = "connecting"
    CONNECTED = "connected"
    DISCONNECTED = "disconnected"


class WebSocketTransport:
    """
    WebSocket JSON-RPC transport.

    Args:
        config: [websocket] section; ``url`` must be set
        tls: [tls] section, applied to wss:// endpoints
        correlator: receives every inbound frame
        tracker: receives every lifecycle transition
        connector: coroutine function opening the connection
            (``websockets.connect`` by default; replaced in tests)
    """

    def __init__(
        self,
        config: WebSocketConfig,
        tls: Optional[TLSConfig] = None,
        correlator: Optional[ResponseCorrelator] = None,
        tracker: Optional[ConnectionStatusTracker] = None,
        connector: Optional[Connector] = None,
    ):
        if not config.url:
            raise ConfigurationError("WebSocket transport requires an endpoint URL")
        self.config = config
        self.url = config.url
        self.tls = tls or TLSConfig()
        self.correlator = correlator or ResponseCorrelator(
            surface_errors=config.surface_errors,
            callback_mode=config.callback_mode,
        )
        self.tracker = tracker or ConnectionStatusTracker(callback_mode=config.callback_mode)
        self._connector: Connector = connector or websockets.connect

        self.state = WSState.IDLE
        self._ws: Any = None
        self._reader: Optional[asyncio.Task] = None
        self._lock = asyncio.Lock()

        # Stats
        self.total_connects: int = 0
        self.frames_sent: int = 0

    @property
    def is_connected(self) -> bool:
        return self.state == WSState.CONNECTED

    def _connect_kwargs(self) -> Dict[str, Any]:
        kwargs: Dict[str, Any] = {
            "open_timeout": self.config.open_timeout,
            "ping_interval": self.config.ping_interval,
            "max_size": self.config.max_size,
            "compression": "deflate" if self.config.compression else None,
            "user_agent_header": str(ETHRPC_USER_AGENT),
        }
        if self.config.headers:
            kwargs["additional_headers"] = dict(self.config.headers)
        if self.url.startswith("wss://"):
            ssl_context = client_ssl_context(self.tls)
            if ssl_context is not None:
                kwargs["ssl"] = ssl_context
        return kwargs

    # -- Lifecycle ----------------------------------------------------------

    async def connect(self) -> None:
        """
        Open the connection. A no-op when connected; a caller arriving while
        another handshake is in flight waits for that handshake instead of
        starting its own.

        A failed handshake leaves the transport DISCONNECTED with the error
        recorded as ``Disconnected(error=...)`` on the tracker.
        """
        if self.state == WSState.CONNECTED:
            return
        joined = self.state == WSState.CONNECTING
        async with self._lock:
            # A joined handshake that failed was already reported
            if self.state == WSState.CONNECTED or joined:
                return
            self.state = WSState.CONNECTING
            logger.info("Connecting to %s", self.url)
            try:
                ws = await self._connector(self.url, **self._connect_kwargs())
            except asyncio.CancelledError:
                self.state = WSState.DISCONNECTED
                self.tracker.update(Disconnected())
                raise
            except Exception as e:
                self.state = WSState.DISCONNECTED
                logger.warning("WebSocket handshake with %s failed: %s", self.url, e)
                self.tracker.update(Disconnected(error=e))
                return

            self._ws = ws
            self.state = WSState.CONNECTED
            self.total_connects += 1
            logger.info("WebSocket connected: %s", self.url)
            self.tracker.update(Connected())
            self._reader = asyncio.create_task(self._read_loop(ws), name="ethrpc-ws-reader")

    async def disconnect(self) -> None:
        """Close gracefully (1000, "client disconnect"). A no-op when not connected."""
        if self.state != WSState.CONNECTED or self._ws is None:
            return
        ws, self._ws = self._ws, None
        reader, self._reader = self._reader, None
        try:
            await ws.close(code=CLOSE_CODE_NORMAL, reason=CLIENT_CLOSE_REASON)
        finally:
            if reader is not None and not reader.done():
                reader.cancel()
            if reader is not None:
                await asyncio.gather(reader, return_exceptions=True)
            self.state = WSState.DISCONNECTED
            logger.info("WebSocket disconnected: %s", self.url)
            self.tracker.update(Disconnected(reason=DisconnectReason(CLIENT_CLOSE_REASON, CLOSE_CODE_NORMAL)))

    async def aclose(self) -> None:
        """Disconnect and end every stream fed by this transport."""
        await self.disconnect()
        self.correlator.close()
        self.tracker.close()

    # -- I/O ----------------------------------------------------------------

    async def write(self, data: Union[str, bytes]) -> None:
        """
        Hand one frame to the socket.

        Raises:
            TransportError: when not connected, or the connection dropped mid-send
        """
        ws = self._ws
        if self.state != WSState.CONNECTED or ws is None:
            raise TransportError(f"WebSocket is not connected (state: {self.state.value})")
        try:
            await ws.send(data)
        except ConnectionClosed as e:
            raise TransportError(f"WebSocket closed while sending: {e}") from e
        self.frames_sent += 1

    async def _read_loop(self, ws: Any) -> None:
        status = Disconnected()
        try:
            while True:
                frame = await ws.recv()
                self.correlator.on_frame(frame)
        except ConnectionClosed as e:
            if e.rcvd is not None:
                status = Disconnected(reason=DisconnectReason(e.rcvd.reason, e.rcvd.code))
            else:
                status = Disconnected(error=e)
        except asyncio.CancelledError:
            raise
        except Exception as e:
            logger.exception("WebSocket reader failed")
            status = Disconnected(error=e)
        finally:
            # disconnect() reports its own transition
            if self._ws is ws:
                self._ws = None
                self._reader = None
                self.state = WSState.DISCONNECTED
                logger.info("WebSocket connection lost: %s", status)
                self.tracker.update(status)
