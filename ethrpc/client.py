"""
ethrpc Client

``EthClient`` exposes the Ethereum JSON-RPC method set in three call
styles, all routed through one dispatch primitive:

    client.eth.blockNumber()                  # HTTP, awaitable
    client.stream.eth.blockNumber()           # HTTP, async iterator (one value)
    client.ws.eth.blockNumber(request_id=7)   # WebSocket, fire-and-forget

Fire-and-forget results arrive later on ``client.results()`` as
``RPCResult(id=7, result=...)``. To wait for one, register first and then
send:

    waiter = client.result_stream.expect(7, timeout=5)
    await client.ws.eth.blockNumber(request_id=7)
    block_number = await waiter

Parameter validation happens when a method is called, before anything is
awaited, so invalid input never reaches a transport.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any, AsyncIterator, Awaitable, List, Optional

import httpx

from .config import ClientConfig
from .exceptions import ConfigurationError
from .logger import configure_logging, get_logger
from .rpc.broadcast import Broadcast, ResultStream
from .rpc.correlator import CallError, ResponseCorrelator, RPCResult, SubscriptionNotification
from .rpc.decoding import Decoder
from .rpc.envelope import RPCRequest, build_request, make_correlation_id
from .rpc.modules import EthModule, Invoker, NetModule, Web3Module
from .rpc.status import ConnectionStatus, ConnectionStatusTracker
from .transport.http import HTTPTransport
from .transport.websocket import Connector, WebSocketTransport, WSState

logger = get_logger(__name__)

HTTP = "http"
STREAM = "stream"
WEBSOCKET = "websocket"


class CallStyle:
    """One namespace set (eth, net, web3) bound to one call style."""

    def __init__(self, invoke: Invoker):
        self.eth = EthModule(invoke)
        self.net = NetModule(invoke)
        self.web3 = Web3Module(invoke)


class EthClient:
    """
    Ethereum JSON-RPC client.

    Args:
        config: endpoints, timeouts, TLS and logging; validated on construction
        http_transport: optional httpx transport for the HTTP side (tests)
        ws_connector: optional replacement for ``websockets.connect`` (tests)

    Raises:
        ConfigurationError: when no endpoint is configured or a value is invalid
    """

    def __init__(
        self,
        config: ClientConfig,
        http_transport: Optional[httpx.AsyncBaseTransport] = None,
        ws_connector: Optional[Connector] = None,
    ):
        config.validate()
        self.config = config
        if config.logging.explicit:
            configure_logging(
                log_level=config.logging.level,
                log_file=Path(config.logging.file) if config.logging.file else None,
                console_output=config.logging.console,
            )

        ws_config = config.websocket
        self.tracker = ConnectionStatusTracker(callback_mode=ws_config.callback_mode)
        self.correlator = ResponseCorrelator(
            surface_errors=ws_config.surface_errors,
            callback_mode=ws_config.callback_mode,
        )

        self.http: Optional[HTTPTransport] = None
        if config.http.url:
            self.http = HTTPTransport(config.http, config.tls, transport=http_transport)

        self.websocket: Optional[WebSocketTransport] = None
        if ws_config.url:
            self.websocket = WebSocketTransport(
                ws_config,
                config.tls,
                correlator=self.correlator,
                tracker=self.tracker,
                connector=ws_connector,
            )

        # Call styles
        self.eth = EthModule(self._invoker(HTTP))
        self.net = NetModule(self._invoker(HTTP))
        self.web3 = Web3Module(self._invoker(HTTP))
        self.stream = CallStyle(self._invoker(STREAM))
        self.ws = CallStyle(self._invoker(WEBSOCKET))

        logger.debug(
            "EthClient ready (http=%s, websocket=%s)",
            config.http.url or "-",
            ws_config.url or "-",
        )

    @classmethod
    def from_urls(cls, http_url: Optional[str] = None, ws_url: Optional[str] = None, **kwargs: Any) -> "EthClient":
        return cls(ClientConfig.from_urls(http_url, ws_url), **kwargs)

    # -- Dispatch -----------------------------------------------------------

    def _invoker(self, style: str) -> Invoker:
        def invoke(method: str, params: List[Any], decoder: Decoder, request_id: Optional[int]) -> Any:
            return self._dispatch(method, params, decoder, style, request_id)

        return invoke

    def _dispatch(
        self,
        method: str,
        params: List[Any],
        decoder: Decoder,
        style: str,
        request_id: Optional[int] = None,
    ) -> Any:
        """
        The single call primitive behind every method and style.

        Runs synchronously up to the point of I/O (transport checks, envelope
        building) and returns the awaitable or async iterator that performs it.
        """
        if style in (HTTP, STREAM):
            transport = self._require_http(method)
            request = build_request(method, params)
            if style == HTTP:
                return transport.call(request, decoder)
            return self._stream_call(transport, request, decoder)

        if style == WEBSOCKET:
            transport = self._require_websocket(method)
            if request_id is None:
                raise TypeError(f"{method}: WebSocket calls need a request_id")
            request = build_request(method, params, make_correlation_id(method, request_id))
            return self._write(transport, request)

        raise ValueError(f"Unknown call style {style!r}")

    def _require_http(self, method: str) -> HTTPTransport:
        if self.http is None:
            raise ConfigurationError(f"{method}: no HTTP endpoint configured")
        return self.http

    def _require_websocket(self, method: str) -> WebSocketTransport:
        if self.websocket is None:
            raise ConfigurationError(f"{method}: no WebSocket endpoint configured")
        return self.websocket

    @staticmethod
    async def _stream_call(transport: HTTPTransport, request: RPCRequest, decoder: Decoder) -> AsyncIterator[Any]:
        yield await transport.call(request, decoder)

    @staticmethod
    async def _write(transport: WebSocketTransport, request: RPCRequest) -> None:
        # Connect lazily on first use; later reconnects are the caller's call
        if transport.state in (WSState.IDLE, WSState.CONNECTING):
            await transport.connect()
        await transport.write(request.to_json())

    # -- WebSocket lifecycle ------------------------------------------------

    async def connect_websocket(self) -> None:
        """Open the WebSocket connection. Without a WebSocket endpoint nothing is attempted."""
        if self.websocket is None:
            logger.info("No WebSocket endpoint configured; not connecting")
            return
        await self.websocket.connect()

    async def disconnect_websocket(self) -> None:
        if self.websocket is not None:
            await self.websocket.disconnect()

    # -- Observables --------------------------------------------------------

    @property
    def connection_status(self) -> ConnectionStatus:
        return self.tracker.status

    def status_updates(self) -> AsyncIterator[ConnectionStatus]:
        """Current status first, then every transition."""
        return self.tracker.subscribe()

    @property
    def result_stream(self) -> ResultStream:
        return self.correlator.results

    def results(self) -> AsyncIterator[RPCResult]:
        return self.correlator.results.subscribe()

    def wait_for_result(self, request_id: int, timeout: Optional[float] = None) -> Awaitable[Any]:
        """Shorthand for ``result_stream.expect``; call before sending."""
        return self.correlator.results.expect(request_id, timeout)

    @property
    def notification_stream(self) -> Broadcast:
        return self.correlator.notifications

    def notifications(self) -> AsyncIterator[SubscriptionNotification]:
        return self.correlator.notifications.subscribe()

    def call_errors(self) -> AsyncIterator[CallError]:
        """Error responses to WebSocket calls; only fed when ``websocket.surface_errors`` is on."""
        return self.correlator.errors.subscribe()

    # -- Shutdown -----------------------------------------------------------

    async def aclose(self) -> None:
        """Disconnect and end every stream."""
        if self.websocket is not None:
            await self.websocket.aclose()
        else:
            self.correlator.close()
            self.tracker.close()

    async def __aenter__(self) -> "EthClient":
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.aclose()
