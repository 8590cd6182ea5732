"""
ethrpc HTTP Transport

One JSON-RPC envelope per POST. Every call opens its own
``httpx.AsyncClient``; nothing is shared between calls, so any number of
calls may run concurrently. No retries.
"""

from __future__ import annotations

import ssl
import time
from typing import Any, Dict, Optional, Union

import httpx

from ..config.loader import HTTPConfig, TLSConfig
from ..constants import ETHRPC_USER_AGENT, LOG_INCLUDE_FRAME_CONTENT, LOG_MAX_FRAME_LENGTH
from ..exceptions import ConfigurationError, DecodeError, TransportError
from ..logger import get_logger
from ..network.tls import httpx_verify
from ..rpc.decoding import Decoder
from ..rpc.envelope import RPCRequest, RPCResponse

logger = get_logger(__name__)


def decode_response(raw: Union[str, bytes], method: str, decoder: Decoder) -> Any:
    """
    Decode an HTTP response body into the method's result type.

    Raises:
        DecodeError: body is not a response envelope, or the result does not
            match the method's schema
        RPCResponseError: the node answered with an error object
    """
    response = RPCResponse.from_raw(raw)
    response.raise_for_error()
    try:
        return decoder(response.result)
    except DecodeError as e:
        raise DecodeError(f"{method} result: {e}", type_name=e.type_name) from e


class HTTPTransport:
    """
    Stateless HTTP JSON-RPC transport.

    Args:
        config: [http] section; ``url`` must be set
        tls: [tls] section for custom CA / client certificates
        transport: optional httpx transport (e.g. ``httpx.MockTransport`` in tests)
    """

    def __init__(
        self,
        config: HTTPConfig,
        tls: Optional[TLSConfig] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        if not config.url:
            raise ConfigurationError("HTTP transport requires an endpoint URL")
        self.config = config
        self.url = config.url
        self._transport = transport
        self._verify: Union[bool, ssl.SSLContext] = httpx_verify(tls or TLSConfig(), config.verify)

        # Stats
        self.total_requests: int = 0

    def _headers(self) -> Dict[str, str]:
        headers = {
            "Content-Type": "application/json",
            "Accept": "application/json",
            "User-Agent": str(ETHRPC_USER_AGENT),
        }
        headers.update(self.config.headers)
        return headers

    def _client(self) -> httpx.AsyncClient:
        kwargs: Dict[str, Any] = {"timeout": self.config.timeout, "headers": self._headers()}
        if self._transport is not None:
            kwargs["transport"] = self._transport
        else:
            kwargs["verify"] = self._verify
        return httpx.AsyncClient(**kwargs)

    async def send(self, request: RPCRequest) -> bytes:
        """
        POST one envelope and return the raw response body.

        Raises:
            TransportError: network failure, timeout, or HTTP status >= 400
        """
        body = request.to_bytes()
        self.total_requests += 1
        if LOG_INCLUDE_FRAME_CONTENT:
            logger.debug('--> "POST %s" %s', self.url, body[:LOG_MAX_FRAME_LENGTH].decode("utf-8", "replace"))
        else:
            logger.debug('--> "POST %s" %s', self.url, request.method)

        start_time = time.time()
        try:
            async with self._client() as client:
                response = await client.post(self.url, content=body)
        except httpx.TimeoutException as e:
            raise TransportError(f"{request.method}: request to {self.url} timed out") from e
        except httpx.RequestError as e:
            raise TransportError(f"{request.method}: request to {self.url} failed: {e}") from e

        elapsed = (time.time() - start_time) * 1000
        logger.debug('<-- "POST %s" %s %d (%.1fms)', self.url, request.method, response.status_code, elapsed)

        if response.status_code >= 400:
            raise TransportError(
                f"{request.method}: HTTP {response.status_code} from {self.url}",
                status_code=response.status_code,
            )
        return response.content

    async def call(self, request: RPCRequest, decoder: Decoder) -> Any:
        """Round trip plus decode."""
        raw = await self.send(request)
        return decode_response(raw, request.method, decoder)
