"""
ethrpc JSON-RPC 2.0 Envelopes

Request/response envelope types and the correlation-id contract shared by
both transports:

- HTTP requests always carry the literal id ``"1"``; the transport pairs
  request and response.
- WebSocket requests carry ``"<methodName>|<callerSuppliedInt>"`` so a
  response frame identifies both the method (for decoding) and the
  caller's logical id (for routing).
"""

import json
import re
from dataclasses import dataclass, field
from enum import IntEnum
from typing import Any, Dict, List, Optional, Tuple, Union

from ..constants import CORRELATION_SEPARATOR, HTTP_REQUEST_ID, JSONRPC_VERSION
from ..exceptions import DecodeError, RPCResponseError

_INTEGER_RE = re.compile(r"[+-]?[0-9]+")


class RPCErrorCode(IntEnum):
    """Standard JSON-RPC 2.0 error codes, for matching RPCResponseError.code."""

    # Standard errors
    PARSE_ERROR = -32700
    INVALID_REQUEST = -32600
    METHOD_NOT_FOUND = -32601
    INVALID_PARAMS = -32602
    INTERNAL_ERROR = -32603

    # Server errors (-32000 to -32099)
    SERVER_ERROR = -32000
    RESOURCE_NOT_FOUND = -32001
    RESOURCE_UNAVAILABLE = -32002
    TRANSACTION_REJECTED = -32003
    METHOD_NOT_SUPPORTED = -32004
    LIMIT_EXCEEDED = -32005

    # Ethereum-specific errors
    ACTION_NOT_ALLOWED = -32099
    EXECUTION_ERROR = -32015


@dataclass
class RPCRequest:
    """JSON-RPC request."""

    method: str
    params: List[Any] = field(default_factory=list)
    id: Union[str, int] = HTTP_REQUEST_ID
    jsonrpc: str = JSONRPC_VERSION

    def to_dict(self) -> dict:
        return {
            "jsonrpc": self.jsonrpc,
            "method": self.method,
            "id": self.id,
            "params": list(self.params),
        }

    def to_json(self) -> str:
        return json.dumps(self.to_dict(), separators=(",", ":"))

    def to_bytes(self) -> bytes:
        return self.to_json().encode("utf-8")

    @classmethod
    def from_dict(cls, data: dict) -> "RPCRequest":
        params = data.get("params")
        return cls(
            jsonrpc=data.get("jsonrpc", JSONRPC_VERSION),
            method=data.get("method", ""),
            params=list(params) if params is not None else [],
            id=data.get("id", HTTP_REQUEST_ID),
        )


@dataclass
class RPCResponse:
    """
    JSON-RPC response.

    ``has_result`` separates ``"result": null`` (a legitimate answer for
    lookups that found nothing) from a missing result field.
    """

    id: Union[str, int, None] = None
    result: Any = None
    error: Optional[Dict[str, Any]] = None
    has_result: bool = False
    jsonrpc: str = JSONRPC_VERSION

    @property
    def is_error(self) -> bool:
        return self.error is not None

    def to_dict(self) -> dict:
        response = {"jsonrpc": self.jsonrpc, "id": self.id}
        if self.error is not None:
            response["error"] = self.error
        else:
            response["result"] = self.result
        return response

    def to_json(self) -> str:
        return json.dumps(self.to_dict())

    @classmethod
    def from_dict(cls, data: Any) -> "RPCResponse":
        """
        Build from a parsed JSON value.

        Raises:
            DecodeError: if ``data`` is not a response envelope
        """
        if not isinstance(data, dict):
            raise DecodeError(
                f"Response envelope must be a JSON object, got {type(data).__name__}",
                type_name="RPCResponse",
            )
        error = data.get("error")
        if error is not None and not isinstance(error, dict):
            raise DecodeError("Response 'error' must be an object", type_name="RPCResponse")
        if "result" not in data and error is None:
            raise DecodeError("Response has neither 'result' nor 'error'", type_name="RPCResponse")
        return cls(
            jsonrpc=data.get("jsonrpc", JSONRPC_VERSION),
            id=data.get("id"),
            result=data.get("result"),
            error=error,
            has_result="result" in data,
        )

    @classmethod
    def from_raw(cls, raw: Union[str, bytes, bytearray]) -> "RPCResponse":
        try:
            parsed = json.loads(raw)
        except (json.JSONDecodeError, UnicodeDecodeError) as e:
            raise DecodeError(f"Response is not valid JSON: {e}", type_name="RPCResponse") from e
        return cls.from_dict(parsed)

    def raise_for_error(self) -> None:
        """Raise RPCResponseError when the node answered with an error object."""
        if self.error is None:
            return
        code = self.error.get("code", RPCErrorCode.INTERNAL_ERROR)
        try:
            code = int(code)
        except (TypeError, ValueError):
            code = int(RPCErrorCode.INTERNAL_ERROR)
        raise RPCResponseError(
            code=code,
            message=str(self.error.get("message", "")),
            data=self.error.get("data"),
        )


def build_request(
    method: str,
    params: Optional[List[Any]] = None,
    request_id: Union[str, int] = HTTP_REQUEST_ID,
) -> RPCRequest:
    """
    Build a request envelope.

    ``params`` must already be validated and positional, in the method's
    declared order, with absent optional parameters left out.
    """
    return RPCRequest(method=method, params=list(params or []), id=request_id)


def make_correlation_id(method: str, caller_id: int) -> str:
    """``"eth_blockNumber", 7`` → ``"eth_blockNumber|7"``."""
    if isinstance(caller_id, bool) or not isinstance(caller_id, int):
        raise TypeError(f"caller id must be an int, got {type(caller_id).__name__}")
    return f"{method}{CORRELATION_SEPARATOR}{caller_id}"


def parse_correlation_id(raw: Any) -> Optional[Tuple[str, int]]:
    """
    Split a WebSocket correlation id into ``(method, caller_id)``.

    Returns None unless ``raw`` is a string with exactly one separator and
    an integer suffix. Whether the method is known is the caller's check.
    """
    if not isinstance(raw, str):
        return None
    parts = raw.split(CORRELATION_SEPARATOR)
    if len(parts) != 2:
        return None
    method, suffix = parts
    if not method or not _INTEGER_RE.fullmatch(suffix):
        return None
    return method, int(suffix)
