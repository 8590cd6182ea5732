"""
ethrpc RPC layer

Envelopes, validation, result decoding, the method registry and the
WebSocket correlation primitives.
"""

from .broadcast import Broadcast, ResultStream
from .correlator import CallError, ResponseCorrelator, RPCResult, SubscriptionNotification
from .decoding import OneOf
from .envelope import (
    RPCErrorCode,
    RPCRequest,
    RPCResponse,
    build_request,
    make_correlation_id,
    parse_correlation_id,
)
from .modules import METHOD_RESULT_SCHEMA, EthModule, MethodSpec, NetModule, RPCModule, Web3Module
from .status import Connected, ConnectionStatus, ConnectionStatusTracker, Disconnected, DisconnectReason

__all__ = [
    "Broadcast",
    "CallError",
    "Connected",
    "ConnectionStatus",
    "ConnectionStatusTracker",
    "Disconnected",
    "DisconnectReason",
    "EthModule",
    "METHOD_RESULT_SCHEMA",
    "MethodSpec",
    "NetModule",
    "OneOf",
    "RPCErrorCode",
    "RPCModule",
    "RPCRequest",
    "RPCResponse",
    "RPCResult",
    "ResponseCorrelator",
    "ResultStream",
    "SubscriptionNotification",
    "Web3Module",
    "build_request",
    "make_correlation_id",
    "parse_correlation_id",
]
