"""
ethrpc Transports

HTTP (one POST per call) and WebSocket (one shared connection).
"""

from .http import HTTPTransport, decode_response
from .websocket import WebSocketTransport, WSState

__all__ = ["HTTPTransport", "WSState", "WebSocketTransport", "decode_response"]
