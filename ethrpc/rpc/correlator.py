"""
WebSocket response correlator.

Routes inbound frames back to the call that issued them. A response frame
is matched only through its id, ``"<method>|<caller id>"``: the method
selects the result decoder, the integer goes back to the caller with the
decoded value on the result stream.

Frames that cannot be matched or decoded are dropped (logged at DEBUG).
The socket may carry traffic for other consumers, or responses to methods
this client does not know, and neither may stall the connection.
"""

from __future__ import annotations

import json
from dataclasses import dataclass
from typing import Any, Dict, Mapping, Optional, Union

from ..constants import LOG_MAX_FRAME_LENGTH, SUBSCRIPTION_METHOD
from ..exceptions import DecodeError, RPCResponseError
from ..logger import get_logger
from .broadcast import Broadcast, ResultStream
from .envelope import RPCResponse, parse_correlation_id
from .modules import METHOD_RESULT_SCHEMA, MethodSpec

logger = get_logger(__name__)

Frame = Union[str, bytes, bytearray]


@dataclass(frozen=True)
class RPCResult:
    """A decoded WebSocket response: the caller's id and the typed result."""

    id: int
    result: Any


@dataclass(frozen=True)
class SubscriptionNotification:
    """Push frame of an ``eth_subscribe`` subscription."""

    subscription: str
    result: Any


@dataclass(frozen=True)
class CallError:
    """Error response for a WebSocket call, published when error surfacing is on."""

    id: int
    method: str
    error: RPCResponseError


def _preview(frame: Frame) -> str:
    text = frame if isinstance(frame, str) else bytes(frame).decode("utf-8", "replace")
    if len(text) > LOG_MAX_FRAME_LENGTH:
        return text[:LOG_MAX_FRAME_LENGTH] + "..."
    return text


class ResponseCorrelator:
    """
    Demultiplexes WebSocket frames into typed results.

    Args:
        schema: method name -> MethodSpec used to decode results
        surface_errors: publish error-shaped frames as CallError instead of dropping them
        callback_mode: dispatcher for listener callbacks ("inline" or "thread")
    """

    def __init__(
        self,
        schema: Optional[Mapping[str, MethodSpec]] = None,
        surface_errors: bool = False,
        callback_mode: str = "inline",
    ):
        self.schema: Mapping[str, MethodSpec] = schema if schema is not None else METHOD_RESULT_SCHEMA
        self.surface_errors = surface_errors
        self.results = ResultStream(callback_mode=callback_mode)
        self.notifications: Broadcast = Broadcast(name="notifications", callback_mode=callback_mode)
        self.errors: Broadcast = Broadcast(name="call_errors", callback_mode=callback_mode)

        # Stats
        self.frames_received: int = 0
        self.frames_dropped: int = 0

    def on_frame(self, frame: Frame) -> None:
        """Handle one inbound frame. Never raises."""
        self.frames_received += 1
        try:
            self._handle(frame)
        except Exception:
            # Decoder bugs must not kill the reader task
            self.frames_dropped += 1
            logger.exception("Unexpected error correlating frame: %s", _preview(frame))

    def _drop(self, why: str, frame: Frame) -> None:
        self.frames_dropped += 1
        logger.debug("Dropped frame (%s): %s", why, _preview(frame))

    def _handle(self, frame: Frame) -> None:
        try:
            envelope = json.loads(frame)
        except (json.JSONDecodeError, UnicodeDecodeError, TypeError):
            self._drop("not JSON", frame)
            return
        if not isinstance(envelope, dict):
            self._drop("not an object", frame)
            return

        if "id" not in envelope or envelope["id"] is None:
            if self._is_notification(envelope):
                params = envelope["params"]
                self.notifications.publish(
                    SubscriptionNotification(subscription=params["subscription"], result=params.get("result"))
                )
            else:
                self._drop("no id", frame)
            return

        correlation = parse_correlation_id(envelope["id"])
        if correlation is None:
            self._drop(f"malformed id {envelope['id']!r}", frame)
            return
        method, caller_id = correlation
        spec = self.schema.get(method)
        if spec is None:
            self._drop(f"unknown method {method!r}", frame)
            return

        try:
            response = RPCResponse.from_dict(envelope)
        except DecodeError as e:
            self._drop(str(e), frame)
            return

        if response.is_error:
            self._on_error(method, caller_id, response, frame)
            return

        try:
            value = spec.decode(response.result)
        except DecodeError as e:
            self._drop(f"{method} result: {e}", frame)
            return

        logger.debug("Result %s|%d", method, caller_id)
        self.results.publish(RPCResult(id=caller_id, result=value))

    def _on_error(self, method: str, caller_id: int, response: RPCResponse, frame: Frame) -> None:
        if not self.surface_errors:
            self._drop("error response", frame)
            return
        try:
            response.raise_for_error()
        except RPCResponseError as e:
            logger.debug("Call error %s|%d: %s", method, caller_id, e)
            self.errors.publish(CallError(id=caller_id, method=method, error=e))

    @staticmethod
    def _is_notification(envelope: Dict[str, Any]) -> bool:
        params = envelope.get("params")
        return (
            envelope.get("method") == SUBSCRIPTION_METHOD
            and isinstance(params, dict)
            and isinstance(params.get("subscription"), str)
        )

    def close(self) -> None:
        """End the result, notification and error streams."""
        self.results.close()
        self.notifications.close()
        self.errors.close()
