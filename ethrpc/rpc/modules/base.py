"""
RPC module base.

A module groups the methods of one namespace (``eth``, ``net``, ``web3``).
Each method body only validates its arguments and returns the positional
params list; :func:`rpc_method` turns that into a call through the module's
invoker, so one method definition serves every call style.
"""

import functools
from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Optional

from ..decoding import Decoder, decode_any
from ..envelope import RPCRequest, build_request

# invoke(method_name, params, result_decoder, request_id)
Invoker = Callable[[str, List[Any], Decoder, Optional[int]], Any]


@dataclass(frozen=True)
class MethodSpec:
    """What the correlator and transports need to know about one method."""

    name: str
    result: Decoder = decode_any
    description: str = ""

    def decode(self, raw: Any) -> Any:
        return self.result(raw)


def rpc_method(result: Decoder = decode_any) -> Callable:
    """
    Decorator to mark a method as an RPC endpoint.

    Usage:
        @rpc_method(result=decode_string)
        def blockNumber(self) -> list:
            return []

    The decorated method accepts an extra keyword ``request_id``: the
    caller's integer id, used by the WebSocket call style.
    """

    def decorate(build: Callable[..., List[Any]]) -> Callable:
        @functools.wraps(build)
        def call(self: "RPCModule", *args: Any, request_id: Optional[int] = None, **kwargs: Any) -> Any:
            params = build(self, *args, **kwargs)
            return self._call(build.__name__, params, request_id)

        call.__rpc_method__ = True
        call.__rpc_result__ = result
        return call

    return decorate


class RPCModule:
    """
    Base class for RPC modules.

    Subclass this to create method namespaces like eth_, net_, etc.
    Without an invoker, methods return the :class:`RPCRequest` they would
    send, which is how the request builder is used on its own.
    """

    # Namespace prefix (e.g., "eth", "net")
    namespace: str = ""

    def __init__(self, invoke: Optional[Invoker] = None):
        self._invoke = invoke

    def _call(self, local_name: str, params: List[Any], request_id: Optional[int]) -> Any:
        spec = self.method_spec(local_name)
        if self._invoke is None:
            return build_request(spec.name, params)
        return self._invoke(spec.name, params, spec.result, request_id)

    @classmethod
    def full_name(cls, local_name: str) -> str:
        return f"{cls.namespace}_{local_name}" if cls.namespace else local_name

    @classmethod
    def method_spec(cls, local_name: str) -> MethodSpec:
        attr = getattr(cls, local_name)
        doc = (attr.__doc__ or "").strip().splitlines()
        return MethodSpec(
            name=cls.full_name(local_name),
            result=attr.__rpc_result__,
            description=doc[0] if doc else "",
        )

    @classmethod
    def get_methods(cls) -> Dict[str, MethodSpec]:
        """
        Get all RPC methods in this module.

        Methods starting with underscore are private.

        Returns:
            Dict mapping full method names to their specs
        """
        methods = {}
        for name in dir(cls):
            if name.startswith("_"):
                continue
            attr = getattr(cls, name)
            if callable(attr) and getattr(attr, "__rpc_method__", False):
                spec = cls.method_spec(name)
                methods[spec.name] = spec
        return methods


def build_schema(*modules: type) -> Dict[str, MethodSpec]:
    """Merge the method specs of several module classes."""
    schema: Dict[str, MethodSpec] = {}
    for module in modules:
        schema.update(module.get_methods())
    return schema


__all__ = ["Invoker", "MethodSpec", "RPCModule", "RPCRequest", "build_schema", "rpc_method"]
