"""
ethrpc RPC Modules

Request builders for the eth_, net_ and web3_ namespaces, and the method
result schema the correlator and transports decode with.
"""

from typing import Dict

from .base import Invoker, MethodSpec, RPCModule, build_schema, rpc_method
from .eth import EthModule
from .net import NetModule
from .web3 import Web3Module

MODULES = (EthModule, NetModule, Web3Module)

# method name -> result decoder
METHOD_RESULT_SCHEMA: Dict[str, MethodSpec] = build_schema(*MODULES)

__all__ = [
    "EthModule",
    "Invoker",
    "METHOD_RESULT_SCHEMA",
    "MODULES",
    "MethodSpec",
    "NetModule",
    "RPCModule",
    "Web3Module",
    "build_schema",
    "rpc_method",
]
