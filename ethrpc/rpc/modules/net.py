"""
ethrpc net_* RPC Methods
"""

from typing import Any, List

from ..decoding import decode_bool, decode_string
from .base import RPCModule, rpc_method


class NetModule(RPCModule):
    """
    net_* namespace RPC methods.
    """

    namespace = "net"

    @rpc_method(result=decode_string)
    def version(self) -> List[Any]:
        """
        Returns the network ID.

        Returns:
            Network ID string (decimal, e.g. "1")
        """
        return []

    @rpc_method(result=decode_bool)
    def listening(self) -> List[Any]:
        """
        Returns whether the node is listening for connections.

        Returns:
            True if listening
        """
        return []

    @rpc_method(result=decode_string)
    def peerCount(self) -> List[Any]:
        """
        Returns the number of connected peers.

        Returns:
            Peer count (hex)
        """
        return []
