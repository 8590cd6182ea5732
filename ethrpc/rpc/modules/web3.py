"""
ethrpc web3_* RPC Methods
"""

from typing import Any, List

from ..decoding import decode_string
from ..validation import HEX_DATA_PATTERN, check_parameter
from .base import RPCModule, rpc_method


class Web3Module(RPCModule):
    """
    web3_* namespace RPC methods.
    """

    namespace = "web3"

    @rpc_method(result=decode_string)
    def clientVersion(self) -> List[Any]:
        """
        Returns the current client version.

        Returns:
            Client version string
        """
        return []

    @rpc_method(result=decode_string)
    def sha3(self, data: str) -> List[Any]:
        """
        Returns Keccak-256 (not standardized SHA3-256) of the given data.

        Args:
            data: Hex-encoded data to hash

        Returns:
            Keccak-256 hash (hex)
        """
        check_parameter(data, HEX_DATA_PATTERN, "data")
        return [data]
