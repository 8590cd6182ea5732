"""
ethrpc eth_* RPC Methods

The Ethereum JSON-RPC ``eth`` namespace. Each method validates its hex
parameters against their patterns, then returns the positional params in
the node's declared order. Absent optional parameters are left out of the
list rather than sent as null.

Result decoders (the method result schema) are attached per method with
``@rpc_method(result=...)``.
"""

from __future__ import annotations

from typing import Any, Dict, List, Optional, Sequence, Union

from ...exceptions import DecodeError, ParameterValidationError
from ..decoding import (
    decode_bool,
    decode_string,
    decode_string_list,
    encode_value,
    optional,
)
from ..types import (
    BlockNumberOrTag,
    BlockObject,
    BlockTag,
    FeeHistoryResults,
    Filter,
    FilterChanges,
    ReceiptInfo,
    SyncingResult,
    TransactionInformation,
    TransactionObjectWithSender,
)
from ..validation import (
    ADDRESS_PATTERN,
    HASH_32_PATTERN,
    HEX_DATA_PATTERN,
    NONCE_8_PATTERN,
    QUANTITY_PATTERN,
    check_optional,
    check_parameter,
)
from .base import RPCModule, rpc_method

BlockParam = Union[BlockNumberOrTag, BlockTag, int, str]
TransactionParam = Union[TransactionObjectWithSender, Dict[str, Any]]
FilterParam = Union[Filter, Dict[str, Any]]

SUBSCRIPTION_TYPES = ("newHeads", "logs", "newPendingTransactions", "syncing")


def block_param(value: BlockParam, name: str = "block") -> str:
    """
    Normalize a block reference to its wire form.

    Accepts a tag (``"latest"``, ``BlockTag.PENDING``), a hex quantity or a
    plain int. Hex numbers must match the quantity pattern.
    """
    try:
        block = BlockNumberOrTag.coerce(value)
    except DecodeError:
        raise ParameterValidationError(value, QUANTITY_PATTERN, name)
    if block.is_("block_number"):
        check_parameter(block.value, QUANTITY_PATTERN, name)
    return block.encode()


def optional_block_param(value: Optional[BlockParam], name: str = "block") -> Optional[str]:
    if value is None:
        return None
    return block_param(value, name)


def transaction_param(transaction: TransactionParam) -> Dict[str, Any]:
    """Wire form of a transaction request; the sender must be a valid address."""
    body = encode_value(transaction)
    if not isinstance(body, dict):
        raise TypeError(f"transaction must be a TransactionObjectWithSender or dict, got {type(transaction).__name__}")
    check_parameter(body.get("from"), ADDRESS_PATTERN, "transaction.from")
    return body


def filter_param(filter: FilterParam) -> Dict[str, Any]:
    body = encode_value(filter)
    if not isinstance(body, dict):
        raise TypeError(f"filter must be a Filter or dict, got {type(filter).__name__}")
    return body


def _present(*params: Any) -> List[Any]:
    """Positional params with trailing absent optionals dropped."""
    values = list(params)
    while values and values[-1] is None:
        values.pop()
    return values


_optional_string = optional(decode_string)


class EthModule(RPCModule):
    """
    eth_* namespace RPC methods.
    """

    namespace = "eth"

    # -- Blocks -------------------------------------------------------------

    @rpc_method(result=optional(BlockObject.from_dict))
    def getBlockByHash(self, block_hash: str, hydrated_transactions: bool = False) -> List[Any]:
        """
        Returns information about a block by hash.

        Args:
            block_hash: 32-byte block hash
            hydrated_transactions: full transaction objects instead of hashes

        Returns:
            BlockObject, or None when the block is unknown
        """
        check_parameter(block_hash, HASH_32_PATTERN, "block_hash")
        return [block_hash, bool(hydrated_transactions)]

    @rpc_method(result=optional(BlockObject.from_dict))
    def getBlockByNumber(self, block: BlockParam, hydrated_transactions: bool = False) -> List[Any]:
        """Returns information about a block by number or tag."""
        return [block_param(block), bool(hydrated_transactions)]

    @rpc_method(result=_optional_string)
    def getBlockTransactionCountByHash(self, block_hash: Optional[str] = None) -> List[Any]:
        """Returns the number of transactions in a block from a block matching the given block hash."""
        return _present(check_optional(block_hash, HASH_32_PATTERN, "block_hash"))

    @rpc_method(result=_optional_string)
    def getBlockTransactionCountByNumber(self, block: Optional[BlockParam] = None) -> List[Any]:
        """Returns the number of transactions in a block matching the given block number."""
        return _present(optional_block_param(block))

    @rpc_method(result=_optional_string)
    def getUncleCountByBlockHash(self, block_hash: Optional[str] = None) -> List[Any]:
        """Returns the number of uncles in a block from a block matching the given block hash."""
        return _present(check_optional(block_hash, HASH_32_PATTERN, "block_hash"))

    @rpc_method(result=_optional_string)
    def getUncleCountByBlockNumber(self, block: Optional[BlockParam] = None) -> List[Any]:
        """Returns the number of uncles in a block matching the given block number."""
        return _present(optional_block_param(block))

    # -- Node state ---------------------------------------------------------

    @rpc_method(result=decode_string)
    def protocolVersion(self) -> List[Any]:
        """Returns the current ethereum protocol version."""
        return []

    @rpc_method(result=decode_string)
    def chainId(self) -> List[Any]:
        """Returns the chain ID of the current network."""
        return []

    @rpc_method(result=SyncingResult.decode)
    def syncing(self) -> List[Any]:
        """Returns an object with sync status data, or false when not syncing."""
        return []

    @rpc_method(result=decode_string)
    def coinbase(self) -> List[Any]:
        """Returns the client coinbase address."""
        return []

    @rpc_method(result=decode_string_list)
    def accounts(self) -> List[Any]:
        """Returns a list of addresses owned by client."""
        return []

    @rpc_method(result=decode_string)
    def blockNumber(self) -> List[Any]:
        """Returns the number of most recent block."""
        return []

    @rpc_method(result=decode_bool)
    def mining(self) -> List[Any]:
        """Returns whether the client is actively mining new blocks."""
        return []

    @rpc_method(result=decode_string)
    def hashrate(self) -> List[Any]:
        """Returns the number of hashes per second that the node is mining with."""
        return []

    # -- Execution ----------------------------------------------------------

    @rpc_method(result=decode_string)
    def call(self, transaction: TransactionParam, block: Optional[BlockParam] = None) -> List[Any]:
        """
        Executes a new message call immediately without creating a transaction on the block chain.

        Args:
            transaction: request with a sender
            block: block to execute against; the node's default when omitted

        Returns:
            Return data of the executed contract (hex)
        """
        return _present(transaction_param(transaction), optional_block_param(block))

    @rpc_method(result=decode_string)
    def estimateGas(self, transaction: TransactionParam) -> List[Any]:
        """Generates and returns an estimate of how much gas is necessary to allow the transaction to complete."""
        return [transaction_param(transaction)]

    # -- Fees ---------------------------------------------------------------

    @rpc_method(result=decode_string)
    def gasPrice(self) -> List[Any]:
        """Returns the current price per gas in wei."""
        return []

    @rpc_method(result=FeeHistoryResults.from_dict)
    def feeHistory(
        self,
        block_count: str,
        newest_block: BlockParam,
        reward_percentiles: Sequence[float],
    ) -> List[Any]:
        """
        Returns transaction base fee per gas and effective priority fee per gas for the requested block range.

        Args:
            block_count: number of blocks in the range (hex quantity)
            newest_block: highest block of the range
            reward_percentiles: ascending percentiles of priority fees to sample
        """
        check_parameter(block_count, QUANTITY_PATTERN, "block_count")
        percentiles = []
        for value in reward_percentiles:
            if isinstance(value, bool) or not isinstance(value, (int, float)):
                raise TypeError(f"reward percentile must be a number, got {value!r}")
            percentiles.append(value)
        return [block_count, block_param(newest_block, "newest_block"), percentiles]

    # -- Filters ------------------------------------------------------------

    @rpc_method(result=decode_string)
    def newFilter(self, filter: Optional[FilterParam] = None) -> List[Any]:
        """Install a log filter in the server, allowing for later polling."""
        return _present(filter_param(filter) if filter is not None else None)

    @rpc_method(result=decode_string)
    def newBlockFilter(self) -> List[Any]:
        """Install a filter in the server to notify when a new block arrives."""
        return []

    @rpc_method(result=decode_string)
    def newPendingTransactionFilter(self) -> List[Any]:
        """Install a filter in the server to notify when a new pending transaction arrives."""
        return []

    @rpc_method(result=decode_bool)
    def uninstallFilter(self, filter_id: Optional[str] = None) -> List[Any]:
        """Uninstalls a filter with given id."""
        return _present(check_optional(filter_id, QUANTITY_PATTERN, "filter_id"))

    @rpc_method(result=FilterChanges.decode)
    def getFilterChanges(self, filter_id: Optional[str] = None) -> List[Any]:
        """Polling method for a filter, which returns an array of logs or hashes since last poll."""
        return _present(check_optional(filter_id, QUANTITY_PATTERN, "filter_id"))

    @rpc_method(result=FilterChanges.decode)
    def getFilterLogs(self, filter_id: Optional[str] = None) -> List[Any]:
        """Returns an array of all logs matching filter with given id."""
        return _present(check_optional(filter_id, QUANTITY_PATTERN, "filter_id"))

    @rpc_method(result=FilterChanges.decode)
    def getLogs(self, filter: Optional[FilterParam] = None) -> List[Any]:
        """Returns an array of all logs matching a given filter object."""
        return _present(filter_param(filter) if filter is not None else None)

    # -- Mining -------------------------------------------------------------

    @rpc_method(result=decode_bool)
    def submitWork(self, nonce: str, hash: str, digest: str) -> List[Any]:
        """Used for submitting a proof-of-work solution."""
        check_parameter(nonce, NONCE_8_PATTERN, "nonce")
        check_parameter(hash, HASH_32_PATTERN, "hash")
        check_parameter(digest, HASH_32_PATTERN, "digest")
        return [nonce, hash, digest]

    @rpc_method(result=decode_bool)
    def submitHashrate(self, hashrate: str, client_id: str) -> List[Any]:
        """Used for submitting mining hashrate."""
        check_parameter(hashrate, HASH_32_PATTERN, "hashrate")
        check_parameter(client_id, HASH_32_PATTERN, "client_id")
        return [hashrate, client_id]

    # -- Signing ------------------------------------------------------------

    @rpc_method(result=decode_string)
    def sign(self, address: str, message: str) -> List[Any]:
        """Returns an EIP-191 signature over the provided data."""
        check_parameter(address, ADDRESS_PATTERN, "address")
        check_parameter(message, HEX_DATA_PATTERN, "message")
        return [address, message]

    @rpc_method(result=decode_string)
    def signTransaction(self, transaction: TransactionParam) -> List[Any]:
        """Returns an RLP encoded transaction signed by the specified account."""
        return [transaction_param(transaction)]

    # -- State --------------------------------------------------------------

    @rpc_method(result=decode_string)
    def getBalance(self, address: str, block: BlockParam = BlockTag.LATEST) -> List[Any]:
        """
        Returns the balance of the account of given address.

        Returns:
            Balance in wei (hex)
        """
        check_parameter(address, ADDRESS_PATTERN, "address")
        return [address, block_param(block)]

    @rpc_method(result=decode_string)
    def getStorageAt(self, address: str, storage_slot: str, block: BlockParam = BlockTag.LATEST) -> List[Any]:
        """Returns the value from a storage position at a given address."""
        check_parameter(address, ADDRESS_PATTERN, "address")
        check_parameter(storage_slot, HASH_32_PATTERN, "storage_slot")
        return [address, storage_slot, block_param(block)]

    @rpc_method(result=_optional_string)
    def getTransactionCount(self, address: str, block: BlockParam = BlockTag.LATEST) -> List[Any]:
        """Returns the number of transactions sent from an address."""
        check_parameter(address, ADDRESS_PATTERN, "address")
        return [address, block_param(block)]

    @rpc_method(result=decode_string)
    def getCode(self, address: str, block: BlockParam = BlockTag.LATEST) -> List[Any]:
        """Returns code at a given address."""
        check_parameter(address, ADDRESS_PATTERN, "address")
        return [address, block_param(block)]

    # -- Transactions -------------------------------------------------------

    @rpc_method(result=decode_string)
    def sendTransaction(self, transaction: TransactionParam) -> List[Any]:
        """Signs and submits a transaction. Returns the transaction hash."""
        return [transaction_param(transaction)]

    @rpc_method(result=decode_string)
    def sendRawTransaction(self, transaction: str) -> List[Any]:
        """Submits a raw signed transaction. Returns the transaction hash."""
        check_parameter(transaction, HEX_DATA_PATTERN, "transaction")
        return [transaction]

    @rpc_method(result=optional(TransactionInformation.from_dict))
    def getTransactionByHash(self, transaction_hash: str) -> List[Any]:
        """Returns the information about a transaction requested by transaction hash."""
        check_parameter(transaction_hash, HASH_32_PATTERN, "transaction_hash")
        return [transaction_hash]

    @rpc_method(result=optional(TransactionInformation.from_dict))
    def getTransactionByBlockHashAndIndex(self, block_hash: str, transaction_index: str) -> List[Any]:
        """Returns information about a transaction by block hash and transaction index position."""
        check_parameter(block_hash, HASH_32_PATTERN, "block_hash")
        check_parameter(transaction_index, QUANTITY_PATTERN, "transaction_index")
        return [block_hash, transaction_index]

    @rpc_method(result=optional(TransactionInformation.from_dict))
    def getTransactionByBlockNumberAndIndex(self, block: BlockParam, transaction_index: str) -> List[Any]:
        """Returns information about a transaction by block number and transaction index position."""
        check_parameter(transaction_index, QUANTITY_PATTERN, "transaction_index")
        return [block_param(block), transaction_index]

    @rpc_method(result=optional(ReceiptInfo.from_dict))
    def getTransactionReceipt(self, transaction_hash: Optional[str] = None) -> List[Any]:
        """Returns the receipt of a transaction by transaction hash."""
        return _present(check_optional(transaction_hash, HASH_32_PATTERN, "transaction_hash"))

    # -- Subscriptions (WebSocket only) -------------------------------------

    @rpc_method(result=decode_string)
    def subscribe(self, subscription_type: str, options: Optional[FilterParam] = None) -> List[Any]:
        """
        Starts a push subscription; notifications arrive as ``eth_subscription`` frames.

        Args:
            subscription_type: newHeads, logs, newPendingTransactions or syncing
            options: log filter, for ``logs`` subscriptions

        Returns:
            Subscription id
        """
        if subscription_type not in SUBSCRIPTION_TYPES:
            raise ValueError(
                f"Unknown subscription type {subscription_type!r}; expected one of {SUBSCRIPTION_TYPES}"
            )
        return _present(subscription_type, filter_param(options) if options is not None else None)

    @rpc_method(result=decode_bool)
    def unsubscribe(self, subscription_id: str) -> List[Any]:
        """Cancels a subscription by id."""
        check_parameter(subscription_id, HEX_DATA_PATTERN, "subscription_id")
        return [subscription_id]
