"""
ethrpc Result Types

Typed views of the JSON shapes returned by (and sent to) Ethereum nodes.

Every object type is a frozen dataclass with ``from_dict`` (strict:
missing required fields raise DecodeError, unknown fields are ignored)
and ``to_dict`` (wire names, absent optionals omitted). Hex quantities
stay as strings; use :func:`to_int` / :func:`from_int` to convert.

One-of types are :class:`~ethrpc.rpc.decoding.OneOf` subclasses. Their
``VARIANTS`` order is the decode priority:

==========================  ==================================================
AddressOrAddresses          address (str) → addresses (List[str])
BlockNumberOrTag            block_number (0x-hex str) → block_tag (earliest|latest|pending)
TopicMatch                  single (str) → multiple (List[str]) → any (null)
SignedTransaction           signed_1559 → signed_2930 → signed_legacy
UnsignedTransaction         eip_1559 → eip_2930 → legacy
SyncingResult               syncing_progress (object) → not_syncing (bool)
BlockTransactions           transaction_hashes (List[str]) → full_transactions
FilterChanges               new_block_hashes → new_transaction_hashes → new_logs
==========================  ==================================================
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional, Union

import eth_utils

from ..exceptions import DecodeError
from .decoding import (
    OneOf,
    compact,
    decode_bool,
    decode_null,
    decode_number,
    decode_object,
    decode_string,
    decode_string_list,
    list_of,
    optional_field,
    required,
)

_HEX_STRING_RE = re.compile(r"^0x[0-9a-fA-F]*$")


# ---------------------------------------------------------------------------
# Quantity helpers
# ---------------------------------------------------------------------------

def to_int(value: str) -> int:
    """``"0x1a"`` → ``26``."""
    try:
        return eth_utils.to_int(hexstr=value)
    except (TypeError, ValueError) as e:
        raise DecodeError(f"Not a hex quantity: {value!r}", type_name="int") from e


def from_int(value: int) -> str:
    """``26`` → ``"0x1a"`` (the canonical, unpadded quantity form)."""
    if isinstance(value, bool) or not isinstance(value, int) or value < 0:
        raise ValueError(f"Quantity must be a non-negative int, got {value!r}")
    return eth_utils.to_hex(value)


def decode_hex_string(value: Any) -> str:
    text = decode_string(value)
    if not _HEX_STRING_RE.match(text):
        raise DecodeError(f"Expected 0x-prefixed hex string, got {text!r}", type_name="HexStr")
    return text


# ---------------------------------------------------------------------------
# Block tag
# ---------------------------------------------------------------------------

class BlockTag(str, Enum):
    """Named block positions."""

    EARLIEST = "earliest"
    LATEST = "latest"
    PENDING = "pending"

    @classmethod
    def decode(cls, value: Any) -> "BlockTag":
        text = decode_string(value)
        try:
            return cls(text)
        except ValueError:
            raise DecodeError(f"Unknown block tag {text!r}", type_name="BlockTag")


# ---------------------------------------------------------------------------
# Plain object types
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class AccessListEntry:
    address: Optional[str] = None
    storage_keys: Optional[List[str]] = None

    @classmethod
    def from_dict(cls, data: Any) -> "AccessListEntry":
        name = cls.__name__
        data = decode_object(data, name)
        return cls(
            address=optional_field(data, "address", decode_string, name),
            storage_keys=optional_field(data, "storageKeys", decode_string_list, name),
        )

    def to_dict(self) -> dict:
        return compact({"address": self.address, "storageKeys": self.storage_keys})


_access_list = list_of(AccessListEntry.from_dict, "List[AccessListEntry]")


@dataclass(frozen=True)
class Signed1559Transaction:
    """Signed EIP-1559 (type 0x2) transaction."""

    value: str
    s: str
    access_list: List[AccessListEntry]
    nonce: str
    max_fee_per_gas: str
    chain_id: str
    type: str
    r: str
    input: str
    max_priority_fee_per_gas: str
    gas: str
    y_parity: str
    to: Optional[str] = None

    @classmethod
    def from_dict(cls, data: Any) -> "Signed1559Transaction":
        name = cls.__name__
        data = decode_object(data, name)
        return cls(
            value=required(data, "value", decode_string, name),
            s=required(data, "s", decode_string, name),
            access_list=required(data, "accessList", _access_list, name),
            nonce=required(data, "nonce", decode_string, name),
            max_fee_per_gas=required(data, "maxFeePerGas", decode_string, name),
            chain_id=required(data, "chainId", decode_string, name),
            type=required(data, "type", decode_string, name),
            r=required(data, "r", decode_string, name),
            input=required(data, "input", decode_string, name),
            max_priority_fee_per_gas=required(data, "maxPriorityFeePerGas", decode_string, name),
            gas=required(data, "gas", decode_string, name),
            y_parity=required(data, "yParity", decode_string, name),
            to=optional_field(data, "to", decode_string, name),
        )

    def to_dict(self) -> dict:
        return compact({
            "type": self.type,
            "nonce": self.nonce,
            "to": self.to,
            "gas": self.gas,
            "value": self.value,
            "input": self.input,
            "maxPriorityFeePerGas": self.max_priority_fee_per_gas,
            "maxFeePerGas": self.max_fee_per_gas,
            "accessList": self.access_list,
            "chainId": self.chain_id,
            "yParity": self.y_parity,
            "r": self.r,
            "s": self.s,
        })


@dataclass(frozen=True)
class Signed2930Transaction:
    """Signed EIP-2930 (type 0x1) transaction."""

    nonce: str
    r: str
    input: str
    type: str
    s: str
    value: str
    gas_price: str
    y_parity: str
    gas: str
    chain_id: str
    access_list: List[AccessListEntry]
    to: Optional[str] = None

    @classmethod
    def from_dict(cls, data: Any) -> "Signed2930Transaction":
        name = cls.__name__
        data = decode_object(data, name)
        return cls(
            nonce=required(data, "nonce", decode_string, name),
            r=required(data, "r", decode_string, name),
            input=required(data, "input", decode_string, name),
            type=required(data, "type", decode_string, name),
            s=required(data, "s", decode_string, name),
            value=required(data, "value", decode_string, name),
            gas_price=required(data, "gasPrice", decode_string, name),
            y_parity=required(data, "yParity", decode_string, name),
            gas=required(data, "gas", decode_string, name),
            chain_id=required(data, "chainId", decode_string, name),
            access_list=required(data, "accessList", _access_list, name),
            to=optional_field(data, "to", decode_string, name),
        )

    def to_dict(self) -> dict:
        return compact({
            "type": self.type,
            "nonce": self.nonce,
            "to": self.to,
            "gas": self.gas,
            "value": self.value,
            "input": self.input,
            "gasPrice": self.gas_price,
            "accessList": self.access_list,
            "chainId": self.chain_id,
            "yParity": self.y_parity,
            "r": self.r,
            "s": self.s,
        })


@dataclass(frozen=True)
class SignedLegacyTransaction:
    """Signed legacy (type 0x0) transaction."""

    gas_price: str
    s: str
    gas: str
    r: str
    value: str
    type: str
    nonce: str
    input: str
    v: str
    chain_id: Optional[str] = None
    to: Optional[str] = None

    @classmethod
    def from_dict(cls, data: Any) -> "SignedLegacyTransaction":
        name = cls.__name__
        data = decode_object(data, name)
        return cls(
            gas_price=required(data, "gasPrice", decode_string, name),
            s=required(data, "s", decode_string, name),
            gas=required(data, "gas", decode_string, name),
            r=required(data, "r", decode_string, name),
            value=required(data, "value", decode_string, name),
            type=required(data, "type", decode_string, name),
            nonce=required(data, "nonce", decode_string, name),
            input=required(data, "input", decode_string, name),
            v=required(data, "v", decode_string, name),
            chain_id=optional_field(data, "chainId", decode_string, name),
            to=optional_field(data, "to", decode_string, name),
        )

    def to_dict(self) -> dict:
        return compact({
            "type": self.type,
            "nonce": self.nonce,
            "to": self.to,
            "gas": self.gas,
            "value": self.value,
            "input": self.input,
            "gasPrice": self.gas_price,
            "chainId": self.chain_id,
            "v": self.v,
            "r": self.r,
            "s": self.s,
        })


@dataclass(frozen=True)
class EIP1559Transaction:
    """Unsigned EIP-1559 transaction."""

    gas: str
    type: str
    access_list: List[AccessListEntry]
    value: str
    max_fee_per_gas: str
    max_priority_fee_per_gas: str
    nonce: str
    input: str
    chain_id: str
    to: Optional[str] = None

    @classmethod
    def from_dict(cls, data: Any) -> "EIP1559Transaction":
        name = cls.__name__
        data = decode_object(data, name)
        return cls(
            gas=required(data, "gas", decode_string, name),
            type=required(data, "type", decode_string, name),
            access_list=required(data, "accessList", _access_list, name),
            value=required(data, "value", decode_string, name),
            max_fee_per_gas=required(data, "maxFeePerGas", decode_string, name),
            max_priority_fee_per_gas=required(data, "maxPriorityFeePerGas", decode_string, name),
            nonce=required(data, "nonce", decode_string, name),
            input=required(data, "input", decode_string, name),
            chain_id=required(data, "chainId", decode_string, name),
            to=optional_field(data, "to", decode_string, name),
        )

    def to_dict(self) -> dict:
        return compact({
            "type": self.type,
            "nonce": self.nonce,
            "to": self.to,
            "gas": self.gas,
            "value": self.value,
            "input": self.input,
            "maxPriorityFeePerGas": self.max_priority_fee_per_gas,
            "maxFeePerGas": self.max_fee_per_gas,
            "accessList": self.access_list,
            "chainId": self.chain_id,
        })


@dataclass(frozen=True)
class EIP2930Transaction:
    """Unsigned EIP-2930 transaction."""

    input: str
    gas: str
    nonce: str
    access_list: List[AccessListEntry]
    value: str
    chain_id: str
    gas_price: str
    type: str
    to: Optional[str] = None

    @classmethod
    def from_dict(cls, data: Any) -> "EIP2930Transaction":
        name = cls.__name__
        data = decode_object(data, name)
        return cls(
            input=required(data, "input", decode_string, name),
            gas=required(data, "gas", decode_string, name),
            nonce=required(data, "nonce", decode_string, name),
            access_list=required(data, "accessList", _access_list, name),
            value=required(data, "value", decode_string, name),
            chain_id=required(data, "chainId", decode_string, name),
            gas_price=required(data, "gasPrice", decode_string, name),
            type=required(data, "type", decode_string, name),
            to=optional_field(data, "to", decode_string, name),
        )

    def to_dict(self) -> dict:
        return compact({
            "type": self.type,
            "nonce": self.nonce,
            "to": self.to,
            "gas": self.gas,
            "value": self.value,
            "input": self.input,
            "gasPrice": self.gas_price,
            "accessList": self.access_list,
            "chainId": self.chain_id,
        })


@dataclass(frozen=True)
class LegacyTransaction:
    """Unsigned legacy transaction."""

    nonce: str
    gas: str
    gas_price: str
    type: str
    input: str
    value: str
    to: Optional[str] = None
    chain_id: Optional[str] = None

    @classmethod
    def from_dict(cls, data: Any) -> "LegacyTransaction":
        name = cls.__name__
        data = decode_object(data, name)
        return cls(
            nonce=required(data, "nonce", decode_string, name),
            gas=required(data, "gas", decode_string, name),
            gas_price=required(data, "gasPrice", decode_string, name),
            type=required(data, "type", decode_string, name),
            input=required(data, "input", decode_string, name),
            value=required(data, "value", decode_string, name),
            to=optional_field(data, "to", decode_string, name),
            chain_id=optional_field(data, "chainId", decode_string, name),
        )

    def to_dict(self) -> dict:
        return compact({
            "type": self.type,
            "nonce": self.nonce,
            "to": self.to,
            "gas": self.gas,
            "value": self.value,
            "input": self.input,
            "gasPrice": self.gas_price,
            "chainId": self.chain_id,
        })


@dataclass(frozen=True)
class Log:
    """Event log entry. Every field is optional (pending logs lack most)."""

    data: Optional[str] = None
    topics: Optional[List[str]] = None
    address: Optional[str] = None
    transaction_hash: Optional[str] = None
    transaction_index: Optional[str] = None
    block_number: Optional[str] = None
    log_index: Optional[str] = None
    removed: Optional[bool] = None
    block_hash: Optional[str] = None

    @classmethod
    def from_dict(cls, data: Any) -> "Log":
        name = cls.__name__
        data = decode_object(data, name)
        return cls(
            data=optional_field(data, "data", decode_string, name),
            topics=optional_field(data, "topics", decode_string_list, name),
            address=optional_field(data, "address", decode_string, name),
            transaction_hash=optional_field(data, "transactionHash", decode_string, name),
            transaction_index=optional_field(data, "transactionIndex", decode_string, name),
            block_number=optional_field(data, "blockNumber", decode_string, name),
            log_index=optional_field(data, "logIndex", decode_string, name),
            removed=optional_field(data, "removed", decode_bool, name),
            block_hash=optional_field(data, "blockHash", decode_string, name),
        )

    def to_dict(self) -> dict:
        return compact({
            "removed": self.removed,
            "logIndex": self.log_index,
            "transactionIndex": self.transaction_index,
            "transactionHash": self.transaction_hash,
            "blockHash": self.block_hash,
            "blockNumber": self.block_number,
            "address": self.address,
            "data": self.data,
            "topics": self.topics,
        })


@dataclass(frozen=True)
class SyncingProgress:
    starting_block: Optional[str] = None
    current_block: Optional[str] = None
    highest_block: Optional[str] = None

    @classmethod
    def from_dict(cls, data: Any) -> "SyncingProgress":
        name = cls.__name__
        data = decode_object(data, name)
        return cls(
            starting_block=optional_field(data, "startingBlock", decode_string, name),
            current_block=optional_field(data, "currentBlock", decode_string, name),
            highest_block=optional_field(data, "highestBlock", decode_string, name),
        )

    def to_dict(self) -> dict:
        return compact({
            "startingBlock": self.starting_block,
            "currentBlock": self.current_block,
            "highestBlock": self.highest_block,
        })

    @property
    def remaining_blocks(self) -> Optional[int]:
        if self.current_block is None or self.highest_block is None:
            return None
        return max(0, to_int(self.highest_block) - to_int(self.current_block))


@dataclass(frozen=True)
class FeeHistoryResults:
    base_fee_per_gas: List[str]
    oldest_block: Optional[str] = None
    reward: Optional[List[List[str]]] = None
    gas_used_ratio: Optional[List[float]] = None

    @classmethod
    def from_dict(cls, data: Any) -> "FeeHistoryResults":
        name = cls.__name__
        data = decode_object(data, name)
        return cls(
            base_fee_per_gas=required(data, "baseFeePerGas", decode_string_list, name),
            oldest_block=optional_field(data, "oldestBlock", decode_string, name),
            reward=optional_field(data, "reward", list_of(decode_string_list, "List[List[str]]"), name),
            gas_used_ratio=optional_field(data, "gasUsedRatio", list_of(decode_number, "List[float]"), name),
        )

    def to_dict(self) -> dict:
        return compact({
            "oldestBlock": self.oldest_block,
            "baseFeePerGas": self.base_fee_per_gas,
            "reward": self.reward,
            "gasUsedRatio": self.gas_used_ratio,
        })


@dataclass(frozen=True)
class ReceiptInfo:
    cumulative_gas_used: str
    block_hash: str
    gas_used: str
    from_: str
    block_number: str
    transaction_hash: str
    logs_bloom: str
    effective_gas_price: str
    transaction_index: str
    logs: List[Log]
    root: Optional[str] = None
    contract_address: Optional[str] = None
    status: Optional[str] = None
    to: Optional[str] = None

    @classmethod
    def from_dict(cls, data: Any) -> "ReceiptInfo":
        name = cls.__name__
        data = decode_object(data, name)
        return cls(
            cumulative_gas_used=required(data, "cumulativeGasUsed", decode_string, name),
            block_hash=required(data, "blockHash", decode_string, name),
            gas_used=required(data, "gasUsed", decode_string, name),
            from_=required(data, "from", decode_string, name),
            block_number=required(data, "blockNumber", decode_string, name),
            transaction_hash=required(data, "transactionHash", decode_string, name),
            logs_bloom=required(data, "logsBloom", decode_string, name),
            effective_gas_price=required(data, "effectiveGasPrice", decode_string, name),
            transaction_index=required(data, "transactionIndex", decode_string, name),
            logs=required(data, "logs", list_of(Log.from_dict, "List[Log]"), name),
            root=optional_field(data, "root", decode_string, name),
            contract_address=optional_field(data, "contractAddress", decode_string, name),
            status=optional_field(data, "status", decode_string, name),
            to=optional_field(data, "to", decode_string, name),
        )

    def to_dict(self) -> dict:
        return compact({
            "transactionHash": self.transaction_hash,
            "transactionIndex": self.transaction_index,
            "blockHash": self.block_hash,
            "blockNumber": self.block_number,
            "from": self.from_,
            "to": self.to,
            "cumulativeGasUsed": self.cumulative_gas_used,
            "gasUsed": self.gas_used,
            "contractAddress": self.contract_address,
            "logs": self.logs,
            "logsBloom": self.logs_bloom,
            "root": self.root,
            "status": self.status,
            "effectiveGasPrice": self.effective_gas_price,
        })

    @property
    def succeeded(self) -> Optional[bool]:
        """Post-Byzantium status flag; None for pre-Byzantium receipts."""
        if self.status is None:
            return None
        return to_int(self.status) == 1


# ---------------------------------------------------------------------------
# One-of types
# ---------------------------------------------------------------------------

def _decode_block_number(value: Any) -> str:
    return decode_hex_string(value)


def _decode_block_tag(value: Any) -> str:
    return BlockTag.decode(value).value


def _decode_topic_any(value: Any) -> None:
    return decode_null(value)


class AddressOrAddresses(OneOf):
    """A single address or a list of addresses (log filters)."""

    VARIANTS = (
        ("address", decode_string),
        ("addresses", decode_string_list),
    )

    @classmethod
    def address(cls, value: str) -> "AddressOrAddresses":
        return cls("address", value)

    @classmethod
    def addresses(cls, value: List[str]) -> "AddressOrAddresses":
        return cls("addresses", list(value))


class BlockNumberOrTag(OneOf):
    """A hex block number or a named tag."""

    VARIANTS = (
        ("block_number", _decode_block_number),
        ("block_tag", _decode_block_tag),
    )

    @classmethod
    def number(cls, value: Union[int, str]) -> "BlockNumberOrTag":
        if isinstance(value, int):
            value = from_int(value)
        return cls("block_number", value)

    @classmethod
    def tag(cls, value: Union[BlockTag, str]) -> "BlockNumberOrTag":
        return cls("block_tag", BlockTag(value).value)

    @classmethod
    def latest(cls) -> "BlockNumberOrTag":
        return cls.tag(BlockTag.LATEST)

    @classmethod
    def coerce(cls, value: Union["BlockNumberOrTag", BlockTag, int, str]) -> "BlockNumberOrTag":
        """Accept the loose forms callers naturally pass."""
        if isinstance(value, BlockNumberOrTag):
            return value
        if isinstance(value, BlockTag):
            return cls.tag(value)
        if isinstance(value, int) and not isinstance(value, bool):
            return cls.number(value)
        return cls.decode(value)


class TopicMatch(OneOf):
    """One position of a log-filter topic list."""

    VARIANTS = (
        ("single", decode_string),
        ("multiple", decode_string_list),
        ("any", _decode_topic_any),
    )

    @classmethod
    def single(cls, topic: str) -> "TopicMatch":
        return cls("single", topic)

    @classmethod
    def multiple(cls, topics: List[str]) -> "TopicMatch":
        return cls("multiple", list(topics))

    @classmethod
    def any(cls) -> "TopicMatch":
        return cls("any", None)


class SignedTransaction(OneOf):
    VARIANTS = (
        ("signed_1559", Signed1559Transaction.from_dict),
        ("signed_2930", Signed2930Transaction.from_dict),
        ("signed_legacy", SignedLegacyTransaction.from_dict),
    )


class UnsignedTransaction(OneOf):
    VARIANTS = (
        ("eip_1559", EIP1559Transaction.from_dict),
        ("eip_2930", EIP2930Transaction.from_dict),
        ("legacy", LegacyTransaction.from_dict),
    )


class SyncingResult(OneOf):
    """``eth_syncing``: a progress object while syncing, ``false`` otherwise."""

    VARIANTS = (
        ("syncing_progress", SyncingProgress.from_dict),
        ("not_syncing", decode_bool),
    )

    @property
    def is_syncing(self) -> bool:
        return self.kind == "syncing_progress" or self.value is True


class BlockTransactions(OneOf):
    """Block body: hashes, or full objects when hydrated."""

    VARIANTS = (
        ("transaction_hashes", decode_string_list),
        ("full_transactions", list_of(SignedTransaction.decode, "List[SignedTransaction]")),
    )


class FilterChanges(OneOf):
    """
    Filter polling result.

    Block filters and pending-transaction filters both yield lists of
    hashes, so a list of strings always resolves to ``new_block_hashes``;
    callers that created a pending-transaction filter read ``value`` as
    transaction hashes.
    """

    VARIANTS = (
        ("new_block_hashes", decode_string_list),
        ("new_transaction_hashes", decode_string_list),
        ("new_logs", list_of(Log.from_dict, "List[Log]")),
    )


# ---------------------------------------------------------------------------
# Types that embed one-of values
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class Filter:
    """Log filter options."""

    address: Optional[AddressOrAddresses] = None
    from_block: Optional[str] = None
    to_block: Optional[str] = None
    topics: Optional[List[TopicMatch]] = None

    @classmethod
    def from_dict(cls, data: Any) -> "Filter":
        name = cls.__name__
        data = decode_object(data, name)
        return cls(
            address=optional_field(data, "address", AddressOrAddresses.decode, name),
            from_block=optional_field(data, "fromBlock", decode_string, name),
            to_block=optional_field(data, "toBlock", decode_string, name),
            # Topic positions keep their nulls: null means "any" at that position
            topics=optional_field(data, "topics", list_of(TopicMatch.decode, "List[TopicMatch]"), name),
        )

    def to_dict(self) -> dict:
        return compact({
            "address": self.address,
            "fromBlock": self.from_block,
            "toBlock": self.to_block,
            "topics": self.topics,
        })


@dataclass(frozen=True)
class TransactionObjectWithSender:
    """
    Transaction request with a sender (``eth_call``, ``eth_estimateGas``,
    ``eth_sendTransaction``, ``eth_signTransaction``).

    ``transaction`` holds a complete typed transaction when the caller has
    one; ``fields`` carries loose keys (``data``, partial gas settings) that
    call-style requests commonly send on their own.
    """

    from_: str
    transaction: Optional[UnsignedTransaction] = None
    fields: Dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, data: Any) -> "TransactionObjectWithSender":
        name = cls.__name__
        data = decode_object(data, name)
        sender = required(data, "from", decode_string, name)
        try:
            transaction = UnsignedTransaction.decode(data)
        except DecodeError:
            transaction = None
        known = set(transaction.encode()) if transaction is not None else set()
        extra = {k: v for k, v in data.items() if k != "from" and k not in known}
        return cls(from_=sender, transaction=transaction, fields=extra)

    def to_dict(self) -> dict:
        body: Dict[str, Any] = {"from": self.from_}
        if self.transaction is not None:
            body.update(self.transaction.encode())
        body.update(compact(self.fields))
        return body


@dataclass(frozen=True)
class TransactionInformation:
    """A mined transaction with its position in the chain."""

    block_hash: str
    block_number: str
    hash: str
    transaction_index: str
    from_: str
    transaction: Optional[SignedTransaction] = None

    @classmethod
    def from_dict(cls, data: Any) -> "TransactionInformation":
        name = cls.__name__
        data = decode_object(data, name)
        try:
            transaction = SignedTransaction.decode(data)
        except DecodeError:
            transaction = None
        return cls(
            block_hash=required(data, "blockHash", decode_string, name),
            block_number=required(data, "blockNumber", decode_string, name),
            hash=required(data, "hash", decode_string, name),
            transaction_index=required(data, "transactionIndex", decode_string, name),
            from_=required(data, "from", decode_string, name),
            transaction=transaction,
        )

    def to_dict(self) -> dict:
        body: Dict[str, Any] = {}
        if self.transaction is not None:
            body.update(self.transaction.encode())
        body.update({
            "blockHash": self.block_hash,
            "blockNumber": self.block_number,
            "hash": self.hash,
            "transactionIndex": self.transaction_index,
            "from": self.from_,
        })
        return body


@dataclass(frozen=True)
class BlockObject:
    miner: str
    logs_bloom: str
    nonce: str
    gas_limit: str
    extra_data: str
    number: str
    timestamp: str
    parent_hash: str
    mix_hash: str
    state_root: str
    receipts_root: str
    gas_used: str
    size: str
    sha3_uncles: str
    transactions: BlockTransactions
    uncles: List[str]
    transactions_root: str
    base_fee_per_gas: Optional[str] = None
    difficulty: Optional[str] = None
    total_difficulty: Optional[str] = None
    hash: Optional[str] = None

    @classmethod
    def from_dict(cls, data: Any) -> "BlockObject":
        name = cls.__name__
        data = decode_object(data, name)
        return cls(
            miner=required(data, "miner", decode_string, name),
            logs_bloom=required(data, "logsBloom", decode_string, name),
            nonce=required(data, "nonce", decode_string, name),
            gas_limit=required(data, "gasLimit", decode_string, name),
            extra_data=required(data, "extraData", decode_string, name),
            number=required(data, "number", decode_string, name),
            timestamp=required(data, "timestamp", decode_string, name),
            parent_hash=required(data, "parentHash", decode_string, name),
            mix_hash=required(data, "mixHash", decode_string, name),
            state_root=required(data, "stateRoot", decode_string, name),
            receipts_root=required(data, "receiptsRoot", decode_string, name),
            gas_used=required(data, "gasUsed", decode_string, name),
            size=required(data, "size", decode_string, name),
            sha3_uncles=required(data, "sha3Uncles", decode_string, name),
            transactions=required(data, "transactions", BlockTransactions.decode, name),
            uncles=required(data, "uncles", decode_string_list, name),
            transactions_root=required(data, "transactionsRoot", decode_string, name),
            base_fee_per_gas=optional_field(data, "baseFeePerGas", decode_string, name),
            difficulty=optional_field(data, "difficulty", decode_string, name),
            total_difficulty=optional_field(data, "totalDifficulty", decode_string, name),
            hash=optional_field(data, "hash", decode_string, name),
        )

    def to_dict(self) -> dict:
        return compact({
            "hash": self.hash,
            "parentHash": self.parent_hash,
            "sha3Uncles": self.sha3_uncles,
            "miner": self.miner,
            "stateRoot": self.state_root,
            "transactionsRoot": self.transactions_root,
            "receiptsRoot": self.receipts_root,
            "logsBloom": self.logs_bloom,
            "difficulty": self.difficulty,
            "totalDifficulty": self.total_difficulty,
            "number": self.number,
            "gasLimit": self.gas_limit,
            "gasUsed": self.gas_used,
            "timestamp": self.timestamp,
            "extraData": self.extra_data,
            "mixHash": self.mix_hash,
            "nonce": self.nonce,
            "baseFeePerGas": self.base_fee_per_gas,
            "size": self.size,
            "transactions": self.transactions,
            "uncles": self.uncles,
        })

    @property
    def block_number(self) -> int:
        return to_int(self.number)


__all__ = [
    "AccessListEntry",
    "AddressOrAddresses",
    "BlockNumberOrTag",
    "BlockObject",
    "BlockTag",
    "BlockTransactions",
    "EIP1559Transaction",
    "EIP2930Transaction",
    "FeeHistoryResults",
    "Filter",
    "FilterChanges",
    "LegacyTransaction",
    "Log",
    "ReceiptInfo",
    "Signed1559Transaction",
    "Signed2930Transaction",
    "SignedLegacyTransaction",
    "SignedTransaction",
    "SyncingProgress",
    "SyncingResult",
    "TopicMatch",
    "TransactionInformation",
    "TransactionObjectWithSender",
    "UnsignedTransaction",
    "decode_hex_string",
    "from_int",
    "to_int",
]
