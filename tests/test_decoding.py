"""
ethrpc Result Decoding Tests

Covers:
  - Decoder primitives
  - One-of decode priority
  - Typed result objects
"""

import pytest

from ethrpc.exceptions import DecodeError
from ethrpc.rpc.decoding import (
    OneOf,
    decode_bool,
    decode_number,
    decode_string,
    list_of,
    optional,
    try_order,
)
from ethrpc.rpc.types import (
    AccessListEntry,
    AddressOrAddresses,
    BlockNumberOrTag,
    BlockObject,
    BlockTag,
    BlockTransactions,
    FeeHistoryResults,
    Filter,
    FilterChanges,
    Log,
    ReceiptInfo,
    Signed1559Transaction,
    SignedLegacyTransaction,
    SignedTransaction,
    SyncingProgress,
    SyncingResult,
    TopicMatch,
    TransactionInformation,
    TransactionObjectWithSender,
    UnsignedTransaction,
    from_int,
    to_int,
)

ADDRESS = "0x" + "11" * 20
HASH_A = "0x" + "aa" * 32
HASH_B = "0x" + "bb" * 32


# ===================================================================
# FIXTURES
# ===================================================================

@pytest.fixture
def signed_1559():
    return {
        "type": "0x2",
        "nonce": "0x1",
        "to": ADDRESS,
        "gas": "0x5208",
        "value": "0x0",
        "input": "0x",
        "maxPriorityFeePerGas": "0x1",
        "maxFeePerGas": "0x2",
        "accessList": [{"address": ADDRESS, "storageKeys": [HASH_A]}],
        "chainId": "0x1",
        "yParity": "0x0",
        "r": "0x01",
        "s": "0x02",
    }


@pytest.fixture
def signed_legacy():
    return {
        "type": "0x0",
        "nonce": "0x1",
        "to": None,
        "gas": "0x5208",
        "value": "0x0",
        "input": "0x",
        "gasPrice": "0x3",
        "v": "0x1b",
        "r": "0x01",
        "s": "0x02",
    }


@pytest.fixture
def log_entry():
    return {
        "removed": False,
        "logIndex": "0x0",
        "transactionIndex": "0x0",
        "transactionHash": HASH_A,
        "blockHash": HASH_B,
        "blockNumber": "0x10",
        "address": ADDRESS,
        "data": "0x",
        "topics": [HASH_A],
    }


@pytest.fixture
def block(signed_1559):
    return {
        "hash": HASH_A,
        "parentHash": HASH_B,
        "sha3Uncles": HASH_B,
        "miner": ADDRESS,
        "stateRoot": HASH_B,
        "transactionsRoot": HASH_B,
        "receiptsRoot": HASH_B,
        "logsBloom": "0x00",
        "difficulty": "0x0",
        "number": "0x1b4",
        "gasLimit": "0x1c9c380",
        "gasUsed": "0x0",
        "timestamp": "0x6000",
        "extraData": "0x",
        "mixHash": HASH_B,
        "nonce": "0x0000000000000000",
        "baseFeePerGas": "0x7",
        "size": "0x220",
        "transactions": [HASH_A, HASH_B],
        "uncles": [],
    }


# ===================================================================
# Primitives
# ===================================================================

class TestPrimitives:
    def test_string(self):
        assert decode_string("x") == "x"
        with pytest.raises(DecodeError):
            decode_string(1)

    def test_bool_is_strict(self):
        assert decode_bool(False) is False
        with pytest.raises(DecodeError):
            decode_bool(0)

    def test_number_rejects_bool(self):
        assert decode_number(3) == 3.0
        with pytest.raises(DecodeError):
            decode_number(True)

    def test_list_of(self):
        decoder = list_of(decode_string)
        assert decoder(["a", "b"]) == ["a", "b"]
        with pytest.raises(DecodeError):
            decoder(["a", 1])
        with pytest.raises(DecodeError):
            decoder("a")

    def test_optional(self):
        assert optional(decode_string)(None) is None
        with pytest.raises(DecodeError):
            optional(decode_string)(5)

    def test_quantity_helpers(self):
        assert to_int("0x1a") == 26
        assert from_int(26) == "0x1a"
        assert from_int(0) == "0x0"
        with pytest.raises(DecodeError):
            to_int("latest")
        with pytest.raises(ValueError):
            from_int(-1)


# ===================================================================
# One-of priority
# ===================================================================

class TestOneOfPriority:
    def test_address_prefers_single_string(self):
        value = AddressOrAddresses.decode(ADDRESS)
        assert value.kind == "address"
        assert value.value == ADDRESS

    def test_address_list(self):
        value = AddressOrAddresses.decode([ADDRESS])
        assert value.kind == "addresses"
        assert value.encode() == [ADDRESS]

    def test_address_try_order(self):
        assert try_order(AddressOrAddresses) == ("address", "addresses")

    def test_block_number_before_tag(self):
        assert BlockNumberOrTag.decode("0x10").kind == "block_number"
        tag = BlockNumberOrTag.decode("pending")
        assert tag.kind == "block_tag"
        assert tag.value == "pending"

    def test_block_unknown_tag(self):
        with pytest.raises(DecodeError):
            BlockNumberOrTag.decode("finalised-ish")

    def test_block_coerce(self):
        assert BlockNumberOrTag.coerce(16).encode() == "0x10"
        assert BlockNumberOrTag.coerce(BlockTag.EARLIEST).encode() == "earliest"
        assert BlockNumberOrTag.coerce("latest") == BlockNumberOrTag.latest()

    def test_topic_match_order(self):
        assert TopicMatch.decode(HASH_A).kind == "single"
        assert TopicMatch.decode([HASH_A, HASH_B]).kind == "multiple"
        assert TopicMatch.decode(None).kind == "any"
        with pytest.raises(DecodeError):
            TopicMatch.decode(5)

    def test_syncing(self):
        assert SyncingResult.decode(False).kind == "not_syncing"
        assert not SyncingResult.decode(False).is_syncing
        progress = SyncingResult.decode({"startingBlock": "0x0", "currentBlock": "0x5", "highestBlock": "0x9"})
        assert progress.kind == "syncing_progress"
        assert progress.is_syncing
        assert progress.value.remaining_blocks == 4

    def test_filter_changes_strings_resolve_to_block_hashes(self):
        changes = FilterChanges.decode([HASH_A])
        assert changes.kind == "new_block_hashes"

    def test_filter_changes_empty_list(self):
        assert FilterChanges.decode([]).kind == "new_block_hashes"

    def test_filter_changes_logs(self, log_entry):
        changes = FilterChanges.decode([log_entry])
        assert changes.kind == "new_logs"
        assert isinstance(changes.value[0], Log)
        assert changes.value[0].block_number == "0x10"

    def test_signed_transaction_order(self, signed_1559, signed_legacy):
        assert SignedTransaction.decode(signed_1559).kind == "signed_1559"
        legacy = SignedTransaction.decode(signed_legacy)
        assert legacy.kind == "signed_legacy"
        assert isinstance(legacy.value, SignedLegacyTransaction)

    def test_no_variant(self):
        with pytest.raises(DecodeError, match="SignedTransaction"):
            SignedTransaction.decode({"type": "0x2"})

    def test_unknown_kind_rejected(self):
        with pytest.raises(ValueError):
            AddressOrAddresses("nope", ADDRESS)

    def test_only_decode_errors_fall_through(self):
        class Broken(OneOf):
            VARIANTS = (("boom", lambda raw: 1 / 0), ("string", decode_string))

        with pytest.raises(ZeroDivisionError):
            Broken.decode("x")


# ===================================================================
# Typed objects
# ===================================================================

class TestResultObjects:
    def test_signed_1559_fields(self, signed_1559):
        tx = Signed1559Transaction.from_dict(signed_1559)
        assert tx.max_fee_per_gas == "0x2"
        assert tx.access_list == [AccessListEntry(address=ADDRESS, storage_keys=[HASH_A])]
        assert tx.to_dict() == signed_1559

    def test_missing_required_field(self, signed_1559):
        del signed_1559["gas"]
        with pytest.raises(DecodeError, match="gas"):
            Signed1559Transaction.from_dict(signed_1559)

    def test_unknown_fields_ignored(self, log_entry):
        log_entry["extra"] = 1
        assert Log.from_dict(log_entry).address == ADDRESS

    def test_block_with_hashes(self, block):
        obj = BlockObject.from_dict(block)
        assert obj.block_number == 436
        assert obj.transactions.kind == "transaction_hashes"
        assert obj.total_difficulty is None
        assert "totalDifficulty" not in obj.to_dict()

    def test_block_with_full_transactions(self, block, signed_1559):
        block["transactions"] = [signed_1559]
        obj = BlockObject.from_dict(block)
        assert obj.transactions.kind == "full_transactions"
        assert obj.transactions.value[0].kind == "signed_1559"
        assert obj.to_dict()["transactions"] == [signed_1559]

    def test_block_transactions_try_order(self):
        assert try_order(BlockTransactions) == ("transaction_hashes", "full_transactions")

    def test_receipt(self, log_entry):
        receipt = ReceiptInfo.from_dict({
            "transactionHash": HASH_A,
            "transactionIndex": "0x0",
            "blockHash": HASH_B,
            "blockNumber": "0x10",
            "from": ADDRESS,
            "to": ADDRESS,
            "cumulativeGasUsed": "0x5208",
            "gasUsed": "0x5208",
            "contractAddress": None,
            "logs": [log_entry],
            "logsBloom": "0x00",
            "status": "0x1",
            "effectiveGasPrice": "0x3",
        })
        assert receipt.from_ == ADDRESS
        assert receipt.succeeded is True
        assert receipt.contract_address is None
        assert receipt.to_dict()["from"] == ADDRESS

    def test_fee_history(self):
        fees = FeeHistoryResults.from_dict({
            "oldestBlock": "0x1",
            "baseFeePerGas": ["0x1", "0x2"],
            "reward": [["0x0", "0x1"]],
            "gasUsedRatio": [0.5, 1],
        })
        assert fees.reward == [["0x0", "0x1"]]
        assert fees.gas_used_ratio == [0.5, 1.0]

    def test_transaction_information(self, signed_1559):
        data = dict(signed_1559, blockHash=HASH_B, blockNumber="0x10", hash=HASH_A,
                    transactionIndex="0x0", **{"from": ADDRESS})
        info = TransactionInformation.from_dict(data)
        assert info.from_ == ADDRESS
        assert info.transaction.kind == "signed_1559"
        assert info.to_dict()["maxFeePerGas"] == "0x2"

    def test_transaction_with_sender_loose_fields(self):
        tx = TransactionObjectWithSender.from_dict({"from": ADDRESS, "to": ADDRESS, "data": "0x"})
        assert tx.transaction is None
        assert tx.to_dict() == {"from": ADDRESS, "to": ADDRESS, "data": "0x"}

    def test_transaction_with_sender_typed(self):
        unsigned = UnsignedTransaction.decode({
            "type": "0x0",
            "nonce": "0x0",
            "gas": "0x5208",
            "value": "0x1",
            "input": "0x",
            "gasPrice": "0x3",
        })
        assert unsigned.kind == "legacy"
        body = TransactionObjectWithSender(from_=ADDRESS, transaction=unsigned).to_dict()
        assert body["from"] == ADDRESS
        assert body["gasPrice"] == "0x3"
        assert "to" not in body

    def test_filter_to_dict(self):
        flt = Filter(
            address=AddressOrAddresses.address(ADDRESS),
            from_block="0x1",
            topics=[TopicMatch.single(HASH_A), TopicMatch.any(), TopicMatch.multiple([HASH_A, HASH_B])],
        )
        assert flt.to_dict() == {
            "address": ADDRESS,
            "fromBlock": "0x1",
            "topics": [HASH_A, None, [HASH_A, HASH_B]],
        }
        assert Filter.from_dict(flt.to_dict()) == flt

    def test_syncing_progress_partial(self):
        progress = SyncingProgress.from_dict({"currentBlock": "0x1"})
        assert progress.remaining_blocks is None
