"""
ethrpc Request Builder Tests

Covers:
  - RPCRequest / RPCResponse envelopes
  - Correlation ids ("<method>|<int>")
  - Hex parameter validation
"""

import json

import pytest

from ethrpc.exceptions import DecodeError, ParameterValidationError, RPCResponseError
from ethrpc.rpc.envelope import (
    RPCErrorCode,
    RPCRequest,
    RPCResponse,
    build_request,
    make_correlation_id,
    parse_correlation_id,
)
from ethrpc.rpc.validation import (
    ADDRESS_PATTERN,
    HASH_32_PATTERN,
    HEX_DATA_PATTERN,
    NONCE_8_PATTERN,
    QUANTITY_PATTERN,
    check_optional,
    check_parameter,
    matches,
)

BLOCK_HASH = "0x" + "ab" * 32
ADDRESS = "0x" + "De" * 20


# ===================================================================
# Envelopes
# ===================================================================

class TestRPCRequest:
    def test_defaults(self):
        req = build_request("eth_blockNumber")
        assert req.jsonrpc == "2.0"
        assert req.id == "1"
        assert req.params == []

    def test_to_dict_key_order(self):
        req = build_request("eth_getBalance", [ADDRESS, "latest"])
        assert list(req.to_dict()) == ["jsonrpc", "method", "id", "params"]

    def test_wire_round_trip_preserves_method_and_params(self):
        params = [BLOCK_HASH, True, {"nested": [1, 2]}, "latest"]
        req = build_request("eth_getBlockByHash", params, request_id="eth_getBlockByHash|3")
        decoded = RPCRequest.from_dict(json.loads(req.to_json()))
        assert decoded.method == "eth_getBlockByHash"
        assert decoded.params == params
        assert decoded.id == "eth_getBlockByHash|3"

    def test_compact_serialization(self):
        req = build_request("eth_chainId")
        assert req.to_json() == '{"jsonrpc":"2.0","method":"eth_chainId","id":"1","params":[]}'
        assert req.to_bytes() == req.to_json().encode()

    def test_from_dict_without_params(self):
        req = RPCRequest.from_dict({"jsonrpc": "2.0", "method": "net_version", "id": 4})
        assert req.params == []
        assert req.id == 4


class TestRPCResponse:
    def test_result(self):
        resp = RPCResponse.from_raw('{"jsonrpc":"2.0","id":"1","result":"0x10"}')
        assert resp.result == "0x10"
        assert resp.has_result
        assert not resp.is_error
        resp.raise_for_error()

    def test_null_result_is_a_result(self):
        resp = RPCResponse.from_dict({"jsonrpc": "2.0", "id": "1", "result": None})
        assert resp.has_result
        assert resp.result is None

    def test_error_raises(self):
        resp = RPCResponse.from_dict({
            "jsonrpc": "2.0",
            "id": "1",
            "error": {"code": -32601, "message": "method not found", "data": "eth_foo"},
        })
        assert resp.is_error
        with pytest.raises(RPCResponseError) as exc_info:
            resp.raise_for_error()
        assert exc_info.value.code == RPCErrorCode.METHOD_NOT_FOUND
        assert exc_info.value.message == "method not found"
        assert exc_info.value.data == "eth_foo"

    def test_error_with_bad_code_falls_back_to_internal(self):
        resp = RPCResponse.from_dict({"id": "1", "error": {"code": "oops", "message": "x"}})
        with pytest.raises(RPCResponseError) as exc_info:
            resp.raise_for_error()
        assert exc_info.value.code == RPCErrorCode.INTERNAL_ERROR

    @pytest.mark.parametrize("raw", [
        "not json",
        "[1, 2]",
        '{"jsonrpc": "2.0", "id": "1"}',
        '{"id": "1", "error": "boom"}',
    ])
    def test_malformed(self, raw):
        with pytest.raises(DecodeError):
            RPCResponse.from_raw(raw)

    def test_to_dict(self):
        assert RPCResponse(id="1", result="0x1").to_dict() == {"jsonrpc": "2.0", "id": "1", "result": "0x1"}
        err = {"code": -32000, "message": "x"}
        assert RPCResponse(id="1", error=err).to_dict()["error"] == err


# ===================================================================
# Correlation ids
# ===================================================================

class TestCorrelationId:
    def test_make(self):
        assert make_correlation_id("eth_blockNumber", 7) == "eth_blockNumber|7"

    def test_make_rejects_non_int(self):
        with pytest.raises(TypeError):
            make_correlation_id("eth_blockNumber", "7")
        with pytest.raises(TypeError):
            make_correlation_id("eth_blockNumber", True)

    def test_parse(self):
        assert parse_correlation_id("eth_blockNumber|7") == ("eth_blockNumber", 7)
        assert parse_correlation_id("eth_call|-3") == ("eth_call", -3)

    def test_parse_round_trip(self):
        assert parse_correlation_id(make_correlation_id("net_version", 12345)) == ("net_version", 12345)

    @pytest.mark.parametrize("raw", [
        "eth_blockNumber",
        "eth_blockNumber|",
        "|7",
        "eth_blockNumber|7|8",
        "eth_blockNumber|seven",
        "eth_blockNumber|7.5",
        "eth_blockNumber|7\n",
        "eth_blockNumber| 7",
        7,
        None,
    ])
    def test_parse_malformed(self, raw):
        assert parse_correlation_id(raw) is None


# ===================================================================
# Validation
# ===================================================================

class TestValidation:
    def test_patterns_are_exact(self):
        assert HASH_32_PATTERN == r"^0x[0-9a-f]{64}$"
        assert QUANTITY_PATTERN == r"^0x([1-9a-f]+[0-9a-f]*|0)$"
        assert ADDRESS_PATTERN == r"^0x[0-9,a-f,A-F]{40}$"
        assert HEX_DATA_PATTERN == r"^0x[0-9a-f]*$"
        assert NONCE_8_PATTERN == r"^0x[0-9a-f]{16}$"

    @pytest.mark.parametrize("value", [
        BLOCK_HASH[:-1],
        BLOCK_HASH + "0",
        BLOCK_HASH.upper().replace("0X", "0x"),
        "ab" * 32,
        BLOCK_HASH + "\n",
        "",
        None,
        123,
    ])
    def test_hash_rejected(self, value):
        with pytest.raises(ParameterValidationError) as exc_info:
            check_parameter(value, HASH_32_PATTERN, "block_hash")
        assert exc_info.value.input == value
        assert exc_info.value.pattern == HASH_32_PATTERN

    def test_hash_accepted(self):
        assert check_parameter(BLOCK_HASH, HASH_32_PATTERN) == BLOCK_HASH

    @pytest.mark.parametrize("value,ok", [
        ("0x0", True),
        ("0x1a", True),
        ("0x01", False),
        ("0x", False),
        ("0xG", False),
    ])
    def test_quantity(self, value, ok):
        assert matches(value, QUANTITY_PATTERN) is ok

    def test_address_mixed_case(self):
        assert matches(ADDRESS, ADDRESS_PATTERN)
        assert not matches(ADDRESS[:-2], ADDRESS_PATTERN)

    def test_nonce(self):
        assert matches("0x" + "0" * 16, NONCE_8_PATTERN)
        assert not matches("0x" + "0" * 15, NONCE_8_PATTERN)

    def test_optional_passes_none(self):
        assert check_optional(None, HASH_32_PATTERN) is None
        with pytest.raises(ParameterValidationError):
            check_optional("0x12", HASH_32_PATTERN)

    def test_error_is_value_error(self):
        with pytest.raises(ValueError):
            check_parameter("nope", HEX_DATA_PATTERN)
