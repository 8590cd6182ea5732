"""
ethrpc Client Tests

Exercises the three call styles end to end against an httpx.MockTransport
and an in-memory WebSocket connector.
"""

import asyncio
import json
import logging

import httpx
import pytest

from ethrpc import EthClient
from ethrpc.config import ClientConfig, HTTPConfig, LoggingConfig
from ethrpc.exceptions import ConfigurationError, ParameterValidationError
from ethrpc.logger import configure_logging
from ethrpc.rpc.correlator import RPCResult
from ethrpc.rpc.status import Connected, Disconnected

HTTP_URL = "http://node.test:8545"
WS_URL = "ws://node.test:8546"


class Node:
    """MockTransport handler answering every POST with ``result``."""

    def __init__(self, result="0x1b4"):
        self.result = result
        self.requests = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        body = json.loads(request.content)
        self.requests.append(body)
        return httpx.Response(200, json={"jsonrpc": "2.0", "id": body["id"], "result": self.result})


def http_client(node):
    return EthClient.from_urls(http_url=HTTP_URL, http_transport=httpx.MockTransport(node))


class TestClientConfiguration:
    def test_no_endpoint(self):
        with pytest.raises(ConfigurationError):
            EthClient(ClientConfig())

    def test_websocket_only_has_no_http_path(self, connector):
        client = EthClient.from_urls(ws_url=WS_URL, ws_connector=connector)
        assert client.http is None
        with pytest.raises(ConfigurationError, match="HTTP"):
            client.eth.blockNumber()

    def test_http_only_has_no_websocket_path(self):
        client = http_client(Node())
        assert client.websocket is None
        with pytest.raises(ConfigurationError, match="WebSocket"):
            client.ws.eth.blockNumber(request_id=1)

    def test_default_logging_leaves_package_logger_alone(self):
        package_logger = logging.getLogger("ethrpc")
        previous = package_logger.level
        package_logger.setLevel(logging.ERROR)
        try:
            http_client(Node())
            http_client(Node())
            assert package_logger.level == logging.ERROR
        finally:
            package_logger.setLevel(previous)

    def test_explicit_logging_section_is_applied(self):
        config = ClientConfig(
            http=HTTPConfig(url=HTTP_URL),
            logging=LoggingConfig(level="DEBUG", console=False),
        )
        try:
            EthClient(config, http_transport=httpx.MockTransport(Node()))
            assert logging.getLogger("ethrpc").level == logging.DEBUG
        finally:
            configure_logging(console_output=False)

    @pytest.mark.asyncio
    async def test_http_only_connect_is_noop(self):
        client = http_client(Node())
        await client.connect_websocket()
        assert client.connection_status == Disconnected()


class TestHTTPStyle:
    @pytest.mark.asyncio
    async def test_block_number(self):
        node = Node("0x1b4")
        client = http_client(node)
        assert await client.eth.blockNumber() == "0x1b4"
        assert node.requests == [{"jsonrpc": "2.0", "method": "eth_blockNumber", "id": "1", "params": []}]

    @pytest.mark.asyncio
    async def test_namespaces(self):
        node = Node(True)
        client = http_client(node)
        assert await client.net.listening() is True
        assert node.requests[0]["method"] == "net_listening"

    def test_validation_failure_skips_io(self):
        node = Node()
        client = http_client(node)
        with pytest.raises(ParameterValidationError):
            client.eth.getBalance("0xnope")
        assert node.requests == []

    @pytest.mark.asyncio
    async def test_stream_yields_one_value(self):
        node = Node("0x5")
        client = http_client(node)
        values = [v async for v in client.stream.eth.chainId()]
        assert values == ["0x5"]
        assert len(node.requests) == 1


class TestWebSocketStyle:
    @pytest.mark.asyncio
    async def test_request_id_required(self, connector):
        client = EthClient.from_urls(ws_url=WS_URL, ws_connector=connector)
        with pytest.raises(TypeError):
            client.ws.eth.blockNumber()

    @pytest.mark.asyncio
    async def test_fire_and_forget_round_trip(self, connector):
        client = EthClient.from_urls(ws_url=WS_URL, ws_connector=connector)
        seen = []
        client.result_stream.add_listener(seen.append)

        waiter = client.wait_for_result(7, timeout=1)
        await client.ws.eth.blockNumber(request_id=7)

        assert client.connection_status == Connected()
        conn = connector.connections[0]
        sent = json.loads(conn.sent[0])
        assert sent == {"jsonrpc": "2.0", "method": "eth_blockNumber", "id": "eth_blockNumber|7", "params": []}

        conn.feed(json.dumps({"jsonrpc": "2.0", "id": sent["id"], "result": "0x1b4"}))
        assert await waiter == "0x1b4"
        assert seen == [RPCResult(7, "0x1b4")]
        await client.aclose()

    @pytest.mark.asyncio
    async def test_lazy_connect_only_once(self, connector):
        client = EthClient.from_urls(ws_url=WS_URL, ws_connector=connector)
        await client.ws.eth.gasPrice(request_id=1)
        await client.ws.net.version(request_id=2)
        assert len(connector.calls) == 1
        assert len(connector.connections[0].sent) == 2
        await client.aclose()

    @pytest.mark.asyncio
    async def test_concurrent_first_use_shares_handshake(self, slow_connector):
        client = EthClient.from_urls(ws_url=WS_URL, ws_connector=slow_connector)
        outcomes = await asyncio.gather(
            client.ws.eth.blockNumber(request_id=1),
            client.ws.eth.chainId(request_id=2),
            return_exceptions=True,
        )
        assert outcomes == [None, None]
        assert len(slow_connector.calls) == 1
        sent = [json.loads(frame)["id"] for frame in slow_connector.connections[0].sent]
        assert sorted(sent) == ["eth_blockNumber|1", "eth_chainId|2"]
        await client.aclose()

    @pytest.mark.asyncio
    async def test_status_updates_replay_current(self, connector):
        client = EthClient.from_urls(ws_url=WS_URL, ws_connector=connector)
        await client.connect_websocket()
        updates = client.status_updates()
        assert await asyncio.wait_for(updates.__anext__(), 1) == Connected()
        await client.disconnect_websocket()
        status = await asyncio.wait_for(updates.__anext__(), 1)
        assert status.reason.code == 1000
        await client.aclose()

    @pytest.mark.asyncio
    async def test_notifications(self, connector):
        client = EthClient.from_urls(ws_url=WS_URL, ws_connector=connector)
        await client.connect_websocket()
        notes = client.notifications()
        connector.connections[0].feed(json.dumps({
            "jsonrpc": "2.0",
            "method": "eth_subscription",
            "params": {"subscription": "0x9", "result": "0xabc"},
        }))
        note = await asyncio.wait_for(notes.__anext__(), 1)
        assert note.subscription == "0x9"
        assert note.result == "0xabc"
        await client.aclose()

    @pytest.mark.asyncio
    async def test_context_manager_ends_streams(self, connector):
        async with EthClient.from_urls(ws_url=WS_URL, ws_connector=connector) as client:
            results = client.results()
            await client.connect_websocket()
        assert [r async for r in results] == []
