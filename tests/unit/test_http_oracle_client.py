"""Unit tests for HttpOracleClient using httpx.MockTransport."""

import json
from unittest.mock import MagicMock

import httpx
import pytest

from src.pm_common.errors import OracleUnavailableError
from src.pm_oracle.infrastructure.http_client import HttpOracleClient


def _client(handler) -> HttpOracleClient:
    return HttpOracleClient(
        base_url="http://oracle.test/api/",
        address="optimistic-oracle",
        callback_url="http://engine.test/api/v1/oracle/callbacks",
        transport=httpx.MockTransport(handler),
    )


def _target():
    t = MagicMock()
    t.address = "market-engine"
    return t


async def _assert(client: HttpOracleClient) -> str:
    return await client.assert_truth(
        claim="claim text",
        asserter="alice",
        callback_target=_target(),
        liveness_seconds=7200,
        currency="USDC",
        bond=50,
        reward=10,
        identifier="ASSERT_TRUTH",
    )


class TestGetMinimumBond:
    @pytest.mark.asyncio
    async def test_reads_quote(self):
        def handler(request: httpx.Request) -> httpx.Response:
            assert request.method == "GET"
            assert request.url.path == "/api/bonds/USDC/minimum"
            return httpx.Response(200, json={"minimum_bond": 25})

        assert await _client(handler).get_minimum_bond("USDC") == 25

    @pytest.mark.asyncio
    async def test_malformed_quote(self):
        client = _client(lambda request: httpx.Response(200, json={"bond": "x"}))
        with pytest.raises(OracleUnavailableError):
            await client.get_minimum_bond("USDC")

    @pytest.mark.asyncio
    async def test_server_error(self):
        client = _client(lambda request: httpx.Response(503))
        with pytest.raises(OracleUnavailableError) as exc_info:
            await client.get_minimum_bond("USDC")
        assert exc_info.value.http_status == 502


class TestAssertTruth:
    @pytest.mark.asyncio
    async def test_posts_assertion_and_returns_id(self):
        seen: dict = {}

        def handler(request: httpx.Request) -> httpx.Response:
            seen["path"] = request.url.path
            seen["body"] = json.loads(request.content)
            return httpx.Response(201, json={"assertion_id": "0xabc"})

        assert await _assert(_client(handler)) == "0xabc"
        assert seen["path"] == "/api/assertions"
        body = seen["body"]
        assert body["asserter"] == "alice"
        assert body["bond"] == 50
        assert body["reward"] == 10
        assert body["callback_address"] == "market-engine"
        assert body["callback_url"] == "http://engine.test/api/v1/oracle/callbacks"

    @pytest.mark.asyncio
    async def test_missing_id(self):
        client = _client(lambda request: httpx.Response(200, json={}))
        with pytest.raises(OracleUnavailableError):
            await _assert(client)

    @pytest.mark.asyncio
    async def test_invalid_json(self):
        client = _client(lambda request: httpx.Response(200, content=b"not json"))
        with pytest.raises(OracleUnavailableError):
            await _assert(client)

    @pytest.mark.asyncio
    async def test_transport_failure(self):
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("connection refused", request=request)

        with pytest.raises(OracleUnavailableError):
            await _assert(_client(handler))
