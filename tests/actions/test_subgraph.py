"""
Tests for the subgraph query tool using httpx mock transports.
"""

import json

import httpx
import pytest

from app.core.actions.subgraph import REQUIRES_KEY, SUBGRAPH_IDS, SubgraphQuerier, subgraph_endpoints

ENDPOINT = "https://api.example.com/subgraphs/name/uniswap/v3"
POOLS_QUERY = "query { pools(first: 1) { id } }"


def _querier(handler):
    return SubgraphQuerier(timeout_s=5, transport=httpx.MockTransport(handler))


class TestQuerySubgraph:

    @pytest.mark.asyncio
    async def test_posts_query_and_variables(self):
        seen = {}

        def handler(request: httpx.Request) -> httpx.Response:
            seen["method"] = request.method
            seen["content_type"] = request.headers["content-type"]
            seen["body"] = json.loads(request.content)
            return httpx.Response(200, json={"data": {"pools": [{"id": "0xabc"}]}})

        result = await _querier(handler).query_subgraph(ENDPOINT, POOLS_QUERY, {"first": 1})

        assert result == {"data": {"pools": [{"id": "0xabc"}]}}
        assert seen["method"] == "POST"
        assert seen["content_type"] == "application/json"
        assert seen["body"] == {"query": POOLS_QUERY, "variables": {"first": 1}}

    @pytest.mark.asyncio
    async def test_variables_default_to_empty_object(self):
        bodies = []

        def handler(request: httpx.Request) -> httpx.Response:
            bodies.append(json.loads(request.content))
            return httpx.Response(200, json={"data": {}})

        await _querier(handler).query_subgraph(ENDPOINT, POOLS_QUERY)

        assert bodies[0]["variables"] == {}

    @pytest.mark.asyncio
    async def test_graphql_errors_pass_through(self):
        payload = {"errors": [{"message": "Type `Query` has no field `foo`"}]}
        result = await _querier(lambda request: httpx.Response(200, json=payload)).query_subgraph(ENDPOINT, "{ foo }")
        assert result == payload

    @pytest.mark.asyncio
    async def test_http_error_status(self):
        result = await _querier(lambda request: httpx.Response(404)).query_subgraph(ENDPOINT, POOLS_QUERY)
        assert result == {"error": "HTTP error! Status: 404"}

    @pytest.mark.asyncio
    async def test_invalid_json(self):
        result = await _querier(lambda request: httpx.Response(200, text="<html>")).query_subgraph(ENDPOINT, POOLS_QUERY)
        assert set(result) == {"error"}

    @pytest.mark.asyncio
    async def test_connection_failure(self):
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("connection refused", request=request)

        result = await _querier(handler).query_subgraph(ENDPOINT, POOLS_QUERY)

        assert result == {"error": "connection refused"}

    @pytest.mark.asyncio
    async def test_invalid_url(self):
        result = await SubgraphQuerier(timeout_s=5).query_subgraph("not a url", POOLS_QUERY)
        assert set(result) == {"error"}


class TestEndpoints:

    def test_gateway_urls_need_a_key(self):
        endpoints = subgraph_endpoints()
        assert endpoints["UNISWAP_V3"] == REQUIRES_KEY
        assert endpoints["AAVE_V3"] == REQUIRES_KEY

    def test_gateway_urls_with_key(self):
        endpoints = subgraph_endpoints("k123")
        assert endpoints["UNISWAP_V3"] == (
            f"https://gateway.thegraph.com/api/k123/subgraphs/id/{SUBGRAPH_IDS['UNISWAP_V3']}"
        )

    def test_overrides(self):
        endpoints = subgraph_endpoints("k123", {"uniswap_v3": ENDPOINT, "blocks": "https://blocks.example/graphql"})
        assert endpoints["UNISWAP_V3"] == ENDPOINT
        assert endpoints["BLOCKS"] == "https://blocks.example/graphql"
