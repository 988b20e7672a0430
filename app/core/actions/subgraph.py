"""
Subgraph Query Tool

Forwards GraphQL queries to subgraph endpoints over HTTP. Each call is a
single independent POST; failures come back as ``{"error": ...}``.
"""

import logging
from typing import Any, Dict, Mapping, Optional

import httpx

from .errors import ToolError, ToolErrorKind, describe_exception

GRAPH_GATEWAY_URL = "https://gateway.thegraph.com/api/{api_key}/subgraphs/id/{subgraph_id}"

# Subgraph deployments on The Graph's decentralized network
SUBGRAPH_IDS: Dict[str, str] = {
    "UNISWAP_V3": "5zvR82QoaXYFyDEKLZ9t6v9adgnptxYpKpSbxtgVENFV",
    "AAVE_V3": "JCNWRypm7FYwV8fx5HhzZPSFaMxgkPuw4TnR3Gpi81zk",
}

REQUIRES_KEY = "(requires GRAPH_API_KEY)"


def subgraph_endpoints(graph_api_key: str = "", overrides: Optional[Mapping[str, str]] = None) -> Dict[str, str]:
    """Named subgraph endpoints: gateway URLs for known ids, then overrides."""
    endpoints: Dict[str, str] = {}
    for name, subgraph_id in SUBGRAPH_IDS.items():
        if graph_api_key:
            endpoints[name] = GRAPH_GATEWAY_URL.format(api_key=graph_api_key, subgraph_id=subgraph_id)
        else:
            endpoints[name] = REQUIRES_KEY
    for name, url in (overrides or {}).items():
        endpoints[name.upper()] = url
    return endpoints


class SubgraphQuerier:
    """Stateless GraphQL-over-HTTP client."""

    def __init__(
        self,
        timeout_s: float = 30,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        logger: Optional[logging.Logger] = None,
    ):
        self.timeout_s = timeout_s
        self._transport = transport
        self.logger = logger or logging.getLogger(__name__)

    async def query_subgraph(
        self,
        endpoint: str,
        query: str,
        variables: Optional[Dict[str, Any]] = None,
    ) -> Any:
        try:
            return await self._post(endpoint, {"query": query, "variables": variables or {}})
        except ToolError as exc:
            self.logger.warning("querySubgraph %s failed [%s]: %s", endpoint, exc.kind.value, exc)
            return {"error": str(exc)}

    async def _post(self, endpoint: str, payload: Dict[str, Any]) -> Any:
        try:
            async with httpx.AsyncClient(timeout=self.timeout_s, transport=self._transport) as client:
                response = await client.post(
                    endpoint,
                    json=payload,
                    headers={"Content-Type": "application/json"},
                )
        except (httpx.HTTPError, httpx.InvalidURL) as exc:
            raise ToolError(ToolErrorKind.TRANSPORT_FAILURE, describe_exception(exc)) from exc

        if not response.is_success:
            raise ToolError(ToolErrorKind.TRANSPORT_FAILURE, f"HTTP error! Status: {response.status_code}")

        try:
            return response.json()
        except ValueError as exc:
            raise ToolError(ToolErrorKind.PARSE_FAILURE, describe_exception(exc)) from exc
