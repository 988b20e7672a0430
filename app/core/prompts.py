"""System prompt for the onchain chat assistant."""

from typing import Mapping

UNISWAP_V3_EXAMPLE = """query {
      pools(first: 100, orderBy: createdAtTimestamp, orderDirection: desc) {
        id
        token0 { symbol }
        token1 { symbol }
        volumeUSD
        createdAtTimestamp
      }
    }"""

AAVE_V3_EXAMPLE = """query {
      borrows(first: 100, orderBy: timestamp, orderDirection: desc) {
        amount
        amountUSD
        asset {
          name
          symbol
        }
      }
    }"""

_FEATURED_ENDPOINTS = ("UNISWAP_V3", "AAVE_V3")


def _endpoint_section(title: str, endpoint: str, example: str) -> str:
    return (
        f"For {title}, use this exact endpoint:\n"
        f'"{endpoint}"\n\n'
        f"Example GraphQL query for {title}:\n"
        "{\n"
        f'  endpoint: "{endpoint}",\n'
        f"  query: `{example}`\n"
        "}"
    )


def build_system_prompt(
    user_address: str,
    agent_address: str,
    contracts_json: str,
    endpoints: Mapping[str, str],
) -> str:
    """Assistant instructions for one request."""
    sections = [
        "You are a helpful assistant, who can answer questions and make certain onchain "
        "interactions based on the user's request.",
        f"The connected user's address is: {user_address}\nYour address is: {agent_address}",
        f"Here are the contracts that you can help with:\n{contracts_json}",
        "You have access to several tools:\n"
        "1. The chat app has a built-in block explorer so you can link to (for example) "
        "/blockexplorer/transaction/<transaction-hash>\n"
        "2. You can query The Graph protocol subgraphs using the querySubgraph action\n"
        "3. You can check balances using the getBalance action:\n"
        "   - For native token balance: call getBalance with the user's address\n"
        "   - For ERC20 token balances: call getBalance with the user's address and the token contract address\n"
        "Balances are returned as integer strings in the smallest unit (wei for the native token).",
        "Example balance queries:\n"
        f'- Check native token balance: getBalance({{ address: "{user_address}" }})\n'
        f'- Check ERC20 token balance: getBalance({{ address: "{user_address}", tokenAddress: "0x..." }})',
    ]

    if "UNISWAP_V3" in endpoints:
        sections.append(_endpoint_section("Uniswap V3", endpoints["UNISWAP_V3"], UNISWAP_V3_EXAMPLE))
    if "AAVE_V3" in endpoints:
        sections.append(_endpoint_section("Aave V3", endpoints["AAVE_V3"], AAVE_V3_EXAMPLE))

    others = [f"{name}: {url}" for name, url in endpoints.items() if name not in _FEATURED_ENDPOINTS]
    if others:
        sections.append("Other available subgraph endpoints:\n" + "\n".join(others))

    return "\n\n".join(sections)
