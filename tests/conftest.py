from typing import Any, Dict, List, Optional, Tuple

import pytest

from app.core.actions.errors import ToolError, ToolErrorKind
from app.core.contracts.registry import ContractRegistry
from app.providers.base import WalletProvider

AGENT_ADDRESS = "0x70997970C51812dc3A010C7d01b50e0d17dc79C8"
GREETER_ADDRESS = "0x5FbDB2315678afecb367f032d93F642f64180aa3"

GREETER_ABI: List[Dict[str, Any]] = [
    {
        "type": "function",
        "name": "greeting",
        "inputs": [],
        "outputs": [{"name": "", "type": "string"}],
        "stateMutability": "view",
    },
    {
        "type": "function",
        "name": "totalCounter",
        "inputs": [],
        "outputs": [{"name": "", "type": "uint256"}],
        "stateMutability": "view",
    },
    {
        "type": "function",
        "name": "userGreetingCounter",
        "inputs": [{"name": "", "type": "address"}],
        "outputs": [{"name": "", "type": "uint256"}],
        "stateMutability": "view",
    },
    {
        "type": "function",
        "name": "setGreeting",
        "inputs": [{"name": "_newGreeting", "type": "string"}],
        "outputs": [],
        "stateMutability": "payable",
    },
]


class FakeWallet(WalletProvider):
    """In-memory wallet recording calls instead of talking to a node."""

    name = "fake"

    def __init__(self, network_id: str = "31337", network_name: str = "foundry"):
        self.network_id = network_id
        self.network_name = network_name
        self.call_results: Dict[Tuple[str, str], bytes] = {}
        self.default_call_result: bytes = b""
        self.balances: Dict[str, int] = {}
        self.calls: List[Tuple[str, str]] = []
        self.sent: List[Tuple[str, str, int]] = []
        self.fail_with: Optional[Exception] = None
        self.tx_hash = "0x" + "ab" * 32

    @property
    def address(self) -> str:
        return AGENT_ADDRESS

    async def ready(self) -> bool:
        return True

    async def health_check(self) -> Dict[str, Any]:
        return {"status": "healthy", "chain_id": int(self.network_id)}

    async def call(self, to: str, data: str) -> bytes:
        self.calls.append((to, data))
        if self.fail_with is not None:
            raise self.fail_with
        return self.call_results.get((to.lower(), data), self.default_call_result)

    async def send_transaction(self, to: str, data: str = "0x", value: int = 0) -> str:
        if self.fail_with is not None:
            raise self.fail_with
        self.sent.append((to, data, value))
        return self.tx_hash

    async def get_balance(self, address: str) -> int:
        if self.fail_with is not None:
            raise self.fail_with
        if address.lower() not in self.balances:
            raise ToolError(ToolErrorKind.TRANSPORT_FAILURE, f"unknown account {address}")
        return self.balances[address.lower()]


@pytest.fixture
def fake_wallet():
    return FakeWallet()


@pytest.fixture
def contracts():
    return ContractRegistry({"31337": {"YourContract": {"address": GREETER_ADDRESS, "abi": GREETER_ABI}}})
