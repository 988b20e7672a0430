import time
from typing import Any, Dict

from eth_account import Account
from eth_utils import to_checksum_address
from web3 import AsyncHTTPProvider, AsyncWeb3, Web3

from ..config import Settings
from ..core.actions.errors import ToolError, ToolErrorKind, describe_exception
from .base import WalletProvider


class EvmWalletProvider(WalletProvider):
    """Agent wallet signing locally and talking to a JSON-RPC node"""

    name = "web3"
    timeout_s = 30

    def __init__(
        self,
        rpc_url: str,
        private_key: str,
        network_id: str,
        network_name: str = "",
        timeout_s: int = 30,
    ):
        if not private_key:
            raise ValueError("AGENT_PRIVATE_KEY must be set for the agent wallet.")
        self.rpc_url = rpc_url
        self.network_id = str(network_id)
        self.network_name = network_name or self.network_id
        self.timeout_s = timeout_s
        self._account = Account.from_key(private_key)
        self.w3 = AsyncWeb3(AsyncHTTPProvider(rpc_url, request_kwargs={"timeout": timeout_s}))

    @classmethod
    def from_settings(cls, config: Settings) -> "EvmWalletProvider":
        return cls(
            rpc_url=config.rpc_url,
            private_key=config.agent_private_key,
            network_id=config.network_id,
            network_name=config.network_name,
            timeout_s=config.request_timeout_seconds,
        )

    @property
    def address(self) -> str:
        return self._account.address

    async def ready(self) -> bool:
        try:
            return await self.w3.is_connected()
        except Exception:
            return False

    async def health_check(self) -> Dict[str, Any]:
        start = time.time()
        try:
            chain_id = await self.w3.eth.chain_id
        except Exception as e:
            return {"status": "error", "reason": describe_exception(e)}

        status = "healthy" if str(chain_id) == self.network_id else "degraded"
        return {
            "status": status,
            "chain_id": chain_id,
            "expected_chain_id": self.network_id,
            "latency_ms": int((time.time() - start) * 1000),
        }

    async def call(self, to: str, data: str) -> bytes:
        try:
            result = await self.w3.eth.call(
                {"from": self.address, "to": to_checksum_address(to), "data": data}
            )
        except Exception as exc:
            raise ToolError(ToolErrorKind.TRANSPORT_FAILURE, describe_exception(exc)) from exc
        return bytes(result)

    async def send_transaction(self, to: str, data: str = "0x", value: int = 0) -> str:
        try:
            tx: Dict[str, Any] = {
                "from": self.address,
                "to": to_checksum_address(to),
                "value": value,
                "data": data,
                "chainId": await self.w3.eth.chain_id,
                "nonce": await self.w3.eth.get_transaction_count(self.address, "pending"),
            }
            tx["gas"] = await self.w3.eth.estimate_gas(tx)
            tx["gasPrice"] = await self.w3.eth.gas_price

            signed = self._account.sign_transaction(tx)
            raw_tx = getattr(signed, "raw_transaction", None) or getattr(signed, "rawTransaction")
            tx_hash = await self.w3.eth.send_raw_transaction(raw_tx)
        except Exception as exc:
            raise ToolError(ToolErrorKind.TRANSPORT_FAILURE, describe_exception(exc)) from exc
        return Web3.to_hex(tx_hash)

    async def get_balance(self, address: str) -> int:
        try:
            return await self.w3.eth.get_balance(to_checksum_address(address))
        except Exception as exc:
            raise ToolError(ToolErrorKind.TRANSPORT_FAILURE, describe_exception(exc)) from exc
