from abc import ABC, abstractmethod
from typing import Any, Dict


class Provider(ABC):
    """Base provider interface"""

    name: str
    timeout_s: int = 10

    @abstractmethod
    async def ready(self) -> bool:
        """Check if provider is ready to serve requests"""
        pass

    @abstractmethod
    async def health_check(self) -> Dict[str, Any]:
        """Return provider health status"""
        pass


class WalletProvider(Provider):
    """Signing wallet bound to a single EVM network"""

    network_id: str
    network_name: str

    @property
    @abstractmethod
    def address(self) -> str:
        """Checksummed address of the wallet"""
        pass

    @abstractmethod
    async def call(self, to: str, data: str) -> bytes:
        """Run ``eth_call`` against ``to`` and return the raw return data"""
        pass

    @abstractmethod
    async def send_transaction(self, to: str, data: str = "0x", value: int = 0) -> str:
        """Sign and submit a transaction, returning its ``0x`` hash"""
        pass

    @abstractmethod
    async def get_balance(self, address: str) -> int:
        """Native balance of ``address`` in wei"""
        pass
