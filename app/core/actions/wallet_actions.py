"""Wallet-level actions for the agent's own signing wallet."""

import logging
from typing import Optional

from eth_utils import is_address

from ...providers.base import WalletProvider
from ..contracts.abi import parse_wei
from .errors import ToolError, ToolErrorKind, describe_exception


class WalletActions:
    """Wallet details and native transfers, answered as text for the model."""

    def __init__(self, wallet: WalletProvider, logger: Optional[logging.Logger] = None):
        self.wallet = wallet
        self.logger = logger or logging.getLogger(__name__)

    async def get_wallet_details(self, address: Optional[str] = None) -> str:
        """Describe ``address`` (default: the agent wallet) and its native balance."""
        target = address or self.wallet.address
        try:
            balance = await self.wallet.get_balance(target)
        except Exception as exc:
            return f"Error getting wallet details: {describe_exception(exc)}"

        return "\n".join(
            [
                "Wallet Details:",
                f"- Provider: {self.wallet.name}",
                f"- Address: {target}",
                "- Network:",
                "  * Protocol Family: evm",
                f"  * Network ID: {self.wallet.network_name}",
                f"  * Chain ID: {self.wallet.network_id}",
                f"- Native Balance: {balance} WEI",
            ]
        )

    async def native_transfer(self, to: str, value: str) -> str:
        """Send ``value`` wei from the agent wallet to ``to``."""
        try:
            if not is_address(to):
                raise ToolError(ToolErrorKind.ENCODING_FAILURE, f"Invalid recipient address: {to}")
            amount = parse_wei(value)
            if amount <= 0:
                raise ToolError(ToolErrorKind.ENCODING_FAILURE, "Transfer value must be positive")
            tx_hash = await self.wallet.send_transaction(to, "0x", amount)
        except ToolError as exc:
            self.logger.warning("native_transfer failed [%s]: %s", exc.kind.value, exc)
            return f"Error transferring the asset: {exc}"
        except Exception as exc:
            self.logger.warning("native_transfer failed: %s", exc)
            return f"Error transferring the asset: {describe_exception(exc)}"

        return f"Transferred {amount} WEI to {to}.\nTransaction hash: {tx_hash}"
