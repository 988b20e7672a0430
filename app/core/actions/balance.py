"""
Balance Tool

Native balances are read from the wallet-details text, token balances through
the contract interactor's ``balanceOf`` read. Balances stay integer strings in
the smallest unit; unit conversion is left to the model.
"""

import logging
import re
from typing import Optional

from ..contracts.abi import ERC20_BALANCE_OF_ABI
from .contract_interactor import ContractInteractor
from .errors import ToolError, ToolErrorKind, describe_exception
from .models import BalanceResult
from .wallet_actions import WalletActions

NATIVE_BALANCE_RE = re.compile(r"Native Balance: (\d+) WEI")


class BalanceTool:
    def __init__(
        self,
        interactor: Optional[ContractInteractor],
        wallet_actions: Optional[WalletActions],
        logger: Optional[logging.Logger] = None,
    ):
        self.interactor = interactor
        self.wallet_actions = wallet_actions
        self.logger = logger or logging.getLogger(__name__)

    async def get_balance(self, address: str, token_address: Optional[str] = None) -> BalanceResult:
        try:
            if token_address:
                return await self._token_balance(address, token_address)
            return await self._native_balance(address)
        except ToolError as exc:
            self.logger.warning("getBalance for %s failed [%s]: %s", address, exc.kind.value, exc)
            return BalanceResult.failure(str(exc))
        except Exception as exc:
            self.logger.warning("getBalance for %s failed: %s", address, exc)
            return BalanceResult.failure(describe_exception(exc))

    async def _token_balance(self, address: str, token_address: str) -> BalanceResult:
        if self.interactor is None:
            raise ToolError(ToolErrorKind.UNHANDLED, "Read contract action not found")

        read = await self.interactor.read_at(token_address, ERC20_BALANCE_OF_ABI, "balanceOf", [address])
        if read.error is not None:
            # read_at has already logged the failure with its kind
            return BalanceResult.failure(read.error)

        return BalanceResult(
            address=address,
            tokenAddress=token_address,
            balance=str(read.result),
            type="ERC20",
        )

    async def _native_balance(self, address: str) -> BalanceResult:
        if self.wallet_actions is None:
            raise ToolError(ToolErrorKind.UNHANDLED, "Wallet details action not found")

        details = await self.wallet_actions.get_wallet_details(address)
        match = NATIVE_BALANCE_RE.search(details)
        if not match:
            raise ToolError(ToolErrorKind.PARSE_FAILURE, "Could not parse native balance from response")

        return BalanceResult(address=address, balance=match.group(1), type="NATIVE")
