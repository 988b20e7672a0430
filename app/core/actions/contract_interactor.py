"""
Contract Interactor

Reads and writes deployed contracts for the agent. Contract names are
validated against the registry of the network the interactor is bound to.
Every failure is returned in the result's ``error`` field; callers never see
an exception.
"""

import logging
from typing import Any, Dict, List, Optional, Sequence

from eth_utils import is_address

from ...providers.base import WalletProvider
from ..contracts.abi import decode_function_result, encode_function_call, find_function, parse_wei
from ..contracts.registry import ContractRegistry
from .errors import ToolError, ToolErrorKind, describe_exception
from .models import ContractCallArgs, ReadResult, WriteResult


class ContractInteractor:
    """Read and write access to the contracts deployed on one network."""

    def __init__(
        self,
        registry: ContractRegistry,
        wallet: WalletProvider,
        network_id: str,
        logger: Optional[logging.Logger] = None,
    ):
        self.registry = registry
        self.wallet = wallet
        self.network_id = str(network_id)
        self.logger = logger or logging.getLogger(__name__)

    def supports_network(self, network_id: str) -> bool:
        return str(network_id) == self.network_id

    async def read_contract(self, request: ContractCallArgs) -> ReadResult:
        """Call a read-only function on a registered contract."""
        try:
            contract = self.registry.lookup(self.network_id, request.contractName)
        except ToolError as exc:
            return self._read_failure(request.contractName, request.functionName, exc)

        return await self.read_at(
            contract.address,
            contract.abi,
            request.functionName,
            request.functionArgs,
            contract_name=request.contractName,
        )

    async def read_at(
        self,
        address: str,
        abi: Sequence[Dict[str, Any]],
        function_name: str,
        args: List[Any],
        contract_name: Optional[str] = None,
    ) -> ReadResult:
        """Call ``function_name`` on an explicit address and ABI."""
        label = contract_name or address
        try:
            if not is_address(address):
                raise ToolError(ToolErrorKind.ENCODING_FAILURE, f"Invalid contract address: {address}")
            fn_abi = find_function(abi, function_name, len(args))
            data = encode_function_call(fn_abi, args)
            raw = await self.wallet.call(address, data)
            result = decode_function_result(fn_abi, raw)
        except ToolError as exc:
            return self._read_failure(label, function_name, exc)
        except Exception as exc:
            return self._read_failure(
                label,
                function_name,
                ToolError(ToolErrorKind.TRANSPORT_FAILURE, describe_exception(exc)),
            )

        return ReadResult(contractName=label, functionName=function_name, result=result)

    async def write_contract(self, request: ContractCallArgs) -> WriteResult:
        """Submit a transaction calling a state-changing function."""
        try:
            contract = self.registry.lookup(self.network_id, request.contractName)
            fn_abi = find_function(contract.abi, request.functionName, len(request.functionArgs))
            data = encode_function_call(fn_abi, request.functionArgs)
            value = self._parse_value(request.value)
            tx_hash = await self.wallet.send_transaction(contract.address, data, value)
        except ToolError as exc:
            return self._write_failure(request, exc)
        except Exception as exc:
            return self._write_failure(
                request,
                ToolError(ToolErrorKind.TRANSPORT_FAILURE, describe_exception(exc)),
            )

        self.logger.info(
            "Submitted %s.%s on network %s: %s",
            request.contractName,
            request.functionName,
            self.network_id,
            tx_hash,
        )
        return WriteResult(
            contractName=request.contractName,
            functionName=request.functionName,
            hash=tx_hash,
        )

    @staticmethod
    def _parse_value(value: Optional[str]) -> int:
        if value is None or not value.strip():
            return 0
        amount = parse_wei(value)
        if amount < 0:
            raise ToolError(ToolErrorKind.ENCODING_FAILURE, "Transaction value cannot be negative")
        return amount

    def _read_failure(self, contract_name: str, function_name: str, exc: ToolError) -> ReadResult:
        self.logger.warning("read-contract %s.%s failed [%s]: %s", contract_name, function_name, exc.kind.value, exc)
        return ReadResult(contractName=contract_name, functionName=function_name, error=str(exc))

    def _write_failure(self, request: ContractCallArgs, exc: ToolError) -> WriteResult:
        self.logger.warning(
            "write-contract %s.%s failed [%s]: %s",
            request.contractName,
            request.functionName,
            exc.kind.value,
            exc,
        )
        return WriteResult(
            contractName=request.contractName,
            functionName=request.functionName,
            error=str(exc),
        )
