"""
Agent toolkit assembly.

Builds the agent wallet, contract registry, action components and the
dispatcher from ``Settings``. Contract actions are only offered when the
active network has deployed contracts.
"""

import logging
from dataclasses import dataclass
from typing import Dict, Optional

from ...config import Settings
from ...providers.base import WalletProvider
from ...providers.llm.base import ToolDefinition, ToolParameter, ToolParameterType
from ..contracts.registry import ContractRegistry
from .balance import BalanceTool
from .contract_interactor import ContractInteractor
from .models import (
    ContractCallArgs,
    GetBalanceArgs,
    NativeTransferArgs,
    QuerySubgraphArgs,
    ShowTransactionArgs,
    WalletDetailsArgs,
)
from .registry import ActionExecutor, ActionKind, ActionRegistry
from .subgraph import SubgraphQuerier, subgraph_endpoints
from .wallet_actions import WalletActions

logger = logging.getLogger(__name__)


def _contract_call_parameters(include_value: bool) -> list:
    parameters = [
        ToolParameter(
            name="contractName",
            type=ToolParameterType.STRING,
            description="Name of the deployed contract",
        ),
        ToolParameter(
            name="functionName",
            type=ToolParameterType.STRING,
            description="The name of the function to call",
        ),
        ToolParameter(
            name="functionArgs",
            type=ToolParameterType.ARRAY,
            description="The arguments to pass to the function, each as a string",
            required=False,
            items={"type": "string"},
        ),
    ]
    if include_value:
        parameters.append(
            ToolParameter(
                name="value",
                type=ToolParameterType.STRING,
                description="The value to send with the transaction, in wei",
                required=False,
            )
        )
    return parameters


@dataclass
class AgentToolkit:
    """Everything the chat session needs to run actions for one network."""
    network_id: str
    network_name: str
    wallet: WalletProvider
    contracts: ContractRegistry
    registry: ActionRegistry
    executor: ActionExecutor
    endpoints: Dict[str, str]

    @property
    def agent_address(self) -> str:
        return self.wallet.address


def build_toolkit(
    config: Settings,
    wallet: Optional[WalletProvider] = None,
    contracts: Optional[ContractRegistry] = None,
    subgraph: Optional[SubgraphQuerier] = None,
) -> AgentToolkit:
    """Assemble the action catalog for the configured network."""
    network_id = str(config.network_id)

    if wallet is None:
        from ...providers.wallet import EvmWalletProvider
        wallet = EvmWalletProvider.from_settings(config)
    if contracts is None:
        contracts = ContractRegistry.from_file(config.deployed_contracts_path)
    if subgraph is None:
        subgraph = SubgraphQuerier(timeout_s=config.request_timeout_seconds)

    registry = ActionRegistry()
    wallet_actions = WalletActions(wallet)
    interactor: Optional[ContractInteractor] = None

    if contracts.has_network(network_id):
        interactor = ContractInteractor(contracts, wallet, network_id)

        async def read_contract(args: ContractCallArgs):
            return await interactor.read_contract(args)

        async def write_contract(args: ContractCallArgs):
            return await interactor.write_contract(args)

        registry.register(
            ActionKind.READ_CONTRACT,
            ToolDefinition(
                name=ActionKind.READ_CONTRACT.value,
                description="Call a read-only function on a contract",
                parameters=_contract_call_parameters(include_value=False),
            ),
            ContractCallArgs,
            read_contract,
            network_id=network_id,
        )
        registry.register(
            ActionKind.WRITE_CONTRACT,
            ToolDefinition(
                name=ActionKind.WRITE_CONTRACT.value,
                description="Call a write function on a contract",
                parameters=_contract_call_parameters(include_value=True),
            ),
            ContractCallArgs,
            write_contract,
            network_id=network_id,
        )
    else:
        logger.warning("No deployed contracts for network %s; contract actions disabled", network_id)

    balance_tool = BalanceTool(interactor, wallet_actions)

    async def get_balance(args: GetBalanceArgs):
        return await balance_tool.get_balance(args.address, args.tokenAddress)

    async def query_subgraph(args: QuerySubgraphArgs):
        return await subgraph.query_subgraph(args.endpoint, args.query, args.variables)

    async def show_transaction(args: ShowTransactionArgs):
        return {"transactionHash": args.transactionHash}

    async def get_wallet_details(args: WalletDetailsArgs):
        return await wallet_actions.get_wallet_details(args.address)

    async def native_transfer(args: NativeTransferArgs):
        return await wallet_actions.native_transfer(args.to, args.value)

    registry.register(
        ActionKind.GET_BALANCE,
        ToolDefinition(
            name=ActionKind.GET_BALANCE.value,
            description="Get the balance of an Ethereum address",
            parameters=[
                ToolParameter(
                    name="address",
                    type=ToolParameterType.STRING,
                    description="The Ethereum address to query",
                ),
                ToolParameter(
                    name="tokenAddress",
                    type=ToolParameterType.STRING,
                    description="Optional token address to query specific token balance",
                    required=False,
                ),
            ],
        ),
        GetBalanceArgs,
        get_balance,
    )
    registry.register(
        ActionKind.QUERY_SUBGRAPH,
        ToolDefinition(
            name=ActionKind.QUERY_SUBGRAPH.value,
            description="Query a subgraph using GraphQL",
            parameters=[
                ToolParameter(
                    name="endpoint",
                    type=ToolParameterType.STRING,
                    description="The subgraph endpoint URL",
                ),
                ToolParameter(
                    name="query",
                    type=ToolParameterType.STRING,
                    description="The GraphQL query string",
                ),
                ToolParameter(
                    name="variables",
                    type=ToolParameterType.OBJECT,
                    description="Optional variables for the GraphQL query",
                    required=False,
                ),
            ],
        ),
        QuerySubgraphArgs,
        query_subgraph,
    )
    registry.register(
        ActionKind.SHOW_TRANSACTION,
        ToolDefinition(
            name=ActionKind.SHOW_TRANSACTION.value,
            description="Show the transaction hash",
            parameters=[
                ToolParameter(
                    name="transactionHash",
                    type=ToolParameterType.STRING,
                    description="The transaction hash to show",
                ),
            ],
        ),
        ShowTransactionArgs,
        show_transaction,
    )
    registry.register(
        ActionKind.GET_WALLET_DETAILS,
        ToolDefinition(
            name=ActionKind.GET_WALLET_DETAILS.value,
            description=(
                "Get details about a wallet: its address, network and native balance in wei. "
                "Defaults to the agent's own wallet."
            ),
            parameters=[
                ToolParameter(
                    name="address",
                    type=ToolParameterType.STRING,
                    description="Address to report on; defaults to the agent wallet",
                    required=False,
                ),
            ],
        ),
        WalletDetailsArgs,
        get_wallet_details,
    )
    registry.register(
        ActionKind.NATIVE_TRANSFER,
        ToolDefinition(
            name=ActionKind.NATIVE_TRANSFER.value,
            description="Transfer native currency from the agent wallet to another address",
            parameters=[
                ToolParameter(
                    name="to",
                    type=ToolParameterType.STRING,
                    description="Recipient address",
                ),
                ToolParameter(
                    name="value",
                    type=ToolParameterType.STRING,
                    description="Amount to send, in wei",
                ),
            ],
        ),
        NativeTransferArgs,
        native_transfer,
    )

    return AgentToolkit(
        network_id=network_id,
        network_name=config.network_name,
        wallet=wallet,
        contracts=contracts,
        registry=registry,
        executor=ActionExecutor(registry, network_id),
        endpoints=subgraph_endpoints(config.graph_api_key, config.subgraph_endpoint_overrides),
    )


_toolkit: Optional[AgentToolkit] = None


def get_toolkit() -> AgentToolkit:
    """Process-wide toolkit for the configured network."""
    global _toolkit
    if _toolkit is None:
        from ...config import settings
        _toolkit = build_toolkit(settings)
    return _toolkit
