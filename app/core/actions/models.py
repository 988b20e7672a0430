"""Argument and result models for agent actions."""

from typing import Any, Dict, List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field


class ActionArgs(BaseModel):
    """Base for tool call arguments; unknown keys from the model are ignored."""

    model_config = ConfigDict(extra="ignore", populate_by_name=True)


class ContractCallArgs(ActionArgs):
    contractName: str = Field(description="Name of the deployed contract")
    functionName: str = Field(description="The name of the function to call")
    functionArgs: List[str] = Field(default_factory=list, description="The arguments to pass to the function")
    value: Optional[str] = Field(default=None, description="The value to send with the transaction, in wei")


class GetBalanceArgs(ActionArgs):
    address: str = Field(description="The Ethereum address to query")
    tokenAddress: Optional[str] = Field(default=None, description="Optional token address to query specific token balance")


class QuerySubgraphArgs(ActionArgs):
    endpoint: str = Field(description="The subgraph endpoint URL")
    query: str = Field(description="The GraphQL query string")
    variables: Dict[str, Any] = Field(default_factory=dict, description="Optional variables for the GraphQL query")


class ShowTransactionArgs(ActionArgs):
    transactionHash: str = Field(description="The transaction hash to show")


class WalletDetailsArgs(ActionArgs):
    address: Optional[str] = Field(default=None, description="Address to report on; defaults to the agent wallet")


class NativeTransferArgs(ActionArgs):
    to: str = Field(description="Recipient address")
    value: str = Field(description="Amount to send, in wei")


class ActionResult(BaseModel):
    """Results serialize without unset fields so success and error stay exclusive."""

    model_config = ConfigDict(populate_by_name=True)

    def to_payload(self) -> Dict[str, Any]:
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


class ReadResult(ActionResult):
    contract_name: str = Field(alias="contractName")
    function_name: str = Field(alias="functionName")
    result: Optional[Any] = None
    error: Optional[str] = None


class WriteResult(ActionResult):
    contract_name: str = Field(alias="contractName")
    function_name: str = Field(alias="functionName")
    hash: Optional[str] = None
    error: Optional[str] = None


class BalanceResult(ActionResult):
    address: Optional[str] = None
    token_address: Optional[str] = Field(default=None, alias="tokenAddress")
    balance: Optional[str] = None
    type: Optional[Literal["ERC20", "NATIVE"]] = None
    error: Optional[str] = None

    @classmethod
    def failure(cls, message: str) -> "BalanceResult":
        return cls(error=message)
