"""
Action Registry and Executor for LLM-driven tool calling.

Actions form a closed set. The executor validates the tool name, the
arguments and the network binding before handing a typed argument model to
the handler, and it is the only place where unexpected handler exceptions are
caught.
"""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Coroutine, Dict, List, Optional, Type

from pydantic import ValidationError

from ...providers.llm.base import ToolCall, ToolDefinition, ToolResult
from .errors import ToolError, ToolErrorKind, describe_exception
from .models import ActionArgs, ActionResult


class ActionKind(str, Enum):
    """Every action the model may call."""

    READ_CONTRACT = "read-contract"
    WRITE_CONTRACT = "write-contract"
    GET_BALANCE = "getBalance"
    QUERY_SUBGRAPH = "querySubgraph"
    SHOW_TRANSACTION = "showTransaction"
    GET_WALLET_DETAILS = "get_wallet_details"
    NATIVE_TRANSFER = "native_transfer"

    @classmethod
    def parse(cls, name: str) -> Optional["ActionKind"]:
        try:
            return cls(name)
        except ValueError:
            return None


ActionHandler = Callable[[Any], Coroutine[Any, Any, Any]]


@dataclass
class RegisteredAction:
    """An action registered with its definition, argument model and handler."""
    kind: ActionKind
    definition: ToolDefinition
    args_model: Type[ActionArgs]
    handler: ActionHandler
    network_id: Optional[str] = None  # None means network agnostic


class ActionRegistry:
    """Catalog of the actions offered to the model."""

    def __init__(self, logger: Optional[logging.Logger] = None):
        self._actions: Dict[ActionKind, RegisteredAction] = {}
        self.logger = logger or logging.getLogger(__name__)

    def register(
        self,
        kind: ActionKind,
        definition: ToolDefinition,
        args_model: Type[ActionArgs],
        handler: ActionHandler,
        network_id: Optional[str] = None,
    ) -> None:
        if definition.name != kind.value:
            raise ValueError(f"Definition name {definition.name!r} does not match action {kind.value!r}")
        self._actions[kind] = RegisteredAction(
            kind=kind,
            definition=definition,
            args_model=args_model,
            handler=handler,
            network_id=str(network_id) if network_id is not None else None,
        )

    def get_definitions(self) -> List[ToolDefinition]:
        """Get all action definitions for passing to the LLM."""
        return [action.definition for action in self._actions.values()]

    def get_action(self, name: str) -> Optional[RegisteredAction]:
        kind = ActionKind.parse(name)
        if kind is None:
            return None
        return self._actions.get(kind)

    def has_action(self, name: str) -> bool:
        return self.get_action(name) is not None

    def names(self) -> List[str]:
        return [kind.value for kind in self._actions]


class ActionExecutor:
    """Runs tool calls against the registry, one at a time."""

    def __init__(
        self,
        registry: ActionRegistry,
        network_id: str,
        logger: Optional[logging.Logger] = None,
    ):
        self.registry = registry
        self.network_id = str(network_id)
        self.logger = logger or logging.getLogger(__name__)

    async def execute_single(self, tool_call: ToolCall) -> ToolResult:
        try:
            action, args = self._resolve(tool_call)
        except ToolError as exc:
            self.logger.warning("Rejected tool call %s [%s]: %s", tool_call.name, exc.kind.value, exc)
            return ToolResult(tool_call_id=tool_call.id, result=None, error=str(exc))

        try:
            result = await action.handler(args)
        except Exception as exc:
            self.logger.error("Action %s raised unexpectedly: %s", tool_call.name, exc, exc_info=True)
            error = ToolError(ToolErrorKind.UNHANDLED, describe_exception(exc))
            return ToolResult(tool_call_id=tool_call.id, result=None, error=str(error))

        if isinstance(result, ActionResult):
            result = result.to_payload()
        return ToolResult(tool_call_id=tool_call.id, result=result)

    async def execute_sequential(self, tool_calls: List[ToolCall]) -> List[ToolResult]:
        results = []
        for tool_call in tool_calls:
            results.append(await self.execute_single(tool_call))
        return results

    def _resolve(self, tool_call: ToolCall):
        action = self.registry.get_action(tool_call.name)
        if action is None:
            raise ToolError(ToolErrorKind.UNKNOWN_ACTION, f"Unknown action: {tool_call.name}")

        if action.network_id is not None and action.network_id != self.network_id:
            raise ToolError(
                ToolErrorKind.UNSUPPORTED_NETWORK,
                f"Action {tool_call.name} does not support network {self.network_id}",
            )

        try:
            args = action.args_model.model_validate(tool_call.arguments or {})
        except ValidationError as exc:
            problems = "; ".join(
                f"{'.'.join(str(part) for part in err['loc']) or 'arguments'}: {err['msg']}"
                for err in exc.errors()
            )
            raise ToolError(
                ToolErrorKind.INVALID_ARGUMENTS,
                f"Invalid arguments for {tool_call.name}: {problems}",
            ) from exc

        return action, args
