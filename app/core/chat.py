"""
Chat session with model-driven tool calling.

Each round streams the model with the action catalog. Text deltas are
forwarded as they arrive; requested tool calls are executed one at a time and
their results are appended to the conversation for the next round. The loop
ends when the model answers without tool calls or a limit is hit.
"""

import json
import time
from typing import Any, AsyncGenerator, Dict, List, Optional

import structlog

from ..config import Settings
from ..providers.llm import get_llm_provider
from ..providers.llm.base import LLMMessage, LLMProvider, LLMResponse
from ..types import ChatMessage
from .actions.toolkit import AgentToolkit, get_toolkit
from .prompts import build_system_prompt

_logger = structlog.stdlib.get_logger("chat")

FINISH_REASONS = {
    "end_turn": "stop",
    "stop_sequence": "stop",
    "max_tokens": "length",
    "tool_use": "tool-calls",
}
TOOL_ROUNDS_EXCEEDED = "tool-rounds-exceeded"


def _summarize(result: Any, limit: int = 200) -> str:
    text = result if isinstance(result, str) else json.dumps(result, default=str)
    return text if len(text) <= limit else text[:limit] + "..."


class ChatSession:
    """Runs one conversation turn against the toolkit for a signed-in user."""

    def __init__(self, llm_provider: LLMProvider, toolkit: AgentToolkit, config: Settings):
        self.llm_provider = llm_provider
        self.toolkit = toolkit
        self.config = config

    def system_prompt(self, user_address: str) -> str:
        return build_system_prompt(
            user_address=user_address,
            agent_address=self.toolkit.agent_address,
            contracts_json=self.toolkit.contracts.to_json(),
            endpoints=self.toolkit.endpoints,
        )

    async def stream(
        self,
        messages: List[ChatMessage],
        user_address: str,
    ) -> AsyncGenerator[Dict[str, Any], None]:
        """Yield chat events for ``messages``; see the module docstring."""
        started = time.monotonic()
        conversation: List[LLMMessage] = [LLMMessage(role="system", content=self.system_prompt(user_address))]
        conversation.extend(LLMMessage(role=m.role, content=m.content) for m in messages)

        tools = self.toolkit.registry.get_definitions()
        usage = {"promptTokens": 0, "completionTokens": 0}
        tool_call_count = 0
        log = _logger.bind(user=user_address, network=self.toolkit.network_id)

        for round_index in range(self.config.max_tool_rounds):
            if round_index and time.monotonic() - started > self.config.max_duration_seconds:
                log.warning("chat_timeout", rounds=round_index, tool_calls=tool_call_count)
                yield {
                    "type": "error",
                    "error": f"Request exceeded {self.config.max_duration_seconds} seconds",
                }
                return

            response: Optional[LLMResponse] = None
            async for event in self.llm_provider.stream_response(
                conversation,
                max_tokens=self.config.max_tokens,
                temperature=self.config.temperature,
                tools=tools,
            ):
                if event.type == "text-delta" and event.text:
                    yield {"type": "text-delta", "textDelta": event.text}
                elif event.type == "response":
                    response = event.response

            if response is None:
                raise RuntimeError("Model stream ended without a response")

            usage["promptTokens"] += response.input_tokens or 0
            usage["completionTokens"] += response.tokens_used or 0

            if not response.tool_calls:
                finish_reason = FINISH_REASONS.get(response.finish_reason or "", response.finish_reason or "stop")
                log.info("chat_finished", rounds=round_index + 1, tool_calls=tool_call_count, finish_reason=finish_reason, **usage)
                yield {"type": "finish", "finishReason": finish_reason, "usage": dict(usage)}
                return

            for tool_call in response.tool_calls:
                log.info("tool_call", tool=tool_call.name, tool_call_id=tool_call.id, args=tool_call.arguments)
                yield {
                    "type": "tool-call",
                    "toolCallId": tool_call.id,
                    "toolName": tool_call.name,
                    "args": tool_call.arguments,
                }

            results = []
            for tool_call in response.tool_calls:
                result = await self.toolkit.executor.execute_single(tool_call)
                tool_call_count += 1
                results.append(result)
                log.info(
                    "tool_result",
                    tool=tool_call.name,
                    tool_call_id=tool_call.id,
                    ok=result.error is None,
                    result=_summarize(result.payload()),
                )
                yield {
                    "type": "tool-result",
                    "toolCallId": tool_call.id,
                    "toolName": tool_call.name,
                    "result": result.payload(),
                }

            conversation.append(
                LLMMessage(role="assistant", content=response.content, tool_calls=response.tool_calls)
            )
            conversation.extend(LLMMessage(role="tool_result", tool_result=result) for result in results)

        log.warning("chat_tool_rounds_exceeded", rounds=self.config.max_tool_rounds, tool_calls=tool_call_count)
        yield {"type": "finish", "finishReason": TOOL_ROUNDS_EXCEEDED, "usage": dict(usage)}


def get_chat_session() -> ChatSession:
    """Chat session over the configured LLM provider and process-wide toolkit."""
    from ..config import settings

    return ChatSession(get_llm_provider(settings), get_toolkit(), settings)
