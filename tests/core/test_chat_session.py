"""
Tests for the chat session tool loop using a scripted LLM provider.
"""

import json
from types import SimpleNamespace
from typing import Any, AsyncGenerator, Dict, List, Optional

import pytest

from app.config import Settings
from app.core.actions.toolkit import build_toolkit
from app.core.chat import ChatSession
from app.core.prompts import build_system_prompt
from app.providers.llm.base import (
    LLMMessage,
    LLMProvider,
    LLMResponse,
    LLMStreamEvent,
    ToolCall,
    ToolDefinition,
)
from app.types import ChatMessage

USER = "0xd8dA6BF26964aF9D7eEd9e03E53415D37aA96045"


class ScriptedLLM(LLMProvider):
    """Replays one prepared response per round and records what it was sent."""

    supports_tools = True

    def __init__(self, rounds: List[LLMResponse], deltas: Optional[List[List[str]]] = None):
        super().__init__(api_key="test", model="scripted")
        self.rounds = list(rounds)
        self.deltas = list(deltas or [])
        self.requests: List[List[LLMMessage]] = []
        self.tools_seen: List[List[ToolDefinition]] = []

    def _setup_client(self, **kwargs) -> None:
        pass

    async def stream_response(
        self,
        messages,
        max_tokens=None,
        temperature=None,
        tools=None,
        **kwargs,
    ) -> AsyncGenerator[LLMStreamEvent, None]:
        self.requests.append(list(messages))
        self.tools_seen.append(list(tools or []))
        for text in (self.deltas.pop(0) if self.deltas else []):
            yield LLMStreamEvent(type="text-delta", text=text)
        yield LLMStreamEvent(type="response", response=self.rounds.pop(0))


def _tool_round(*calls: ToolCall) -> LLMResponse:
    return LLMResponse(tool_calls=list(calls), finish_reason="tool_use", input_tokens=100, tokens_used=20)


def _final(text: str) -> LLMResponse:
    return LLMResponse(content=text, finish_reason="end_turn", input_tokens=150, tokens_used=30)


async def _collect(session: ChatSession, text: str) -> List[Dict[str, Any]]:
    return [event async for event in session.stream([ChatMessage(role="user", content=text)], USER)]


@pytest.fixture
def config():
    return Settings(network_id="31337", graph_api_key="", max_tool_rounds=5, max_duration_seconds=30)


@pytest.fixture
def toolkit(config, fake_wallet, contracts):
    return build_toolkit(config, wallet=fake_wallet, contracts=contracts)


# =============================================================================
# Tool loop
# =============================================================================

class TestToolLoop:

    @pytest.mark.asyncio
    async def test_plain_answer(self, config, toolkit):
        llm = ScriptedLLM([_final("gm")], deltas=[["g", "m"]])

        events = await _collect(ChatSession(llm, toolkit, config), "say gm")

        assert events == [
            {"type": "text-delta", "textDelta": "g"},
            {"type": "text-delta", "textDelta": "m"},
            {"type": "finish", "finishReason": "stop", "usage": {"promptTokens": 150, "completionTokens": 30}},
        ]
        assert len(llm.requests) == 1

    @pytest.mark.asyncio
    async def test_balance_question_end_to_end(self, config, toolkit, fake_wallet):
        fake_wallet.balances[USER.lower()] = 2 * 10**18
        call = ToolCall(id="toolu_1", name="getBalance", arguments={"address": USER})
        llm = ScriptedLLM([_tool_round(call), _final("You have 2 ETH.")], deltas=[[], ["You have 2 ETH."]])

        events = await _collect(ChatSession(llm, toolkit, config), "What is my balance?")

        assert [e["type"] for e in events] == ["tool-call", "tool-result", "text-delta", "finish"]
        assert events[0] == {"type": "tool-call", "toolCallId": "toolu_1", "toolName": "getBalance", "args": {"address": USER}}
        assert events[1]["result"] == {"address": USER, "balance": "2000000000000000000", "type": "NATIVE"}
        assert events[3]["usage"] == {"promptTokens": 250, "completionTokens": 50}

        # The prompt carries the user address and the registry
        system = llm.requests[0][0]
        assert system.role == "system"
        assert USER in system.content
        assert toolkit.contracts.to_json() in system.content

        # The tool result is fed back to the model on the next round
        second = llm.requests[1]
        assert second[-2].role == "assistant"
        assert second[-2].tool_calls[0].id == "toolu_1"
        assert second[-1].role == "tool_result"
        assert second[-1].tool_result.tool_call_id == "toolu_1"
        assert json.loads(second[-1].tool_result.to_anthropic_format()["content"])["balance"] == "2000000000000000000"

    @pytest.mark.asyncio
    async def test_tools_run_in_order(self, config, toolkit):
        calls = [
            ToolCall(id="a", name="showTransaction", arguments={"transactionHash": "0x01"}),
            ToolCall(id="b", name="showTransaction", arguments={"transactionHash": "0x02"}),
        ]
        llm = ScriptedLLM([_tool_round(*calls), _final("done")])

        events = await _collect(ChatSession(llm, toolkit, config), "show both")

        assert [(e["type"], e.get("toolCallId")) for e in events[:4]] == [
            ("tool-call", "a"),
            ("tool-call", "b"),
            ("tool-result", "a"),
            ("tool-result", "b"),
        ]
        assert [m.tool_result.tool_call_id for m in llm.requests[1][-2:]] == ["a", "b"]

    @pytest.mark.asyncio
    async def test_rejected_tool_call_still_answers(self, config, toolkit):
        llm = ScriptedLLM([_tool_round(ToolCall(id="x", name="selfdestruct", arguments={})), _final("sorry")])

        events = await _collect(ChatSession(llm, toolkit, config), "do something odd")

        assert events[1] == {
            "type": "tool-result",
            "toolCallId": "x",
            "toolName": "selfdestruct",
            "result": {"error": "Unknown action: selfdestruct"},
        }
        assert events[-1]["finishReason"] == "stop"

    @pytest.mark.asyncio
    async def test_tool_rounds_exceeded(self, config, toolkit):
        config.max_tool_rounds = 2
        call = ToolCall(id="t", name="showTransaction", arguments={"transactionHash": "0x01"})
        llm = ScriptedLLM([_tool_round(call), _tool_round(call)])

        events = await _collect(ChatSession(llm, toolkit, config), "loop")

        assert events[-1]["type"] == "finish"
        assert events[-1]["finishReason"] == "tool-rounds-exceeded"
        assert len(llm.requests) == 2

    @pytest.mark.asyncio
    async def test_duration_limit(self, config, toolkit, monkeypatch):
        import app.core.chat as chat_module

        clock = iter([0.0, 100.0])
        monkeypatch.setattr(chat_module, "time", SimpleNamespace(monotonic=lambda: next(clock)))
        call = ToolCall(id="t", name="showTransaction", arguments={"transactionHash": "0x01"})
        llm = ScriptedLLM([_tool_round(call), _final("late")])

        events = await _collect(ChatSession(llm, toolkit, config), "slow")

        assert events[-1] == {"type": "error", "error": "Request exceeded 30 seconds"}
        assert len(llm.requests) == 1

    @pytest.mark.asyncio
    async def test_catalog_passed_to_model(self, config, toolkit):
        llm = ScriptedLLM([_final("ok")])

        await _collect(ChatSession(llm, toolkit, config), "hi")

        assert {tool.name for tool in llm.tools_seen[0]} == set(toolkit.registry.names())


# =============================================================================
# System prompt
# =============================================================================

class TestSystemPrompt:

    def test_prompt_sections(self):
        endpoints = {
            "UNISWAP_V3": "https://uni.example/graphql",
            "AAVE_V3": "https://aave.example/graphql",
            "BLOCKS": "https://blocks.example/graphql",
        }

        prompt = build_system_prompt(USER, "0xAgent", '{"31337": {}}', endpoints)

        assert f"The connected user's address is: {USER}" in prompt
        assert "Your address is: 0xAgent" in prompt
        assert '{"31337": {}}' in prompt
        assert "/blockexplorer/transaction/<transaction-hash>" in prompt
        assert f'getBalance({{ address: "{USER}" }})' in prompt
        assert 'For Uniswap V3, use this exact endpoint:\n"https://uni.example/graphql"' in prompt
        assert "borrows(first: 100" in prompt
        assert "Other available subgraph endpoints:\nBLOCKS: https://blocks.example/graphql" in prompt

    def test_missing_featured_endpoints(self):
        prompt = build_system_prompt(USER, "0xAgent", "{}", {})
        assert "Uniswap V3" not in prompt
        assert "Other available subgraph endpoints" not in prompt
