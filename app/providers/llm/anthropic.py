from typing import List, Dict, Any, Optional, AsyncGenerator
import time

import anthropic
from anthropic import AsyncAnthropic

from .base import (
    LLMProvider, LLMMessage, LLMResponse, LLMStreamEvent,
    LLMProviderError, LLMProviderAPIError, LLMProviderAuthError, LLMProviderRateLimitError,
    ToolDefinition, ToolCall,
)


class AnthropicProvider(LLMProvider):
    """Anthropic Claude LLM Provider implementation with native tool calling support"""

    supports_tools: bool = True

    def __init__(self, api_key: str, model: Optional[str] = None, **kwargs):
        if not model:
            raise ValueError("AnthropicProvider requires a model to be specified")

        super().__init__(api_key, model, **kwargs)

    def _setup_client(self, **kwargs) -> None:
        """Initialize the Anthropic client"""
        timeout = kwargs.get("timeout")
        try:
            if timeout is not None:
                self.client = AsyncAnthropic(api_key=self.api_key, timeout=timeout)
            else:
                self.client = AsyncAnthropic(api_key=self.api_key)
        except Exception as e:
            self.logger.error(f"Failed to initialize Anthropic client: {e}")
            raise LLMProviderAuthError(f"Failed to initialize Anthropic client: {e}")

    def _convert_message_to_anthropic(self, msg: LLMMessage) -> Optional[Dict[str, Any]]:
        """Convert a single LLMMessage to Anthropic format"""
        if msg.role == "system":
            return None  # System messages handled separately

        if msg.role == "tool_result" and msg.tool_result:
            return {
                "role": "user",
                "content": [msg.tool_result.to_anthropic_format()]
            }

        if msg.role == "assistant" and msg.tool_calls:
            content = []
            if msg.content:
                content.append({"type": "text", "text": msg.content})
            for tc in msg.tool_calls:
                content.append({
                    "type": "tool_use",
                    "id": tc.id,
                    "name": tc.name,
                    "input": tc.arguments
                })
            return {"role": "assistant", "content": content}

        return {
            "role": msg.role,
            "content": msg.content or ""
        }

    def _merge_tool_results(self, converted: List[Dict[str, Any]]) -> List[Dict[str, Any]]:
        """Fold consecutive tool_result turns into one user turn"""
        merged: List[Dict[str, Any]] = []
        for message in converted:
            previous = merged[-1] if merged else None
            if (
                previous is not None
                and message["role"] == "user"
                and previous["role"] == "user"
                and isinstance(message["content"], list)
                and isinstance(previous["content"], list)
            ):
                previous["content"].extend(message["content"])
                continue
            merged.append(message)
        return merged

    def _build_request(
        self,
        messages: List[LLMMessage],
        max_tokens: Optional[int],
        temperature: Optional[float],
        tools: Optional[List[ToolDefinition]],
        kwargs: Dict[str, Any],
    ) -> Dict[str, Any]:
        anthropic_messages = []
        system_message = None

        for msg in messages:
            if msg.role == "system":
                system_message = msg.content
            else:
                converted = self._convert_message_to_anthropic(msg)
                if converted:
                    anthropic_messages.append(converted)

        request_params: Dict[str, Any] = {
            "model": self.model,
            "messages": self._merge_tool_results(anthropic_messages),
            "max_tokens": max_tokens or 4000,
        }

        if system_message:
            request_params["system"] = system_message

        if temperature is not None:
            request_params["temperature"] = temperature

        if tools:
            request_params["tools"] = [t.to_anthropic_format() for t in tools]

        kwargs.pop('tools', None)
        request_params.update(kwargs)
        return request_params

    def _parse_message(self, response: Any, start_time: float) -> LLMResponse:
        """Turn an Anthropic message into an LLMResponse"""
        content = ""
        tool_calls = []

        for block in response.content or []:
            block_type = getattr(block, "type", None)
            if block_type == "text":
                content += block.text
            elif block_type == "tool_use":
                tool_calls.append(ToolCall(
                    id=block.id,
                    name=block.name,
                    arguments=dict(block.input or {}),
                ))

        usage = getattr(response, "usage", None)

        return LLMResponse(
            content=content if content else None,
            tool_calls=tool_calls if tool_calls else None,
            tokens_used=usage.output_tokens if usage else None,
            input_tokens=usage.input_tokens if usage else None,
            model=self.model,
            finish_reason=getattr(response, "stop_reason", None),
            response_time_ms=self._measure_time(start_time),
        )

    def _translate_error(self, error: Exception) -> LLMProviderError:
        if isinstance(error, anthropic.AuthenticationError):
            return LLMProviderAuthError(f"Authentication failed: {error}")
        if isinstance(error, anthropic.RateLimitError):
            return LLMProviderRateLimitError(f"Rate limit exceeded: {error}")
        if isinstance(error, anthropic.APIError):
            return LLMProviderAPIError(f"API error: {error}")
        return LLMProviderError(f"Unexpected error: {error}")

    async def stream_response(
        self,
        messages: List[LLMMessage],
        max_tokens: Optional[int] = None,
        temperature: Optional[float] = None,
        tools: Optional[List[ToolDefinition]] = None,
        **kwargs
    ) -> AsyncGenerator[LLMStreamEvent, None]:
        """Stream text deltas from Claude, then the full message with any tool calls"""
        start_time = time.time()
        request_params = self._build_request(messages, max_tokens, temperature, tools, kwargs)

        try:
            async with self.client.messages.stream(**request_params) as stream:
                async for event in stream:
                    if getattr(event, "type", None) == "text" and event.text:
                        yield LLMStreamEvent(type="text-delta", text=event.text)
                final_message = await stream.get_final_message()
        except LLMProviderError:
            raise
        except Exception as e:
            translated = self._translate_error(e)
            await self._handle_error(translated, "stream_response")
            return

        yield LLMStreamEvent(
            type="response",
            response=self._parse_message(final_message, start_time),
        )
