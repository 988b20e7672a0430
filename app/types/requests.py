from typing import List, Literal

from pydantic import BaseModel, Field


class ChatMessage(BaseModel):
    role: Literal["user", "assistant"] = Field(description="Message role: user or assistant")
    content: str = Field(description="Message content")


class ChatRequest(BaseModel):
    messages: List[ChatMessage] = Field(description="Chat conversation history")
