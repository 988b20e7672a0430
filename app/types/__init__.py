from .requests import ChatRequest, ChatMessage
from .responses import ToolCatalogResponse, ToolInfo

__all__ = [
    "ChatRequest",
    "ChatMessage",
    "ToolCatalogResponse",
    "ToolInfo",
]
