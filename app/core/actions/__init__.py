"""Actions the chat agent can take on behalf of the user."""

from .errors import ToolError, ToolErrorKind
from .registry import ActionExecutor, ActionKind, ActionRegistry, RegisteredAction

__all__ = [
    "ActionExecutor",
    "ActionKind",
    "ActionRegistry",
    "RegisteredAction",
    "ToolError",
    "ToolErrorKind",
]
