"""
Error classification for agent actions.

Every failure inside an action is raised as a ``ToolError`` carrying a
``ToolErrorKind`` and converted to an ``error`` string once, at the boundary
of the component that owns the action. The model therefore always receives a
well-formed result object.
"""

from enum import Enum


class ToolErrorKind(str, Enum):
    """Categories of action failures."""

    INVALID_CONTRACT = "invalid_contract"        # Contract name not deployed on the network
    TRANSPORT_FAILURE = "transport_failure"      # RPC node or HTTP failure
    ENCODING_FAILURE = "encoding_failure"        # Arguments do not fit the ABI
    PARSE_FAILURE = "parse_failure"              # Upstream response has an unexpected shape
    INVALID_ARGUMENTS = "invalid_arguments"      # Tool call arguments failed validation
    UNKNOWN_ACTION = "unknown_action"            # Tool name outside the catalog
    UNSUPPORTED_NETWORK = "unsupported_network"  # Action bound to another network
    UNHANDLED = "unhandled"


class ToolError(Exception):
    """An action failure with its classification."""

    def __init__(self, kind: ToolErrorKind, message: str):
        super().__init__(message)
        self.kind = kind
        self.message = message

    def __str__(self) -> str:
        return self.message

    def __repr__(self) -> str:
        return f"ToolError(kind={self.kind.value!r}, message={self.message!r})"


def describe_exception(exc: BaseException) -> str:
    """Render an exception for an ``error`` field, never as an empty string."""
    message = str(exc).strip()
    return message or exc.__class__.__name__
