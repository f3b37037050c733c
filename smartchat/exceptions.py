"""
Exception hierarchy for SmartChat.

All errors raised by the orchestration core inherit from SmartChatError so
callers can catch broad or specific failures as needed.
"""


class SmartChatError(Exception):
    """Base exception for all SmartChat errors."""


class DuplicateToolError(SmartChatError):
    """Raised when a tool is registered under a name that already exists."""


class RegistryLockedError(SmartChatError):
    """Raised when registering a tool after the registry was initialized."""


class ToolNotFoundError(SmartChatError):
    """Raised when a tool name is not present in the registry."""


class ToolExecutionError(SmartChatError):
    """Raised by a tool when its parameters are invalid or its work fails."""


class ProtocolParseError(SmartChatError):
    """Raised when model output claims a tool call that cannot be parsed."""


class IterationBudgetExceeded(SmartChatError):
    """Raised when the model keeps requesting tools past the iteration bound."""


class CompletionClientError(SmartChatError):
    """Raised when the language model backend reports a failure."""
