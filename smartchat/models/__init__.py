"""
Data models for SmartChat.

This module exports all data models for easy import.
"""

from .message import MemoryStatistics, Message, Role
from .tool_models import (
    ERROR_MARKER,
    ToolCall,
    ToolDefinition,
    ToolParameter,
    ToolParameterType,
    ToolResult,
    ToolResultStatus,
    TurnResult,
)

__all__ = [
    # Conversation models
    "Message",
    "Role",
    "MemoryStatistics",
    # Tool models
    "ERROR_MARKER",
    "ToolCall",
    "ToolDefinition",
    "ToolParameter",
    "ToolParameterType",
    "ToolResult",
    "ToolResultStatus",
    "TurnResult",
]
