"""
Tools package for the assistant's tool-call protocol.

This package provides the tool interface, the registry that matches and
dispatches tools, the TOOL_CALL text protocol, and the built-in tools.
"""

from .base import BaseTool
from .protocol import (
    TOOL_CALL_PREFIX,
    is_tool_call,
    parse_tool_call,
    parse_tool_call_strict,
)
from .registry import ToolRegistry
from .utility_tools import CalculatorTool, ConverterTool, TimeTool
from .weather_tools import WeatherTool

__all__ = [
    "BaseTool",
    "ToolRegistry",
    "TOOL_CALL_PREFIX",
    "is_tool_call",
    "parse_tool_call",
    "parse_tool_call_strict",
    "CalculatorTool",
    "ConverterTool",
    "TimeTool",
    "WeatherTool",
]
