"""
SmartChat - conversational assistant with tool orchestration.

A language model answers user messages in bounded sessions and can call
registered tools (calculator, unit converter, clock, weather) either directly
from keyword matches or through the TOOL_CALL text protocol.
"""

__version__ = "0.1.0"
