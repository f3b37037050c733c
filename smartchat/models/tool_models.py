"""
Tool models and schemas for the tool-call protocol.

This module defines the data structures for tool definitions, parsed tool
calls, tool results, and the per-turn trace produced by the orchestrator.
"""

import json
from enum import Enum
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field


ERROR_MARKER = "Error"


class ToolParameterType(str, Enum):
    """Parameter types for tool definitions."""
    STRING = "string"
    INTEGER = "integer"
    NUMBER = "number"
    BOOLEAN = "boolean"
    ARRAY = "array"
    OBJECT = "object"


class ToolParameter(BaseModel):
    """
    Parameter definition for a tool.

    Defines the schema for a single parameter that a tool accepts,
    including its type, description, and constraints.
    """
    name: str = Field(..., description="Parameter name")
    type: ToolParameterType = Field(..., description="Parameter type")
    description: str = Field(..., description="Parameter description for LLM")
    required: bool = Field(default=True, description="Whether parameter is required")
    enum: Optional[List[str]] = Field(None, description="List of allowed values")
    default: Optional[Any] = Field(None, description="Default value if not provided")

    def to_json_schema(self) -> Dict[str, Any]:
        """Convert to a JSON schema property."""
        schema: Dict[str, Any] = {
            "type": self.type.value,
            "description": self.description,
        }

        if self.enum:
            schema["enum"] = self.enum

        if self.default is not None:
            schema["default"] = self.default

        return schema


class ToolDefinition(BaseModel):
    """
    Complete tool definition shown to the language model.

    This represents a tool the model can request through the TOOL_CALL
    protocol, including its signature and documentation.
    """
    name: str = Field(..., description="Tool name (must be unique)")
    description: str = Field(..., description="What the tool does")
    parameters: List[ToolParameter] = Field(default_factory=list, description="Tool parameters")
    returns: str = Field(..., description="Description of return value")
    examples: Optional[List[str]] = Field(None, description="Usage examples")

    def to_json_schema(self) -> Dict[str, Any]:
        """
        Build the JSON schema object describing the tool's parameters.

        Returns:
            Dictionary with ``type``, ``properties`` and ``required`` keys
        """
        properties = {}
        required = []

        for param in self.parameters:
            properties[param.name] = param.to_json_schema()
            if param.required:
                required.append(param.name)

        return {
            "type": "object",
            "properties": properties,
            "required": required,
        }

    def schema_text(self) -> str:
        """JSON schema rendered as compact, deterministic text."""
        return json.dumps(self.to_json_schema(), ensure_ascii=False)

    def to_prompt_format(self) -> str:
        """Catalog block for this tool."""
        return (
            f"Tool: {self.name}\n"
            f"Description: {self.description}\n"
            f"Parameters: {self.schema_text()}\n"
        )


class ToolCall(BaseModel):
    """
    Parsed tool call from model output.

    Transient: produced by the protocol parser, consumed once by the
    orchestrator, never stored.
    """
    tool_name: str = Field(..., description="Name of tool to call")
    parameters_raw: str = Field(default="{}", description="Raw parameter payload (JSON text)")

    def __repr__(self) -> str:
        return f"ToolCall(tool={self.tool_name}, params={self.parameters_raw})"


class ToolResultStatus(str, Enum):
    """Status codes for tool execution results."""
    SUCCESS = "success"
    ERROR = "error"
    NOT_FOUND = "not_found"


class ToolResult(BaseModel):
    """
    Result of tool execution.

    Tool failures are data: they carry an error message that is rendered
    with the error marker and folded back into the next prompt.
    """
    tool_name: str = Field(..., description="Name of executed tool")
    status: ToolResultStatus = Field(..., description="Execution status")
    output: Optional[str] = Field(None, description="Tool output text")
    error: Optional[str] = Field(None, description="Error message if failed")
    execution_time_ms: float = Field(default=0.0, description="Execution time in milliseconds")

    @property
    def success(self) -> bool:
        """Check if execution was successful."""
        return self.status == ToolResultStatus.SUCCESS

    def to_llm_format(self) -> str:
        """
        Format result for prompt consumption.

        Returns:
            The tool output, or an error-marked message
        """
        if self.status == ToolResultStatus.SUCCESS:
            return self.output if self.output else "Success"
        elif self.status == ToolResultStatus.NOT_FOUND:
            return f"{ERROR_MARKER}: Tool '{self.tool_name}' not found"
        else:
            return f"{ERROR_MARKER} executing tool: {self.error}"

    def __repr__(self) -> str:
        if self.success:
            return f"ToolResult(tool={self.tool_name}, status=SUCCESS, time={self.execution_time_ms:.1f}ms)"
        else:
            return f"ToolResult(tool={self.tool_name}, status={self.status.value}, error={self.error})"


class TurnResult(BaseModel):
    """
    Trace of one chat turn.

    Represents the full interaction cycle including every tool call made
    while producing the final reply.
    """
    response: str = Field(..., description="Final reply to the user")
    session_id: str = Field(..., description="Session the turn belongs to")
    direct_match: bool = Field(default=False, description="Reply came from direct tool matching")
    tool_calls: List[ToolCall] = Field(default_factory=list, description="Tools that were called")
    tool_results: List[ToolResult] = Field(default_factory=list, description="Results of tool calls")
    iterations: int = Field(default=0, description="Model-loop iterations used")
    total_time_ms: float = Field(default=0.0, description="Total processing time")
    succeeded: bool = Field(default=True, description="False when the turn ended in the error apology")

    @property
    def has_tool_calls(self) -> bool:
        """Check if any tools were called."""
        return len(self.tool_calls) > 0

    def get_failed_tools(self) -> List[str]:
        """Get list of failed tool names."""
        return [
            result.tool_name
            for result in self.tool_results
            if not result.success
        ]
