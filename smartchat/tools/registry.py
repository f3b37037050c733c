"""
Tool registry for managing available tools.

The registry maintains the collection of tools the orchestrator can use,
provides lookup and direct-match discovery, renders the tool catalog for
prompts, and dispatches tool calls. Tools are registered once at startup;
after mark_initialized() the registry is read-only.
"""

import time
from typing import Dict, List, Optional

from ..exceptions import (
    DuplicateToolError,
    RegistryLockedError,
    ToolNotFoundError,
)
from ..models.tool_models import (
    ToolCall,
    ToolDefinition,
    ToolResult,
    ToolResultStatus,
)
from ..utils import get_logger
from .base import BaseTool
from .protocol import TOOL_CALL_PREFIX

logger = get_logger("tool_registry")

CATALOG_HEADER = "You have access to the following tools:\n\n"
CATALOG_INSTRUCTIONS = (
    f"To use a tool, respond with: {TOOL_CALL_PREFIX} {{tool_name}} {{parameters_json}}\n"
    f'Example: {TOOL_CALL_PREFIX} calculator {{"expression": "25 * 47"}}\n'
)


class ToolRegistry:
    """
    Central registry for all assistant tools.

    Maintains tools in registration order and provides methods for lookup,
    direct matching, catalog rendering and exception-free dispatch.
    """

    def __init__(self):
        """Initialize empty registry."""
        self._tools: Dict[str, BaseTool] = {}
        self._initialized = False

    def register(self, tool: BaseTool) -> None:
        """
        Register a tool in the registry.

        Args:
            tool: Tool instance to register

        Raises:
            DuplicateToolError: If tool name already registered
            RegistryLockedError: If the registry was already initialized
        """
        if self._initialized:
            raise RegistryLockedError(
                f"Cannot register '{tool.name}': registry is initialized"
            )
        if tool.name in self._tools:
            raise DuplicateToolError(f"Tool '{tool.name}' is already registered")

        self._tools[tool.name] = tool
        logger.info(f"Registered tool: {tool.name}")

    def lookup(self, name: str) -> BaseTool:
        """
        Get tool by exact, case-sensitive name.

        Raises:
            ToolNotFoundError: If no tool has that name
        """
        tool = self._tools.get(name)
        if tool is None:
            raise ToolNotFoundError(f"Tool '{name}' not found")
        return tool

    def get_tool(self, name: str) -> Optional[BaseTool]:
        """Get tool by name, or None if not found."""
        return self._tools.get(name)

    def has_tool(self, name: str) -> bool:
        return name in self._tools

    def names(self) -> List[str]:
        """Registered tool names in registration order."""
        return list(self._tools.keys())

    def get_all_tools(self) -> List[BaseTool]:
        """All registered tools in registration order."""
        return list(self._tools.values())

    def get_all_definitions(self) -> List[ToolDefinition]:
        """Tool definitions in registration order."""
        return [tool.to_definition() for tool in self._tools.values()]

    def get_tool_count(self) -> int:
        return len(self._tools)

    def find_direct_matches(self, message: str) -> List[BaseTool]:
        """
        Find tools whose matcher accepts the raw user message.

        Args:
            message: The user's message

        Returns:
            Every matching tool, in registration order
        """
        matched = []
        for tool in self._tools.values():
            try:
                if tool.matches(message):
                    matched.append(tool)
            except Exception as e:
                logger.warning(f"Matcher for '{tool.name}' failed, treating as no match: {e}")

        if matched:
            logger.info(f"Direct match: {[tool.name for tool in matched]}")
        return matched

    def execute(self, tool_call: ToolCall) -> ToolResult:
        """
        Execute a tool call and capture the outcome.

        Never raises: unknown tools and executor failures are reported
        through the result status.

        Args:
            tool_call: ToolCall with tool name and raw parameters

        Returns:
            ToolResult with execution outcome
        """
        start_time = time.time()

        tool = self._tools.get(tool_call.tool_name)
        if tool is None:
            logger.error(f"Tool '{tool_call.tool_name}' not found in registry")
            return ToolResult(
                tool_name=tool_call.tool_name,
                status=ToolResultStatus.NOT_FOUND,
                error=f"Tool '{tool_call.tool_name}' not found",
            )

        try:
            logger.info(
                f"Executing tool: {tool_call.tool_name} with params: {tool_call.parameters_raw}"
            )
            output = tool.run(tool_call.parameters_raw)
            execution_time = (time.time() - start_time) * 1000

            logger.info(f"Tool {tool_call.tool_name} executed successfully in {execution_time:.2f}ms")

            return ToolResult(
                tool_name=tool_call.tool_name,
                status=ToolResultStatus.SUCCESS,
                output=output,
                execution_time_ms=execution_time,
            )

        except Exception as e:
            execution_time = (time.time() - start_time) * 1000
            logger.error(
                f"Tool {tool_call.tool_name} execution failed: {type(e).__name__}: {e}",
                exc_info=True,
            )
            return ToolResult(
                tool_name=tool_call.tool_name,
                status=ToolResultStatus.ERROR,
                error=str(e) or type(e).__name__,
                execution_time_ms=execution_time,
            )

    def dispatch(self, name: str, parameters_raw: str) -> str:
        """
        Run a tool by name and return its result text.

        Args:
            name: Tool name
            parameters_raw: JSON object text

        Returns:
            Tool output, or an error-marked message; never raises
        """
        return self.execute(ToolCall(tool_name=name, parameters_raw=parameters_raw)).to_llm_format()

    def render_catalog(self) -> str:
        """
        Render every tool's name, description and schema for the model.

        Output is deterministic and follows registration order; it ends with
        the TOOL_CALL protocol instructions and one example.
        """
        parts = [CATALOG_HEADER]
        for definition in self.get_all_definitions():
            parts.append(definition.to_prompt_format())
            parts.append("\n")
        parts.append(CATALOG_INSTRUCTIONS)
        return "".join(parts)

    def mark_initialized(self) -> None:
        """Mark registry as initialized; further registration is rejected."""
        self._initialized = True
        logger.info(f"Registry initialized with {len(self._tools)} tools")

    @property
    def initialized(self) -> bool:
        """Check if registry has been initialized."""
        return self._initialized

    def get_summary(self) -> Dict[str, object]:
        """
        Get summary of registered tools.

        Returns:
            Dictionary with registry statistics
        """
        return {
            "total_tools": len(self._tools),
            "tools": self.names(),
            "initialized": self._initialized,
        }

    def __repr__(self) -> str:
        return f"<ToolRegistry: {len(self._tools)} tools registered>"
