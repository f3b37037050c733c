"""
Base tool class for the tool-call protocol.

All tools must inherit from BaseTool and implement the required abstract
members. A tool exposes two independent entry points: ``matches`` decides
from the raw user message whether the tool applies without asking the model,
and ``run`` executes it from a JSON text payload.
"""

import json
import re
from abc import ABC, abstractmethod
from typing import Any, Dict, List, Optional

from ..exceptions import ToolExecutionError
from ..models.tool_models import ToolDefinition, ToolParameter

_CODE_FENCE = re.compile(r"```json|```")


class BaseTool(ABC):
    """
    Base class for all assistant tools.

    Tools are functions the orchestrator can call either because the user
    message matched them directly or because the model requested them.
    """

    # When True, an unparseable payload falls back to the parameter defaults
    lenient_arguments: bool = False

    @property
    @abstractmethod
    def name(self) -> str:
        """
        Tool name used by the model in TOOL_CALL requests.

        Should be short and lower-case. Example: 'calculator', 'weather'
        """
        pass

    @property
    @abstractmethod
    def description(self) -> str:
        """
        Human-readable description of what the tool does.

        This is shown to the model to help it decide when to use the tool.
        """
        pass

    @property
    @abstractmethod
    def parameters(self) -> List[ToolParameter]:
        """
        List of parameters this tool accepts.

        Returns:
            List of ToolParameter objects defining the tool's signature
        """
        pass

    @property
    @abstractmethod
    def returns(self) -> str:
        """Description of what the tool returns."""
        pass

    @abstractmethod
    def execute(self, **kwargs) -> Any:
        """
        Execute the tool with validated parameters.

        Args:
            **kwargs: Tool parameters as keyword arguments

        Returns:
            Tool result (strings are returned as-is, other values as JSON)

        Raises:
            ToolExecutionError: If the parameters are unusable or the work fails
        """
        pass

    @property
    def examples(self) -> Optional[List[str]]:
        """Optional usage examples for the tool."""
        return None

    def matches(self, message: str) -> bool:
        """
        Whether the raw user message should trigger this tool directly.

        Must be pure and cheap (substring or regex checks); it runs on every
        inbound message. Default: never matches.
        """
        return False

    def to_definition(self) -> ToolDefinition:
        """
        Convert tool to ToolDefinition for the catalog.

        Returns:
            ToolDefinition object
        """
        return ToolDefinition(
            name=self.name,
            description=self.description,
            parameters=self.parameters,
            returns=self.returns,
            examples=self.examples,
        )

    def parameters_schema(self) -> str:
        """JSON schema text used in catalogs and extraction prompts."""
        return self.to_definition().schema_text()

    def parse_arguments(self, parameters_raw: Optional[str]) -> Dict[str, Any]:
        """
        Parse a JSON object payload into keyword arguments.

        Blank payloads mean "no arguments". Markdown code fences around the
        JSON are removed.

        Raises:
            ToolExecutionError: If the payload is not a JSON object
        """
        text = _CODE_FENCE.sub("", parameters_raw or "").strip()
        if not text:
            return {}

        try:
            parsed = json.loads(text)
        except json.JSONDecodeError as e:
            if self.lenient_arguments:
                return {}
            raise ToolExecutionError(f"Invalid JSON parameters: {e.msg}") from e

        if not isinstance(parsed, dict):
            if self.lenient_arguments:
                return {}
            raise ToolExecutionError("Parameters must be a JSON object")

        return parsed

    def validate_parameters(self, **kwargs) -> None:
        """
        Validate parameters before execution.

        Raises:
            ToolExecutionError: If parameters are missing or unknown
        """
        for param in self.parameters:
            if param.required and param.name not in kwargs:
                raise ToolExecutionError(f"Required parameter '{param.name}' missing")

        valid_param_names = {p.name for p in self.parameters}
        for key in kwargs:
            if key not in valid_param_names:
                raise ToolExecutionError(f"Unknown parameter '{key}'")

    def run(self, parameters_raw: Optional[str]) -> str:
        """
        Parse, validate, execute and render a tool invocation.

        Args:
            parameters_raw: JSON object text, e.g. '{"expression": "2 + 2"}'

        Returns:
            Tool output as text
        """
        kwargs = self.parse_arguments(parameters_raw)
        if self.lenient_arguments:
            known = {p.name for p in self.parameters}
            kwargs = {k: v for k, v in kwargs.items() if k in known}
        self.validate_parameters(**kwargs)

        result = self.execute(**kwargs)
        if isinstance(result, str):
            return result
        return json.dumps(result, ensure_ascii=False)

    def __repr__(self) -> str:
        return f"<Tool: {self.name}>"
