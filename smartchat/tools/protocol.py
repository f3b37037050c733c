"""
Textual tool-call protocol.

The model requests a tool by answering with a line of the form::

    TOOL_CALL: <tool_name> <parameters_json>

Parsing lives here alone so the orchestrator loop does not depend on the
wire convention.
"""

from typing import Optional

from ..exceptions import ProtocolParseError
from ..models.tool_models import ToolCall

TOOL_CALL_PREFIX = "TOOL_CALL:"
EMPTY_PARAMETERS = "{}"


def is_tool_call(text: Optional[str]) -> bool:
    """Check whether a completion requests a tool."""
    return text is not None and text.strip().startswith(TOOL_CALL_PREFIX)


def parse_tool_call(text: Optional[str]) -> Optional[ToolCall]:
    """
    Parse a tool call out of a completion.

    The name runs up to the first whitespace after the prefix; the stripped
    remainder is the raw parameter payload, or ``"{}"`` when there is none.

    Args:
        text: Model completion

    Returns:
        The parsed ToolCall, or None if the text is not a well-formed call
    """
    if not is_tool_call(text):
        return None

    content = text.strip()[len(TOOL_CALL_PREFIX):].strip()
    if not content:
        return None

    parts = content.split(None, 1)
    tool_name = parts[0]
    if len(parts) == 1:
        return ToolCall(tool_name=tool_name, parameters_raw=EMPTY_PARAMETERS)

    return ToolCall(tool_name=tool_name, parameters_raw=parts[1].strip())


def parse_tool_call_strict(text: Optional[str]) -> ToolCall:
    """
    Parse a tool call, raising on failure.

    Raises:
        ProtocolParseError: If the text is not a well-formed tool call
    """
    tool_call = parse_tool_call(text)
    if tool_call is None:
        preview = (text or "")[:80]
        raise ProtocolParseError(f"Malformed tool call: {preview!r}")
    return tool_call
