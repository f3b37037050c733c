"""
Tests for the TOOL_CALL text protocol.
"""

import pytest

from smartchat.exceptions import ProtocolParseError
from smartchat.tools import is_tool_call, parse_tool_call, parse_tool_call_strict


class TestToolCallProtocol:
    """Parsing model completions into tool calls."""

    def test_parses_name_and_parameters(self):
        call = parse_tool_call('TOOL_CALL: calculator {"expression": "25 * 47"}')

        assert call.tool_name == "calculator"
        assert call.parameters_raw == '{"expression": "25 * 47"}'

    def test_missing_parameters_default_to_empty_object(self):
        call = parse_tool_call("TOOL_CALL: time")

        assert call.tool_name == "time"
        assert call.parameters_raw == "{}"

    def test_surrounding_whitespace_is_ignored(self):
        call = parse_tool_call('  \nTOOL_CALL:   weather   {"city": "New York"}  \n')

        assert call.tool_name == "weather"
        assert call.parameters_raw == '{"city": "New York"}'

    def test_plain_text_is_not_a_tool_call(self):
        assert not is_tool_call("The answer is 42.")
        assert parse_tool_call("The answer is 42.") is None
        assert not is_tool_call(None)

    def test_prefix_must_lead(self):
        assert not is_tool_call('Sure! TOOL_CALL: calculator {"expression": "1+1"}')

    def test_empty_tool_name_is_malformed(self):
        assert is_tool_call("TOOL_CALL:")
        assert parse_tool_call("TOOL_CALL:   ") is None

    def test_strict_parse_raises_on_malformed_call(self):
        with pytest.raises(ProtocolParseError):
            parse_tool_call_strict("TOOL_CALL:")

    def test_strict_parse_returns_call(self):
        call = parse_tool_call_strict('TOOL_CALL: converter {"value": 5, "conversion": "km_to_miles"}')

        assert call.tool_name == "converter"
        assert call.parameters_raw == '{"value": 5, "conversion": "km_to_miles"}'
