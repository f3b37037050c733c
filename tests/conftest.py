"""
Shared fixtures for SmartChat tests.

Provides a scripted completion client that records every prompt, a tool that
records its invocations, and a manually advanced clock.
"""

import threading
from collections import deque
from datetime import datetime, timedelta
from typing import List, Optional

import pytest

from smartchat.exceptions import ToolExecutionError
from smartchat.models import ToolParameter, ToolParameterType
from smartchat.services import BaseLLMService
from smartchat.tools import BaseTool


class ScriptedLLMService(BaseLLMService):
    """
    Completion client that replays scripted responses.

    Entries may be strings, exceptions (raised) or callables taking the
    prompt. Once the script runs out every call returns ``default``.
    """

    def __init__(self, responses: Optional[list] = None, default: str = "OK"):
        self.responses = deque(responses or [])
        self.default = default
        self.prompts: List[str] = []
        self._lock = threading.Lock()

    def script(self, *responses) -> None:
        self.responses.extend(responses)

    def complete(self, prompt: str) -> str:
        with self._lock:
            self.prompts.append(prompt)
            response = self.responses.popleft() if self.responses else self.default

        if isinstance(response, Exception):
            raise response
        if callable(response):
            return response(prompt)
        return response

    @property
    def call_count(self) -> int:
        return len(self.prompts)

    @property
    def provider_name(self) -> str:
        return "scripted"

    @property
    def model_name(self) -> str:
        return "scripted-model"


class RecordingTool(BaseTool):
    """Tool that records the ``value`` it was called with."""

    def __init__(
        self,
        name: str = "echo",
        keyword: Optional[str] = None,
        output: str = "done",
        error: Optional[str] = None,
    ):
        self._name = name
        self.keyword = keyword
        self.output = output
        self.error = error
        self.calls = []

    @property
    def name(self) -> str:
        return self._name

    @property
    def description(self) -> str:
        return f"Records calls made to {self._name}"

    @property
    def parameters(self) -> List[ToolParameter]:
        return [
            ToolParameter(
                name="value",
                type=ToolParameterType.STRING,
                description="Any value",
                required=False,
            ),
        ]

    @property
    def returns(self) -> str:
        return "The configured output"

    def matches(self, message: str) -> bool:
        return self.keyword is not None and self.keyword in message.lower()

    def execute(self, value=None) -> str:
        self.calls.append(value)
        if self.error:
            raise ToolExecutionError(self.error)
        return self.output


class ManualClock:
    """Clock that only moves when told to."""

    def __init__(self, start: datetime):
        self.now = start

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs) -> None:
        self.now += timedelta(**kwargs)


@pytest.fixture
def llm():
    """Fresh scripted completion client."""
    return ScriptedLLMService()


@pytest.fixture
def make_tool():
    """Factory for RecordingTool instances."""
    return RecordingTool


@pytest.fixture
def clock():
    """Manual clock starting at a fixed instant."""
    return ManualClock(datetime(2026, 1, 15, 9, 0, 0))
