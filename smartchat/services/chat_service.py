"""
Chat orchestration service.

Runs one conversational turn: records the user message, answers through
directly matched tools when the message clearly asks for one, and otherwise
drives a bounded loop in which the model may request tools with the
TOOL_CALL protocol before giving its final answer.
"""

import re
import time
from typing import List

from ..exceptions import (
    CompletionClientError,
    IterationBudgetExceeded,
    ProtocolParseError,
)
from ..models.message import MemoryStatistics, Message, Role
from ..models.tool_models import ToolCall, ToolResult, TurnResult
from ..tools.base import BaseTool
from ..tools.protocol import is_tool_call, parse_tool_call_strict
from ..tools.registry import ToolRegistry
from ..utils import get_logger
from .base_llm_service import BaseLLMService
from .memory_service import SessionMemory

SYSTEM_PREAMBLE = (
    "You are a helpful AI assistant with access to tools. "
    "When users ask questions that require tools, use them.\n\n"
)

EXTRACTION_PROMPT = (
    "Extract parameters for the {name} tool from this message: '{message}'\n"
    "Tool parameters schema: {schema}\n"
    "Return ONLY a JSON object with the parameters, nothing else."
)

NARRATION_PROMPT = (
    "The user asked: '{message}'\n\n"
    "I used these tools and got these results:\n"
    "{results}\n"
    "Please provide a friendly, natural response that incorporates all the results."
)

FOLLOW_UP_PROMPT = (
    "The {name} tool returned: {result}\n\n"
    "Please provide a natural language response to the user based on this result."
)

SUMMARY_PROMPT = "Summarize the following conversation in 2-3 sentences:\n\n"
AVAILABILITY_PROMPT = "Say 'OK' if you can read this."

PARSE_FAILURE_REPLY = "I had trouble processing that request. Please try again."
BUDGET_EXHAUSTED_REPLY = (
    "I apologize, but I'm having trouble completing this task. "
    "Please try rephrasing your question."
)
ERROR_REPLY = (
    "I apologize, but I encountered an error processing your message. "
    "Please try again or rephrase your question."
)
NO_HISTORY_REPLY = "No conversation history."

_CODE_FENCE = re.compile(r"```json|```")


class ChatService:
    """
    Orchestrates chat turns over session memory, tools and a language model.

    A single instance serves concurrent requests: per-turn state lives on the
    stack and all shared state sits in SessionMemory and the read-only
    ToolRegistry.
    """

    def __init__(
        self,
        llm_service: BaseLLMService,
        registry: ToolRegistry,
        memory: SessionMemory,
        max_iterations: int = 5,
    ):
        """
        Initialize chat service.

        Args:
            llm_service: Completion client
            registry: Initialized tool registry
            memory: Session memory
            max_iterations: Model-loop completions allowed per turn
        """
        if max_iterations < 1:
            raise ValueError("max_iterations must be at least 1")

        self.llm_service = llm_service
        self.registry = registry
        self.memory = memory
        self.max_iterations = max_iterations
        self.logger = get_logger("chat_service")

    def chat(self, session_id: str, user_message: str) -> str:
        """
        Process a user message and return the assistant's reply.

        Never raises: failures end in a fixed apology.
        """
        return self.run_turn(session_id, user_message).response

    def run_turn(self, session_id: str, user_message: str) -> TurnResult:
        """
        Process a user message and return the reply with a trace of the turn.

        Args:
            session_id: Conversation identifier
            user_message: Raw user input

        Returns:
            TurnResult describing the reply, tool calls and iterations
        """
        start_time = time.time()
        turn = TurnResult(response="", session_id=session_id)

        self.logger.info(f"Processing message for session {session_id}: {user_message}")

        try:
            self.memory.append(session_id, Role.USER, user_message)

            matched = self.registry.find_direct_matches(user_message)
            if matched:
                turn.direct_match = True
                reply = self._direct_dispatch(user_message, matched, turn)
            else:
                reply = self._model_loop(session_id, user_message, turn)

            self.memory.append(session_id, Role.ASSISTANT, reply)
            turn.response = reply

        except Exception as e:
            self.logger.error(f"Error processing message for session {session_id}: {e}", exc_info=True)
            turn.response = ERROR_REPLY
            turn.succeeded = False

        turn.total_time_ms = (time.time() - start_time) * 1000
        if turn.has_tool_calls:
            self.logger.info(
                f"Session {session_id} turn used tools {[call.tool_name for call in turn.tool_calls]} "
                f"in {turn.total_time_ms:.1f}ms"
            )
        else:
            self.logger.info(f"Session {session_id} turn answered without tools in {turn.total_time_ms:.1f}ms")
        return turn

    def _complete(self, prompt: str) -> str:
        """Call the model, turning an error-marked completion into an exception."""
        response = self.llm_service.complete(prompt)
        if self.llm_service.is_error(response):
            raise CompletionClientError(response or "Empty completion")
        return response

    def _execute(self, tool_call: ToolCall, turn: TurnResult) -> ToolResult:
        result = self.registry.execute(tool_call)
        turn.tool_calls.append(tool_call)
        turn.tool_results.append(result)
        return result

    def _direct_dispatch(self, user_message: str, tools: List[BaseTool], turn: TurnResult) -> str:
        """
        Run every matched tool, then ask the model to narrate the results.

        Each tool gets one extraction completion for its parameters.
        """
        results = []
        for tool in tools:
            prompt = EXTRACTION_PROMPT.format(
                name=tool.name,
                message=user_message,
                schema=tool.parameters_schema(),
            )
            parameters_raw = _CODE_FENCE.sub("", self._complete(prompt)).strip()
            self.logger.debug(f"Extracted parameters for {tool.name}: {parameters_raw}")

            result = self._execute(ToolCall(tool_name=tool.name, parameters_raw=parameters_raw), turn)
            results.append(f"{tool.name}: {result.to_llm_format()}\n")

        return self._complete(NARRATION_PROMPT.format(message=user_message, results="".join(results)))

    def _model_loop(self, session_id: str, user_message: str, turn: TurnResult) -> str:
        try:
            return self._run_model_loop(session_id, user_message, turn)
        except ProtocolParseError as e:
            self.logger.warning(f"Could not parse tool call: {e}")
            return PARSE_FAILURE_REPLY
        except IterationBudgetExceeded as e:
            self.logger.warning(str(e))
            return BUDGET_EXHAUSTED_REPLY

    def _run_model_loop(self, session_id: str, user_message: str, turn: TurnResult) -> str:
        """
        Let the model answer, dispatching each tool it requests.

        Raises:
            ProtocolParseError: If a tool request cannot be parsed
            IterationBudgetExceeded: If the model is still requesting tools
                after max_iterations completions
        """
        current_input = user_message

        for iteration in range(1, self.max_iterations + 1):
            turn.iterations = iteration
            response = self._complete(self._build_prompt(session_id, current_input))

            if not is_tool_call(response):
                return response

            tool_call = parse_tool_call_strict(response)
            self.logger.info(f"Iteration {iteration}: model requested tool {tool_call.tool_name}")

            result = self._execute(tool_call, turn)
            current_input = FOLLOW_UP_PROMPT.format(
                name=tool_call.tool_name,
                result=result.to_llm_format(),
            )

        raise IterationBudgetExceeded(
            f"Session {session_id} reached {self.max_iterations} iterations without a final answer"
        )

    def _build_prompt(self, session_id: str, current_input: str) -> str:
        """Assemble preamble, tool catalog, prior conversation and the current input."""
        parts = [SYSTEM_PREAMBLE, self.registry.render_catalog(), "\n\n"]

        history = self.memory.formatted_history(session_id)
        if history:
            parts.append("=== Previous Conversation ===\n")
            parts.append(history)
            parts.append("=== End ===\n\n")

        parts.append(f"USER: {current_input}\n\nASSISTANT:")
        return "".join(parts)

    def chat_with_custom_prompt(self, session_id: str, user_message: str, system_prompt: str) -> str:
        """
        Answer under a caller-supplied system prompt, without tools.

        Both turns are recorded in the session.
        """
        try:
            self.memory.append(session_id, Role.USER, user_message)
            reply = self._complete(f"{system_prompt}\n\nUSER: {user_message}\n\nASSISTANT:")
            self.memory.append(session_id, Role.ASSISTANT, reply)
            return reply
        except Exception as e:
            self.logger.error(f"Error in custom prompt chat for session {session_id}: {e}", exc_info=True)
            return ERROR_REPLY

    def quick_response(self, prompt: str) -> str:
        """One-off completion; nothing is recorded."""
        try:
            return self._complete(prompt)
        except Exception as e:
            self.logger.error(f"Error in quick response: {e}", exc_info=True)
            return ERROR_REPLY

    def is_model_available(self) -> bool:
        """Probe the model with a trivial prompt."""
        try:
            response = self.llm_service.complete(AVAILABILITY_PROMPT)
        except Exception as e:
            self.logger.error(f"Model availability check failed: {e}")
            return False
        return bool(response) and not self.llm_service.is_error(response)

    def clear(self, session_id: str) -> None:
        self.memory.clear(session_id)

    def history(self, session_id: str) -> List[Message]:
        return self.memory.history(session_id)

    def formatted_history(self, session_id: str) -> str:
        return self.memory.formatted_history(session_id)

    def summary(self, session_id: str) -> str:
        """
        Summarize a session's conversation in a few sentences.

        Returns:
            The summary, ``No conversation history.`` for an empty session,
            or ``Unable to generate summary: <reason>`` on failure
        """
        history = self.memory.formatted_history(session_id)
        if not history:
            return NO_HISTORY_REPLY

        try:
            return self._complete(SUMMARY_PROMPT + history)
        except Exception as e:
            self.logger.error(f"Error generating summary for session {session_id}: {e}")
            return f"Unable to generate summary: {e}"

    def statistics(self) -> MemoryStatistics:
        return self.memory.statistics()

    def get_status(self) -> dict:
        """Service details for health reporting."""
        return {
            "provider": self.llm_service.provider_name,
            "model": self.llm_service.model_name,
            "tools": self.registry.names(),
            "max_iterations": self.max_iterations,
        }
