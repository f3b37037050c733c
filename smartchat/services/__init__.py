"""
Services package for SmartChat.

Provides the chat orchestrator, session memory, the background session
sweeper, and language model services.
"""

from .base_llm_service import BaseLLMService, CompletionFailure
from .chat_service import ChatService
from .llm_factory import LLMProvider, create_llm_service, create_llm_service_from_config
from .memory_service import SessionMemory
from .session_sweeper import SessionSweeper

__all__ = [
    "BaseLLMService",
    "CompletionFailure",
    "ChatService",
    "LLMProvider",
    "create_llm_service",
    "create_llm_service_from_config",
    "SessionMemory",
    "SessionSweeper",
]
