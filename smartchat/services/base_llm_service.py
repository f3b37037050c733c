"""
Base LLM service interface for multiple providers.

Defines the single-shot completion contract the orchestrator relies on,
enabling easy switching between providers (Gemini, Ollama, etc.).
"""

from abc import ABC, abstractmethod
from typing import Optional


class CompletionFailure(str):
    """
    Completion text produced by an adapter when the backend failed.

    Reads as ``Error: <reason>`` but is recognised by type, so model output
    that merely starts with ``Error:`` is still a normal completion.
    """


class BaseLLMService(ABC):
    """
    Abstract base class for LLM services.

    ``complete`` never raises: a backend failure is reported as a
    ``CompletionFailure`` built with ``error_text`` so callers can detect it
    with ``is_error``.
    """

    ERROR_PREFIX = "Error:"

    @abstractmethod
    def complete(self, prompt: str) -> str:
        """
        Send one prompt to the model and return its text.

        Args:
            prompt: Full prompt text

        Returns:
            Completion text, or a ``CompletionFailure`` on failure
        """
        pass

    @classmethod
    def is_error(cls, text: Optional[str]) -> bool:
        """Check whether a completion reports a backend failure."""
        return text is None or isinstance(text, CompletionFailure)

    @classmethod
    def error_text(cls, reason: object) -> CompletionFailure:
        return CompletionFailure(f"{cls.ERROR_PREFIX} {reason}")

    @property
    @abstractmethod
    def provider_name(self) -> str:
        """Get the name of the LLM provider."""
        pass

    @property
    @abstractmethod
    def model_name(self) -> str:
        """Get the name of the model being used."""
        pass

    def __repr__(self) -> str:
        return f"<{type(self).__name__}: {self.provider_name}/{self.model_name}>"
