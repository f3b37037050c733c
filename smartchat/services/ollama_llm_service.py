"""
LLM Service using a local Ollama server.
"""

from typing import Any, Optional

import ollama

from ..utils import get_logger
from .base_llm_service import BaseLLMService


class OllamaLLMService(BaseLLMService):
    """Service for LLM inference using Ollama."""

    def __init__(
        self,
        model_name: str = "llama3.2",
        base_url: str = "http://localhost:11434",
        temperature: Optional[float] = None,
        client: Optional[Any] = None,
    ):
        """
        Initialize Ollama service.

        Args:
            model_name: Name of the Ollama model to use
            base_url: Ollama server address
            temperature: Optional sampling temperature
            client: Pre-built ollama client
        """
        self.logger = get_logger("ollama_llm_service")
        self._model_name = model_name
        self._temperature = temperature
        self.client = client or ollama.Client(host=base_url)
        self.logger.info(f"Ollama service configured for {model_name} at {base_url}")

    def complete(self, prompt: str) -> str:
        options = {}
        if self._temperature is not None:
            options["temperature"] = self._temperature

        try:
            self.logger.debug(f"Sending prompt to {self._model_name} ({len(prompt)} chars)")
            response = self.client.chat(
                model=self._model_name,
                messages=[{"role": "user", "content": prompt}],
                options=options or None,
            )
            return response["message"]["content"]
        except Exception as e:
            self.logger.error(f"Ollama completion failed: {e}", exc_info=True)
            return self.error_text(e)

    @property
    def provider_name(self) -> str:
        return "ollama"

    @property
    def model_name(self) -> str:
        return self._model_name
