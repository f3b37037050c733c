"""
LLM Service using Google Gemini via LangChain.
"""

import os
from typing import Any, Optional

from langchain_core.messages import HumanMessage
from langchain_google_genai import ChatGoogleGenerativeAI

from ..utils import get_logger
from .base_llm_service import BaseLLMService


class GeminiLLMService(BaseLLMService):
    """Service for LLM inference using Google Gemini via LangChain."""

    def __init__(
        self,
        model_name: str = "gemini-2.5-flash",
        api_key: Optional[str] = None,
        temperature: float = 0.7,
        api_key_env: str = "GOOGLE_API_KEY",
        llm: Optional[Any] = None,
    ):
        """
        Initialize Gemini LLM service.

        Args:
            model_name: Name of the Gemini model to use
            api_key: Google API key (if None, uses the ``api_key_env`` variable)
            temperature: Sampling temperature (0.0 to 1.0)
            api_key_env: Environment variable holding the key
            llm: Pre-built chat model (skips client construction)
        """
        self.logger = get_logger("gemini_llm_service")
        self._model_name = model_name
        self._api_key = api_key or os.getenv(api_key_env)
        self._temperature = temperature

        if llm is not None:
            self.llm = llm
        else:
            self._check_availability(api_key_env)
            self._initialize_model()

    def _check_availability(self, api_key_env: str) -> None:
        """Check that an API key is configured."""
        if not self._api_key:
            self.logger.error("Google API key not provided")
            raise ValueError(
                f"Google API key required. Set {api_key_env} environment "
                "variable or pass api_key parameter"
            )
        self.logger.info("Gemini API credentials configured")

    def _initialize_model(self) -> None:
        """Initialize the Gemini model."""
        try:
            self.llm = ChatGoogleGenerativeAI(
                model=self._model_name,
                google_api_key=self._api_key,
                temperature=self._temperature,
            )
            self.logger.info(f"Gemini model {self._model_name} initialized")
        except Exception as e:
            self.logger.error(f"Failed to initialize Gemini model: {e}")
            raise

    def complete(self, prompt: str) -> str:
        try:
            self.logger.debug(f"Sending prompt to {self._model_name} ({len(prompt)} chars)")
            response = self.llm.invoke([HumanMessage(content=prompt)])
            return self._extract_text(response.content)
        except Exception as e:
            self.logger.error(f"Gemini completion failed: {e}", exc_info=True)
            return self.error_text(e)

    @staticmethod
    def _extract_text(content: Any) -> str:
        # Newer models return a list of content parts
        if isinstance(content, list):
            parts = []
            for part in content:
                if isinstance(part, str):
                    parts.append(part)
                elif isinstance(part, dict) and part.get("type") == "text":
                    parts.append(part.get("text", ""))
            return "".join(parts)
        return str(content)

    @property
    def provider_name(self) -> str:
        return "gemini"

    @property
    def model_name(self) -> str:
        return self._model_name
