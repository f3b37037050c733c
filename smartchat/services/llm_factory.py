"""
Factory for creating LLM service instances.

Provides factory functions to instantiate the appropriate LLM service
based on arguments or configuration, supporting multiple providers.
"""

from typing import Optional

from ..utils import get_logger
from .base_llm_service import BaseLLMService

logger = get_logger("llm_factory")


class LLMProvider:
    """Enum for supported LLM providers."""
    GEMINI = "gemini"
    OLLAMA = "ollama"


def create_llm_service(
    provider: str = LLMProvider.GEMINI,
    model_name: Optional[str] = None,
    api_key: Optional[str] = None,
    **kwargs
) -> BaseLLMService:
    """
    Factory function to create an LLM service instance.

    Args:
        provider: LLM provider to use ("gemini" or "ollama")
        model_name: Model name (provider-specific)
        api_key: API key for cloud providers (Gemini)
        **kwargs: Additional provider-specific arguments
            (temperature, base_url, api_key_env)

    Returns:
        BaseLLMService instance

    Raises:
        ValueError: If provider is not supported

    Examples:
        service = create_llm_service(provider="ollama", model_name="llama3.2")

        service = create_llm_service(
            provider="gemini",
            model_name="gemini-2.5-flash",
            api_key="your-api-key",
        )
    """
    provider = (provider or "").lower()

    logger.info(f"Creating LLM service with provider: {provider}")

    if provider == LLMProvider.GEMINI:
        from .gemini_llm_service import GeminiLLMService

        if model_name is None:
            model_name = "gemini-2.5-flash"

        logger.info(f"Initializing Gemini service with model: {model_name}")
        return GeminiLLMService(
            model_name=model_name,
            api_key=api_key,
            temperature=kwargs.get("temperature", 0.7),
            api_key_env=kwargs.get("api_key_env", "GOOGLE_API_KEY"),
        )

    elif provider == LLMProvider.OLLAMA:
        from .ollama_llm_service import OllamaLLMService

        if model_name is None:
            model_name = "llama3.2"

        logger.info(f"Initializing Ollama service with model: {model_name}")
        return OllamaLLMService(
            model_name=model_name,
            base_url=kwargs.get("base_url", "http://localhost:11434"),
            temperature=kwargs.get("temperature"),
        )

    else:
        raise ValueError(
            f"Unsupported LLM provider: {provider}. "
            f"Supported providers: {LLMProvider.GEMINI}, {LLMProvider.OLLAMA}"
        )


def create_llm_service_from_config(config) -> BaseLLMService:
    """
    Create the LLM service named by ``llm.provider`` in a ConfigManager.

    Args:
        config: ConfigManager instance

    Returns:
        BaseLLMService instance
    """
    provider = config.get("llm.provider", LLMProvider.GEMINI)

    if provider == LLMProvider.GEMINI:
        api_key_env = config.get("llm.gemini.api_key_env", "GOOGLE_API_KEY")
        return create_llm_service(
            provider=provider,
            model_name=config.get("llm.gemini.model"),
            api_key=config.get_api_key("gemini_api_key", api_key_env),
            temperature=config.get("llm.gemini.temperature", 0.7),
            api_key_env=api_key_env,
        )

    if provider == LLMProvider.OLLAMA:
        return create_llm_service(
            provider=provider,
            model_name=config.get("llm.ollama.model"),
            base_url=config.get("llm.ollama.base_url", "http://localhost:11434"),
        )

    return create_llm_service(provider=provider)
