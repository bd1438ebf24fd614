"""Factory for creating LLM provider instances."""

from typing import Optional
from config import Config
from llm.providers.base import LLMProvider
from llm.providers.openai import OpenAIProvider
from logger import get_logger

logger = get_logger()


def get_llm_provider(config: Config) -> Optional[LLMProvider]:
    """Create an LLM provider instance based on configuration.

    Args:
        config: Application configuration.

    Returns:
        LLMProvider instance, or None if LLM classification is disabled.

    Raises:
        ValueError: If provider is configured but settings are invalid.
    """
    if not config.llm_enabled:
        logger.info("LLM classification is disabled")
        return None

    provider_name = config.llm_provider or None

    if provider_name == "openai":
        if not config.llm_openai_api_key:
            raise ValueError(
                "OpenAI provider selected but llm openai_api_key not configured"
            )

        model = config.llm_openai_model or None
        logger.info(f"Initializing OpenAI provider (model: {model or 'default'})")

        return OpenAIProvider(
            api_key=config.llm_openai_api_key,
            model=model,
            timeout=config.llm_timeout_seconds,
        )

    elif provider_name is None:
        logger.info("No LLM provider configured")
        return None

    else:
        raise ValueError(f"Unknown LLM provider: {provider_name}")
