"""
LLM client configuration using DSPy.

Supports Gemini (primary), OpenAI, and Anthropic. Keys and models come from
`Settings`, so they can live in `.env`.
"""

from __future__ import annotations

import dspy

from json_autotranslate.config import Settings, get_settings
from json_autotranslate.core.errors import ConfigurationError


def get_lm(
    provider: str | None = None,
    model: str | None = None,
    settings: Settings | None = None,
) -> dspy.LM:
    """
    Get configured language model.

    Args:
        provider: 'gemini', 'openai', or 'anthropic'. Defaults to LLM_PROVIDER.
        model: Model name. Defaults to the provider's model setting.

    Returns:
        Configured DSPy LM instance.
    """
    settings = settings or get_settings()
    provider = provider or settings.llm_provider

    if provider == "gemini":
        api_key = settings.google_api_key or settings.gemini_api_key
        model = model or settings.gemini_model
        # litellm routes on the "gemini/" prefix
        prefix = "gemini"
    elif provider == "openai":
        api_key = settings.openai_api_key
        model = model or settings.openai_model
        prefix = "openai"
    elif provider == "anthropic":
        api_key = settings.anthropic_api_key
        model = model or settings.anthropic_model
        prefix = "anthropic"
    else:
        raise ConfigurationError(f"Unknown LLM provider: {provider}")

    if not api_key:
        raise ConfigurationError(f"No API key configured for LLM provider {provider}")

    return dspy.LM(model=f"{prefix}/{model}", api_key=api_key)
