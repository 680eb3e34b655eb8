"""Select the AI provider adapter for a configuration."""

from __future__ import annotations

from errors import ConfigInvalid
from gemini_adapter import GeminiAdapter
from interfaces import AIProviderAdapter
from models import AppConfig, Provider
from openai_adapter import OpenAIAdapter


def create_adapter(config: AppConfig) -> AIProviderAdapter:
    if not config.api_key.strip():
        raise ConfigInvalid(f"API key for provider '{config.provider}' is missing")
    if config.provider == Provider.OPENAI.value:
        return OpenAIAdapter(api_key=config.openai_api_key, model=config.model)
    return GeminiAdapter(api_key=config.gemini_api_key, model=config.model)
