"""LLM Provider Factory.

This module provides factory functions for creating provider instances and
assembling the provider registry from configuration.
"""

from __future__ import annotations

from typing import Any

from advisor.llm.anthropic import AnthropicProvider
from advisor.llm.base import BaseLLMProvider
from advisor.llm.ollama import OllamaProvider
from advisor.llm.openai import OpenAIProvider
from advisor.llm.registry import ProviderRegistry
from advisor.llm.vllm import VLLMProvider
from advisor.utils.config import LLMConfig
from advisor.utils.exceptions import InvalidConfigurationError
from advisor.utils.logging import get_logger

logger = get_logger(__name__)


class LLMProviderFactory:
    """Factory for creating LLM provider instances by name."""

    _providers: dict[str, type[BaseLLMProvider]] = {
        "ollama": OllamaProvider,
        "vllm": VLLMProvider,
        "anthropic": AnthropicProvider,
        "openai": OpenAIProvider,
    }

    @classmethod
    def register_provider(
        cls,
        name: str,
        provider_class: type[BaseLLMProvider],
    ) -> None:
        """Register a new provider class.

        Args:
            name: Provider name (e.g., 'llamacpp').
            provider_class: Provider class implementing BaseLLMProvider.
        """
        cls._providers[name] = provider_class

    @classmethod
    def create(cls, provider: str, **kwargs: Any) -> BaseLLMProvider:
        """Create a provider instance.

        Args:
            provider: Provider name.
            **kwargs: Constructor arguments (base_url, timeout, models, ...).

        Returns:
            BaseLLMProvider instance.

        Raises:
            InvalidConfigurationError: If the provider name is unknown.
        """
        if provider not in cls._providers:
            available = ", ".join(cls._providers.keys())
            raise InvalidConfigurationError(
                "llm.provider",
                provider,
                f"Unknown provider: {provider}. Available: {available}",
            )
        return cls._providers[provider](**kwargs)

    @classmethod
    def list_providers(cls) -> list[str]:
        """List all registered provider names."""
        return list(cls._providers.keys())


def build_provider_registry(config: LLMConfig) -> ProviderRegistry:
    """Create and populate a ProviderRegistry from configuration.

    Local backends are registered when enabled; hosted backends only when
    an API key is configured.

    Args:
        config: The process-wide LLM configuration.

    Returns:
        A registry with every configured provider registered.
    """
    registry = ProviderRegistry()

    if config.ollama.enabled:
        registry.register(
            LLMProviderFactory.create(
                "ollama",
                base_url=config.ollama.base_url,
                timeout=config.timeout,
                models=config.ollama.models,
            )
        )

    if config.vllm.enabled:
        registry.register(
            LLMProviderFactory.create(
                "vllm",
                base_url=config.vllm.base_url,
                timeout=config.timeout,
                models=config.vllm.models,
                api_key=config.vllm.api_key or None,
            )
        )

    if config.anthropic.api_key:
        registry.register(
            LLMProviderFactory.create(
                "anthropic",
                api_key=config.anthropic.api_key,
                timeout=config.timeout,
                models=config.anthropic.models,
            )
        )

    if config.openai.api_key:
        registry.register(
            LLMProviderFactory.create(
                "openai",
                api_key=config.openai.api_key,
                base_url=config.openai.base_url,
                timeout=config.timeout,
                models=config.openai.models,
            )
        )

    logger.info("Provider registry built", providers=len(registry))
    return registry
