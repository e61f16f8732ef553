"""LLM Provider abstraction layer.

This module provides a unified interface over local inference servers
(Ollama, vLLM) and hosted APIs (Anthropic, OpenAI).
"""

from advisor.llm.base import BaseLLMProvider, LLMResponse
from advisor.llm.http import HTTPLLMProvider
from advisor.llm.ollama import OllamaProvider
from advisor.llm.vllm import VLLMProvider
from advisor.llm.anthropic import AnthropicProvider
from advisor.llm.openai import OpenAIProvider
from advisor.llm.registry import (
    CompletionResult,
    ProviderDescriptor,
    ProviderRegistry,
    ProviderStatus,
)
from advisor.llm.factory import LLMProviderFactory, build_provider_registry

__all__ = [
    "BaseLLMProvider",
    "LLMResponse",
    "HTTPLLMProvider",
    "OllamaProvider",
    "VLLMProvider",
    "AnthropicProvider",
    "OpenAIProvider",
    "CompletionResult",
    "ProviderDescriptor",
    "ProviderRegistry",
    "ProviderStatus",
    "LLMProviderFactory",
    "build_provider_registry",
]
