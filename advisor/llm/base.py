"""Base LLM Provider - Abstract interface for LLM providers.

This module defines the abstract base class that all LLM providers must implement.
Every provider normalizes its backend's reply into LLMResponse and every
failure into ProviderError.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any


@dataclass
class LLMResponse:
    """Normalized response from an LLM provider."""

    text: str
    raw: Any = None
    model: str = ""
    usage: dict[str, int] = field(default_factory=dict)
    finish_reason: str | None = None


class BaseLLMProvider(ABC):
    """Abstract base class for LLM providers.

    All providers (Ollama, vLLM, Anthropic, OpenAI) implement this interface
    so the provider registry can use them interchangeably.
    """

    def __init__(
        self,
        api_key: str | None = None,
        base_url: str | None = None,
        timeout: float = 30.0,
        models: list[str] | None = None,
        **kwargs: Any,
    ) -> None:
        """Initialize the LLM provider.

        Args:
            api_key: Optional API key for authentication.
            base_url: Backend base URL. Providers fall back to their default.
            timeout: Request timeout in seconds.
            models: Models this backend serves, preferred first.
            **kwargs: Additional provider-specific configuration.
        """
        self._api_key = api_key or ""
        self._base_url = base_url
        self._timeout = timeout
        self._models = list(models) if models else []
        self._config = kwargs

    @property
    @abstractmethod
    def provider_name(self) -> str:
        """Return the provider id (e.g., 'ollama', 'vllm')."""
        pass

    @property
    def display_name(self) -> str:
        """Return a human-readable provider name."""
        return self.provider_name

    @property
    @abstractmethod
    def default_model(self) -> str:
        """Return the default model for this provider."""
        pass

    @property
    def base_url(self) -> str:
        """Return the backend base URL."""
        return self._base_url or ""

    @property
    def timeout(self) -> float:
        """Return the request timeout in seconds."""
        return self._timeout

    @abstractmethod
    async def chat(
        self,
        messages: list[dict[str, str]],
        model: str | None = None,
        max_tokens: int = 1000,
        temperature: float = 0.7,
        system_prompt: str | None = None,
        **kwargs: Any,
    ) -> LLMResponse:
        """Send a chat completion request.

        Args:
            messages: List of message dicts with 'role' and 'content' keys.
            model: Model to use. If None, uses default_model.
            max_tokens: Maximum tokens in the response.
            temperature: Sampling temperature (0.0 to 2.0).
            system_prompt: Optional system prompt.
            **kwargs: Additional provider-specific parameters.

        Returns:
            LLMResponse containing the model's response.

        Raises:
            ProviderError: On network failure, timeout, non-2xx status or
                a reply that cannot be parsed.
        """
        pass

    @abstractmethod
    async def health_check(self) -> bool:
        """Probe the backend cheaply.

        Returns:
            True when the backend answered the probe successfully.
        """
        pass

    def get_available_models(self) -> list[str]:
        """Return the models this provider serves, preferred first."""
        return list(self._models) if self._models else [self.default_model]

    async def aclose(self) -> None:
        """Release network resources held by the provider."""
        return None

    @staticmethod
    def split_system(
        messages: list[dict[str, str]], system_prompt: str | None = None
    ) -> tuple[str | None, list[dict[str, str]]]:
        """Separate system content from conversational turns.

        Args:
            messages: Messages possibly containing 'system' entries.
            system_prompt: Explicit system prompt, placed first.

        Returns:
            Tuple of (merged system prompt or None, remaining messages).
        """
        system_parts = [system_prompt] if system_prompt else []
        turns: list[dict[str, str]] = []
        for message in messages:
            if message.get("role") == "system":
                if message.get("content"):
                    system_parts.append(message["content"])
            else:
                turns.append(message)
        system = "\n\n".join(system_parts) if system_parts else None
        return system, turns
