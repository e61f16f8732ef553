"""Anthropic LLM Provider implementation.

This module provides the Anthropic Claude API integration. SDK errors are
mapped onto ProviderError so hosted and local backends fail the same way.
"""

from __future__ import annotations

import os
from typing import Any

import anthropic

from advisor.llm.base import BaseLLMProvider, LLMResponse
from advisor.utils.exceptions import ProviderError, ProviderTimeoutError
from advisor.utils.logging import get_provider_logger


class AnthropicProvider(BaseLLMProvider):
    """Anthropic Claude API provider."""

    AVAILABLE_MODELS = [
        "claude-haiku-4-5-20251001",
        "claude-sonnet-4-20250514",
        "claude-opus-4-20250514",
    ]

    def __init__(
        self,
        api_key: str | None = None,
        base_url: str | None = None,
        timeout: float = 30.0,
        **kwargs: Any,
    ) -> None:
        """Initialize the Anthropic provider.

        Args:
            api_key: Anthropic API key. If None, reads from ANTHROPIC_API_KEY env var.
            base_url: Optional custom base URL for the API.
            timeout: Request timeout in seconds.
            **kwargs: Additional configuration.
        """
        resolved_api_key = api_key or os.getenv("ANTHROPIC_API_KEY", "")
        super().__init__(
            api_key=resolved_api_key, base_url=base_url, timeout=timeout, **kwargs
        )

        self._async_client = anthropic.AsyncAnthropic(
            api_key=resolved_api_key,
            base_url=base_url,
            timeout=timeout,
            max_retries=0,
        )
        self._log = get_provider_logger(self.provider_name)

    @property
    def provider_name(self) -> str:
        return "anthropic"

    @property
    def display_name(self) -> str:
        return "Anthropic"

    @property
    def default_model(self) -> str:
        return self._models[0] if self._models else "claude-haiku-4-5-20251001"

    @property
    def base_url(self) -> str:
        return self._base_url or "https://api.anthropic.com"

    def get_available_models(self) -> list[str]:
        return list(self._models) if self._models else self.AVAILABLE_MODELS.copy()

    @staticmethod
    def drop_leading_assistant_turns(
        turns: list[dict[str, str]],
    ) -> list[dict[str, str]]:
        """Trim turns until the first user message; the Messages API requires one first."""
        for index, turn in enumerate(turns):
            if turn.get("role") == "user":
                return turns[index:]
        return []

    async def chat(
        self,
        messages: list[dict[str, str]],
        model: str | None = None,
        max_tokens: int = 1000,
        temperature: float = 0.7,
        system_prompt: str | None = None,
        **kwargs: Any,
    ) -> LLMResponse:
        """Send a chat completion request to Anthropic.

        Args:
            messages: List of message dicts with 'role' and 'content' keys.
            model: Model to use. If None, uses default_model.
            max_tokens: Maximum tokens in the response.
            temperature: Sampling temperature.
            system_prompt: Optional system prompt.
            **kwargs: Additional Anthropic-specific parameters.

        Returns:
            LLMResponse containing Claude's response.
        """
        used_model = model or self.default_model
        system, turns = self.split_system(messages, system_prompt)
        turns = self.drop_leading_assistant_turns(turns)

        request_params: dict[str, Any] = {
            "model": used_model,
            "max_tokens": max_tokens,
            "temperature": temperature,
            "messages": turns,
        }
        if system:
            request_params["system"] = system
        request_params.update(kwargs)

        try:
            response = await self._async_client.messages.create(**request_params)
        except anthropic.APITimeoutError as e:
            raise ProviderTimeoutError(
                self._timeout, provider=self.provider_name, model=used_model, cause=e
            ) from e
        except anthropic.APIStatusError as e:
            self._log.warning(
                "Anthropic returned error status",
                status_code=e.status_code,
                model=used_model,
            )
            raise ProviderError(
                f"Anthropic error: {e.status_code} {e.message}",
                provider=self.provider_name,
                status_code=e.status_code,
                model=used_model,
                cause=e,
            ) from e
        except anthropic.APIError as e:
            raise ProviderError(
                f"Anthropic request failed: {e}",
                provider=self.provider_name,
                model=used_model,
                cause=e,
            ) from e

        text = ""
        if response.content and len(response.content) > 0:
            first_block = response.content[0]
            if hasattr(first_block, "text"):
                text = first_block.text

        # Anthropic reports truncation as max_tokens; normalize to "length"
        finish_reason = response.stop_reason
        if finish_reason == "max_tokens":
            finish_reason = "length"

        return LLMResponse(
            text=text,
            raw=response,
            model=response.model,
            usage={
                "input_tokens": response.usage.input_tokens,
                "output_tokens": response.usage.output_tokens,
            },
            finish_reason=finish_reason,
        )

    async def health_check(self) -> bool:
        """Check the API by listing models (no tokens are spent)."""
        try:
            await self._async_client.models.list(limit=1)
        except anthropic.APIError as e:
            self._log.debug("Health probe failed", error=str(e))
            return False
        return True

    async def aclose(self) -> None:
        await self._async_client.close()
