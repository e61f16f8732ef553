"""OpenAI LLM Provider implementation.

Uses the official SDK's async client. Also works against any hosted
OpenAI-compatible endpoint through ``base_url``.
"""

from __future__ import annotations

import os
from typing import Any

import openai
from openai import AsyncOpenAI

from advisor.llm.base import BaseLLMProvider, LLMResponse
from advisor.utils.exceptions import ProviderError, ProviderTimeoutError
from advisor.utils.logging import get_provider_logger


class OpenAIProvider(BaseLLMProvider):
    """OpenAI chat completions provider."""

    BASE_URL = "https://api.openai.com/v1"

    def __init__(
        self,
        api_key: str | None = None,
        base_url: str | None = None,
        timeout: float = 30.0,
        **kwargs: Any,
    ) -> None:
        """Initialize the OpenAI provider.

        Args:
            api_key: OpenAI API key. If None, reads from OPENAI_API_KEY env var.
            base_url: Optional custom base URL. Defaults to the OpenAI API.
            timeout: Request timeout in seconds.
            **kwargs: Additional configuration.
        """
        resolved_api_key = api_key or os.getenv("OPENAI_API_KEY", "")
        resolved_base_url = base_url or self.BASE_URL
        super().__init__(
            api_key=resolved_api_key,
            base_url=resolved_base_url,
            timeout=timeout,
            **kwargs,
        )

        self._async_client = AsyncOpenAI(
            api_key=resolved_api_key,
            base_url=resolved_base_url,
            timeout=timeout,
            max_retries=0,
        )
        self._log = get_provider_logger(self.provider_name)

    @property
    def provider_name(self) -> str:
        return "openai"

    @property
    def display_name(self) -> str:
        return "OpenAI"

    @property
    def default_model(self) -> str:
        return self._models[0] if self._models else "gpt-4o-mini"

    async def chat(
        self,
        messages: list[dict[str, str]],
        model: str | None = None,
        max_tokens: int = 1000,
        temperature: float = 0.7,
        system_prompt: str | None = None,
        **kwargs: Any,
    ) -> LLMResponse:
        """Send a chat completion request to OpenAI.

        Args:
            messages: List of message dicts with 'role' and 'content' keys.
            model: Model to use. If None, uses default_model.
            max_tokens: Maximum tokens in the response.
            temperature: Sampling temperature.
            system_prompt: Optional system prompt.
            **kwargs: Additional parameters.

        Returns:
            LLMResponse containing the first choice's content.
        """
        used_model = model or self.default_model
        system, turns = self.split_system(messages, system_prompt)

        full_messages: list[dict[str, str]] = []
        if system:
            full_messages.append({"role": "system", "content": system})
        full_messages.extend(turns)

        try:
            response = await self._async_client.chat.completions.create(
                model=used_model,
                messages=full_messages,  # type: ignore[arg-type]
                max_tokens=max_tokens,
                temperature=temperature,
                stream=False,
                **kwargs,
            )
        except openai.APITimeoutError as e:
            raise ProviderTimeoutError(
                self._timeout, provider=self.provider_name, model=used_model, cause=e
            ) from e
        except openai.APIStatusError as e:
            self._log.warning(
                "OpenAI returned error status",
                status_code=e.status_code,
                model=used_model,
            )
            raise ProviderError(
                f"OpenAI error: {e.status_code} {e.message}",
                provider=self.provider_name,
                status_code=e.status_code,
                model=used_model,
                cause=e,
            ) from e
        except openai.APIError as e:
            raise ProviderError(
                f"OpenAI request failed: {e}",
                provider=self.provider_name,
                model=used_model,
                cause=e,
            ) from e

        if not response.choices:
            raise ProviderError(
                "OpenAI returned no choices",
                provider=self.provider_name,
                model=used_model,
            )

        usage = {}
        if response.usage:
            usage = {
                "input_tokens": response.usage.prompt_tokens,
                "output_tokens": response.usage.completion_tokens,
            }

        return LLMResponse(
            text=response.choices[0].message.content or "",
            raw=response,
            model=response.model,
            usage=usage,
            finish_reason=response.choices[0].finish_reason,
        )

    async def health_check(self) -> bool:
        """Check the API by listing models."""
        try:
            await self._async_client.models.list()
        except openai.APIError as e:
            self._log.debug("Health probe failed", error=str(e))
            return False
        return True

    async def aclose(self) -> None:
        await self._async_client.close()
