"""vLLM provider (OpenAI-compatible chat completions).

Talks to a vLLM server through ``POST /v1/chat/completions``.
"""

from __future__ import annotations

from typing import Any

from advisor.llm.base import LLMResponse
from advisor.llm.http import HTTPLLMProvider


class VLLMProvider(HTTPLLMProvider):
    """OpenAI-compatible local inference server."""

    DEFAULT_BASE_URL = "http://localhost:8000"

    def __init__(self, base_url: str | None = None, **kwargs: Any) -> None:
        # Accept base URLs given with or without the /v1 suffix
        if base_url and base_url.rstrip("/").endswith("/v1"):
            base_url = base_url.rstrip("/")[: -len("/v1")]
        super().__init__(base_url=base_url, **kwargs)

    @property
    def provider_name(self) -> str:
        return "vllm"

    @property
    def display_name(self) -> str:
        return "vLLM (Open Source)"

    @property
    def default_model(self) -> str:
        return self._models[0] if self._models else "llama-3-8b-instruct"

    async def chat(
        self,
        messages: list[dict[str, str]],
        model: str | None = None,
        max_tokens: int = 1000,
        temperature: float = 0.7,
        system_prompt: str | None = None,
        **kwargs: Any,
    ) -> LLMResponse:
        """Send a chat completion request to vLLM.

        Args:
            messages: List of message dicts with 'role' and 'content' keys.
            model: Model to use. If None, uses default_model.
            max_tokens: Maximum tokens in the response.
            temperature: Sampling temperature.
            system_prompt: Optional system prompt.
            **kwargs: Additional request fields (e.g. top_p).

        Returns:
            LLMResponse with the first choice's content.
        """
        used_model = model or self.default_model
        system, turns = self.split_system(messages, system_prompt)

        full_messages: list[dict[str, str]] = []
        if system:
            full_messages.append({"role": "system", "content": system})
        full_messages.extend(turns)

        payload: dict[str, Any] = {
            "model": used_model,
            "messages": full_messages,
            "temperature": temperature,
            "max_tokens": max_tokens,
            "stream": False,
            **kwargs,
        }

        data = await self._post_json("/v1/chat/completions", payload, model=used_model)

        if not isinstance(data, dict):
            raise self._malformed("reply is not an object", used_model, data)
        choices = data.get("choices")
        if not isinstance(choices, list) or not choices:
            raise self._malformed("missing 'choices'", used_model, data)
        first = choices[0] if isinstance(choices[0], dict) else {}
        message = first.get("message") if isinstance(first.get("message"), dict) else {}
        text = message.get("content")
        if not isinstance(text, str):
            raise self._malformed("missing message content", used_model, data)

        usage: dict[str, int] = {}
        raw_usage = data.get("usage")
        if isinstance(raw_usage, dict):
            if isinstance(raw_usage.get("prompt_tokens"), int):
                usage["input_tokens"] = raw_usage["prompt_tokens"]
            if isinstance(raw_usage.get("completion_tokens"), int):
                usage["output_tokens"] = raw_usage["completion_tokens"]

        return LLMResponse(
            text=text.strip(),
            raw=data,
            model=data.get("model") or used_model,
            usage=usage,
            finish_reason=first.get("finish_reason"),
        )

    async def health_check(self) -> bool:
        """Probe ``GET /v1/models``."""
        return await self._probe("/v1/models")
