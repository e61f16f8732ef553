"""Ollama provider (generate-style API).

Talks to a local Ollama server through ``POST /api/generate``, which takes a
single prompt plus an optional system string rather than a message list.
"""

from __future__ import annotations

from typing import Any

from advisor.llm.base import LLMResponse
from advisor.llm.http import HTTPLLMProvider


class OllamaProvider(HTTPLLMProvider):
    """Generate-style local inference server."""

    DEFAULT_BASE_URL = "http://localhost:11434"

    @property
    def provider_name(self) -> str:
        return "ollama"

    @property
    def display_name(self) -> str:
        return "Ollama (Local)"

    @property
    def default_model(self) -> str:
        return self._models[0] if self._models else "qwen2.5:latest"

    @staticmethod
    def build_prompt(turns: list[dict[str, str]]) -> str:
        """Flatten conversational turns into one prompt string.

        A lone user turn is sent verbatim; longer exchanges are rendered as
        a transcript ending with an open assistant line.
        """
        if len(turns) == 1 and turns[0].get("role") == "user":
            return turns[0].get("content", "")

        lines = []
        for turn in turns:
            speaker = "Assistant" if turn.get("role") == "assistant" else "User"
            lines.append(f"{speaker}: {turn.get('content', '')}")
        lines.append("Assistant:")
        return "\n".join(lines)

    async def chat(
        self,
        messages: list[dict[str, str]],
        model: str | None = None,
        max_tokens: int = 1000,
        temperature: float = 0.7,
        system_prompt: str | None = None,
        **kwargs: Any,
    ) -> LLMResponse:
        """Generate a completion with Ollama.

        Args:
            messages: List of message dicts with 'role' and 'content' keys.
            model: Model to use. If None, uses default_model.
            max_tokens: Maximum tokens to predict (``num_predict``).
            temperature: Sampling temperature.
            system_prompt: Optional system prompt.
            **kwargs: Extra Ollama ``options`` (e.g. top_p).

        Returns:
            LLMResponse with the generated text.
        """
        used_model = model or self.default_model
        system, turns = self.split_system(messages, system_prompt)

        payload: dict[str, Any] = {
            "model": used_model,
            "prompt": self.build_prompt(turns),
            "stream": False,
            "options": {
                "temperature": temperature,
                "num_predict": max_tokens,
                **kwargs,
            },
        }
        if system:
            payload["system"] = system

        data = await self._post_json("/api/generate", payload, model=used_model)

        if not isinstance(data, dict):
            raise self._malformed("reply is not an object", used_model, data)
        text = data.get("response")
        if not isinstance(text, str):
            raise self._malformed("missing 'response' field", used_model, data)

        usage: dict[str, int] = {}
        if isinstance(data.get("prompt_eval_count"), int):
            usage["input_tokens"] = data["prompt_eval_count"]
        if isinstance(data.get("eval_count"), int):
            usage["output_tokens"] = data["eval_count"]

        finish_reason = data.get("done_reason")
        if finish_reason is None and data.get("done"):
            finish_reason = "stop"

        return LLMResponse(
            text=text,
            raw=data,
            model=data.get("model") or used_model,
            usage=usage,
            finish_reason=finish_reason,
        )

    async def health_check(self) -> bool:
        """Probe ``GET /api/tags``."""
        return await self._probe("/api/tags")
