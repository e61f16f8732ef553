"""Tests for LLM provider abstraction layer."""

import json
from unittest.mock import AsyncMock, MagicMock, patch

import httpx
import pytest

from advisor.llm.anthropic import AnthropicProvider
from advisor.llm.base import BaseLLMProvider, LLMResponse
from advisor.llm.factory import LLMProviderFactory, build_provider_registry
from advisor.llm.ollama import OllamaProvider
from advisor.llm.openai import OpenAIProvider
from advisor.llm.vllm import VLLMProvider
from advisor.utils.config import AnthropicConfig, LLMConfig, OllamaConfig, VLLMConfig
from advisor.utils.exceptions import InvalidConfigurationError, ProviderError, ProviderTimeoutError


def json_transport(body, status_code: int = 200, seen: list | None = None) -> httpx.MockTransport:
    """Transport answering every request with the given JSON body."""

    def handler(request: httpx.Request) -> httpx.Response:
        if seen is not None:
            seen.append(request)
        return httpx.Response(status_code, json=body)

    return httpx.MockTransport(handler)


def raising_transport(error: Exception) -> httpx.MockTransport:
    def handler(request: httpx.Request) -> httpx.Response:
        raise error

    return httpx.MockTransport(handler)


class TestLLMResponse:
    """Tests for LLMResponse dataclass."""

    def test_create_response(self):
        response = LLMResponse(
            text="Hello, world!",
            model="test-model",
            usage={"input_tokens": 10, "output_tokens": 5},
            finish_reason="stop",
        )
        assert response.text == "Hello, world!"
        assert response.model == "test-model"
        assert response.usage["input_tokens"] == 10
        assert response.finish_reason == "stop"

    def test_response_with_defaults(self):
        response = LLMResponse(text="test")
        assert response.usage == {}
        assert response.finish_reason is None
        assert response.raw is None


class TestSplitSystem:
    """Tests for system prompt extraction."""

    def test_explicit_prompt_comes_first(self):
        system, turns = BaseLLMProvider.split_system(
            [
                {"role": "system", "content": "Be brief."},
                {"role": "user", "content": "Hi"},
            ],
            system_prompt="You are an advisor.",
        )
        assert system == "You are an advisor.\n\nBe brief."
        assert turns == [{"role": "user", "content": "Hi"}]

    def test_no_system_content(self):
        system, turns = BaseLLMProvider.split_system([{"role": "user", "content": "Hi"}])
        assert system is None
        assert len(turns) == 1


class TestOllamaProvider:
    """Tests for the generate-style provider."""

    @pytest.mark.asyncio
    async def test_chat_success(self):
        seen: list[httpx.Request] = []
        provider = OllamaProvider(
            transport=json_transport(
                {
                    "model": "qwen2.5:latest",
                    "response": "Hello, world!",
                    "done": True,
                    "prompt_eval_count": 12,
                    "eval_count": 4,
                },
                seen=seen,
            )
        )

        response = await provider.chat(
            messages=[{"role": "user", "content": "Say hello"}],
            system_prompt="You are terse.",
            max_tokens=50,
        )

        assert response.text == "Hello, world!"
        assert response.finish_reason == "stop"
        assert response.usage == {"input_tokens": 12, "output_tokens": 4}

        request = seen[0]
        assert request.url.path == "/api/generate"
        payload = json.loads(request.content)
        assert payload["prompt"] == "Say hello"
        assert payload["system"] == "You are terse."
        assert payload["stream"] is False
        assert payload["options"]["num_predict"] == 50
        await provider.aclose()

    @pytest.mark.asyncio
    async def test_multi_turn_prompt_is_transcript(self):
        seen: list[httpx.Request] = []
        provider = OllamaProvider(
            transport=json_transport({"response": "Sure.", "done": True}, seen=seen)
        )

        await provider.chat(
            messages=[
                {"role": "user", "content": "Hi"},
                {"role": "assistant", "content": "Hello!"},
                {"role": "user", "content": "Tell me more"},
            ]
        )

        prompt = json.loads(seen[0].content)["prompt"]
        assert prompt == "User: Hi\nAssistant: Hello!\nUser: Tell me more\nAssistant:"

    @pytest.mark.asyncio
    async def test_server_error_raises_provider_error(self):
        provider = OllamaProvider(transport=json_transport({"error": "boom"}, status_code=500))

        with pytest.raises(ProviderError) as exc_info:
            await provider.chat(messages=[{"role": "user", "content": "Hi"}])

        assert exc_info.value.status_code == 500
        assert exc_info.value.provider == "ollama"

    @pytest.mark.asyncio
    async def test_missing_response_field(self):
        provider = OllamaProvider(transport=json_transport({"done": True}))

        with pytest.raises(ProviderError, match="malformed"):
            await provider.chat(messages=[{"role": "user", "content": "Hi"}])

    @pytest.mark.asyncio
    async def test_timeout_raises_timeout_error(self):
        provider = OllamaProvider(
            timeout=1.0,
            transport=raising_transport(httpx.ReadTimeout("too slow")),
        )

        with pytest.raises(ProviderTimeoutError) as exc_info:
            await provider.chat(messages=[{"role": "user", "content": "Hi"}])

        assert exc_info.value.timeout_seconds == 1.0

    @pytest.mark.asyncio
    async def test_connection_error_has_no_status(self):
        provider = OllamaProvider(
            transport=raising_transport(httpx.ConnectError("refused"))
        )

        with pytest.raises(ProviderError) as exc_info:
            await provider.chat(messages=[{"role": "user", "content": "Hi"}])

        assert exc_info.value.status_code is None

    @pytest.mark.asyncio
    async def test_health_check(self):
        healthy = OllamaProvider(transport=json_transport({"models": []}))
        unhealthy = OllamaProvider(transport=json_transport({}, status_code=503))

        assert await healthy.health_check() is True
        assert await unhealthy.health_check() is False

    def test_defaults(self):
        provider = OllamaProvider()
        assert provider.provider_name == "ollama"
        assert provider.base_url == "http://localhost:11434"
        assert provider.default_model == "qwen2.5:latest"


class TestVLLMProvider:
    """Tests for the OpenAI-compatible provider."""

    @pytest.mark.asyncio
    async def test_chat_success(self):
        seen: list[httpx.Request] = []
        provider = VLLMProvider(
            api_key="secret",
            transport=json_transport(
                {
                    "model": "llama-3-8b-instruct",
                    "choices": [
                        {
                            "message": {"role": "assistant", "content": "Hello, world!"},
                            "finish_reason": "stop",
                        }
                    ],
                    "usage": {"prompt_tokens": 8, "completion_tokens": 4},
                },
                seen=seen,
            ),
        )

        response = await provider.chat(
            messages=[{"role": "user", "content": "Say hello"}],
            system_prompt="You are terse.",
        )

        assert response.text == "Hello, world!"
        assert response.finish_reason == "stop"
        assert response.usage == {"input_tokens": 8, "output_tokens": 4}

        request = seen[0]
        assert request.url.path == "/v1/chat/completions"
        assert request.headers["Authorization"] == "Bearer secret"
        payload = json.loads(request.content)
        assert payload["messages"][0] == {"role": "system", "content": "You are terse."}
        assert payload["messages"][1]["content"] == "Say hello"

    @pytest.mark.asyncio
    async def test_server_error_raises_provider_error(self):
        provider = VLLMProvider(transport=json_transport({"detail": "oops"}, status_code=500))

        with pytest.raises(ProviderError) as exc_info:
            await provider.chat(messages=[{"role": "user", "content": "Hi"}])

        assert exc_info.value.status_code == 500
        assert exc_info.value.provider == "vllm"

    @pytest.mark.asyncio
    async def test_empty_choices_is_malformed(self):
        provider = VLLMProvider(transport=json_transport({"choices": []}))

        with pytest.raises(ProviderError, match="malformed"):
            await provider.chat(messages=[{"role": "user", "content": "Hi"}])

    @pytest.mark.asyncio
    async def test_non_json_reply_is_malformed(self):
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(200, text="<html>not json</html>")

        provider = VLLMProvider(transport=httpx.MockTransport(handler))

        with pytest.raises(ProviderError, match="malformed JSON"):
            await provider.chat(messages=[{"role": "user", "content": "Hi"}])

    def test_base_url_strips_v1_suffix(self):
        provider = VLLMProvider(base_url="http://gpu-box:8000/v1/")
        assert provider.base_url == "http://gpu-box:8000"


class TestAnthropicProvider:
    """Tests for AnthropicProvider."""

    def test_provider_name(self):
        with patch.dict("os.environ", {"ANTHROPIC_API_KEY": "test-key"}):
            provider = AnthropicProvider()
            assert provider.provider_name == "anthropic"
            assert provider.default_model == "claude-haiku-4-5-20251001"

    @pytest.mark.asyncio
    async def test_chat_call(self):
        provider = AnthropicProvider(api_key="test-key")

        mock_response = MagicMock()
        mock_response.content = [MagicMock(text="Hello!")]
        mock_response.model = "claude-haiku-4-5-20251001"
        mock_response.usage = MagicMock(input_tokens=5, output_tokens=3)
        mock_response.stop_reason = "max_tokens"

        provider._async_client.messages.create = AsyncMock(return_value=mock_response)

        response = await provider.chat(
            messages=[
                {"role": "system", "content": "Be brief."},
                {"role": "user", "content": "Hi"},
            ],
            max_tokens=100,
        )

        assert response.text == "Hello!"
        assert response.finish_reason == "length"
        kwargs = provider._async_client.messages.create.call_args.kwargs
        assert kwargs["system"] == "Be brief."
        assert kwargs["messages"] == [{"role": "user", "content": "Hi"}]

    @pytest.mark.asyncio
    async def test_history_starting_with_assistant_is_trimmed(self):
        provider = AnthropicProvider(api_key="test-key")

        mock_response = MagicMock()
        mock_response.content = [MagicMock(text="Sure.")]
        mock_response.model = "claude-haiku-4-5-20251001"
        mock_response.usage = MagicMock(input_tokens=5, output_tokens=2)
        mock_response.stop_reason = "end_turn"

        provider._async_client.messages.create = AsyncMock(return_value=mock_response)

        await provider.chat(
            messages=[
                {"role": "assistant", "content": "Seed rounds are smaller."},
                {"role": "user", "content": "And Series A?"},
                {"role": "assistant", "content": "Slower to close."},
                {"role": "user", "content": "Why?"},
            ],
        )

        kwargs = provider._async_client.messages.create.call_args.kwargs
        assert [m["role"] for m in kwargs["messages"]] == ["user", "assistant", "user"]
        assert kwargs["messages"][0]["content"] == "And Series A?"

    def test_no_user_turn_leaves_nothing(self):
        turns = [{"role": "assistant", "content": "Hello."}]

        assert AnthropicProvider.drop_leading_assistant_turns(turns) == []


class TestOpenAIProvider:
    """Tests for OpenAIProvider."""

    @pytest.mark.asyncio
    async def test_chat_call(self):
        provider = OpenAIProvider(api_key="test-key")

        mock_choice = MagicMock()
        mock_choice.message.content = "Hello!"
        mock_choice.finish_reason = "stop"
        mock_response = MagicMock()
        mock_response.choices = [mock_choice]
        mock_response.model = "gpt-4o-mini"
        mock_response.usage = MagicMock(prompt_tokens=5, completion_tokens=3)

        provider._async_client.chat.completions.create = AsyncMock(return_value=mock_response)

        response = await provider.chat(messages=[{"role": "user", "content": "Hi"}])

        assert response.text == "Hello!"
        assert response.usage == {"input_tokens": 5, "output_tokens": 3}

    @pytest.mark.asyncio
    async def test_no_choices_raises(self):
        provider = OpenAIProvider(api_key="test-key")
        mock_response = MagicMock()
        mock_response.choices = []
        provider._async_client.chat.completions.create = AsyncMock(return_value=mock_response)

        with pytest.raises(ProviderError):
            await provider.chat(messages=[{"role": "user", "content": "Hi"}])


class TestLLMProviderFactory:
    """Tests for LLMProviderFactory."""

    def test_list_providers(self):
        providers = LLMProviderFactory.list_providers()
        assert {"ollama", "vllm", "anthropic", "openai"} <= set(providers)

    def test_create_local_provider(self):
        provider = LLMProviderFactory.create("vllm", base_url="http://gpu:9000", models=["m1"])
        assert isinstance(provider, VLLMProvider)
        assert provider.get_available_models() == ["m1"]

    def test_create_unknown_provider_raises(self):
        with pytest.raises(InvalidConfigurationError):
            LLMProviderFactory.create("unknown")

    def test_register_custom_provider(self, monkeypatch):
        monkeypatch.setattr(
            LLMProviderFactory, "_providers", dict(LLMProviderFactory._providers)
        )

        LLMProviderFactory.register_provider("llamacpp", OllamaProvider)

        provider = LLMProviderFactory.create("llamacpp", base_url="http://cpu:8080")
        assert isinstance(provider, OllamaProvider)
        assert "llamacpp" in LLMProviderFactory.list_providers()

    def test_build_registry_from_config(self):
        registry = build_provider_registry(
            LLMConfig(
                ollama=OllamaConfig(enabled=True),
                vllm=VLLMConfig(enabled=False),
                anthropic=AnthropicConfig(api_key=""),
            )
        )
        assert "ollama" in registry
        assert "vllm" not in registry
        assert "anthropic" not in registry
        assert len(registry) == 1

    def test_hosted_provider_registered_with_key(self):
        registry = build_provider_registry(
            LLMConfig(anthropic=AnthropicConfig(api_key="test-key"))
        )
        assert "anthropic" in registry
