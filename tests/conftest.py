"""Shared test configuration and fixtures."""

from collections.abc import AsyncGenerator
from typing import Any

import pytest
import pytest_asyncio

from advisor.agents import TemplateLoader, build_agents
from advisor.core.orchestrator import Orchestrator
from advisor.core.turn_store import TurnStore
from advisor.llm.base import BaseLLMProvider, LLMResponse
from advisor.llm.registry import ProviderRegistry
from advisor.tools import ToolRegistry, build_tool_registry
from advisor.utils.config import LLMConfig
from advisor.utils.exceptions import ProviderError


class FakeProvider(BaseLLMProvider):
    """Scripted provider: returns queued replies, raises queued errors.

    When the queue is empty it answers with ``default_text``.
    """

    def __init__(
        self,
        name: str = "fake",
        replies: list[Any] | None = None,
        default_text: str = "This is a generated answer.",
        healthy: bool = True,
    ) -> None:
        super().__init__(base_url=f"http://{name}.test", models=[f"{name}-model"])
        self._name = name
        self.replies = list(replies or [])
        self.default_text = default_text
        self.healthy = healthy
        self.calls: list[dict[str, Any]] = []

    @property
    def provider_name(self) -> str:
        return self._name

    @property
    def default_model(self) -> str:
        return f"{self._name}-model"

    async def chat(
        self,
        messages: list[dict[str, str]],
        model: str | None = None,
        max_tokens: int = 1000,
        temperature: float = 0.7,
        system_prompt: str | None = None,
        **kwargs: Any,
    ) -> LLMResponse:
        self.calls.append(
            {
                "messages": messages,
                "model": model,
                "system_prompt": system_prompt,
                "max_tokens": max_tokens,
            }
        )
        reply = self.replies.pop(0) if self.replies else self.default_text
        if isinstance(reply, Exception):
            raise reply
        if isinstance(reply, LLMResponse):
            return reply
        return LLMResponse(text=reply, model=model or self.default_model, finish_reason="stop")

    async def health_check(self) -> bool:
        return self.healthy


def failing_provider(name: str = "fake", status_code: int | None = 500) -> FakeProvider:
    """Provider whose every call fails."""
    provider = FakeProvider(name=name)
    error = ProviderError(f"{name} error: {status_code}", provider=name, status_code=status_code)
    provider.replies = [error] * 10
    return provider


def llm_config(provider: str = "fake", enabled: bool = True) -> LLMConfig:
    return LLMConfig(
        enabled=enabled,
        default_provider=provider,
        default_model=f"{provider}-model",
    )


@pytest.fixture
def fake_provider() -> FakeProvider:
    return FakeProvider()


@pytest.fixture
def providers(fake_provider: FakeProvider) -> ProviderRegistry:
    registry = ProviderRegistry()
    registry.register(fake_provider)
    return registry


@pytest.fixture
def tools() -> ToolRegistry:
    return build_tool_registry()


@pytest.fixture
def template_loader() -> TemplateLoader:
    return TemplateLoader()


@pytest.fixture
def turn_store() -> TurnStore:
    return TurnStore(max_turns_per_session=5)


@pytest_asyncio.fixture
async def orchestrator(
    providers: ProviderRegistry,
    tools: ToolRegistry,
    template_loader: TemplateLoader,
    turn_store: TurnStore,
) -> AsyncGenerator[Orchestrator, None]:
    """Orchestrator with every agent wired to the fake provider."""
    orch = Orchestrator(turn_store=turn_store)
    orch.register_agents(
        build_agents(llm_config(), providers=providers, tools=tools, loader=template_loader)
    )
    yield orch
    await orch.drain()
