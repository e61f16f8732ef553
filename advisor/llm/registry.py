"""Provider Registry - tracks LLM backends and their reachability.

Providers are registered once at startup. Reachability is refreshed only when
a caller asks for it; there is no background polling.
"""

from __future__ import annotations

import asyncio
from dataclasses import dataclass, field
from datetime import UTC, datetime
from enum import Enum
from typing import Any

from pydantic import BaseModel, Field

from advisor.llm.base import BaseLLMProvider, LLMResponse
from advisor.utils.exceptions import ConfigurationError, NotFoundError, ProviderError
from advisor.utils.logging import get_logger

logger = get_logger(__name__)


class ProviderStatus(str, Enum):
    """Reachability state of a provider.

    unknown -> checking -> available | unavailable, re-enterable at any time
    through ProviderRegistry.health_check().
    """

    UNKNOWN = "unknown"
    CHECKING = "checking"
    AVAILABLE = "available"
    UNAVAILABLE = "unavailable"


class ProviderDescriptor(BaseModel):
    """Snapshot of a registered provider."""

    id: str = Field(..., description="Provider id")
    name: str = Field(..., description="Display name")
    base_url: str = Field(default="", description="Backend endpoint")
    models: list[str] = Field(default_factory=list, description="Supported models")
    status: ProviderStatus = Field(default=ProviderStatus.UNKNOWN)
    available: bool = Field(default=False, description="Result of the last check")
    last_checked: datetime | None = Field(default=None)
    last_error: str | None = Field(default=None)

    model_config = {"frozen": True}


@dataclass
class CompletionResult:
    """Outcome of a completion attempt: a response or a ProviderError.

    Agents branch on ``ok`` instead of catching exceptions.
    """

    response: LLMResponse | None = None
    error: ProviderError | None = None
    provider: str | None = None
    model: str | None = None
    attempts: list[str] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return self.response is not None and self.error is None

    @classmethod
    def success(
        cls,
        response: LLMResponse,
        provider: str,
        model: str,
        attempts: list[str],
    ) -> "CompletionResult":
        return cls(response=response, provider=provider, model=model, attempts=attempts)

    @classmethod
    def failure(cls, error: ProviderError, attempts: list[str]) -> "CompletionResult":
        return cls(error=error, attempts=attempts)


class ProviderRegistry:
    """Registry of LLM providers.

    Written during startup, read concurrently afterwards. Descriptors are
    immutable and replaced wholesale on each status change.
    """

    def __init__(self) -> None:
        self._providers: dict[str, BaseLLMProvider] = {}
        self._descriptors: dict[str, ProviderDescriptor] = {}

    def register(
        self,
        provider: BaseLLMProvider,
        models: list[str] | None = None,
        name: str | None = None,
    ) -> ProviderDescriptor:
        """Register a provider.

        Args:
            provider: The provider instance.
            models: Supported models. Defaults to the provider's own list.
            name: Optional display name override.

        Returns:
            The initial descriptor (status ``unknown``).

        Raises:
            ConfigurationError: If the provider id is already registered.
        """
        provider_id = provider.provider_name
        if provider_id in self._providers:
            raise ConfigurationError(
                f"Provider already registered: {provider_id}",
                details={"provider": provider_id},
            )

        descriptor = ProviderDescriptor(
            id=provider_id,
            name=name or provider.display_name,
            base_url=provider.base_url,
            models=list(models) if models else provider.get_available_models(),
        )
        self._providers[provider_id] = provider
        self._descriptors[provider_id] = descriptor

        logger.info(
            "LLM provider registered",
            provider=provider_id,
            base_url=descriptor.base_url,
            models=descriptor.models,
        )
        return descriptor

    def get(self, provider_id: str) -> BaseLLMProvider:
        """Get a provider instance by id.

        Raises:
            NotFoundError: If the provider is not registered.
        """
        if provider_id not in self._providers:
            raise NotFoundError("Provider", provider_id)
        return self._providers[provider_id]

    def get_descriptor(self, provider_id: str) -> ProviderDescriptor:
        """Get the current descriptor for a provider.

        Raises:
            NotFoundError: If the provider is not registered.
        """
        if provider_id not in self._descriptors:
            raise NotFoundError("Provider", provider_id)
        return self._descriptors[provider_id]

    def list_descriptors(self) -> list[ProviderDescriptor]:
        """Return descriptors for all providers in registration order."""
        return list(self._descriptors.values())

    def get_available_providers(self) -> list[ProviderDescriptor]:
        """Return the current reachability snapshot (available only)."""
        return [d for d in self._descriptors.values() if d.available]

    def _set_status(
        self,
        provider_id: str,
        status: ProviderStatus,
        error: str | None = None,
    ) -> ProviderDescriptor:
        current = self._descriptors[provider_id]
        update: dict[str, Any] = {
            "status": status,
            "available": status == ProviderStatus.AVAILABLE,
        }
        if status in (ProviderStatus.AVAILABLE, ProviderStatus.UNAVAILABLE):
            update["last_checked"] = datetime.now(UTC)
            update["last_error"] = error
        descriptor = current.model_copy(update=update)
        self._descriptors[provider_id] = descriptor
        return descriptor

    async def health_check(self, provider_id: str) -> bool:
        """Probe one provider and record the result.

        Args:
            provider_id: The provider to check.

        Returns:
            True if the provider answered its probe.

        Raises:
            NotFoundError: If the provider is not registered.
        """
        provider = self.get(provider_id)
        self._set_status(provider_id, ProviderStatus.CHECKING)

        error: str | None = None
        try:
            healthy = await provider.health_check()
        except Exception as e:
            healthy = False
            error = str(e)

        if healthy:
            self._set_status(provider_id, ProviderStatus.AVAILABLE)
        else:
            self._set_status(
                provider_id,
                ProviderStatus.UNAVAILABLE,
                error=error or "health probe failed",
            )

        logger.info("LLM provider checked", provider=provider_id, available=healthy)
        return healthy

    async def refresh(self) -> list[ProviderDescriptor]:
        """Check every provider concurrently and return the new snapshot."""
        await asyncio.gather(*(self.health_check(pid) for pid in self._providers))
        return self.list_descriptors()

    def _candidates(
        self,
        preferred_provider: str | None,
        preferred_model: str | None,
    ) -> list[tuple[str, str]]:
        """Preferred provider/model first, then the first available one."""
        candidates: list[tuple[str, str]] = []

        if preferred_provider is None and preferred_model:
            for descriptor in self._descriptors.values():
                if preferred_model in descriptor.models:
                    preferred_provider = descriptor.id
                    break

        if preferred_provider in self._providers:
            descriptor = self._descriptors[preferred_provider]
            if descriptor.status != ProviderStatus.UNAVAILABLE:
                model = preferred_model
                if not model or (descriptor.models and model not in descriptor.models):
                    model = (
                        descriptor.models[0]
                        if descriptor.models
                        else self._providers[preferred_provider].default_model
                    )
                candidates.append((preferred_provider, model))

        for descriptor in self.get_available_providers():
            if any(pid == descriptor.id for pid, _ in candidates):
                continue
            model = (
                descriptor.models[0]
                if descriptor.models
                else self._providers[descriptor.id].default_model
            )
            candidates.append((descriptor.id, model))
            break

        return candidates

    async def complete(
        self,
        messages: list[dict[str, str]],
        system_prompt: str | None = None,
        preferred_provider: str | None = None,
        preferred_model: str | None = None,
        max_tokens: int = 1000,
        temperature: float = 0.7,
    ) -> CompletionResult:
        """Request a completion, falling back to the first available provider.

        Args:
            messages: Conversation messages.
            system_prompt: Optional system prompt.
            preferred_provider: Provider id to try first.
            preferred_model: Model to try first.
            max_tokens: Maximum tokens in the response.
            temperature: Sampling temperature.

        Returns:
            CompletionResult holding either the response or the last error.
        """
        attempts: list[str] = []
        last_error: ProviderError | None = None

        for provider_id, model in self._candidates(preferred_provider, preferred_model):
            attempts.append(f"{provider_id}:{model}")
            try:
                response = await self._providers[provider_id].chat(
                    messages=messages,
                    model=model,
                    max_tokens=max_tokens,
                    temperature=temperature,
                    system_prompt=system_prompt,
                )
            except ProviderError as e:
                last_error = e
                # Connection-level failures mean the backend is down
                if e.status_code is None:
                    self._set_status(provider_id, ProviderStatus.UNAVAILABLE, str(e))
                logger.warning(
                    "LLM completion failed",
                    provider=provider_id,
                    model=model,
                    status_code=e.status_code,
                    error=e.message,
                )
                continue
            return CompletionResult.success(response, provider_id, model, attempts)

        if last_error is None:
            last_error = ProviderError("No LLM provider available", provider="none")
        return CompletionResult.failure(last_error, attempts)

    async def aclose(self) -> None:
        """Close all provider clients."""
        for provider in self._providers.values():
            await provider.aclose()

    def __len__(self) -> int:
        return len(self._providers)

    def __contains__(self, provider_id: str) -> bool:
        return provider_id in self._providers
