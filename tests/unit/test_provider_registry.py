"""Tests for ProviderRegistry."""

import pytest
from conftest import FakeProvider, failing_provider

from advisor.llm.registry import ProviderRegistry, ProviderStatus
from advisor.utils.exceptions import ConfigurationError, NotFoundError, ProviderError


@pytest.fixture
def registry() -> ProviderRegistry:
    return ProviderRegistry()


class TestRegistration:
    """Tests for provider registration."""

    def test_register_returns_unknown_descriptor(self, registry: ProviderRegistry):
        descriptor = registry.register(FakeProvider("local"))

        assert descriptor.id == "local"
        assert descriptor.status == ProviderStatus.UNKNOWN
        assert descriptor.available is False
        assert descriptor.models == ["local-model"]
        assert "local" in registry

    def test_duplicate_registration_raises(self, registry: ProviderRegistry):
        registry.register(FakeProvider("local"))

        with pytest.raises(ConfigurationError):
            registry.register(FakeProvider("local"))

    def test_get_unknown_raises(self, registry: ProviderRegistry):
        with pytest.raises(NotFoundError):
            registry.get("missing")
        with pytest.raises(NotFoundError):
            registry.get_descriptor("missing")


class TestHealthChecks:
    """Tests for reachability tracking."""

    @pytest.mark.asyncio
    async def test_health_check_marks_available(self, registry: ProviderRegistry):
        registry.register(FakeProvider("local", healthy=True))

        assert await registry.health_check("local") is True

        descriptor = registry.get_descriptor("local")
        assert descriptor.status == ProviderStatus.AVAILABLE
        assert descriptor.available is True
        assert descriptor.last_checked is not None

    @pytest.mark.asyncio
    async def test_failed_probe_marks_unavailable(self, registry: ProviderRegistry):
        registry.register(FakeProvider("local", healthy=False))

        assert await registry.health_check("local") is False

        descriptor = registry.get_descriptor("local")
        assert descriptor.status == ProviderStatus.UNAVAILABLE
        assert descriptor.last_error == "health probe failed"

    @pytest.mark.asyncio
    async def test_refresh_checks_every_provider(self, registry: ProviderRegistry):
        registry.register(FakeProvider("up", healthy=True))
        registry.register(FakeProvider("down", healthy=False))

        descriptors = await registry.refresh()

        assert [d.id for d in descriptors] == ["up", "down"]
        assert [d.id for d in registry.get_available_providers()] == ["up"]

    @pytest.mark.asyncio
    async def test_recovered_provider_becomes_available(self, registry: ProviderRegistry):
        provider = FakeProvider("local", healthy=False)
        registry.register(provider)
        await registry.health_check("local")

        provider.healthy = True
        await registry.health_check("local")

        assert registry.get_descriptor("local").available is True


class TestComplete:
    """Tests for completion with fallback."""

    @pytest.mark.asyncio
    async def test_preferred_provider_answers(self, registry: ProviderRegistry):
        provider = FakeProvider("local", replies=["Hello, world!"])
        registry.register(provider)

        result = await registry.complete(
            messages=[{"role": "user", "content": "Hi"}],
            preferred_provider="local",
        )

        assert result.ok
        assert result.response.text == "Hello, world!"
        assert result.provider == "local"
        assert result.model == "local-model"
        assert result.attempts == ["local:local-model"]

    @pytest.mark.asyncio
    async def test_unsupported_model_uses_provider_default(self, registry: ProviderRegistry):
        registry.register(FakeProvider("local"))

        result = await registry.complete(
            messages=[{"role": "user", "content": "Hi"}],
            preferred_provider="local",
            preferred_model="not-served",
        )

        assert result.model == "local-model"

    @pytest.mark.asyncio
    async def test_falls_back_to_first_available(self, registry: ProviderRegistry):
        registry.register(failing_provider("primary"))
        backup = FakeProvider("backup", replies=["From backup"])
        registry.register(backup)
        await registry.health_check("backup")

        result = await registry.complete(
            messages=[{"role": "user", "content": "Hi"}],
            preferred_provider="primary",
        )

        assert result.ok
        assert result.provider == "backup"
        assert result.attempts == ["primary:primary-model", "backup:backup-model"]

    @pytest.mark.asyncio
    async def test_all_failures_return_error(self, registry: ProviderRegistry):
        registry.register(failing_provider("primary"))

        result = await registry.complete(
            messages=[{"role": "user", "content": "Hi"}],
            preferred_provider="primary",
        )

        assert not result.ok
        assert isinstance(result.error, ProviderError)
        assert result.error.status_code == 500

    @pytest.mark.asyncio
    async def test_connection_failure_marks_unavailable(self, registry: ProviderRegistry):
        registry.register(failing_provider("primary", status_code=None))

        await registry.complete(
            messages=[{"role": "user", "content": "Hi"}],
            preferred_provider="primary",
        )

        assert registry.get_descriptor("primary").status == ProviderStatus.UNAVAILABLE

    @pytest.mark.asyncio
    async def test_empty_registry_reports_no_provider(self, registry: ProviderRegistry):
        result = await registry.complete(messages=[{"role": "user", "content": "Hi"}])

        assert not result.ok
        assert result.error.provider == "none"
        assert result.attempts == []
