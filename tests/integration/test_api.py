"""API integration tests.

Exercises the FastAPI endpoints with every agent wired to a scripted
provider.
"""

from collections.abc import Generator
from pathlib import Path

import pytest
from conftest import FakeProvider, llm_config
from fastapi import FastAPI
from fastapi.testclient import TestClient

from advisor.agents import build_agents
from advisor.api import api_router, init_dependencies, reset_dependencies
from advisor.core.orchestrator import Orchestrator
from advisor.core.turn_store import TurnStore
from advisor.llm.registry import ProviderRegistry
from advisor.tools import build_tool_registry
from advisor.utils.config import reset_config
from advisor.utils.error_handlers import register_error_handlers
from advisor.utils.exceptions import ProviderError

FUNDING_TRENDS = "What are the latest funding trends for early-stage startups?"


@pytest.fixture
def app() -> FastAPI:
    """FastAPI app fixture."""
    app = FastAPI(title="Virtual Advisor Test")
    register_error_handlers(app)
    app.include_router(api_router)
    return app


@pytest.fixture
def fake_llm() -> FakeProvider:
    return FakeProvider(replies=["Seed rounds are taking longer to close."])


@pytest.fixture
def test_dependencies(fake_llm: FakeProvider) -> Generator[dict, None, None]:
    """Wire an orchestrator and provider registry for the routes."""
    providers = ProviderRegistry()
    providers.register(fake_llm)
    orchestrator = Orchestrator(turn_store=TurnStore())
    orchestrator.register_agents(
        build_agents(llm_config(), providers=providers, tools=build_tool_registry())
    )

    init_dependencies(orchestrator, providers, version="9.9.9")
    yield {"orchestrator": orchestrator, "providers": providers}
    reset_dependencies()


@pytest.fixture
def client(app: FastAPI, test_dependencies) -> TestClient:
    """TestClient fixture."""
    return TestClient(app)


class TestChatEndpoint:
    """POST /api/v1/chat."""

    def test_greeting(self, client: TestClient):
        response = client.post("/api/v1/chat", json={"message": "hi"})

        assert response.status_code == 200
        data = response.json()
        assert data["success"] is True
        assert data["data"]["agent_id"] == "general-conversation"
        assert data["data"]["content"].startswith("Hi, I'm")
        assert data["data"]["confidence"] == 0.95
        assert data["data"]["fallback"] is False
        assert data["data"]["quick_actions"] == []

    def test_llm_answer(self, client: TestClient):
        response = client.post(
            "/api/v1/chat",
            json={"message": FUNDING_TRENDS, "session_id": "s-1", "user_id": "u-1"},
        )

        data = response.json()["data"]
        assert data["agent_id"] == "investment"
        assert data["content"] == "Seed rounds are taking longer to close."
        assert data["metadata"]["provider"] == "fake"

    def test_provider_failure_still_returns_200(self, client: TestClient, fake_llm: FakeProvider):
        fake_llm.replies = [ProviderError("connection refused", provider="fake")]

        response = client.post("/api/v1/chat", json={"message": FUNDING_TRENDS})

        assert response.status_code == 200
        data = response.json()["data"]
        assert data["agent_id"] == "investment"
        assert data["content"]

    def test_preferred_agent(self, client: TestClient):
        response = client.post(
            "/api/v1/chat", json={"message": "hi", "preferred_agent": "marketing"}
        )

        assert response.json()["data"]["agent_id"] == "marketing"

    def test_history_is_accepted(self, client: TestClient):
        response = client.post(
            "/api/v1/chat",
            json={
                "message": "And what about Series A?",
                "history": [
                    {"role": "user", "content": "Tell me about seed funding"},
                    {"role": "assistant", "content": "Seed rounds...", "agent_id": "investment"},
                ],
            },
        )

        assert response.status_code == 200

    def test_missing_message(self, client: TestClient):
        response = client.post("/api/v1/chat", json={})

        assert response.status_code == 422
        data = response.json()
        assert data["success"] is False
        assert data["error"]["code"] == "ValidationError"

    def test_unknown_field_rejected(self, client: TestClient):
        response = client.post("/api/v1/chat", json={"message": "hi", "colour": "blue"})

        assert response.status_code == 422


class TestAgentEndpoints:
    """GET /api/v1/agents."""

    def test_list_agents(self, client: TestClient):
        response = client.get("/api/v1/agents")

        assert response.status_code == 200
        data = response.json()
        assert data["metadata"]["total"] == 10
        ids = [agent["id"] for agent in data["data"]]
        assert ids[0] == "support"
        assert ids[-1] == "general-conversation"


class TestProviderEndpoints:
    """Provider listing and health probes."""

    def test_list_providers(self, client: TestClient):
        response = client.get("/api/v1/providers")

        data = response.json()
        assert [p["id"] for p in data["data"]] == ["fake"]
        assert data["data"][0]["status"] == "unknown"
        assert data["metadata"]["available"] == 0

    def test_refresh(self, client: TestClient):
        response = client.post("/api/v1/providers/refresh")

        data = response.json()
        assert data["data"][0]["available"] is True
        assert data["data"][0]["status"] == "available"

    def test_single_health_check(self, client: TestClient, fake_llm: FakeProvider):
        fake_llm.healthy = False

        response = client.post("/api/v1/providers/fake/health")

        assert response.status_code == 200
        assert response.json()["data"]["available"] is False

    def test_unknown_provider(self, client: TestClient):
        response = client.post("/api/v1/providers/ghost/health")

        assert response.status_code == 404
        assert response.json()["error"]["code"] == "NotFoundError"


class TestSystemEndpoints:
    """Stats and health."""

    def test_health(self, client: TestClient):
        response = client.get("/api/v1/health")

        data = response.json()["data"]
        assert data["status"] == "healthy"
        assert data["version"] == "9.9.9"
        assert data["agents_registered"] == 10
        assert data["providers_registered"] == 1

    def test_stats(self, client: TestClient):
        client.post("/api/v1/chat", json={"message": "hi"})

        data = client.get("/api/v1/stats").json()["data"]

        assert data["total_messages"] == 1
        assert data["agent_counts"] == {"general-conversation": 1}

    def test_uninitialized_service(self, app: FastAPI):
        reset_dependencies()
        client = TestClient(app)

        response = client.post("/api/v1/chat", json={"message": "hi"})

        assert response.status_code == 503
        assert response.json()["error"]["code"] == "ServiceUnavailableError"


class TestApplication:
    """create_app wiring with the lifespan running."""

    @pytest.fixture
    def config_file(self, tmp_path: Path) -> Path:
        path = tmp_path / "app.yaml"
        path.write_text(
            """
app:
  name: Advisor Test
  debug: false
logging:
  level: WARNING
  format: console
llm:
  enabled: false
"""
        )
        return path

    def test_lifespan_wires_routes(self, config_file: Path):
        from advisor.main import create_app

        reset_config()
        app = create_app(config_path=config_file)

        with TestClient(app) as client:
            assert client.get("/live").json() == {"status": "alive"}
            assert client.get("/ready").status_code == 200

            response = client.post("/api/v1/chat", json={"message": "hi"})
            assert response.status_code == 200
            assert response.headers["X-Request-ID"]

            reply = client.post("/api/v1/chat", json={"message": FUNDING_TRENDS}).json()
            assert reply["data"]["fallback"] is False

        reset_config()
        assert app.title == "Advisor Test"
