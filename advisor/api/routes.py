"""API routes.

The chat endpoint always answers with HTTP 200 once a message has been
processed; provider failures only show up as lower-confidence fallbacks.
"""

from typing import Any

from fastapi import APIRouter

from advisor.api.schemas import APIResponse, ChatRequest, ChatResponse, HealthResponse
from advisor.core.orchestrator import Orchestrator
from advisor.llm.registry import ProviderRegistry
from advisor.utils.exceptions import ServiceUnavailableError
from advisor.utils.logging import get_api_logger

logger = get_api_logger()

_orchestrator: Orchestrator | None = None
_providers: ProviderRegistry | None = None
_version: str = "1.0.0"


def init_dependencies(
    orchestrator: Orchestrator,
    providers: ProviderRegistry,
    version: str = "1.0.0",
) -> None:
    """Wire the shared instances used by the routes."""
    global _orchestrator, _providers, _version
    _orchestrator = orchestrator
    _providers = providers
    _version = version


def reset_dependencies() -> None:
    global _orchestrator, _providers
    _orchestrator = None
    _providers = None


def get_orchestrator() -> Orchestrator:
    if _orchestrator is None:
        raise ServiceUnavailableError("orchestrator")
    return _orchestrator


def get_providers() -> ProviderRegistry:
    if _providers is None:
        raise ServiceUnavailableError("providers")
    return _providers


# =============================================================================
# Chat
# =============================================================================

chat_router = APIRouter(prefix="/chat", tags=["Chat"])


@chat_router.post("", response_model=APIResponse)
async def chat(request: ChatRequest) -> APIResponse:
    """Answer one chat message."""
    orchestrator = get_orchestrator()
    reply = await orchestrator.process_message(request.message, request.to_context())
    return APIResponse(
        success=True,
        data=ChatResponse.from_message(reply).model_dump(mode="json"),
    )


# =============================================================================
# Agents
# =============================================================================

agent_router = APIRouter(prefix="/agents", tags=["Agents"])


@agent_router.get("", response_model=APIResponse)
async def list_agents() -> APIResponse:
    """List registered agents, highest priority first."""
    agents = get_orchestrator().list_agents()
    return APIResponse(
        success=True,
        data=[agent.model_dump(mode="json") for agent in agents],
        metadata={"total": len(agents)},
    )


# =============================================================================
# Providers
# =============================================================================

provider_router = APIRouter(prefix="/providers", tags=["Providers"])


@provider_router.get("", response_model=APIResponse)
async def list_providers() -> APIResponse:
    """Current provider snapshot (no probing)."""
    descriptors = get_providers().list_descriptors()
    return APIResponse(
        success=True,
        data=[d.model_dump(mode="json") for d in descriptors],
        metadata={"available": sum(1 for d in descriptors if d.available)},
    )


@provider_router.post("/refresh", response_model=APIResponse)
async def refresh_providers() -> APIResponse:
    """Probe every provider and return the new snapshot."""
    descriptors = await get_providers().refresh()
    logger.info("Providers refreshed", available=sum(1 for d in descriptors if d.available))
    return APIResponse(
        success=True,
        data=[d.model_dump(mode="json") for d in descriptors],
    )


@provider_router.post("/{provider_id}/health", response_model=APIResponse)
async def check_provider(provider_id: str) -> APIResponse:
    """Probe one provider."""
    providers = get_providers()
    await providers.health_check(provider_id)
    return APIResponse(
        success=True,
        data=providers.get_descriptor(provider_id).model_dump(mode="json"),
    )


# =============================================================================
# System
# =============================================================================

system_router = APIRouter(tags=["System"])


@system_router.get("/stats", response_model=APIResponse)
async def get_stats() -> APIResponse:
    """Orchestrator statistics."""
    return APIResponse(success=True, data=get_orchestrator().get_stats())


@system_router.get("/health", response_model=APIResponse)
async def health() -> APIResponse:
    """System health summary."""
    orchestrator = get_orchestrator()
    providers = get_providers()
    available = len(providers.get_available_providers())
    data: dict[str, Any] = HealthResponse(
        status="healthy" if len(orchestrator.router) > 0 else "degraded",
        version=_version,
        agents_registered=len(orchestrator.router),
        providers_registered=len(providers),
        providers_available=available,
    ).model_dump()
    return APIResponse(success=True, data=data)


api_router = APIRouter(prefix="/api/v1")
api_router.include_router(chat_router)
api_router.include_router(agent_router)
api_router.include_router(provider_router)
api_router.include_router(system_router)
