"""API module.

Provides FastAPI routers, schemas, and dependencies.
"""

from .routes import (
    agent_router,
    api_router,
    chat_router,
    init_dependencies,
    provider_router,
    reset_dependencies,
    system_router,
)
from .schemas import (
    APIResponse,
    ChatRequest,
    ChatResponse,
    HealthResponse,
)

__all__ = [
    # Routers
    "api_router",
    "agent_router",
    "chat_router",
    "provider_router",
    "system_router",
    # Functions
    "init_dependencies",
    "reset_dependencies",
    # Schemas
    "APIResponse",
    "ChatRequest",
    "ChatResponse",
    "HealthResponse",
]
