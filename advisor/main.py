"""Virtual Advisor - Main Application Entry Point.

This module creates and configures the FastAPI application with all necessary
middleware, routers, and startup/shutdown handlers.
"""

from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager
from pathlib import Path
from typing import Any
from uuid import uuid4

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from advisor import __version__
from advisor.agents.factory import build_agents
from advisor.api.routes import api_router, init_dependencies, reset_dependencies
from advisor.core.orchestrator import Orchestrator
from advisor.core.turn_store import TurnStore
from advisor.llm.factory import build_provider_registry
from advisor.llm.registry import ProviderRegistry
from advisor.tools import build_tool_registry
from advisor.utils.config import AppConfig, Environment, LogFormat, get_config, init_config
from advisor.utils.error_handlers import register_error_handlers
from advisor.utils.logging import (
    clear_correlation_id,
    get_logger,
    set_correlation_id,
    setup_logging,
)

# Global instances
_orchestrator: Orchestrator | None = None
_providers: ProviderRegistry | None = None

logger = get_logger(__name__)


def get_project_root() -> Path:
    """Get the project root directory."""
    return Path(__file__).parent.parent


def get_config_path() -> Path:
    """Get the path to the app.yaml configuration file."""
    return get_project_root() / "configs" / "app.yaml"


async def startup_event(config: AppConfig) -> None:
    """Build providers, tools, agents and the orchestrator.

    Raises:
        TemplateLoadError: If an agent's templates are missing or invalid.
        RoutingError: If no agent ends up registered.
    """
    global _orchestrator, _providers

    logger.info(
        "Starting Virtual Advisor",
        app_name=config.app.name,
        version=config.app.version,
        environment=config.app.env.value,
    )

    _providers = build_provider_registry(config.llm)
    tools = build_tool_registry()

    turn_store = TurnStore(
        max_turns_per_session=config.turn_store.max_turns_per_session,
        enabled=config.turn_store.enabled,
    )
    _orchestrator = Orchestrator(turn_store=turn_store)
    _orchestrator.register_agents(
        build_agents(
            config.llm,
            providers=_providers,
            tools=tools,
            assistant_name=config.app.assistant_name,
        )
    )
    _orchestrator.validate()

    init_dependencies(
        orchestrator=_orchestrator,
        providers=_providers,
        version=config.app.version,
    )

    if config.llm.enabled and len(_providers) > 0:
        descriptors = await _providers.refresh()
        logger.info(
            "LLM providers probed",
            registered=len(descriptors),
            available=sum(1 for d in descriptors if d.available),
        )

    logger.info(
        "Virtual Advisor started successfully",
        host=config.app.host,
        port=config.app.port,
        agents=len(_orchestrator.router),
        providers=len(_providers),
    )


async def shutdown_event() -> None:
    """Cleanup on application shutdown."""
    global _orchestrator, _providers

    logger.info("Shutting down Virtual Advisor")

    if _orchestrator:
        await _orchestrator.drain()

    if _providers:
        await _providers.aclose()

    reset_dependencies()
    _orchestrator = None
    _providers = None

    logger.info("Virtual Advisor shutdown complete")


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan context manager.

    Handles startup and shutdown events.
    """
    config = app.state.config if hasattr(app.state, "config") else AppConfig()

    await startup_event(config)

    yield

    await shutdown_event()


def create_app(
    config_path: str | Path | None = None,
    env_file: str | Path | None = None,
) -> FastAPI:
    """Create and configure the FastAPI application.

    Args:
        config_path: Optional path to YAML configuration file.
        env_file: Optional path to .env file.

    Returns:
        Configured FastAPI application instance.
    """
    if config_path is None:
        default_config_path = get_config_path()
        if default_config_path.exists():
            config_path = default_config_path

    config = init_config(yaml_path=config_path, env_file=env_file)

    setup_logging(
        level=config.logging.level,
        json_format=config.logging.format == LogFormat.JSON,
    )

    app = FastAPI(
        title=config.app.name,
        description="Virtual Advisor - routes each chat message to one specialist agent",
        version=__version__,
        docs_url="/docs" if config.app.debug else None,
        redoc_url="/redoc" if config.app.debug else None,
        openapi_url="/openapi.json" if config.app.debug else None,
        lifespan=lifespan,
    )

    app.state.config = config

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"] if config.app.env == Environment.DEVELOPMENT else [],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.middleware("http")
    async def add_request_id(request: Request, call_next: Any) -> Any:
        """Add request ID to each request for tracing."""
        request_id = request.headers.get("X-Request-ID", str(uuid4()))
        request.state.request_id = request_id
        set_correlation_id(request_id)

        response = await call_next(request)

        response.headers["X-Request-ID"] = request_id
        clear_correlation_id()

        return response

    @app.middleware("http")
    async def log_requests(request: Request, call_next: Any) -> Any:
        """Log incoming requests and responses."""
        logger.info(
            "Request received",
            method=request.method,
            path=str(request.url.path),
            client=request.client.host if request.client else "unknown",
        )

        response = await call_next(request)

        logger.info(
            "Response sent",
            method=request.method,
            path=str(request.url.path),
            status_code=response.status_code,
        )

        return response

    register_error_handlers(app)

    app.include_router(api_router)

    @app.get("/", tags=["Root"])
    async def root() -> dict[str, Any]:
        """Root endpoint with basic information."""
        return {
            "name": config.app.name,
            "version": config.app.version,
            "status": "running",
            "docs": "/docs" if config.app.debug else "disabled",
        }

    @app.get("/ready", tags=["Health"])
    async def readiness() -> JSONResponse:
        """Readiness probe."""
        if _orchestrator is None or _providers is None:
            return JSONResponse(
                status_code=503,
                content={"status": "not_ready", "message": "Service not initialized"},
            )

        return JSONResponse(status_code=200, content={"status": "ready"})

    @app.get("/live", tags=["Health"])
    async def liveness() -> JSONResponse:
        """Liveness probe."""
        return JSONResponse(status_code=200, content={"status": "alive"})

    return app


# Create the application instance
app = create_app()


def run_dev_server() -> None:
    """Run the development server with hot-reload."""
    import uvicorn

    config = get_config()

    uvicorn.run(
        "advisor.main:app",
        host=config.app.host,
        port=config.app.port,
        reload=True,
        reload_dirs=["advisor"],
        log_level="info",
    )


def run_prod_server() -> None:
    """Run the production server."""
    import uvicorn

    config = get_config()

    uvicorn.run(
        "advisor.main:app",
        host=config.app.host,
        port=config.app.port,
        reload=False,
        workers=4,
        log_level="warning",
        access_log=False,
    )


if __name__ == "__main__":
    run_dev_server()
