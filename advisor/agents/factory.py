"""Agent Factory - builds the agent set from the process-wide configuration.

LLM preferences live in one LLMConfig; per-agent overrides are resolved here
and injected into each agent at construction.
"""

from __future__ import annotations

from advisor.agents.base import BaseAgent
from advisor.agents.implementations import AGENT_CLASSES
from advisor.agents.templates import TemplateLoader, get_template_loader
from advisor.core.response_controller import ResponseController
from advisor.llm.registry import ProviderRegistry
from advisor.models import LLMSettings
from advisor.tools import ToolRegistry
from advisor.utils.config import LLMConfig
from advisor.utils.logging import get_logger

logger = get_logger(__name__)


def resolve_llm_settings(config: LLMConfig, agent_id: str) -> LLMSettings:
    """Merge the defaults with the agent's override, if any.

    Args:
        config: The process-wide LLM configuration.
        agent_id: Agent whose settings are resolved.

    Returns:
        LLMSettings for the agent.
    """
    override = config.agents.get(agent_id)
    enabled = config.enabled
    provider = config.default_provider
    model: str | None = config.default_model

    if override is not None:
        if override.enabled is not None:
            enabled = config.enabled and override.enabled
        if override.provider and override.provider != provider:
            provider = override.provider
            # The default model belongs to the default provider
            model = None
        if override.model:
            model = override.model

    return LLMSettings(
        enabled=enabled,
        preferred_provider=provider,
        preferred_model=model,
        max_tokens=config.max_tokens,
        temperature=config.temperature,
    )


def build_agents(
    config: LLMConfig,
    providers: ProviderRegistry | None = None,
    tools: ToolRegistry | None = None,
    assistant_name: str = "the virtual advisor",
    loader: TemplateLoader | None = None,
) -> list[BaseAgent]:
    """Instantiate every agent in routing order.

    Raises:
        TemplateLoadError: If any agent's templates are missing or invalid.
    """
    loader = loader or get_template_loader()
    controller = ResponseController()
    agents: list[BaseAgent] = []

    for agent_class in AGENT_CLASSES:
        agent_id = agent_class.capabilities.id
        agents.append(
            agent_class(
                providers=providers,
                tools=tools,
                llm_settings=resolve_llm_settings(config, agent_id),
                templates=loader.load(agent_id),
                controller=controller,
                assistant_name=assistant_name,
            )
        )

    logger.info("Agents built", agents=[a.agent_id for a in agents])
    return agents
