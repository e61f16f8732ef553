"""Agent Router - agent registration and capability-based selection.

Agents are registered once at startup. Routing is synchronous and reads the
registration table without locking.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from advisor.models import AgentContext, AgentInfo
from advisor.utils.exceptions import AgentAlreadyExistsError, NotFoundError, RoutingError
from advisor.utils.logging import get_logger

if TYPE_CHECKING:
    from advisor.agents.base import BaseAgent

logger = get_logger(__name__)


class AgentRouter:
    """Registry of agents and the routing table over them.

    Selection order for a message:
    1. ``context.metadata["preferred_agent"]`` when it names a registered agent
    2. The highest-priority agent whose ``can_handle`` accepts the message;
       ties go to the agent registered first
    """

    def __init__(self) -> None:
        self._agents: dict[str, BaseAgent] = {}

    def register(self, agent: BaseAgent) -> AgentInfo:
        """Register an agent.

        Args:
            agent: The agent to register.

        Returns:
            AgentInfo with the registered agent's information.

        Raises:
            AgentAlreadyExistsError: If an agent with the same ID already exists.
        """
        if agent.agent_id in self._agents:
            raise AgentAlreadyExistsError(agent.agent_id)

        self._agents[agent.agent_id] = agent
        logger.info("Agent registered", agent_id=agent.agent_id, priority=agent.priority)
        return agent.info()

    def get(self, agent_id: str) -> BaseAgent:
        """Get an agent by ID.

        Raises:
            NotFoundError: If the agent is not registered.
        """
        if agent_id not in self._agents:
            raise NotFoundError("Agent", agent_id)
        return self._agents[agent_id]

    def list_all(self) -> list[AgentInfo]:
        """List registered agents, highest priority first."""
        return [agent.info() for agent in self._ordered()]

    def validate(self) -> None:
        """Check that routing can always resolve an agent.

        Raises:
            RoutingError: If no agent is registered.
        """
        if not self._agents:
            raise RoutingError("No agents registered")
        if not any(agent.is_default for agent in self._agents.values()):
            logger.warning("No default agent registered; unmatched messages will fail to route")

    def _ordered(self) -> list[BaseAgent]:
        # sorted() is stable, so equal priorities keep registration order
        return sorted(self._agents.values(), key=lambda a: a.priority, reverse=True)

    def _default(self) -> BaseAgent | None:
        for agent in self._ordered():
            if agent.is_default:
                return agent
        return None

    def route(self, message: str, context: AgentContext | None = None) -> BaseAgent:
        """Select exactly one agent for a message.

        Args:
            message: The user message.
            context: Optional context; its ``preferred_agent`` wins when known.
                Non-text messages go to the default agent, which rejects them.

        Returns:
            The selected agent.

        Raises:
            RoutingError: If no agent is registered or none accepts the message.
        """
        if not self._agents:
            raise RoutingError("No agents registered")

        preferred = context.preferred_agent if context else None
        if preferred:
            if preferred in self._agents:
                logger.debug("Routing to preferred agent", agent_id=preferred)
                return self._agents[preferred]
            logger.warning("Unknown preferred agent ignored", agent_id=preferred)

        if not isinstance(message, str):
            default = self._default()
            if default is not None:
                logger.debug("Non-text message routed to default agent", agent_id=default.agent_id)
                return default

        for agent in self._ordered():
            if agent.can_handle(message):
                logger.debug("Message routed", agent_id=agent.agent_id)
                return agent

        raise RoutingError(
            "No agent can handle the message",
            details={"agents": list(self._agents)},
        )

    def __len__(self) -> int:
        """Return the number of registered agents."""
        return len(self._agents)

    def __contains__(self, agent_id: str) -> bool:
        """Check if an agent is registered."""
        return agent_id in self._agents
