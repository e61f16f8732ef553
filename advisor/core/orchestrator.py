"""Orchestrator - single entry point for one chat turn.

Routes the message to exactly one agent, returns that agent's answer and
records the turn in the background.
"""

from __future__ import annotations

import asyncio
import time
from datetime import UTC, datetime
from typing import TYPE_CHECKING, Any

from advisor.core.router import AgentRouter
from advisor.core.turn_store import TurnStore
from advisor.models import AgentContext, AgentInfo, AgentMessage
from advisor.utils.logging import get_logger

if TYPE_CHECKING:
    from advisor.agents.base import BaseAgent

logger = get_logger(__name__)


class Orchestrator:
    """Central coordinator for chat turns.

    Holds the router, an optional turn store and running statistics. The
    statistics are updated only from the event loop thread.
    """

    def __init__(
        self,
        router: AgentRouter | None = None,
        turn_store: TurnStore | None = None,
    ) -> None:
        """Initialize the orchestrator.

        Args:
            router: Agent router. An empty one is created when omitted.
            turn_store: Optional best-effort store for answered turns.
        """
        self.router = router or AgentRouter()
        self.turn_store = turn_store
        self._background: set[asyncio.Task[Any]] = set()
        self._started_at = datetime.now(UTC)
        self._total_messages = 0
        self._fallback_count = 0
        self._emergency_count = 0
        self._total_time_ms = 0.0
        self._agent_counts: dict[str, int] = {}

    def register_agents(self, agents: list[BaseAgent]) -> None:
        """Register agents in order.

        Raises:
            AgentAlreadyExistsError: If two agents share an id.
        """
        for agent in agents:
            self.router.register(agent)

    def validate(self) -> None:
        """Startup check; raises RoutingError when no agent is registered."""
        self.router.validate()

    async def process_message(
        self,
        text: str,
        context: AgentContext | None = None,
    ) -> AgentMessage:
        """Answer one user message.

        Non-text input is answered by the default agent with a fixed reply.

        Args:
            text: The user message.
            context: Per-message context built by the caller.

        Returns:
            Exactly one AgentMessage.

        Raises:
            RoutingError: If no agent is registered.
        """
        context = context or AgentContext()
        start = time.perf_counter()

        agent = self.router.route(text, context)
        logger.info(
            "Processing message",
            agent_id=agent.agent_id,
            session_id=context.session_id,
            history=len(context.history),
        )

        reply = await agent.process(text, context)

        elapsed_ms = (time.perf_counter() - start) * 1000
        self._record_stats(reply, elapsed_ms)
        logger.info(
            "Message processed",
            agent_id=reply.agent_id,
            confidence=reply.confidence,
            fallback=reply.is_fallback,
            duration_ms=round(elapsed_ms, 2),
        )

        self._record_turn(text, reply, context)
        return reply

    def _record_stats(self, reply: AgentMessage, elapsed_ms: float) -> None:
        self._total_messages += 1
        self._total_time_ms += elapsed_ms
        self._agent_counts[reply.agent_id] = self._agent_counts.get(reply.agent_id, 0) + 1
        if reply.is_fallback:
            self._fallback_count += 1
        if reply.metadata.get("emergency"):
            self._emergency_count += 1

    def _record_turn(self, text: str, reply: AgentMessage, context: AgentContext) -> None:
        """Schedule a turn-store write without waiting for it."""
        if self.turn_store is None or not self.turn_store.enabled:
            return
        if not isinstance(text, str):
            return

        task = asyncio.create_task(
            self.turn_store.record(
                session_id=context.session_id,
                user_message=text,
                reply=reply,
                user_id=context.user_id,
            )
        )
        self._background.add(task)
        task.add_done_callback(self._on_turn_recorded)

    def _on_turn_recorded(self, task: asyncio.Task[Any]) -> None:
        self._background.discard(task)
        if task.cancelled():
            return
        error = task.exception()
        if error is not None:
            logger.warning("Turn store write failed", error=str(error))

    async def drain(self) -> None:
        """Wait for pending turn-store writes (used at shutdown and in tests)."""
        if self._background:
            await asyncio.gather(*self._background, return_exceptions=True)

    def list_agents(self) -> list[AgentInfo]:
        """Capability listing, highest priority first."""
        return self.router.list_all()

    def get_stats(self) -> dict[str, Any]:
        """Running statistics since startup."""
        average = self._total_time_ms / self._total_messages if self._total_messages else 0.0
        stats: dict[str, Any] = {
            "total_messages": self._total_messages,
            "agent_counts": dict(self._agent_counts),
            "fallback_count": self._fallback_count,
            "emergency_count": self._emergency_count,
            "average_processing_time_ms": round(average, 2),
            "registered_agents": len(self.router),
            "started_at": self._started_at.isoformat(),
        }
        if self.turn_store is not None:
            stats["turn_store"] = self.turn_store.get_stats()
        return stats
