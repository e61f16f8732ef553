"""Turn Store - best-effort record of answered turns.

The store is a collaborator of the orchestrator, not part of the response
path: writes happen after the answer is built and a failed write never
affects what the caller receives.
"""

import asyncio
from collections import deque
from datetime import UTC, datetime
from typing import Any

from pydantic import BaseModel, Field

from advisor.models import AgentMessage
from advisor.utils.logging import get_logger

logger = get_logger(__name__)


class TurnRecord(BaseModel):
    """One user message and the answer it received."""

    session_id: str = Field(..., description="Chat session id")
    user_id: str = Field(default="anonymous", description="User id")
    user_message: str = Field(..., description="Incoming text")
    agent_id: str = Field(..., description="Agent that answered")
    response: str = Field(..., description="Answer text")
    confidence: float = Field(default=0.0, description="Answer confidence")
    fallback: bool = Field(default=False, description="Answered from templates")
    recorded_at: datetime = Field(default_factory=lambda: datetime.now(UTC))

    model_config = {"frozen": True}


class TurnStore:
    """In-memory, per-session bounded store of turns.

    Each session keeps at most ``max_turns_per_session`` records; older ones
    are dropped first.
    """

    def __init__(self, max_turns_per_session: int = 50, enabled: bool = True) -> None:
        self._max_turns = max_turns_per_session
        self._enabled = enabled
        self._sessions: dict[str, deque[TurnRecord]] = {}
        self._lock = asyncio.Lock()

    @property
    def enabled(self) -> bool:
        return self._enabled

    async def record(
        self,
        session_id: str,
        user_message: str,
        reply: AgentMessage,
        user_id: str = "anonymous",
    ) -> TurnRecord | None:
        """Store one turn.

        Args:
            session_id: Chat session id.
            user_message: The message the user sent.
            reply: The answer returned to the user.
            user_id: Optional user id.

        Returns:
            The stored record, or None when the store is disabled.
        """
        if not self._enabled:
            return None

        record = TurnRecord(
            session_id=session_id,
            user_id=user_id,
            user_message=user_message,
            agent_id=reply.agent_id,
            response=reply.content,
            confidence=reply.confidence,
            fallback=reply.is_fallback,
        )

        async with self._lock:
            turns = self._sessions.get(session_id)
            if turns is None:
                turns = deque(maxlen=self._max_turns)
                self._sessions[session_id] = turns
            turns.append(record)

        logger.debug(
            "Turn recorded",
            session_id=session_id,
            agent_id=reply.agent_id,
        )
        return record

    async def get_session(self, session_id: str) -> list[TurnRecord]:
        """Return the stored turns of a session, oldest first."""
        async with self._lock:
            return list(self._sessions.get(session_id, ()))

    async def clear(self) -> None:
        """Drop every stored session."""
        async with self._lock:
            self._sessions.clear()

    def get_stats(self) -> dict[str, Any]:
        return {
            "enabled": self._enabled,
            "sessions": len(self._sessions),
            "turns": sum(len(turns) for turns in self._sessions.values()),
        }
