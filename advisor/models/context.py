"""Per-turn conversation context models."""

import uuid
from datetime import UTC, datetime
from enum import Enum
from typing import Any

from pydantic import BaseModel, Field


class TurnRole(str, Enum):
    """Speaker of a conversation turn."""

    USER = "user"
    ASSISTANT = "assistant"


class ConversationTurn(BaseModel):
    """One prior turn of the conversation supplied by the caller."""

    role: TurnRole = Field(..., description="Who spoke")
    content: str = Field(..., description="Turn text")
    timestamp: datetime = Field(
        default_factory=lambda: datetime.now(UTC), description="When it was said"
    )
    agent_id: str | None = Field(
        default=None, description="Agent that produced an assistant turn"
    )

    model_config = {"extra": "forbid"}


class AgentContext(BaseModel):
    """Context for a single incoming message.

    Constructed fresh by the caller for every message. Agents read it but
    never mutate the history.
    """

    session_id: str = Field(
        default_factory=lambda: str(uuid.uuid4()), description="Chat session id"
    )
    user_id: str = Field(default="anonymous", description="User id")
    timestamp: datetime = Field(
        default_factory=lambda: datetime.now(UTC), description="Message time"
    )
    history: list[ConversationTurn] = Field(
        default_factory=list, description="Prior turns, oldest first"
    )
    metadata: dict[str, Any] = Field(
        default_factory=dict,
        description="Open bag (preferred_agent, source, ...)",
    )

    model_config = {"extra": "forbid"}

    @property
    def preferred_agent(self) -> str | None:
        """Agent id the caller asked for, if any."""
        value = self.metadata.get("preferred_agent")
        return value if isinstance(value, str) and value else None

    def recent_history(self, limit: int = 6) -> list[ConversationTurn]:
        """Return the last ``limit`` turns."""
        if limit <= 0:
            return []
        return self.history[-limit:]
