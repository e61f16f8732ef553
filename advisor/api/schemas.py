"""API schema definitions.

Request/response schemas used by the FastAPI endpoints.
"""

from datetime import datetime
from typing import Any

from pydantic import BaseModel, Field

from advisor.models import AgentContext, AgentMessage, Attachment, ConversationTurn, QuickAction

# =============================================================================
# Common Schemas
# =============================================================================


class APIResponse(BaseModel):
    """Standard API response envelope."""

    success: bool = Field(..., description="Whether the request succeeded")
    data: Any = Field(default=None, description="Response payload")
    error: str | None = Field(default=None, description="Error message")
    metadata: dict[str, Any] = Field(
        default_factory=dict, description="Additional metadata"
    )


# =============================================================================
# Chat Schemas
# =============================================================================


class ChatRequest(BaseModel):
    """One incoming chat turn."""

    message: str = Field(..., description="The user message")
    session_id: str | None = Field(default=None, description="Chat session id")
    user_id: str | None = Field(default=None, description="User id")
    history: list[ConversationTurn] = Field(
        default_factory=list, description="Prior turns, oldest first"
    )
    preferred_agent: str | None = Field(
        default=None, description="Agent id to use instead of routing"
    )
    metadata: dict[str, Any] = Field(default_factory=dict)

    model_config = {"extra": "forbid"}

    def to_context(self) -> AgentContext:
        """Build the per-message AgentContext."""
        metadata = dict(self.metadata)
        if self.preferred_agent:
            metadata["preferred_agent"] = self.preferred_agent
        values: dict[str, Any] = {"history": self.history, "metadata": metadata}
        if self.session_id:
            values["session_id"] = self.session_id
        if self.user_id:
            values["user_id"] = self.user_id
        return AgentContext(**values)


class ChatResponse(BaseModel):
    """The answer to one chat turn."""

    id: str = Field(..., description="Message id")
    agent_id: str = Field(..., description="Agent that answered")
    content: str = Field(..., description="Answer text")
    attachments: list[Attachment] = Field(default_factory=list)
    quick_actions: list[QuickAction] = Field(default_factory=list)
    confidence: float = Field(..., description="Answer confidence")
    fallback: bool = Field(default=False, description="Answered without the LLM")
    timestamp: datetime = Field(..., description="Answer time")
    metadata: dict[str, Any] = Field(default_factory=dict)

    @classmethod
    def from_message(cls, message: AgentMessage) -> "ChatResponse":
        return cls(
            id=message.id,
            agent_id=message.agent_id,
            content=message.content,
            attachments=list(message.attachments),
            quick_actions=list(message.quick_actions),
            confidence=message.confidence,
            fallback=message.is_fallback,
            timestamp=message.timestamp,
            metadata=dict(message.metadata),
        )


# =============================================================================
# System Schemas
# =============================================================================


class HealthResponse(BaseModel):
    """System health summary."""

    status: str = Field(..., description="healthy or degraded")
    version: str = Field(..., description="Application version")
    agents_registered: int = Field(..., description="Number of registered agents")
    providers_registered: int = Field(..., description="Number of registered providers")
    providers_available: int = Field(..., description="Providers that passed their last check")
