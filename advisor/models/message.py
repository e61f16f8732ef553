"""Response models produced by agents.

AgentResponse is the raw output of an agent before shaping; AgentMessage is
the immutable, caller-facing result returned by the orchestrator.
"""

import uuid
from datetime import UTC, datetime
from enum import Enum
from typing import Any

from pydantic import BaseModel, Field, PrivateAttr


class AttachmentType(str, Enum):
    """Fixed attachment vocabulary understood by the chat UI."""

    LINK = "link"
    DOCUMENT = "document"
    CHECKLIST = "checklist"
    CALCULATOR = "calculator"
    RESOURCE = "resource"


class Attachment(BaseModel):
    """Structured pointer bundled with an answer."""

    type: AttachmentType = Field(..., description="Attachment kind")
    title: str = Field(..., description="Display title")
    url: str | None = Field(default=None, description="Target URL")
    description: str | None = Field(default=None, description="Short description")
    items: list[str] = Field(
        default_factory=list, description="Checklist or resource items"
    )

    model_config = {"extra": "forbid", "frozen": True}


class QuickAction(BaseModel):
    """Suggested follow-up chip."""

    label: str = Field(..., description="Chip text")
    action: str = Field(..., description="Action id sent back by the UI")
    icon: str | None = Field(default=None, description="Optional icon reference")

    model_config = {"extra": "forbid", "frozen": True}


class AgentResponse(BaseModel):
    """Raw agent output before the response controller shapes it."""

    content: str = Field(..., description="Answer text")
    confidence: float = Field(..., ge=0.0, le=1.0, description="Confidence score")
    attachments: list[Attachment] = Field(default_factory=list)
    quick_actions: list[QuickAction] = Field(default_factory=list)
    fallback: bool = Field(default=False, description="Produced without the LLM")
    intent: str | None = Field(default=None, description="Matched template intent")
    tools_used: list[str] = Field(default_factory=list)
    model: str | None = Field(default=None, description="Model that answered")
    provider: str | None = Field(default=None, description="Provider that answered")


class AgentMessage(BaseModel):
    """Finalized answer for one incoming user message.

    Frozen: once the orchestrator returns it, it cannot be altered.
    ``confidence`` and ``is_fallback`` are read from metadata at construction,
    so later edits to the metadata mapping do not change them.
    """

    id: str = Field(
        default_factory=lambda: str(uuid.uuid4()), description="Message id"
    )
    agent_id: str = Field(..., description="Agent that resolved the message")
    content: str = Field(..., description="Final answer text")
    attachments: tuple[Attachment, ...] = Field(default=())
    quick_actions: tuple[QuickAction, ...] = Field(default=())
    timestamp: datetime = Field(default_factory=lambda: datetime.now(UTC))
    metadata: dict[str, Any] = Field(
        default_factory=dict,
        description="confidence, message_type, complexity, fallback, error",
    )

    model_config = {"frozen": True}

    _confidence: float = PrivateAttr(default=0.0)
    _fallback: bool = PrivateAttr(default=False)

    def model_post_init(self, __context: Any) -> None:
        self._confidence = float(self.metadata.get("confidence", 0.0))
        self._fallback = bool(self.metadata.get("fallback", False))

    @property
    def confidence(self) -> float:
        """Confidence recorded in metadata."""
        return self._confidence

    @property
    def is_fallback(self) -> bool:
        """True when the answer came from templates instead of the LLM."""
        return self._fallback
