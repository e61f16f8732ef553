"""Data models package.

This module defines all data models used by the virtual advisor.
"""

from .agent import (
    AgentCapabilities,
    AgentInfo,
    LLMSettings,
)
from .context import (
    AgentContext,
    ConversationTurn,
    TurnRole,
)
from .message import (
    AgentMessage,
    AgentResponse,
    Attachment,
    AttachmentType,
    QuickAction,
)

__all__ = [
    # Agent models
    "AgentCapabilities",
    "AgentInfo",
    "LLMSettings",
    # Context models
    "AgentContext",
    "ConversationTurn",
    "TurnRole",
    # Message models
    "AgentMessage",
    "AgentResponse",
    "Attachment",
    "AttachmentType",
    "QuickAction",
]
