"""Agent descriptor models.

This module defines the static capability descriptor each agent owns and the
LLM preferences injected into it at construction.
"""

from typing import Any

from pydantic import BaseModel, Field


class AgentCapabilities(BaseModel):
    """Static descriptor owned by each agent.

    The routing predicate itself is the owning agent's ``can_handle`` method;
    this model carries the data the router and the API expose.
    """

    id: str = Field(..., description="Unique agent identifier")
    name: str = Field(..., description="Display name")
    description: str = Field(default="", description="What the agent covers")
    specialties: list[str] = Field(
        default_factory=list, description="Specialty tags"
    )
    tools: list[str] = Field(
        default_factory=list, description="Tool ids the agent may invoke"
    )
    priority: int = Field(
        default=50, description="Higher wins when several agents match"
    )

    model_config = {"extra": "forbid", "frozen": True}


class LLMSettings(BaseModel):
    """Resolved LLM preferences for one agent."""

    enabled: bool = Field(default=True, description="Try the LLM before templates")
    preferred_provider: str | None = Field(
        default=None, description="Provider id tried first"
    )
    preferred_model: str | None = Field(default=None, description="Model tried first")
    max_tokens: int = Field(default=1000, ge=1, description="Max response tokens")
    temperature: float = Field(
        default=0.7, ge=0.0, le=2.0, description="Sampling temperature"
    )

    model_config = {"extra": "forbid"}


class AgentInfo(BaseModel):
    """Runtime view of a registered agent for listings."""

    id: str = Field(..., description="Agent identifier")
    name: str = Field(..., description="Display name")
    description: str = Field(default="", description="Agent description")
    specialties: list[str] = Field(default_factory=list)
    tools: list[str] = Field(default_factory=list)
    priority: int = Field(..., description="Routing priority")
    is_default: bool = Field(default=False, description="Catch-all agent")
    llm: dict[str, Any] = Field(default_factory=dict, description="LLM settings")

    @classmethod
    def from_capabilities(
        cls,
        capabilities: AgentCapabilities,
        llm: LLMSettings,
        is_default: bool = False,
    ) -> "AgentInfo":
        """Build an AgentInfo from an agent's descriptor and LLM settings."""
        return cls(
            id=capabilities.id,
            name=capabilities.name,
            description=capabilities.description,
            specialties=list(capabilities.specialties),
            tools=list(capabilities.tools),
            priority=capabilities.priority,
            is_default=is_default,
            llm=llm.model_dump(),
        )
