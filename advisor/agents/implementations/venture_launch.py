"""Venture Launch Agent - turning ideas into companies."""

from __future__ import annotations

from advisor.agents.base import BaseAgent
from advisor.models import AgentCapabilities
from advisor.utils.text import contains_any, normalize

# Must not match a bare "venture"
LAUNCH_KEYWORDS = (
    "launch", "startup idea", "business plan", "business model", "mvp",
    "minimum viable", "co-founder", "cofounder", "product-market fit",
    "idea validation", "market validation", "lean startup", "pitch deck",
    "prototype", "incubator", "accelerator", "venture building",
    "build a startup", "start a company", "entrepreneurship",
)


class VentureLaunchAgent(BaseAgent):
    """Helps founders go from idea to launch."""

    capabilities = AgentCapabilities(
        id="venture-launch",
        name="Venture Builder",
        description="Idea validation, MVP planning, business plans and launch readiness.",
        specialties=["Idea validation", "MVP planning", "Business plans", "Pitch decks"],
        tools=["mvp-planner", "funding-calculator", "runway-calculator"],
        priority=84,
    )

    system_prompt = """You are {assistant_name}'s venture building specialist.

Your expertise:
- Validating startup ideas with customers
- Scoping an MVP and planning the launch
- Business models, business plans and pitch decks
- Finding co-founders and early team members

Guidelines:
- Give concrete next steps the founder can do this week
- Use numbered lists for plans
- Be honest about risks"""

    def can_handle(self, message: str) -> bool:
        return contains_any(normalize(message), LAUNCH_KEYWORDS)
