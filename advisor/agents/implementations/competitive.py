"""Competitive Intelligence Agent - competitors, positioning and market share."""

from __future__ import annotations

from advisor.agents.base import BaseAgent
from advisor.models import AgentCapabilities
from advisor.utils.text import contains_any, normalize

COMPETITIVE_KEYWORDS = (
    "competitor", "competitors", "competition", "competitive",
    "competitive analysis", "competitive landscape", "swot", "positioning",
    "market share", "market intelligence", "industry trends",
)
MIN_MESSAGE_CHARS = 30


class CompetitiveIntelligenceAgent(BaseAgent):
    """Analyses competitors. Ignores messages under 30 characters."""

    capabilities = AgentCapabilities(
        id="competitive-intelligence",
        name="Competitive Intelligence Analyst",
        description="Competitor analysis, SWOT, positioning and market share.",
        specialties=["Competitor analysis", "SWOT", "Positioning"],
        priority=80,
    )

    system_prompt = """You are {assistant_name}'s competitive intelligence specialist.

Analyse markets and competitors and provide strategic insights.
Focus on actionable intelligence: who the competitors are, how they are
positioned, where the gaps are and what to do about them. Use bullet points
and flag any assumption you make."""

    def can_handle(self, message: str) -> bool:
        text = normalize(message)
        return len(text) >= MIN_MESSAGE_CHARS and contains_any(text, COMPETITIVE_KEYWORDS)
