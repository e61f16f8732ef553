"""Research Agent - market research and industry analysis."""

from __future__ import annotations

from advisor.agents.base import BaseAgent, is_simple_query
from advisor.models import AgentCapabilities
from advisor.utils.text import contains_any, normalize

RESEARCH_KEYWORDS = (
    "research", "market analysis", "industry analysis", "market sizing",
    "market size", "tam", "sam", "som", "market landscape",
    "industry trends", "industry report", "market report",
)


class ResearchAgent(BaseAgent):
    """Handles complex research requests, not simple queries."""

    capabilities = AgentCapabilities(
        id="research",
        name="Research Analyst",
        description="Market sizing, industry analysis and research reports.",
        specialties=["Market sizing", "Industry analysis", "Technology trends"],
        priority=70,
    )

    system_prompt = """You are {assistant_name}'s research analyst.

Your responsibilities:
1. Size markets (TAM, SAM, SOM) with clear assumptions
2. Analyse industries and technology trends
3. Summarise findings in a structured format

Output Guidelines:
- Start with a one-sentence summary
- Use bullet points for key findings
- State assumptions and note uncertain figures"""

    def can_handle(self, message: str) -> bool:
        text = normalize(message)
        return contains_any(text, RESEARCH_KEYWORDS) and not is_simple_query(text)
