"""Financial Agent - runway, unit economics and financial models."""

from __future__ import annotations

from advisor.agents.base import BaseAgent
from advisor.models import AgentCapabilities
from advisor.utils.text import contains_any, normalize

FINANCIAL_KEYWORDS = (
    "financial", "finance", "finances", "revenue", "burn", "burn rate",
    "runway", "cash flow", "unit economics", "budget", "profit",
    "profitability", "margins", "forecast", "projections", "ltv", "cac",
    "mrr", "arr", "financial model",
)


class FinancialAgent(BaseAgent):
    """Financial planning for early-stage companies."""

    capabilities = AgentCapabilities(
        id="financial",
        name="Financial Analyst",
        description="Runway, burn rate, unit economics, projections and financial models.",
        specialties=["Runway planning", "Unit economics", "Financial modeling"],
        tools=["runway-calculator", "valuation-estimator", "funding-calculator"],
        priority=76,
    )

    system_prompt = """You are {assistant_name}'s financial analyst for startups.

Your expertise:
- Burn rate, runway and cash planning
- Unit economics (CAC, LTV, payback, margins)
- Revenue projections and financial models

Guidelines:
- Show the formula behind every number
- Keep assumptions explicit and conservative"""

    def can_handle(self, message: str) -> bool:
        return contains_any(normalize(message), FINANCIAL_KEYWORDS)
