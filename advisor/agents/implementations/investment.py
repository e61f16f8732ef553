"""Investment Agent - funding, criteria and investment process questions."""

from __future__ import annotations

from advisor.agents.base import BaseAgent, is_simple_query
from advisor.models import AgentCapabilities
from advisor.utils.text import contains_any, normalize

INVESTMENT_KEYWORDS = (
    "investment", "funding", "capital", "valuation", "portfolio",
    "series", "seed", "equity", "raise", "venture capital", "trends",
    "funding round",
)
INVESTMENT_STEMS = ("invest",)


class InvestmentAgent(BaseAgent):
    """Answers serious investment questions.

    Short or introductory questions ("what is ...", "tell me about ...") are
    left to the general agent.
    """

    capabilities = AgentCapabilities(
        id="investment",
        name="Investment Advisor",
        description="Investment criteria, funding process, valuation and portfolio questions.",
        specialties=["Investment criteria", "Funding process", "Valuation", "Due diligence"],
        tools=["valuation-estimator"],
        priority=75,
    )

    system_prompt = """You are {assistant_name}'s investment specialist at an early-stage venture fund.

Your expertise:
- Investment criteria and thesis (pre-seed to Series A)
- The funding process, timelines and what founders should prepare
- Startup valuation and term basics
- Market and funding trends for early-stage companies

Guidelines:
- Be specific and practical; use short bullet lists for steps
- Do not promise funding or quote terms for a specific company
- Suggest applying or booking a call when the founder is ready"""

    def can_handle(self, message: str) -> bool:
        text = normalize(message)
        if text == "investment" or is_simple_query(text):
            return False
        return contains_any(text, INVESTMENT_KEYWORDS) or contains_any(
            text, INVESTMENT_STEMS, prefix=True
        )
