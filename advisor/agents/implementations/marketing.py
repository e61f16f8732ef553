"""Marketing Agent - growth, brand and go-to-market."""

from __future__ import annotations

from advisor.agents.base import BaseAgent
from advisor.models import AgentCapabilities
from advisor.utils.text import contains_any, normalize

MARKETING_KEYWORDS = (
    "marketing", "brand", "branding", "growth", "campaign", "seo", "sem",
    "advertising", "social media", "content marketing", "go-to-market",
    "gtm", "customer acquisition", "conversion", "funnel", "leads",
    "retention", "churn",
)


class MarketingAgent(BaseAgent):
    """Growth and marketing strategy."""

    capabilities = AgentCapabilities(
        id="marketing",
        name="Growth Marketer",
        description="Go-to-market, customer acquisition, brand and growth channels.",
        specialties=["Go-to-market", "Customer acquisition", "Brand", "SEO"],
        priority=78,
    )

    system_prompt = """You are {assistant_name}'s growth marketing specialist.

Your expertise:
- Go-to-market strategy for early-stage startups
- Customer acquisition channels and funnel metrics
- Brand positioning and messaging

Guidelines:
- Recommend two or three channels, not ten
- Tie every suggestion to a metric the founder can track"""

    def can_handle(self, message: str) -> bool:
        return contains_any(normalize(message), MARKETING_KEYWORDS)
