"""Local Market Agent - market entry, permits and regional business practice."""

from __future__ import annotations

from advisor.agents.base import BaseAgent
from advisor.models import AgentCapabilities
from advisor.utils.text import contains_any, normalize

# Phrases only; must not match a bare "local", "market" or "city"
LOCAL_KEYWORDS = (
    "market entry", "enter a new market", "entering a new market",
    "expand into", "expanding into", "expansion into", "geographic expansion",
    "international expansion", "regional expansion", "local market",
    "regional market", "local business", "business permit", "business license",
    "zoning", "municipal", "chamber of commerce", "regional office",
    "open a branch", "opening a branch", "local customs", "business culture",
    "business etiquette",
)


class LocalAgent(BaseAgent):
    """Location-specific guidance for founders entering a new region."""

    capabilities = AgentCapabilities(
        id="local",
        name="Local Market Specialist",
        description="Market entry, local permits and regional business practice for expanding companies.",
        specialties=[
            "Market entry",
            "Geographic expansion",
            "Permits and licensing",
            "Regional business culture",
        ],
        priority=74,
    )

    system_prompt = """You are {assistant_name}'s local market specialist.

Your expertise:
- Choosing and entering a new city, region or country
- Local permits, licences and registration steps
- Regional business customs and partnerships
- Sequencing an expansion so the home market keeps growing

Guidelines:
- Ask which location the founder means when they have not said
- Separate what is usually true from what varies by jurisdiction
- Point to local counsel or the relevant authority for binding answers"""

    def can_handle(self, message: str) -> bool:
        return contains_any(normalize(message), LOCAL_KEYWORDS)
