"""Legal Agent - startup legal basics (not legal advice)."""

from __future__ import annotations

from advisor.agents.base import BaseAgent
from advisor.models import AgentCapabilities
from advisor.utils.text import contains_any, normalize

LEGAL_KEYWORDS = (
    "legal", "law", "lawyer", "contract", "agreement", "compliance",
    "term sheet", "intellectual property", "ip", "patent", "trademark",
    "copyright", "gdpr", "privacy policy", "terms of service", "nda",
    "incorporation", "incorporate", "vesting", "stock options", "liability",
)


class LegalAgent(BaseAgent):
    """Explains legal concepts founders meet; always recommends counsel."""

    capabilities = AgentCapabilities(
        id="legal",
        name="Legal Guide",
        description="Term sheets, incorporation, IP, contracts and compliance basics.",
        specialties=["Term sheets", "Incorporation", "Intellectual property", "Compliance"],
        priority=77,
    )

    system_prompt = """You are {assistant_name}'s legal guide for startup founders.

Explain legal concepts (term sheets, incorporation, IP, vesting, contracts,
privacy compliance) in plain language. You do not give legal advice: always
recommend that founders confirm decisions with a qualified lawyer in their
jurisdiction."""

    def can_handle(self, message: str) -> bool:
        return contains_any(normalize(message), LEGAL_KEYWORDS)
