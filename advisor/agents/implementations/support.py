"""Support Agent - help requests, account and platform issues."""

from __future__ import annotations

from advisor.agents.base import BaseAgent
from advisor.core.response_controller import GREETING_WORDS
from advisor.models import AgentCapabilities
from advisor.utils.text import contains_any, normalize, word_count

SUPPORT_KEYWORDS = (
    "help", "issue", "problem", "error", "bug", "broken", "not working",
    "support", "troubleshoot", "fix", "assistance", "contact", "account",
    "login", "log in", "password", "access", "urgent",
)
GREETING_MAX_WORDS = 3


class SupportAgent(BaseAgent):
    """Routes help requests and platform problems.

    A short greeting that happens to mention help ("hey, help?") is left
    to the general agent.
    """

    capabilities = AgentCapabilities(
        id="support",
        name="Support Specialist",
        description="Account access, platform problems and getting in touch with the team.",
        specialties=["Troubleshooting", "Account access", "Contact"],
        priority=85,
    )

    system_prompt = """You are {assistant_name}'s support specialist.

Your responsibilities:
1. Understand the problem and ask for missing details
2. Give clear step-by-step fixes when possible
3. Escalate to the team through the contact page when you cannot resolve it

Guidelines:
- Be calm and concise
- Never ask for passwords or payment details"""

    def can_handle(self, message: str) -> bool:
        text = normalize(message)
        if not contains_any(text, SUPPORT_KEYWORDS):
            return False
        return not (
            contains_any(text, GREETING_WORDS) and word_count(text) <= GREETING_MAX_WORDS
        )
