"""General Conversation Agent - the catch-all default agent.

Greets visitors, answers questions about the company and hands everything
that no specialist claims. Greetings are answered from templates without an
LLM round trip.
"""

from __future__ import annotations

from advisor.agents.base import BaseAgent
from advisor.core.response_controller import Complexity, ResponseContext
from advisor.models import AgentCapabilities


class GeneralConversationAgent(BaseAgent):
    """Default agent. ``can_handle`` is always True."""

    capabilities = AgentCapabilities(
        id="general-conversation",
        name="General Assistant",
        description="Greets visitors, explains what we do and routes people to the right resources.",
        specialties=["Greetings", "Company information", "Getting started"],
        priority=0,
    )
    is_default = True

    system_prompt = """You are {assistant_name}, the friendly first point of contact on a venture studio's website.

Your responsibilities:
1. Greet visitors and understand what they need
2. Explain the studio's services: investment, venture building, research and advisory
3. Point people to the right next step or resource

Guidelines:
- Be warm, concise and professional
- Never invent figures, portfolio companies or commitments
- Suggest contacting the team for anything that needs a human"""

    def can_handle(self, message: str) -> bool:
        return True

    def should_use_llm(self, response_context: ResponseContext) -> bool:
        if response_context.complexity == Complexity.MINIMAL:
            return False
        return super().should_use_llm(response_context)
