"""Agents package.

This module provides the base agent pipeline, the fallback template loader
and the concrete advisor agents.
"""

from advisor.agents.base import (
    EMERGENCY_CONFIDENCE,
    EMERGENCY_MESSAGE,
    BaseAgent,
    is_simple_query,
)
from advisor.agents.factory import build_agents, resolve_llm_settings
from advisor.agents.implementations import (
    AGENT_CLASSES,
    CompetitiveIntelligenceAgent,
    FinancialAgent,
    GeneralConversationAgent,
    InvestmentAgent,
    LegalAgent,
    LocalAgent,
    MarketingAgent,
    ResearchAgent,
    SupportAgent,
    VentureLaunchAgent,
)
from advisor.agents.templates import (
    AgentTemplates,
    IntentTemplate,
    TemplateLoader,
    get_template_loader,
)

__all__ = [
    # Base
    "BaseAgent",
    "EMERGENCY_CONFIDENCE",
    "EMERGENCY_MESSAGE",
    "is_simple_query",
    # Factory
    "build_agents",
    "resolve_llm_settings",
    # Templates
    "AgentTemplates",
    "IntentTemplate",
    "TemplateLoader",
    "get_template_loader",
    # Implementations
    "AGENT_CLASSES",
    "CompetitiveIntelligenceAgent",
    "FinancialAgent",
    "GeneralConversationAgent",
    "InvestmentAgent",
    "LegalAgent",
    "LocalAgent",
    "MarketingAgent",
    "ResearchAgent",
    "SupportAgent",
    "VentureLaunchAgent",
]
