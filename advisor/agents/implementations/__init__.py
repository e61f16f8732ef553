"""Agent implementations module.

This module contains the advisor's agents, listed here in routing priority:
- SupportAgent (85): help requests and platform issues
- VentureLaunchAgent (84): idea validation, MVP and launch
- CompetitiveIntelligenceAgent (80): competitors and positioning
- MarketingAgent (78): growth and go-to-market
- LegalAgent (77): legal basics for founders
- FinancialAgent (76): runway, unit economics, models
- InvestmentAgent (75): investment criteria and funding
- LocalAgent (74): market entry, permits and regional practice
- ResearchAgent (70): market research and industry analysis
- GeneralConversationAgent (0): catch-all default
"""

from advisor.agents.implementations.competitive import CompetitiveIntelligenceAgent
from advisor.agents.implementations.financial import FinancialAgent
from advisor.agents.implementations.general import GeneralConversationAgent
from advisor.agents.implementations.investment import InvestmentAgent
from advisor.agents.implementations.legal import LegalAgent
from advisor.agents.implementations.local import LocalAgent
from advisor.agents.implementations.marketing import MarketingAgent
from advisor.agents.implementations.research import ResearchAgent
from advisor.agents.implementations.support import SupportAgent
from advisor.agents.implementations.venture_launch import VentureLaunchAgent

AGENT_CLASSES = (
    SupportAgent,
    VentureLaunchAgent,
    CompetitiveIntelligenceAgent,
    MarketingAgent,
    LegalAgent,
    FinancialAgent,
    InvestmentAgent,
    LocalAgent,
    ResearchAgent,
    GeneralConversationAgent,
)

__all__ = [
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
